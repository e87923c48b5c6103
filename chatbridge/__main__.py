"""Allow ``python -m chatbridge``."""

from chatbridge.cli.cli import main

if __name__ == "__main__":
    main()
