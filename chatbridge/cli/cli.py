"""Main CLI entry point for Chatbridge.

All arguments are passed through untouched: connector selection, provider
flags and ``--help``/``-h`` are interpreted by the settings core, not by click.
"""

import asyncio
import os
import sys
from typing import List, Mapping, Optional, Sequence

import click
from rich.console import Console
from rich.markup import escape

from chatbridge.cli.help import print_help
from chatbridge.core.arguments import parse_app_settings
from chatbridge.core.config import load_config_source
from chatbridge.core.connectors import EndpointDiscovery, create_chat_client
from chatbridge.core.errors import ConnectorConfigurationError, ConnectorConstructionError
from chatbridge.core.validation import ValidatedSettings, validate_app_settings
from chatbridge.utils.log import get_logger, init_logger


console = Console()
logger = get_logger()

EXIT_OK = 0
EXIT_CONSTRUCTION_ERROR = 1
EXIT_CONFIGURATION_ERROR = 2
EXIT_INTERRUPTED = 130

RAW_ARGS_KEY = "chatbridge.raw_args"


async def _connect(
    validated: ValidatedSettings,
    discovery: Optional[EndpointDiscovery],
) -> None:
    handle = await create_chat_client(validated, discovery=discovery)
    try:
        console.print(
            f"The {handle.connector_type.value} connector created with model: {escape(handle.model)}"
        )
    finally:
        await handle.aclose()


def run(
    args: Sequence[str],
    *,
    config: Optional[Mapping[str, str]] = None,
    env: Optional[Mapping[str, str]] = None,
    discovery: Optional[EndpointDiscovery] = None,
) -> int:
    """Resolve settings, validate them and construct the client; return an exit code."""
    env = os.environ if env is None else env
    if config is None:
        config = load_config_source(env=env)

    app_settings = parse_app_settings(config, args, env)
    if app_settings.help:
        logger.debug(
            "[cli] Help mode",
            extra={"connector_type": app_settings.connector_type.value},
        )
        print_help(console)
        return EXIT_OK

    try:
        validated = validate_app_settings(app_settings)
    except ConnectorConfigurationError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        logger.warning(
            "[cli] Invalid configuration: %s",
            e,
            extra={"connector_type": app_settings.connector_type.value, "error_code": e.error_code},
        )
        return EXIT_CONFIGURATION_ERROR

    try:
        asyncio.run(_connect(validated, discovery))
    except ConnectorConstructionError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        return EXIT_CONSTRUCTION_ERROR
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        return EXIT_INTERRUPTED
    return EXIT_OK


class RawArgsCommand(click.Command):
    """Command that records its arguments before click parses them.

    Click drops the first ``--`` while parsing; the settings core has to see
    every token exactly as given.
    """

    def parse_args(self, ctx: click.Context, args: List[str]) -> List[str]:
        ctx.meta[RAW_ARGS_KEY] = tuple(args)
        return super().parse_args(ctx, args)


@click.command(
    cls=RawArgsCommand,
    context_settings={"ignore_unknown_options": True, "allow_extra_args": True},
    add_help_option=False,
)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def cli(ctx: click.Context, args: tuple) -> None:
    """Chatbridge - select a chat connector and create its client"""
    raw_args = list(ctx.meta.get(RAW_ARGS_KEY, args))
    init_logger()
    logger.info("[cli] Starting CLI invocation", extra={"arg_count": len(raw_args)})
    ctx.exit(run(raw_args))


def main() -> None:
    """Main entry point."""
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        sys.exit(EXIT_INTERRUPTED)
    except SystemExit:
        raise
    except (RuntimeError, ValueError, TypeError, OSError, click.ClickException) as e:
        console.print(f"[red]Fatal error: {escape(str(e))}[/red]")
        logger.warning(
            "[cli] Fatal error in main CLI entrypoint: %s: %s",
            type(e).__name__,
            e,
        )
        sys.exit(1)


if __name__ == "__main__":
    main()
