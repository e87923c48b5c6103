"""
Chatbridge - provider selection and chat client construction.

Resolves which chat connector is active from configuration, environment and
command-line arguments, validates the merged provider settings and builds a
ready-to-use client for exactly one provider per process.

Quick Start:
    pip install -e .
    chatbridge --connector-type OpenAI --api-key sk-...
"""

__version__ = "0.3.0"

__all__ = ["__version__"]
