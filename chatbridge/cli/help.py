"""Usage text rendered from the provider registry."""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from chatbridge import __version__
from chatbridge.core.registry import (
    CONNECTOR_TYPE_FLAGS,
    HELP_FLAGS,
    FieldSpec,
    ProviderSpec,
    iter_provider_specs,
)


def print_banner(console: Console) -> None:
    console.print(f"[bold cyan]Chatbridge[/bold cyan] [dim]v{__version__}[/dim]")
    console.print("[dim]Select one chat connector and create its client.[/dim]\n")


def _describe(provider: ProviderSpec, spec: FieldSpec) -> str:
    parts = [escape(spec.description)]
    default = provider.default_for(spec)
    if spec.is_switch:
        parts.append("[dim]Switch, takes no value.[/dim]")
    elif default is not None:
        parts.append(f"[dim]Default to '{escape(str(default))}'.[/dim]")
    env_names = ", ".join(provider.env_candidates(spec))
    parts.append(f"[dim]Env: {escape(env_names)}[/dim]")
    return " ".join(parts)


def _provider_table(provider: ProviderSpec) -> Table:
    table = Table.grid(padding=(0, 2))
    table.add_column(style="green", no_wrap=True)
    table.add_column()
    for spec in provider.fields:
        table.add_row(f"  {spec.flag}", _describe(provider, spec))
    return table


def print_help(console: Optional[Console] = None) -> None:
    """Print per-provider flag documentation followed by the global flags."""
    console = console or Console()
    print_banner(console)
    usage = f"chatbridge {'|'.join(CONNECTOR_TYPE_FLAGS)} <CONNECTOR_TYPE> [OPTIONS]"
    console.print(f"[bold]Usage:[/bold] {escape(usage)}\n")
    for provider in iter_provider_specs():
        console.print(
            f"  [magenta]** {escape(provider.display_name)}: **[/magenta] "
            f"[dim]({provider.connector_type.value})[/dim]"
        )
        console.print(_provider_table(provider))
        for note in provider.notes:
            console.print(f"  [dim]{escape(note)}[/dim]")
        console.print()

    globals_table = Table.grid(padding=(0, 2))
    globals_table.add_column(style="green", no_wrap=True)
    globals_table.add_column()
    globals_table.add_row(
        f"  {'|'.join(CONNECTOR_TYPE_FLAGS)}",
        "The connector type to use. Overrides the ConnectorType configuration value.",
    )
    globals_table.add_row(f"  {'|'.join(HELP_FLAGS)}", "Show this help message.")
    console.print(globals_table)
