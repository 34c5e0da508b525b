"""Configuration CLI commands."""

from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from gradlebox.cli.decorators import handle_errors
from gradlebox.cli.helpers.output import render_document
from gradlebox.config.models import UserConfigData


config_app = typer.Typer(
    name="config",
    help="Configuration management commands",
    no_args_is_help=True,
)


@config_app.command(name="show")
@handle_errors
def show_config(
    ctx: typer.Context,
    output_format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: table, json or yaml"),
    ] = "table",
) -> None:
    """Show the effective configuration and where each value comes from."""
    user_config = ctx.obj.user_config
    data = user_config.data.model_dump(mode="json")

    if output_format in ("json", "yaml"):
        render_document(data, output_format)
        return

    table = Table(title="Gradlebox Configuration", show_header=True)
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_column("Source", style="dim")

    for key in UserConfigData.model_fields:
        value = data[key]
        if isinstance(value, dict):
            shown = "\n".join(f"{k} = {v}" for k, v in value.items())
        elif isinstance(value, list):
            shown = ", ".join(str(item) for item in value) or "-"
        else:
            shown = str(value)
        table.add_row(key, escape(shown), user_config.get_source(key))

    if user_config.config_path is not None:
        table.caption = f"Loaded from {user_config.config_path}"
    Console(highlight=False, emoji=False).print(table)


def register_commands(app: typer.Typer) -> None:
    """Register config commands with the main app.

    Args:
        app: The main Typer app
    """
    app.add_typer(config_app, name="config")
