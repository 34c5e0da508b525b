"""CLI command modules."""

import typer

from gradlebox.cli.commands.config import register_commands as register_config_commands
from gradlebox.cli.commands.deps import register_commands as register_deps_commands
from gradlebox.cli.commands.resolve import (
    register_commands as register_resolve_commands,
)
from gradlebox.cli.commands.validate import (
    register_commands as register_validate_commands,
)


def register_all_commands(app: typer.Typer) -> None:
    """Register all CLI commands with the main app.

    Args:
        app: The main Typer app
    """
    registered = {command.name for command in app.registered_commands}
    if "resolve" in registered:
        return
    register_resolve_commands(app)
    register_validate_commands(app)
    register_deps_commands(app)
    register_config_commands(app)
