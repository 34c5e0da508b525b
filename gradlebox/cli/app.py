"""Main CLI application for Gradlebox."""

import logging
import sys
from typing import Annotated

import typer

from gradlebox import __version__
from gradlebox.cli.decorators.error_handling import print_stack_trace_if_verbose
from gradlebox.core.logging import setup_logging


__all__ = ["app", "main", "__version__", "setup_logging"]

logger = logging.getLogger(__name__)


# Context object for sharing state
class AppContext:
    """Application context for storing shared state."""

    def __init__(
        self,
        verbose: int = 0,
        log_file: str | None = None,
        config_file: str | None = None,
    ):
        """Initialize AppContext.

        Args:
            verbose: Verbosity level
            log_file: Path to log file
            config_file: Path to configuration file
        """
        self.verbose = verbose
        self.log_file = log_file
        self.config_file = config_file

        # Initialize user config with CLI-provided config file
        from gradlebox.config.user_config import create_user_config

        self.user_config = create_user_config(cli_config_path=config_file)


# Main app
app = typer.Typer(
    name="gradlebox",
    help=f"""Gradlebox Android build variant resolver v{__version__}

Resolves the build types declared in an Android/Flutter module descriptor
into fully specified variants:

  Descriptor (.yaml/.json/.kts) -> Layered merge -> Validation -> Variants

Common workflows:
  - Resolve all variants:   gradlebox resolve android/app/build.gradle.kts
  - Check a descriptor:     gradlebox validate app.yaml
  - Inspect dependencies:   gradlebox deps app.yaml""",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


# Global callback
@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "-v",
            "--verbose",
            count=True,
            help="Increase verbosity (-v=INFO, -vv=DEBUG)",
        ),
    ] = 0,
    debug: Annotated[
        bool,
        typer.Option("--debug", help="Enable debug logging (equivalent to -vv)"),
    ] = False,
    log_file: Annotated[
        str | None, typer.Option("--log-file", help="Log to file")
    ] = None,
    config_file: Annotated[
        str | None,
        typer.Option("-c", "--config", help="Path to configuration file"),
    ] = None,
    version: Annotated[
        bool, typer.Option("--version", help="Show version and exit")
    ] = False,
) -> None:
    """Gradlebox Android build variant resolver."""
    if version:
        print(f"Gradlebox v{__version__}")
        raise typer.Exit()

    # If no subcommand was invoked and version wasn't requested, show help
    if ctx.invoked_subcommand is None:
        print(ctx.get_help())
        raise typer.Exit()

    from gradlebox.core.errors import ConfigError

    try:
        app_context = AppContext(
            verbose=verbose, log_file=log_file, config_file=config_file
        )
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        raise typer.Exit(1) from e
    ctx.obj = app_context

    # Set log level based on verbosity, debug flag, or config
    log_level = logging.WARNING
    if debug:
        log_level = logging.DEBUG
    elif verbose == 1:
        log_level = logging.INFO
    elif verbose >= 2:
        log_level = logging.DEBUG
    elif not verbose and log_file is None:
        # If no explicit CLI flags are set, use the config file log level
        log_level = app_context.user_config.get_log_level_int()

    setup_logging(level=log_level, log_file=log_file)


def main() -> int:
    """Main CLI entry point."""
    try:
        from gradlebox.cli.commands import register_all_commands

        register_all_commands(app)

        app()
        return 0

    except SystemExit as e:
        # Capture SystemExit code (normal CLI exit)
        return e.code if isinstance(e.code, int) else 0

    except Exception as e:
        logger.exception("Unexpected error: %s", e)

        # Check if we should print stack trace (verbosity level)
        print_stack_trace_if_verbose()

        return 1


if __name__ == "__main__":
    sys.exit(main())
