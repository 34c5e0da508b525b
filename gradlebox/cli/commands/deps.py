"""Deps command: show where each dependency ends up."""

import typer

from gradlebox.cli.commands.resolve import (
    DescriptorArgument,
    FormatOption,
    SdkDefaultOption,
    check_format,
    resolve_file,
)
from gradlebox.cli.decorators import handle_errors
from gradlebox.cli.helpers.output import print_dependency_graph, print_error_message


@handle_errors
def deps(
    ctx: typer.Context,
    descriptor_file: DescriptorArgument,
    output_format: FormatOption = "table",
    sdk_default: SdkDefaultOption = None,
) -> None:
    """Show the dependency graph of all resolved variants."""
    check_format(output_format)
    result = resolve_file(ctx, descriptor_file, sdk_default)

    print_dependency_graph(result, output_format)
    if not result.ok:
        for name, error in result.errors.items():
            print_error_message(f"{name}: {type(error).__name__}: {error}")
        raise typer.Exit(1)


def register_commands(app: typer.Typer) -> None:
    """Register deps command with the main app."""
    app.command(name="deps")(deps)
