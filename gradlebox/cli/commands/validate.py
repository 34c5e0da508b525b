"""Validate command: report which build variants resolve."""

from typing import Annotated

import typer

from gradlebox.cli.commands.resolve import (
    DescriptorArgument,
    SdkDefaultOption,
    SigningConfigOption,
    resolve_file,
)
from gradlebox.cli.decorators import handle_errors
from gradlebox.cli.helpers.output import print_error_message, print_success_message


@handle_errors
def validate(
    ctx: typer.Context,
    descriptor_file: DescriptorArgument,
    sdk_default: SdkDefaultOption = None,
    signing_config: SigningConfigOption = None,
    quiet: Annotated[
        bool, typer.Option("--quiet", "-q", help="Only set the exit code")
    ] = False,
) -> None:
    """Check that every build type of a descriptor resolves."""
    result = resolve_file(ctx, descriptor_file, sdk_default, signing_config)

    if not quiet:
        for name, variant in result.items():
            if variant.ok:
                print_success_message(f"{name}: ok")
            else:
                print_error_message(
                    f"{name}: {type(variant.error).__name__}: {variant.error}"
                )

    if not result.ok:
        raise typer.Exit(1)


def register_commands(app: typer.Typer) -> None:
    """Register validate command with the main app."""
    app.command(name="validate")(validate)
