"""Resolve command: print the fully resolved build variants."""

from pathlib import Path
from typing import Annotated

import typer

from gradlebox.cli.decorators import handle_errors
from gradlebox.cli.helpers.output import OUTPUT_FORMATS, print_resolution_result
from gradlebox.cli.helpers.parameters import parse_sdk_overrides
from gradlebox.core.structlog_logger import get_struct_logger_with_context
from gradlebox.descriptor.loader import load_descriptor
from gradlebox.resolution.models import ResolutionResult
from gradlebox.resolution.resolver import create_variant_resolver


DescriptorArgument = Annotated[
    Path,
    typer.Argument(help="Descriptor file (.yaml, .yml, .json or build.gradle.kts)"),
]
FormatOption = Annotated[
    str,
    typer.Option("--format", "-f", help="Output format: table, json or yaml"),
]
SdkDefaultOption = Annotated[
    list[str] | None,
    typer.Option(
        "--sdk-default",
        help="Override an SDK default, e.g. flutter.minSdkVersion=23 (repeatable)",
    ),
]
SigningConfigOption = Annotated[
    list[str] | None,
    typer.Option(
        "--signing-config",
        help="Register an externally managed signing config name (repeatable)",
    ),
]
WorkersOption = Annotated[
    int | None,
    typer.Option("--workers", min=1, help="Resolve variants on this many threads"),
]


def check_format(output_format: str) -> str:
    if output_format not in OUTPUT_FORMATS:
        raise typer.BadParameter(
            f"Unknown format '{output_format}' (expected one of: "
            f"{', '.join(OUTPUT_FORMATS)})",
            param_hint="--format",
        )
    return output_format


def resolve_file(
    ctx: typer.Context,
    descriptor_file: Path,
    sdk_defaults: list[str] | None = None,
    signing_configs: list[str] | None = None,
    workers: int | None = None,
) -> ResolutionResult:
    """Load ``descriptor_file`` and resolve it with the user's configuration."""
    logger = get_struct_logger_with_context(__name__, descriptor=str(descriptor_file))
    app_context = ctx.obj
    descriptor = load_descriptor(descriptor_file)
    resolver = create_variant_resolver(
        app_context.user_config if app_context is not None else None,
        sdk_overrides=parse_sdk_overrides(sdk_defaults),
        extra_signing_configs=signing_configs,
        max_workers=workers,
    )
    result = resolver.resolve(descriptor)
    logger.debug(
        "descriptor_resolved",
        variants=len(result),
        failed=len(result.errors),
    )
    return result


@handle_errors
def resolve(
    ctx: typer.Context,
    descriptor_file: DescriptorArgument,
    variant: Annotated[
        str | None,
        typer.Option("--variant", help="Only show this build type"),
    ] = None,
    output_format: FormatOption = "table",
    sdk_default: SdkDefaultOption = None,
    signing_config: SigningConfigOption = None,
    workers: WorkersOption = None,
) -> None:
    """Resolve every build type of a descriptor into a variant configuration."""
    check_format(output_format)
    result = resolve_file(ctx, descriptor_file, sdk_default, signing_config, workers)

    if variant is not None:
        if variant not in result:
            raise typer.BadParameter(
                f"Unknown build type '{variant}' (declared: {', '.join(result)})",
                param_hint="--variant",
            )
        result = ResolutionResult({variant: result[variant]})

    print_resolution_result(result, output_format)
    if not result.ok:
        raise typer.Exit(1)


def register_commands(app: typer.Typer) -> None:
    """Register resolve command with the main app.

    Args:
        app: The main Typer app
    """
    app.command(name="resolve")(resolve)
