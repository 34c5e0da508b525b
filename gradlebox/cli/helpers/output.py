"""Helper functions for CLI output formatting with Rich integration."""

import json
from typing import Any

import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from gradlebox.resolution.models import ResolutionResult, VariantConfig


OUTPUT_FORMATS = ("table", "json", "yaml")


def _console() -> Console:
    # Created per call so output follows the current sys.stdout
    return Console(highlight=False, soft_wrap=True, emoji=False)


def print_success_message(message: str) -> None:
    """Print a success message with a checkmark."""
    _console().print(f"[green]✓[/green] {escape(message)}")


def print_error_message(message: str) -> None:
    """Print an error message with an X symbol."""
    _console().print(f"[red]✗[/red] {escape(message)}")


def render_document(data: Any, output_format: str) -> None:
    """Print ``data`` as JSON or YAML on stdout."""
    if output_format == "json":
        print(json.dumps(data, indent=2))
    else:
        print(yaml.safe_dump(data, sort_keys=False), end="")


def result_to_dict(result: ResolutionResult) -> dict[str, Any]:
    """Serialize a resolution result, errors included."""
    return {
        "variants": {
            name: config.to_dict_full() for name, config in result.variants.items()
        },
        "errors": {
            name: {"type": type(error).__name__, "message": str(error)}
            for name, error in result.errors.items()
        },
    }


def _variant_table(config: VariantConfig) -> Table:
    table = Table(title=f"Variant: {config.name}", show_header=True)
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    options = config.compile_options
    rows = [
        ("applicationId", config.application_id),
        ("compileSdk", config.sdk.compile_sdk),
        ("minSdk", config.sdk.min_sdk),
        ("targetSdk", config.sdk.target_sdk),
        ("ndkVersion", config.ndk_version),
        ("versionCode", config.version_code),
        ("versionName", config.version_name),
        ("sourceCompatibility", options.source_compatibility),
        ("targetCompatibility", options.target_compatibility),
        ("jvmTarget", options.jvm_target),
        ("coreLibraryDesugaring", options.core_library_desugaring_enabled),
        ("signingConfig", config.signing_config),
        ("minifyEnabled", config.minify_enabled),
        ("shrinkResources", config.shrink_resources),
        ("debuggable", config.debuggable),
        ("proguardFiles", ", ".join(config.proguard_files)),
    ]
    for key, value in rows:
        table.add_row(key, "-" if value is None else escape(str(value)))
    for dependency in config.dependencies:
        table.add_row(dependency.scope, escape(dependency.coordinate))
    return table


def print_resolution_result(result: ResolutionResult, output_format: str) -> None:
    """Print every variant of ``result`` in the requested format."""
    if output_format != "table":
        render_document(result_to_dict(result), output_format)
        return

    console = _console()
    for name, variant in result.items():
        if variant.config is not None:
            console.print(_variant_table(variant.config))
        else:
            print_error_message(
                f"{name}: {type(variant.error).__name__}: {variant.error}"
            )


def print_dependency_graph(result: ResolutionResult, output_format: str) -> None:
    """Print which variants and classpaths each coordinate ends up on."""
    graph = result.dependency_graph()
    if output_format != "table":
        render_document(graph.to_dict(), output_format)
        return

    table = Table(title="Dependencies", show_header=True)
    table.add_column("Coordinate", style="cyan")
    table.add_column("Variant")
    table.add_column("Classpath")
    for coordinate in graph.coordinates():
        for usage in graph.nodes[coordinate]:
            table.add_row(escape(coordinate), usage.variant, usage.classpath)
    _console().print(table)
