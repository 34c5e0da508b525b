"""Parsing helpers for repeated CLI options."""

import typer


def parse_sdk_overrides(values: list[str] | None) -> dict[str, int | str]:
    """Parse ``KEY=VALUE`` pairs given with ``--sdk-default``.

    Numeric values become integers so they can be used as SDK levels.

    Raises:
        typer.BadParameter: If a pair has no ``=`` or an empty key
    """
    overrides: dict[str, int | str] = {}
    for item in values or []:
        key, sep, value = item.partition("=")
        key = key.strip()
        if not sep or not key:
            raise typer.BadParameter(
                f"Expected KEY=VALUE, got '{item}'", param_hint="--sdk-default"
            )
        value = value.strip()
        overrides[key] = int(value) if value.isdecimal() else value
    return overrides
