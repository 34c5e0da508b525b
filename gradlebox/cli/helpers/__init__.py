"""Helper functions for CLI commands."""

from gradlebox.cli.helpers.output import (
    print_error_message,
    print_success_message,
    render_document,
)
from gradlebox.cli.helpers.parameters import parse_sdk_overrides


__all__ = [
    "parse_sdk_overrides",
    "print_error_message",
    "print_success_message",
    "render_document",
]
