"""CLI package for Gradlebox."""

from gradlebox.cli.app import app, main


__all__ = ["app", "main"]
