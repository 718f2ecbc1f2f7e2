"""Command-line interface for chatsift."""

from chatsift.cli.main import app

__all__ = ["app", "main"]


def main() -> None:
    """Entry point for the CLI."""
    app()
