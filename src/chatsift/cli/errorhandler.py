"""CLI error handling utilities."""

from collections.abc import Generator
from contextlib import contextmanager

import typer
from rich.console import Console

from chatsift.config.exceptions import ConfigError
from chatsift.exceptions import (
    EmptyInputError,
    InputTooLargeError,
    NoTranscriptInArchiveError,
    TranscriptImportError,
    UnreadableSourceError,
)

console = Console(stderr=True)

EXIT_IMPORT_FAILED = 1
EXIT_CONFIG_ERROR = 2


@contextmanager
def handle_cli_errors(*, debug: bool = False) -> Generator[None, None, None]:
    """Translate chatsift errors into friendly messages and exit codes.

    Args:
        debug: If True, re-raise so the full traceback is shown.

    """
    try:
        yield
    except (KeyboardInterrupt, SystemExit):
        raise
    except ConfigError as e:
        if debug:
            raise
        console.print(f"[bold red]Configuration error:[/bold red] {e}")
        raise typer.Exit(EXIT_CONFIG_ERROR) from e
    except EmptyInputError as e:
        if debug:
            raise
        console.print(f"[bold red]Empty file:[/bold red] {e}")
        raise typer.Exit(EXIT_IMPORT_FAILED) from e
    except InputTooLargeError as e:
        if debug:
            raise
        console.print(f"[bold red]File too large:[/bold red] {e}")
        raise typer.Exit(EXIT_IMPORT_FAILED) from e
    except UnreadableSourceError as e:
        if debug:
            raise
        console.print(f"[bold red]Could not read file:[/bold red] {e}")
        console.print("The file may be locked by another program; try again.")
        raise typer.Exit(EXIT_IMPORT_FAILED) from e
    except NoTranscriptInArchiveError as e:
        if debug:
            raise
        console.print(f"[bold red]No chat found in archive:[/bold red] {e}")
        console.print("Export the chat again and make sure the .zip includes the chat text file.")
        raise typer.Exit(EXIT_IMPORT_FAILED) from e
    except TranscriptImportError as e:
        if debug:
            raise
        console.print(f"[bold red]Import failed:[/bold red] {e}")
        raise typer.Exit(EXIT_IMPORT_FAILED) from e
    except OSError as e:
        if debug:
            raise
        console.print(f"[bold red]File error:[/bold red] {e}")
        raise typer.Exit(EXIT_IMPORT_FAILED) from e
