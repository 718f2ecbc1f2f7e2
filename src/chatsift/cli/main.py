"""Main Typer application for chatsift."""

import json
import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from chatsift.cli.errorhandler import handle_cli_errors
from chatsift.config.settings import load_settings
from chatsift.constants import DecodeQuality, VerdictStatus
from chatsift.ingest.encoding import detect_likely_encoding
from chatsift.ingest.models import ImportOutcome
from chatsift.ingest.pipeline import ImportPipeline
from chatsift.ingest.sniffer import classify_container
from chatsift.logging_setup import configure_logging
from chatsift.utils.files import format_file_size, read_path

app = typer.Typer(
    name="chatsift",
    help="Inspect and normalize chat export files (text, HTML or zip)",
    add_completion=False,
)

console = Console()
logger = logging.getLogger(__name__)

_VERDICT_STYLES = {
    VerdictStatus.ACCEPTED: "green",
    VerdictStatus.ACCEPTED_WITH_WARNING: "yellow",
    VerdictStatus.REJECTED: "red",
}
_QUALITY_STYLES = {
    DecodeQuality.CLEAN: "green",
    DecodeQuality.LOSSY: "yellow",
    DecodeQuality.FILTERED: "red",
}


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging")] = False,
) -> None:
    """Chat export import normalization."""
    configure_logging("DEBUG" if verbose else None)


@app.command()
def inspect(
    file: Annotated[Path, typer.Argument(help="Export file to normalize", exists=True, dir_okay=False)],
    as_json: Annotated[bool, typer.Option("--json", help="Print a JSON report instead of a table")] = False,
    lines: Annotated[bool, typer.Option("--lines", help="Trim lines and drop blank ones")] = False,
    config: Annotated[Path | None, typer.Option(help="Path to a .chatsift.toml file")] = None,
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Write the normalized text here")] = None,
    debug: Annotated[bool, typer.Option(help="Show full tracebacks on errors")] = False,
) -> None:
    """Run the import pipeline on FILE and report the outcome."""
    with handle_cli_errors(debug=debug):
        settings = load_settings(config)
        outcome = ImportPipeline(settings).normalize(file, split_lines=lines)
        if output is not None:
            output.write_text(outcome.document.text, encoding="utf-8")
            logger.info("Wrote normalized text to %s", output)

    if as_json:
        typer.echo(json.dumps(outcome.to_dict(), indent=2))
        return
    console.print(_outcome_table(file, outcome))
    for reason in outcome.verdict.reasons:
        console.print(f"[yellow]warning:[/yellow] {reason}")


@app.command()
def sniff(
    file: Annotated[Path, typer.Argument(help="File to inspect", exists=True, dir_okay=False)],
    config: Annotated[Path | None, typer.Option(help="Path to a .chatsift.toml file")] = None,
    debug: Annotated[bool, typer.Option(help="Show full tracebacks on errors")] = False,
) -> None:
    """Print the container kind and advisory encoding of FILE."""
    with handle_cli_errors(debug=debug):
        settings = load_settings(config)
        data = read_path(file, settings.max_file_size)
    container = classify_container(data, window=settings.sniff_window)
    console.print(f"container: [bold]{container.value}[/bold]")
    console.print(f"likely encoding: [bold]{detect_likely_encoding(data)}[/bold]")
    console.print(f"size: {format_file_size(len(data))}")


def _outcome_table(file: Path, outcome: ImportOutcome) -> Table:
    document = outcome.document
    summary = outcome.to_dict()
    verdict_style = _VERDICT_STYLES[outcome.verdict.status]
    quality_style = _QUALITY_STYLES[document.quality]

    table = Table(title=f"Import of {file.name}", show_header=True, header_style="bold cyan")
    table.add_column("Field", style="dim")
    table.add_column("Value")
    table.add_row("Transcript", document.source_name or "-")
    table.add_row("Container", document.source_container.value)
    table.add_row("Encoding", f"{document.encoding_used.value} (likely {document.likely_encoding})")
    table.add_row("Quality", f"[{quality_style}]{document.quality.value}[/{quality_style}]")
    table.add_row("Verdict", f"[{verdict_style}]{outcome.verdict.status.value}[/{verdict_style}]")
    table.add_row("Characters", str(summary["characters"]))
    table.add_row("Lines", str(summary["lines"]))
    return table
