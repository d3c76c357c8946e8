"""
Human-readable output formatting.

Centralizes all CLI output formatting so commands stay thin. Digests are
always printed as lowercase hex.
"""
from __future__ import annotations

import typer

from ..digest import hex_digest
from ..outcome import ContentMismatch, CopyOutcome, SizeMismatch, Success

# Optional Rich support for enhanced output
try:
    from rich.console import Console
    from rich.markup import escape
    from rich.table import Table
    _RICH = True
    _console = Console()
    _err_console = Console(stderr=True)
except ImportError:
    _RICH = False
    _console = None
    _err_console = None


def print_outcome(outcome: CopyOutcome, source_key: str, dest_key: str) -> None:
    """
    Print the result of a copy or verify run.

    Args:
        outcome: Outcome returned by the orchestrator
        source_key: Source key of the run
        dest_key: Destination key of the run
    """
    status = "OK" if outcome.ok else "FAILED"

    if _RICH:
        style = "green" if outcome.ok else "red"
        _console.print(f"[bold {style}]{status}[/] {source_key} -> {dest_key}")
        _console.print(outcome.describe(), markup=False, highlight=False)

        rows = _detail_rows(outcome)
        if rows:
            table = Table(show_header=True)
            table.add_column("Object", style="cyan")
            table.add_column("Value", style="yellow")
            for name, value in rows:
                table.add_row(name, value)
            _console.print(table)
        return

    # Fallback to plain text
    typer.echo(f"{status} {source_key} -> {dest_key}")
    typer.echo(outcome.describe())
    for name, value in _detail_rows(outcome):
        typer.echo(f"  {name}: {value}")


def _detail_rows(outcome: CopyOutcome) -> list[tuple[str, str]]:
    if isinstance(outcome, ContentMismatch):
        return [("Source hash", outcome.source_hex), ("Destination hash", outcome.dest_hex)]
    if isinstance(outcome, SizeMismatch):
        return [
            ("Source size", _format_bytes(outcome.source_size)),
            ("Destination size", _format_bytes(outcome.dest_size)),
        ]
    if isinstance(outcome, Success):
        return [("Size", _format_bytes(outcome.size)), ("sha256", hex_digest(outcome.digest))]
    return []


def print_error(exc: BaseException) -> None:
    """Print an error that stopped a command before an outcome existed."""
    if _RICH:
        _err_console.print(f"[bold red]Error:[/] {escape(str(exc))}", highlight=False)
        return
    typer.echo(f"Error: {exc}", err=True)


def _format_bytes(size_bytes: int) -> str:
    """
    Format byte count as human-readable string, keeping the exact count.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted string (e.g., "1.5 MB (1572864 B)", "42 B")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB ({size_bytes} B)"
    elif size_bytes < 1024 * 1024 * 1024:
        return f"{size_bytes / (1024 * 1024):.1f} MB ({size_bytes} B)"
    else:
        return f"{size_bytes / (1024 * 1024 * 1024):.1f} GB ({size_bytes} B)"
