"""Command Line Interface for health record item types.

This module provides a CLI using Typer for reading item exports, checking
single item documents and listing the registered item types.

Security Impact:
    - Exports are read through the secure streaming parser
    - Single documents are loaded with defusedxml
    - Rejected records are reported by fault type and element, never by payload
"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from health_itemtypes import __version__
from health_itemtypes.adapters.thing_reader import ThingExportReader
from health_itemtypes.domain.ports import ItemTypeError, ParseFault
from health_itemtypes.domain.registry import deserialize_item, registered_item_types
from health_itemtypes.infrastructure.logging_config import setup_logging
from health_itemtypes.infrastructure.settings import settings
from health_itemtypes.infrastructure.xml_io import load_fragment
from health_itemtypes.infrastructure.xml_streaming_parser import SecurityError

# Initialize Typer app and Rich console
app = typer.Typer(
    name="health-itemtypes",
    help="Read, check and list health record item types",
    add_completion=False
)
console = Console()


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"health-itemtypes v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False, "--version", help="Show version information",
        callback=_version_callback, is_eager=True
    ),
) -> None:
    """Read, check and list health record item types."""


@app.command()
def read(
    export_file: Path = typer.Argument(..., help="Export file holding <thing> envelopes", exists=True),
    record_tag: Optional[str] = typer.Option(None, "--record-tag", "-t", help="Envelope tag name"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Read an item export and report accepted and rejected records.

    Examples:
        health-itemtypes read export.xml
        health-itemtypes read export.xml --record-tag item --verbose
    """
    setup_logging(log_level="DEBUG" if verbose else None)

    reader = ThingExportReader(record_tag=record_tag)
    accepted = {}
    failures = []

    try:
        for index, result in enumerate(reader.read(str(export_file)), start=1):
            if result.is_success():
                type_name = type(result.value).__name__
                accepted[type_name] = accepted.get(type_name, 0) + 1
            else:
                failures.append((index, result))
    except (SecurityError, ItemTypeError) as e:
        console.print(f"[red]✗[/red] Failed to read {export_file}: {str(e)}")
        raise typer.Exit(code=1)

    console.print("\n[bold]Export Summary:[/bold]")
    summary_table = Table(show_header=False, box=None, padding=(0, 2))
    for type_name in sorted(accepted):
        summary_table.add_row(f"{type_name}:", f"[green]{accepted[type_name]:,}[/green]")
    summary_table.add_row("Accepted:", f"[bold]{sum(accepted.values()):,}[/bold]")
    summary_table.add_row("Rejected:", f"[red]{len(failures):,}[/red]" if failures else "0")
    console.print(summary_table)

    if failures:
        failure_table = Table(show_header=True, header_style="bold")
        failure_table.add_column("#", justify="right")
        failure_table.add_column("Thing", style="cyan")
        failure_table.add_column("Fault")
        failure_table.add_column("Element")
        for index, result in failures:
            failure_table.add_row(
                str(index),
                result.error_details.get("thing_id") or "-",
                result.error_type,
                result.error_details.get("element") or "-"
            )
        console.print(failure_table)
        console.print(f"\n[yellow]⚠[/yellow] {len(failures)} records rejected")
        raise typer.Exit(code=1)

    console.print("\n[green]✓[/green] All records accepted")


@app.command()
def show(
    item_file: Path = typer.Argument(..., help="XML document holding one item", exists=True),
    pretty: bool = typer.Option(True, "--pretty/--compact", help="Indent the written XML"),
) -> None:
    """Parse a single item document and print it as written by its item type."""
    try:
        item = deserialize_item(load_fragment(item_file.read_text(encoding="utf-8")))
        xml = item.to_xml(pretty_print=pretty)
    except ParseFault as e:
        console.print(f"[red]✗[/red] {item_file} could not be parsed: {str(e)}")
        raise typer.Exit(code=1)
    except ItemTypeError as e:
        console.print(f"[red]✗[/red] {item_file} could not be written: {str(e)}")
        raise typer.Exit(code=1)

    console.print(f"[bold]{type(item).__name__}[/bold]: {escape(str(item))}")
    console.print(xml, markup=False, highlight=False)


@app.command()
def types() -> None:
    """List the registered item types."""
    types_table = Table(show_header=True, header_style="bold")
    types_table.add_column("Root element", style="cyan", no_wrap=True)
    types_table.add_column("Class", no_wrap=True)
    types_table.add_column("Type id", no_wrap=True)

    for cls in registered_item_types():
        types_table.add_row(cls.ROOT_ELEMENT, cls.__name__, str(cls.TYPE_ID))

    console.print(types_table)


@app.command()
def info() -> None:
    """Display configuration."""
    console.print("[bold blue]Configuration[/bold blue]\n")

    info_table = Table(show_header=False, box=None, padding=(0, 2))
    info_table.add_row("Application:", settings.app_name)
    info_table.add_row("Log level:", settings.log_level)
    info_table.add_row("JSON logs:", "Enabled" if settings.log_json else "Disabled")
    info_table.add_row("Record tag:", settings.xml_record_tag)
    info_table.add_row("XML max events:", f"{settings.xml_max_events:,}")
    info_table.add_row("XML max depth:", str(settings.xml_max_depth))

    console.print(info_table)


if __name__ == "__main__":
    app()
