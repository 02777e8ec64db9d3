"""
Logging configuration using Rich for beautiful console output.
"""

import logging
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table


def setup_logging(verbose: bool = False) -> None:
    """
    Configure logging with Rich handler.

    Args:
        verbose: Whether to enable debug-level logging
    """
    console = Console(stderr=True)

    level = logging.DEBUG if verbose else logging.INFO

    rich_handler = RichHandler(
        console=console,
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True
    )

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[rich_handler],
        force=True
    )

    # Reduce noise from other libraries
    logging.getLogger("openpyxl").setLevel(logging.WARNING)


def print_summary_table(summary: dict, console: Optional[Console] = None) -> None:
    """
    Print a formatted summary table of the split operation.

    Args:
        summary: Summary dictionary from ExcelSplitter.split_by_column
        console: Rich console instance (creates new one if None)
    """
    if console is None:
        console = Console()

    table = Table(title="Split Summary", show_header=True, header_style="bold magenta")
    table.add_column("Property", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")

    table.add_row("Input File", escape(summary.get('input_file', 'Unknown')))
    table.add_row("Sheet", escape(summary.get('sheet', 'Unknown')))
    table.add_row("Split Column", escape(summary.get('split_column', 'Unknown')))
    table.add_row("Total Input Rows", str(summary.get('total_rows', 0)))
    table.add_row("Groups Found", str(summary.get('groups_found', 0)))
    table.add_row("Files Created", str(summary.get('files_created', 0)))
    table.add_row("Output Directory", escape(summary.get('output_dir', 'Unknown')))

    console.print()
    console.print(table)


def print_manifest_table(manifest_entries: list, console: Optional[Console] = None) -> None:
    """
    Print a formatted table of created files.

    Args:
        manifest_entries: List of manifest entry dictionaries
        console: Rich console instance (creates new one if None)
    """
    if console is None:
        console = Console()

    if not manifest_entries:
        console.print("[yellow]No files were created.[/yellow]")
        return

    table = Table(title="Created Files", show_header=True, header_style="bold green")
    table.add_column("Value", style="cyan", no_wrap=False)
    table.add_column("Rows", justify="right", style="magenta")
    table.add_column("File Path", style="white", no_wrap=False)

    for entry in manifest_entries:
        value = entry.get('value', 'Unknown')
        row_count = str(entry.get('row_count', 0))
        file_path = entry.get('output_path', 'Unknown')

        # Truncate long values for better display
        if len(value) > 30:
            value = value[:27] + "..."

        if len(file_path) > 50:
            file_path = "..." + file_path[-47:]

        table.add_row(escape(value), row_count, escape(file_path))

    console.print()
    console.print(table)


def print_columns_table(columns: List[str], console: Optional[Console] = None) -> None:
    """Print header columns with the index ``split --column`` expects."""
    if console is None:
        console = Console()

    table = Table(title="Columns", show_header=True, header_style="bold magenta")
    table.add_column("Index", justify="right", style="magenta")
    table.add_column("Header", style="cyan")

    for col_idx, name in enumerate(columns):
        table.add_row(str(col_idx), escape(name))

    console.print(table)


def print_success_message(files_created: int, output_dir: str, console: Optional[Console] = None) -> None:
    """
    Print a success message with file count and output directory.

    Args:
        files_created: Number of files created
        output_dir: Output directory path
        console: Rich console instance (creates new one if None)
    """
    if console is None:
        console = Console()

    console.print()
    if files_created > 0:
        console.print(f"[bold green]Split into {files_created} workbooks under:[/bold green]")
        console.print(f"   [cyan]{escape(output_dir)}[/cyan]")
    else:
        console.print("[bold yellow]Nothing to split: the sheet produced no groups.[/bold yellow]")


def print_error_message(error: str, console: Optional[Console] = None) -> None:
    """
    Print an error message with Rich formatting.

    Args:
        error: Error message to display
        console: Rich console instance (creates new one if None)
    """
    if console is None:
        console = Console()

    console.print()
    console.print(f"[bold red]excel-split failed:[/bold red] {escape(error)}")


def print_progress_step(step: str, console: Optional[Console] = None) -> None:
    """
    Print a progress step message.

    Args:
        step: Description of the current step
        console: Rich console instance (creates new one if None)
    """
    if console is None:
        console = Console()

    console.print(f"[bold blue]>[/bold blue] {escape(step)}")
