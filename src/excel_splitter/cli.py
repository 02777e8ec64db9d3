"""
Command-line interface for the Excel splitter using Typer.
"""

from pathlib import Path
from typing import Optional, Annotated

import typer
from rich.console import Console
from rich.markup import escape

from . import __version__
from .core import ExcelSplitter
from .io_utils import write_manifest_csv
from .logging_utils import (
    setup_logging,
    print_columns_table,
    print_summary_table,
    print_manifest_table,
    print_success_message,
    print_error_message,
    print_progress_step
)

app = typer.Typer(
    name="excel-split",
    help="Split an Excel worksheet into one workbook per column value",
    add_completion=False
)

console = Console()

InputOption = Annotated[
    Path,
    typer.Option("--input", "-i", help="Path to input Excel file", exists=True, file_okay=True, dir_okay=False)
]
SheetOption = Annotated[str, typer.Option("--sheet", "-s", help="Sheet name to process")]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Enable verbose logging")]


@app.command()
def split(
    input_file: InputOption,
    sheet: SheetOption,
    column: Annotated[
        int,
        typer.Option("--column", "-c", help="0-based index of the column to split by (see 'columns')")
    ],
    out: Annotated[
        Path,
        typer.Option("--out", "-o", help="Directory the output folder is created in")
    ] = Path("."),
    manifest: Annotated[
        Optional[Path],
        typer.Option("--manifest", help="Path for manifest CSV file")
    ] = None,
    cleanup_on_failure: Annotated[
        bool,
        typer.Option("--cleanup-on-failure", help="Delete files already written when a later group fails")
    ] = False,
    verbose: VerboseOption = False,
) -> None:
    """
    Split a sheet into one workbook per distinct value of a column.

    Output files are written to a folder named after the column header,
    one file per value, keeping column styles and widths of the source.

    Examples:

        # List the columns, then split by the first one
        excel-split columns --input "sales.xlsx" --sheet "Data"
        excel-split split --input "sales.xlsx" --sheet "Data" --column 0

        # Write into ./splits and record the created files
        excel-split split -i "sales.xlsx" -s "Data" -c 2 --out ./splits --manifest files.csv
    """
    setup_logging(verbose)

    splitter = ExcelSplitter()
    try:
        print_progress_step("Loading workbook...", console)
        splitter.load_file(input_file)

        with console.status("Reading rows") as status:
            splitter.register_status_callback("cli", status.update)
            result = splitter.split_by_column(
                sheet,
                column,
                output_root=out,
                cleanup_on_failure=cleanup_on_failure
            )

        result['input_file'] = str(input_file)
        print_summary_table(result, console)
        print_manifest_table(result['manifest_entries'], console)

        if manifest:
            write_manifest_csv(result['manifest_entries'], manifest)

        print_success_message(result['files_created'], result['output_dir'], console)

        if manifest and result['manifest_entries']:
            console.print(f"[bold blue]Manifest written to[/bold blue] {escape(str(manifest))}")

    except Exception as e:
        print_error_message(str(e), console)
        raise typer.Exit(1)
    finally:
        splitter.dispose_file_if_loaded()


@app.command()
def sheets(input_file: InputOption, verbose: VerboseOption = False) -> None:
    """List the sheets of a workbook."""
    setup_logging(verbose)

    splitter = ExcelSplitter()
    try:
        splitter.load_file(input_file)
        for name in splitter.get_sheets():
            console.print(name, markup=False, highlight=False)
    except Exception as e:
        print_error_message(str(e), console)
        raise typer.Exit(1)
    finally:
        splitter.dispose_file_if_loaded()


@app.command()
def columns(input_file: InputOption, sheet: SheetOption, verbose: VerboseOption = False) -> None:
    """List the header columns of a sheet with their split index."""
    setup_logging(verbose)

    splitter = ExcelSplitter()
    try:
        splitter.load_file(input_file)
        print_columns_table(splitter.get_columns(sheet), console)
    except Exception as e:
        print_error_message(str(e), console)
        raise typer.Exit(1)
    finally:
        splitter.dispose_file_if_loaded()


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"excel-split version {__version__}")


if __name__ == "__main__":
    app()
