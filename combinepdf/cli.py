"""
Command-line interface for combinepdf.
"""

import logging
import os
import sys

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from combinepdf import __version__
from combinepdf.config import ENV_PREFIX, MergeSettings
from combinepdf.merge import merge_pdfs
from combinepdf.utils import configure_logging, ensure_path, find_pdf_files

console = Console()
err_console = Console(stderr=True)

USAGE = "combinepdf <destination_path> <pdf1> <pdf2> [<pdf3> ... <pdfN>]"
DIR_USAGE = "combinepdf [--d | --dir] [--r | --recursive] <destination_path> <source_directory>"

CREDITS = """
[bold]combinepdf[/bold] {version}

Created by the combinepdf contributors.
Released under the MIT license: feel free to do whatever you want with it.
"""


def _collect_sources(sources, directory, recursive, destination):
    """Expand directory arguments and drop the destination from the inputs."""
    if not directory:
        return list(sources)

    destination_path = ensure_path(destination)
    collected = []
    for source in sources:
        for pdf_path in find_pdf_files(source, recursive=recursive):
            if pdf_path != destination_path:
                collected.append(str(pdf_path))
    return collected


@click.command(context_settings={"help_option_names": ["--help", "--h"]})
@click.version_option(version=__version__)
@click.argument("destination", required=False, type=click.Path(dir_okay=False))
@click.argument("sources", nargs=-1, type=click.Path())
@click.option(
    "--dir", "--d", "directory",
    is_flag=True,
    help="Treat the source arguments as directories of PDFs.",
)
@click.option(
    "--recursive", "--r", "recursive",
    is_flag=True,
    help="With --dir, also merge PDFs found in nested directories.",
)
@click.option(
    "--credits", "--c", "show_credits",
    is_flag=True,
    help="Display credits alongside the license for this project.",
)
@click.option(
    "--no-compress",
    is_flag=True,
    help="Write streams as they are instead of Flate-compressing them.",
)
@click.option(
    "--workers",
    type=click.IntRange(min=1),
    default=None,
    help="Number of threads used to read the input files.",
)
@click.option("--verbose", "-v", is_flag=True, help="Log every merge step.")
def cli(destination, sources, directory, recursive, show_credits, no_compress, workers, verbose):
    """
    Combine PDF files into one document with a bookmark per input.

    Examples:

        combinepdf ./output.pdf input1.pdf input2.pdf input3.pdf

        combinepdf --dir ./output.pdf ./scans

        combinepdf --dir --recursive ./output.pdf ./archive
    """
    if show_credits:
        console.print(CREDITS.format(version=__version__))
        return

    if verbose:
        configure_logging(logging.DEBUG)
    else:
        configure_logging(os.environ.get(ENV_PREFIX + "LOG_LEVEL", "WARNING"))

    if destination is None or not sources:
        err_console.print("[bold red]ERR:[/bold red] Invalid number of arguments")
        err_console.print(f"Usage: {DIR_USAGE if directory else USAGE}", markup=False)
        err_console.print("\nWant to see all of the feature flags? Use --help or --h to list them.")
        sys.exit(2)

    try:
        inputs = _collect_sources(sources, directory, recursive, destination)
    except (FileNotFoundError, NotADirectoryError) as e:
        err_console.print(f"[bold red]✗ Error:[/bold red] {escape(str(e))}")
        sys.exit(1)

    if not inputs:
        err_console.print("[bold red]✗ Error:[/bold red] No PDF files found to merge")
        sys.exit(1)

    settings = MergeSettings.from_env()
    if no_compress:
        settings = settings.with_updates(compress=False)
    settings = settings.with_updates(workers=workers)

    console.print(f"\n[bold cyan]Merging {len(inputs)} file(s)...[/bold cyan]")
    result = merge_pdfs(inputs, destination, settings=settings)

    for failure in result.skipped:
        err_console.print(f"[yellow]⚠ Skipped[/yellow] {escape(failure.path)}: {escape(failure.reason)}")

    if not result.success:
        err_console.print(f"\n[bold red]✗ Error:[/bold red] {escape(str(result.error))}")
        sys.exit(1)

    table = Table(title="Merged Documents", show_header=True)
    table.add_column("#", style="cyan", justify="right")
    table.add_column("Source", style="green")
    for index, source in enumerate(result.sources, 1):
        table.add_row(str(index), os.path.basename(source))
    console.print(table)
    if result.bookmarks:
        console.print(f"[dim]Bookmarks: {', '.join(result.bookmarks)}[/dim]")

    console.print(
        f"\n[bold green]✓ Successfully merged {result.total_pages} page(s)[/bold green]"
    )
    console.print(f"[dim]Output file: {escape(result.output_path)}[/dim]\n")


if __name__ == "__main__":  # pragma: no cover
    cli()
