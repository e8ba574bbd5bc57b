"""
Command-line interface for the Angular i18n text extractor.

This module provides the ``ng-i18n-extract`` entry point: extracting display
text from a source tree, checking how single strings are classified, and
reporting the installed version.
"""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from ng_i18n_extract import __version__
from ng_i18n_extract.classifier import default_classifier
from ng_i18n_extract.config import Settings
from ng_i18n_extract.session import ExtractionSession
from ng_i18n_extract.utils.errors import I18nExtractError
from ng_i18n_extract.utils.logging import setup_logging

# Initialize Typer app and Rich console
app = typer.Typer(
    name="ng-i18n-extract",
    help="Extract display text from Angular templates and components into a translation file",
    add_completion=False,
)
console = Console()


@app.command()
def extract(
    src: Optional[Path] = typer.Option(
        None,
        "--src",
        "-s",
        help="Source directory to scan (default: ./src)",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output JSON file (default: ./i18n/messages.json)",
    ),
    locale: Optional[str] = typer.Option(
        None,
        "--locale",
        "-l",
        help="Locale stored in the output file (default: en)",
    ),
    key_prefix: Optional[str] = typer.Option(
        None,
        "--key-prefix",
        "-k",
        help="Prefix for generated keys (default: app)",
    ),
    replace: bool = typer.Option(
        False,
        "--replace",
        "-r",
        help="Rewrite source files to use the generated keys",
    ),
    exclude_ts: bool = typer.Option(
        False,
        "--exclude-ts",
        help="Skip TypeScript files",
    ),
    component_context: Optional[bool] = typer.Option(
        None,
        "--component-context/--no-component-context",
        help="Namespace keys with a token derived from the file name",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    ),
):
    """Extract display text and write the translation file."""

    async def _extract():
        try:
            settings = Settings.from_env(
                src_path=src,
                output_path=output,
                locale=locale,
                key_prefix=key_prefix,
                replace=True if replace else None,
                exclude_ts=True if exclude_ts else None,
                component_context=component_context,
                log_level=log_level,
            )
            if log_level:
                setup_logging(
                    log_level=settings.log_level,
                    log_file_path=settings.get_log_file_path(),
                    dev_mode=settings.dev_mode,
                )

            console.print(f"Scanning [cyan]{settings.src_path}[/cyan]")
            console.print(f"  Output: {settings.output_path}")
            console.print(f"  Locale: {settings.locale}")
            console.print(f"  Key prefix: {settings.key_prefix}")
            console.print(f"  Replace: {'yes' if settings.replace else 'no (dry run)'}")
            if settings.exclude_ts:
                console.print("  TypeScript files: skipped")

            session = ExtractionSession(settings)
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=console,
            ) as progress:
                progress.add_task("Extracting texts...", total=None)
                await session.run(settings.src_path)
                output_path = await session.save(settings.output_path)

            summary = session.summary()

            table = Table(title="Extraction Summary")
            table.add_column("Metric", style="cyan")
            table.add_column("Value", justify="right")
            table.add_row("HTML files", str(summary.markup_files))
            table.add_row("TypeScript files", str(summary.logic_files))
            table.add_row("Rewritten files", str(summary.rewritten_files))
            table.add_row("Skipped files", str(len(summary.skipped_files)))
            table.add_row("Texts extracted", str(summary.total_texts))
            console.print(table)

            for skipped in summary.skipped_files:
                console.print(f"[yellow]![/yellow] Skipped: {skipped}")

            console.print(
                f"[green]✓[/green] Saved {summary.total_texts} translations to {output_path}"
            )

        except I18nExtractError as e:
            console.print(f"[red]Error:[/red] {escape(str(e))}")
            raise typer.Exit(1)

    asyncio.run(_extract())


@app.command()
def check(
    text: str = typer.Argument(..., help="String to classify"),
):
    """Show whether a string would be extracted as display text."""
    verdict = default_classifier.explain(text)

    if verdict.accepted:
        console.print(f"[green]✓[/green] Display text ({verdict.reason}): {escape(repr(text))}")
    else:
        console.print(f"[red]✗[/red] Not display text, rejected by '{verdict.reason}': {escape(repr(text))}")


@app.command()
def version():
    """Show the installed version."""
    console.print(f"ng-i18n-extract {__version__}")


@app.callback()
def main(
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
):
    """Angular i18n text extractor - find display text and give it translation keys."""
    # Setup logging
    log_level = "DEBUG" if debug else "INFO"
    setup_logging(log_level=log_level)


if __name__ == "__main__":
    app()
