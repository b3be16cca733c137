"""Command-line interface for docset-generator."""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from docset_generator import __version__
from docset_generator.config import AppConfig
from docset_generator.errors import DocsetError
from docset_generator.orchestrator import Orchestrator

app = typer.Typer(
    name="docset-generator",
    help="Build an offline Dash docset from a JavaScript-rendered documentation site.",
    rich_markup_mode="rich",
)

console = Console()


def version_callback(value: bool):
    if value:
        console.print(f"docset-generator version {__version__}")
        raise typer.Exit()


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )
    # asyncio is noisy at DEBUG
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def load_config(
    config_file: Optional[Path],
    output: Optional[Path],
    batch_size: Optional[int],
    headed: bool,
    verbose: bool,
) -> AppConfig:
    """Build the app config from an optional TOML file plus CLI overrides."""
    config = AppConfig.from_toml(config_file) if config_file else AppConfig()

    if output is not None:
        config.docset = config.docset.model_copy(update={"output_dir": output})
    if batch_size is not None:
        config.download = config.download.model_copy(update={"batch_size": batch_size})
    if headed:
        config.fetcher = config.fetcher.model_copy(update={"headless": False})
    if verbose:
        config.verbose = True
    return config


@app.command()
def main(
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="TOML file overriding the built-in settings",
        exists=True,
        dir_okay=False,
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Directory to create the .docset bundle in",
    ),
    batch_size: Optional[int] = typer.Option(
        None,
        "--batch-size",
        "-b",
        min=1,
        max=50,
        help="Pages downloaded concurrently per batch",
    ),
    headed: bool = typer.Option(
        False,
        "--headed",
        help="Show the browser window",
    ),
    dump_config: bool = typer.Option(
        False,
        "--dump-config",
        help="Print the effective non-default settings as TOML and exit",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
):
    """
    Crawl the documentation listing, download every page and build the docset.

    Runs without arguments using the built-in settings.

    Examples:

        docset-generator

        docset-generator -o ./build --batch-size 5

        docset-generator --config my-site.toml
    """
    try:
        config = load_config(config_file, output, batch_size, headed, verbose)
    except (ValidationError, ValueError) as e:
        console.print(f"[red]Invalid configuration: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    if dump_config:
        console.print(config.to_toml(), end="", markup=False, highlight=False)
        raise typer.Exit()

    setup_logging(config.verbose)
    orchestrator = Orchestrator(config, console)

    try:
        asyncio.run(orchestrator.run())
    except KeyboardInterrupt:
        console.print("\n[yellow]Cancelled.[/yellow]")
        raise typer.Exit(130)
    except DocsetError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        if config.verbose:
            console.print_exception()
        raise typer.Exit(1)
    except Exception as e:
        console.print(f"[red]Error generating docset: {escape(str(e))}[/red]")
        if config.verbose:
            console.print_exception()
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
