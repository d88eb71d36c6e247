"""CLI command for the cd2mka application."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from ..core.config import AppInfo
from ..core.exceptions import Cd2MkaError
from ..core.logging import setup_logging
from ..extraction.services import DiscRipper
from ..metadata.providers import DiscogsMetadataProvider, InteractiveMetadataProvider
from ..processing.services import RipWorkflow
from .display import InteractivePrompts, RipDisplay

# Initialize Rich console and Typer app
console = Console()
app = typer.Typer(
    name=AppInfo.NAME,
    help=AppInfo.DESCRIPTION,
    rich_markup_mode="rich",
    add_completion=False,
)

# Initialize display components
display = RipDisplay(console)
prompts = InteractivePrompts(console)


def handle_error(error: Exception) -> None:
    """Centralized error handling."""
    if isinstance(error, Cd2MkaError):
        display.show_error_message(error.message)
        if error.details:
            console.print(f"[dim]Details: {error.details}[/dim]")
    else:
        display.show_error_message(f"Unexpected error: {str(error)}")

    raise typer.Exit(1)


@app.command()
def rip(
    device: str = typer.Argument(help="CD-ROM device, e.g. /dev/sr0"),
    cover: Path = typer.Argument(
        help="Album art (JPEG) to attach",
        exists=True,
        dir_okay=False,
        readable=True,
    ),
    output: Path = typer.Argument(help="Matroska audio file to write"),
    release_id: Optional[int] = typer.Option(
        None, "--release-id", "-r", help="Take names from this Discogs release"
    ),
    title: Optional[str] = typer.Option(
        None, "--title", "-t", help="Container title (default: 'Artist: Album')"
    ),
    log_dir: Optional[Path] = typer.Option(
        None, "--log-dir", help="Keep cdparanoia/flac logs in this directory"
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite the output file without asking"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose output"
    ),
):
    """Rip a CD into a single tagged, chaptered Matroska audio file."""
    setup_logging(verbose)
    display.show_app_header()

    if output.exists() and not force:
        if not prompts.confirm(f"{output} exists. Overwrite?", default=False):
            raise typer.Exit(1)

    try:
        if release_id is not None:
            provider = DiscogsMetadataProvider(release_id)
        else:
            provider = InteractiveMetadataProvider(prompts, display)

        workflow = RipWorkflow(
            provider,
            ripper=DiscRipper(log_dir=log_dir),
            status=display.status,
        )
        disc = workflow.run(device, cover, output, title=title)

    except Cd2MkaError as e:
        handle_error(e)

    if verbose:
        display.show_chapters(disc)
    display.show_result(disc, output)
