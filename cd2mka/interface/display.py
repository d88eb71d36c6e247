"""Rich console display components for the cd2mka application."""

from contextlib import contextmanager
from pathlib import Path
from typing import Optional

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..core.config import AppInfo
from ..extraction.models import Disc
from ..metadata.chapters import chapters_for_disc


class RipDisplay:
    """Handles all rich console output for a rip."""

    def __init__(self, console: Optional[Console] = None):
        """Initialize with optional console instance."""
        self.console = console or Console()

    def show_app_header(self) -> None:
        """Display application header with branding."""
        header_text = Text()
        header_text.append(AppInfo.NAME.upper(), style="bold blue")
        header_text.append(f" v{AppInfo.VERSION}", style="dim")
        header_text.append(f"\n{AppInfo.DESCRIPTION}", style="italic")

        panel = Panel(Align.center(header_text), border_style="blue", padding=(1, 2))
        self.console.print(panel)

    def show_disc(self, disc: Disc) -> None:
        """Display the disc's track geometry."""
        table = Table(title=f"Disc in {disc.device}")
        table.add_column("Track", justify="right", style="cyan", no_wrap=True)
        table.add_column("Duration", justify="right", style="green")
        table.add_column("Samples", justify="right", style="yellow")

        for track in disc.tracks:
            table.add_row(f"{track.index:02d}", track.duration_str, str(track.sample_length))

        self.console.print(table)
        self.console.print(
            f"[green]{len(disc.tracks)} track(s), {disc.duration_str} total[/green]"
        )

    def show_chapters(self, disc: Disc) -> None:
        """Display the chapter points that will be written."""
        table = Table(title="Chapters")
        table.add_column("#", justify="right", style="cyan", no_wrap=True)
        table.add_column("Start", style="yellow")
        table.add_column("Name", style="magenta")

        for chapter in chapters_for_disc(disc):
            table.add_row(f"{chapter.index:02d}", chapter.timestamp, chapter.name)

        self.console.print(table)

    def show_result(self, disc: Disc, output: Path) -> None:
        """Display the finished output file."""
        self.show_success_message(
            f"Wrote {output} ({len(disc.tracks)} chapters, {disc.duration_str})"
        )

    def show_success_message(self, message: str) -> None:
        """Display a success message."""
        self.console.print(f"[green]✓ {message}[/green]")

    def show_error_message(self, message: str) -> None:
        """Display an error message."""
        self.console.print(f"[red]✗ {message}[/red]")

    @contextmanager
    def status(self, description: str):
        """Spinner shown while the flow blocks on a long step."""
        with self.console.status(f"[blue]{description}[/blue]"):
            yield
        self.console.print(f"[dim]✓ {description.replace('...', ' done')}[/dim]")


class InteractivePrompts:
    """Handles interactive user prompts with rich formatting."""

    def __init__(self, console: Optional[Console] = None):
        """Initialize with optional console instance."""
        self.console = console or Console()

    def confirm(self, message: str, default: bool = True) -> bool:
        """Ask for yes/no confirmation."""
        suffix = " [Y/n]" if default else " [y/N]"
        response = (
            self.console.input(f"[yellow]{message}{suffix}:[/yellow] ").strip().lower()
        )

        if not response:
            return default

        return response in ("y", "yes", "true", "1")

    def get_text_input(self, prompt: str, default: str = "") -> str:
        """Get text input from user."""
        if default:
            prompt += f" [{default}]"

        response = self.console.input(f"[cyan]{prompt}:[/cyan] ").strip()
        return response or default
