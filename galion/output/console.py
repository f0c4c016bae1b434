# Galion Console Output
# Rich-based console output for the non-interactive commands

import random
from typing import Optional

from rich.console import Console as RichConsole
from rich.panel import Panel
from rich.table import Table

from galion.jobs.model import JobStatus
from galion.remotes.model import RemoteConfiguration

SHIP = r"""    _~
 _~ )_)_~
 )_))_))_)
 _!__!__!_
 \______t/"""

WAVES = "~~~~~~~~~~~~"


def logo(rng: Optional[random.Random] = None) -> str:
    """The ship banner; now and then a wave breaks."""
    rng = rng or random.Random()
    chars = list(WAVES)
    if rng.randint(0, 9) > 5:
        idx = rng.randint(2, len(chars) - 4)
        chars[idx : idx + 3] = ["-", "=", "-"]
    return f"{SHIP}\n{''.join(chars)}"


class Console:
    """
    Console output manager using Rich.

    Provides formatted output for remotes and jobs.
    """

    def __init__(self, *, verbose: bool = False, colored: bool = True):
        """
        Initialize console.

        Args:
            verbose: Enable verbose output.
            colored: Enable colored output.
        """
        self.verbose = verbose
        self._console = RichConsole(no_color=not colored)

    @property
    def rich(self) -> RichConsole:
        """The wrapped rich console."""
        return self._console

    def print(self, *args, **kwargs) -> None:
        """Print to console."""
        self._console.print(*args, **kwargs)

    def print_error(self, message: str) -> None:
        """Print error message."""
        self._console.print(f"[red]Error:[/red] {message}", highlight=False)

    def print_warning(self, message: str) -> None:
        """Print warning message."""
        self._console.print(f"[yellow]Warning:[/yellow] {message}", highlight=False)

    def print_success(self, message: str) -> None:
        """Print success message."""
        self._console.print(f"[green]{message}[/green]", highlight=False)

    def print_info(self, message: str) -> None:
        """Print info message."""
        self._console.print(f"[blue]{message}[/blue]", highlight=False)

    def print_banner(self) -> None:
        """Print the galion ship."""
        self._console.print(logo(), style="cyan", highlight=False)

    def print_remotes(self, remotes: list[RemoteConfiguration]) -> None:
        """
        Print the remotes table.

        Args:
            remotes: Remotes in display order.
        """
        if not remotes:
            self._console.print("[dim]No remotes configured[/dim]")
            return

        table = Table(show_header=True, header_style="bold")
        table.add_column("Name", style="cyan")
        table.add_column("Source")
        table.add_column("Destination")
        table.add_column("Origin", style="dim")

        for remote in remotes:
            origin = "rclone" if remote.is_discovered else "galion"
            table.add_row(*remote.to_table_row(), origin)

        self._console.print(table)

    def print_jobs(self, jobs: dict[int, Optional[JobStatus]]) -> None:
        """
        Print rclone jobs with their status.

        Args:
            jobs: Job id to status, None when the status could not be fetched.
        """
        if not jobs:
            self._console.print("[dim]No rclone jobs[/dim]")
            return

        table = Table(show_header=True, header_style="bold")
        table.add_column("Job", justify="right")
        table.add_column("Status")
        table.add_column("Started", style="dim")
        table.add_column("Duration", justify="right")
        table.add_column("Error", style="red")

        for job_id, status in sorted(jobs.items()):
            if status is None:
                table.add_row(str(job_id), "[dim]unknown[/dim]", "", "", "")
                continue
            table.add_row(
                str(job_id),
                self._status_label(status),
                status.start_time,
                f"{status.duration_seconds:.1f}s",
                status.error,
            )

        self._console.print(table)

    @staticmethod
    def _status_label(status: JobStatus) -> str:
        if not status.finished:
            return "[yellow]running[/yellow]"
        if status.success:
            return "[green]success[/green]"
        return "[red]failed[/red]"

    def print_job_result(self, name: str, job_id: int, status: JobStatus) -> None:
        """Print the outcome of one finished job."""
        if status.success:
            body = f"[green]Sync completed[/green]\nJob: {job_id}\nDuration: {status.duration_seconds:.1f}s"
            border = "green"
        else:
            body = (
                f"[red]Sync failed[/red]\nJob: {job_id}\nDuration: {status.duration_seconds:.1f}s\n"
                f"Error: {status.error}"
            )
            border = "red"
        self._console.print(Panel(body, title=name, border_style=border))

    def print_config_summary(self, config_path: str, remotes_count: int, rc_url: str) -> None:
        """Print configuration summary."""
        self._console.print(
            Panel(
                f"Config: {config_path}\nRemotes: {remotes_count}\nrclone rc: {rc_url}",
                title="Galion Configuration",
                border_style="blue",
            )
        )


def create_console(*, verbose: bool = False, colored: bool = True) -> Console:
    """
    Create a console instance.

    Args:
        verbose: Enable verbose output.
        colored: Enable colored output.

    Returns:
        Console instance.
    """
    return Console(verbose=verbose, colored=colored)
