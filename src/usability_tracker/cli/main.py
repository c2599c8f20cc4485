"""CLI commands for the Usability Tracker using Typer."""

from __future__ import annotations

import logging
import time
from datetime import datetime
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from usability_tracker import __version__
from usability_tracker.core.config import Config, get_config
from usability_tracker.storage.log_reader import EntryKind, LogEntry, find_log_files, read_log

# Initialize Typer app
app = typer.Typer(
    name="usability-tracker",
    help="Detect low discoverability from screen navigation and inspect tracker logs.",
    add_completion=False,
)

console = Console()


def setup_logging(log_level: str, log_file: Path | None = None) -> None:
    """Configure logging for the application."""
    level = getattr(logging, log_level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler()]

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )


def _load_config(data_dir: Path | None) -> Config:
    config = get_config()
    if data_dir is not None:
        config = config.model_copy(update={"data_dir": data_dir})
    return config


def format_timestamp(timestamp: int) -> str:
    return datetime.fromtimestamp(timestamp).strftime("%Y-%m-%d %H:%M:%S")


def describe_entry(entry: LogEntry) -> str:
    """Human readable summary of a log entry."""
    if entry.kind == EntryKind.VIEW:
        return entry.screen_id or ""
    if entry.kind == EntryKind.QUESTIONNAIRE1:
        history = ", ".join(f"{e.screen_id} ({e.retention_time}s)" for e in entry.history)
        return f"rating {entry.rating:.2f} after: {history or '-'}"
    if entry.kind == EntryKind.QUESTIONNAIRE2:
        return f"looking for: {entry.freetext!r}"
    return ""


class SimulatedClock:
    """Clock that only moves when told to."""

    def __init__(self, start: float | None = None):
        self.now = time.time() if start is None else start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@app.command()
def logs(
    data_dir: Path = typer.Option(None, "--data-dir", "-d", help="Directory holding tracker logs"),
) -> None:
    """List tracker log files."""
    config = _load_config(data_dir)
    files = find_log_files(config.data_dir)

    if not files:
        console.print(f"[yellow]No tracker logs found in {config.data_dir}[/yellow]")
        raise typer.Exit(1)

    table = Table(title="Tracker Logs", show_header=True, header_style="bold cyan")
    table.add_column("File")
    table.add_column("Started")
    table.add_column("Entries", justify="right")
    table.add_column("Surveys", justify="right")

    for path in files:
        entries = read_log(path)
        started = path.stem.rsplit("-", 1)[-1]
        started_text = format_timestamp(int(started)) if started.isdigit() else "?"
        surveys = sum(1 for e in entries if e.kind == EntryKind.QUESTIONNAIRE1)
        table.add_row(path.name, started_text, str(len(entries)), str(surveys))

    console.print(table)


@app.command()
def show(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Tracker log file"),
    surveys: bool = typer.Option(False, "--surveys", "-s", help="Only show survey answers"),
) -> None:
    """Show the entries of a tracker log."""
    entries = read_log(path)
    if surveys:
        entries = [e for e in entries if e.is_survey]

    table = Table(title=path.name, show_header=True, header_style="bold cyan")
    table.add_column("Time")
    table.add_column("Event")
    table.add_column("Details")

    for entry in entries:
        table.add_row(format_timestamp(entry.timestamp), entry.kind.value, describe_entry(entry))

    console.print(table)
    console.print(f"{len(entries)} entries")


@app.command()
def simulate(
    screens: list[str] = typer.Argument(..., help="Screen ids to visit in order"),
    dwell: float = typer.Option(2.0, "--dwell", help="Seconds spent on each screen"),
    data_dir: Path = typer.Option(None, "--data-dir", "-d", help="Directory for the tracker log"),
    log_level: str = typer.Option("WARNING", "--log-level", "-l", help="Log level"),
) -> None:
    """Replay a navigation path through a tracker and answer surveys here."""
    from usability_tracker.cli.presenter import ConsoleSurveyPresenter
    from usability_tracker.core.tracker import UsabilityTracker

    config = _load_config(data_dir)
    config.ensure_directories()
    setup_logging(log_level, config.log_dir / "usability-tracker.log")
    clock = SimulatedClock()

    tracker = UsabilityTracker(
        config=config,
        presenter=ConsoleSurveyPresenter(console),
        clock=clock,
    )

    try:
        tracker.app_activate()
        for index, screen_id in enumerate(screens):
            if index:
                clock.advance(dwell)
            result = tracker.enter_view(screen_id)

            flags = []
            if result.low_retention:
                flags.append("low retention")
            if result.has_loop:
                flags.append("loop")
            suffix = f" [yellow]({', '.join(flags)})[/yellow]" if flags else ""
            console.print(f"-> {screen_id}{suffix}")
        tracker.app_deactivate()
    finally:
        tracker.close()

    console.print(f"[green]Log written to {tracker.audit_log.path}[/green]")


@app.command()
def config_show() -> None:
    """Show current configuration."""
    config = get_config()

    table = Table(title="Usability Tracker Configuration", show_header=True, header_style="bold cyan")
    table.add_column("Setting")
    table.add_column("Value")

    # Paths
    table.add_row("[bold]Paths[/bold]", "")
    table.add_row("  Data Directory", str(config.data_dir))
    table.add_row("  Log Directory", str(config.log_dir))
    table.add_row("  Config File", str(config.config_file))

    # Tracking
    table.add_row("[bold]Tracking[/bold]", "")
    table.add_row("  History Size", str(config.tracking.history_size))
    table.add_row("  Low Retention Threshold", f"{config.tracking.low_retention_threshold_seconds}s")
    table.add_row("  Sync Writes", str(config.tracking.sync_writes))

    # Survey
    table.add_row("[bold]Survey[/bold]", "")
    table.add_row("  Enabled", str(config.survey.enabled))
    table.add_row(
        "  Rating Range",
        f"{config.survey.rating_min:g}-{config.survey.rating_max:g} (default {config.survey.rating_default:g})",
    )
    table.add_row("  Follow-up Threshold", f"{config.survey.followup_threshold:g}")

    console.print(table)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"Usability Tracker v{__version__}")


@app.callback()
def main_callback() -> None:
    """Usability Tracker - low discoverability detection for app navigation."""
    pass


if __name__ == "__main__":
    app()
