"""
Main CLI application using Typer.
"""

import asyncio
import logging
from pathlib import Path
from typing import Annotated, Optional, Tuple

import pendulum
import typer
from pendulum import DateTime
from rich.console import Console
from rich.table import Table

from ..adapters.snapshot_loader import JsonSnapshotSource
from ..config import AppConfig, get_default_config_path
from ..domain.booking_status import to_calendar_events
from ..domain.exceptions import BookableError
from ..domain.models import CalendarEventKind, TimeRange
from ..services.availability_finder import AvailabilityFinderService

app = typer.Typer(
    name="bookable",
    help="Find bookable dates and time slots from availability, bookings and busy times",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml"),
]
SnapshotOption = Annotated[
    Optional[Path],
    typer.Option("--snapshot", "-s", help="Path to the JSON snapshot. Defaults to the configured snapshot_path"),
]
NowOption = Annotated[
    Optional[str],
    typer.Option("--now", help="Treat this instant as the current time (ISO 8601)"),
]
DurationOption = Annotated[
    Optional[int],
    typer.Option("--duration", "-d", help="Slot duration in minutes"),
]

EVENT_STYLES = {
    CalendarEventKind.AVAILABILITY: "green",
    CalendarEventKind.BUSY: "yellow",
    CalendarEventKind.BOOKED: "cyan",
}


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """
    Bookable - compute which dates and slots can still be booked.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _load_config(config_file: Optional[Path]) -> Tuple[AppConfig, Path]:
    """
    Load the configuration, falling back to defaults when no config.yaml exists.

    An explicitly given config file must exist.
    """
    config_path = config_file or get_default_config_path()

    if config_file is None and not config_path.exists():
        return AppConfig(), Path.cwd()

    return AppConfig.load_from_yaml(config_path), config_path.parent


def _build_service(
    config: AppConfig,
    base_dir: Path,
    snapshot: Optional[Path],
    now: Optional[DateTime],
) -> AvailabilityFinderService:
    snapshot_path = snapshot or config.resolve_snapshot_path(base_dir)
    source = JsonSnapshotSource(snapshot_path=snapshot_path, timezone=config.timezone)

    if now is None:
        clock = pendulum.now
    else:
        clock = lambda tz: now  # noqa: E731

    return AvailabilityFinderService(
        source,
        timezone=config.timezone,
        clock=clock,
        merge_overlapping_windows=config.merge_overlapping_windows,
    )


def _parse_day(value: str, tz: str, label: str) -> DateTime:
    try:
        return pendulum.from_format(value, "YYYY-MM-DD", tz=tz)
    except ValueError as e:
        console.print(f"[red]Error parsing {label}: {e}[/red]")
        raise typer.Exit(1)


def _parse_now(value: Optional[str], tz: str) -> Optional[DateTime]:
    if value is None:
        return None
    try:
        parsed = pendulum.parse(value, tz=tz)
    except ValueError as e:
        console.print(f"[red]Error parsing --now: {e}[/red]")
        raise typer.Exit(1)
    if not isinstance(parsed, DateTime):
        console.print(f"[red]Error parsing --now: not a date-time: {value}[/red]")
        raise typer.Exit(1)
    return parsed


@app.command()
def dates(
    config_file: ConfigOption = None,
    snapshot: SnapshotOption = None,
    start: Annotated[Optional[str], typer.Option("--start", help="Start date (YYYY-MM-DD)")] = None,
    end: Annotated[Optional[str], typer.Option("--end", help="End date (YYYY-MM-DD)")] = None,
    duration: DurationOption = None,
    now: NowOption = None,
):
    """
    List the dates that still have at least one free slot.

    Examples:

        bookable dates
        bookable dates --start 2024-11-25 --end 2024-11-29 --duration 60
        bookable dates --snapshot data/snapshot.json --now 2024-11-25T08:00
    """
    try:
        config, base_dir = _load_config(config_file)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    tz = config.timezone
    current = _parse_now(now, tz)
    reference = current or pendulum.now(tz)

    start_date = _parse_day(start, tz, "start date") if start else reference.start_of("day")
    if end:
        end_date = _parse_day(end, tz, "end date").end_of("day")
    else:
        end_date = start_date.add(days=config.defaults.lookahead_days).end_of("day")

    min_duration = duration if duration is not None else config.defaults.duration_minutes
    service = _build_service(config, base_dir, snapshot, current)

    try:
        available = asyncio.run(
            service.find_dates(start_date=start_date, end_date=end_date, duration_minutes=min_duration)
        )
    except BookableError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    console.print()
    if not available:
        console.print(
            "[yellow]⚠ No available dates found.[/yellow]\n"
            "Try a longer date range or a shorter slot duration."
        )
    else:
        console.print(f"[bold green]✓ {len(available)} available date(s):[/bold green]\n")
        for label in available:
            day = pendulum.from_format(label, "YYYY-MM-DD", tz=tz)
            console.print(f"  {label} ({day.format('dddd')})")
    console.print()


@app.command()
def slots(
    date: Annotated[str, typer.Argument(help="Date to inspect (YYYY-MM-DD)")],
    config_file: ConfigOption = None,
    snapshot: SnapshotOption = None,
    duration: DurationOption = None,
    now: NowOption = None,
):
    """
    List the free slots on a single date.

    Examples:

        bookable slots 2024-11-25
        bookable slots 2024-11-25 --duration 45 --now 2024-11-25T08:00
    """
    try:
        config, base_dir = _load_config(config_file)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    tz = config.timezone
    day = _parse_day(date, tz, "date")
    min_duration = duration if duration is not None else config.defaults.duration_minutes
    service = _build_service(config, base_dir, snapshot, _parse_now(now, tz))

    try:
        free_slots = asyncio.run(service.find_slots(date=day, duration_minutes=min_duration))
    except BookableError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    console.print()
    if not free_slots:
        console.print(f"[yellow]⚠ No free slots on {date}.[/yellow]")
    else:
        console.print(f"[bold green]✓ {len(free_slots)} free slot(s):[/bold green]\n")
        for slot in free_slots:
            console.print(f"  {slot.format_display()}")
    console.print()


@app.command()
def events(
    date: Annotated[str, typer.Argument(help="Date to show (YYYY-MM-DD)")],
    config_file: ConfigOption = None,
    snapshot: SnapshotOption = None,
):
    """
    Show availability, busy and booked blocks for a date.
    """
    try:
        config, base_dir = _load_config(config_file)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    day = _parse_day(date, config.timezone, "date")
    service = _build_service(config, base_dir, snapshot, None)

    try:
        data = asyncio.run(
            service.fetch_snapshot(TimeRange(start=day.start_of("day"), end=day.end_of("day")))
        )
    except BookableError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    calendar_events = to_calendar_events(data.availability, data.bookings, data.busy_intervals)
    if not calendar_events:
        console.print(f"[yellow]Nothing scheduled on {date}.[/yellow]")
        return

    table = Table(title=f"Calendar {date}", show_header=True, header_style="bold cyan")
    table.add_column("Kind")
    table.add_column("Start")
    table.add_column("End")
    table.add_column("Label")
    table.add_column("Guest status", style="dim")

    for event in calendar_events:
        style = EVENT_STYLES[event.kind]
        table.add_row(
            f"[{style}]{event.kind.value}[/{style}]",
            event.start.format("HH:mm"),
            event.end.format("HH:mm"),
            event.label,
            event.guest_status.value if event.guest_status else "",
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def show_config(config_file: ConfigOption = None):
    """
    Show the effective configuration.
    """
    try:
        config, base_dir = _load_config(config_file)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    table = Table(title="Configuration", show_header=True, header_style="bold cyan")
    table.add_column("Setting", style="bold yellow")
    table.add_column("Value")

    table.add_row("timezone", config.timezone)
    table.add_row("duration_minutes", str(config.defaults.duration_minutes))
    table.add_row("lookahead_days", str(config.defaults.lookahead_days))
    table.add_row("snapshot_path", str(config.resolve_snapshot_path(base_dir)))
    table.add_row("merge_overlapping_windows", str(config.merge_overlapping_windows))

    console.print()
    console.print(table)
    console.print()


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]bookable[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
