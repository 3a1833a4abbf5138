"""
Main CLI application using Typer.
"""

import asyncio
import logging
from pathlib import Path
from typing import Annotated, Optional

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..adapters.file_repository import JsonClinicRepository
from ..adapters.http_repository import HttpClinicRepository
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import TimeslotError
from ..domain.models import resolve_timezone, to_millis
from ..domain.range_walker import RangeWalker
from ..domain.slot_generator import SlotGenerator
from ..services.timeslot_service import TimeslotService

app = typer.Typer(
    name="clinicslots",
    help="List bookable appointment slots for the dentists of a clinic",
    add_completion=False
)

console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_config(config_file: Optional[Path]) -> AppConfig:
    """Load the given config file, or the default one if it exists."""
    if config_file is not None:
        return AppConfig.load_from_yaml(config_file)

    default_path = get_default_config_path()
    if default_path.exists():
        return AppConfig.load_from_yaml(default_path)
    return AppConfig()


def build_service(config: AppConfig) -> TimeslotService:
    """Wire repositories and domain objects from configuration."""
    if config.api_base_url:
        repository = HttpClinicRepository(
            base_url=config.api_base_url,
            timeout=config.api_timeout_seconds
        )
    else:
        repository = JsonClinicRepository(data_file=config.data_file)

    scheduling = config.scheduling
    range_walker = RangeWalker(
        SlotGenerator(slot_width=scheduling.slot_width()),
        timezone=config.timezone,
        day_length=scheduling.day_length(),
        exclude_weekdays=scheduling.exclude_days,
        day_stepping=scheduling.day_stepping,
        close_anchor=scheduling.close_anchor,
    )

    return TimeslotService(
        clinic_repository=repository,
        dentist_repository=repository,
        range_walker=range_walker
    )


def _determine_time_range(
    *,
    tz: str,
    next_week: bool,
    start_option: Optional[str],
    end_option: Optional[str]
):
    """
    Resolve the search window from the shortcut flag or explicit dates.
    Returns (start_date, end_date).
    """
    timezone = resolve_timezone(tz)
    now = pendulum.now(timezone)

    if next_week:
        next_monday = now.next(pendulum.MONDAY).start_of("day")
        return next_monday, next_monday.add(days=6).end_of("day")

    try:
        if start_option:
            start_date = pendulum.from_format(start_option, "YYYY-MM-DD", tz=timezone).start_of("day")
        else:
            start_date = now.start_of("day")

        if end_option:
            end_date = pendulum.from_format(end_option, "YYYY-MM-DD", tz=timezone).end_of("day")
        else:
            end_date = start_date.add(days=7).end_of("day")
    except ValueError as e:
        console.print(f"[red]Could not parse date: {e}[/red]")
        raise typer.Exit(1)

    return start_date, end_date


@app.command()
def find(
    clinic: Annotated[str, typer.Argument(help="Clinic id")],
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")] = None,
    start: Annotated[Optional[str], typer.Option("--start", help="Start date (YYYY-MM-DD)")] = None,
    end: Annotated[Optional[str], typer.Option("--end", help="End date (YYYY-MM-DD)")] = None,
    data_file: Annotated[Optional[Path], typer.Option("--data", "-d", help="JSON file with clinic and dentist records")] = None,
    api_url: Annotated[Optional[str], typer.Option("--api-url", help="Base URL of a clinic records API")] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print slots or the error envelope as JSON.")] = False,
    next_week: Annotated[bool, typer.Option("--next-week", help="Search the coming week (Monday-Sunday).")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """
    Find bookable slots for every dentist of a clinic.

    Examples:

        clinicslots find 1

        clinicslots find 1 --start 2024-11-25 --end 2024-11-29

        clinicslots find 1 --next-week --json
    """
    _setup_logging(verbose)

    try:
        config = _load_config(config_file)
        overrides = {}
        if data_file is not None:
            overrides["data_file"] = data_file
        if api_url is not None:
            overrides["api_base_url"] = api_url.rstrip("/")
        if overrides:
            config = config.model_copy(update=overrides)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    start_date, end_date = _determine_time_range(
        tz=config.timezone,
        next_week=next_week,
        start_option=start,
        end_option=end
    )

    try:
        service = build_service(config)
        slots = asyncio.run(
            service.get_time_slots(clinic, to_millis(start_date), to_millis(end_date))
        )
    except TimeslotError as e:
        if as_json:
            console.print_json(data=e.to_envelope())
        else:
            console.print(f"[bold red]Error {e.code}:[/bold red] {e}")
        raise typer.Exit(1)

    if as_json:
        console.print_json(data=[slot.to_dict() for slot in slots])
        return

    console.print(
        f"\n[bold cyan]Clinic {clinic}[/bold cyan]: "
        f"{start_date.format('DD.MM.YYYY')} - {end_date.format('DD.MM.YYYY')}\n"
    )

    if not slots:
        console.print("[yellow]No bookable slots found in this range.[/yellow]\n")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Dentist", style="bold yellow")
    table.add_column("Slot")
    for slot in slots:
        table.add_row(slot.dentist, slot.format_display(config.timezone))

    console.print(table)
    console.print(f"\n[bold green]{len(slots)} slot(s) found[/bold green]\n")


@app.command()
def list_clinics(
    config_file: Optional[Path] = typer.Option(
        None,
        "--config", "-c",
        help="Path to config file"
    ),
    data_file: Optional[Path] = typer.Option(
        None,
        "--data", "-d",
        help="JSON file with clinic and dentist records"
    )
):
    """
    List all clinics in the data file.
    """
    try:
        config = _load_config(config_file)
        repository = JsonClinicRepository(data_file=data_file or config.data_file)
    except (FileNotFoundError, ValueError, TimeslotError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    clinics = repository.list_clinics()
    if not clinics:
        console.print("[yellow]No clinics defined in the data file.[/yellow]")
        return

    table = Table(
        title="Clinics",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Id", style="bold yellow")
    table.add_column("Name")
    table.add_column("Dentists", justify="right", style="dim")

    for clinic in clinics:
        table.add_row(clinic.id, clinic.name, str(repository.count_dentists(clinic.id)))

    console.print()
    console.print(table)
    console.print()


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]clinicslots[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
