"""
Main CLI application using Typer.
"""

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from ..adapters.booking_api_client import BookingAPIClient
from ..adapters.fixture_repository import FixtureScheduleRepository
from ..adapters.lookup_cache import LookupCache
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import BarbersyncError
from ..domain.models import AvailabilityResult
from ..logging_config import configure_logging
from ..services.availability_service import AvailabilityService, ScheduleRepositoryProtocol

app = typer.Typer(
    name="barbersync",
    help="Compute bookable time slots for barbershop professionals",
    add_completion=False
)

console = Console()

WEEKDAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml"),
]
FixtureOption = Annotated[
    Optional[Path],
    typer.Option("--fixture", "-f", help="Read schedules from a YAML/JSON fixture instead of the API."),
]


def _load_config(config_file: Optional[Path], fixture: Optional[Path]) -> AppConfig:
    """
    Load the configuration, letting ``--fixture`` stand in for a missing file.
    """
    config_path = config_file or get_default_config_path()
    if fixture is not None and not config_path.exists():
        return AppConfig(fixture_path=fixture)

    config = AppConfig.load_from_yaml(config_path)
    if fixture is not None:
        config.fixture_path = fixture
    return config


def build_repository(config: AppConfig) -> ScheduleRepositoryProtocol:
    """Pick the data source: a fixture file wins over the booking API."""
    if config.fixture_path is not None:
        return FixtureScheduleRepository.from_file(
            config.fixture_path,
            default_timezone=config.timezone,
        )

    api = config.api
    cache = LookupCache(ttl_seconds=api.cache_ttl_seconds, max_entries=api.cache_max_entries)
    return BookingAPIClient(
        base_url=api.base_url,
        tenant=api.tenant,
        access_token=api.access_token,
        timeout=api.timeout_seconds,
        cache=cache,
        default_timezone=config.timezone,
    )


def _build_service(config_file: Optional[Path], fixture: Optional[Path]) -> tuple[AppConfig, AvailabilityService]:
    config = _load_config(config_file, fixture)
    configure_logging(config.log_level)
    return config, AvailabilityService(repository=build_repository(config))


def _print_details(result: AvailabilityResult) -> None:
    table = Table(
        title=f"Slots for professional {result.professional_id}",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Time", style="bold")
    table.add_column("Status")
    table.add_column("Conflicts", style="dim")

    for detail in result.slot_details:
        if detail.available:
            status = "[green]available[/green]"
        elif detail.is_past:
            status = "[dim]past[/dim]"
        elif detail.lunch_break:
            status = "[yellow]lunch break[/yellow]"
        else:
            status = "[red]booked[/red]"
        conflicts = ", ".join(f"#{c}" for c in detail.conflicts) if detail.conflicts else ""
        table.add_row(detail.time, status, conflicts)

    console.print(table)


@app.command()
def slots(
    professional_id: Annotated[int, typer.Argument(help="Professional id")],
    day: Annotated[str, typer.Argument(metavar="DATE", help="Day to check (YYYY-MM-DD)")],
    config_file: ConfigOption = None,
    fixture: FixtureOption = None,
    details: Annotated[bool, typer.Option("--details", help="Show every candidate slot with its status.")] = False,
):
    """
    Show the bookable slots of a professional on a day.

    Examples:

        barbersync slots 3 2024-11-25

        barbersync slots 3 2024-11-25 --fixture sample_data/demo_shop.yaml --details
    """
    try:
        _, service = _build_service(config_file, fixture)
        result = service.get_available_slots(professional_id=professional_id, day=day)
    except (FileNotFoundError, BarbersyncError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    weekday = WEEKDAY_NAMES[result.day_of_week]
    console.print(f"\n[bold cyan]{weekday}, {result.date.isoformat()}[/bold cyan]")

    if result.message:
        console.print(f"[yellow]⚠ {result.message}[/yellow]\n")
        return

    if details:
        _print_details(result)

    if not result.available_slots:
        console.print("[yellow]⚠ No available slots on this day.[/yellow]\n")
        return

    console.print(f"[bold green]✓ {len(result.available_slots)} available slot(s):[/bold green]")
    console.print("  " + "  ".join(result.available_slots) + "\n")


@app.command()
def shop_hours(
    config_file: ConfigOption = None,
    fixture: FixtureOption = None,
):
    """
    Show the barbershop opening hours.
    """
    try:
        _, service = _build_service(config_file, fixture)
        settings = service.get_barbershop_settings()
    except (FileNotFoundError, BarbersyncError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    table = Table(title="Opening hours", show_header=True, header_style="bold cyan")
    table.add_column("Day", style="bold yellow")
    table.add_column("Hours")

    for number, name in enumerate(WEEKDAY_NAMES):
        if settings.is_open_on(number):
            hours = f"{settings.open_time:%H:%M} - {settings.close_time:%H:%M}"
        else:
            hours = "[dim]closed[/dim]"
        table.add_row(name, hours)

    console.print()
    console.print(table)
    console.print(f"[dim]Timezone: {settings.timezone}[/dim]\n")


@app.command()
def serve(
    config_file: ConfigOption = None,
    fixture: FixtureOption = None,
    host: Annotated[Optional[str], typer.Option("--host", help="Bind address")] = None,
    port: Annotated[Optional[int], typer.Option("--port", "-p", help="Bind port")] = None,
):
    """
    Serve the availability API over HTTP.
    """
    import uvicorn

    from ..api.app import create_app

    try:
        config, service = _build_service(config_file, fixture)
    except (FileNotFoundError, BarbersyncError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    uvicorn.run(
        create_app(service),
        host=host or config.server.host,
        port=port or config.server.port,
        log_level=config.log_level.lower(),
    )


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]barbersync[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
