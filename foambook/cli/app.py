"""
Main CLI application using Typer.
"""

import asyncio
import logging
from pathlib import Path
from typing import Annotated, List, Optional

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from ..bootstrap import Services, build_services
from ..config import load_config
from ..domain.exceptions import BookingError, NotFoundError, ValidationError

app = typer.Typer(
    name="foambook",
    help="Check party availability and price quotes",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml"),
]


def _money(cents: int) -> str:
    return f"${cents // 100:,}.{cents % 100:02d}"


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """Foambook command line."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def _load_services(config_file: Optional[Path]) -> Services:
    try:
        return build_services(load_config(config_file))
    except (FileNotFoundError, ValueError, BookingError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


def _fail(error: BookingError) -> None:
    console.print(f"[bold red]Error:[/bold red] {error.message}")
    if isinstance(error, ValidationError):
        for detail in error.details:
            console.print(f"  • {detail}")
    elif isinstance(error, NotFoundError) and error.missing_ids:
        console.print(f"  Missing: {', '.join(error.missing_ids)}")
    raise typer.Exit(1)


@app.command()
def slots(
    date: Annotated[str, typer.Argument(help="Day to inspect (YYYY-MM-DD)")],
    duration: Annotated[int, typer.Option("--duration", "-d", help="Party duration in minutes")] = 60,
    only_available: Annotated[bool, typer.Option("--available", help="Hide unavailable slots.")] = False,
    config_file: ConfigOption = None,
):
    """
    Show the slot grid for a day.

    Examples:

        foambook slots 2030-06-15
        foambook slots 2030-06-15 --duration 120 --available
    """
    services = _load_services(config_file)

    try:
        result = asyncio.run(
            services.availability.get_slots({"date": date, "durationMin": duration})
        )
    except BookingError as e:
        _fail(e)

    if result.get("message"):
        console.print(f"\n[yellow]⚠ {result['message']}[/yellow]\n")
        return

    table = Table(
        title=f"Slots on {date} ({result['timezone']}, {duration} min)",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Time", style="bold")
    table.add_column("Status")
    table.add_column("Reason", style="dim")

    shown = 0
    for slot in result["slots"]:
        if only_available and not slot["available"]:
            continue
        status = "[green]available[/green]" if slot["available"] else "[red]unavailable[/red]"
        table.add_row(slot["time"], status, slot.get("reason", ""))
        shown += 1

    console.print()
    if shown:
        console.print(table)
    else:
        console.print("[yellow]⚠ No slots found.[/yellow] Try a shorter duration or another day.")
    console.print()


@app.command()
def check(
    date: Annotated[str, typer.Argument(help="Day (YYYY-MM-DD)")],
    start_time: Annotated[str, typer.Argument(help="Start time (HH:MM)")],
    duration: Annotated[int, typer.Option("--duration", "-d", help="Party duration in minutes")] = 60,
    config_file: ConfigOption = None,
):
    """
    Check whether a single start time can be booked.
    """
    services = _load_services(config_file)
    tz = services.config.timezone

    try:
        day_start = pendulum.from_format(date, "YYYY-MM-DD", tz=tz)
        events, blocks = asyncio.run(services.availability.fetch_day(day_start))
        result = services.engine.check_availability(
            day_start.date(), start_time, duration, events, blocks
        )
    except BookingError as e:
        _fail(e)
    except ValueError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if result.is_available:
        console.print(f"\n[green]✓ {date} {start_time} is available ({duration} min)[/green]\n")
    else:
        console.print(f"\n[red]✗ {date} {start_time} is unavailable:[/red] {result.reason}\n")
        raise typer.Exit(2)


@app.command()
def quote(
    package_id: Annotated[str, typer.Argument(help="Package id")],
    street: Annotated[str, typer.Option("--street", help="Street address")],
    city: Annotated[str, typer.Option("--city", help="City")],
    state: Annotated[str, typer.Option("--state", help="2-letter state")],
    zip_code: Annotated[str, typer.Option("--zip", help="Zip code")],
    addons: Annotated[Optional[List[str]], typer.Option("--addon", "-a", help="Add-on id (repeatable)")] = None,
    event_date: Annotated[Optional[str], typer.Option("--event-date", help="Event date (YYYY-MM-DD)")] = None,
    glow_night: Annotated[bool, typer.Option("--glow-night", help="Evening glow party.")] = False,
    config_file: ConfigOption = None,
):
    """
    Price a package with add-ons for an address.

    Example:

        foambook quote starter_package_id -a extra_30min_id \\
            --street "1 Main St" --city Novi --state MI --zip 48375
    """
    services = _load_services(config_file)
    event_date = event_date or pendulum.now(services.config.timezone).to_date_string()

    try:
        result = asyncio.run(services.quotes.quote({
            "packageId": package_id,
            "addonIds": addons or [],
            "address": {"street": street, "city": city, "state": state, "zip": zip_code},
            "eventDate": event_date,
            "isGlowNight": glow_night,
        }))
    except BookingError as e:
        _fail(e)

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Item")
    table.add_column("Kind", style="dim")
    table.add_column("Price", justify="right")
    for item in result["lineItems"]:
        table.add_row(item["name"], item["kind"], _money(item["priceCents"]))

    console.print()
    console.print(table)
    console.print(Panel.fit(
        f"[bold]Total:[/bold] {_money(result['total'])}\n"
        f"[bold]Deposit:[/bold] {_money(result['depositAmount'])}\n"
        f"[bold]Balance:[/bold] {_money(result['balanceAmount'])}\n"
        f"[dim]Distance: {result['distance']:.2f} miles[/dim]",
        title="Quote"
    ))
    console.print()


@app.command()
def packages(
    config_file: ConfigOption = None,
):
    """
    List active packages and add-ons.
    """
    services = _load_services(config_file)

    table = Table(title="Packages", show_header=True, header_style="bold cyan")
    table.add_column("Id", style="bold yellow")
    table.add_column("Name")
    table.add_column("Price", justify="right")
    table.add_column("Duration", justify="right")
    table.add_column("Guests", justify="right")
    for package in services.store.list_packages():
        table.add_row(
            package.id,
            package.name,
            _money(package.base_price_cents),
            f"{package.duration_min} min",
            str(package.max_guests),
        )

    addon_table = Table(title="Add-ons", show_header=True, header_style="bold cyan")
    addon_table.add_column("Id", style="bold yellow")
    addon_table.add_column("Name")
    addon_table.add_column("Price", justify="right")
    for addon in services.store.list_addons():
        addon_table.add_row(addon.id, addon.name, _money(addon.price_cents))

    console.print()
    console.print(table)
    console.print(addon_table)
    console.print()


@app.command()
def serve(
    host: Annotated[str, typer.Option("--host", help="Bind address")] = "127.0.0.1",
    port: Annotated[int, typer.Option("--port", help="Port")] = 8000,
    config_file: ConfigOption = None,
):
    """
    Run the HTTP API.
    """
    import uvicorn

    from ..api import create_app

    services = _load_services(config_file)
    uvicorn.run(create_app(services=services), host=host, port=port)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]foambook[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
