#!/usr/bin/env python
# Console UI utilities
from typing import Optional
from rich.console import Console
from rich.prompt import Confirm
from rich.panel import Panel
from rich.text import Text
from rich.table import Table

from treasure_hunt.schemas.catalog import TreasureResponse
from treasure_hunt.schemas.progress import CatalogProgress, Progress, TreasureListResponse

# Initialize Rich console
console = Console()


def show_title(title: str, subtitle: Optional[str] = None, style="bold cyan"):
    """Display a title panel"""
    title_text = Text(title, style=style)
    console.print(Panel(title_text, expand=False))

    if subtitle:
        console.print(f"\n{subtitle}\n")


def show_error(message: str):
    """Display an error message"""
    console.print(f"[bold red]Error:[/bold red] {message}")


def show_success(message: str):
    """Display a success message"""
    console.print(f"[bold green]Success:[/bold green] {message}")


def show_warning(message: str):
    """Display a warning message"""
    console.print(f"[bold yellow]Warning:[/bold yellow] {message}")


def show_info(message: str):
    """Display an info message"""
    console.print(f"[bold blue]Info:[/bold blue] {message}")


def confirm_action(prompt: str, default: bool = False) -> bool:
    """Ask for confirmation before performing an action"""
    return Confirm.ask(prompt, default=default)


def format_progress(progress: Progress) -> str:
    style = "green" if progress.total and progress.collected == progress.total else "cyan"
    return f"[{style}]{progress.collected} / {progress.total}[/{style}]"


def display_catalog_progress(catalog: CatalogProgress):
    """Collection book: one row per sub-zone, grouped by zone"""
    table = Table(title=f"Collection book  {format_progress(catalog.progress)}")
    table.add_column("Zone", style="bold magenta")
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Area", style="cyan")
    table.add_column("Found", justify="right")

    for zone in catalog.zones:
        if not zone.sub_zones:
            table.add_row(zone.code, "", "[dim]no areas[/dim]", format_progress(zone.progress))
        for index, sub_zone in enumerate(zone.sub_zones):
            table.add_row(
                zone.code if index == 0 else "",
                str(sub_zone.id),
                sub_zone.name,
                format_progress(sub_zone.progress),
            )

    console.print(table)


def display_treasure_list(listing: TreasureListResponse):
    """Treasures of one sub-zone, hidden until collected"""
    table = Table(title=f"{listing.zone_code} > {listing.sub_zone.name}  {format_progress(listing.progress)}")
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Treasure")
    table.add_column("Status", justify="center")

    for treasure in listing.items:
        if treasure.is_collected:
            table.add_row(str(treasure.id), f"[bold]{treasure.name}[/bold]", "[green]found[/green]")
        else:
            table.add_row(str(treasure.id), "[dim]???[/dim]", "[dim]hidden[/dim]")

    console.print(table)


def show_treasure_result(treasure: TreasureResponse):
    """Result dialog shown after a collection"""
    body = (
        f"[bold cyan]{treasure.name}[/bold cyan]\n"
        f"[dim]ID: {treasure.id}[/dim]"
    )
    if treasure.image_ref:
        body += f"\n[dim]Image: {treasure.image_ref}[/dim]"
    console.print(Panel(body, title="Congratulations!", border_style="green", expand=False))
