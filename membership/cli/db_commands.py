"""Database management CLI commands."""

import typer
from rich.console import Console
from rich.prompt import Confirm
from sqlalchemy.exc import SQLAlchemyError

from membership.app.core.services.database.db_manage import DbManageService
from membership.app.core.services.database.db_session import DbSessionService
from membership.app.runtime.context import get_config

console = Console()

db_app = typer.Typer(help="Create or drop the membership database schema")


@db_app.command("init")
def init_db() -> None:
    """Create all tables."""
    url = get_config().database.url
    try:
        DbManageService(DbSessionService().engine).create_all()
    except SQLAlchemyError as e:
        console.print(f"[red]❌ Failed to initialize database: {e}[/red]")
        raise typer.Exit(code=1) from e
    console.print(f"[green]✅ Database initialized at {url}[/green]")


@db_app.command("drop")
def drop_db(
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation prompt"),
) -> None:
    """Drop all tables."""
    if get_config().app.environment == "production":
        console.print("[red]❌ Refusing to drop tables in production[/red]")
        raise typer.Exit(code=1)

    if not force and not Confirm.ask("Drop all membership tables?"):
        console.print("[yellow]Aborted[/yellow]")
        return

    try:
        DbManageService(DbSessionService().engine).drop_all()
    except SQLAlchemyError as e:
        console.print(f"[red]❌ Failed to drop tables: {e}[/red]")
        raise typer.Exit(code=1) from e
    console.print("[green]✅ All tables dropped[/green]")
