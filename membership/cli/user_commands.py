"""Member administration CLI commands."""

import typer
from rich.console import Console
from rich.table import Table
from sqlalchemy.exc import SQLAlchemyError

from membership.app.core.security import (
    hash_password,
    membership_id_from_email,
    normalize_email,
)
from membership.app.core.services.database.db_session import DbSessionService
from membership.app.entities.core.user import (
    MembershipFee,
    MembershipStatus,
    Role,
    User,
    UserRepository,
)

console = Console()

users_app = typer.Typer(help="Inspect and administer members")


def _users_table(title: str, users: list[User]) -> Table:
    table = Table(title=title)
    table.add_column("ID", style="cyan")
    table.add_column("Email", style="blue")
    table.add_column("Company", style="magenta")
    table.add_column("Role", style="green")
    table.add_column("Status", style="yellow")
    table.add_column("Referee 1")
    table.add_column("Referee 2")

    for user in users:
        table.add_row(
            user.id,
            user.email,
            user.company or "",
            user.role.value,
            f"{user.membership_status.value}/{user.membership_fee.value}",
            f"{user.referrer1 or '-'} {'✅' if user.referred1 else '❌'}",
            f"{user.referrer2 or '-'} {'✅' if user.referred2 else '❌'}",
        )
    return table


@users_app.command("list")
def list_users() -> None:
    """List all members."""
    with DbSessionService().session_scope() as session:
        users = UserRepository(session).list_all()

    if not users:
        console.print("[yellow]No users found[/yellow]")
        return

    console.print(_users_table("Members", users))
    console.print(f"\n[green]Found {len(users)} users[/green]")


@users_app.command("pending")
def list_pending() -> None:
    """List applicants still waiting on a referee."""
    with DbSessionService().session_scope() as session:
        users = UserRepository(session).list_pending()

    if not users:
        console.print("[green]No applicants awaiting referees[/green]")
        return

    console.print(_users_table("Awaiting referees", users))


@users_app.command("create-admin")
def create_admin(
    email: str = typer.Option(..., "--email", "-e", help="Email address"),
    password: str = typer.Option(
        ..., "--password", "-p", prompt=True, hide_input=True, confirmation_prompt=True
    ),
    company: str = typer.Option("", "--company", "-c", help="Company name"),
) -> None:
    """Create an active, paid administrator account."""
    email = normalize_email(email)
    try:
        with DbSessionService().session_scope() as session:
            repo = UserRepository(session)
            created = None if repo.email_exists(email) else repo.create(
                User(
                    email=email,
                    password=hash_password(password),
                    membership_id=membership_id_from_email(email),
                    company=company or None,
                    role=Role.ADMIN,
                    membership_status=MembershipStatus.ACTIVE,
                    membership_fee=MembershipFee.PAID,
                    referred1=True,
                    referred2=True,
                )
            )
    except SQLAlchemyError as e:
        console.print(f"[red]❌ Failed to create admin: {e}[/red]")
        raise typer.Exit(code=1) from e

    if created is None:
        console.print(f"[red]❌ A user with email '{email}' already exists[/red]")
        raise typer.Exit(code=1)

    console.print(f"[green]✅ Created admin {created.email} ({created.id})[/green]")


@users_app.command("activate")
def activate(
    email: str = typer.Argument(..., help="Email of the member"),
) -> None:
    """Mark a member's fee as paid and membership as active."""
    with DbSessionService().session_scope() as session:
        repo = UserRepository(session)
        user = repo.get_by_email(email)
        if user is not None:
            repo.update(
                user.model_copy(
                    update={
                        "membership_status": MembershipStatus.ACTIVE,
                        "membership_fee": MembershipFee.PAID,
                    }
                )
            )

    if user is None:
        console.print(f"[red]❌ No user with email '{email}'[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]✅ {email} is now an active, paid member[/green]")
