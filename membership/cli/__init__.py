"""Main CLI application module."""

import typer
from dotenv.main import load_dotenv

# .env feeds the ${VAR} placeholders in config.yaml, read when commands import
load_dotenv()

from .db_commands import db_app  # noqa: E402
from .user_commands import users_app  # noqa: E402

# Create the main CLI application
app = typer.Typer(
    help="🛠️  Membership Registry CLI - database and member administration",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Register command groups
app.add_typer(db_app, name="db")
app.add_typer(users_app, name="users")


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
