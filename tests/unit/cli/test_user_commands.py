import pytest
from sqlmodel import Session
from typer.testing import CliRunner

from membership.app.core.services.database.db_session import DbSessionService
from membership.app.entities.core.user import MembershipFee, MembershipStatus, Role, UserRepository
from membership.cli import app
from membership.cli import user_commands

runner = CliRunner()


@pytest.fixture(autouse=True)
def shared_database(monkeypatch: pytest.MonkeyPatch, db_service: DbSessionService):
    monkeypatch.setattr(user_commands, "DbSessionService", lambda: db_service)


def test_create_admin(session: Session):
    result = runner.invoke(
        app,
        ["users", "create-admin", "--email", "Boss@Example.com", "--password", "pw"],
    )

    assert result.exit_code == 0, result.output
    admin = UserRepository(session).get_by_email("boss@example.com")
    assert admin.role == Role.ADMIN
    assert admin.membership_fee == MembershipFee.PAID
    assert admin.fully_referred


def test_create_admin_duplicate(applicant):
    result = runner.invoke(
        app,
        ["users", "create-admin", "--email", applicant.email, "--password", "pw"],
    )

    assert result.exit_code == 1
    assert "already exists" in result.output


def test_activate(applicant, session: Session):
    result = runner.invoke(app, ["users", "activate", applicant.email])

    assert result.exit_code == 0, result.output
    stored = UserRepository(session).get(applicant.id, refresh=True)
    assert stored.membership_status == MembershipStatus.ACTIVE
    assert stored.membership_fee == MembershipFee.PAID


def test_activate_unknown():
    result = runner.invoke(app, ["users", "activate", "nobody@example.com"])

    assert result.exit_code == 1


def test_list_and_pending(applicant):
    listed = runner.invoke(app, ["users", "list"])
    pending = runner.invoke(app, ["users", "pending"])

    assert listed.exit_code == 0
    assert "Found 1 users" in listed.output
    assert pending.exit_code == 0
    assert "Awaiting referees" in pending.output
