"""Tests for the administration CLI."""

from click.testing import CliRunner

from legalaid.cli import cli
from legalaid.db.enums import BackupStatus
from legalaid.db.models import Backup, LawyerProfile, User


def _run(*args):
    return CliRunner().invoke(cli, list(args))


def test_create_lawyer_with_profile(db):
    assert _run("create-office", "--name", "East Office").exit_code == 0

    result = _run(
        "create-user",
        "--email", "Lawyer@Test.org",
        "--name", "Lee Lawyer",
        "--role", "lawyer",
        "--office", "East Office",
        "--max-caseload", "4",
    )

    assert result.exit_code == 0
    assert "Token: " in result.output
    user = db.query(User).filter(User.email == "lawyer@test.org").one()
    assert user.role == "LAWYER"
    profile = db.query(LawyerProfile).filter(LawyerProfile.user_id == user.id).one()
    assert profile.max_caseload == 4


def test_lawyer_requires_office(db):
    result = _run("create-user", "--email", "x@test.org", "--name", "X", "--role", "LAWYER")

    assert "Lawyers need an --office" in result.output
    assert db.query(User).count() == 0


def test_revoke_tokens_bumps_version(db):
    _run("create-user", "--email", "c@test.org", "--name", "C", "--role", "CLIENT")

    result = _run("revoke-tokens", "--email", "c@test.org")

    assert result.exit_code == 0
    assert db.query(User).one().token_version == 2


def test_create_backup(db):
    result = _run("create-backup")

    assert result.exit_code == 0
    assert db.query(Backup).one().status == BackupStatus.COMPLETED.value
