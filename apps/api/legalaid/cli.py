"""CLI tools for legal-aid administration."""

import click

from legalaid.db.enums import Role
from legalaid.db.models import LawyerProfile, Office, User
from legalaid.db.session import SessionLocal


@click.group()
def cli():
    """Legal-aid CLI tools."""
    pass


@cli.command()
def init_db():
    """
    Create all tables directly from the models.

    For local development and SQLite. Deployed databases use Alembic:
        alembic upgrade head
    """
    from legalaid.db.base import Base
    from legalaid.db.session import engine

    Base.metadata.create_all(bind=engine)
    click.echo("✓ Database schema created")


@cli.command()
@click.option("--name", required=True, help="Office name")
@click.option("--location", default=None, help="Address or town")
def create_office(name: str, location: str | None):
    """
    Create a legal-aid office.

    Example:
        python -m legalaid.cli create-office --name "Central Office" --location "Main St"
    """
    db = SessionLocal()
    try:
        existing = db.query(Office).filter(Office.name == name).first()
        if existing:
            click.echo(f"❌ Office already exists: {name}")
            return

        office = Office(name=name, location=location)
        db.add(office)
        db.commit()

        click.echo(f"✓ Created office: {name}")
        click.echo(f"  ID: {office.id}")

    except Exception as e:
        db.rollback()
        click.echo(f"❌ Error: {e}")
        raise
    finally:
        db.close()


@cli.command()
@click.option("--email", required=True, help="User email address")
@click.option("--name", "full_name", required=True, help="Full name")
@click.option(
    "--role",
    type=click.Choice([r.value for r in Role], case_sensitive=False),
    required=True,
    help="User role",
)
@click.option("--phone", default=None, help="Phone number for SMS notifications")
@click.option("--office", "office_name", default=None, help="Office name (required for lawyers)")
@click.option("--max-caseload", default=10, help="Lawyer caseload cap (default: 10)")
def create_user(
    email: str,
    full_name: str,
    role: str,
    phone: str | None,
    office_name: str | None,
    max_caseload: int,
):
    """
    Create a user and print a bearer token for it.

    Lawyers also get a lawyer profile in the given office.

    Example:
        python -m legalaid.cli create-user --email "c@example.org" --name "Coordinator" --role COORDINATOR
    """
    from legalaid.core.security import create_access_token

    role = role.upper()
    db = SessionLocal()
    try:
        if db.query(User).filter(User.email == email.lower()).first():
            click.echo(f"❌ User already exists: {email}")
            return

        office = None
        if office_name:
            office = db.query(Office).filter(Office.name == office_name).first()
            if not office:
                click.echo(f"❌ Office not found: {office_name}")
                return
        if role == Role.LAWYER.value and not office:
            click.echo("❌ Lawyers need an --office")
            return

        user = User(
            email=email.lower(),
            full_name=full_name,
            role=role,
            phone=phone,
            office_id=office.id if office else None,
        )
        db.add(user)
        db.flush()

        if role == Role.LAWYER.value:
            db.add(LawyerProfile(
                user_id=user.id,
                office_id=office.id,
                max_caseload=max_caseload,
            ))
        db.commit()

        token = create_access_token(user.id, user.role, user.token_version)
        click.echo(f"✓ Created {role.lower()}: {email}")
        click.echo(f"  ID: {user.id}")
        click.echo(f"  Token: {token}")

    except Exception as e:
        db.rollback()
        click.echo(f"❌ Error: {e}")
        raise
    finally:
        db.close()


@cli.command()
@click.option("--email", required=True, help="User email to revoke tokens for")
def revoke_tokens(email: str):
    """
    Revoke all bearer tokens for a user by bumping their token_version.

    Example:
        python -m legalaid.cli revoke-tokens --email "user@example.org"
    """
    db = SessionLocal()
    try:
        user = db.query(User).filter(User.email == email.lower()).first()
        if not user:
            click.echo(f"❌ User not found: {email}")
            return

        old_version = user.token_version
        user.token_version += 1
        db.commit()

        click.echo(f"✓ Revoked all tokens for {email}")
        click.echo(f"  Token version: {old_version} → {user.token_version}")

    except Exception as e:
        db.rollback()
        click.echo(f"❌ Error: {e}")
        raise
    finally:
        db.close()


@cli.command()
def send_reminders():
    """
    Send appointment reminders that are due. Run hourly from cron.

    Example:
        python -m legalaid.cli send-reminders
    """
    from legalaid.core.config import settings
    from legalaid.services.appointment_notification_service import send_due_reminders
    from legalaid.services.notification_sender import build_sender

    db = SessionLocal()
    try:
        run = send_due_reminders(db, build_sender(settings))
        click.echo(f"✓ Checked {run.appointments_checked} appointment(s)")
        click.echo(f"  Sent: {run.reminders_sent}  Failed: {run.reminders_failed}")
    except Exception as e:
        db.rollback()
        click.echo(f"❌ Error: {e}")
        raise
    finally:
        db.close()


@cli.command()
@click.option("--email", default=None, help="Admin recorded as the creator")
def create_backup(email: str | None):
    """
    Write a backup archive under BACKUP_DIR.

    Example:
        python -m legalaid.cli create-backup --email "admin@example.org"
    """
    from legalaid.services import backup_service

    db = SessionLocal()
    try:
        created_by_id = None
        if email:
            admin = db.query(User).filter(
                User.email == email.lower(),
                User.role == Role.ADMIN.value,
            ).first()
            if not admin:
                click.echo(f"❌ Admin not found: {email}")
                return
            created_by_id = admin.id

        backup = backup_service.create_backup(db, created_by_id=created_by_id)
        click.echo(f"✓ Backup written: {backup.name}")
        click.echo(f"  Size: {backup.size_bytes} bytes")
        click.echo(f"  SHA-256: {backup.checksum_sha256}")
    except Exception as e:
        click.echo(f"❌ Error: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    cli()
