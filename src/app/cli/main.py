import asyncio
import logging
import typer
from tortoise import Tortoise
from tortoise.exceptions import IntegrityError

from app.core.config import DATABASE_URL, TORTOISE_MODELS
from app.features.auth.models import ROLE_ADMIN, User as AuthUser
from app.features.auth.security import get_password_hash
from app.features.credentials import service as credentials_service
from app.features.credentials.schemas import CredentialsIn
from app.features.credentials.store import TortoiseCredentialStore

logger = logging.getLogger(__name__)

TORTOISE_ORM_CONFIG = {
    "connections": {
        "default": DATABASE_URL
    },
    "apps": {
        "models": {
            "models": TORTOISE_MODELS,
            "default_connection": "default",
        }
    },
    "use_tz": False,
    "timezone": "UTC"
}


app = typer.Typer(name="reports-console", help="CLI for administering the reports console.")

# Shared async context manager for database connection
class DBConnection:
    async def __aenter__(self):
        await Tortoise.init(config=TORTOISE_ORM_CONFIG)
        await Tortoise.generate_schemas(safe=True)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await Tortoise.close_connections()

# User management commands
user_app = typer.Typer(name="users", help="Manage user accounts.")
app.add_typer(user_app)

# Reporting service credentials
credentials_app = typer.Typer(name="credentials", help="Manage the reporting service credentials.")
app.add_typer(credentials_app)

@user_app.command("create-admin")
def create_admin_user_command(
    username: str = typer.Option(..., prompt=True, help="Username for the new admin."),
    email: str = typer.Option(..., prompt=True, help="Email for the new admin."),
    password: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True, help="Password for the new admin.")
):
    """Creates a new admin user."""
    asyncio.run(_create_admin_user(username, email, password))

async def _create_admin_user(username: str, email: str, password: str):
    async with DBConnection():
        typer.echo(f"Attempting to create admin user: {username} ({email})...")
        if await AuthUser.filter(username=username).exists():
            typer.secho(f"Error: User with username '{username}' already exists.", fg=typer.colors.RED)
            raise typer.Exit(code=1)
        if await AuthUser.filter(email=email).exists():
            typer.secho(f"Error: User with email '{email}' already exists.", fg=typer.colors.RED)
            raise typer.Exit(code=1)
        try:
            admin_user = await AuthUser.create(
                username=username,
                email=email,
                hashed_password=get_password_hash(password),
                role=ROLE_ADMIN,
                is_active=True
            )
        except IntegrityError as e:
            typer.secho(f"Error creating admin user: {e}", fg=typer.colors.RED)
            raise typer.Exit(code=1)
        typer.secho(f"Admin user '{admin_user.username}' created successfully with ID: {admin_user.public_id}", fg=typer.colors.GREEN)

@credentials_app.command("set")
def set_credentials_command(
    api_key: str = typer.Option(..., prompt=True, help="API key of the reporting service."),
    api_secret: str = typer.Option(..., prompt=True, hide_input=True, help="API secret of the reporting service."),
    reports_url: str = typer.Option(..., prompt=True, help="Base URL of the reporting service."),
):
    """Stores the reporting service credentials, replacing any previous ones."""
    credentials = CredentialsIn(api_key=api_key, api_secret=api_secret, reports_url=reports_url)
    if not credentials.is_complete():
        typer.secho("Error: apiKey, apiSecret and reportsUrl are all required.", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    asyncio.run(_set_credentials(credentials))

async def _set_credentials(credentials: CredentialsIn):
    async with DBConnection():
        await credentials_service.store_credentials(TortoiseCredentialStore(), credentials)
    typer.secho(f"Credentials stored for {credentials.reports_url}", fg=typer.colors.GREEN)

@credentials_app.command("show")
def show_credentials_command():
    """Shows whether credentials are stored. The secret is never printed."""
    asyncio.run(_show_credentials())

async def _show_credentials():
    async with DBConnection():
        status = await credentials_service.check_credentials(TortoiseCredentialStore())
    if not status.has_credentials:
        typer.secho("No credentials stored.", fg=typer.colors.YELLOW)
        return
    typer.echo(f"Reports URL: {status.reports_url}")
    typer.echo(f"API key:     {status.api_key}")

@credentials_app.command("delete")
def delete_credentials_command(
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation."),
):
    """Deletes the stored credentials."""
    if not yes:
        typer.confirm("Delete the stored reporting service credentials?", abort=True)
    asyncio.run(_delete_credentials())

async def _delete_credentials():
    async with DBConnection():
        await credentials_service.delete_credentials(TortoiseCredentialStore())
    typer.secho("Credentials deleted.", fg=typer.colors.GREEN)

if __name__ == "__main__":
    app()
