"""AuthGate CLI application using Typer.

This module provides command-line utilities for the AuthGate backend:
secret generation for deployment configuration, schema creation and
running the API server.
"""

import asyncio
import secrets

import typer
import uvicorn
from rich.console import Console

from authgate_config.settings import ConfigurationError, Settings, get_settings

app = typer.Typer(
    name="authgate",
    help="AuthGate - minimal authentication gateway CLI",
    no_args_is_help=True,
)
console = Console()


secrets_app = typer.Typer(
    name="secrets",
    help="Secret generation utilities",
    no_args_is_help=True,
)
app.add_typer(secrets_app)

db_app = typer.Typer(
    name="db",
    help="Database utilities",
    no_args_is_help=True,
)
app.add_typer(db_app)


def _load_settings() -> Settings:
    try:
        return get_settings()
    except ConfigurationError as e:
        console.print(f"[red]Configuration error:[/red] {e.message}")
        raise typer.Exit(code=1) from e


@secrets_app.command("generate")
def generate_secrets() -> None:
    """Generate a secure AUTH_SECRET.

    The secret signs session tokens, CSRF hashes and OAuth state.
    Copy the output to your .env file.
    """
    console.print("\n[bold green]AuthGate Secret Generation[/bold green]")
    console.print("=" * 60)

    # 64 bytes of entropy for HS256 signing
    auth_secret = secrets.token_urlsafe(64)
    console.print(f"[cyan]AUTH_SECRET[/cyan]={auth_secret}")

    console.print("=" * 60)
    console.print(
        "[yellow]Keep this secret secure and never commit it "
        "to version control![/yellow]"
    )
    console.print(
        "[dim]Copy the value to your config/.env or config/.env.dev file.[/dim]\n"
    )


@db_app.command("init")
def init_db() -> None:
    """Create missing database tables (existing data is left untouched)."""
    from authgate.presentation.api.dependencies import create_engine, create_tables

    settings = _load_settings()

    async def _run() -> None:
        engine = create_engine(settings.database_url)
        try:
            await create_tables(engine)
        finally:
            await engine.dispose()

    asyncio.run(_run())
    console.print("[green]Database schema is up to date.[/green]")


@app.command("serve")
def serve(
    host: str | None = typer.Option(None, help="Bind address (default: API_HOST)"),
    port: int | None = typer.Option(None, help="Bind port (default: API_PORT)"),
    reload: bool = typer.Option(False, help="Reload on code changes"),
) -> None:
    """Run the API server with uvicorn."""
    settings = _load_settings()
    uvicorn.run(
        "authgate.presentation.api.app:create_app",
        factory=True,
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


def cli() -> None:
    """Entry point for the CLI application."""
    app()


if __name__ == "__main__":
    cli()
