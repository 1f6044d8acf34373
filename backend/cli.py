"""
Comanda CLI.

Command-line interface for account administration and health checks.

Usage:
    comanda create-admin admin@example.com s3cret
    comanda list-accounts
    comanda toggle-role 3
    comanda health
"""

import asyncio
import sys
import time
from contextlib import contextmanager

import httpx
import typer
from rich.console import Console
from rich.table import Table

from shared.config.settings import settings

app = typer.Typer(
    name="comanda",
    help="Comanda restaurant order backend CLI",
    add_completion=False,
)
console = Console()


@contextmanager
def _context():
    """Application context for one command; broadcasts are only logged."""
    from rest_api.core.context import create_context
    from shared.infrastructure.events import LoggingEventPublisher

    context = create_context(settings, publisher=LoggingEventPublisher())
    context.init()
    try:
        yield context
    finally:
        context.close()


# =============================================================================
# Account Commands
# =============================================================================

@app.command()
def create_admin(
    email: str = typer.Argument(..., help="Account email"),
    password: str = typer.Argument(..., help="Account password"),
):
    """Register an account and promote it to admin."""
    from rest_api.services.domain import AccountService
    from shared.infrastructure.db import session_scope
    from shared.utils.exceptions import AppException

    with _context() as context, session_scope(context.session_factory) as db:
        service = AccountService(db)
        try:
            account = service.register(email, password)
            account = service.toggle_role(account.id)
        except AppException as e:
            console.print(f"[red]✗ {e.detail}[/red]")
            raise typer.Exit(1)

    console.print(f"[green]✓ Admin created: {account.email} (id {account.id})[/green]")


@app.command()
def toggle_role(
    account_id: int = typer.Argument(..., help="Account ID"),
):
    """Flip an account between waiter and admin."""
    from rest_api.services.domain import AccountService
    from shared.infrastructure.db import session_scope
    from shared.utils.exceptions import AppException

    with _context() as context, session_scope(context.session_factory) as db:
        try:
            account = AccountService(db).toggle_role(account_id)
        except AppException as e:
            console.print(f"[red]✗ {e.detail}[/red]")
            raise typer.Exit(1)

    console.print(f"[green]✓ {account.email} is now {account.role}[/green]")


@app.command()
def list_accounts():
    """List all staff accounts."""
    from rest_api.services.domain import AccountService
    from shared.infrastructure.db import session_scope

    with _context() as context, session_scope(context.session_factory) as db:
        accounts = AccountService(db).list_all()

    table = Table(title="Accounts")
    table.add_column("ID", style="cyan")
    table.add_column("Email")
    table.add_column("Role", style="green")
    table.add_column("Created", style="yellow")

    for account in accounts:
        table.add_row(
            str(account.id),
            account.email,
            account.role,
            account.created_at.strftime("%Y-%m-%d %H:%M"),
        )

    console.print(table)
    if not accounts:
        console.print("[yellow]No accounts yet. Use create-admin to add one.[/yellow]")


# =============================================================================
# Health Commands
# =============================================================================

@app.command()
def health(
    rest_url: str = typer.Option(
        f"http://localhost:{settings.rest_api_port}/api/health", help="REST API health URL"
    ),
    ws_url: str = typer.Option(
        f"http://localhost:{settings.ws_gateway_port}/ws/health", help="WebSocket gateway health URL"
    ),
):
    """Check system health."""

    async def _health():
        from shared.infrastructure.events import check_redis_async_health, close_redis_pool

        table = Table(title="Service Health")
        table.add_column("Service", style="cyan")
        table.add_column("Status", style="green")
        table.add_column("Response Time", style="yellow")

        async with httpx.AsyncClient(timeout=5.0) as client:
            for name, url in (("REST API", rest_url), ("WS Gateway", ws_url)):
                start = time.time()
                try:
                    response = await client.get(url)
                except httpx.HTTPError as e:
                    table.add_row(name, f"✗ {type(e).__name__}", "-")
                    continue
                elapsed = (time.time() - start) * 1000
                if response.status_code == 200:
                    table.add_row(name, "✓ Healthy", f"{elapsed:.0f}ms")
                else:
                    table.add_row(name, f"✗ Status {response.status_code}", f"{elapsed:.0f}ms")

        if settings.broadcast_enabled:
            result = await check_redis_async_health()
            latency = f"{result.latency_ms:.0f}ms" if result.latency_ms is not None else "-"
            status = "✓ Healthy" if result.healthy else f"✗ {result.error}"
            table.add_row("Redis", status, latency)
            await close_redis_pool()

        console.print(table)

    asyncio.run(_health())


@app.command()
def version():
    """Show version information."""
    table = Table(title="Comanda Version")
    table.add_column("Component", style="cyan")
    table.add_column("Version", style="green")

    table.add_row("API", "1.0.0")
    table.add_row("Python", sys.version.split()[0])

    console.print(table)


if __name__ == "__main__":
    app()
