"""
Ronda CLI.

Command-line interface for common operations: schema setup, seeding,
a quick look at the floor and running the API server.
"""

import sys
from pathlib import Path

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).parent))

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="ronda",
    help="Ronda Restaurant Floor Management CLI",
    add_completion=False,
)
console = Console()

STATUS_STYLES = {
    "LIBRE": "green",
    "ESPERANDO": "yellow",
    "PIDIENDO": "yellow",
    "OCUPADA": "red",
    "PAGANDO": "magenta",
    "RESERVADA": "blue",
}


# =============================================================================
# Database Commands
# =============================================================================

@app.command()
def db_init():
    """Create all tables on the configured database."""
    from shared.infrastructure.db import engine
    from ronda_api.models import Base

    Base.metadata.create_all(bind=engine)
    console.print("[green]✓ Schema created/verified[/green]")


@app.command()
def db_seed(
    demo: bool = typer.Option(False, "--demo", help="Also open demo rondas with orders"),
    force: bool = typer.Option(False, "--force", "-f", help="Allow seeding in production"),
):
    """Seed staff, zones, tables and the menu."""
    from shared.config.settings import settings
    from shared.infrastructure.db import engine, get_db_context
    from ronda_api.models import Base
    from ronda_api.seed import seed

    console.print(f"[blue]Seeding database for: {settings.environment}[/blue]")

    if settings.environment == "production" and not force:
        console.print("[red]Cannot seed production without --force[/red]")
        raise typer.Exit(1)

    Base.metadata.create_all(bind=engine)
    with get_db_context() as db:
        seed(db, demo=demo)
    console.print("[green]✓ Seeding complete[/green]")


# =============================================================================
# Floor Commands
# =============================================================================

@app.command()
def tables(
    zone: str = typer.Option(None, help="Only show tables in this zone"),
):
    """Show the floor: every table with its status and open ronda total."""
    from sqlalchemy import select

    from shared.infrastructure.db import SessionLocal
    from ronda_api.models import Table as TableModel, Zone
    from ronda_api.services.domain.ronda_service import find_active_ronda, ronda_total_cents

    with SessionLocal() as db:
        query = select(TableModel).order_by(TableModel.number)
        if zone:
            query = query.join(Zone).where(Zone.name == zone.upper())
        rows = db.scalars(query).all()

        table = Table(title="Floor")
        table.add_column("Mesa", style="cyan", justify="right")
        table.add_column("Zona")
        table.add_column("Cap.", justify="right")
        table.add_column("Estado")
        table.add_column("Grupo")
        table.add_column("Ronda", justify="right")

        for t in rows:
            ronda = find_active_ronda(db, t)
            total = f"${ronda_total_cents(db, ronda.id) / 100:,.2f}" if ronda else "-"
            style = STATUS_STYLES.get(t.status, "white")
            table.add_row(
                str(t.number),
                t.zone.name if t.zone else "-",
                str(t.capacity),
                f"[{style}]{t.status}[/{style}]",
                t.group.name if t.group else "-",
                total,
            )

    console.print(table)


# =============================================================================
# Server Commands
# =============================================================================

@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", help="Bind address"),
    port: int = typer.Option(None, help="Port (defaults to API_PORT)"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
):
    """Run the API server."""
    import uvicorn

    from shared.config.settings import settings

    uvicorn.run(
        "ronda_api.main:app",
        host=host,
        port=port or settings.api_port,
        reload=reload,
    )


@app.command()
def version():
    """Show version information."""
    table = Table(title="Ronda Version")
    table.add_column("Component", style="cyan")
    table.add_column("Version", style="green")

    table.add_row("API", "0.1.0")
    table.add_row("Python", sys.version.split()[0])

    console.print(table)


if __name__ == "__main__":
    app()
