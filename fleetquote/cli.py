"""FleetQuote CLI - configuration matrix administration.

Commands:
- init: Initialize database schema
- import-matrix: Import a vendor configuration workbook (XLSX)
- export-matrix: Export a model family's matrix for round-trip editing
- list-matrices: Show stored matrices
- delete-matrix: Remove a matrix
- set-option: Patch one option (cost delta, availability, description)
- quote: Price a variant configuration
- serve: Run the web API
"""

from __future__ import annotations

import asyncio
from decimal import Decimal, InvalidOperation
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from fleetquote.config import get_config
from fleetquote.core.logging import configure_logging
from fleetquote.db.connection import close_db, get_session, init_db
from fleetquote.matrix import engine
from fleetquote.matrix.errors import MatrixLookupError, MatrixPersistenceError
from fleetquote.matrix.exporter import export_matrix_to_excel, suggested_export_filename
from fleetquote.matrix.importer import import_matrix_from_excel
from fleetquote.matrix.repository import ConfigurationMatrixRepository
from fleetquote.matrix.store import SqlMatrixStore
from fleetquote.models import AvailabilityLevel, OptionPatch

app = typer.Typer(
    name="fleetquote",
    help="FleetQuote - forklift configuration matrix catalog",
    no_args_is_help=True,
)

console = Console()


@app.callback()
def main(
    log_level: str | None = typer.Option(None, "--log-level", help="Override LOG_LEVEL"),
):
    configure_logging(log_level)


def _run(coro):
    async def _wrapped():
        try:
            return await coro
        finally:
            await close_db()

    return asyncio.run(_wrapped())


@app.command()
def init(
    drop: bool = typer.Option(False, "--drop", help="Drop existing tables"),
):
    """Initialize database schema."""
    config = get_config()
    console.print(f"[bold]Initializing database:[/bold] {config.db.url}")
    if drop:
        console.print("[yellow]Dropping existing tables...[/yellow]")
    _run(init_db(drop=drop))
    console.print("[bold green]✓[/bold green] Database initialized")


@app.command(name="import-matrix")
def import_matrix_cmd(
    file: Path = typer.Argument(..., help="Vendor configuration workbook (XLSX)"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Parse only, do not save"),
):
    """Import a vendor configuration matrix workbook."""
    if not file.exists():
        console.print(f"[red]✗[/red] File not found: {file}")
        raise typer.Exit(1)

    console.print(f"[bold]Importing configuration matrix:[/bold] {file}")
    result = import_matrix_from_excel(file)

    for warning in result.warnings[:10]:  # Show first 10 warnings
        console.print(f"  [yellow]⚠[/yellow] {warning}", style="dim")
    if len(result.warnings) > 10:
        console.print(f"  [yellow]⚠[/yellow] ... {len(result.warnings) - 10} more warnings")

    if not result.success or result.matrix is None:
        for error in result.errors:
            console.print(f"  [red]✗[/red] {error}")
        raise typer.Exit(1)

    console.print(
        f"  Family {result.matrix.base_model_family}: "
        f"{result.stats.variants_found} variants, "
        f"{result.stats.spec_groups_found} spec groups, "
        f"{result.stats.options_imported} options"
    )

    if dry_run:
        console.print("[yellow]Dry run - nothing saved[/yellow]")
        return

    async def _save():
        async with get_session() as session:
            repo = ConfigurationMatrixRepository(SqlMatrixStore(session))
            return await repo.save_matrix(result.matrix)

    matrix_id = _run(_save())
    console.print(f"[bold green]✓[/bold green] Saved matrix {matrix_id}")


@app.command(name="export-matrix")
def export_matrix_cmd(
    family: str = typer.Argument(..., help="Base model family, e.g. EG16"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output .xlsx path"),
):
    """Export a model family's configuration matrix to Excel."""
    config = get_config()

    async def _load():
        async with get_session() as session:
            repo = ConfigurationMatrixRepository(SqlMatrixStore(session))
            return await repo.get_matrix_by_model_family(family)

    matrix = _run(_load())
    if matrix is None:
        console.print(f"[red]✗[/red] No configuration matrix for family {family}")
        raise typer.Exit(1)

    if output is None:
        config.matrix.export_dir.mkdir(parents=True, exist_ok=True)
        output = config.matrix.export_dir / suggested_export_filename(matrix)

    buffer = export_matrix_to_excel(matrix, sheet_name=config.matrix.export_sheet_name)
    output.write_bytes(buffer.getvalue())
    console.print(f"[bold green]✓[/bold green] Exported to {output}")


@app.command(name="list-matrices")
def list_matrices_cmd():
    """List stored configuration matrices."""

    async def _list():
        async with get_session() as session:
            return await ConfigurationMatrixRepository(SqlMatrixStore(session)).list()

    matrices = _run(_list())
    if not matrices:
        console.print("[yellow]No configuration matrices stored[/yellow]")
        return

    table = Table(title="Configuration Matrices")
    table.add_column("ID", style="dim")
    table.add_column("Family", style="cyan")
    table.add_column("Variants")
    table.add_column("Updated")
    for matrix in matrices:
        table.add_row(
            matrix.id,
            matrix.base_model_family,
            ", ".join(v.variant_code for v in matrix.variants),
            matrix.updated_at.strftime("%Y-%m-%d %H:%M") if matrix.updated_at else "-",
        )
    console.print(table)


@app.command(name="delete-matrix")
def delete_matrix_cmd(
    matrix_id: str = typer.Argument(..., help="Matrix ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Delete a configuration matrix."""
    if not yes:
        typer.confirm(f"Delete configuration matrix {matrix_id}? This cannot be undone", abort=True)

    async def _delete():
        async with get_session() as session:
            await ConfigurationMatrixRepository(SqlMatrixStore(session)).delete(matrix_id)

    try:
        _run(_delete())
    except MatrixPersistenceError as e:
        console.print(f"[red]✗[/red] {e}")
        raise typer.Exit(1)
    console.print(f"[bold green]✓[/bold green] Deleted {matrix_id}")


@app.command(name="set-option")
def set_option_cmd(
    matrix_id: str = typer.Argument(..., help="Matrix ID"),
    variant_code: str = typer.Argument(..., help="Variant code, e.g. EG16P"),
    spec_code: str = typer.Argument(..., help="Spec group code, e.g. 1135"),
    option_code: str = typer.Argument(..., help="Option long code"),
    cost: str | None = typer.Option(None, "--cost", help="EUR cost delta"),
    availability: int | None = typer.Option(None, "--availability", help="0-3"),
    description: str | None = typer.Option(None, "--description", help="New description"),
):
    """Patch a single option in a stored matrix."""
    updates: dict = {}
    if cost is not None:
        try:
            updates["eur_cost_delta"] = Decimal(cost)
        except InvalidOperation:
            console.print(f"[red]✗[/red] Invalid cost: {cost}")
            raise typer.Exit(1)
    if availability is not None:
        updates["availability"] = availability
    if description is not None:
        updates["description"] = description

    if not updates:
        console.print("[yellow]Nothing to update[/yellow]")
        raise typer.Exit(1)

    patch = OptionPatch(**updates)

    async def _update():
        async with get_session() as session:
            repo = ConfigurationMatrixRepository(SqlMatrixStore(session))
            await repo.update_option(matrix_id, variant_code, spec_code, option_code, patch)

    try:
        _run(_update())
    except (MatrixLookupError, MatrixPersistenceError) as e:
        console.print(f"[red]✗[/red] {e}")
        raise typer.Exit(1)
    console.print(f"[bold green]✓[/bold green] Updated {option_code}")


@app.command()
def quote(
    family: str = typer.Argument(..., help="Base model family"),
    variant_code: str = typer.Argument(..., help="Variant code"),
    select: list[str] = typer.Option([], "--select", "-s", help="SPEC=OPTION overrides"),
):
    """Price a configuration: standard defaults plus any overrides."""
    config = get_config()

    async def _load():
        async with get_session() as session:
            repo = ConfigurationMatrixRepository(SqlMatrixStore(session))
            return await repo.get_matrix_by_model_family(family)

    matrix = _run(_load())
    variant = matrix.find_variant(variant_code) if matrix else None
    if variant is None:
        console.print(f"[red]✗[/red] Variant {variant_code} not found for family {family}")
        raise typer.Exit(1)

    selections = engine.initialize_selections(variant)
    for item in select:
        spec_code, sep, option_code = item.partition("=")
        if not sep:
            console.print(f"[red]✗[/red] Expected SPEC=OPTION, got {item}")
            raise typer.Exit(1)
        selections[spec_code.strip()] = option_code.strip()

    for line in engine.generate_configuration_summary(variant, selections):
        console.print(line)

    table = Table(title="Selected options")
    table.add_column("Spec")
    table.add_column("Option")
    table.add_column("Availability")
    for spec_code, option_code in sorted(selections.items()):
        group = variant.find_group(spec_code)
        option = group.find_option(option_code) if group else None
        level = option.availability if option else AvailabilityLevel.NOT_AVAILABLE
        table.add_row(
            group.group_name if group else spec_code,
            option.description if option else option_code,
            f"[{level.badge_colour}]{level.label}[/{level.badge_colour}]",
        )
    console.print(table)

    cost = engine.calculate_configuration_cost(variant, selections)
    console.print(f"[bold]Options total:[/bold] {cost:,} {config.matrix.currency}")

    validation = engine.validate_configuration(variant, selections)
    if not validation.valid:
        console.print(f"[yellow]⚠[/yellow] Missing: {', '.join(validation.missing_specs)}")
        raise typer.Exit(2)


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", help="Host to bind"),
    port: int = typer.Option(8001, help="Port to bind"),
    reload: bool = typer.Option(False, help="Enable autoreload (dev only)"),
):
    """Run the FastAPI admin/quoting API."""
    import uvicorn

    typer.echo(f"Starting FleetQuote API on http://{host}:{port}")
    uvicorn.run("fleetquote.web.app:app", host=host, port=port, reload=reload, workers=1)


if __name__ == "__main__":
    app()
