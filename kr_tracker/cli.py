# kr_tracker/cli.py
"""
CLI interface for kr-tracker.

Thin presentation layer over the deletion engine: preview a deletion, commit
it to a snapshot file, or check a snapshot for dangling references.
Results go to stdout; logs and errors go to stderr.
"""

import json
from pathlib import Path

import typer

from kr_tracker.config import KrTrackerConfig, load_config
from kr_tracker.deletion import DeleteType, DeletionPlan, DeletionWorkflow
from kr_tracker.errors import KrTrackerError
from kr_tracker.logging_config import configure_logging

app = typer.Typer(
    name="kr-tracker",
    help="Plan and apply cascading deletions on an OKR tracker snapshot.",
    no_args_is_help=True,
)


def _config(ctx: typer.Context) -> KrTrackerConfig:
    return ctx.obj["config"]


def _get_store(snapshot: Path | None, config: KrTrackerConfig):
    """Open the snapshot file named on the command line or in config."""
    from kr_tracker.models.json_store import JsonFileSnapshotStore

    path = snapshot or (Path(config.store.snapshot_path) if config.store.snapshot_path else None)
    if path is None:
        typer.echo(
            "Error: no snapshot file given. Pass --snapshot or set store.snapshot_path in config.",
            err=True,
        )
        raise typer.Exit(1)
    return JsonFileSnapshotStore(path)


def _render_plan(plan: DeletionPlan) -> None:
    """Print a deletion preview as a rich panel."""
    from rich.console import Console, Group
    from rich.panel import Panel
    from rich.table import Table
    from rich.text import Text

    table = Table.grid(padding=(0, 2))
    table.add_column()
    table.add_column(justify="right", style="bold")
    table.add_column(style="dim")
    for item in plan.cascade_items:
        count = str(item.count) if item.count is not None else ""
        table.add_row(item.label, count, item.description or "")

    parts: list = []
    if plan.description:
        parts.append(Text(plan.description))
        parts.append(Text(""))
    if plan.cascade_items:
        parts.append(table)
    else:
        parts.append(Text("No other records are affected.", style="dim"))
    if plan.notes:
        parts.append(Text(""))
        parts.append(Text(plan.notes, style="yellow"))

    Console().print(
        Panel(Group(*parts), title=Text(f" {plan.title} ", style="bold"), border_style="red")
    )


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Path = typer.Option(None, "--config", help="Config file (default: user config dir)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging on stderr"),
):
    """Load configuration and set up logging."""
    config = load_config(config_path)
    verbosity = "verbose" if verbose else config.output.verbosity
    configure_logging(verbosity, config.output.log_format)
    ctx.obj = {"config": config}


@app.command()
def preview(
    ctx: typer.Context,
    delete_type: DeleteType = typer.Argument(..., help="Kind of entity to delete"),
    entity_id: str = typer.Argument(..., help="Id of the entity to delete"),
    snapshot: Path = typer.Option(None, "--snapshot", "-s", help="Snapshot JSON file"),
    as_json: bool = typer.Option(False, "--json", help="Print the plan as JSON"),
):
    """Show what deleting an entity would remove and update. Changes nothing."""
    from kr_tracker.deletion import compute_deletion_plan
    from kr_tracker.models.responses import DeletionPlanResponse

    store = _get_store(snapshot, _config(ctx))
    try:
        current = store.load()
        plan = compute_deletion_plan(delete_type, entity_id, current.snapshot)
    except KrTrackerError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if plan is None:
        typer.echo(f"No {delete_type.value} with id '{entity_id}'. Nothing to delete.")
        return

    if as_json:
        response = DeletionPlanResponse.from_plan(plan)
        typer.echo(json.dumps(response.model_dump(mode="json"), indent=2))
    else:
        _render_plan(plan)


@app.command()
def delete(
    ctx: typer.Context,
    delete_type: DeleteType = typer.Argument(..., help="Kind of entity to delete"),
    entity_id: str = typer.Argument(..., help="Id of the entity to delete"),
    snapshot: Path = typer.Option(None, "--snapshot", "-s", help="Snapshot JSON file"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
    output: Path = typer.Option(
        None, "--output", "-o", help="Write the result here instead of updating the snapshot"
    ),
):
    """Delete an entity and everything that depends on it."""
    from kr_tracker.models.json_store import write_snapshot
    from kr_tracker.models.store import InMemorySnapshotStore

    config = _config(ctx)
    source = _get_store(snapshot, config)

    try:
        store = InMemorySnapshotStore(source.load().snapshot) if output else source
        workflow = DeletionWorkflow(store)

        plan = workflow.request(delete_type, entity_id)
        if plan is None:
            typer.echo(f"No {delete_type.value} with id '{entity_id}'. Nothing to delete.")
            return

        _render_plan(plan)

        if config.deletion.require_confirmation and not yes:
            if not typer.confirm(f"{plan.confirm_label}?", default=False):
                workflow.cancel()
                typer.echo("Cancelled.", err=True)
                raise typer.Exit(1)

        result = workflow.confirm()
        if result is None:
            typer.echo(f"{delete_type.value} '{entity_id}' no longer exists. Nothing deleted.")
            return

        if output:
            write_snapshot(output, result)
    except KrTrackerError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    destination = output or source.path
    typer.echo(
        typer.style(f"✓ Deleted {delete_type.value} \"{plan.name}\"", fg=typer.colors.GREEN)
        + f"  Saved: {destination}"
    )


@app.command()
def check(
    ctx: typer.Context,
    snapshot: Path = typer.Option(None, "--snapshot", "-s", help="Snapshot JSON file"),
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON"),
):
    """Report references to records that do not exist. Exits 1 on dangling ids."""
    from kr_tracker.models.responses import IntegrityReportResponse
    from kr_tracker.validation import find_dangling_references

    store = _get_store(snapshot, _config(ctx))
    try:
        current = store.load()
    except KrTrackerError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    findings = find_dangling_references(current.snapshot)
    report = IntegrityReportResponse.from_findings(findings)

    if as_json:
        typer.echo(json.dumps(report.model_dump(), indent=2))
    elif not findings:
        typer.echo(typer.style("✓ No dangling references.", fg=typer.colors.GREEN))
    else:
        for finding in findings:
            color = typer.colors.RED if finding.reference == "id" else typer.colors.YELLOW
            typer.echo(typer.style(f"{finding.reference:<5}", fg=color) + finding.describe())
        typer.echo(
            f"\n{report.id_references} dangling id reference(s), "
            f"{report.name_references} dangling name reference(s)"
        )

    if not report.ok:
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
