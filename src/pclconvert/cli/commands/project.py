"""
Project command group.

Lists candidate projects below a path (.sln, .csproj or directory) and
converts the selected ones to a portable profile.
"""

from __future__ import annotations

import json
from pathlib import Path

import typer

from ...adapters.filesystem_host import FilesystemProjectHost
from ...infra.exceptions import CatalogLoadError, UnknownProfileError
from ...infra.logging import get_logger
from ...infra.settings import settings
from ...runtime.session import MigrationSession, StateChanged
from ...usecases.project_migration import select_eligible
from .catalog import load_catalog_or_exit, wants_json

app = typer.Typer(name="project", help="List and convert .NET projects")


def _open_session(path: Path) -> MigrationSession:
    if not path.exists():
        typer.echo(f"Error: Path not found: {path}", err=True)
        raise typer.Exit(1)
    try:
        host = FilesystemProjectHost(path, assembly_manifest=settings.assembly_manifest)
    except CatalogLoadError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    return MigrationSession(host, newline=settings.line_terminator)


@app.command("list")
def list_projects(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="Solution file, project file or directory"),
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
):
    """List projects with a target framework and whether they can be converted."""
    session = _open_session(path)
    projects = session.reload()

    if wants_json(ctx, json_output):
        typer.echo(json.dumps([p.to_dict() for p in projects], indent=2))
        return

    if not projects:
        typer.echo(session.state)
        return
    for record in projects:
        marker = "*" if record.is_eligible else " "
        typer.echo(f"{marker} {record.name:<32} {record.current_framework.name}")


@app.command("convert")
def convert_projects(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="Solution file, project file or directory"),
    profile: str = typer.Option(..., "--profile", "-p", help="Target portable profile, e.g. Profile136"),
    project_names: list[str] = typer.Option(
        None, "--project", help="Project to convert (repeatable); all projects when omitted"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
):
    """Convert .NET 4.5 projects to the given portable profile."""
    use_json = wants_json(ctx, json_output)
    logger = get_logger(__name__)
    catalog = load_catalog_or_exit()
    try:
        target = catalog.portable_profile(profile)
    except UnknownProfileError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    session = _open_session(path)
    session.reload()
    session.select(project_names or None)

    if not select_eligible(session.projects):
        message = "No selected .NET 4.5 projects to convert"
        if use_json:
            typer.echo(json.dumps({"status": "ok", "message": message, "converted": []}, indent=2))
        else:
            typer.echo(message)
        return

    session.update(target)
    if not use_json:
        typer.echo(session.state)
    for event in session.drain():
        if isinstance(event, StateChanged) and not use_json:
            typer.echo(event.text)

    if session.last_error is not None:
        logger.error("convert_aborted", error=str(session.last_error))
        typer.echo(f"Error: {session.last_error}", err=True)
        raise typer.Exit(1)

    summary = session.last_summary
    logger.info(
        "convert_finished",
        profile=target.name,
        converted=len(summary.converted),
        unchanged=len(summary.unchanged),
        failed=len(summary.failed),
    )
    if use_json:
        result = {"status": "error" if summary.failed else "ok", "profile": target.name}
        result.update(summary.to_dict())
        typer.echo(json.dumps(result, indent=2))
    elif summary.failed:
        typer.echo(f"Failed: {', '.join(summary.failed)}", err=True)

    if summary.failed:
        raise typer.Exit(1)
