"""
Catalog command group.

Shows the classic frameworks and portable profiles loaded from the
definition lists.
"""

from __future__ import annotations

import json

import typer

from ...catalog.framework_catalog import FrameworkCatalog, get_catalog
from ...infra.exceptions import CatalogLoadError

app = typer.Typer(name="catalog", help="Known frameworks and portable profiles")


def load_catalog_or_exit() -> FrameworkCatalog:
    try:
        return get_catalog()
    except CatalogLoadError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


def wants_json(ctx: typer.Context, json_output: bool) -> bool:
    return json_output or bool((ctx.obj or {}).get("json"))


@app.command("frameworks")
def list_frameworks(
    ctx: typer.Context,
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
):
    """List the classic target frameworks."""
    catalog = load_catalog_or_exit()
    if wants_json(ctx, json_output):
        payload = [{"id": f.id, "name": f.name} for f in catalog.frameworks]
        typer.echo(json.dumps(payload, indent=2))
        return
    for framework in catalog.frameworks:
        typer.echo(f"{framework.id:>8}  {framework.name}")


@app.command("profiles")
def list_profiles(
    ctx: typer.Context,
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
):
    """List the portable profiles that can be used as conversion targets."""
    catalog = load_catalog_or_exit()
    if wants_json(ctx, json_output):
        payload = [{"name": p.name, "description": p.description} for p in catalog.portable_profiles]
        typer.echo(json.dumps(payload, indent=2))
        return
    for profile in catalog.portable_profiles:
        typer.echo(f"{profile.name:<12} {profile.description}")
