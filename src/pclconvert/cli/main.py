"""
Main CLI application using Typer with router-based command dispatch.

Command groups:
    project   list and convert .NET projects
    catalog   show known frameworks and portable profiles
"""

from __future__ import annotations

import typer

from ..infra.logging import configure_logging
from .commands import catalog, project
from .router import get_router

app = typer.Typer(help="Convert .NET 4.5 class libraries into Portable Class Libraries")

router = get_router(app)

router.register(
    "project",
    project.app,
    help_text="List and convert .NET projects",
    doc_path="project.md",
)

router.register(
    "catalog",
    catalog.app,
    help_text="Known frameworks and portable profiles",
    doc_path="catalog.md",
)


@app.callback()
def main(
    ctx: typer.Context,
    json: bool = typer.Option(False, "--json", help="Output in JSON format"),
    log_level: str = typer.Option(None, "--log-level", help="Override LOG_LEVEL (DEBUG, INFO, ...)"),
):
    """pclconvert - retarget classic .NET projects to portable profiles."""
    ctx.ensure_object(dict)
    ctx.obj["json"] = json
    configure_logging(level=log_level)


def cli():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    cli()
