"""
CLI Router: command group registration.

Each command group is a Typer app owning its subcommands. The router adds
the groups to the root app and keeps track of which docs/cli page documents
each group.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import typer


class CliRouter:
    """Registers command groups on a root Typer app together with their doc pages."""

    def __init__(self, root_app: typer.Typer) -> None:
        self.root_app = root_app
        self._registered_groups: dict[str, dict[str, Any]] = {}

    def register(
        self,
        name: str,
        command_group: typer.Typer,
        *,
        help_text: str | None = None,
        doc_path: str | None = None,
    ) -> None:
        """
        Register a command group.

        Args:
            name: Command group name (e.g. "project", "catalog")
            command_group: Typer app for the group
            help_text: Help shown by the root app
            doc_path: Documentation page relative to docs/cli/

        Raises:
            ValueError: the name is already registered
        """
        if name in self._registered_groups:
            raise ValueError(f"Command group '{name}' is already registered")

        self.root_app.add_typer(command_group, name=name, help=help_text)
        self._registered_groups[name] = {
            "name": name,
            "help": help_text,
            "doc_path": doc_path,
            "command_group": command_group,
        }

    def list_registered_groups(self) -> list[str]:
        """Registered group names in registration order."""
        return list(self._registered_groups.keys())

    def validate_documentation_links(self, docs_root: Path | None = None) -> dict[str, bool]:
        """
        Check that every registered group has its documentation page.

        Args:
            docs_root: docs/cli directory (defaults to the repository's docs/cli)

        Returns:
            Group name -> True when the page exists
        """
        if docs_root is None:
            # src/pclconvert/cli/ -> repository root
            docs_root = Path(__file__).resolve().parents[3] / "docs" / "cli"

        results: dict[str, bool] = {}
        for name, metadata in self._registered_groups.items():
            doc_path = metadata.get("doc_path")
            results[name] = bool(doc_path) and (docs_root / doc_path).is_file()
        return results


_router: CliRouter | None = None


def get_router(root_app: typer.Typer) -> CliRouter:
    """Get or create the global CLI router."""
    global _router
    if _router is None:
        _router = CliRouter(root_app)
    return _router
