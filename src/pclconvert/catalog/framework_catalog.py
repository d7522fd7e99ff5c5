"""
Framework catalog.

Loads the classic framework list (frameworks.yaml) and the portable profile
list (portable_profiles.yaml) once, and offers read-only lookups over them.

Expected YAML format (a bare list is accepted as well):

    frameworks:
      - Id: 262149
        Name: .NETFramework,Version=v4.5

    portable_profiles:
      - Name: Profile136
        Description: .NET Framework 4.0.3, Silverlight 5, Windows 8, Windows Phone 8

JSON documents load too, since JSON is a subset of YAML.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, TypeVar

import yaml
from pydantic import BaseModel, ValidationError

from ..domain.entities import FrameworkDescriptor, PortableProfileDescriptor
from ..infra.exceptions import CatalogLoadError, UnknownProfileError
from ..shared.schemas import FrameworkDefinition, PortableProfileDefinition

_logger = logging.getLogger(__name__)

FRAMEWORKS_FILE = "frameworks.yaml"
PORTABLE_PROFILES_FILE = "portable_profiles.yaml"

_SchemaT = TypeVar("_SchemaT", bound=BaseModel)


def load_definition_list(path: Path, key: str, schema: type[_SchemaT]) -> list[_SchemaT]:
    """
    Load and validate one definition list.

    Args:
        path: YAML or JSON file
        key: Top-level key holding the records (ignored when the document is a list)
        schema: Pydantic model each record is validated against

    Raises:
        CatalogLoadError: file missing, unparsable, or holding invalid records
    """
    if not path.is_file():
        raise CatalogLoadError(f"Definition list not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data: Any = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise CatalogLoadError(f"Failed to read definition list {path}: {e}") from e

    if isinstance(data, dict):
        data = data.get(key)
    if not isinstance(data, list):
        raise CatalogLoadError(f"Definition list {path} must contain a list under '{key}'")

    records = []
    for index, item in enumerate(data):
        try:
            records.append(schema.model_validate(item))
        except ValidationError as e:
            raise CatalogLoadError(f"Invalid record #{index} in {path}: {e}") from e

    _logger.debug("Loaded %d records from %s", len(records), path)
    return records


class FrameworkCatalog:
    """Read-only catalog of classic frameworks and portable profiles."""

    def __init__(
        self,
        frameworks: list[FrameworkDescriptor] | tuple[FrameworkDescriptor, ...],
        portable_profiles: list[PortableProfileDescriptor] | tuple[PortableProfileDescriptor, ...],
    ) -> None:
        self._frameworks = tuple(frameworks)
        self._portable_profiles = tuple(portable_profiles)

    @classmethod
    def load(cls, definitions_dir: Path | str) -> FrameworkCatalog:
        """
        Load both definition lists from a directory.

        Raises:
            CatalogLoadError: either list is missing or malformed
        """
        definitions_dir = Path(definitions_dir)
        frameworks = [
            FrameworkDescriptor(id=d.id, name=d.name)
            for d in load_definition_list(
                definitions_dir / FRAMEWORKS_FILE, "frameworks", FrameworkDefinition
            )
        ]
        profiles = [
            PortableProfileDescriptor(name=d.name, description=d.description)
            for d in load_definition_list(
                definitions_dir / PORTABLE_PROFILES_FILE, "portable_profiles", PortableProfileDefinition
            )
        ]
        _logger.info(
            "Loaded %d frameworks and %d portable profiles from %s",
            len(frameworks),
            len(profiles),
            definitions_dir,
        )
        return cls(frameworks, profiles)

    @property
    def frameworks(self) -> tuple[FrameworkDescriptor, ...]:
        return self._frameworks

    @property
    def portable_profiles(self) -> tuple[PortableProfileDescriptor, ...]:
        return self._portable_profiles

    def framework_by_id(self, framework_id: int) -> FrameworkDescriptor | None:
        for framework in self._frameworks:
            if framework.id == framework_id:
                return framework
        return None

    def find_frameworks(self, name_fragment: str) -> list[FrameworkDescriptor]:
        """Frameworks whose name contains the fragment (case-sensitive, like the moniker)."""
        return [f for f in self._frameworks if name_fragment in f.name]

    def portable_profile(self, name: str) -> PortableProfileDescriptor:
        """
        Look up a portable profile by exact name.

        Raises:
            UnknownProfileError: no profile with that name
        """
        for profile in self._portable_profiles:
            if profile.name == name:
                return profile
        known = ", ".join(p.name for p in self._portable_profiles)
        raise UnknownProfileError(f"Unknown portable profile {name!r} (known: {known})")


_default_catalog: FrameworkCatalog | None = None


def get_catalog() -> FrameworkCatalog:
    """
    Get or load the process-wide catalog from the configured definitions directory.

    Raises:
        CatalogLoadError: startup-fatal; the tool cannot run without the lists
    """
    global _default_catalog
    if _default_catalog is None:
        from ..infra.settings import settings

        _default_catalog = FrameworkCatalog.load(settings.definitions_dir)
    return _default_catalog
