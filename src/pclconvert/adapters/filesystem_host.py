"""
Filesystem project host.

Implements ProjectHost directly on disk, without an IDE:

- projects come from a .sln file (solution folders included), a single
  .csproj, or every .csproj below a directory
- the current framework is read from TargetFrameworkVersion /
  TargetFrameworkProfile / ProjectTypeGuids
- references are the project's <Reference> and <ProjectReference> items;
  removal deletes the item's lines and leaves the rest of the file as is
- assembly identities resolve against a manifest of known framework
  assemblies (framework_assemblies.yaml)
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path

from ..catalog.framework_catalog import load_definition_list
from ..domain.entities import (
    AssemblyReference,
    FileItem,
    FrameworkDescriptor,
    ProjectNode,
    ResolvedAssembly,
)
from ..domain.interfaces import ProjectHost
from ..infra.exceptions import (
    AssemblyNotFoundError,
    MetadataReadError,
    ProjectItemAccessError,
    ProjectUnavailableError,
    ReferenceRemovalError,
)
from ..migration.project_file import PORTABLE_PROJECT_TYPE_GUIDS, split_lines
from ..shared.schemas import FrameworkAssemblyDefinition

_logger = logging.getLogger(__name__)

# Project("{TYPE-GUID}") = "Name", "Path\To\Project.csproj", "{PROJECT-GUID}"
_SLN_PROJECT_RE = re.compile(
    r'^Project\(\"\{([^}]+)\}\"\)\s*=\s*\"([^\"]+)\"\s*,\s*\"([^\"]+)\"\s*,\s*\"\{([^}]+)\}\"',
    re.MULTILINE,
)
_SLN_NESTED_SECTION_RE = re.compile(
    r"GlobalSection\(NestedProjects\)[^\n]*\n(.*?)EndGlobalSection",
    re.DOTALL,
)
_SLN_NESTED_ENTRY_RE = re.compile(r"\{([^}]+)\}\s*=\s*\{([^}]+)\}")
_SOLUTION_FOLDER_GUID = "2150E333-8FDC-42A3-9474-1A3956D46DE8"

_FRAMEWORK_VERSION_RE = re.compile(r"<TargetFrameworkVersion>\s*v([\d.]+)\s*</TargetFrameworkVersion>")
_FRAMEWORK_PROFILE_RE = re.compile(r"<TargetFrameworkProfile>\s*([^<\s]+)\s*</TargetFrameworkProfile>")
_REFERENCE_RE = re.compile(r'<Reference\s+Include="([^"]+)"')
_PROJECT_REFERENCE_RE = re.compile(r'<ProjectReference\s+Include="([^"]+)"')

_UTF8_BOM = b"\xef\xbb\xbf"
_PROJECT_SUFFIXES = (".csproj",)
_SKIPPED_DIRS = {"bin", "obj", ".vs", ".git", "packages"}


def framework_id(version: str) -> int:
    """Encode "4.5" / "4.5.1" as (major << 16) | (build << 8) | minor."""
    parts = [int(p) for p in version.split(".")] + [0, 0]
    major, minor, build = parts[0], parts[1], parts[2]
    return (major << 16) | (build << 8) | minor


def parse_assembly_identity(identity: str) -> AssemblyReference:
    """Parse "Name, Version=1.2.3.4, Culture=neutral, PublicKeyToken=abc" into a reference."""
    name, *fields = [part.strip() for part in identity.split(",")]
    values = {}
    for item in fields:
        key, _, value = item.partition("=")
        values[key.strip().lower()] = value.strip()

    version = [int(p) for p in values.get("version", "0.0.0.0").split(".") if p.isdigit()]
    version += [0] * (4 - len(version))
    culture = values.get("culture")
    token = values.get("publickeytoken")
    return AssemblyReference(
        name=name,
        major_version=version[0],
        minor_version=version[1],
        build_number=version[2],
        revision_number=version[3],
        culture=None if culture in (None, "", "neutral") else culture,
        public_key_token=None if token in (None, "", "null") else token,
    )


@dataclass
class _TextDocument:
    """Project file content with its BOM and line terminator remembered."""
    lines: list[str]
    newline: str
    bom: bool

    @classmethod
    def read(cls, path: Path) -> _TextDocument:
        raw = path.read_bytes()
        bom = raw.startswith(_UTF8_BOM)
        text = raw.decode("utf-8-sig")
        newline = "\r\n" if "\r\n" in text else "\n"
        return cls(lines=split_lines(text), newline=newline, bom=bom)

    def write(self, path: Path) -> None:
        encoding = "utf-8-sig" if self.bom else "utf-8"
        with open(path, "w", encoding=encoding, newline="") as f:
            f.write("".join(line + self.newline for line in self.lines))


class FilesystemProjectHost(ProjectHost):
    """ProjectHost over .sln/.csproj files on disk."""

    def __init__(
        self,
        root: Path | str,
        *,
        assembly_manifest: Path | str | None = None,
        assemblies: dict[str, str] | None = None,
    ) -> None:
        """
        Args:
            root: A .sln file, a .csproj file, or a directory to scan
            assembly_manifest: YAML list of {Name, Product} known assemblies
            assemblies: Name -> product mapping (overrides the manifest)
        """
        self._root = Path(root)
        if assemblies is not None:
            self._assemblies = dict(assemblies)
        else:
            if assembly_manifest is None:
                from ..infra.settings import settings

                assembly_manifest = settings.assembly_manifest
            self._assemblies = {
                d.name: d.product
                for d in load_definition_list(
                    Path(assembly_manifest), "assemblies", FrameworkAssemblyDefinition
                )
            }

    # ------------------------------------------------------------------
    # Project tree
    # ------------------------------------------------------------------

    def list_projects(self) -> list[ProjectNode]:
        if self._root.is_file() and self._root.suffix.lower() == ".sln":
            return self._list_solution_projects(self._root)
        if self._root.is_file():
            return [self._project_node(self._root)]
        if self._root.is_dir():
            return [self._project_node(p) for p in self._scan_projects(self._root)]
        _logger.warning("Project root not found: %s", self._root)
        return []

    def _scan_projects(self, directory: Path) -> list[Path]:
        found = []
        for dirpath, dirnames, filenames in os.walk(directory):
            dirnames[:] = sorted(d for d in dirnames if d not in _SKIPPED_DIRS)
            for filename in sorted(filenames):
                if filename.lower().endswith(_PROJECT_SUFFIXES):
                    found.append(Path(dirpath) / filename)
        return found

    def _project_node(self, path: Path) -> ProjectNode:
        return ProjectNode(name=path.stem, file_path=str(path), handle=path)

    def _list_solution_projects(self, sln_path: Path) -> list[ProjectNode]:
        content = sln_path.read_text(encoding="utf-8-sig")
        base_dir = sln_path.parent

        nodes: dict[str, ProjectNode | None] = {}
        order: list[str] = []
        for match in _SLN_PROJECT_RE.finditer(content):
            type_guid = match.group(1).upper()
            name = match.group(2)
            rel_path = match.group(3).replace("\\", "/")
            project_guid = match.group(4).upper()
            order.append(project_guid)

            if type_guid == _SOLUTION_FOLDER_GUID:
                nodes[project_guid] = ProjectNode(name=name, is_solution_folder=True)
                continue

            path = base_dir / rel_path
            if not path.is_file():
                # unloaded project: keep a hole so folders can skip it
                _logger.debug("Solution entry %s points to missing file %s", name, path)
                nodes[project_guid] = None
                continue
            nodes[project_guid] = ProjectNode(name=name, file_path=str(path), handle=path)

        nested: dict[str, str] = {}
        section = _SLN_NESTED_SECTION_RE.search(content)
        if section:
            for child, parent in _SLN_NESTED_ENTRY_RE.findall(section.group(1)):
                nested[child.upper()] = parent.upper()

        top_level: list[ProjectNode] = []
        for guid in order:
            node = nodes[guid]
            parent = nodes.get(nested.get(guid, ""))
            if guid in nested and parent is not None and parent.is_solution_folder:
                parent.children.append(node)
            elif node is not None:
                top_level.append(node)
        return top_level

    # ------------------------------------------------------------------
    # Project properties
    # ------------------------------------------------------------------

    def _project_path(self, project: ProjectNode) -> Path:
        if not project.file_path:
            raise ProjectUnavailableError(f"Project {project.name} has no file")
        path = Path(project.file_path)
        if not path.is_file():
            raise ProjectUnavailableError(f"Project file not found: {path}")
        return path

    def current_framework_of(self, project: ProjectNode) -> FrameworkDescriptor:
        try:
            text = self._project_path(project).read_text(encoding="utf-8-sig")
        except (ProjectUnavailableError, OSError, UnicodeDecodeError) as e:
            raise MetadataReadError(f"Cannot read {project.name}: {e}") from e

        version = _FRAMEWORK_VERSION_RE.search(text)
        if version is None:
            raise MetadataReadError(f"{project.name} has no TargetFrameworkVersion")

        match = _FRAMEWORK_PROFILE_RE.search(text)
        profile = match.group(1) if match else None
        # classic profiles ("Client") keep the .NETFramework identifier
        if PORTABLE_PROJECT_TYPE_GUIDS in text or (profile and profile.startswith("Profile")):
            moniker = f".NETPortable,Version=v{version.group(1)}"
        else:
            moniker = f".NETFramework,Version=v{version.group(1)}"
        if profile:
            moniker += f",Profile={profile}"
        return FrameworkDescriptor(id=framework_id(version.group(1)), name=moniker)

    def save_project(self, project: ProjectNode) -> None:
        # nothing is buffered outside the file itself
        self._project_path(project)

    # ------------------------------------------------------------------
    # Items and text
    # ------------------------------------------------------------------

    def list_file_items(self, project: ProjectNode) -> list[FileItem]:
        directory = self._project_path(project).parent
        try:
            return self._directory_items(directory)
        except OSError as e:
            raise ProjectItemAccessError(f"Cannot list items of {project.name}: {e}") from e

    def _directory_items(self, directory: Path) -> list[FileItem]:
        items = []
        for entry in sorted(directory.iterdir()):
            if entry.is_dir():
                if entry.name in _SKIPPED_DIRS:
                    continue
                items.append(FileItem(path=None, children=self._directory_items(entry)))
            elif entry.is_file():
                items.append(FileItem(path=str(entry)))
        return items

    def read_text(self, path: str) -> str:
        try:
            with open(path, "r", encoding="utf-8-sig", newline="") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise ProjectItemAccessError(f"Cannot read {path}: {e}") from e

    def write_text(self, path: str, text: str) -> None:
        """Replace the item's content, keeping a UTF-8 BOM the file already had."""
        try:
            with open(path, "rb") as f:
                bom = f.read(len(_UTF8_BOM)) == _UTF8_BOM
        except FileNotFoundError:
            bom = False
        except OSError as e:
            raise ProjectItemAccessError(f"Cannot read {path}: {e}") from e

        encoding = "utf-8-sig" if bom else "utf-8"
        try:
            with open(path, "w", encoding=encoding, newline="") as f:
                f.write(text)
        except OSError as e:
            raise ProjectItemAccessError(f"Cannot write {path}: {e}") from e

    # ------------------------------------------------------------------
    # References
    # ------------------------------------------------------------------

    def list_references(self, project: ProjectNode) -> list[AssemblyReference]:
        path = self._project_path(project)
        try:
            document = _TextDocument.read(path)
        except (OSError, UnicodeDecodeError) as e:
            raise ProjectItemAccessError(f"Cannot read references of {path}: {e}") from e
        references = []
        for line in document.lines:
            match = _REFERENCE_RE.search(line)
            if match:
                references.append(parse_assembly_identity(match.group(1)))
                continue
            match = _PROJECT_REFERENCE_RE.search(line)
            if match:
                stem = Path(match.group(1).replace("\\", "/")).stem
                references.append(AssemblyReference(name=stem, has_source_project=True))
        return references

    def remove_reference(self, project: ProjectNode, reference: AssemblyReference) -> None:
        path = self._project_path(project)
        try:
            document = _TextDocument.read(path)
        except (OSError, UnicodeDecodeError) as e:
            raise ReferenceRemovalError(f"Cannot read {path}: {e}") from e
        marker = re.compile(r'<Reference\s+Include="' + re.escape(reference.name) + r'(,|")')

        start = next((i for i, line in enumerate(document.lines) if marker.search(line)), -1)
        if start < 0:
            raise ReferenceRemovalError(f"Reference {reference.name} not found in {path}")

        end = start
        if not document.lines[start].rstrip().endswith("/>"):
            end = next(
                (i for i in range(start, len(document.lines)) if "</Reference>" in document.lines[i]),
                -1,
            )
            if end < 0:
                raise ReferenceRemovalError(f"Unterminated reference {reference.name} in {path}")

        del document.lines[start:end + 1]
        try:
            document.write(path)
        except OSError as e:
            raise ReferenceRemovalError(f"Cannot write {path}: {e}") from e
        _logger.debug("Removed reference %s from %s", reference.name, path)

    def resolve_assembly_identity(self, identity: str) -> ResolvedAssembly:
        name = identity.split(",", 1)[0].strip()
        product = self._assemblies.get(name)
        if product is None:
            raise AssemblyNotFoundError(f"Could not load assembly '{identity}'")
        return ResolvedAssembly(name=name, product=product)
