"""
Project file rewriter.

Retargets a classic .NET 4.5 ``.csproj`` to a portable profile by editing a
handful of known marker lines. Everything else in the file is kept verbatim,
line by line; the file is never parsed as XML so the diff stays minimal.

States (evaluated as guards, never stored):

    NOT_APPLICABLE     no ``<TargetFrameworkVersion>v4.5</TargetFrameworkVersion>`` line
    ALREADY_PORTABLE   portable import or portable project type GUIDs present
    NEEDS_CONVERSION   anything else

Files that do not contain the exact markers are left untouched.
"""

from __future__ import annotations

import logging
import os
import re
import shutil
import stat
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable

from ..infra.exceptions import ProjectFileWriteError, ProjectItemAccessError

_logger = logging.getLogger(__name__)

INDENT = "    "

TARGET_FRAMEWORK_V45 = "<TargetFrameworkVersion>v4.5</TargetFrameworkVersion>"
EMPTY_TARGET_FRAMEWORK_PROFILE = "<TargetFrameworkProfile />"
TOOLS_PATH_IMPORT = '<Import Project="$(MSBuildToolsPath)'
BIN_PATH_IMPORT = '<Import Project="$(MSBuildBinPath)'
PORTABLE_IMPORT = (
    '<Import Project="$(MSBuildExtensionsPath32)\\Microsoft\\Portable\\'
    '$(TargetFrameworkVersion)\\Microsoft.Portable.CSharp.targets" />'
)
PORTABLE_PROJECT_TYPE_GUIDS = (
    "<ProjectTypeGuids>{786C830F-07A1-408B-BD7F-6EE04809D6DB};"
    "{FAE04EC0-301F-11D3-BF4B-00C04F79EFBC}</ProjectTypeGuids>"
)
BACKUP_SUFFIX = "bak"

_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


class ProjectFileState(str, Enum):
    NOT_APPLICABLE = "not_applicable"
    ALREADY_PORTABLE = "already_portable"
    NEEDS_CONVERSION = "needs_conversion"


def profile_line(profile_name: str) -> str:
    return f"<TargetFrameworkProfile>{profile_name}</TargetFrameworkProfile>"


def find_line(lines: list[str], marker: str) -> int:
    """Index of the first line containing marker, or -1."""
    for index, line in enumerate(lines):
        if marker in line:
            return index
    return -1


def classify(lines: list[str]) -> ProjectFileState:
    if find_line(lines, TARGET_FRAMEWORK_V45) < 0:
        return ProjectFileState.NOT_APPLICABLE
    if find_line(lines, PORTABLE_IMPORT) >= 0 or find_line(lines, PORTABLE_PROJECT_TYPE_GUIDS) >= 0:
        return ProjectFileState.ALREADY_PORTABLE
    return ProjectFileState.NEEDS_CONVERSION


def replace_line_if_exists(lines: list[str], marker: str, replacement: str) -> bool:
    """
    Replace the first line containing marker.

    A match on the very first line is left alone; a project file never
    starts with an import.
    """
    index = find_line(lines, marker)
    if index < 1:
        return False
    del lines[index]
    lines.insert(index, replacement)
    return True


def retarget(lines: list[str], profile_name: str) -> list[str]:
    """
    Compute the portable version of a project file.

    Args:
        lines: Project file lines without terminators (not mutated)
        profile_name: Portable profile, e.g. "Profile136"

    Returns:
        New list of lines; equal to the input unless the state is NEEDS_CONVERSION
    """
    result = list(lines)
    if classify(result) is not ProjectFileState.NEEDS_CONVERSION:
        return result

    replace_line_if_exists(result, TOOLS_PATH_IMPORT, INDENT + PORTABLE_IMPORT)
    replace_line_if_exists(result, BIN_PATH_IMPORT, INDENT + PORTABLE_IMPORT)

    position = find_line(result, EMPTY_TARGET_FRAMEWORK_PROFILE)
    if position > 0:
        del result[position]
    else:
        position = find_line(result, TARGET_FRAMEWORK_V45)

    # profile line ends up before the GUID line
    result.insert(position, INDENT + PORTABLE_PROJECT_TYPE_GUIDS)
    result.insert(position, INDENT + profile_line(profile_name))
    return result


def serialize(lines: list[str], newline: str | None = None) -> str:
    """Join lines with the terminator, including one after the last line."""
    terminator = os.linesep if newline is None else newline
    return "".join(line + terminator for line in lines)


def split_lines(text: str) -> list[str]:
    """
    Split on CRLF, CR and LF only.

    Form feeds, NEL and the Unicode line separators stay inside their line.
    """
    lines = _LINE_BREAK_RE.split(text)
    if lines[-1] == "":
        lines.pop()
    return lines


def read_lines(path: Path) -> list[str]:
    with open(path, "r", encoding="utf-8-sig", newline="") as f:
        return split_lines(f.read())


def backup_path_for(path: Path) -> Path:
    return path.with_name(path.name + BACKUP_SUFFIX)


def clear_read_only(path: Path) -> None:
    mode = path.stat().st_mode
    if not mode & stat.S_IWRITE:
        os.chmod(path, mode | stat.S_IWRITE)


@dataclass(frozen=True)
class RewriteResult:
    path: Path
    backup_path: Path
    state: ProjectFileState

    @property
    def changed(self) -> bool:
        return self.state is ProjectFileState.NEEDS_CONVERSION


def rewrite_project_file(
    path: Path | str,
    profile_name: str,
    *,
    save: Callable[[], None] | None = None,
    newline: str | None = None,
) -> RewriteResult:
    """
    Retarget a project file on disk, keeping a ``<path>bak`` backup.

    The original file is renamed to the backup and the new content is written
    as a fresh file, so file watchers see a replaced file. If that write
    fails, the original is copied back from the backup.

    Args:
        path: Project file
        profile_name: Portable profile name
        save: Flushes pending editor state before the file is touched
        newline: Line terminator, platform default when None

    Raises:
        ProjectItemAccessError: the file could not be read or backed up (nothing changed)
        ProjectFileWriteError: writing the new content failed (original restored)
    """
    path = Path(path)
    try:
        lines = read_lines(path)
    except (OSError, UnicodeDecodeError) as e:
        raise ProjectItemAccessError(f"Cannot read project file {path}: {e}") from e
    state = classify(lines)
    content = serialize(retarget(lines, profile_name), newline)

    if save is not None:
        save()

    backup = backup_path_for(path)
    try:
        clear_read_only(path)
        if backup.exists():
            backup.unlink()
        os.replace(path, backup)
    except OSError as e:
        # original is still in place
        raise ProjectItemAccessError(f"Cannot back up project file {path}: {e}") from e

    try:
        with open(path, "x", encoding="utf-8", newline="") as f:
            f.write(content)
    except OSError as e:
        _logger.error("Writing %s failed, restoring from %s: %s", path, backup, e)
        if path.exists():
            path.unlink()
        shutil.copy2(backup, path)
        raise ProjectFileWriteError(path, backup, e) from e

    _logger.info("Rewrote %s (%s, profile=%s)", path, state.value, profile_name)
    return RewriteResult(path=path, backup_path=backup, state=state)
