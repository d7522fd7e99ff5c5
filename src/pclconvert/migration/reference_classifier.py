"""
Reference classifier.

Decides whether an external assembly reference belongs to the classic .NET
Framework distribution and therefore has to be stripped from a project that
is being made portable.
"""

from __future__ import annotations

import logging
from typing import Callable

from ..domain.entities import AssemblyReference, ProjectNode, ResolvedAssembly
from ..domain.interfaces import ProjectHost
from ..infra.exceptions import AssemblyNotFoundError, ReferenceRemovalError

_logger = logging.getLogger(__name__)

FRAMEWORK_PRODUCT_NAME = "Microsoft® .NET Framework"
CORE_RUNTIME_ASSEMBLY = "mscorlib"

Resolver = Callable[[str], ResolvedAssembly]


def is_framework_assembly(assembly: ResolvedAssembly) -> bool:
    return assembly.product == FRAMEWORK_PRODUCT_NAME


def is_framework_reference(reference: AssemblyReference, resolve: Resolver) -> bool:
    """
    Classify one reference.

    Project-to-project references and the core runtime assembly are never
    framework references. Assemblies the resolver cannot find are kept.
    """
    if reference.has_source_project:
        return False
    if CORE_RUNTIME_ASSEMBLY in reference.name:
        return False

    identity = reference.full_name
    try:
        assembly = resolve(identity)
    except AssemblyNotFoundError:
        # third-party assembly unavailable to the host
        return False
    except Exception as e:
        _logger.debug("Resolving %s failed: %s", identity, e)
        return False

    return is_framework_assembly(assembly)


def strip_framework_references(host: ProjectHost, project: ProjectNode) -> list[AssemblyReference]:
    """
    Remove every framework reference from a project.

    A reference that cannot be removed is skipped so the rest still go.

    Returns:
        The references that were removed
    """
    removed: list[AssemblyReference] = []
    for reference in host.list_references(project):
        if not is_framework_reference(reference, host.resolve_assembly_identity):
            continue
        try:
            host.remove_reference(project, reference)
        except ReferenceRemovalError as e:
            _logger.debug("Could not remove reference %s from %s: %s", reference.name, project.name, e)
            continue
        removed.append(reference)

    if removed:
        _logger.info(
            "Removed %d framework references from %s: %s",
            len(removed),
            project.name,
            ", ".join(r.name for r in removed),
        )
    return removed
