"""Rewrite declared dependencies into a publishable POM dependency section."""

from __future__ import annotations

import logging

from j_pub_variants.exceptions import DeclarationError, ForbiddenRangeDependencyError
from j_pub_variants.models import (
    BOM_MARKER,
    GAV,
    UNSPECIFIED,
    DeclaredDependencies,
    DeclaredDependency,
    DependencyRecord,
    PublishedComponent,
    Scope,
    Variant,
)
from j_pub_variants.resolver import ComponentRegistry, suffixed_artifact_id
from j_pub_variants.tree import DescriptorNode, replace_child

logger = logging.getLogger(__name__)


def _coordinates(
    dep: DeclaredDependency,
    owner: PublishedComponent,
    registry: ComponentRegistry,
    variant: Variant | None,
) -> GAV:
    if dep.project:
        component = registry.resolve(dep.name, owner=owner.ref)
        return GAV(
            group_id=component.group_id,
            artifact_id=suffixed_artifact_id(component.artifact_id, variant),
            version=component.version,
        )
    if not dep.group:
        raise DeclarationError(f"External dependency without a group: {dep.notation()}")
    return GAV(group_id=dep.group, artifact_id=dep.name, version=dep.version)


def _is_self_reference(dep: DeclaredDependency, owner: PublishedComponent) -> bool:
    if dep.project:
        return dep.name == owner.ref
    return (dep.group, dep.name) == owner.identity()


def rewrite_dependencies(
    owner: PublishedComponent,
    declared: DeclaredDependencies,
    registry: ComponentRegistry,
    variant: Variant | None = None,
) -> list[DependencyRecord]:
    """Classify and rewrite the declared dependencies of `owner`.

    Runtime entries come first, then compile entries. A dependency declared in
    both `api` and `implementation` is emitted once, as compile. Entries named
    `unspecified` and references to `owner` itself are dropped. Project
    references are replaced by the published coordinates of the matching
    variant.

    Args:
        owner: The component whose descriptor is being generated.
        declared: Its declared dependencies.
        registry: Lookup for intra-repository references.
        variant: Target variant, or None for the base flavor.

    Raises:
        ForbiddenRangeDependencyError: If any entry is a BOM declaration.
        UnknownComponentError: If a project reference is not registered.

    Returns:
        The records of the replacement dependency section, in emission order.
    """
    sections = (
        (Scope.RUNTIME, declared.runtime_dependencies()),
        (Scope.COMPILE, declared.compile_dependencies()),
    )

    records: list[DependencyRecord] = []
    for scope, deps in sections:
        for dep in deps:
            if dep.name == UNSPECIFIED:
                logger.debug("Skipping unresolved dependency of %s: %s", owner.ref, dep.notation())
                continue
            if _is_self_reference(dep, owner):
                logger.debug("Skipping self-reference of %s", owner.ref)
                continue
            if BOM_MARKER in dep.name:
                raise ForbiddenRangeDependencyError(owner.ref, dep.notation())

            records.append(DependencyRecord(gav=_coordinates(dep, owner, registry, variant), scope=scope))

    logger.debug(
        "Rewrote %d dependencies of %s for variant %s",
        len(records),
        owner.ref,
        variant.label if variant else "<base>",
    )
    return records


def write_dependency_section(root: DescriptorNode, records: list[DependencyRecord]) -> DescriptorNode:
    """Replace the `dependencies` section under `root` with `records`.

    A stale section (e.g. one generated by default tooling) is removed first.

    Returns:
        The new `dependencies` node.
    """
    section = replace_child(root, "dependencies")
    for record in records:
        node = section.append_child("dependency")
        node.append_child("groupId", record.gav.group_id)
        node.append_child("artifactId", record.gav.artifact_id)
        if record.gav.version:
            node.append_child("version", record.gav.version)
        node.append_child("scope", record.scope.value)
    return section


def apply_dependencies(
    root: DescriptorNode,
    owner: PublishedComponent,
    declared: DeclaredDependencies,
    registry: ComponentRegistry,
    variant: Variant | None = None,
) -> list[DependencyRecord]:
    """Rewrite the dependencies of `owner` and splice them into `root`.

    The tree is only touched once every record has been resolved, so a failing
    rewrite leaves it unchanged.
    """
    records = rewrite_dependencies(owner, declared, registry, variant)
    write_dependency_section(root, records)
    return records
