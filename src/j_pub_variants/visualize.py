"""Rich rendering utilities for rewritten dependency sections."""

from __future__ import annotations

from rich.tree import Tree

from j_pub_variants.models import GAV, DependencyRecord, Scope


_SCOPE_STYLES = {Scope.RUNTIME: "cyan", Scope.COMPILE: "green"}


def build_dependency_tree(gav: GAV, records: list[DependencyRecord], internal_group: str | None = None) -> Tree:
    """Build a Rich Tree of a publication's dependencies, one branch per scope.

    Scopes appear in emission order. Entries of `internal_group` (the
    repository's own, variant-rewritten libraries) are highlighted.

    Args:
        gav: Coordinates of the publication.
        records: The rewritten dependency section.
        internal_group: Group ID of intra-repository components, if known.

    Returns:
        A Rich Tree object for rendering.
    """
    root = Tree(f"[bold]{gav.compact()}[/bold]")
    if not records:
        root.add("[dim]No dependencies published[/dim]")
        return root

    branches: dict[Scope, Tree] = {}
    for record in records:
        branch = branches.get(record.scope)
        if branch is None:
            style = _SCOPE_STYLES[record.scope]
            branch = branches[record.scope] = root.add(f"[{style}]{record.scope.value}[/{style}]")
        label = record.gav.compact()
        if internal_group is not None and record.gav.group_id == internal_group:
            label = f"[bold]{label}[/bold]"
        branch.add(label)
    return root
