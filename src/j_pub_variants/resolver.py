"""Resolve internal project references to their published coordinates."""

from __future__ import annotations

from collections.abc import Iterable

from j_pub_variants.exceptions import ConfigError, UnknownComponentError, UnknownVariantError
from j_pub_variants.models import PublishedComponent, Variant


def suffixed_artifact_id(base: str, variant: Variant | None = None) -> str:
    """Return the artifact ID under which `base` is published for `variant`.

    Examples:
        >>> suffixed_artifact_id("core")
        'core'
        >>> suffixed_artifact_id("core", Variant(label="a", artifact_suffix="a"))
        'core-a'
    """
    if variant is None:
        return base
    return f"{base}-{variant.artifact_suffix}"


class ComponentRegistry:
    """Read-only lookup of the repository's published components and variants.

    Built once at startup and never mutated afterwards, so it can be shared
    between publications.
    """

    def __init__(
        self,
        internal_group: str,
        components: Iterable[PublishedComponent],
        variants: Iterable[Variant] = (),
    ) -> None:
        self._internal_group = internal_group
        self._by_ref: dict[str, PublishedComponent] = {}
        self._by_artifact: dict[str, PublishedComponent] = {}
        self._variants: dict[str, Variant] = {}

        identities: set[tuple[str, str]] = set()
        for component in components:
            if component.ref in self._by_ref:
                raise ConfigError(f"Duplicate component reference: {component.ref}")
            if component.identity() in identities:
                raise ConfigError(
                    f"Duplicate component coordinates: {component.group_id}:{component.artifact_id}"
                )
            if component.artifact_id in self._by_artifact:
                raise ConfigError(f"Duplicate component artifact ID: {component.artifact_id}")
            identities.add(component.identity())
            self._by_ref[component.ref] = component
            self._by_artifact[component.artifact_id] = component

        suffixes: set[str] = set()
        for variant in variants:
            if variant.label in self._variants:
                raise ConfigError(f"Duplicate variant label: {variant.label}")
            if variant.artifact_suffix in suffixes:
                raise ConfigError(f"Duplicate variant suffix: {variant.artifact_suffix}")
            suffixes.add(variant.artifact_suffix)
            self._variants[variant.label] = variant

    @property
    def internal_group(self) -> str:
        return self._internal_group

    @property
    def components(self) -> list[PublishedComponent]:
        return list(self._by_ref.values())

    @property
    def variants(self) -> list[Variant]:
        return list(self._variants.values())

    def resolve(self, ref: str, owner: str | None = None) -> PublishedComponent:
        """Return the component registered under the internal reference `ref`.

        Raises:
            UnknownComponentError: If nothing is registered under `ref`.
        """
        try:
            return self._by_ref[ref]
        except KeyError:
            raise UnknownComponentError(ref, owner) from None

    def find(self, name: str) -> PublishedComponent | None:
        """Look up a component by its externally visible base name.

        Matches either the internal reference or the base artifact ID.
        """
        return self._by_ref.get(name) or self._by_artifact.get(name)

    def variant(self, label: str) -> Variant:
        try:
            return self._variants[label]
        except KeyError:
            known = ", ".join(sorted(self._variants)) or "none"
            raise UnknownVariantError(f"Unknown variant '{label}' (known: {known})") from None
