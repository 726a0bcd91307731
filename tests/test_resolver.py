from __future__ import annotations

import pytest

from j_pub_variants.exceptions import ConfigError, UnknownComponentError, UnknownVariantError
from j_pub_variants.models import PublishedComponent, Variant
from j_pub_variants.resolver import ComponentRegistry, suffixed_artifact_id


def test_suffixed_artifact_id_without_variant() -> None:
    assert suffixed_artifact_id("core", None) == "core"
    assert suffixed_artifact_id("core") == "core"


def test_suffixed_artifact_id_with_variant() -> None:
    assert suffixed_artifact_id("core", Variant(label="a", artifact_suffix="a")) == "core-a"
    assert suffixed_artifact_id("android-test-core", Variant(label="x", artifact_suffix="junit6")) == (
        "android-test-core-junit6"
    )


def test_resolve_registered_component(registry: ComponentRegistry) -> None:
    component = registry.resolve("core")
    assert component.artifact_id == "android-test-core"
    assert component.gav().compact() == "de.example.junit5:android-test-core:1.2.0"


def test_resolve_unknown_component_is_fatal(registry: ComponentRegistry) -> None:
    with pytest.raises(UnknownComponentError) as info:
        registry.resolve("missing", owner="core")
    assert info.value.ref == "missing"
    assert "missing" in str(info.value)
    assert "core" in str(info.value)


def test_find_by_ref_or_artifact_id(registry: ComponentRegistry) -> None:
    assert registry.find("runner") is registry.resolve("runner")
    assert registry.find("android-test-runner") is registry.resolve("runner")
    assert registry.find("android-test-runner-junit5") is None


def test_variant_lookup(registry: ComponentRegistry) -> None:
    assert registry.variant("junit6").artifact_suffix == "junit6"
    with pytest.raises(UnknownVariantError):
        registry.variant("junit4")


def test_duplicate_refs_are_rejected() -> None:
    component = PublishedComponent(ref="core", group_id="g", artifact_id="core", version="1.0")
    with pytest.raises(ConfigError):
        ComponentRegistry(internal_group="g", components=[component, component])


def test_duplicate_coordinates_are_rejected() -> None:
    a = PublishedComponent(ref="a", group_id="g", artifact_id="core", version="1.0")
    b = PublishedComponent(ref="b", group_id="g", artifact_id="core", version="1.0")
    with pytest.raises(ConfigError):
        ComponentRegistry(internal_group="g", components=[a, b])


def test_same_artifact_id_in_different_groups_is_rejected() -> None:
    a = PublishedComponent(ref="a", group_id="g", artifact_id="core", version="1.0")
    b = PublishedComponent(ref="b", group_id="other", artifact_id="core", version="1.0")
    with pytest.raises(ConfigError, match="artifact ID: core"):
        ComponentRegistry(internal_group="g", components=[a, b])


def test_duplicate_variant_suffixes_are_rejected() -> None:
    component = PublishedComponent(ref="core", group_id="g", artifact_id="core", version="1.0", variants=True)
    variants = [Variant(label="a", artifact_suffix="x"), Variant(label="b", artifact_suffix="x")]
    with pytest.raises(ConfigError, match="suffix: x"):
        ComponentRegistry(internal_group="g", components=[component], variants=variants)
