"""Pytest configuration and fixtures for j-pub-variants tests."""
from __future__ import annotations

from pathlib import Path

import pytest

from j_pub_variants.config import ProjectInfo
from j_pub_variants.models import PublishedComponent, Variant
from j_pub_variants.resolver import ComponentRegistry


GROUP = "de.example.junit5"

CONFIG_TOML = """
internal_group = "de.example.junit5"
version = "1.2.0"

[project]
github_repo = "example/android-junit5"
license = "Apache-2.0"
developer_id = "example"
developer_name = "Example Developer"

[[variants]]
label = "junit5"
suffix = "junit5"

[[variants]]
label = "junit6"
suffix = "junit6"

[components.core]
artifact_id = "android-test-core"
description = "Core library"
variants = true

[components.runner]
artifact_id = "android-test-runner"
description = "Runner library"
variants = true

[components.plugin]
artifact_id = "android-junit5-plugin"
description = "Gradle plugin"
"""

DECLARATIONS_TOML = """
[core]
api = ["org.junit.jupiter:junit-jupiter-api:5.10.0"]
implementation = ["project:runner", "org.jetbrains.kotlin:kotlin-stdlib:1.9.0"]

[runner]
implementation = ["org.junit.platform:junit-platform-launcher:1.10.0"]
runtime_only = ["unspecified:unspecified"]

[plugin]
implementation = ["com.android.tools.build:gradle:8.2.0"]
"""


@pytest.fixture
def variants() -> list[Variant]:
    return [
        Variant(label="junit5", artifact_suffix="junit5"),
        Variant(label="junit6", artifact_suffix="junit6"),
    ]


@pytest.fixture
def registry(variants: list[Variant]) -> ComponentRegistry:
    components = [
        PublishedComponent(ref="core", group_id=GROUP, artifact_id="android-test-core", version="1.2.0", variants=True),
        PublishedComponent(ref="runner", group_id=GROUP, artifact_id="android-test-runner", version="1.2.0", variants=True),
        PublishedComponent(ref="extensions", group_id=GROUP, artifact_id="android-test-extensions", version="1.2.0"),
    ]
    return ComponentRegistry(internal_group=GROUP, components=components, variants=variants)


@pytest.fixture
def project_info() -> ProjectInfo:
    return ProjectInfo(
        github_repo="example/android-junit5",
        license="Apache-2.0",
        developer_id="example",
        developer_name="Example Developer",
    )


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "publishing.toml"
    path.write_text(CONFIG_TOML, encoding="utf-8")
    return path


@pytest.fixture
def declarations_file(tmp_path: Path) -> Path:
    path = tmp_path / "dependencies.toml"
    path.write_text(DECLARATIONS_TOML, encoding="utf-8")
    return path
