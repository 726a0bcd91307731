"""Publishing configuration module.

Components, variants and project metadata are read once from a TOML file and
are immutable afterwards. The file location is taken from the environment.
"""
from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, model_validator

from j_pub_variants.exceptions import ConfigError, DeclarationError
from j_pub_variants.models import DeclaredDependencies, PublishedComponent, Variant
from j_pub_variants.resolver import ComponentRegistry


DEFAULT_CONFIG_PATH = "publishing.toml"
DECLARATION_SCOPES = ("api", "implementation", "runtime_only")


class ProjectInfo(BaseModel):
    """Fixed POM metadata shared by every publication of the repository.

    `url`, `license_url` and the SCM fields are derived from `github_repo`
    (e.g. "owner/repo") unless given explicitly.
    """

    github_repo: str = Field(..., min_length=1)
    license: str = Field(..., min_length=1)
    developer_id: str = Field(..., min_length=1)
    developer_name: str = Field(..., min_length=1)
    url: str | None = None
    license_url: str | None = None
    scm_connection: str | None = None
    scm_developer_connection: str | None = None
    scm_url: str | None = None

    @model_validator(mode="after")
    def _derive_urls(self) -> "ProjectInfo":
        if self.url is None:
            self.url = f"https://github.com/{self.github_repo}"
        if self.license_url is None:
            self.license_url = f"{self.url}/blob/main/LICENSE"
        if self.scm_connection is None:
            self.scm_connection = f"scm:git:git://github.com/{self.github_repo}.git"
        if self.scm_developer_connection is None:
            self.scm_developer_connection = f"scm:git:ssh://github.com/{self.github_repo}.git"
        if self.scm_url is None:
            self.scm_url = f"{self.url}/tree/main"
        return self


class _ComponentEntry(BaseModel):
    artifact_id: str = Field(..., min_length=1)
    group: str | None = None
    version: str | None = None
    description: str = ""
    variants: bool = False


class _VariantEntry(BaseModel):
    label: str = Field(..., min_length=1)
    suffix: str = Field(..., min_length=1)


def _read_toml(path: Path, error: type[Exception]) -> dict[str, Any]:
    if not path.exists():
        raise error(f"File not found: {path}")
    try:
        with path.open("rb") as fh:
            return tomllib.load(fh)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise error(f"Failed to read {path}: {exc}") from exc


@dataclass
class PublishConfig:
    """Publishing configuration container.

    Attributes:
        internal_group: Group ID shared by the repository's own libraries
        version: Default version for components that do not declare one
        project: POM metadata (URL, license, developer, SCM)
        variants: The closed set of externally-facing variants
        components: Published components, keyed by internal project reference
    """

    internal_group: str
    project: ProjectInfo
    version: str | None = None
    variants: list[Variant] = field(default_factory=list)
    components: dict[str, PublishedComponent] = field(default_factory=dict)

    @classmethod
    def from_file(cls, path: str | Path) -> "PublishConfig":
        """Load configuration from a TOML file.

        Layout:
            internal_group = "com.example"
            version = "1.0.0"

            [project]
            github_repo = "owner/repo"
            license = "Apache-2.0"
            developer_id = "someone"
            developer_name = "Some One"

            [[variants]]
            label = "junit5"
            suffix = "junit5"

            [components.core]
            artifact_id = "android-test-core"
            description = "..."
            variants = true

        Raises:
            ConfigError: If the file is missing, unreadable or incomplete.
        """
        data = _read_toml(Path(path), ConfigError)

        internal_group = data.get("internal_group")
        if not internal_group:
            raise ConfigError(f"'internal_group' is required in {path}")
        default_version = data.get("version")

        try:
            project = ProjectInfo.model_validate(data.get("project") or {})
            variants = [
                Variant(label=v.label, artifact_suffix=v.suffix)
                for v in (_VariantEntry.model_validate(raw) for raw in data.get("variants", []))
            ]
            components: dict[str, PublishedComponent] = {}
            for ref, raw in (data.get("components") or {}).items():
                entry = _ComponentEntry.model_validate(raw)
                version = entry.version or default_version
                if not version:
                    raise ConfigError(f"Component '{ref}' has no version and no default version is set")
                components[ref] = PublishedComponent(
                    ref=ref,
                    group_id=entry.group or internal_group,
                    artifact_id=entry.artifact_id,
                    version=version,
                    description=entry.description,
                    variants=entry.variants,
                )
        except ValidationError as exc:
            raise ConfigError(f"Invalid publishing configuration in {path}: {exc}") from exc

        config = cls(
            internal_group=internal_group,
            project=project,
            version=default_version,
            variants=variants,
            components=components,
        )
        config.validate()
        return config

    @classmethod
    def from_env(cls) -> "PublishConfig":
        """Create configuration from environment variables.

        Environment variables:
            JPUB_CONFIG: Path to the publishing TOML file (default: "publishing.toml")
        """
        return cls.from_file(Path(os.getenv("JPUB_CONFIG", DEFAULT_CONFIG_PATH)).resolve())

    def validate(self) -> None:
        """Validate the configuration.

        Raises:
            ConfigError: If required configuration is missing.
        """
        if not self.components:
            raise ConfigError("At least one component must be configured")
        if any(c.variants for c in self.components.values()) and not self.variants:
            raise ConfigError("Multi-variant components require at least one [[variants]] entry")
        # Duplicate refs, coordinates or suffixes.
        self.registry()

    def registry(self) -> ComponentRegistry:
        return ComponentRegistry(
            internal_group=self.internal_group,
            components=self.components.values(),
            variants=self.variants,
        )


def load_declarations(path: str | Path) -> dict[str, DeclaredDependencies]:
    """Load declared dependencies per component from a TOML file.

    Layout:
        [core]
        api = ["org.junit.jupiter:junit-jupiter-api:5.10.0"]
        implementation = ["project:runner"]
        runtime_only = []

    Raises:
        DeclarationError: If the file is missing or a notation is invalid.
    """
    data = _read_toml(Path(path), DeclarationError)
    out: dict[str, DeclaredDependencies] = {}
    for ref, scopes in data.items():
        if not isinstance(scopes, dict):
            raise DeclarationError(f"Expected a table for '{ref}' in {path}")
        unknown = set(scopes) - set(DECLARATION_SCOPES)
        if unknown:
            raise DeclarationError(f"Unknown scopes for '{ref}': {', '.join(sorted(unknown))}")
        for scope in DECLARATION_SCOPES:
            notations = scopes.get(scope, [])
            if not isinstance(notations, list) or not all(isinstance(n, str) for n in notations):
                raise DeclarationError(
                    f"Scope '{scope}' of '{ref}' in {path} must be a list of dependency notations"
                )
        out[ref] = DeclaredDependencies.from_notations(
            api=scopes.get("api"),
            implementation=scopes.get("implementation"),
            runtime_only=scopes.get("runtime_only"),
        )
    return out
