"""Pydantic models for published components, variants, and dependencies."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from j_pub_variants.exceptions import DeclarationError


UNSPECIFIED = "unspecified"
BOM_MARKER = "-bom"
PROJECT_PREFIX = "project:"


class Scope(str, Enum):
    """Publication scope of a dependency entry."""

    COMPILE = "compile"
    RUNTIME = "runtime"


class GAV(BaseModel):
    """Maven coordinates (GroupId, ArtifactId, optional Version)."""

    model_config = ConfigDict(frozen=True)

    group_id: str = Field(..., min_length=1)
    artifact_id: str = Field(..., min_length=1)
    version: str | None = None

    def compact(self) -> str:
        """Return a compact string representation.

        Returns:
            A string like `groupId:artifactId:version`, or `groupId:artifactId`
            when the version is absent.
        """
        if self.version:
            return f"{self.group_id}:{self.artifact_id}:{self.version}"
        return f"{self.group_id}:{self.artifact_id}"


class Variant(BaseModel):
    """An externally-facing flavor of a component (e.g. the JUnit target)."""

    model_config = ConfigDict(frozen=True)

    label: str = Field(..., min_length=1)
    artifact_suffix: str = Field(..., min_length=1)


class PublishedComponent(BaseModel):
    """A library of this repository, looked up by its internal project reference."""

    model_config = ConfigDict(frozen=True)

    ref: str = Field(..., min_length=1)
    group_id: str = Field(..., min_length=1)
    artifact_id: str = Field(..., min_length=1)
    version: str = Field(..., min_length=1)
    description: str = ""
    variants: bool = False

    def identity(self) -> tuple[str, str]:
        return (self.group_id, self.artifact_id)

    def gav(self) -> GAV:
        return GAV(group_id=self.group_id, artifact_id=self.artifact_id, version=self.version)


class DeclaredDependency(BaseModel):
    """A raw dependency declaration as handed over by the build pipeline.

    `project=True` marks an intra-repository reference; `name` is then the
    internal project identifier and `group`/`version` are unused.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    group: str | None = None
    version: str | None = None
    project: bool = False

    @classmethod
    def parse(cls, notation: str) -> "DeclaredDependency":
        """Parse `project:<ref>` or `group:name[:version]` notation.

        Raises:
            DeclarationError: If the notation has no usable name.
        """
        text = (notation or "").strip()
        if text.startswith(PROJECT_PREFIX):
            ref = text[len(PROJECT_PREFIX):].strip()
            if not ref:
                raise DeclarationError(f"Missing project reference in '{notation}'")
            return cls(name=ref, project=True)

        parts = [p.strip() for p in text.split(":")]
        if len(parts) not in (2, 3) or not all(parts[:2]):
            raise DeclarationError(
                f"Invalid dependency notation '{notation}', expected 'group:name[:version]' or 'project:<ref>'"
            )
        version = parts[2] if len(parts) == 3 and parts[2] else None
        return cls(group=parts[0], name=parts[1], version=version)

    def key(self) -> tuple[str, str]:
        """Identity used when subtracting one dependency set from another."""
        if self.project:
            return ("project", self.name)
        return (self.group or "", self.name)

    def notation(self) -> str:
        if self.project:
            return f"{PROJECT_PREFIX}{self.name}"
        parts = [self.group or "", self.name]
        if self.version:
            parts.append(self.version)
        return ":".join(parts)


def _unique(deps: list[DeclaredDependency], exclude: set[tuple[str, str]] | None = None) -> list[DeclaredDependency]:
    seen: set[tuple[str, str]] = set(exclude or ())
    out: list[DeclaredDependency] = []
    for dep in deps:
        k = dep.key()
        if k in seen:
            continue
        seen.add(k)
        out.append(dep)
    return out


class DeclaredDependencies(BaseModel):
    """The declared dependencies of one component, per declaration scope."""

    api: list[DeclaredDependency] = Field(default_factory=list)
    implementation: list[DeclaredDependency] = Field(default_factory=list)
    runtime_only: list[DeclaredDependency] = Field(default_factory=list)

    @classmethod
    def from_notations(
        cls,
        api: list[str] | None = None,
        implementation: list[str] | None = None,
        runtime_only: list[str] | None = None,
    ) -> "DeclaredDependencies":
        return cls(
            api=[DeclaredDependency.parse(n) for n in api or []],
            implementation=[DeclaredDependency.parse(n) for n in implementation or []],
            runtime_only=[DeclaredDependency.parse(n) for n in runtime_only or []],
        )

    def compile_dependencies(self) -> list[DeclaredDependency]:
        """Dependencies consumers need at compile time (the api declarations)."""
        return _unique(self.api)

    def runtime_dependencies(self) -> list[DeclaredDependency]:
        """(implementation + runtime_only) minus anything already in compile."""
        compile_keys = {d.key() for d in self.api}
        return _unique(self.implementation + self.runtime_only, exclude=compile_keys)


class DependencyRecord(BaseModel):
    """One entry of the rewritten dependency section."""

    gav: GAV
    scope: Scope

    def label(self) -> str:
        """Return a user-facing label for the record."""
        return f"{self.gav.compact()} (scope={self.scope.value})"


# Module metadata (Gradle module.json). Unknown fields are kept so a patched
# document can be written back without losing anything.


class DependencyEntry(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    group: str
    name: str = Field(alias="module")
    version: dict[str, Any] | str | None = None


class VariantDescriptor(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str
    dependencies: list[DependencyEntry] | None = None


class MetadataDocument(BaseModel):
    """A generated module metadata document: variants -> dependencies -> coordinates."""

    model_config = ConfigDict(extra="allow")

    variants: list[VariantDescriptor] = Field(default_factory=list)

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)
