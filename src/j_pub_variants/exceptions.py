"""Custom exceptions for J-Pub Variants."""

from __future__ import annotations


class JPubError(Exception):
    """Base exception for J-Pub Variants."""


class ConfigError(JPubError):
    """Raised when the publishing configuration is missing or invalid."""


class DeclarationError(JPubError):
    """Raised when a dependency declaration cannot be understood."""


class UnknownComponentError(JPubError):
    """Raised when an internal project reference has no registered component."""

    def __init__(self, ref: str, owner: str | None = None) -> None:
        self.ref = ref
        self.owner = owner
        where = f" (declared by '{owner}')" if owner else ""
        super().__init__(f"No published component is registered for project '{ref}'{where}")


class UnknownVariantError(JPubError):
    """Raised when a variant label is not part of the configured variant set."""


class ForbiddenRangeDependencyError(JPubError):
    """Raised when a BOM / version-range dependency is declared by one of our packages."""

    def __init__(self, owner: str, dependency: str) -> None:
        self.owner = owner
        self.dependency = dependency
        super().__init__(
            f"Found a BOM declaration in the dependencies of project '{owner}': {dependency}. "
            "Prefer declaring its transitive artifacts explicitly by adding a version constraint to them."
        )


class VersionInconsistencyError(JPubError):
    """Raised when two publications disagree on the shared group ID or version."""


class DescriptorNotFoundError(JPubError):
    """Raised when a descriptor file (POM or module metadata) cannot be found."""


class DescriptorParseError(JPubError):
    """Raised when a descriptor file cannot be parsed."""


class DescriptorWriteError(JPubError):
    """Raised when a descriptor file cannot be written."""
