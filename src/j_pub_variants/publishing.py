"""Tie the resolver, rewriter and patcher together for each publication."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from lxml import etree

from j_pub_variants.config import ProjectInfo
from j_pub_variants.exceptions import DescriptorWriteError, JPubError, VersionInconsistencyError
from j_pub_variants.metadata import MetadataDocumentProvider, patch_metadata
from j_pub_variants.models import (
    GAV,
    DeclaredDependencies,
    DependencyRecord,
    MetadataDocument,
    PublishedComponent,
    Variant,
)
from j_pub_variants.pom import apply_project_info, commit_pom, new_pom, stage_pom
from j_pub_variants.resolver import ComponentRegistry, suffixed_artifact_id
from j_pub_variants.rewriter import apply_dependencies
from j_pub_variants.tree import XmlNode

logger = logging.getLogger(__name__)


MAIN_PUBLICATION = "main"


class VersionGuard:
    """Ensure every publication of a run shares one group ID and version.

    The first claimed pair wins; any later mismatch is fatal.
    """

    def __init__(self) -> None:
        self._claimed: tuple[str, str] | None = None
        self._claimed_by: str | None = None

    def claim(self, component: PublishedComponent) -> None:
        pair = (component.group_id, component.version)
        if self._claimed is None:
            self._claimed = pair
            self._claimed_by = component.ref
            return
        if pair != self._claimed:
            group, version = self._claimed
            raise VersionInconsistencyError(
                f"Component '{component.ref}' tried to set '{pair[0]}:{pair[1]}' as the coordinates "
                f"for the artifacts of the repository, but '{group}:{version}' was already set by "
                f"'{self._claimed_by}'. All components must use the same group ID and version."
            )


@dataclass(frozen=True)
class Publication:
    """One publishable unit: a component, in at most one variant."""

    component: PublishedComponent
    declared: DeclaredDependencies
    variant: Variant | None = None

    @property
    def name(self) -> str:
        return self.variant.label if self.variant else MAIN_PUBLICATION

    @property
    def artifact_id(self) -> str:
        return suffixed_artifact_id(self.component.artifact_id, self.variant)

    def gav(self) -> GAV:
        return GAV(
            group_id=self.component.group_id,
            artifact_id=self.artifact_id,
            version=self.component.version,
        )

    def pom_filename(self) -> str:
        return f"{self.artifact_id}-{self.component.version}.pom"

    def module_filename(self) -> str:
        return f"{self.artifact_id}-{self.component.version}.module"


def plan_publications(
    component: PublishedComponent,
    declared: DeclaredDependencies,
    variants: list[Variant],
) -> dict[str, Publication]:
    """Map each publication name to its job.

    A multi-variant component is published once per variant and never as the
    base flavor; any other component gets a single base publication.
    """
    if not component.variants:
        return {MAIN_PUBLICATION: Publication(component=component, declared=declared)}
    return {v.label: Publication(component=component, declared=declared, variant=v) for v in variants}


class PublicationPipeline:
    """Produce the descriptors of publications against a fixed registry."""

    def __init__(self, registry: ComponentRegistry, info: ProjectInfo) -> None:
        self.registry = registry
        self.info = info
        self.guard = VersionGuard()

    def build_pom(
        self,
        publication: Publication,
        base: etree._Element | None = None,
    ) -> tuple[etree._Element, list[DependencyRecord]]:
        """Build the POM of `publication`.

        Args:
            publication: The publication to describe.
            base: An existing POM (e.g. generated by default tooling) whose
                dependency section and metadata get replaced. A fresh POM is
                created when omitted.

        Returns:
            The POM root element and the rewritten dependency records.
        """
        root = base if base is not None else new_pom(publication.component, publication.variant)
        records = apply_dependencies(
            XmlNode(root),
            publication.component,
            publication.declared,
            self.registry,
            publication.variant,
        )
        apply_project_info(root, publication.component, self.info)
        return root, records

    def _patched_document(
        self,
        publication: Publication,
        provider: MetadataDocumentProvider,
    ) -> MetadataDocument | None:
        if publication.variant is None:
            return None
        document = provider.load()
        renamed = patch_metadata(document, publication.variant, self.registry)
        logger.info("Patched %d metadata entries of %s", renamed, publication.artifact_id)
        return document

    def patch(self, publication: Publication, provider: MetadataDocumentProvider) -> bool:
        """Pre-write hook for generated module metadata.

        Only variant publications are patched; the base flavor already carries
        the right names.

        Returns:
            True if a patched document was saved.
        """
        document = self._patched_document(publication, provider)
        if document is None:
            return False
        provider.save(document)
        return True

    def publish(
        self,
        publication: Publication,
        out_dir: Path,
        metadata: MetadataDocumentProvider | None = None,
    ) -> Path:
        """Write the POM of `publication` into `out_dir` and patch its metadata.

        The POM is staged under a temporary name and only moved into place
        after the metadata has been saved, so a failure leaves no partial
        output for this publication.

        Raises:
            DescriptorWriteError: If either descriptor cannot be written.

        Returns:
            Path of the written POM.
        """
        self.guard.claim(publication.component)
        root, records = self.build_pom(publication)
        document = self._patched_document(publication, metadata) if metadata is not None else None

        pom_path = out_dir / publication.pom_filename()
        staged = stage_pom(root, pom_path)
        try:
            if document is not None:
                metadata.save(document)
        except OSError as exc:
            staged.unlink(missing_ok=True)
            raise DescriptorWriteError(
                f"Failed to write module metadata of {publication.artifact_id}: {exc}"
            ) from exc
        except JPubError:
            staged.unlink(missing_ok=True)
            raise
        commit_pom(staged, pom_path)

        logger.info(
            "Published %s (%s) with %d dependencies",
            publication.artifact_id,
            publication.name,
            len(records),
        )
        return pom_path
