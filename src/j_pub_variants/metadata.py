"""Patch generated module metadata so project references use variant coordinates."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol

from pydantic import ValidationError

from j_pub_variants.exceptions import DescriptorNotFoundError, DescriptorParseError, DescriptorWriteError
from j_pub_variants.models import UNSPECIFIED, MetadataDocument, Variant
from j_pub_variants.resolver import ComponentRegistry, suffixed_artifact_id

logger = logging.getLogger(__name__)


class MetadataDocumentProvider(Protocol):
    """Hands a generated metadata document to the patcher and takes it back."""

    def load(self) -> MetadataDocument: ...

    def save(self, document: MetadataDocument) -> None: ...


class JsonMetadataProvider:
    """Read and write a Gradle `module.json` file.

    Args:
        path: The generated module file.
        out: Where to write the patched document (defaults to `path`).
    """

    def __init__(self, path: str | Path, out: str | Path | None = None) -> None:
        self.path = Path(path)
        self.out = Path(out) if out is not None else self.path

    def load(self) -> MetadataDocument:
        if not self.path.exists():
            raise DescriptorNotFoundError(f"Module metadata not found: {self.path}")
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            return MetadataDocument.model_validate(raw)
        except (OSError, ValueError, ValidationError) as exc:
            raise DescriptorParseError(f"Failed to parse module metadata: {self.path}") from exc

    def save(self, document: MetadataDocument) -> None:
        try:
            self.out.parent.mkdir(parents=True, exist_ok=True)
            self.out.write_text(json.dumps(document.to_json_dict(), indent=2) + "\n", encoding="utf-8")
        except OSError as exc:
            raise DescriptorWriteError(f"Failed to write module metadata: {self.out}") from exc


def patch_metadata(document: MetadataDocument, variant: Variant, registry: ComponentRegistry) -> int:
    """Rewrite intra-repository dependency names in `document` for `variant`.

    Variant descriptors without a dependency list (sources, javadoc) are
    skipped. Entries in the internal group whose name is the `unspecified`
    placeholder or not a registered component are left as they are. Applying
    the patch twice is the same as applying it once, since a suffixed name is
    no longer a registered base name.

    Returns:
        Number of dependency entries that were renamed.
    """
    renamed = 0
    for descriptor in document.variants:
        if descriptor.dependencies is None:
            logger.debug("Variant %s has no dependencies", descriptor.name)
            continue

        for entry in descriptor.dependencies:
            if entry.group != registry.internal_group or entry.name == UNSPECIFIED:
                continue
            component = registry.find(entry.name)
            if component is None:
                continue

            new_name = suffixed_artifact_id(component.artifact_id, variant)
            if new_name != entry.name:
                logger.debug("%s: %s -> %s", descriptor.name, entry.name, new_name)
                entry.name = new_name
                renamed += 1
    return renamed


def patch_provider(provider: MetadataDocumentProvider, variant: Variant, registry: ComponentRegistry) -> int:
    """Load, patch and save the document behind `provider`."""
    document = provider.load()
    renamed = patch_metadata(document, variant, registry)
    provider.save(document)
    return renamed
