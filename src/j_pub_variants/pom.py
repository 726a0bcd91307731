"""Build, load and write Maven POM descriptors using lxml."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from lxml import etree

from j_pub_variants.config import ProjectInfo
from j_pub_variants.exceptions import DescriptorNotFoundError, DescriptorParseError, DescriptorWriteError
from j_pub_variants.models import PublishedComponent, Variant
from j_pub_variants.resolver import suffixed_artifact_id
from j_pub_variants.tree import XmlNode, replace_child

logger = logging.getLogger(__name__)


POM_NAMESPACE = "http://maven.apache.org/POM/4.0.0"
XSI_NAMESPACE = "http://www.w3.org/2001/XMLSchema-instance"
POM_SCHEMA_LOCATION = f"{POM_NAMESPACE} https://maven.apache.org/xsd/maven-4.0.0.xsd"


def new_pom(component: PublishedComponent, variant: Variant | None = None) -> etree._Element:
    """Create a POM skeleton carrying the publication's own coordinates.

    Args:
        component: The component being published.
        variant: The variant being published, or None for the base flavor.

    Returns:
        The `<project>` root element.
    """
    root = etree.Element(f"{{{POM_NAMESPACE}}}project", nsmap={None: POM_NAMESPACE, "xsi": XSI_NAMESPACE})
    root.set(f"{{{XSI_NAMESPACE}}}schemaLocation", POM_SCHEMA_LOCATION)

    node = XmlNode(root)
    node.append_child("modelVersion", "4.0.0")
    node.append_child("groupId", component.group_id)
    node.append_child("artifactId", suffixed_artifact_id(component.artifact_id, variant))
    node.append_child("version", component.version)
    return root


def load_pom(path: str | Path) -> etree._Element:
    """Parse an existing POM file and return its root element.

    Raises:
        DescriptorNotFoundError: If the file does not exist.
        DescriptorParseError: If XML cannot be parsed.
    """
    pom_path = Path(path)
    if not pom_path.exists():
        raise DescriptorNotFoundError(f"POM not found: {pom_path}")
    try:
        parser = etree.XMLParser(resolve_entities=False, no_network=True, recover=False, remove_blank_text=True)
        tree = etree.parse(str(pom_path), parser=parser)
        return tree.getroot()
    except (OSError, etree.XMLSyntaxError) as exc:
        raise DescriptorParseError(f"Failed to parse POM: {pom_path}") from exc


def apply_project_info(root: etree._Element, component: PublishedComponent, info: ProjectInfo) -> None:
    """Add the metadata Maven Central requires to every POM.

    Each section replaces an existing one of the same name.
    """
    node = XmlNode(root)

    replace_child(node, "name").element.text = component.artifact_id
    replace_child(node, "description").element.text = component.description
    replace_child(node, "url").element.text = info.url

    license_node = replace_child(node, "licenses").append_child("license")
    license_node.append_child("name", info.license)
    license_node.append_child("url", info.license_url)

    developer = replace_child(node, "developers").append_child("developer")
    developer.append_child("id", info.developer_id)
    developer.append_child("name", info.developer_name)

    scm = replace_child(node, "scm")
    scm.append_child("connection", info.scm_connection)
    scm.append_child("developerConnection", info.scm_developer_connection)
    scm.append_child("url", info.scm_url)


def pom_to_string(root: etree._Element) -> str:
    return etree.tostring(root, pretty_print=True, xml_declaration=True, encoding="UTF-8").decode("utf-8")


def stage_pom(root: etree._Element, path: str | Path) -> Path:
    """Write `root` next to `path` under a temporary name and return that file.

    The caller moves it into place with `commit_pom` once every other output
    of the publication has been written.

    Raises:
        DescriptorWriteError: If the file cannot be written.
    """
    out = Path(path)
    staged = out.with_name(out.name + ".tmp")
    try:
        out.parent.mkdir(parents=True, exist_ok=True)
        staged.write_text(pom_to_string(root), encoding="utf-8")
    except OSError as exc:
        staged.unlink(missing_ok=True)
        raise DescriptorWriteError(f"Failed to write POM: {out}") from exc
    return staged


def commit_pom(staged: Path, path: str | Path) -> Path:
    out = Path(path)
    try:
        os.replace(staged, out)
    except OSError as exc:
        staged.unlink(missing_ok=True)
        raise DescriptorWriteError(f"Failed to write POM: {out}") from exc
    logger.info("Wrote %s", out)
    return out


def write_pom(root: etree._Element, path: str | Path) -> Path:
    return commit_pom(stage_pom(root, path), path)
