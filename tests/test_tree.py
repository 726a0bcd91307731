from __future__ import annotations

from lxml import etree

from j_pub_variants.tree import MemoryNode, XmlNode, replace_child


def test_xml_find_child_ignores_namespace() -> None:
    root = etree.fromstring(b'<project xmlns="urn:pom"><name>x</name><!-- note --></project>')
    node = XmlNode(root)

    found = node.find_child("name")
    assert found is not None
    assert found.value == "x"
    assert node.find_child("missing") is None


def test_xml_append_child_inherits_namespace() -> None:
    root = etree.fromstring(b'<project xmlns="urn:pom"/>')
    child = XmlNode(root).append_child("url", "https://example.org")

    assert child.element.tag == "{urn:pom}url"
    assert child.value == "https://example.org"


def test_xml_append_child_without_namespace() -> None:
    root = etree.Element("project")
    XmlNode(root).append_child("url", "u")
    assert etree.tostring(root) == b"<project><url>u</url></project>"


def test_replace_child_removes_stale_node() -> None:
    root = MemoryNode("project")
    root.append_child("name", "old")
    root.append_child("url", "u")

    fresh = replace_child(root, "name")

    assert [c.name for c in root.children()] == ["url", "name"]
    assert fresh.value is None


def test_memory_node_matches_prefixed_names() -> None:
    root = MemoryNode("project")
    root.append_child("pom:dependencies")
    assert root.find_child("dependencies") is not None
    assert root.to_dict() == {"project": [{"pom:dependencies": None}]}
