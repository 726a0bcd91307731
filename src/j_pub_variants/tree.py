"""Minimal labeled-tree interface used to splice descriptor sections.

The rewriter only needs to find, remove and append named children, so the same
algorithm works on a POM (lxml) or on a plain in-memory tree.
"""

from __future__ import annotations

from typing import Iterator, Protocol

from lxml import etree


class DescriptorNode(Protocol):
    """A mutable tree of named nodes."""

    @property
    def name(self) -> str: ...

    @property
    def value(self) -> str | None: ...

    def children(self) -> Iterator["DescriptorNode"]: ...

    def find_child(self, name: str) -> "DescriptorNode | None": ...

    def remove_child(self, child: "DescriptorNode") -> None: ...

    def append_child(self, name: str, value: str | None = None) -> "DescriptorNode": ...


def replace_child(node: DescriptorNode, name: str) -> DescriptorNode:
    """Remove an existing child called `name` (if any) and append an empty one."""
    stale = node.find_child(name)
    if stale is not None:
        node.remove_child(stale)
    return node.append_child(name)


def _local_name(tag: str) -> str:
    # "{http://maven.apache.org/POM/4.0.0}dependencies" / "pom:dependencies" -> "dependencies"
    if tag.startswith("{"):
        tag = tag.rsplit("}", 1)[-1]
    return tag.rsplit(":", 1)[-1]


class XmlNode:
    """`DescriptorNode` adapter over an lxml element.

    Children are matched by local name, so XML namespace prefixes are ignored.
    Appended children inherit the namespace of their parent.
    """

    def __init__(self, element: etree._Element) -> None:
        self.element = element

    @property
    def name(self) -> str:
        return _local_name(self.element.tag)

    @property
    def value(self) -> str | None:
        text = (self.element.text or "").strip()
        return text or None

    def children(self) -> Iterator["XmlNode"]:
        for child in self.element:
            # Comments and processing instructions have a non-string tag.
            if isinstance(child.tag, str):
                yield XmlNode(child)

    def find_child(self, name: str) -> "XmlNode | None":
        for child in self.children():
            if child.name == name:
                return child
        return None

    def remove_child(self, child: "XmlNode") -> None:
        self.element.remove(child.element)

    def append_child(self, name: str, value: str | None = None) -> "XmlNode":
        namespace = etree.QName(self.element).namespace
        tag = f"{{{namespace}}}{name}" if namespace else name
        child = etree.SubElement(self.element, tag)
        if value is not None:
            child.text = value
        return XmlNode(child)


class MemoryNode:
    """Plain in-memory `DescriptorNode`."""

    def __init__(self, name: str, value: str | None = None) -> None:
        self._name = name
        self._value = value
        self._children: list[MemoryNode] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def value(self) -> str | None:
        return self._value

    def children(self) -> Iterator["MemoryNode"]:
        return iter(list(self._children))

    def find_child(self, name: str) -> "MemoryNode | None":
        for child in self._children:
            if _local_name(child.name) == name:
                return child
        return None

    def remove_child(self, child: "MemoryNode") -> None:
        self._children = [c for c in self._children if c is not child]

    def append_child(self, name: str, value: str | None = None) -> "MemoryNode":
        child = MemoryNode(name, value)
        self._children.append(child)
        return child

    def to_dict(self) -> dict:
        """Render as nested dicts, mostly for debugging and tests."""
        if not self._children:
            return {self._name: self._value}
        return {self._name: [c.to_dict() for c in self._children]}
