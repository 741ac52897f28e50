"""Minimal SVG element tree with a deterministic serializer.

Markup is assembled as ``Element`` objects and turned into text exactly once
by ``serialize``. Attribute order is insertion order, numbers are formatted by
``format_number`` and every text node and attribute value goes through
``escape_for_markup``, so equal trees always produce identical bytes.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from now_playing_card.svg.text import escape_for_markup

SVG_NAMESPACE = "http://www.w3.org/2000/svg"
XLINK_NAMESPACE = "http://www.w3.org/1999/xlink"
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'

AttributeValue = str | int | float | None


def format_number(value: int | float) -> str:
    """Format a number the way it should appear in markup.

    Integral floats drop the trailing ``.0``; other floats use the shortest
    repr that round-trips.
    """
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def _format_attribute(value: str | int | float) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return format_number(value)
    return escape_for_markup(value)


@dataclass
class Comment:
    """An XML comment node."""

    text: str


@dataclass
class Element:
    """An SVG element: tag, ordered attributes, optional text and children.

    Attributes whose value is ``None`` are dropped at construction so callers
    can pass optional attributes inline.
    """

    tag: str
    attrs: dict[str, AttributeValue] = field(default_factory=dict)
    children: list["Element | Comment"] = field(default_factory=list)
    text: str | None = None

    def __post_init__(self) -> None:
        self.attrs = {name: value for name, value in self.attrs.items() if value is not None}

    def append(self, child: "Element | Comment | None") -> "Element | Comment | None":
        """Append ``child`` (ignoring ``None``) and return it for chaining."""
        if child is not None:
            self.children.append(child)
        return child

    def extend(self, children: Iterable["Element | Comment | None"]) -> None:
        for child in children:
            self.append(child)

    def iter(self, tag: str | None = None) -> Iterable["Element"]:
        """Depth-first walk over this element and its element descendants."""
        if tag is None or self.tag == tag:
            yield self
        for child in self.children:
            if isinstance(child, Element):
                yield from child.iter(tag)


def _serialize_node(node: Element | Comment, depth: int, indent: str, lines: list[str]) -> None:
    pad = indent * depth
    if isinstance(node, Comment):
        lines.append(f"{pad}<!-- {node.text} -->")
        return

    attrs = "".join(f' {name}="{_format_attribute(value)}"' for name, value in node.attrs.items())
    if not node.children and node.text is None:
        lines.append(f"{pad}<{node.tag}{attrs} />")
        return

    if not node.children:
        lines.append(f"{pad}<{node.tag}{attrs}>{escape_for_markup(node.text)}</{node.tag}>")
        return

    lines.append(f"{pad}<{node.tag}{attrs}>")
    if node.text is not None:
        lines.append(f"{pad}{indent}{escape_for_markup(node.text)}")
    for child in node.children:
        _serialize_node(child, depth + 1, indent, lines)
    lines.append(f"{pad}</{node.tag}>")


def serialize(root: Element, declaration: bool = True, indent: str = "  ") -> str:
    """Serialize an element tree to markup.

    Args:
        root: Root element (usually ``<svg>``)
        declaration: Prefix the XML declaration
        indent: Indentation unit per nesting level

    Returns:
        Markup string, one element per line
    """
    lines: list[str] = [XML_DECLARATION] if declaration else []
    _serialize_node(root, 0, indent, lines)
    return "\n".join(lines)
