"""Simplified XML trees for parsed XMP packets.

Key Components:
    XmlNode: Owned element node with name, attributes, text and children
    XmlTreeBuilder: Converts lxml elements into XmlNode trees
    render_text: Indented text rendering of a tree
"""

from .builder import (
    XmlNode,
    XmlTreeBuilder,
    build_tree,
)
from .render import (
    render_lines,
    render_text,
    truncate_text,
)

__all__ = [
    "XmlNode",
    "XmlTreeBuilder",
    "build_tree",
    "render_lines",
    "render_text",
    "truncate_text",
]
