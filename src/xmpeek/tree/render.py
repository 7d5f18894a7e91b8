"""Text rendering of XmlNode trees.

Each element is printed as its name, followed by one ``key: value`` line per
attribute, its text and then its children, all indented one level deeper
than the element itself.
"""

from typing import List, Optional

from .builder import XmlNode

ELLIPSIS = "..."


def truncate_text(text: str, max_length: Optional[int]) -> str:
    """Shorten ``text`` to ``max_length`` characters, marking the cut."""
    if max_length is None or len(text) <= max_length:
        return text
    if max_length <= len(ELLIPSIS):
        return text[:max_length]
    return text[: max_length - len(ELLIPSIS)] + ELLIPSIS


def render_lines(
    root: XmlNode,
    indent: str = "  ",
    max_depth: Optional[int] = None,
    max_text_length: Optional[int] = None,
) -> List[str]:
    """Render the tree rooted at ``root`` as a list of lines.

    Args:
        root: Tree to render
        indent: Indentation added per nesting level
        max_depth: Deepest level whose elements are shown (root = 0);
            deeper subtrees are summarized by a single ``...`` line
        max_text_length: Truncate attribute values and text to this length

    Returns:
        Lines without trailing newlines
    """
    if max_depth is not None and max_depth < 0:
        raise ValueError("max_depth must be >= 0 or None")

    lines: List[str] = []
    stack = [(root, 0)]
    while stack:
        node, level = stack.pop()
        prefix = indent * level
        inner = indent * (level + 1)

        lines.append(f"{prefix}{node.name}")
        for key, value in node.attributes:
            lines.append(f"{inner}{key}: {truncate_text(value, max_text_length)}")
        if node.text is not None:
            lines.append(f"{inner}{truncate_text(node.text, max_text_length)}")

        if not node.children:
            continue
        if max_depth is not None and level >= max_depth:
            lines.append(f"{inner}{ELLIPSIS}")
            continue
        stack.extend((child, level + 1) for child in reversed(node.children))

    return lines


def render_text(
    root: XmlNode,
    indent: str = "  ",
    max_depth: Optional[int] = None,
    max_text_length: Optional[int] = None,
) -> str:
    """Render the tree rooted at ``root`` as a single string."""
    return "\n".join(render_lines(root, indent, max_depth, max_text_length))
