"""Tests for text rendering of simplified trees."""

import pytest

from xmpeek.tree import XmlNode, render_lines, render_text, truncate_text


def _sample_tree() -> XmlNode:
    return XmlNode(
        name="root",
        attributes=[("a", "1")],
        children=[
            XmlNode(name="child", text="hi", path=(0,)),
            XmlNode(
                name="group",
                path=(1,),
                children=[XmlNode(name="inner", attributes=[("k", "v")], path=(1, 0))],
            ),
        ],
    )


class TestTruncateText:
    """Test text truncation helper."""

    def test_short_text_unchanged(self) -> None:
        assert truncate_text("short", 10) == "short"

    def test_no_limit(self) -> None:
        assert truncate_text("x" * 500, None) == "x" * 500

    def test_long_text_gets_ellipsis(self) -> None:
        assert truncate_text("abcdefghij", 8) == "abcde..."

    def test_tiny_limit_cuts_without_ellipsis(self) -> None:
        assert truncate_text("abcdefghij", 2) == "ab"


class TestRenderText:
    """Test indented tree rendering."""

    def test_full_tree(self) -> None:
        """Test name, attributes, text and children ordering."""
        assert render_lines(_sample_tree()) == [
            "root",
            "  a: 1",
            "  child",
            "    hi",
            "  group",
            "    inner",
            "      k: v",
        ]

    def test_custom_indent(self) -> None:
        """Test indentation string."""
        text = render_text(XmlNode(name="a", children=[XmlNode(name="b", path=(0,))]), indent="\t")

        assert text == "a\n\tb"

    def test_max_depth_summarizes_deeper_levels(self) -> None:
        """Test that hidden subtrees are marked."""
        assert render_lines(_sample_tree(), max_depth=1) == [
            "root",
            "  a: 1",
            "  child",
            "    hi",
            "  group",
            "    ...",
        ]

    def test_max_depth_zero_shows_root_only(self) -> None:
        """Test depth limit at the root."""
        assert render_lines(_sample_tree(), max_depth=0) == ["root", "  a: 1", "  ..."]

    def test_negative_max_depth_raises_error(self) -> None:
        """Test invalid depth limit."""
        with pytest.raises(ValueError, match="max_depth must be >= 0"):
            render_lines(_sample_tree(), max_depth=-1)

    def test_long_values_truncated(self) -> None:
        """Test truncation of attribute values and text."""
        node = XmlNode(name="a", attributes=[("k", "v" * 20)], text="t" * 20)

        assert render_lines(node, max_text_length=10) == [
            "a",
            "  k: vvvvvvv...",
            "  ttttttt...",
        ]

    def test_deep_tree_renders_without_recursion(self) -> None:
        """Test rendering a chain deeper than the recursion limit."""
        root = XmlNode(name="n")
        current = root
        for _ in range(3000):
            child = XmlNode(name="n", path=current.path + (0,))
            current.children.append(child)
            current = child

        lines = render_lines(root, indent=" ")

        assert len(lines) == 3001
        assert lines[-1] == " " * 3000 + "n"
