#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for the offset-only node classes."""

import pytest

from bbtransform import parse
from bbtransform.ast import NOT_SET, TagNode, TextNode


@pytest.mark.unit
class TestTextNode:
    """Tests for TextNode."""

    def test_offsets_and_span(self) -> None:
        """Test that a text node exposes its range and has no children."""
        node = TextNode(3, 9)
        assert node.tag_begin == 3
        assert node.tag_end == 9
        assert node.span == (3, 9)
        assert node.children == ()

    def test_structural_equality(self) -> None:
        """Test that equality and hash follow the offsets."""
        assert TextNode(0, 5) == TextNode(0, 5)
        assert TextNode(0, 5) != TextNode(0, 6)
        assert hash(TextNode(1, 2)) == hash(TextNode(1, 2))

    def test_visitor_dispatch(self) -> None:
        """Test that accept dispatches to visit_text_node."""

        class Recorder:
            def visit_text_node(self, node):
                return ("text", node.span)

        assert TextNode(0, 1).accept(Recorder()) == ("text", (0, 1))


@pytest.mark.unit
class TestTagNodeShapes:
    """Tests for the four documented tag shapes."""

    def test_closing_tag_and_body(self) -> None:
        """Test ``[b]foo[/b]``."""
        node = TagNode(tag_begin=0, name_end=2, body_begin=3, body_end=6, tag_end=10)
        assert node.has_body
        assert node.has_closing_tag

    def test_closing_tag_without_body(self) -> None:
        """Test ``[gameCard][/gameCard]``."""
        node = TagNode(tag_begin=0, name_end=9, body_begin=10, body_end=10, tag_end=21)
        assert not node.has_body
        assert node.has_closing_tag

    def test_body_without_closing_tag(self) -> None:
        """Test ``[*]foo``."""
        node = TagNode(tag_begin=0, name_end=2, body_begin=3, body_end=6, tag_end=6)
        assert node.has_body
        assert not node.has_closing_tag

    def test_neither_body_nor_closing_tag(self) -> None:
        """Test ``[:)]``."""
        node = TagNode(tag_begin=0, name_end=3, tag_end=4)
        assert not node.has_body
        assert not node.has_closing_tag

    def test_unset_body_is_not_a_body(self) -> None:
        """Test that a single unset body offset means no body."""
        assert not TagNode(tag_begin=0, name_end=2, body_begin=3, tag_end=10).has_body
        assert not TagNode(tag_begin=0, name_end=2, body_end=3, tag_end=10).has_body


@pytest.mark.unit
class TestTagNode:
    """Tests for TagNode fields, equality and helpers."""

    def test_defaults(self) -> None:
        """Test that unset offsets default to NOT_SET."""
        node = TagNode(tag_begin=4)
        assert node.tag_end == NOT_SET
        assert node.name_end == NOT_SET
        assert node.attributes_begin == NOT_SET
        assert node.body_begin == NOT_SET
        assert node.body_end == NOT_SET
        assert node.attribute is None
        assert node.attributes == {}
        assert node.children == []
        assert node.transform is True

    def test_head_end(self) -> None:
        """Test head_end with and without a recorded body."""
        assert TagNode(tag_begin=0, name_end=2, body_begin=3, body_end=6, tag_end=10).head_end == 3
        assert TagNode(tag_begin=0, name_end=3, tag_end=4).head_end == 4

    def test_equality_ignores_transform_flag(self) -> None:
        """Test that the transform flag does not take part in equality."""
        first = TagNode(tag_begin=0, name_end=2, body_begin=3, body_end=4, tag_end=8, children=[TextNode(3, 4)])
        second = TagNode(tag_begin=0, name_end=2, body_begin=3, body_end=4, tag_end=8, children=[TextNode(3, 4)])
        second.transform = False
        assert first == second
        assert hash(first) == hash(second)

    def test_equality_covers_attributes_and_children(self) -> None:
        """Test that attributes and children distinguish nodes."""
        base = dict(tag_begin=0, name_end=2, body_begin=8, body_end=9, tag_end=13)
        assert TagNode(**base, attribute="x") != TagNode(**base, attribute="y")
        assert TagNode(**base, attributes={"a": "1"}) != TagNode(**base, attributes={"a": "2"})
        assert TagNode(**base, children=[TextNode(8, 9)]) != TagNode(**base)

    def test_attribute_order_matters(self) -> None:
        """Test that attribute insertion order is part of equality."""
        base = dict(tag_begin=0, name_end=2, tag_end=20)
        assert TagNode(**base, attributes={"a": "1", "b": "2"}) != TagNode(**base, attributes={"b": "2", "a": "1"})

    def test_not_equal_to_text_node(self) -> None:
        """Test that a tag never equals a text node over the same range."""
        assert TagNode(tag_begin=0, tag_end=4) != TextNode(0, 4)

    def test_visitor_dispatch(self) -> None:
        """Test that accept dispatches to visit_tag_node."""

        class Recorder:
            def visit_tag_node(self, node):
                return "tag"

        assert TagNode(tag_begin=0).accept(Recorder()) == "tag"

    def test_children_of_different_variants_differ(self) -> None:
        """Test that a text child never equals a tag child over the same range."""
        base = dict(tag_begin=0, name_end=2, body_begin=3, body_end=7, tag_end=11)
        with_text = TagNode(**base, children=[TextNode(3, 7)])
        with_tag = TagNode(**base, children=[TagNode(tag_begin=3, name_end=5, tag_end=7)])
        assert with_text != with_tag


@pytest.mark.unit
class TestDeepTagNodeEquality:
    """Tests for equality and hashing of trees deeper than the recursion limit."""

    MARKUP = "[b]" * 1500 + "x" + "[/b]" * 1500

    def test_equal_deep_trees(self) -> None:
        """Test that two parses of the same deep markup compare and hash equal."""
        (first,) = parse(self.MARKUP, max_nesting_depth=2000).children
        (second,) = parse(self.MARKUP, max_nesting_depth=2000).children
        assert first == second
        assert hash(first) == hash(second)

    def test_difference_at_the_bottom(self) -> None:
        """Test that a difference in the innermost node is detected."""
        doc = parse(self.MARKUP, max_nesting_depth=2000)
        (reference,) = parse(self.MARKUP, max_nesting_depth=2000).children
        doc.tag_nodes()[-1].attribute = "1"
        assert doc.children[0] != reference
