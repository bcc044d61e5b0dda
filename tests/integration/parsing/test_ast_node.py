"""
Node handle navigation tests.
"""

import pytest
from tree_sitter import Point as TSPoint

from codegraph_document import ArgumentArityError, ArgumentTypeError, AstNode, Point


def walk(node: AstNode):
    yield node
    for child in node.children:
        yield from walk(child)


@pytest.fixture
def sum_document(make_document):
    document, source = make_document("a+b")
    return document, source


@pytest.fixture
def binary(sum_document):
    document, _ = sum_document
    return document.root_node.children[0].children[0]


class TestProperties:
    def test_root_spans_whole_text(self, make_document):
        document, _ = make_document("first = second\nthird")
        root = document.root_node

        assert root.start_index == 0
        assert root.end_index == 20
        assert root.start_position == Point(0, 0)
        assert root.end_position == Point(1, 5)

    def test_leaf_properties(self, binary):
        left, operator, right = list(binary.children)

        assert (left.type, left.is_named) == ("identifier", True)
        assert (operator.type, operator.is_named) == ("+", False)
        assert (right.start_index, right.end_index) == (2, 3)
        assert right.start_position == Point(0, 2)

    @pytest.mark.parametrize(("unit_width", "expected"), [(2, 5), (1, 7)])
    def test_offsets_in_external_units(self, make_document, unit_width, expected):
        document, _ = make_document("'😀'+b", unit_width=unit_width)
        right = document.root_node.children[0].children[0].children[2]

        assert right.type == "identifier"
        assert right.start_index == expected
        assert right.start_position == Point(0, expected)
        assert document.root_node.end_index == expected + 1

    def test_to_dict_holds_enumerable_properties(self, sum_document):
        document, _ = sum_document

        assert document.root_node.to_dict() == {
            "start_index": 0,
            "start_position": Point(0, 0),
            "end_index": 3,
            "end_position": Point(0, 3),
            "type": "module",
            "is_named": True,
        }

    def test_to_string_renders_subtree(self, binary):
        text = binary.to_string()

        assert text.startswith("(binary_operator")
        assert text.count("(identifier)") == 2
        assert str(binary) == text

    def test_repr(self, sum_document):
        document, _ = sum_document

        assert "type='module'" in repr(document.root_node)


class TestStructure:
    def test_root_has_no_parent(self, sum_document):
        document, _ = sum_document

        assert document.root_node.parent is None

    def test_parent(self, binary):
        left = binary.children[0]

        assert left.parent == binary
        assert left.parent.parent.type == "expression_statement"

    def test_siblings(self, binary):
        left, operator, right = list(binary.children)

        assert left.next_sibling == operator
        assert left.next_named_sibling == right
        assert right.previous_sibling == operator
        assert right.previous_named_sibling == left
        assert left.previous_sibling is None
        assert right.next_sibling is None
        assert right.next_named_sibling is None

    def test_first_child_parent_is_node(self, make_document):
        document, _ = make_document("def f(x):\n    return x * 2\n\nf(1)\n")

        for node in walk(document.root_node):
            if len(node.children):
                assert node.children[0].parent == node

    def test_equal_handles_hash_equal(self, sum_document):
        document, _ = sum_document

        assert document.root_node == document.root_node
        assert len({document.root_node, document.root_node}) == 1

    def test_nested_nodes_with_same_range_differ(self, binary):
        statement = binary.parent

        assert (statement.start_index, statement.end_index) == (binary.start_index, binary.end_index)
        assert statement != binary

    def test_handles_from_different_versions_differ(self, sum_document):
        document, _ = sum_document
        before = document.root_node

        document.invalidate().parse()

        assert before != document.root_node


class TestDescendantForIndex:
    def test_single_index(self, sum_document):
        document, _ = sum_document
        root = document.root_node

        assert root.descendant_for_index(0).type == "identifier"
        assert root.descendant_for_index(1).type == "+"

    def test_named_skips_anonymous_nodes(self, sum_document):
        document, _ = sum_document

        assert document.root_node.named_descendant_for_index(1).type == "binary_operator"

    def test_range(self, sum_document):
        document, _ = sum_document

        assert document.root_node.descendant_for_index(0, 3).type == "binary_operator"

    def test_single_index_equals_degenerate_range(self, sum_document):
        document, _ = sum_document
        root = document.root_node

        for index in range(4):
            assert root.descendant_for_index(index) == root.descendant_for_index(index, index)
            assert root.named_descendant_for_index(index) == root.named_descendant_for_index(index, index)

    def test_two_unit_text(self, make_document):
        document, _ = make_document("ab")

        node = document.root_node.descendant_for_index(0, 1)

        assert node.type == "identifier"
        assert (node.start_index, node.end_index) == (0, 2)

    @pytest.mark.parametrize("args", [(), (0, 1, 2)])
    def test_arity(self, sum_document, args):
        document, _ = sum_document

        with pytest.raises(ArgumentArityError, match="1 or 2 character indices"):
            document.root_node.descendant_for_index(*args)
        with pytest.raises(ArgumentArityError):
            document.root_node.named_descendant_for_index(*args)

    @pytest.mark.parametrize("args", [("a",), (0, "b"), (None,), (True,)])
    def test_argument_types(self, sum_document, args):
        document, _ = sum_document

        with pytest.raises(ArgumentTypeError, match="Character index must be a number"):
            document.root_node.descendant_for_index(*args)


class TestDescendantForPosition:
    @pytest.fixture
    def document(self, make_document):
        document, _ = make_document("a+b\nc")
        return document

    def test_point(self, document):
        node = document.root_node.descendant_for_position(Point(1, 0))

        assert node.type == "identifier"
        assert node.start_position == Point(1, 0)

    @pytest.mark.parametrize("point", [Point(0, 2), TSPoint(0, 2), {"row": 0, "column": 2}])
    def test_point_shapes(self, document, point):
        node = document.root_node.descendant_for_position(point)

        assert node.type == "identifier"
        assert node.start_index == 2

    def test_named(self, document):
        assert document.root_node.named_descendant_for_position({"row": 0, "column": 1}).type == "binary_operator"

    def test_range(self, document):
        node = document.root_node.descendant_for_position(Point(0, 0), Point(0, 3))

        assert node.type == "binary_operator"

    def test_arity(self, document):
        with pytest.raises(ArgumentArityError, match="1 or 2 points"):
            document.root_node.descendant_for_position()

    @pytest.mark.parametrize("args", [(5,), (Point(0, 0), "x"), ({"row": "0", "column": 0},)])
    def test_argument_types(self, document, args):
        with pytest.raises(ArgumentTypeError):
            document.root_node.named_descendant_for_position(*args)


class TestStaleHandles:
    @pytest.fixture
    def stale(self, sum_document):
        document, source = sum_document
        root = document.root_node
        left = root.children[0].children[0].children[0]
        document.edit(source.splice(3, 0, "+c"))
        return root, left

    def test_properties_are_none(self, stale):
        root, left = stale

        assert not root.is_valid()
        for name in ("start_index", "start_position", "end_index", "end_position", "type", "is_named"):
            assert getattr(root, name) is None

    def test_structure_is_none(self, stale):
        root, left = stale

        assert root.children is None
        assert root.named_children is None
        assert left.parent is None
        assert left.next_sibling is None
        assert left.next_named_sibling is None
        assert left.previous_sibling is None
        assert left.previous_named_sibling is None

    def test_rendering_degrades(self, stale):
        root, _ = stale

        assert root.to_string() is None
        assert str(root) == ""
        assert root.to_dict() is None
        assert "stale" in repr(root)

    def test_queries_return_none_without_validating(self, stale):
        root, _ = stale

        assert root.descendant_for_index(0) is None
        assert root.descendant_for_index("a") is None
        assert root.named_descendant_for_position() is None

    def test_validity_matches_version(self, sum_document):
        document, source = sum_document
        handles = list(walk(document.root_node))

        for handle in handles:
            assert handle.is_valid() == (handle.version == document.version)

        document.edit(source.splice(0, 1, "x")).parse()

        for handle in handles:
            assert handle.is_valid() == (handle.version == document.version)
            assert not handle.is_valid()
