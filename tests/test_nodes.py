import pytest

from selectree.exceptions import InvalidOperation
from selectree.filters import is_tag_node, is_text_node
from selectree.nodes import (
    CommentNode,
    DirectiveNode,
    DocumentNode,
    TagNode,
    TextNode,
)


def sample_tree() -> TagNode:
    return TagNode(
        "root",
        children=(
            TagNode("a", {"id": "a"}, ("x",)),
            "y",
            TagNode("b", children=(TagNode("c", children=("z",)),)),
        ),
    )


def test_add_following_siblings():
    root = TagNode("root", children=(TagNode("e1"),))
    result = root.first_child.add_following_siblings(TagNode("e2"), TagNode("e3"))
    assert isinstance(result, tuple)
    assert [n.name for n in root.child_nodes] == ["e1", "e2", "e3"]

    with pytest.raises(InvalidOperation):
        TextNode("text").add_following_siblings(CommentNode("comment"))


def test_add_preceding_siblings():
    root = TagNode("root", children=(TagNode("e1"),))
    result = root.first_child.add_preceding_siblings(TagNode("e2"), "text")
    assert len(result) == 2
    assert isinstance(result[1], TextNode)
    assert [type(n) for n in root.child_nodes] == [TagNode, TextNode, TagNode]
    assert root.child_nodes[0].name == "e2"

    with pytest.raises(InvalidOperation):
        root.add_preceding_siblings(CommentNode("comment"))


def test_attached_nodes_are_refused():
    root = sample_tree()
    other = TagNode("other")

    with pytest.raises(InvalidOperation):
        other.append_children(root.first_child)

    node = root.first_child.detach()
    other.append_children(node)
    assert node.parent is other
    assert root.first_child.content == "y"


def test_clone():
    root = sample_tree()

    shallow = root.clone()
    assert shallow.name == "root"
    assert not shallow.child_nodes
    assert shallow.parent is None

    deep = root.clone(deep=True)
    assert str(deep) == str(root)
    assert deep.first_child is not root.first_child
    assert deep.first_child.attributes == {"id": "a"}

    deep.first_child.attributes["id"] = "b"
    assert root.first_child.attributes["id"] == "a"


def test_comment_and_directive_nodes():
    comment = CommentNode(" note ")
    assert str(comment) == "<!-- note -->"
    assert comment.full_text == ""

    directive = DirectiveNode("!doctype", "!DOCTYPE html")
    assert str(directive) == "<!DOCTYPE html>"
    assert directive.clone().content == "!DOCTYPE html"


def test_detach():
    root = sample_tree()
    node = root.first_child

    assert node.detach() is node
    assert node.parent is None
    assert node.index is None
    assert len(root.child_nodes) == 2

    # detaching a detached node is harmless
    node.detach()


def test_document_node():
    document = DocumentNode(children=(TagNode("html"),))
    html = document.first_child

    assert html.parent is None
    assert html.root is document
    assert html.index == 0

    with pytest.raises(InvalidOperation):
        TagNode("x").append_children(DocumentNode())

    with pytest.raises(InvalidOperation):
        document.add_following_siblings(TagNode("x"))

    clone = document.clone(deep=True)
    assert isinstance(clone, DocumentNode)
    assert clone.first_child.name == "html"
    assert clone.first_child is not html


def test_fetch_siblings():
    root = sample_tree()
    a, y, b = root.child_nodes

    assert a.fetch_following_sibling() is y
    assert a.fetch_following_sibling(is_tag_node) is b
    assert b.fetch_preceding_sibling(is_tag_node) is a
    assert a.fetch_preceding_sibling() is None


def test_full_text():
    assert sample_tree().full_text == "xyz"


def test_insert_children():
    root = sample_tree()
    root.insert_children(1, TagNode("i1"), TagNode("i2"))
    assert [getattr(n, "name", None) for n in root.child_nodes] == [
        "a",
        "i1",
        "i2",
        None,
        "b",
    ]

    with pytest.raises(IndexError):
        root.insert_children(10, TagNode("x"))


def test_iterate_ancestors():
    root = sample_tree()
    c = root.last_child.first_child
    assert [n.name for n in c.iterate_ancestors()] == ["b", "root"]


def test_iterate_descendants():
    root = sample_tree()
    assert [n.name for n in root.iterate_descendants(is_tag_node)] == ["a", "b", "c"]
    assert [n.content for n in root.iterate_descendants(is_text_node)] == [
        "x",
        "y",
        "z",
    ]


def test_iterate_siblings():
    root = sample_tree()
    a, y, b = root.child_nodes

    assert list(a.iterate_following_siblings()) == [y, b]
    assert list(b.iterate_preceding_siblings()) == [y, a]
    assert list(b.iterate_preceding_siblings(is_tag_node)) == [a]


def test_prepend_children():
    root = sample_tree()
    root.prepend_children(TagNode("first"))
    assert root.first_child.name == "first"


def test_replace_with():
    root = sample_tree()
    a = root.first_child

    assert a.replace_with(TagNode("new"), "text") is a
    assert a.parent is None
    assert str(root) == "<root><new></new>texty<b><c>z</c></b></root>"

    with pytest.raises(InvalidOperation):
        a.replace_with(TagNode("x"))


def test_siblings_container():
    root = sample_tree()
    siblings = root._child_nodes

    assert len(siblings) == 3
    assert siblings[0].name == "a"
    assert [n.name for n in siblings[::2]] == ["a", "b"]
    with pytest.raises(TypeError):
        siblings["0"]

    with pytest.raises(TypeError):
        root.append_children(1)

    siblings.clear()
    assert not root.child_nodes


def test_tag_node():
    node = TagNode("p", {"id": "x", "class": "y"})
    assert node.id == "x"
    assert list(node.attributes) == ["id", "class"]
    assert node.data == {}
    assert TagNode("p").id is None


def test_text_node():
    node = TextNode("text")
    assert node.full_text == "text"
    assert node.clone().content == "text"

    with pytest.raises(TypeError):
        node.content = 1
