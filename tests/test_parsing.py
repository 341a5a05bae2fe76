import pytest

from _selectree.options import DEFAULT_OPTIONS
from _selectree.parser import build_tree
from selectree import Options, load
from selectree.exceptions import (
    InvalidCodePath,
    NoBackendAvailable,
    ParsingProcessingError,
)
from selectree.nodes import CommentNode, DirectiveNode, DocumentNode, TagNode, TextNode
from selectree.plugins import ExpatBackend, LxmlBackend, plugin_manager


def test_backend_selection():
    assert isinstance(load("<p/>").root().backend, LxmlBackend)
    assert isinstance(load("<p/>", {"xml": True}).root().backend, ExpatBackend)
    assert isinstance(
        load("<p/>", {"backend": "lxml", "xml_mode": True}).root().backend,
        LxmlBackend,
    )

    with pytest.raises(NoBackendAvailable):
        load("<p/>", {"backend": "nope"})


def test_backends_are_registered():
    assert plugin_manager.backends["expat"] is ExpatBackend
    assert plugin_manager.backends["lxml"] is LxmlBackend


def test_html_document():
    query = load(
        "<!DOCTYPE html><html><head><title>x</title></head><body><p>a</p></body></html>"
    )
    document = query.root()[0]

    assert isinstance(document, DocumentNode)
    doctype, html = document.child_nodes
    assert isinstance(doctype, DirectiveNode)
    assert doctype.name == "!doctype"
    assert doctype.content == "!DOCTYPE html"
    assert html.name == "html"
    assert query("title").text() == "x"
    assert query.html() == (
        "<!DOCTYPE html><html><head><title>x</title></head><body><p>a</p></body></html>"
    )


def test_html_document_implies_structure(fruits):
    assert fruits("html").length == 1
    assert fruits("body > ul > li").length == 3


def test_html_fragment(fruits_fragment):
    assert fruits_fragment("html").length == 0
    assert fruits_fragment("body").length == 0
    assert fruits_fragment.root()[0].first_child.name == "ul"


def test_html_fragment_of_several_nodes():
    query = load("text<li>Apple</li><!--c--><li>Pear</li>", is_document=False)
    nodes = query.root()[0].child_nodes

    assert [type(n) for n in nodes] == [TextNode, TagNode, CommentNode, TagNode]
    assert query.html() == "text<li>Apple</li><!--c--><li>Pear</li>"


def test_html_case_and_entities():
    query = load('<P CLASS="x">a &amp; b&nbsp;c</P>', is_document=False)
    node = query("p")[0]

    assert node.name == "p"
    assert node.attributes == {"class": "x"}
    assert node.full_text == "a & b\xa0c"


def test_html_from_bytes():
    query = load("<p>äöü</p>".encode(), is_document=False)
    assert query("p").text() == "äöü"


def test_html_text_context():
    backend = LxmlBackend()
    document = backend.parse("<b>x</b>", Options(), False, TagNode("script"))

    assert len(document.child_nodes) == 1
    assert document.first_child.content == "<b>x</b>"


@pytest.mark.parametrize("content", ("", "   \n"))
def test_empty_input(content):
    query = load(content)
    assert not query.root()[0].child_nodes
    assert query.html() == ""


def test_nodes_as_content():
    root = TagNode("root", children=(TagNode("a"), TagNode("b")))
    a, b = root.child_nodes

    query = load([a, b])
    document = query.root()[0]

    assert root.child_nodes == ()
    assert a.root is document
    assert query.html() == "<a></a><b></b>"

    document = DocumentNode(children=(TagNode("x"),))
    assert load(document).root()[0] is document


def test_remove_comments():
    query = load("<p>a<!--b-->c</p>", {"remove_comments": True}, is_document=False)
    assert query.html() == "<p>ac</p>"


def test_unexpected_content_type():
    with pytest.raises(TypeError):
        load(1)


def test_xml_document():
    query = load(
        '<?xml version="1.0" encoding="UTF-8"?>'
        "<!DOCTYPE catalog>"
        '<catalog><Item ID="1">A &amp; B</Item></catalog>',
        {"xml": True},
    )
    declaration, doctype, catalog = query.root()[0].child_nodes

    assert declaration.name == "?xml"
    assert doctype.name == "!doctype"
    assert doctype.content == "!DOCTYPE catalog"
    assert catalog.first_child.name == "Item"
    assert catalog.first_child.attributes == {"ID": "1"}
    assert query("Item").text() == "A & B"
    assert query("item").length == 0


def test_xml_from_bytes_with_declared_encoding():
    data = '<?xml version="1.0" encoding="latin-1"?><a>ä</a>'.encode("latin-1")
    assert load(data, {"xml": True})("a").text() == "ä"


def test_xml_processing_instructions():
    markup = "<root><?pi data?><?empty?></root>"

    query = load(markup, {"xml": True})
    pi, empty = query("root")[0].child_nodes
    assert pi.name == "?pi"
    assert pi.content == "?pi data?"
    assert empty.content == "?empty?"

    query = load(markup, {"xml": {"remove_processing_instructions": True}})
    assert query.html() == "<root/>"


def test_xml_several_top_level_nodes():
    query = load("<a/>text<b/>", {"xml": True})
    assert query.html() == "<a/>text<b/>"


@pytest.mark.parametrize("markup", ("<a>", "<a></b>", "<a x=1/>"))
def test_xml_syntax_errors(markup):
    with pytest.raises(ParsingProcessingError):
        load(markup, {"xml": True})


def test_unknown_parser_event():
    with pytest.raises(InvalidCodePath):
        build_tree([(-1, "?")], DEFAULT_OPTIONS)  # type: ignore
