import pytest

from selectree import Options, load
from selectree.nodes import CommentNode, DirectiveNode, DocumentNode, TagNode, TextNode
from _selectree.serializer import serialize


XML_OPTIONS = Options(xml_mode=True)


@pytest.mark.parametrize(
    ("node", "out"),
    (
        (TagNode("p", {"class": "x"}, ("a < b & c > d",)), '<p class="x">a &lt; b &amp; c &gt; d</p>'),
        (TagNode("p", children=("a\xa0b",)), "<p>a&nbsp;b</p>"),
        (TagNode("p", {"title": 'a "b" & c'}), '<p title="a &quot;b&quot; &amp; c"></p>'),
        (TagNode("input", {"disabled": ""}), "<input disabled>"),
        (TagNode("br"), "<br>"),
        (TagNode("script", children=("a < b && c",)), "<script>a < b && c</script>"),
        (TagNode("div"), "<div></div>"),
        (CommentNode(" c "), "<!-- c -->"),
        (DirectiveNode("!doctype", "!DOCTYPE html"), "<!DOCTYPE html>"),
    ),
)  # fmt: skip
def test_html(node, out):
    assert serialize(node) == out


def test_html_decode_entities_disabled():
    node = TagNode("p", {"title": 'say "hi" & go'}, ("a < b",))
    assert (
        serialize(node, Options(decode_entities=False))
        == '<p title="say &quot;hi&quot; & go">a < b</p>'
    )


def test_html_self_closing_tags():
    node = TagNode("p", children=(TagNode("br"), TagNode("span")))
    assert (
        serialize(node, Options(self_closing_tags=True)) == "<p><br /><span></span></p>"
    )


def test_sequence_of_nodes():
    document = DocumentNode(children=(TagNode("a"), "text", TagNode("b")))
    assert serialize(document) == "<a></a>text<b></b>"
    assert serialize(document.child_nodes[1:]) == "text<b></b>"
    assert serialize([]) == ""


def test_str_of_nodes():
    assert str(TagNode("p", children=("x",))) == "<p>x</p>"
    assert str(TextNode("a & b")) == "a &amp; b"


@pytest.mark.parametrize(
    ("node", "out"),
    (
        (TagNode("a", children=(TagNode("b"),)), "<a><b/></a>"),
        (TagNode("a", children=("< & > \"",)), '<a>&lt; &amp; &gt; "</a>'),
        (TagNode("a", {"x": "", "y": '<"&>'}), '<a x="" y="&lt;&quot;&amp;&gt;"/>'),
        (TagNode("br", children=("x",)), "<br>x</br>"),
    ),
)  # fmt: skip
def test_xml(node, out):
    assert serialize(node, XML_OPTIONS) == out


def test_xml_without_self_closing_tags():
    node = TagNode("a", children=(TagNode("b"),))
    options = Options(xml_mode=True, self_closing_tags=False)
    assert serialize(node, options) == "<a><b></b></a>"


def test_round_trip_of_parsed_markup():
    markup = '<ul id="fruits"><li class="apple">Apple &amp; Pear</li><li>x<br>y</li></ul>'
    assert load(markup, is_document=False).html() == markup

    markup = '<?xml version="1.0"?><root><a x="1"/><!--c--><?pi data?></root>'
    assert load(markup, {"xml": True}).html() == markup
