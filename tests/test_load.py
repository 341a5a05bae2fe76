import pytest

import selectree
from selectree import Loader, Selection, load
from selectree.nodes import DocumentNode, TagNode


FRUITS = (
    '<ul id="fruits">'
    '<li class="apple">Apple</li>'
    '<li class="orange">Orange</li>'
    '<li class="pear">Pear</li>'
    "</ul>"
)


def test_call(fruits):
    assert fruits("li").length == 3
    assert fruits(None).length == 0
    assert fruits("").length == 0

    items = fruits("li")
    assert fruits(items) is items

    node = items[0]
    assert fruits(node)[0] is node
    assert fruits([node, items[1]]).length == 2

    with pytest.raises(TypeError):
        fruits(123)


def test_call_with_context(fruits):
    assert fruits("li", "#fruits").length == 3
    assert fruits("li", "ol").length == 0
    assert fruits("li", fruits("ul")).length == 3
    assert fruits("li", fruits("ul")[0]).length == 3

    in_markup = fruits("li", "<ul><li>Plum</li></ul>")
    assert in_markup.text() == "Plum"


def test_call_with_markup(fruits):
    created = fruits("<li>Plum</li><li>Lime</li>")
    assert created.length == 2
    assert created.text() == "PlumLime"
    assert fruits("li").length == 3


def test_call_with_options(fruits):
    assert fruits("LI").length == 3
    assert fruits("LI", options={"xml": True}).length == 0
    assert fruits("li", options={"xml": True}).options.xml_mode
    assert fruits("LI", root=fruits.root(), options={"xml": True}).length == 0
    assert fruits("LI", fruits("ul"), options={"xml": True}).length == 0
    assert fruits("LI").options == fruits.options


def test_call_with_root(fruits):
    assert fruits("li", root="<ol><li>1</li><li>2</li></ol>").length == 2

    other = load("<p>x</p>", is_document=False)
    assert fruits("p", root=other.root()).text() == "x"
    assert fruits("p", root=other.root()[0]).text() == "x"


def test_contains_and_merge(fruits):
    document = fruits.root()[0]
    apple = fruits(".apple")[0]

    assert fruits.contains(document, apple)
    assert not fruits.contains(apple, document)
    assert not fruits.contains(apple, apple)
    assert selectree.contains(document, apple)
    assert selectree.text(fruits("li")) == "AppleOrangePear"

    assert fruits.merge([1], [2, 3]) == [1, 2, 3]
    items = fruits("li")
    assert fruits.merge(items, fruits("ul")) is items
    assert items.length == 4

    with pytest.raises(TypeError):
        fruits.merge((1,), [2])


def test_html(fruits):
    assert '<ul id="fruits"><li class="apple">Apple</li>' in fruits.html()
    assert fruits.html(".apple") == '<li class="apple">Apple</li>'
    assert fruits.html(fruits(".pear")[0]) == '<li class="pear">Pear</li>'
    assert fruits.html(fruits(".apple, .pear")) == (
        '<li class="apple">Apple</li><li class="pear">Pear</li>'
    )


def test_html_with_options():
    query = load("<p>&amp;</p>", is_document=False)
    assert query.html() == "<p>&amp;</p>"
    assert query.html(options={"decode_entities": False}) == "<p>&</p>"


def test_load():
    query = load(FRUITS, is_document=False)

    assert isinstance(query, Loader)
    assert repr(query).startswith("<Loader(<DocumentNode")
    assert isinstance(query.root(), Selection)
    assert isinstance(query.root()[0], DocumentNode)
    assert query.root().root is None
    assert not query.options.xml_mode

    assert load("<a/>", {"xml": True}).options.xml_mode


def test_load_nodes():
    node = TagNode("p", children=("x",))
    query = load(node)
    assert query("p")[0] is node
    assert isinstance(node._parent, DocumentNode)


def test_parse_html(fruits):
    nodes = fruits.parse_html("<p>a</p><script>x()</script>")
    assert len(nodes) == 1
    assert nodes[0].name == "p"
    assert nodes[0]._parent is None

    nodes = fruits.parse_html("<p>a</p><script>x()</script>", keep_scripts=True)
    assert [n.name for n in nodes] == ["p", "script"]

    assert fruits.parse_html("") == []
    assert fruits.parse_html(None) == []


def test_text(fruits):
    assert fruits.text() == "AppleOrangePear"
    assert fruits.text(".apple, .pear") == "ApplePear"
    assert fruits.text(fruits("li")[1]) == "Orange"


def test_xml():
    query = load("<p>a<br></p>", is_document=False)
    assert query.xml() == "<p>a<br/></p>"
    assert query.xml("br") == "<br/>"
    assert query.html() == "<p>a<br></p>"
