import pytest

from selectree import load
from _selectree.plugins import plugin_manager


FRUITS = (
    '<ul id="fruits">'
    '<li class="apple">Apple</li>'
    '<li class="orange">Orange</li>'
    '<li class="pear">Pear</li>'
    "</ul>"
)
VEGETABLES = (
    '<ul id="vegetables">'
    '<li class="carrot">Carrot</li>'
    '<li class="sweetcorn">Sweetcorn</li>'
    "</ul>"
)
FORM = (
    "<form>"
    '<input name="fruit" value="Apple">'
    '<input name="disabled" value="x" disabled>'
    '<input type="checkbox" name="c1" value="yes" checked>'
    '<input type="checkbox" name="c2" value="no">'
    '<input type="submit" name="go" value="Go">'
    '<select name="many" multiple>'
    "<option selected>A</option><option>B</option><option selected>C</option>"
    "</select>"
    '<textarea name="note">a\nb</textarea>'
    '<input value="nameless">'
    "</form>"
)


# a capability and a pseudo-class that the tests rely on


def word_count(selection) -> int:
    return sum(len(n.full_text.split()) for n in selection)


plugin_manager.register_capability({"word_count": word_count})


@plugin_manager.register_pseudo_class
def is_citrus(node) -> bool:
    return node.attributes.get("class") in ("lemon", "orange")


#


@pytest.fixture
def food():
    return load(
        f"<html><head></head><body>{FRUITS}{VEGETABLES}</body></html>",
        is_document=True,
    )


@pytest.fixture
def form():
    return load(FORM, is_document=False)


@pytest.fixture
def fruits():
    return load(FRUITS)


@pytest.fixture
def fruits_fragment():
    return load(FRUITS, is_document=False)
