import pytest

from selectree import load
from _selectree.api.css import _parse_style


@pytest.fixture
def styled():
    return load(
        '<p style="color: red; display: none">a</p><p>b</p>', is_document=False
    )


def test_get(styled):
    paragraph = styled("p").first()
    assert paragraph.css("color") == "red"
    assert paragraph.css("margin") is None
    assert paragraph.css() == {"color": "red", "display": "none"}
    assert paragraph.css(["display", "margin"]) == {"display": "none"}

    assert styled("p").last().css() == {}
    assert styled("nothing").css("color") is None


def test_set(styled):
    paragraphs = styled("p")

    assert paragraphs.css("color", "blue") is paragraphs
    assert paragraphs.first().attr("style") == "color: blue; display: none;"
    assert paragraphs.last().attr("style") == "color: blue;"

    paragraphs.css("display", "")
    assert paragraphs.first().attr("style") == "color: blue;"

    paragraphs.css({"margin": "0", "color": "green"})
    assert paragraphs.last().css() == {"color": "green", "margin": "0"}


def test_set_with_callable(styled):
    styled("p").css("width", lambda i, current: f"{(i + 1) * 10}px")
    assert [n.attributes["style"] for n in styled("p")] == [
        "color: red; display: none; width: 10px;",
        "width: 20px;",
    ]


@pytest.mark.parametrize(
    ("style", "expected"),
    (
        (None, {}),
        ("  ", {}),
        ("color:red", {"color": "red"}),
        ("color: red;;", {"color": "red"}),
        (
            "background: url(data:image/png;base64,AA)",
            {"background": "url(data:image/png;base64,AA)"},
        ),
    ),
)
def test_parse_style(style, expected):
    assert _parse_style(style) == expected


def test_parse_style_malformed():
    with pytest.warns(UserWarning):
        assert _parse_style("foo; color: red") == {"color": "red"}
