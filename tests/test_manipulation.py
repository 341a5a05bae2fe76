from selectree import load


def texts(selection):
    return [n.full_text for n in selection]


def test_after(fruits):
    fruits(".apple").after("<li class='plum'>Plum</li>")
    assert texts(fruits("li")) == ["Apple", "Plum", "Orange", "Pear"]

    fruits(".apple").after(fruits(".pear"))
    assert texts(fruits("li")) == ["Apple", "Pear", "Plum", "Orange"]

    fruits(".orange").after("<li>1</li>", "<li>2</li>")
    assert fruits("li").last().text() == "2"


def test_append(fruits):
    fruits_list = fruits("ul")

    assert fruits_list.append("<li class='plum'>Plum</li>") is fruits_list
    assert fruits("li").last().attr("class") == "plum"

    fruits_list.append("<li>A</li>", ["<li>B</li>", "<li>C</li>"])
    assert fruits("li").slice(-3).text() == "ABC"


def test_append_moves_nodes(fruits):
    fruits("ul").append(fruits(".apple"))
    assert texts(fruits("li")) == ["Orange", "Pear", "Apple"]


def test_append_to_multiple_targets(food):
    apple = food(".apple")[0]

    food("ul").append(food(".apple"))

    assert food("#fruits li").text() == "OrangePearApple"
    assert food("#fruits li").last()[0] is not apple
    assert food("#vegetables li").text() == "CarrotSweetcornApple"
    assert food("#vegetables li").last()[0] is apple


def test_append_with_callable(fruits):
    fruits("li").append(lambda i, html: f"<i>{i}</i>")
    assert fruits("ul").text() == "Apple0Orange1Pear2"
    assert fruits("i").length == 3


def test_append_to(fruits):
    plum = fruits("<li>Plum</li>")
    assert plum.append_to("ul") is plum
    assert fruits("li").last().text() == "Plum"

    fruits("<li>Lime</li>").append_to(fruits("ul"))
    assert fruits("li").last().text() == "Lime"


def test_before(fruits):
    fruits(".pear").before("<li>Plum</li>")
    assert texts(fruits("li")) == ["Apple", "Orange", "Plum", "Pear"]

    fruits(".apple").before(fruits(".pear"))
    assert texts(fruits("li")) == ["Pear", "Apple", "Orange", "Plum"]


def test_clone(fruits):
    apple = fruits(".apple")
    copy = apple.clone()

    assert copy[0] is not apple[0]
    assert str(copy) == '<li class="apple">Apple</li>'
    assert copy.parent().length == 0

    copy.text("Copy")
    assert apple.text() == "Apple"


def test_empty(fruits):
    fruits_list = fruits("ul")
    assert fruits_list.empty() is fruits_list
    assert fruits("li").length == 0
    assert fruits_list.html() == ""


def test_html(fruits):
    assert fruits(".apple").html() == "Apple"
    assert fruits("ul").html().startswith('<li class="apple">Apple</li>')
    assert fruits("nothing").html() is None

    fruits(".apple").html("<b>Red</b> Apple")
    assert fruits(".apple b").text() == "Red"
    assert fruits(".apple").text() == "Red Apple"

    fruits("li").html("<i>x</i>")
    assert fruits("i").length == 3


def test_insert_after(fruits):
    inserted = fruits("<li class='plum'>Plum</li>").insert_after(".apple")

    assert texts(fruits("li")) == ["Apple", "Plum", "Orange", "Pear"]
    assert inserted.length == 1
    assert inserted[0] is fruits(".plum")[0]


def test_insert_before(food):
    inserted = food("<li>Plum</li>").insert_before("ul > li:first-child")

    assert inserted.length == 2
    assert food("#fruits li").first().text() == "Plum"
    assert food("#vegetables li").first().text() == "Plum"


def test_insert_moves_selection(fruits):
    fruits(".apple").insert_after(".pear")
    assert texts(fruits("li")) == ["Orange", "Pear", "Apple"]


def test_prepend(fruits):
    fruits("ul").prepend("<li>First</li>")
    assert fruits("li").first().text() == "First"

    fruits("ul").prepend(fruits(".pear"))
    assert texts(fruits("li")) == ["Pear", "First", "Apple", "Orange"]


def test_prepend_to(fruits):
    fruits("<li>Plum</li>").prepend_to("ul")
    assert fruits("li").first().text() == "Plum"


def test_remove(fruits):
    items = fruits("li")

    assert items.remove(".apple") is items
    assert fruits("li").length == 2
    assert items.length == 3

    items.remove()
    assert fruits("li").length == 0
    assert fruits("ul").html() == ""


def test_replace_with(fruits):
    fruits(".pear").replace_with("<li class='plum'>Plum</li>")
    assert texts(fruits("li")) == ["Apple", "Orange", "Plum"]
    assert fruits(".pear").length == 0

    fruits("li").replace_with(lambda i, node: f"<li>{i}</li>")
    assert fruits("ul").text() == "012"


def test_replace_with_moves_nodes(fruits):
    pear = fruits(".pear")[0]
    fruits(".apple").replace_with(fruits(".pear"))
    assert texts(fruits("li")) == ["Pear", "Orange"]
    assert fruits("li")[0] is pear


def test_text(fruits):
    assert fruits("li").text() == "AppleOrangePear"

    fruits(".apple").text("<b>x</b>")
    assert fruits(".apple b").length == 0
    assert fruits(".apple").html() == "&lt;b&gt;x&lt;/b&gt;"

    fruits("li").text(lambda i, text: text.upper())
    assert fruits("li").text() == "<B>X</B>ORANGEPEAR"


def test_unwrap(fruits):
    fruits(".apple").unwrap()
    assert fruits("ul").length == 0
    assert fruits("body > li").length == 3

    fruits("li").unwrap()
    assert fruits("body").length == 1


def test_unwrap_with_selector(food):
    food("li").unwrap("#vegetables")
    assert food("ul").attr("id") == "fruits"
    assert food("body > li").text() == "CarrotSweetcorn"


def test_wrap(fruits):
    fruits(".apple").wrap("<div class='wrapper'></div>")
    assert fruits("ul > .wrapper > .apple").length == 1
    assert texts(fruits("li")) == ["Apple", "Orange", "Pear"]

    fruits(".orange, .pear").wrap("<section><p></p><span></span></section>")
    assert fruits("section > p > li").length == 2
    assert fruits("section").length == 2


def test_wrap_with_callable(fruits):
    fruits("li").wrap(lambda i, node: f"<div id='w{i}'></div>")
    assert fruits("#w2 > .pear").length == 1


def test_wrap_with_selector():
    query = load(
        "<div><b class='tpl'></b><p>a</p><p>b</p></div>",
        is_document=False,
    )
    query("p").wrap(".tpl")
    assert query("div > b > p").length == 2
    assert query("b").length == 3


def test_wrap_all(fruits):
    items = fruits(".orange, .pear")
    assert items.wrap_all("<div class='w'></div>") is items
    assert fruits("ul > .w > li").length == 2
    assert fruits("ul > li").text() == "Apple"


def test_wrap_inner(fruits):
    fruits(".apple").wrap_inner("<b></b>")
    assert fruits(".apple").html() == "<b>Apple</b>"

    fruits("ul").wrap_inner("<div class='inner'></div>")
    assert fruits("ul > .inner > li").length == 3
