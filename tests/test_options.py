import pytest

from selectree import DEFAULT_OPTIONS, Options, flatten_options


def test_defaults():
    options = flatten_options()
    assert options is DEFAULT_OPTIONS
    assert not options.xml_mode
    assert options.decode_entities
    assert options.lower_cases_tags
    assert options.lower_cases_attribute_names
    assert not options.self_closes_tags


def test_derived_defaults_follow_xml_mode():
    options = Options(xml_mode=True)
    assert not options.lower_cases_tags
    assert not options.lower_cases_attribute_names
    assert options.self_closes_tags

    options = Options(xml_mode=True, lower_case_tags=True, self_closing_tags=False)
    assert options.lower_cases_tags
    assert not options.self_closes_tags


def test_flatten_mapping_onto_base():
    base = Options(quirks_mode=True)
    options = flatten_options({"decode_entities": False}, base)
    assert options.quirks_mode
    assert not options.decode_entities
    assert base.decode_entities


def test_flatten_options_instance():
    options = Options(base_url="https://example.org/")
    assert flatten_options(options, Options(xml_mode=True)) is options


@pytest.mark.parametrize(
    ("given", "xml_mode", "decode_entities"),
    (
        ({"xml": True}, True, True),
        ({"xml": False}, False, True),
        ({"xml": {"decode_entities": False}}, True, False),
        ({"xml": True, "xml_mode": False}, False, True),
    ),
)
def test_flatten_xml_shorthand(given, xml_mode, decode_entities):
    options = flatten_options(given)
    assert options.xml_mode is xml_mode
    assert options.decode_entities is decode_entities


@pytest.mark.parametrize(
    "given", ({"unknown": 1}, {"xml": "yes"}, ["xml_mode"], "xml")
)
def test_flatten_invalid_input(given):
    with pytest.raises(TypeError):
        flatten_options(given)


def test_options_are_immutable():
    with pytest.raises(AttributeError):
        DEFAULT_OPTIONS.xml_mode = True
