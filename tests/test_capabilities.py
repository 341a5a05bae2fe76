from types import ModuleType

import pytest

from selectree import Selection
from selectree.exceptions import CapabilityConflict
from _selectree.api import attributes, css, forms, manipulation, traversing
from _selectree.plugins import plugin_manager
from _selectree.selection import compose


def shout(selection) -> str:
    return selection.text().upper()


def test_builtin_capabilities_are_attached():
    for capability in (attributes, css, forms, manipulation, traversing):
        for name in capability.__all__:
            assert getattr(Selection, name) is getattr(capability, name)


def test_compose_mapping(fruits):
    class Custom(Selection):
        __slots__ = ()

    compose(Custom, {"shout": shout})

    assert Custom([fruits(".apple")[0]]).shout() == "APPLE"
    assert not hasattr(Selection, "shout")


def test_compose_module(fruits):
    class Custom(Selection):
        __slots__ = ()

    module = ModuleType("shouting")
    module.shout = shout
    module.__all__ = ("shout",)

    compose(Custom, module)
    assert Custom(fruits("li").get()).shout() == "APPLEORANGEPEAR"


def test_conflicts_are_rejected_before_attaching():
    class Custom(Selection):
        __slots__ = ()

    with pytest.raises(CapabilityConflict) as excinfo:
        compose(Custom, {"shout": shout, "find": shout})
    assert excinfo.value.name == "find"
    assert not hasattr(Custom, "shout")

    with pytest.raises(CapabilityConflict) as excinfo:
        compose(Custom, {"shout": shout}, {"shout": shout})
    assert excinfo.value.name == "shout"
    assert not hasattr(Custom, "shout")

    with pytest.raises(CapabilityConflict):
        compose(Custom, {"shout": shout}, {"loud": shout, "text": shout})
    assert not hasattr(Custom, "shout")
    assert not hasattr(Custom, "loud")

    compose(Custom, {"shout": shout}, {"loud": shout})
    assert Custom.shout is Custom.loud is shout

    with pytest.raises(CapabilityConflict):
        compose(Custom, {"length": shout})


def test_invalid_capabilities():
    class Custom(Selection):
        __slots__ = ()

    with pytest.raises(TypeError):
        compose(Custom, ["shout"])

    with pytest.raises(TypeError):
        compose(Custom, {"loud": "shout"})
    assert not hasattr(Custom, "loud")


def test_register_capability(fruits):
    assert fruits("li").word_count() == 3
    assert any("word_count" in c for c in plugin_manager.capabilities)

    with pytest.raises(CapabilityConflict):
        plugin_manager.register_capability({"word_count": shout})


def test_register_pseudo_class():
    with pytest.raises(TypeError):
        plugin_manager.register_pseudo_class(1)

    assert "is-citrus" in plugin_manager.pseudo_classes
    assert "first-child" in plugin_manager.pseudo_classes
    assert "parent" in plugin_manager.pseudo_classes
