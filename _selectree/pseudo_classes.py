# Copyright (C) 2018-'25  Frank Sachsenheim
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""
The pseudo-classes without arguments that CSS selectors support. The jQuery extensions
for form controls are included. Tag names are compared lower-cased, hence these work
likewise for XML documents with lower-cased names.
"""

from __future__ import annotations

from typing import Final

from _selectree.filters import is_tag_node
from _selectree.nodes import TagNode, TextNode
from _selectree.plugins import plugin_manager


DISABLEABLE_ELEMENTS: Final = frozenset(
    ("button", "fieldset", "input", "optgroup", "option", "select", "textarea")
)
HEADER_ELEMENTS: Final = frozenset(("h1", "h2", "h3", "h4", "h5", "h6"))
INPUT_ELEMENTS: Final = frozenset(("button", "input", "select", "textarea"))
LINK_ELEMENTS: Final = frozenset(("a", "area", "link"))


def _input_type(node: TagNode) -> str:
    return node.attributes.get("type", "").lower()


def _is_input_of_type(node: TagNode, type_: str) -> bool:
    return node.name.lower() == "input" and _input_type(node) == type_


def _name(node: TagNode) -> str:
    return node.name.lower()


def _same_type_siblings(node: TagNode, preceding: bool) -> bool:
    siblings = (
        node.iterate_preceding_siblings(is_tag_node)
        if preceding
        else node.iterate_following_siblings(is_tag_node)
    )
    return any(n.name == node.name for n in siblings)  # type: ignore


# structural


@plugin_manager.register_pseudo_class
def empty(node: TagNode) -> bool:
    for child in node.iterate_children():
        if isinstance(child, TagNode) or (
            isinstance(child, TextNode) and child.content
        ):
            return False
    return True


@plugin_manager.register_pseudo_class
def first_child(node: TagNode) -> bool:
    return node.fetch_preceding_sibling(is_tag_node) is None


@plugin_manager.register_pseudo_class
def first_of_type(node: TagNode) -> bool:
    return not _same_type_siblings(node, preceding=True)


@plugin_manager.register_pseudo_class
def last_child(node: TagNode) -> bool:
    return node.fetch_following_sibling(is_tag_node) is None


@plugin_manager.register_pseudo_class
def last_of_type(node: TagNode) -> bool:
    return not _same_type_siblings(node, preceding=False)


@plugin_manager.register_pseudo_class
def only_child(node: TagNode) -> bool:
    return first_child(node) and last_child(node)


@plugin_manager.register_pseudo_class
def only_of_type(node: TagNode) -> bool:
    return first_of_type(node) and last_of_type(node)


@plugin_manager.register_pseudo_class("parent")
def _parent(node: TagNode) -> bool:
    return not empty(node)


@plugin_manager.register_pseudo_class
def root(node: TagNode) -> bool:
    return node.parent is None


# states


@plugin_manager.register_pseudo_class
def checked(node: TagNode) -> bool:
    if _name(node) == "option":
        return "selected" in node.attributes
    return (
        _name(node) == "input"
        and _input_type(node) in ("checkbox", "radio")
        and "checked" in node.attributes
    )


@plugin_manager.register_pseudo_class
def disabled(node: TagNode) -> bool:
    if _name(node) not in DISABLEABLE_ELEMENTS:
        return False
    if "disabled" in node.attributes:
        return True
    return any(
        _name(n) in ("fieldset", "optgroup") and "disabled" in n.attributes
        for n in node.iterate_ancestors()
    )


@plugin_manager.register_pseudo_class
def enabled(node: TagNode) -> bool:
    return _name(node) in DISABLEABLE_ELEMENTS and not disabled(node)


@plugin_manager.register_pseudo_class
def link(node: TagNode) -> bool:
    return _name(node) in LINK_ELEMENTS and "href" in node.attributes


@plugin_manager.register_pseudo_class
def selected(node: TagNode) -> bool:
    if "selected" in node.attributes:
        return True
    if _name(node) != "option":
        return False

    # the first option of a single choice without explicit selection
    parent = node.parent
    if parent is None or _name(parent) != "select" or "multiple" in parent.attributes:
        return False
    for sibling in parent.iterate_children(is_tag_node):
        if sibling is node:
            return not any(
                "selected" in n.attributes  # type: ignore
                for n in node.iterate_following_siblings(is_tag_node)
            )
        return False
    return False


# jQuery extensions


@plugin_manager.register_pseudo_class
def button(node: TagNode) -> bool:
    return _name(node) == "button" or _is_input_of_type(node, "button")


@plugin_manager.register_pseudo_class
def checkbox(node: TagNode) -> bool:
    return _is_input_of_type(node, "checkbox")


@plugin_manager.register_pseudo_class
def file(node: TagNode) -> bool:
    return _is_input_of_type(node, "file")


@plugin_manager.register_pseudo_class
def header(node: TagNode) -> bool:
    return _name(node) in HEADER_ELEMENTS


@plugin_manager.register_pseudo_class
def image(node: TagNode) -> bool:
    return _is_input_of_type(node, "image")


@plugin_manager.register_pseudo_class("input")
def _input(node: TagNode) -> bool:
    return _name(node) in INPUT_ELEMENTS


@plugin_manager.register_pseudo_class
def password(node: TagNode) -> bool:
    return _is_input_of_type(node, "password")


@plugin_manager.register_pseudo_class
def radio(node: TagNode) -> bool:
    return _is_input_of_type(node, "radio")


@plugin_manager.register_pseudo_class
def reset(node: TagNode) -> bool:
    return _is_input_of_type(node, "reset") or (
        _name(node) == "button" and _input_type(node) == "reset"
    )


@plugin_manager.register_pseudo_class
def submit(node: TagNode) -> bool:
    if _name(node) == "button":
        return _input_type(node) in ("", "submit")
    return _is_input_of_type(node, "submit")


@plugin_manager.register_pseudo_class
def text(node: TagNode) -> bool:
    return _name(node) == "input" and _input_type(node) in ("", "text")


__all__ = ()
