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
Operations to read and alter attributes, properties and the data cache of the
selected tag nodes. Getters read the first node of a selection, setters act on all
tag nodes and return the selection.
"""

from __future__ import annotations

import json
import math
import re
from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any, Final, Optional
from urllib.parse import urljoin

from _selectree.api.css import _get_css
from _selectree.nodes import DocumentNode, TagNode
from _selectree.selectors import filter_nodes, select
from _selectree.utils import UNSET, camel_case, css_case

if TYPE_CHECKING:
    from _selectree.selection import Selection


BOOLEAN_ATTRIBUTES: Final = frozenset(
    ("async", "autofocus", "autoplay", "checked", "controls", "defer", "disabled",
     "hidden", "loop", "multiple", "open", "readonly", "required", "scoped",
     "selected")
)  # fmt: skip
DATA_ATTRIBUTE_PREFIX: Final = "data-"
HREF_ELEMENTS: Final = frozenset(("a", "link"))
SRC_ELEMENTS: Final = frozenset(("audio", "iframe", "img", "source", "video"))

_brace_pattern: Final = re.compile(r"^\{.*\}$|^\[.*\]$", flags=re.DOTALL)
_whitespace_pattern: Final = re.compile(r"\s+")


# helpers


def _as_string(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _get_attribute(node: Any, name: str, xml_mode: bool) -> Optional[str]:
    if not isinstance(node, TagNode):
        return None

    attributes = node.attributes
    if name in attributes:
        if not xml_mode and name in BOOLEAN_ATTRIBUTES:
            return name
        return attributes[name]

    if name == "value":
        if node.name == "option":
            return node.full_text
        if node.name == "input" and attributes.get("type") in ("checkbox", "radio"):
            return "on"

    return None


def _set_attribute(node: TagNode, name: str, value: Any):
    if value is None:
        node.attributes.pop(name, None)
    else:
        node.attributes[name] = _as_string(value)


def _split_names(names: Optional[str]) -> list[str]:
    if not names:
        return []
    return _whitespace_pattern.split(names.strip())


def _get_property(node: TagNode, name: str, xml_mode: bool) -> Any:
    if not xml_mode and name in BOOLEAN_ATTRIBUTES:
        return name in node.attributes
    return _get_attribute(node, name, xml_mode)


def _set_property(node: TagNode, name: str, value: Any, xml_mode: bool):
    if not xml_mode and name in BOOLEAN_ATTRIBUTES:
        _set_attribute(node, name, "" if value else None)
    else:
        _set_attribute(node, name, value)


def _parse_data_value(value: str) -> Any:
    match value:
        case "null":
            return None
        case "true":
            return True
        case "false":
            return False

    try:
        number: int | float = int(value)
    except ValueError:
        try:
            number = float(value)
        except ValueError:
            pass
        else:
            if math.isfinite(number) and str(number) == value:
                return number
    else:
        if str(number) == value:
            return number

    if _brace_pattern.match(value):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            pass

    return value


def _read_all_data(node: TagNode) -> dict[str, Any]:
    for name, value in node.attributes.items():
        if not name.startswith(DATA_ATTRIBUTE_PREFIX):
            continue
        key = camel_case(name[len(DATA_ATTRIBUTE_PREFIX) :])
        if key not in node.data:
            node.data[key] = _parse_data_value(value)
    return node.data


def _read_data(node: TagNode, name: str) -> Any:
    if name in node.data:
        return node.data[name]
    attribute_name = DATA_ATTRIBUTE_PREFIX + css_case(name)
    if attribute_name in node.attributes:
        node.data[name] = result = _parse_data_value(node.attributes[attribute_name])
        return result
    return None


def _tag_nodes(selection: Selection) -> list[TagNode]:
    return [n for n in selection._nodes if isinstance(n, TagNode)]


# operations


def attr(
    self: Selection,
    name: Optional[str | Mapping[str, Any]] = None,
    value: Any = UNSET,
) -> Any:
    """
    Gets or sets attributes.

    Without arguments the attributes of the first node are returned as mapping. With
    a name only, that attribute's value of the first node is returned. Otherwise the
    attribute is set on all tag nodes to the value, which can be a callable that is
    called with each node's index and current value and returns the new one. A
    value of :obj:`None` removes the attribute. A mapping of names to values can be
    passed to set multiple attributes.
    """
    xml_mode = self.options.xml_mode

    if isinstance(name, Mapping):
        if value is not UNSET:
            raise TypeError("Bad combination of arguments.")
        for node in _tag_nodes(self):
            for key, _value in name.items():
                _set_attribute(node, key, _value)
        return self

    if value is UNSET:
        node = self._nodes[0] if self._nodes else None
        if not isinstance(node, TagNode):
            return None
        if name is None:
            return node.attributes
        return _get_attribute(node, name, xml_mode)

    if name is None:
        raise TypeError("An attribute name is required to set a value.")

    for index, node in enumerate(self._nodes):
        if not isinstance(node, TagNode):
            continue
        if callable(value):
            _set_attribute(
                node, name, value(index, _get_attribute(node, name, xml_mode))
            )
        else:
            _set_attribute(node, name, value)

    return self


def prop(
    self: Selection, name: str | Mapping[str, Any], value: Any = UNSET
) -> Any:
    """
    Gets or sets properties. These are attributes, boolean attributes as
    :class:`bool` and these computed ones:

    - ``tag_name`` and ``node_name``: The upper-cased tag name.
    - ``href`` and ``src``: The attribute's value, resolved against the
      ``base_url`` option for the elements that refer to resources.
    - ``inner_text`` and ``text_content``: The text contents.
    - ``inner_html`` and ``outer_html``: The rendered contents, resp. the rendered
      node.
    - ``style``: The parsed declarations of the ``style`` attribute.

    Setters behave like the ones of :func:`attr`, except that boolean attributes are
    added or removed according to a value's truthiness.
    """
    xml_mode = self.options.xml_mode

    if isinstance(name, str) and value is UNSET:
        if not self._nodes:
            return None
        node = self._nodes[0]

        match name:
            case "style":
                return _get_css(node, None)
            case "tag_name" | "node_name":
                return node.name.upper() if isinstance(node, TagNode) else None
            case "href" | "src":
                if not isinstance(node, TagNode):
                    return None
                result = node.attributes.get(name)
                base_url = self.options.base_url
                if (
                    result is not None
                    and base_url
                    and node.name in (HREF_ELEMENTS if name == "href" else SRC_ELEMENTS)
                ):
                    return urljoin(base_url, result)
                return result
            case "inner_text" | "text_content":
                return node.full_text
            case "outer_html":
                if isinstance(node, DocumentNode):
                    return self.html()
                return self._render(node)
            case "inner_html":
                return self.html()
            case _:
                if not isinstance(node, TagNode):
                    return None
                return _get_property(node, name, xml_mode)

    if isinstance(name, Mapping):
        if callable(value):
            raise TypeError("Bad combination of arguments.")
        for node in _tag_nodes(self):
            for key, _value in name.items():
                _set_property(node, key, _value, xml_mode)
        return self

    if value is UNSET:
        return None

    for index, node in enumerate(self._nodes):
        if not isinstance(node, TagNode):
            continue
        if callable(value):
            _set_property(
                node, name, value(index, _get_property(node, name, xml_mode)), xml_mode
            )
        else:
            _set_property(node, name, value, xml_mode)

    return self


def data(
    self: Selection,
    name: Optional[str | Mapping[str, Any]] = None,
    value: Any = UNSET,
) -> Any:
    """
    Gets or sets values in the data cache of tag nodes. Reading initializes the cache
    from ``data-*`` attributes, their names are converted to camel case and their
    values are parsed, e.g. ``data-is-ready="true"`` becomes ``{"isReady": True}``.
    Setting values only alters the cache, not the attributes.
    """
    node = self._nodes[0] if self._nodes else None
    if not isinstance(node, TagNode):
        return None

    if name is None:
        return _read_all_data(node)

    if isinstance(name, Mapping) or value is not UNSET:
        for node in _tag_nodes(self):
            if isinstance(name, Mapping):
                node.data.update(name)
            else:
                node.data[name] = value
        return self

    return _read_data(node, name)


def val(self: Selection, value: Any = UNSET) -> Any:
    """
    Gets or sets the value of form controls. For ``select`` elements the values of
    the selected options are considered, as a list if it allows multiple choices.
    """
    querying = value is UNSET
    node = self._nodes[0] if self._nodes else None
    if not isinstance(node, TagNode):
        return None if querying else self

    xml_mode = self.options.xml_mode

    match node.name:
        case "textarea":
            return self.text() if querying else self.text(value)
        case "select":
            multiple = "multiple" in node.attributes
            options = select("option", (node,), self.options)
            if querying:
                chosen = filter_nodes(options, ":selected", self.options)
                if multiple:
                    return [n.full_text for n in chosen]
                return _get_attribute(chosen[0], "value", xml_mode) if chosen else None

            if not multiple and isinstance(value, Sequence) and not isinstance(
                value, str
            ):
                return self
            values = (
                [value]
                if isinstance(value, str) or not isinstance(value, Sequence)
                else value
            )
            values = [_as_string(v) for v in values]
            for option in options:
                option.attributes.pop("selected", None)
            for option in options:
                if option.attributes.get("value") in values:
                    option.attributes["selected"] = ""
            return self
        case "input" | "option":
            return self.attr("value") if querying else self.attr("value", value)

    return None if querying else self


def remove_attr(self: Selection, name: str) -> Selection:
    """Removes the space-separated attribute names from all tag nodes."""
    for attribute_name in _split_names(name):
        for node in _tag_nodes(self):
            node.attributes.pop(attribute_name, None)
    return self


def has_class(self: Selection, class_name: str) -> bool:
    """Tests whether any of the tag nodes has the class."""
    return any(
        class_name in _split_names(n.attributes.get("class")) for n in _tag_nodes(self)
    )


def add_class(
    self: Selection, value: str | Callable[[int, str], Optional[str]]
) -> Selection:
    """
    Adds the space-separated class names to all tag nodes. A callable gets each
    node's index and current classes and returns the ones to add.
    """
    if callable(value):
        for index, node in enumerate(self._nodes):
            if isinstance(node, TagNode):
                _add_classes(node, value(index, node.attributes.get("class", "")))
        return self

    if isinstance(value, str):
        for node in _tag_nodes(self):
            _add_classes(node, value)
    return self


def _add_classes(node: TagNode, value: Optional[str]):
    if not value:
        return
    classes = _split_names(node.attributes.get("class"))
    for class_name in _split_names(value):
        if class_name not in classes:
            classes.append(class_name)
    node.attributes["class"] = " ".join(classes)


def remove_class(
    self: Selection,
    name: Optional[str | Callable[[int, str], Optional[str]]] = None,
) -> Selection:
    """
    Removes the space-separated class names from all tag nodes, all classes are
    removed when no name is given. A callable gets each node's index and current
    classes and returns the ones to remove.
    """
    if callable(name):
        for index, node in enumerate(self._nodes):
            if isinstance(node, TagNode):
                _remove_classes(node, name(index, node.attributes.get("class", "")))
        return self

    for node in _tag_nodes(self):
        if name is None:
            node.attributes["class"] = ""
        else:
            _remove_classes(node, name)
    return self


def _remove_classes(node: TagNode, value: Optional[str]):
    names = _split_names(value)
    classes = _split_names(node.attributes.get("class"))
    remaining = [c for c in classes if c not in names]
    if len(remaining) != len(classes):
        node.attributes["class"] = " ".join(remaining)


def toggle_class(
    self: Selection,
    value: str | Callable[[int, str, Optional[bool]], Optional[str]],
    state: Optional[bool] = None,
) -> Selection:
    """
    Adds the space-separated class names to the tag nodes that don't have them and
    removes them from those that have. With a ``state`` of :obj:`True` names are only
    added, with :obj:`False` they're only removed.
    """
    if callable(value):
        for index, node in enumerate(self._nodes):
            if isinstance(node, TagNode):
                _toggle_classes(
                    node, value(index, node.attributes.get("class", ""), state), state
                )
        return self

    if isinstance(value, str):
        for node in _tag_nodes(self):
            _toggle_classes(node, value, state)
    return self


def _toggle_classes(node: TagNode, value: Optional[str], state: Optional[bool]):
    if not value:
        return
    classes = _split_names(node.attributes.get("class"))
    for class_name in _split_names(value):
        if class_name not in classes:
            if state is not False:
                classes.append(class_name)
        elif state is not True:
            classes.remove(class_name)
    node.attributes["class"] = " ".join(classes)


__all__ = (
    add_class.__name__,
    attr.__name__,
    data.__name__,
    has_class.__name__,
    prop.__name__,
    remove_attr.__name__,
    remove_class.__name__,
    toggle_class.__name__,
    val.__name__,
)
