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

from __future__ import annotations

import warnings
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Optional

from _selectree.nodes import TagNode
from _selectree.utils import UNSET

if TYPE_CHECKING:
    from _selectree.selection import Selection


def _parse_style(style: Optional[str]) -> dict[str, str]:
    """
    Parses declarations from a ``style`` attribute. Fragments without a property name
    are considered part of the preceding value, e.g. for ``data:`` URLs.

    >>> _parse_style("color: red; background: url(data:image/png;base64,AA)")
    {'color': 'red', 'background': 'url(data:image/png;base64,AA)'}
    """
    style = (style or "").strip()
    if not style:
        return {}

    result: dict[str, str] = {}
    key: Optional[str] = None

    for declaration in style.split(";"):
        colon = declaration.find(":")
        if colon < 1 or colon == len(declaration) - 1:
            if not (trimmed := declaration.rstrip()):
                continue
            if key is None:
                warnings.warn(
                    f"Ignoring a malformed style declaration: {trimmed!r}",
                    category=UserWarning,
                )
            else:
                result[key] += f";{trimmed}"
        else:
            key = declaration[:colon].strip()
            result[key] = declaration[colon + 1 :].strip()

    return result


def _serialize_style(declarations: Mapping[str, str]) -> str:
    return " ".join(f"{k}: {v};" for k, v in declarations.items())


def _get_css(node: Any, prop: Optional[str | Sequence[str]]) -> Any:
    if not isinstance(node, TagNode):
        return None

    declarations = _parse_style(node.attributes.get("style"))
    if isinstance(prop, str):
        return declarations.get(prop)
    if prop is not None:
        return {p: declarations[p] for p in prop if p in declarations}
    return declarations


def _set_css(node: TagNode, prop: str, value: Any, index: int):
    declarations = _parse_style(node.attributes.get("style"))
    if callable(value):
        value = value(index, declarations.get(prop))

    if value == "":
        declarations.pop(prop, None)
    elif value is not None:
        declarations[prop] = str(value)

    node.attributes["style"] = _serialize_style(declarations)


def css(
    self: Selection,
    prop: Optional[str | Sequence[str] | Mapping[str, Any]] = None,
    value: Any = UNSET,
) -> Any:
    """
    Gets or sets style declarations.

    As getter, the declarations of the first node are returned: a value for a
    property name, a mapping for a list of names or all of them when no name is
    given.

    As setter, a property is set to the value on all tag nodes. The value can be a
    callable that gets a node's index and the current value and returns the new one.
    A mapping of properties to values can be passed to set multiple at once. An
    empty string as value removes a declaration.
    """
    if isinstance(prop, Mapping):
        for node in self._nodes:
            if isinstance(node, TagNode):
                for index, (key, _value) in enumerate(prop.items()):
                    _set_css(node, key, _value, index)
        return self

    if isinstance(prop, str) and value is not UNSET and value is not None:
        for index, node in enumerate(self._nodes):
            if isinstance(node, TagNode):
                _set_css(node, prop, value, index)
        return self

    if not self._nodes:
        return None
    return _get_css(self._nodes[0], prop)


__all__ = (css.__name__,)
