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

import re
from typing import TYPE_CHECKING, Final
from urllib.parse import urlencode

from _selectree import pseudo_classes
from _selectree.nodes import NodeBase, TagNode
from _selectree.selectors import filter_nodes, select

if TYPE_CHECKING:
    from _selectree.selection import Selection


SUBMITTABLE_SELECTOR: Final = "input, select, textarea, keygen"
UNSUCCESSFUL_CONTROLS: Final = (
    pseudo_classes.button,
    pseudo_classes.file,
    pseudo_classes.image,
    pseudo_classes.reset,
    pseudo_classes.submit,
)

_line_break_pattern: Final = re.compile(r"\r?\n")


def _is_successful(node: TagNode) -> bool:
    if not node.attributes.get("name"):
        return False
    if not pseudo_classes.enabled(node):
        return False
    if any(test(node) for test in UNSUCCESSFUL_CONTROLS):
        return False
    return "checked" in node.attributes or not (
        pseudo_classes.checkbox(node) or pseudo_classes.radio(node)
    )


def _normalize_line_breaks(value: str) -> str:
    return _line_break_pattern.sub("\r\n", value)


def serialize(self: Selection) -> str:
    """
    Encodes the successful controls of the selected forms and form controls as a
    query string with ``+`` for spaces.
    """
    return urlencode(
        [(d["name"], d["value"]) for d in self.serialize_array()],  # type: ignore
        safe="!'()*",
    )


def serialize_array(self: Selection) -> list[dict[str, str]]:
    """
    Returns the names and values of the successful controls of the selected forms and
    form controls, e.g. ``[{"name": "fruit", "value": "Apple"}]``. Controls that
    allow multiple values yield an entry per value.
    """
    controls: list[NodeBase] = []
    for node in self._nodes:
        if isinstance(node, TagNode) and node.name == "form":
            controls.extend(select(SUBMITTABLE_SELECTOR, (node,), self.options))
        else:
            controls.extend(filter_nodes((node,), SUBMITTABLE_SELECTOR, self.options))

    result = []
    for control in controls:
        assert isinstance(control, TagNode)
        if not _is_successful(control):
            continue

        name = control.attributes["name"]
        value = self._make(control).val()  # type: ignore
        if value is None:
            value = ""

        if isinstance(value, list):
            result.extend(
                {"name": name, "value": _normalize_line_breaks(v)} for v in value
            )
        else:
            result.append({"name": name, "value": _normalize_line_breaks(value)})

    return result


__all__ = (
    serialize.__name__,
    serialize_array.__name__,
)
