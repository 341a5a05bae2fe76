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
from collections.abc import Iterable
from typing import Any, Final

from _selectree.nodes import NodeBase


_camel_case_pattern: Final = re.compile(r"[_.-](\w|$)")
_upper_case_pattern: Final = re.compile(r"[A-Z]")

SELECTION_SIGNATURE: Final = "[selectree selection]"


class _Unset:
    """The type of :obj:`UNSET` that marks omitted arguments where :obj:`None` is a
    meaningful value."""

    __slots__ = ()

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Final = _Unset()


def camel_case(name: str) -> str:
    """
    >>> camel_case("foo-bar_baz")
    'fooBarBaz'
    """
    return _camel_case_pattern.sub(lambda m: m.group(1).upper(), name)


def css_case(name: str) -> str:
    """
    >>> css_case("fooBar")
    'foo-bar'
    """
    return _upper_case_pattern.sub(lambda m: "-" + m.group(0).lower(), name)


def is_html(text: str) -> bool:
    """
    Tests whether a string looks like markup rather than like a selector, that is it
    contains a ``<`` followed by a letter or ``!`` and a subsequent ``>``.

    >>> is_html("<li>Apple</li>")
    True
    >>> is_html("ul > li")
    False
    """
    tag_start = text.find("<")
    if tag_start < 0 or tag_start > len(text) - 3:
        return False
    tag_char = text[tag_start + 1]
    return (
        ("a" <= tag_char <= "z" or "A" <= tag_char <= "Z" or tag_char == "!")
        and text.find(">", tag_start + 2) != -1
    )


def is_selection(obj: Any) -> bool:
    """
    Tests whether an object is a selection by its signature, this also holds for
    instances of selection classes that aren't derived from :class:`Selection`.
    """
    return getattr(obj, "signature", None) == SELECTION_SIGNATURE


def _index_path(node: NodeBase, cache: dict[int, int]) -> tuple[NodeBase, list[int]]:
    path: list[int] = []
    cursor = node
    while (parent := cursor._parent) is not None:
        if (node_id := id(cursor)) in cache:
            index = cache[node_id]
        else:
            cache[node_id] = index = parent._child_nodes.index(cursor)
        path.append(index)
        cursor = parent
    path.reverse()
    return cursor, path


def _sort_nodes_in_document_order(nodes: Iterable[NodeBase]) -> list[NodeBase]:
    """
    Returns the given nodes in document order with duplicates removed. Nodes from
    different trees are grouped by their trees in the order of their first appearance.
    """
    index_cache: dict[int, int] = {}
    seen: set[int] = set()
    tree_order: dict[int, int] = {}
    keyed: list[tuple[int, list[int], NodeBase]] = []

    for node in nodes:
        if (node_id := id(node)) in seen:
            continue
        seen.add(node_id)
        root, path = _index_path(node, index_cache)
        tree_index = tree_order.setdefault(id(root), len(tree_order))
        keyed.append((tree_index, path, node))

    keyed.sort(key=lambda x: (x[0], x[1]))
    return [x[2] for x in keyed]


__all__: tuple[str, ...] = (
    camel_case.__name__,
    css_case.__name__,
    is_html.__name__,
    is_selection.__name__,
)
