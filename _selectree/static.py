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

"""Helpers that don't operate on a selection."""

from __future__ import annotations

from collections.abc import Iterable, MutableSequence
from typing import TYPE_CHECKING, Any

from _selectree.nodes import NodeBase
from _selectree.utils import is_selection

if TYPE_CHECKING:
    from _selectree.selection import Selection


def contains(container: NodeBase, contained: NodeBase) -> bool:
    """
    Tests whether a node is a descendant of another one. A node doesn't contain
    itself.
    """
    if contained is container:
        return False
    return any(
        n is container for n in contained._iterate_ancestors(_include_document_node=True)
    )


def merge(
    first: MutableSequence[Any] | Selection, second: Iterable[Any]
) -> MutableSequence[Any] | Selection:
    """
    Appends the items of the second argument to the first one, which is a list or a
    selection that gets altered, and returns that.
    """
    if is_selection(first):
        first._nodes.extend(second)  # type: ignore
    elif isinstance(first, MutableSequence):
        first.extend(second)
    else:
        raise TypeError("The first argument must be a list or a selection.")
    return first


def text(nodes: Iterable[NodeBase]) -> str:
    """
    Concatenates the text contents of the given nodes and their descendants. Comments
    are not considered.
    """
    return "".join(n.full_text for n in nodes if isinstance(n, NodeBase))


__all__ = (
    contains.__name__,
    merge.__name__,
    text.__name__,
)
