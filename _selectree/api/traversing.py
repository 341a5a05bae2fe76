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
Operations to navigate from the selected nodes to related ones and to narrow down
or extend selections. All of them return new selections that refer to the one they
were derived from as :attr:`Selection.previous`.

Where a *match* is accepted, it can be a CSS selector, a node, a selection or a
callable that gets a node's index and the node and returns a boolean.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from typing import TYPE_CHECKING, Any, Optional

from _selectree.filters import is_tag_node
from _selectree.nodes import NodeBase, TagNode, _ParentNode
from _selectree.selectors import filter_nodes, matches, select
from _selectree.static import contains
from _selectree.utils import _sort_nodes_in_document_order, is_selection

if TYPE_CHECKING:
    from _selectree.options import Options
    from _selectree.selection import Selection


Match = Any
PostProcessor = Callable[[list], list]
Step = Callable[[NodeBase], Optional[NodeBase]]


# helpers


def _filter_function(match: Match) -> Callable[[NodeBase, int], bool]:
    if is_selection(match):
        return lambda node, index: node in match
    if isinstance(match, NodeBase):
        return lambda node, index: node is match
    if callable(match):
        return lambda node, index: bool(match(index, node))
    raise TypeError(f"Unsupported type to match nodes: {type(match)}")


def _filter_array(nodes: Sequence[Any], match: Match, options: Options) -> list[Any]:
    if isinstance(match, str):
        return filter_nodes(nodes, match, options)
    test = _filter_function(match)
    return [n for i, n in enumerate(nodes) if test(n, i)]


def _reverse(nodes: list) -> list:
    nodes.reverse()
    return nodes


def _collect(
    selection: Selection,
    function: Callable[[NodeBase], Iterable[NodeBase]],
    selector: Match,
    *post_processors: PostProcessor,
) -> Selection:
    matched = [m for n in selection._nodes for m in function(n)]
    if selector is not None and selector != "":
        matched = _filter_array(matched, selector, selection.options)
    if len(selection._nodes) > 1 and len(matched) > 1:
        for post_processor in post_processors:
            matched = post_processor(matched)
    return selection._make(matched)


def _collect_until(
    selection: Selection,
    step: Step,
    until: Match,
    selector: Match,
    *post_processors: PostProcessor,
) -> Selection:
    stop: Optional[Callable[[NodeBase, int], bool]]
    if isinstance(until, str):
        options = selection.options
        stop = lambda node, index: matches(node, until, options)  # noqa: E731
    elif until is not None:
        stop = _filter_function(until)
    else:
        stop = None

    def function(node: NodeBase) -> list[NodeBase]:
        result: list[NodeBase] = []
        while (node := step(node)) is not None:  # type: ignore
            if stop is not None and stop(node, len(result)):
                break
            result.append(node)
        return result

    return _collect(selection, function, selector, *post_processors)


def _next_tag_sibling(node: NodeBase) -> Optional[NodeBase]:
    return node.fetch_following_sibling(is_tag_node)


def _parent_tag(node: NodeBase) -> Optional[NodeBase]:
    return node.parent


def _previous_tag_sibling(node: NodeBase) -> Optional[NodeBase]:
    return node.fetch_preceding_sibling(is_tag_node)


def _single(step: Step) -> Callable[[NodeBase], list[NodeBase]]:
    def function(node: NodeBase) -> list[NodeBase]:
        result = step(node)
        return [] if result is None else [result]

    return function


# operations


def add(self: Selection, other: Any, context: Any = None) -> Selection:
    """
    Returns a selection with the nodes of this one and the other nodes, which are
    resolved like the arguments of :meth:`Selection._make`, in document order.
    """
    selection = self._make(other, context)
    return self._make(_sort_nodes_in_document_order([*self._nodes, *selection._nodes]))


def add_back(self: Selection, selector: Optional[str] = None) -> Selection:
    """
    Adds the nodes of the :attr:`Selection.previous` selection, optionally filtered by
    a selector, to this one's.
    """
    if self.previous is None:
        return self
    return self.add(
        self.previous.filter(selector) if selector else self.previous  # type: ignore
    )


def children(self: Selection, selector: Match = None) -> Selection:
    """Gets the tag nodes that are children of the selected nodes."""
    return _collect(
        self,
        lambda n: n.iterate_children(is_tag_node),
        selector,
        _sort_nodes_in_document_order,
    )


def closest(self: Selection, selector: Match = None) -> Selection:
    """
    Gets the first tag node that matches, testing each selected node itself and then
    its ancestors.
    """
    result: list[NodeBase] = []
    if not selector:
        return self._make(result)

    if isinstance(selector, str):
        options = self.options
        test = lambda node, index: matches(node, selector, options)  # noqa: E731
    else:
        test = _filter_function(selector)

    for node in self._nodes:
        cursor: Optional[NodeBase] = (
            node if isinstance(node, _ParentNode) else node.parent
        )
        while isinstance(cursor, TagNode):
            if test(cursor, 0):
                if not any(cursor is n for n in result):
                    result.append(cursor)
                break
            cursor = cursor.parent

    return self._make(result)


def contents(self: Selection) -> Selection:
    """Gets all child nodes of the selected nodes, including text and comments."""
    result: list[NodeBase] = []
    for node in self._nodes:
        if isinstance(node, _ParentNode):
            result.extend(node.iterate_children())
    return self._make(result)


def each(self: Selection, function: Callable[[int, NodeBase], Any]) -> Selection:
    """
    Calls the function with the index and the node for each selected node. The
    iteration stops when the function returns :obj:`False`.
    """
    for index, node in enumerate(self._nodes):
        if function(index, node) is False:
            break
    return self


def end(self: Selection) -> Selection:
    """Returns the selection this one was derived from or an empty one."""
    if self.previous is None:
        return self._make([])
    return self.previous


def eq(self: Selection, index: int) -> Selection:
    """Reduces the selection to the node at the index, negative values count back."""
    if index == 0 and len(self._nodes) <= 1:
        return self
    if index < 0:
        index += len(self._nodes)
    if 0 <= index < len(self._nodes):
        return self._make(self._nodes[index])
    return self._make([])


def filter(self: Selection, match: Match) -> Selection:
    """Reduces the selection to the nodes that match."""
    return self._make(_filter_array(self._nodes, match, self.options))


def find(self: Selection, selector_or_haystack: Match = None) -> Selection:
    """
    Gets the descendant tag nodes of the selected nodes that match the selector. With
    a node or a selection, those nodes that are descendants are selected.
    """
    if not selector_or_haystack:
        return self._make([])

    if isinstance(selector_or_haystack, str):
        return self._make(select(selector_or_haystack, self._nodes, self.options))

    haystack = (
        selector_or_haystack._nodes
        if is_selection(selector_or_haystack)
        else [selector_or_haystack]
    )
    return self._make(
        [n for n in haystack if any(contains(c, n) for c in self._nodes)]
    )


def first(self: Selection) -> Selection:
    return self._make(self._nodes[0]) if len(self._nodes) > 1 else self


def get(self: Selection, index: Optional[int] = None) -> Any:
    """
    Returns the node at the index or :obj:`None` if there's none. Without an index,
    all nodes are returned as list.
    """
    if index is None:
        return list(self._nodes)
    if index < 0:
        index += len(self._nodes)
    if 0 <= index < len(self._nodes):
        return self._nodes[index]
    return None


def has(self: Selection, selector_or_haystack: Match) -> Selection:
    """
    Reduces the selection to the nodes that have a descendant that matches the
    selector, resp. is contained in the given nodes.
    """
    options = self.options

    if isinstance(selector_or_haystack, str):
        return self._make(
            [
                n
                for n in self._nodes
                if select(selector_or_haystack, (n,), options)
            ]
        )

    haystack = (
        selector_or_haystack._nodes
        if is_selection(selector_or_haystack)
        else [selector_or_haystack]
    )
    return self._make(
        [n for n in self._nodes if any(contains(n, h) for h in haystack)]
    )


def index(self: Selection, selector_or_needle: Match = None) -> int:
    """
    Without argument, the position of the first node among its tag siblings is
    returned. With a selector, the position of the first node among the matching
    nodes in the document. With a node or a selection, the position of that,
    resp. its first node, in this selection. When nothing is found, ``-1`` is
    returned.
    """
    if selector_or_needle is None:
        haystack = parent(self).children()._nodes
        needle = self._nodes[0] if self._nodes else None
    elif isinstance(selector_or_needle, str):
        haystack = self._make(selector_or_needle)._nodes
        needle = self._nodes[0] if self._nodes else None
    else:
        haystack = self._nodes
        needle = (
            (selector_or_needle._nodes or [None])[0]
            if is_selection(selector_or_needle)
            else selector_or_needle
        )

    for position, node in enumerate(haystack):
        if node is needle:
            return position
    return -1


def is_(self: Selection, selector: Match) -> bool:
    """Tests whether any of the selected nodes matches."""
    if isinstance(selector, str):
        return bool(filter_nodes(self._nodes, selector, self.options))
    if not selector:
        return False
    test = _filter_function(selector)
    return any(test(n, i) for i, n in enumerate(self._nodes))


def last(self: Selection) -> Selection:
    return self._make(self._nodes[-1]) if len(self._nodes) > 1 else self


def map(self: Selection, function: Callable[[int, NodeBase], Any]) -> Selection:
    """
    Returns a selection of the values that the function returns for each node's index
    and the node. Iterables, but strings, are flattened and :obj:`None` is skipped.
    """
    result: list[Any] = []
    for index, node in enumerate(self._nodes):
        value = function(index, node)
        if value is None:
            continue
        if isinstance(value, Iterable) and not isinstance(value, (str, NodeBase)):
            result.extend(value)
        else:
            result.append(value)
    return self._make(result)


def next(self: Selection, selector: Match = None) -> Selection:
    """Gets the following tag sibling of each node."""
    return _collect(self, _single(_next_tag_sibling), selector)


def next_all(self: Selection, selector: Match = None) -> Selection:
    """Gets all following tag siblings of the nodes."""
    return _collect(
        self,
        lambda n: n.iterate_following_siblings(is_tag_node),
        selector,
        _sort_nodes_in_document_order,
    )


def next_until(
    self: Selection, until: Match = None, selector: Match = None
) -> Selection:
    """Gets the following tag siblings of the nodes up to one that matches ``until``."""
    return _collect_until(
        self, _next_tag_sibling, until, selector, _sort_nodes_in_document_order
    )


def not_(self: Selection, match: Match) -> Selection:
    """Removes the nodes that match from the selection."""
    if isinstance(match, str):
        matched = filter_nodes(self._nodes, match, self.options)
        return self._make(
            [n for n in self._nodes if not any(n is m for m in matched)]
        )

    test = _filter_function(match)
    return self._make([n for i, n in enumerate(self._nodes) if not test(n, i)])


def parent(self: Selection, selector: Match = None) -> Selection:
    """Gets the parent tag node of each node."""
    return _collect(
        self, _single(_parent_tag), selector, _sort_nodes_in_document_order
    )


def parents(self: Selection, selector: Match = None) -> Selection:
    """Gets the ancestor tag nodes of the nodes, the closest ones first."""
    return _collect(
        self,
        lambda n: n.iterate_ancestors(),
        selector,
        _sort_nodes_in_document_order,
        _reverse,
    )


def parents_until(
    self: Selection, until: Match = None, selector: Match = None
) -> Selection:
    """Gets the ancestor tag nodes of the nodes up to one that matches ``until``."""
    return _collect_until(
        self, _parent_tag, until, selector, _sort_nodes_in_document_order, _reverse
    )


def prev(self: Selection, selector: Match = None) -> Selection:
    """Gets the preceding tag sibling of each node."""
    return _collect(self, _single(_previous_tag_sibling), selector)


def prev_all(self: Selection, selector: Match = None) -> Selection:
    """
    Gets all preceding tag siblings of the nodes. For a single node these are
    ordered from the closest to the farthest.
    """
    return _collect(
        self,
        lambda n: n.iterate_preceding_siblings(is_tag_node),
        selector,
        _sort_nodes_in_document_order,
    )


def prev_until(
    self: Selection, until: Match = None, selector: Match = None
) -> Selection:
    """Gets the preceding tag siblings of the nodes up to one that matches ``until``."""
    return _collect_until(
        self, _previous_tag_sibling, until, selector, _sort_nodes_in_document_order
    )


def siblings(self: Selection, selector: Match = None) -> Selection:
    """Gets the tag siblings of the nodes, excluding these."""

    def function(node: NodeBase) -> list[NodeBase]:
        if node._parent is None:
            return []
        return [
            n for n in node._parent.iterate_children(is_tag_node) if n is not node
        ]

    return _collect(self, function, selector, _sort_nodes_in_document_order)


def slice(self: Selection, start: Optional[int] = None, end: Optional[int] = None):
    """Returns a selection of the nodes within the given bounds."""
    return self._make(self._nodes[start:end])


def to_list(self: Selection) -> list[Any]:
    """Returns the selected nodes as list."""
    return list(self._nodes)


__all__ = (
    add.__name__,
    add_back.__name__,
    children.__name__,
    closest.__name__,
    contents.__name__,
    each.__name__,
    end.__name__,
    eq.__name__,
    filter.__name__,
    find.__name__,
    first.__name__,
    get.__name__,
    has.__name__,
    index.__name__,
    is_.__name__,
    last.__name__,
    map.__name__,
    next.__name__,
    next_all.__name__,
    next_until.__name__,
    not_.__name__,
    parent.__name__,
    parents.__name__,
    parents_until.__name__,
    prev.__name__,
    prev_all.__name__,
    prev_until.__name__,
    siblings.__name__,
    slice.__name__,
    to_list.__name__,
)
