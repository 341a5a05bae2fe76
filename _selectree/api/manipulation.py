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
Operations that alter the trees that the selected nodes belong to. The changes are
visible through all selections that refer to the affected nodes.

*Content* can be given as markup, nodes, selections or iterables of these. Where a
callable is accepted, it's called with a node's index and its rendered contents,
resp. the node, and returns the content. When content is inserted at multiple
positions, copies are used for all but the last position, where given nodes are
moved to.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any, Optional

from _selectree.nodes import DocumentNode, NodeBase, TagNode, TextNode, _ParentNode
from _selectree.static import text as _text
from _selectree.utils import UNSET, is_html, is_selection

if TYPE_CHECKING:
    from _selectree.selection import Selection


Content = Any


# helpers


def _make_dom_array(
    selection: Selection,
    content: Content,
    clone: bool = False,
    context: Optional[_ParentNode] = None,
) -> list[NodeBase]:
    """Resolves content to a flat list of nodes."""
    if content is None:
        return []

    if is_selection(content):
        nodes = list(content._nodes)
    elif isinstance(content, str):
        document = selection._parse(content, selection.options, False, context)
        return list(document.child_nodes)
    elif isinstance(content, DocumentNode):
        nodes = list(content.child_nodes)
    elif isinstance(content, NodeBase):
        nodes = [content]
    elif isinstance(content, Iterable):
        return [
            n for c in content for n in _make_dom_array(selection, c, clone, context)
        ]
    else:
        raise TypeError(f"Unsupported content type: {type(content)}")

    if clone:
        return [n.clone(deep=True) for n in nodes]
    return nodes


def _unique_splice(
    parent: _ParentNode, index: int, delete_count: int, nodes: list[NodeBase]
) -> list[NodeBase]:
    """
    Replaces ``delete_count`` children of ``parent`` from ``index`` on with the given
    nodes. These are detached from their current positions beforehand. The replaced
    nodes are returned.
    """
    siblings = parent._child_nodes
    removed = list(siblings[index : index + delete_count])

    anchor: Optional[NodeBase] = None
    for candidate in siblings[index + delete_count :]:
        if not any(candidate is n for n in nodes):
            anchor = candidate
            break

    for node in nodes:
        node.detach()
    for node in removed:
        node.detach()

    if anchor is None:
        parent.append_children(*nodes)
    else:
        anchor.add_preceding_siblings(*nodes)

    return removed


def _replace_children(parent: _ParentNode, nodes: Iterable[NodeBase]):
    nodes = list(nodes)
    parent._child_nodes.clear()
    for node in nodes:
        node.detach()
    parent.append_children(*nodes)


def _insert(
    selection: Selection, content: tuple[Content, ...], at_start: bool
) -> Selection:
    last_index = len(selection._nodes) - 1
    for index, node in enumerate(selection._nodes):
        if not isinstance(node, _ParentNode):
            continue

        if content and callable(content[0]) and not is_selection(content[0]):
            source = content[0](index, selection._render(node.child_nodes))
        else:
            source = content

        nodes = _make_dom_array(selection, source, index < last_index)
        _unique_splice(
            node, 0 if at_start else len(node._child_nodes), 0, nodes  # type: ignore
        )

    return selection


def _insert_beside(
    selection: Selection, content: tuple[Content, ...], after: bool
) -> Selection:
    last_index = len(selection._nodes) - 1
    for index, node in enumerate(selection._nodes):
        if (parent := node._parent) is None:
            continue

        if content and callable(content[0]) and not is_selection(content[0]):
            source = content[0](
                index,
                selection._render(
                    node.child_nodes if isinstance(node, _ParentNode) else []
                ),
            )
        else:
            source = content

        nodes = _make_dom_array(selection, source, index < last_index)
        _unique_splice(parent, node.index + after, 0, nodes)  # type: ignore

    return selection


def _insert_self(selection: Selection, target: Any, after: bool) -> Selection:
    if isinstance(target, str):
        target = selection._make(target)

    remove(selection)

    clones: list[NodeBase] = []
    for node in _make_dom_array(selection, target):
        if (parent := node._parent) is None:
            continue
        cloned_self = clone(selection)._nodes
        _unique_splice(parent, node.index + after, 0, cloned_self)  # type: ignore
        clones.extend(cloned_self)

    return selection._make(clones)


def _innermost_tag(node: _ParentNode) -> _ParentNode:
    """Follows the first tag children down to the deepest one."""
    while (
        child := next(
            (n for n in node.iterate_children() if isinstance(n, TagNode)), None
        )
    ) is not None:
        node = child
    return node


def _wrap(
    selection: Selection,
    wrapper: Content,
    insert: Callable[[NodeBase, _ParentNode, TagNode], None],
) -> Selection:
    last_index = len(selection._nodes) - 1
    top_most = None

    for index, node in enumerate(selection._nodes):
        if callable(wrapper) and not is_selection(wrapper):
            source = wrapper(index, node)
        elif isinstance(wrapper, str) and not is_html(wrapper):
            if top_most is None:
                top_most = selection.parents().last()  # type: ignore
            source = top_most.find(wrapper).clone()
        else:
            source = wrapper

        dom = _make_dom_array(selection, source, index < last_index)
        if not dom or not isinstance(dom[0], TagNode):
            continue

        wrapper_node = dom[0]
        insert(node, _innermost_tag(wrapper_node), wrapper_node)

    return selection


def _wrap_outer(node: NodeBase, location: _ParentNode, wrapper_node: TagNode):
    if (parent := node._parent) is None:
        return
    index = node.index
    assert index is not None
    _replace_children(location, [node])
    _unique_splice(parent, index, 0, [wrapper_node])


def _wrap_inner(node: NodeBase, location: _ParentNode, wrapper_node: TagNode):
    if not isinstance(node, _ParentNode):
        return
    _replace_children(location, node.child_nodes)
    _replace_children(node, [wrapper_node])


# operations


def after(self: Selection, *content: Content) -> Selection:
    """Inserts content after each node."""
    return _insert_beside(self, content, after=True)


def append(self: Selection, *content: Content) -> Selection:
    """Inserts content as last children of each node."""
    return _insert(self, content, at_start=False)


def append_to(self: Selection, target: Any) -> Selection:
    """Inserts the selected nodes as last children of the target's nodes."""
    target = target if is_selection(target) else self._make(target)
    target.append(self)
    return self


def before(self: Selection, *content: Content) -> Selection:
    """Inserts content before each node."""
    return _insert_beside(self, content, after=False)


def clone(self: Selection) -> Selection:
    """
    Returns a selection of deep copies of the nodes. The copies are children of a new
    document node.
    """
    clones = [n.clone(deep=True) for n in self._nodes]
    DocumentNode(children=(n for n in clones if not isinstance(n, DocumentNode)))
    return self._make(clones)


def empty(self: Selection) -> Selection:
    """Removes all child nodes of the selected nodes."""
    for node in self._nodes:
        if isinstance(node, _ParentNode):
            node._child_nodes.clear()
    return self


def html(self: Selection, content: Any = UNSET) -> Any:
    """
    Without argument, the rendered contents of the first node are returned, or
    :obj:`None` if it has none. Otherwise the contents of all nodes are replaced with
    the given markup or the nodes of a selection.
    """
    if content is UNSET:
        node = self._nodes[0] if self._nodes else None
        if not isinstance(node, _ParentNode):
            return None
        return self._render(node.child_nodes)

    for node in self._nodes:
        if not isinstance(node, _ParentNode):
            continue
        node._child_nodes.clear()
        if is_selection(content):
            nodes = list(content._nodes)
        else:
            nodes = list(
                self._parse(str(content), self.options, False, node).child_nodes
            )
        _replace_children(node, nodes)

    return self


def insert_after(self: Selection, target: Any) -> Selection:
    """
    Moves copies of the selected nodes after each of the target's nodes, the selected
    ones are removed. A selection of the inserted copies is returned.
    """
    return _insert_self(self, target, after=True)


def insert_before(self: Selection, target: Any) -> Selection:
    """
    Moves copies of the selected nodes before each of the target's nodes, the
    selected ones are removed. A selection of the inserted copies is returned.
    """
    return _insert_self(self, target, after=False)


def prepend(self: Selection, *content: Content) -> Selection:
    """Inserts content as first children of each node."""
    return _insert(self, content, at_start=True)


def prepend_to(self: Selection, target: Any) -> Selection:
    """Inserts the selected nodes as first children of the target's nodes."""
    target = target if is_selection(target) else self._make(target)
    target.prepend(self)
    return self


def remove(self: Selection, selector: Optional[str] = None) -> Selection:
    """Detaches the nodes, optionally only those that match the selector."""
    nodes = self.filter(selector)._nodes if selector else self._nodes  # type: ignore
    for node in nodes:
        node.detach()
    return self


def replace_with(self: Selection, content: Content) -> Selection:
    """
    Replaces each node with the content. A callable gets each node's index and the
    node. Nodes are moved and not copied.
    """
    for index, node in enumerate(self._nodes):
        if (parent := node._parent) is None:
            continue

        source = (
            content(index, node)
            if callable(content) and not is_selection(content)
            else content
        )
        nodes = _make_dom_array(self, source)
        position = node.index
        assert position is not None
        _unique_splice(parent, position, 1, nodes)

    return self


def text(self: Selection, content: Any = UNSET) -> Any:
    """
    Without argument, the concatenated text contents of all nodes are returned.
    Otherwise the contents of all nodes are replaced with a text node. A callable
    gets each node's index and text contents.
    """
    if content is UNSET:
        return _text(self._nodes)

    for index, node in enumerate(self._nodes):
        if not isinstance(node, _ParentNode):
            continue
        value = content(index, node.full_text) if callable(content) else content
        _replace_children(node, [TextNode(str(value))])

    return self


def unwrap(self: Selection, selector: Optional[str] = None) -> Selection:
    """
    Replaces the parents of the nodes with their contents, optionally only those that
    match the selector. ``body`` elements are kept.
    """
    for parent in self.parent(selector).not_("body"):  # type: ignore
        self._make(parent).replace_with(parent.child_nodes)
    return self


def wrap(self: Selection, wrapper: Content) -> Selection:
    """
    Wraps each node into a copy of the wrapper. The node is placed into the innermost
    first tag node of the wrapper. A selector is evaluated in the document. A
    callable gets each node's index and the node.
    """
    return _wrap(self, wrapper, _wrap_outer)


def wrap_all(self: Selection, wrapper: Content) -> Selection:
    """Wraps all nodes into one copy of the wrapper that is placed before the first."""
    if not self._nodes:
        return self

    first_node = self._nodes[0]
    source = (
        wrapper(0, first_node)
        if callable(wrapper) and not is_selection(wrapper)
        else wrapper
    )
    inserted = insert_before(self._make(source), first_node)

    location: Optional[_ParentNode] = None
    for node in inserted._nodes:
        if isinstance(node, TagNode):
            location = node
    if location is not None:
        append(self._make(_innermost_tag(location)), self)

    return self


def wrap_inner(self: Selection, wrapper: Content) -> Selection:
    """Wraps the contents of each node into a copy of the wrapper."""
    return _wrap(self, wrapper, _wrap_inner)


__all__ = (
    after.__name__,
    append.__name__,
    append_to.__name__,
    before.__name__,
    clone.__name__,
    empty.__name__,
    html.__name__,
    insert_after.__name__,
    insert_before.__name__,
    prepend.__name__,
    prepend_to.__name__,
    remove.__name__,
    replace_with.__name__,
    text.__name__,
    unwrap.__name__,
    wrap.__name__,
    wrap_all.__name__,
    wrap_inner.__name__,
)
