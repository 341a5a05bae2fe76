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
The node tree that selections point into. Parent nodes own their children through a
:class:`Siblings` container, the ``_parent`` attribute of a node is merely a
back-reference. A node can only be added to a tree when it's detached, hence moving
nodes between positions is always an explicit :meth:`NodeBase.detach` followed by an
insertion.

Nodes are compared by identity. Selections that reference the same node objects see
each other's mutations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator, Mapping
from typing import TYPE_CHECKING, Any, Final, Optional, overload

from _selectree.exceptions import InvalidOperation

if TYPE_CHECKING:
    from _selectree.options import Options
    from _selectree.typing import Filter, NodeSource


class Siblings:
    """
    Container for the sisterhood of nodes.
    Everyone's taken care of.
    """

    __slots__ = (
        "__belongs_to",
        "__data",
    )

    def __init__(
        self,
        belongs_to: Optional[_ParentNode],
        nodes: Optional[Iterable[NodeSource]],
    ):
        self.__data: Final[list[NodeBase]] = []
        self.__belongs_to: Final = belongs_to
        if nodes is not None:
            for node in nodes:
                self.__data.append(self._handle_new_sibling(node))

    @overload
    def __getitem__(self, index: int) -> NodeBase:
        pass

    @overload
    def __getitem__(self, index: slice) -> list[NodeBase]:
        pass

    def __getitem__(self, index: int | slice) -> NodeBase | list[NodeBase]:
        if not isinstance(index, (int, slice)):
            raise TypeError

        return self.__data[index]

    def __iter__(self) -> Iterator[NodeBase]:
        return iter(self.__data)

    def __len__(self) -> int:
        return len(self.__data)

    def append(self, node: NodeSource) -> NodeBase:
        result = self._handle_new_sibling(node)
        self.__data.append(result)
        return result

    def clear(self):
        for node in self.__data:
            node._parent = None
        self.__data.clear()

    def index(self, node: NodeBase) -> int:
        for result, n in enumerate(self.__data):
            if n is node:
                return result
        else:
            raise IndexError

    def insert(self, index: int, node: NodeSource) -> NodeBase:
        result = self._handle_new_sibling(node)
        self.__data.insert(index, result)
        return result

    def remove(self, node: NodeBase):
        del self.__data[self.index(node)]
        node._parent = None

    def _handle_new_sibling(self, node: NodeSource) -> NodeBase:
        match node:
            case str():
                node = TextNode(node)
            case DocumentNode():
                raise InvalidOperation("A document node can't be a child node.")
            case NodeBase():
                if node._parent is not None:
                    raise InvalidOperation(
                        "Only a detached node can be added to the tree. Use "
                        ":meth:`NodeBase.clone` or :meth:`NodeBase.detach` to get one."
                    )
            case _:
                raise TypeError(
                    "Either node instances or strings must be provided as child node."
                )

        node._parent = self.__belongs_to
        return node


# nodes


class NodeBase(ABC):
    __slots__ = ("_parent",)

    _child_nodes: Siblings

    def __init__(self):
        self._parent: Optional[_ParentNode] = None

    def __copy__(self):
        return self.clone(deep=False)

    def __deepcopy__(self, memo):
        return self.clone(deep=True)

    def __str__(self) -> str:
        return self.serialize()

    def add_following_siblings(self, *node: NodeSource) -> tuple[NodeBase, ...]:
        """
        Adds one or more detached nodes to the right of the node this method is called
        on, in the given order.
        """
        if (parent := self._parent) is None:
            raise InvalidOperation("Can't add sibling to a node without parent node.")

        return parent.insert_children(parent._child_nodes.index(self) + 1, *node)

    def add_preceding_siblings(self, *node: NodeSource) -> tuple[NodeBase, ...]:
        """
        Adds one or more detached nodes to the left of the node this method is called
        on, in the given order.
        """
        if (parent := self._parent) is None:
            raise InvalidOperation("Can't add sibling to a node without parent node.")

        return parent.insert_children(parent._child_nodes.index(self), *node)

    @abstractmethod
    def clone(self, deep: bool = False) -> NodeBase:
        """
        Creates a new, detached node of the same type with duplicated contents.

        :param deep: Clones the whole subtree if :obj:`True`.
        """

    def detach(self) -> NodeBase:
        """Removes the node from its tree and returns it."""
        if (parent := self._parent) is not None:
            parent._child_nodes.remove(self)
        return self

    def fetch_following_sibling(self, *filter: Filter) -> Optional[NodeBase]:
        for node in self.iterate_following_siblings(*filter):
            return node
        return None

    def fetch_preceding_sibling(self, *filter: Filter) -> Optional[NodeBase]:
        for node in self.iterate_preceding_siblings(*filter):
            return node
        return None

    @property
    @abstractmethod
    def full_text(self) -> str:
        """The concatenated contents of all text nodes in the (sub-)tree."""

    @property
    def index(self) -> Optional[int]:
        """The node's position among all its siblings or :obj:`None`."""
        if self._parent is None:
            return None
        return self._parent._child_nodes.index(self)

    def iterate_ancestors(self, *filter: Filter) -> Iterator[TagNode]:
        """Yields the ancestor tag nodes from bottom to top."""
        for node in self._iterate_ancestors():
            if all(f(node) for f in filter):
                assert isinstance(node, TagNode)
                yield node

    def _iterate_ancestors(
        self, *, _include_document_node: bool = False
    ) -> Iterator[_ParentNode]:
        node: Optional[NodeBase] = self
        assert node is not None
        while (node := node._parent) is not None:
            if isinstance(node, DocumentNode) and not _include_document_node:
                return
            yield node

    def iterate_children(self, *filter: Filter) -> Iterator[NodeBase]:
        return
        yield from ()

    def iterate_descendants(self, *filter: Filter) -> Iterator[NodeBase]:
        return
        yield from ()

    def iterate_following_siblings(self, *filter: Filter) -> Iterator[NodeBase]:
        if self._parent is None:
            return

        siblings = self._parent._child_nodes
        for index in range(siblings.index(self) + 1, len(siblings)):
            node = siblings[index]
            if all(f(node) for f in filter):
                yield node

    def iterate_preceding_siblings(self, *filter: Filter) -> Iterator[NodeBase]:
        """Yields the preceding sibling nodes from right to left."""
        if self._parent is None:
            return

        siblings = self._parent._child_nodes
        for index in range(siblings.index(self) - 1, -1, -1):
            node = siblings[index]
            if all(f(node) for f in filter):
                yield node

    @property
    def parent(self) -> Optional[TagNode]:
        """The node's parent tag node, a document node is never returned."""
        parent = self._parent
        return parent if isinstance(parent, TagNode) else None

    def replace_with(self, *node: NodeSource) -> NodeBase:
        """
        Puts the given nodes at the position of this one, which is then detached and
        returned.
        """
        if self._parent is None:
            raise InvalidOperation("Cannot replace a node that has no parent node.")

        self.add_preceding_siblings(*node)
        return self.detach()

    @property
    def root(self) -> NodeBase:
        """The top-most node of the tree, that is a document node for parsed trees."""
        result: NodeBase = self
        while result._parent is not None:
            result = result._parent
        return result

    def serialize(self, options: Optional[Options] = None) -> str:
        from _selectree.serializer import serialize

        return serialize(self, options)


class _LeafNode(NodeBase):
    """Node types using this base can't have child nodes."""

    __slots__ = ()

    first_child = None
    last_child = None

    @property
    def full_text(self) -> str:
        return ""


class _ParentNode(NodeBase):
    __slots__ = ("_child_nodes",)

    def __init__(self, children: Iterable[NodeSource] = ()):
        super().__init__()
        self._child_nodes = Siblings(belongs_to=self, nodes=children)

    def append_children(self, *node: NodeSource) -> tuple[NodeBase, ...]:
        return tuple(self._child_nodes.append(n) for n in node)

    @property
    def child_nodes(self) -> tuple[NodeBase, ...]:
        """A snapshot of the node's children."""
        return tuple(self._child_nodes)

    @property
    def first_child(self) -> Optional[NodeBase]:
        return self._child_nodes[0] if self._child_nodes else None

    @property
    def full_text(self) -> str:
        return "".join(
            n.content for n in self._iterate_descendants() if isinstance(n, TextNode)
        )

    def insert_children(self, index: int, *node: NodeSource) -> tuple[NodeBase, ...]:
        children_size = len(self._child_nodes)
        if not (children_size * -1 <= index <= children_size):
            raise IndexError

        result = []
        for _node in reversed(node):
            result.append(self._child_nodes.insert(index, _node))
        result.reverse()
        return tuple(result)

    def iterate_children(self, *filter: Filter) -> Iterator[NodeBase]:
        for node in self._child_nodes:
            if all(f(node) for f in filter):
                yield node

    def iterate_descendants(self, *filter: Filter) -> Iterator[NodeBase]:
        """Yields the descendant nodes in document order."""
        for node in self._iterate_descendants():
            if all(f(node) for f in filter):
                yield node

    def _iterate_descendants(self) -> Iterator[NodeBase]:
        stack = [(self._child_nodes, 0)]

        while stack:
            siblings, pointer = stack.pop()

            for node in siblings[pointer:]:
                pointer += 1
                yield node

                if isinstance(node, _ParentNode) and node._child_nodes:
                    stack.extend(((siblings, pointer), (node._child_nodes, 0)))
                    break

    @property
    def last_child(self) -> Optional[NodeBase]:
        return self._child_nodes[-1] if self._child_nodes else None

    def prepend_children(self, *node: NodeSource) -> tuple[NodeBase, ...]:
        return self.insert_children(0, *node)


class CommentNode(_LeafNode):
    """
    The instances of this class represent comment nodes of a tree.

    :param content: The comment's content a.k.a. text.
    """

    __slots__ = ("content",)

    def __init__(self, content: str):
        super().__init__()
        self.content = content

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__}("{self.content}") [{hex(id(self))}]>'

    def clone(self, deep: bool = False) -> CommentNode:
        return CommentNode(self.content)


class DirectiveNode(_LeafNode):
    """
    The instances of this class represent markup declarations like a document type
    declaration and processing instructions. The ``content`` is kept verbatim without
    the enclosing angle brackets, e.g. ``!DOCTYPE html``, while the ``name`` is the
    lower-cased leading token, e.g. ``!doctype``.
    """

    __slots__ = ("content", "name")

    def __init__(self, name: str, content: str):
        super().__init__()
        self.name = name
        self.content = content

    def __repr__(self) -> str:
        return (
            f'<{self.__class__.__name__}("{self.name}", "{self.content}") '
            f"[{hex(id(self))}]>"
        )

    def clone(self, deep: bool = False) -> DirectiveNode:
        return DirectiveNode(self.name, self.content)


class DocumentNode(_ParentNode):
    """
    The root of a parsed tree. Selections that represent a document wrap an instance
    of this class. It can't be added to another tree.
    """

    __slots__ = ()

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} [{hex(id(self))}]>"

    def add_following_siblings(self, *node: NodeSource) -> tuple[NodeBase, ...]:
        raise InvalidOperation("A document node has no siblings.")

    def add_preceding_siblings(self, *node: NodeSource) -> tuple[NodeBase, ...]:
        raise InvalidOperation("A document node has no siblings.")

    def clone(self, deep: bool = False) -> DocumentNode:
        return DocumentNode(
            children=(n.clone(deep=True) for n in self._child_nodes) if deep else ()
        )


class TagNode(_ParentNode):
    """
    The instances of this class represent tag nodes of a tree, the equivalent of DOM's
    elements.

    :param name: The tag name.
    :param attributes: Optional attributes that are assigned to the new node.
    :param children: An optional iterable of detached nodes or strings that will be
                     appended as child nodes.

    The ``attributes`` are a plain :class:`dict` that keeps the order of their
    definition. The ``data`` mapping is a cache that is maintained by
    :meth:`Selection.data`.
    """

    __slots__ = ("attributes", "data", "name")

    def __init__(
        self,
        name: str,
        attributes: Optional[Mapping[str, str]] = None,
        children: Iterable[NodeSource] = (),
    ):
        super().__init__(children)
        self.name = name
        self.attributes: dict[str, str] = dict(attributes or {})
        self.data: dict[str, Any] = {}

    def __repr__(self) -> str:
        return (
            f"<{self.__class__.__name__}"
            f'("{self.name}", {self.attributes}) [{hex(id(self))}]>'
        )

    def clone(self, deep: bool = False) -> TagNode:
        return TagNode(
            self.name,
            self.attributes,
            (n.clone(deep=True) for n in self._child_nodes) if deep else (),
        )

    @property
    def id(self) -> Optional[str]:
        return self.attributes.get("id")


class TextNode(_LeafNode):
    """
    TextNodes contain the textual data of a document.

    :param content: The text.
    """

    __slots__ = ("__content",)

    def __init__(self, content: str):
        super().__init__()
        self.content = content

    def __repr__(self):
        return f'<{self.__class__.__name__}(text="{self.content}") [{hex(id(self))}]>'

    def clone(self, deep: bool = False) -> TextNode:
        return TextNode(self.__content)

    @property
    def content(self) -> str:
        return self.__content

    @content.setter
    def content(self, text: str):
        if not isinstance(text, str):
            raise TypeError
        self.__content = text

    @property
    def full_text(self) -> str:
        return self.__content


#


__all__ = (
    CommentNode.__name__,
    DirectiveNode.__name__,
    DocumentNode.__name__,
    NodeBase.__name__,
    Siblings.__name__,
    TagNode.__name__,
    TextNode.__name__,
)
