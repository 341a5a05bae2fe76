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

import logging
from collections.abc import Iterable, Mapping
from types import ModuleType
from typing import TYPE_CHECKING, Any, Final, Optional, overload

from _selectree.exceptions import CapabilityConflict
from _selectree.nodes import NodeBase
from _selectree.options import DEFAULT_OPTIONS
from _selectree.plugins import plugin_manager
from _selectree.utils import SELECTION_SIGNATURE, is_html, is_selection

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from _selectree.nodes import DocumentNode
    from _selectree.options import Options
    from _selectree.plugins import BackendInterface
    from _selectree.typing import Capability, ParentNode, ParserInput


logger = logging.getLogger(__name__)


class Selection:
    """
    An ordered collection of nodes that are all bound to one document root and share
    the same options. Its operations are contributed by capability modules, see
    :func:`compose`. Instances are snapshots, later changes to the tree don't alter
    what a selection contains.

    Unlike with the :class:`list` type, ``index`` is the selection's
    :func:`_selectree.api.traversing.index` operation and selections are compared by
    identity.

    :param elements: A node or an iterable of nodes that the selection will contain.
    :param root: The selection that wraps the document that the nodes belong to. It's
                 :obj:`None` for selections that wrap a document root themselves.
    :param options: The options that are passed on to derived selections, parsing and
                    rendering.
    :param backend: The backend that is used for parsing and rendering. It's looked up
                    from the plugin manager per the options if omitted.
    """

    __slots__ = ("_nodes", "backend", "options", "previous", "root")

    signature: Final = SELECTION_SIGNATURE

    def __init__(
        self,
        elements: Optional[NodeBase | Iterable[NodeBase]] = None,
        root: Optional[Selection] = None,
        options: Options = DEFAULT_OPTIONS,
        backend: Optional[BackendInterface] = None,
    ):
        match elements:
            case None:
                nodes = []
            case NodeBase():
                nodes = [elements]
            case str() | bytes():
                raise TypeError("Markup and selectors are handled by `Selection._make`.")
            case Iterable():
                nodes = list(elements)
            case _:
                raise TypeError(f"Unexpected type of elements: {type(elements)}")

        self._nodes: Final[list[NodeBase]] = nodes
        self.backend: Final = (
            plugin_manager.get_backend(options) if backend is None else backend
        )
        self.options: Final = options
        self.previous: Optional[Selection] = None
        self.root = root

    def __contains__(self, node: Any) -> bool:
        return any(node is n for n in self._nodes)

    @overload
    def __getitem__(self, index: int) -> NodeBase: ...

    @overload
    def __getitem__(self, index: slice) -> Selection: ...

    def __getitem__(self, index: int | slice) -> NodeBase | Selection:
        if isinstance(index, slice):
            return self._make(self._nodes[index])
        return self._nodes[index]

    def __iter__(self) -> Iterator[NodeBase]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}({self._nodes!r}) [{hex(id(self))}]>"

    def __str__(self) -> str:
        return self._render(self._nodes)

    def _make(self, dom: Any = None, context: Any = None) -> Selection:
        """
        Creates a selection that shares this one's root, options and backend and that
        refers back to this one as :attr:`previous`. ``dom`` can be a selection, which
        is returned as is, nodes, markup or a selector that is evaluated in
        ``context`` or the document.
        """
        root = self if self.root is None else self.root
        result = initialize(dom, context, root, self.options, self.backend)
        if result is not dom:
            result.previous = self
        return result

    def _parse(
        self,
        content: ParserInput,
        options: Options,
        is_document: bool,
        context: Optional[ParentNode],
    ) -> DocumentNode:
        return self.backend.parse(content, options, is_document, context)

    def _render(self, dom: NodeBase | Iterable[NodeBase]) -> str:
        if not isinstance(dom, NodeBase):
            dom = list(dom)
        return self.backend.render(dom, self.options)

    @staticmethod
    def is_selection(obj: Any) -> bool:
        return is_selection(obj)

    @property
    def length(self) -> int:
        """The number of contained nodes."""
        return len(self._nodes)

    def splice(
        self, start: int, delete_count: Optional[int] = None, *items: NodeBase
    ) -> list[NodeBase]:
        """
        Removes a contiguous run of nodes from the selection and inserts the given
        ones in its place. The removed nodes are returned. Just like
        :meth:`list.__delitem__` with a slice, this alters the selection in place.
        """
        size = len(self._nodes)
        if start < 0:
            start = max(size + start, 0)
        start = min(start, size)
        if delete_count is None:
            delete_count = size - start
        end = start + max(delete_count, 0)

        result = self._nodes[start:end]
        self._nodes[start:end] = items
        return result


def initialize(
    selector: Any,
    context: Any,
    root: Selection,
    options: Options,
    backend: BackendInterface,
) -> Selection:
    """
    Creates a selection from any accepted selector value as described for
    :meth:`_selectree.load.Loader.__call__`.
    """
    if is_selection(selector):
        return selector

    if not selector:
        return Selection(None, root, options, backend)

    match selector:
        case str() if is_html(selector):
            document = backend.parse(selector, options, False, None)
            return Selection(document.child_nodes, root, options, backend)
        case str():
            pass
        case NodeBase() | Iterable():
            return Selection(selector, root, options, backend)
        case _:
            raise TypeError(f"Unexpected type of selector: {type(selector)}")

    search = selector
    match context:
        case None:
            search_context = root
        case str() if is_html(context):
            search_context = Selection(
                backend.parse(context, options, False, None), root, options, backend
            )
        case str():
            search = f"{context} {selector}"
            search_context = root
        case _ if is_selection(context) and context.options == options:
            search_context = context
        case _ if is_selection(context):
            search_context = Selection(context._nodes, root, options, backend)
        case _:
            search_context = Selection(context, root, options, backend)

    return search_context.find(search)


def compose(cls: type[Selection], *capabilities: Capability) -> type[Selection]:
    """
    Attaches the operations of the given capabilities to a selection class. A
    capability is a module whose ``__all__`` names its operations or a mapping of
    names to functions. The names of all capabilities are checked before anything is
    attached, an operation name that the class already has or that two capabilities
    share raises a :exc:`CapabilityConflict`.
    """
    collected: dict[str, Callable] = {}
    labels: list[str] = []

    for capability in capabilities:
        match capability:
            case ModuleType():
                label = capability.__name__
                operations = {n: getattr(capability, n) for n in capability.__all__}
            case Mapping():
                label = ", ".join(capability)
                operations = dict(capability)
            case _:
                raise TypeError("A capability must be a module or a mapping.")

        for name, operation in operations.items():
            if hasattr(cls, name) or name in collected:
                raise CapabilityConflict(name, label)
            if not callable(operation):
                raise TypeError(f"The operation `{name}` of `{label}` isn't callable.")
            collected[name] = operation

        labels.append(label)

    for name, operation in collected.items():
        setattr(cls, name, operation)
    for label in labels:
        logger.debug("Attached %s to %s.", label, cls.__name__)

    return cls


from _selectree.api import (  # noqa: E402
    attributes,
    css,
    forms,
    manipulation,
    traversing,
)

compose(Selection, attributes, traversing, manipulation, css, forms)


__all__ = (
    compose.__name__,
    initialize.__name__,
    Selection.__name__,
)
