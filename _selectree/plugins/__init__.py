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
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from importlib.metadata import entry_points
from importlib.util import find_spec
from typing import TYPE_CHECKING, Optional, overload

from _selectree.exceptions import NoBackendAvailable
from _selectree.nodes import DocumentNode, NodeBase
from _selectree.parser import build_tree
from _selectree.serializer import serialize


if TYPE_CHECKING:
    from collections.abc import Iterator

    from _selectree.options import Options
    from _selectree.parser import Event
    from _selectree.typing import (
        Capability,
        GenericDecorated,
        ParentNode,
        ParserInput,
        PseudoClassTest,
        SecondOrderDecorator,
    )


logger = logging.getLogger(__name__)


class PluginManager:
    __slots__ = ("backends", "capabilities", "pseudo_classes")

    def __init__(self):
        self.backends: dict[str, type[BackendInterface]] = {}
        self.capabilities: list[Capability] = []
        self.pseudo_classes: dict[str, PseudoClassTest] = {}

    def get_backend(self, options: Options) -> BackendInterface:
        """
        Returns an instance of the backend that is named in the options or the first
        registered one that handles the markup language implied by ``xml_mode``.
        """
        if (name := options.backend) is not None:
            if (backend := self.backends.get(name)) is None:
                raise NoBackendAvailable(name)
            return backend()

        for backend in self.backends.values():
            if backend.xml_mode == bool(options.xml_mode):
                logger.debug("Picked the backend %s.", backend.name)
                return backend()

        raise NoBackendAvailable(None)

    @staticmethod
    def load_plugins():
        """
        Loads all modules that are registered as entrypoint in the ``selectree`` group
        and imports contributed backends whose dependencies are available.
        """
        if find_spec("lxml.etree"):
            import _selectree.plugins.lxml_backend
        if find_spec("xml.sax"):
            import _selectree.plugins.expat_backend  # noqa: F401

        for entrypoint in entry_points().select(group="selectree"):
            logger.debug("Loading plugin %s.", entrypoint.name)
            entrypoint.load()

    def register_capability(self, capability: Capability) -> Capability:
        """
        Attaches the operations of a capability to :class:`Selection`. A capability is
        either a module whose ``__all__`` lists the operations or a mapping of
        operation names to functions. Each function's first argument is the selection
        that an operation is called on:

        .. testcode::

            from _selectree.plugins import plugin_manager


            def word_count(selection) -> int:
                return len(selection.text().split())


            plugin_manager.register_capability({"word_count": word_count})

        A name that is already taken raises a :exc:`CapabilityConflict`.
        """
        from _selectree.selection import Selection, compose

        compose(Selection, capability)
        self.capabilities.append(capability)
        return capability

    @overload
    def register_pseudo_class(self, arg: str) -> SecondOrderDecorator: ...

    @overload
    def register_pseudo_class(self, arg: GenericDecorated) -> GenericDecorated: ...

    def register_pseudo_class(
        self, arg: str | GenericDecorated
    ) -> SecondOrderDecorator | GenericDecorated:
        """
        Custom pseudo-classes for CSS selectors can be defined as shown in the
        following example. A pseudo-class is a test that gets a tag node as sole
        argument. The name is either given explicitly or taken from the function's
        name with underscores replaced by hyphens.

        .. testcode::

            from selectree import load
            from _selectree.plugins import plugin_manager


            @plugin_manager.register_pseudo_class("has-title")
            def has_title(node) -> bool:
                return "title" in node.attributes


            query = load('<a title="x">1</a><a>2</a>', is_document=False)
            print(query("a:has-title"))

        .. testoutput::

            <a title="x">1</a>
        """
        if isinstance(arg, str):

            def wrapper(func: PseudoClassTest) -> PseudoClassTest:
                self.pseudo_classes[arg] = func
                return func

            return wrapper

        if callable(arg):
            self.pseudo_classes[arg.__name__.strip("_").replace("_", "-")] = arg
            return arg

        raise TypeError


class BackendInterface(ABC):
    """
    This is the base class for backends that turn markup into a node tree and back.
    Subclasses are registered with their :attr:`name` upon definition. A backend only
    has to provide :meth:`parse_events`; the construction of trees from the different
    kinds of accepted content and the rendering are shared.
    """

    __slots__ = ()

    name: str
    """
    The backend can be selected by this class attribute's value as
    :attr:`Options.backend`.
    """
    xml_mode: bool
    """The value of :attr:`Options.xml_mode` that the backend serves by default."""

    def __init_subclass__(cls):
        plugin_manager.backends[cls.name] = cls

    def parse(
        self,
        content: ParserInput,
        options: Options,
        is_document: bool,
        context: Optional[ParentNode],
    ) -> DocumentNode:
        """
        Returns a document node that contains the given content. Markup is parsed,
        nodes are moved from their current position into the new document.

        :param content: Markup as :class:`str` or :class:`bytes`, a document node, a
                        single node or a sequence of nodes.
        :param options: The options that govern the parsing.
        :param is_document: Parse a complete document rather than a fragment.
        :param context: The node that fragment contents are supposed to be inserted
                        into.
        """
        match content:
            case DocumentNode():
                return content
            case str() | bytes():
                return build_tree(
                    self.parse_events(content, options, is_document, context), options
                )
            case NodeBase():
                nodes: Sequence[NodeBase] = (content,)
            case Iterable():
                nodes = list(content)
            case _:
                raise TypeError(f"Can't parse content of type {type(content)}.")

        result = DocumentNode()
        for node in nodes:
            result.append_children(node.detach())
        return result

    @abstractmethod
    def parse_events(
        self,
        data: str | bytes,
        options: Options,
        is_document: bool,
        context: Optional[ParentNode],
    ) -> Iterator[Event]:
        """
        This method must be implemented and yield the parsed contents in document order
        as :obj:`Event` tuples. Fragments must not be wrapped into structural nodes
        that are implied for complete documents.
        """
        pass

    def render(self, dom: NodeBase | Sequence[NodeBase], options: Options) -> str:
        """Serializes one node or concatenates the serializations of several."""
        return serialize(dom, options)


plugin_manager = PluginManager()


__all__ = (BackendInterface.__name__, "plugin_manager")
