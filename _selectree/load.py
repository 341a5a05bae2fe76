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
from typing import TYPE_CHECKING, Any, Final, Optional

from _selectree.filters import is_tag_node
from _selectree.nodes import DocumentNode, NodeBase
from _selectree.options import flatten_options
from _selectree.plugins import plugin_manager
from _selectree.selection import Selection, initialize
from _selectree.static import contains, merge, text
from _selectree.utils import is_selection

if TYPE_CHECKING:
    from _selectree.options import Options
    from _selectree.typing import ParentNode, ParserInput


logger = logging.getLogger(__name__)


def _nodes_of(dom: Any) -> list[NodeBase]:
    match dom:
        case NodeBase():
            return [dom]
        case _ if is_selection(dom):
            return list(dom._nodes)
        case Iterable():
            return list(dom)
        case _:
            raise TypeError(f"Unexpected type of nodes: {type(dom)}")


class Loader:
    """
    A query function that is bound to a parsed document, as returned by :func:`load`.
    Calling it returns a :class:`Selection`:

    >>> query = load("<ul><li>Apple</li><li>Orange</li></ul>")
    >>> query("li").length
    2
    >>> query("li").last().text()
    'Orange'

    The ``selector`` can also be markup, a node, an iterable of nodes or a selection,
    which is returned unaltered. A ``context`` limits the search to the descendants
    of the context's nodes. It can be a selector, that is prepended to the selector,
    markup, nodes or a selection.

    :param selector: What to select.
    :param context: Where to search.
    :param root: A markup string, a document node or a selection that replaces the
                 loaded document as the search's root.
    :param options: Options that override the loaded ones for this query.
    """

    __slots__ = ("_backend", "_options", "_root")

    def __init__(self, root: Selection):
        self._root: Final = root
        self._backend: Final = root.backend
        self._options: Final = root.options

    def __call__(
        self,
        selector: Any = None,
        context: Any = None,
        root: Optional[str | DocumentNode | Selection] = None,
        options: Optional[Options | Mapping[str, Any]] = None,
    ) -> Selection:
        _options = flatten_options(options, self._options)
        backend = (
            self._backend
            if _options == self._options
            else plugin_manager.get_backend(_options)
        )

        match root:
            case None if _options == self._options:
                root_selection = self._root
            case None:
                root_selection = Selection(self._root._nodes, None, _options, backend)
            case str():
                root_selection = Selection(
                    backend.parse(root, _options, False, None), None, _options, backend
                )
            case _ if is_selection(root) and root.options == _options:  # type: ignore
                root_selection = root  # type: ignore
            case _ if is_selection(root):
                root_selection = Selection(
                    root._nodes, None, _options, backend  # type: ignore
                )
            case _:
                root_selection = Selection(root, None, _options, backend)

        return initialize(selector, context, root_selection, _options, backend)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}({self._root.length and self._root[0]!r})>"

    contains = staticmethod(contains)
    merge = staticmethod(merge)

    def html(
        self,
        dom: Any = None,
        options: Optional[Options | Mapping[str, Any]] = None,
    ) -> str:
        """
        Renders the given nodes or the whole document. Alternative options can be
        passed for the rendering.
        """
        _options = flatten_options(options, self._options)
        nodes = self._root._nodes if dom is None else self._resolve(dom)
        backend = (
            self._backend
            if _options == self._options
            else plugin_manager.get_backend(_options)
        )
        return backend.render(nodes, _options)

    @property
    def options(self) -> Options:
        """The options that the document was loaded with."""
        return self._options

    def parse_html(
        self,
        data: Optional[str],
        context: Optional[ParentNode] = None,
        keep_scripts: bool = False,
    ) -> list[NodeBase]:
        """
        Parses markup into a list of detached nodes. ``script`` elements are dropped
        unless ``keep_scripts`` is set.

        :param data: The markup.
        :param context: A tag node that the parsed nodes are meant to be inserted into.
        :param keep_scripts: Whether to keep ``script`` elements.
        """
        if not data or not isinstance(data, str):
            return []

        document = self._backend.parse(data, self._options, False, context)
        if not keep_scripts:
            for node in list(
                document.iterate_descendants(
                    is_tag_node, lambda n: n.name == "script"  # type: ignore
                )
            ):
                node.detach()

        result = list(document.child_nodes)
        for node in result:
            node.detach()
        return result

    def _resolve(self, dom: Any) -> list[NodeBase]:
        if isinstance(dom, str):
            return list(self(dom)._nodes)
        return _nodes_of(dom)

    def root(self) -> Selection:
        """Returns a selection of the document node."""
        return self._root

    def text(self, dom: Any = None) -> str:
        """Returns the text contents of the given nodes or of the whole document."""
        return text(self._root._nodes if dom is None else self._resolve(dom))

    def xml(self, dom: Any = None) -> str:
        """Renders the given nodes or the whole document as XML."""
        return self.html(dom, self._options._replace(xml_mode=True))


def load(
    content: ParserInput,
    options: Optional[Options | Mapping[str, Any]] = None,
    is_document: bool = True,
) -> Loader:
    """
    Parses the content and returns a :class:`Loader` to query the resulting document.

    :param content: Markup as :class:`str` or :class:`bytes`, a document node, a node
                    or an iterable of nodes. Given nodes are moved into a new
                    document.
    :param options: The options as :class:`Options` instance or mapping, see
                    :func:`flatten_options`.
    :param is_document: Parse markup as a complete document, in HTML that implies
                        ``html``, ``head`` and ``body`` elements.
    """
    _options = flatten_options(options)
    backend = plugin_manager.get_backend(_options)
    logger.debug("Loading content with the %s backend.", backend.name)
    document = backend.parse(content, _options, is_document, None)
    return Loader(Selection(document, None, _options, backend))


__all__ = (load.__name__, Loader.__name__)
