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

from typing import TYPE_CHECKING, Final, Optional

from lxml import etree

from _selectree.exceptions import ParsingProcessingError
from _selectree.nodes import TagNode
from _selectree.parser import DirectiveEventData, EventType, TagEventData
from _selectree.plugins import BackendInterface


if TYPE_CHECKING:
    from collections.abc import Iterator

    from _selectree.options import Options
    from _selectree.parser import Event
    from _selectree.typing import ParentNode


# the contents of these are not parsed as markup when they're the fragment context
TEXT_CONTEXTS: Final = frozenset(
    ("iframe", "noembed", "noframes", "plaintext", "script", "style", "textarea",
     "title", "xmp")
)  # fmt: skip


class LxmlBackend(BackendInterface):
    """
    Parses HTML with the :mod:`lxml.etree` HTML parser. Fragments are parsed as the
    contents of a ``body`` element whose contents are then emitted without the implied
    ``html`` and ``body`` elements.
    """

    __slots__ = ()

    name = "lxml"
    xml_mode = False

    def attribute_data(self, element: etree._Element) -> dict[str, str]:
        result = {}
        for name, value in element.attrib.items():
            assert isinstance(name, str)
            result[name] = value or ""
        return result

    def element_events(self, element: etree._Element) -> Iterator[Event]:
        """
        Yields the events for an element and its descendants, but not for its tail.
        """
        if not isinstance(element.tag, str):
            yield from self.leaf_events(element)
            return

        yield from self.start_events(element)
        stack = [(element, iter(element))]

        while stack:
            parent, children = stack[-1]

            for child in children:
                if isinstance(child.tag, str):
                    yield from self.start_events(child)
                    stack.append((child, iter(child)))
                    break

                yield from self.leaf_events(child)
                if child.tail:
                    yield EventType.Text, child.tail

            else:
                stack.pop()
                yield EventType.TagEnd, self.tag_event_data(parent)
                if stack and parent.tail:
                    yield EventType.Text, parent.tail

    def document_events(
        self, data: str | bytes, parser: etree.HTMLParser
    ) -> Iterator[Event]:
        root = self.parse_markup(data, parser)
        if root is None:
            return

        if doctype := root.getroottree().docinfo.doctype:
            yield EventType.Directive, DirectiveEventData("!doctype", doctype[1:-1])

        for node in reversed(tuple(root.itersiblings(preceding=True))):
            yield from self.element_events(node)
        yield from self.element_events(root)
        for node in root.itersiblings():
            yield from self.element_events(node)

    def fragment_events(
        self, data: str | bytes, parser: etree.HTMLParser
    ) -> Iterator[Event]:
        if isinstance(data, bytes):
            data = data.decode("utf-8")

        root = self.parse_markup(f"<html><body>{data}</body></html>", parser)
        if root is None or (body := root.find("body")) is None:
            return

        if body.text:
            yield EventType.Text, body.text
        for node in body:
            yield from self.element_events(node)
            if node.tail:
                yield EventType.Text, node.tail

    def leaf_events(self, node: etree._Element) -> Iterator[Event]:
        match node:
            case etree._Comment():
                yield EventType.Comment, node.text or ""
            case etree._ProcessingInstruction():
                target = node.target
                content = f"?{target} {node.text}" if node.text else f"?{target}"
                yield EventType.Directive, DirectiveEventData(f"?{target}", content)
            case etree._Entity():
                yield EventType.Text, node.text or ""

    @staticmethod
    def parse_markup(
        data: str | bytes, parser: etree.HTMLParser
    ) -> Optional[etree._Element]:
        if not data.strip():
            return None

        try:
            return etree.fromstring(data, parser)
        except (etree.LxmlError, ValueError) as e:
            raise ParsingProcessingError(str(e)) from e

    def parse_events(
        self,
        data: str | bytes,
        options: Options,
        is_document: bool,
        context: Optional[ParentNode],
    ) -> Iterator[Event]:
        if (
            not is_document
            and isinstance(context, TagNode)
            and context.name in TEXT_CONTEXTS
        ):
            yield EventType.Text, data if isinstance(data, str) else data.decode()
            return

        parser = etree.HTMLParser(
            default_doctype=False,
            remove_comments=options.remove_comments,
            remove_pis=options.remove_processing_instructions,
        )

        if is_document:
            yield from self.document_events(data, parser)
        else:
            yield from self.fragment_events(data, parser)

    def start_events(self, element: etree._Element) -> Iterator[Event]:
        yield EventType.TagStart, self.tag_event_data(element)
        if element.text:
            yield EventType.Text, element.text

    def tag_event_data(self, element: etree._Element) -> TagEventData:
        tag = element.tag
        assert isinstance(tag, str)
        return TagEventData(name=tag, attributes=self.attribute_data(element))


__all__ = (LxmlBackend.__name__,)
