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
from typing import TYPE_CHECKING, Final, Optional
from xml.sax import SAXParseException, make_parser
from xml.sax.handler import (
    ContentHandler,
    LexicalHandler,
    feature_external_ges,
    feature_namespaces,
    property_lexical_handler,
)

from _selectree.exceptions import ParsingProcessingError
from _selectree.parser import DirectiveEventData, EventType, TagEventData
from _selectree.plugins import BackendInterface


if TYPE_CHECKING:
    from collections.abc import Iterator

    from xml.sax.xmlreader import AttributesImpl

    from _selectree.options import Options
    from _selectree.parser import Event
    from _selectree.typing import ParentNode


DECLARED_ENCODING_PATTERN: Final = re.compile(
    rb"""\s*<\?xml[^>]*encoding\s*=\s*["']([\w.:-]+)["']"""
)
PROLOG_PATTERN: Final = re.compile(
    r"""\A\s*(?P<declaration><\?xml\s[^>]*\?>)?\s*"""
    r"""(?P<doctype><!DOCTYPE\s[^>\[]*(?:\[[^\]]*\])?\s*>)?""",
    flags=re.IGNORECASE,
)
WRAPPER_NAME: Final = "selectree-wrapper"


class _EventCollector(ContentHandler, LexicalHandler):
    """
    Records the SAX callbacks as events. The content is wrapped into an element so
    that several top-level nodes can be parsed, that element is left out.
    """

    def __init__(self):
        super().__init__()
        self.depth = 0
        self.events: list[Event] = []

    def characters(self, content: str):
        if self.depth:
            self.events.append((EventType.Text, content))

    def comment(self, content: str):
        self.events.append((EventType.Comment, content))

    def endElement(self, name: str):
        self.depth -= 1
        if self.depth:
            self.events.append((EventType.TagEnd, TagEventData(name, {})))

    def ignorableWhitespace(self, whitespace: str):
        self.characters(whitespace)

    def processingInstruction(self, target: str, data: str):
        content = f"?{target} {data}?" if data else f"?{target}?"
        self.events.append(
            (EventType.Directive, DirectiveEventData(f"?{target}", content))
        )

    def startElement(self, name: str, attrs: AttributesImpl):
        if self.depth:
            self.events.append(
                (EventType.TagStart, TagEventData(name, dict(attrs.items())))
            )
        self.depth += 1


class ExpatBackend(BackendInterface):
    """
    Parses XML with the expat based SAX reader from the standard library. Namespace
    processing is off, hence prefixed names are kept verbatim. External entities are
    never resolved.
    """

    __slots__ = ()

    name = "expat"
    xml_mode = True

    @staticmethod
    def decode(data: str | bytes) -> str:
        if isinstance(data, str):
            return data
        if match := DECLARED_ENCODING_PATTERN.match(data):
            return data.decode(match.group(1).decode("ascii"))
        return data.decode("utf-8")

    def parse_events(
        self,
        data: str | bytes,
        options: Options,
        is_document: bool,
        context: Optional[ParentNode],
    ) -> Iterator[Event]:
        text = self.decode(data)

        prolog = PROLOG_PATTERN.match(text)
        assert prolog is not None
        if declaration := prolog.group("declaration"):
            yield EventType.Directive, DirectiveEventData("?xml", declaration[1:-1])
        if doctype := prolog.group("doctype"):
            yield EventType.Directive, DirectiveEventData("!doctype", doctype[1:-1])
        text = text[prolog.end() :]

        yield from self.sax_events(text)

    @staticmethod
    def sax_events(text: str) -> list[Event]:
        collector = _EventCollector()

        parser = make_parser()
        parser.setFeature(feature_namespaces, False)
        parser.setFeature(feature_external_ges, False)
        parser.setContentHandler(collector)
        parser.setProperty(property_lexical_handler, collector)

        try:
            parser.feed(f"<{WRAPPER_NAME}>{text}</{WRAPPER_NAME}>")
            parser.close()
        except SAXParseException as e:
            raise ParsingProcessingError(str(e)) from e

        return collector.events


__all__ = (ExpatBackend.__name__,)
