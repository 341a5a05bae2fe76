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

from collections.abc import Iterable
from io import StringIO
from typing import TYPE_CHECKING, Final, Optional, TextIO

from _selectree.exceptions import InvalidCodePath
from _selectree.nodes import (
    CommentNode,
    DirectiveNode,
    DocumentNode,
    NodeBase,
    TagNode,
    TextNode,
)
from _selectree.options import DEFAULT_OPTIONS

if TYPE_CHECKING:
    from _selectree.options import Options


# constants


CTRL_CHAR_ENTITY_NAME_MAPPING: Final = (
    ("&", "amp"),
    (">", "gt"),
    ("<", "lt"),
    ('"', "quot"),
)
CCE_TABLE_FOR_ATTRIBUTES: Final = str.maketrans(
    {ord(k): f"&{v};" for k, v in CTRL_CHAR_ENTITY_NAME_MAPPING}
)
CCE_TABLE_FOR_TEXT: Final = str.maketrans(
    {ord(k): f"&{v};" for k, v in CTRL_CHAR_ENTITY_NAME_MAPPING if k != '"'}
)
HTML_TABLE_FOR_ATTRIBUTES: Final = str.maketrans(
    {ord("&"): "&amp;", ord('"'): "&quot;", 0xA0: "&nbsp;"}
)
HTML_TABLE_FOR_TEXT: Final = str.maketrans(
    {ord("&"): "&amp;", ord("<"): "&lt;", ord(">"): "&gt;", 0xA0: "&nbsp;"}
)
QUOTE_TABLE: Final = str.maketrans({ord('"'): "&quot;"})

RAW_TEXT_ELEMENTS: Final = frozenset(
    (
        "iframe",
        "noembed",
        "noframes",
        "noscript",
        "plaintext",
        "script",
        "style",
        "xmp",
    )
)
VOID_ELEMENTS: Final = frozenset(
    (
        "area",
        "base",
        "basefont",
        "bgsound",
        "br",
        "col",
        "command",
        "embed",
        "frame",
        "hr",
        "image",
        "img",
        "input",
        "isindex",
        "keygen",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    )
)


def _get_serializer(
    writer: _SerializationWriter, options: Optional[Options]
) -> Serializer:
    if options is None:
        options = DEFAULT_OPTIONS
    return (XMLSerializer if options.xml_mode else Serializer)(writer, options)


def serialize(dom: NodeBase | Iterable[NodeBase], options: Optional[Options] = None):
    """
    Renders a node or the nodes of an iterable, e.g. a selection, to a string. HTML is
    produced unless the ``xml_mode`` option is set.
    """
    serializer = _get_serializer(_StringWriter(), options)
    if isinstance(dom, NodeBase):
        serializer.serialize_node(dom)
    else:
        for node in dom:
            serializer.serialize_node(node)
    return serializer.writer.result


class Serializer:
    """Produces HTML."""

    __slots__ = ("options", "writer")

    def __init__(self, writer: _SerializationWriter, options: Options):
        self.options: Final = options
        self.writer: Final = writer

    def _escape_attribute_value(self, value: str) -> str:
        if self.options.decode_entities:
            return value.translate(HTML_TABLE_FOR_ATTRIBUTES)
        return value.translate(QUOTE_TABLE)

    def _escape_text(self, node: TextNode) -> str:
        if not self.options.decode_entities:
            return node.content
        parent = node._parent
        if isinstance(parent, TagNode) and parent.name in RAW_TEXT_ELEMENTS:
            return node.content
        return node.content.translate(HTML_TABLE_FOR_TEXT)

    def _handle_child_nodes(self, node: TagNode | DocumentNode):
        for child_node in node._child_nodes:
            self.serialize_node(child_node)

    def _serialize_attributes(self, node: TagNode):
        for name, value in node.attributes.items():
            if value == "":
                self.writer(f" {name}")
            else:
                self.writer(f' {name}="{self._escape_attribute_value(value)}"')

    def serialize_node(self, node: NodeBase):
        match node:
            case CommentNode():
                self.writer(f"<!--{node.content}-->")
            case DirectiveNode():
                self.writer(f"<{node.content}>")
            case DocumentNode():
                self._handle_child_nodes(node)
            case TagNode():
                self._serialize_tag(node)
            case TextNode():
                if node.content:
                    self.writer(self._escape_text(node))
            case _:  # pragma: no cover
                raise InvalidCodePath

    def _serialize_tag(self, node: TagNode):
        name = node.name
        is_void = name in VOID_ELEMENTS

        self.writer(f"<{name}")
        self._serialize_attributes(node)

        if is_void and not node._child_nodes:
            self.writer(" />" if self.options.self_closes_tags else ">")
            return

        self.writer(">")
        self._handle_child_nodes(node)
        if not is_void:
            self.writer(f"</{name}>")


class XMLSerializer(Serializer):
    __slots__ = ()

    def _escape_attribute_value(self, value: str) -> str:
        if self.options.decode_entities:
            return value.translate(CCE_TABLE_FOR_ATTRIBUTES)
        return value.translate(QUOTE_TABLE)

    def _escape_text(self, node: TextNode) -> str:
        if self.options.decode_entities:
            return node.content.translate(CCE_TABLE_FOR_TEXT)
        return node.content

    def _serialize_attributes(self, node: TagNode):
        for name, value in node.attributes.items():
            self.writer(f' {name}="{self._escape_attribute_value(value)}"')

    def _serialize_tag(self, node: TagNode):
        self.writer(f"<{node.name}")
        self._serialize_attributes(node)

        if node._child_nodes or not self.options.self_closes_tags:
            self.writer(">")
            self._handle_child_nodes(node)
            self.writer(f"</{node.name}>")
        else:
            self.writer("/>")


# writer


class _SerializationWriter:
    __slots__ = ("buffer",)

    def __init__(self, buffer: TextIO):
        self.buffer: Final = buffer

    def __call__(self, data: str):
        self.buffer.write(data)

    @property
    def result(self):
        if isinstance(self.buffer, StringIO):
            return self.buffer.getvalue()
        raise TypeError(  # pragma: no cover
            "Underlying buffer must be an instance of `io.StringIO`"
        )


class _StringWriter(_SerializationWriter):
    def __init__(self):
        super().__init__(StringIO())


#


__all__ = (
    Serializer.__name__,
    XMLSerializer.__name__,
    serialize.__name__,
)
