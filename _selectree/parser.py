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
Backends translate markup into a stream of parser events that the :class:`TreeBuilder`
assembles into a node tree. That keeps the construction of nodes and the handling of
the tree related options in one place.
"""

from __future__ import annotations

from enum import auto, IntEnum
from typing import TYPE_CHECKING, Final, NamedTuple, TypeAlias

from _selectree.exceptions import InvalidCodePath, ParsingProcessingError
from _selectree.nodes import (
    CommentNode,
    DirectiveNode,
    DocumentNode,
    TagNode,
    TextNode,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from _selectree.nodes import NodeBase
    from _selectree.options import Options


class EventType(IntEnum):
    Comment = auto()
    Directive = auto()
    TagStart = auto()
    TagEnd = auto()
    Text = auto()


class TagEventData(NamedTuple):
    name: str
    attributes: dict[str, str]


class DirectiveEventData(NamedTuple):
    name: str
    content: str


Event: TypeAlias = tuple[EventType, str | TagEventData | DirectiveEventData]


class TreeBuilder:
    __slots__ = ("children", "options", "started_tags")

    def __init__(self, options: Options):
        self.children: Final[list[list[NodeBase]]] = [[]]
        self.options: Final = options
        self.started_tags: Final[list[TagNode]] = []

    def build(self, events: Iterable[Event]) -> DocumentNode:
        for event in events:
            self.handle_event(event)

        if self.started_tags:
            raise ParsingProcessingError(
                f"Unclosed tag at the end of the stream: {self.started_tags[-1].name}"
            )

        assert len(self.children) == 1
        return DocumentNode(children=self.children.pop())

    def handle_event(self, event: Event):
        type_, data = event
        result: NodeBase | None

        match type_:
            case EventType.Comment:
                assert isinstance(data, str)
                if self.options.remove_comments:
                    return
                result = CommentNode(data)
            case EventType.Directive:
                assert isinstance(data, DirectiveEventData)
                if (
                    self.options.remove_processing_instructions
                    and data.name.startswith("?")
                ):
                    return
                result = DirectiveNode(data.name, data.content)
            case EventType.TagStart:
                assert isinstance(data, TagEventData)
                self.handle_tag_start(data)
                return
            case EventType.TagEnd:
                result = self.handle_tag_end()
            case EventType.Text:
                assert isinstance(data, str)
                self.handle_text(data)
                return
            case _:
                raise InvalidCodePath

        self.children[-1].append(result)

    def handle_tag_end(self) -> TagNode:
        result = self.started_tags.pop()
        result.append_children(*self.children.pop())
        return result

    def handle_tag_start(self, data: TagEventData):
        name = data.name
        if self.options.lower_cases_tags:
            name = name.lower()

        attributes = data.attributes
        if self.options.lower_cases_attribute_names:
            attributes = {k.lower(): v for k, v in attributes.items()}

        self.children.append([])
        self.started_tags.append(TagNode(name, attributes))

    def handle_text(self, content: str):
        if not content:
            return

        siblings = self.children[-1]
        if siblings and isinstance(siblings[-1], TextNode):
            siblings[-1].content += content
        else:
            siblings.append(TextNode(content))


def build_tree(events: Iterable[Event], options: Options) -> DocumentNode:
    """Assembles a document node from parser events."""
    return TreeBuilder(options).build(events)


__all__ = (
    build_tree.__name__,
    DirectiveEventData.__name__,
    "Event",
    EventType.__name__,
    TagEventData.__name__,
    TreeBuilder.__name__,
)
