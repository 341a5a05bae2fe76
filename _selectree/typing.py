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

from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any, TypeAlias, TypeVar

if TYPE_CHECKING:
    from types import ModuleType

    from _selectree.nodes import DocumentNode, NodeBase, TagNode
    from _selectree.selection import Selection


GenericDecorated = TypeVar("GenericDecorated", bound=Callable[..., Any])
SecondOrderDecorator: TypeAlias = "Callable[[GenericDecorated], GenericDecorated]"

Filter: TypeAlias = "Callable[[NodeBase], bool]"
NodeSource: TypeAlias = "str | NodeBase"

AcceptedElements: TypeAlias = "str | NodeBase | Sequence[NodeBase] | Selection"
"""Anything that can be turned into nodes: markup, nodes, sequences and selections."""
ParserInput: TypeAlias = "str | bytes | DocumentNode | NodeBase | Sequence[NodeBase]"
Capability: TypeAlias = "ModuleType | Mapping[str, Callable[..., Any]]"
ParentNode: TypeAlias = "TagNode | DocumentNode"
PseudoClassTest: TypeAlias = "Callable[[TagNode], bool]"


__all__ = (
    "AcceptedElements",
    "Capability",
    "Filter",
    "GenericDecorated",
    "NodeSource",
    "ParentNode",
    "ParserInput",
    "PseudoClassTest",
    "SecondOrderDecorator",
)
