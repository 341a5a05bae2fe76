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
CSS selectors are parsed by :mod:`cssselect` and the resulting trees are compiled
into matcher functions that test tag nodes directly, no XPath translation is involved.

A matcher is called with a tag node and the *scope*, the nodes that a query is
evaluated from. It's the reference for the ``:scope`` pseudo-class and relative
selectors that begin with a combinator, e.g. ``> li``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Sequence
from functools import lru_cache
from typing import TYPE_CHECKING, Any, Final, Optional, TypeAlias

from cssselect import SelectorError as CSSSelectorError, parse
from cssselect.parser import (
    Attrib,
    Class,
    CombinedSelector,
    Element,
    Function,
    Hash,
    Matching,
    Negation,
    Pseudo,
    Relation,
    SpecificityAdjustment,
    parse_series,
)

import _selectree.pseudo_classes  # noqa: F401
from _selectree.exceptions import SelectorError
from _selectree.filters import is_tag_node
from _selectree.nodes import DocumentNode, NodeBase, TagNode
from _selectree.options import DEFAULT_OPTIONS
from _selectree.plugins import plugin_manager
from _selectree.utils import _sort_nodes_in_document_order

if TYPE_CHECKING:
    from _selectree.options import Options


Scope: TypeAlias = "Sequence[NodeBase]"
Matcher: TypeAlias = "Callable[[TagNode, Scope], bool]"


logger = logging.getLogger(__name__)

RELATIVE_COMBINATORS: Final = (">", "+", "~")


def _in_scope(node: NodeBase, scope: Scope) -> bool:
    return any(node is n for n in scope)


def _match_any(node: TagNode, scope: Scope) -> bool:
    return True


def _match_scope(node: TagNode, scope: Scope) -> bool:
    if _in_scope(node, scope):
        return True
    # a document as scope or none at all refers to the top-level elements
    return node.parent is None and (
        not scope
        or any(isinstance(n, DocumentNode) and node._parent is n for n in scope)
    )


def _split_selector_group(selector: str) -> list[str]:
    """Splits a selector group at the commas that are not enclosed."""
    result = []
    depth = 0
    quote: Optional[str] = None
    start = 0

    for index, character in enumerate(selector):
        if quote is not None:
            if character == quote:
                quote = None
        elif character in "\"'":
            quote = character
        elif character in "([":
            depth += 1
        elif character in ")]":
            depth -= 1
        elif character == "," and not depth:
            result.append(selector[start:index])
            start = index + 1

    result.append(selector[start:])
    return result


def _anchor_relative_selectors(selector: str) -> str:
    """
    >>> _anchor_relative_selectors("> li, .fruit")
    ':scope > li, .fruit'
    """
    parts = []
    for part in _split_selector_group(selector):
        part = part.strip()
        if part.startswith(RELATIVE_COMBINATORS):
            part = f":scope {part}"
        parts.append(part)
    return ", ".join(parts)


class _Compiler:
    __slots__ = ("quirks_mode", "selector", "xml_mode")

    def __init__(self, selector: str, xml_mode: bool, quirks_mode: bool):
        self.quirks_mode: Final = quirks_mode
        self.selector: Final = selector
        self.xml_mode: Final = xml_mode

    def error(self, message: str) -> SelectorError:
        return SelectorError(self.selector, message)

    def compile(self, tree: Any) -> Matcher:
        match tree:
            case Element():
                return self.compile_element(tree)
            case CombinedSelector():
                return self.compile_combined_selector(tree)
            case Pseudo() if tree.ident.lower() == "scope":
                return self.refine(tree, _match_scope)

        match tree:
            case Attrib():
                test = self.compile_attribute(tree)
            case Class():
                test = self.compile_class(tree)
            case Function():
                test = self.compile_function(tree)
            case Hash():
                test = self.compile_hash(tree)
            case Matching() | SpecificityAdjustment():
                test = self.compile_any(tree.selector_list)
            case Negation():
                subtest = self.compile(tree.subselector)

                def test(node: TagNode, scope: Scope) -> bool:
                    return not subtest(node, scope)

            case Pseudo():
                test = self.compile_pseudo_class(tree.ident.lower())
            case Relation():
                test = self.compile_relation(tree)
            case _:
                raise self.error(f"Unsupported selector component {tree!r}.")

        return self.refine(tree, test)

    def refine(self, tree: Any, test: Matcher) -> Matcher:
        """Combines a test with the one for the compound selector that it's part of."""
        base = self.compile(tree.selector)
        if base is _match_any:
            return test

        def matcher(node: TagNode, scope: Scope) -> bool:
            return base(node, scope) and test(node, scope)

        return matcher

    def compile_any(self, trees: Iterable[Any]) -> Matcher:
        matchers = tuple(self.compile(t) for t in trees)

        def matcher(node: TagNode, scope: Scope) -> bool:
            return any(m(node, scope) for m in matchers)

        return matcher

    def compile_attribute(self, tree: Attrib) -> Matcher:
        name = tree.attrib
        if tree.namespace not in (None, "*"):
            name = f"{tree.namespace}:{name}"
        if not self.xml_mode:
            name = name.lower()

        operator = tree.operator
        expected: str = getattr(tree.value, "value", tree.value) or ""

        match operator:
            case "exists":

                def compare(value: str) -> bool:
                    return True

            case "=":

                def compare(value: str) -> bool:
                    return value == expected

            case "!=":
                return lambda node, scope: node.attributes.get(name) != expected
            case "~=":

                def compare(value: str) -> bool:
                    return bool(expected) and expected in value.split()

            case "|=":

                def compare(value: str) -> bool:
                    return value == expected or value.startswith(f"{expected}-")

            case "^=":

                def compare(value: str) -> bool:
                    return bool(expected) and value.startswith(expected)

            case "$=":

                def compare(value: str) -> bool:
                    return bool(expected) and value.endswith(expected)

            case "*=":

                def compare(value: str) -> bool:
                    return bool(expected) and expected in value

            case _:
                raise self.error(f"Unsupported attribute operator {operator}.")

        def matcher(node: TagNode, scope: Scope) -> bool:
            value = node.attributes.get(name)
            return value is not None and compare(value)

        return matcher

    def compile_class(self, tree: Class) -> Matcher:
        class_name = tree.class_name

        if self.quirks_mode:
            class_name = class_name.casefold()
            return lambda node, scope: class_name in (
                node.attributes.get("class", "").casefold().split()
            )

        return lambda node, scope: class_name in node.attributes.get("class", "").split()

    def compile_combined_selector(self, tree: CombinedSelector) -> Matcher:
        left = self.compile(tree.selector)
        right = self.compile(tree.subselector)

        def matches_parent(parent: Optional[NodeBase], scope: Scope) -> bool:
            if isinstance(parent, TagNode):
                return left(parent, scope)
            return (
                left is _match_scope and parent is not None and _in_scope(parent, scope)
            )

        match tree.combinator:
            case " ":

                def matcher(node: TagNode, scope: Scope) -> bool:
                    return right(node, scope) and any(
                        matches_parent(n, scope)
                        for n in node._iterate_ancestors(_include_document_node=True)
                    )

            case ">":

                def matcher(node: TagNode, scope: Scope) -> bool:
                    return right(node, scope) and matches_parent(node._parent, scope)

            case "+":

                def matcher(node: TagNode, scope: Scope) -> bool:
                    if not right(node, scope):
                        return False
                    sibling = node.fetch_preceding_sibling(is_tag_node)
                    return sibling is not None and left(sibling, scope)  # type: ignore

            case "~":

                def matcher(node: TagNode, scope: Scope) -> bool:
                    return right(node, scope) and any(
                        left(n, scope)  # type: ignore
                        for n in node.iterate_preceding_siblings(is_tag_node)
                    )

            case combinator:
                raise self.error(f"Unsupported combinator {combinator!r}.")

        return matcher

    def compile_element(self, tree: Element) -> Matcher:
        namespace, name = tree.namespace, tree.element
        if name is None or name == "*":
            if namespace is None:
                return _match_any
            prefix = f"{namespace}:"
            return lambda node, scope: node.name.startswith(prefix)

        if namespace is not None:
            name = f"{namespace}:{name}"

        if self.xml_mode:
            return lambda node, scope: node.name == name

        name = name.lower()
        return lambda node, scope: node.name.lower() == name

    def compile_function(self, tree: Function) -> Matcher:
        name = tree.name.lower()

        if name == "contains":
            if not tree.arguments:
                raise self.error(":contains() requires an argument.")
            text = "".join(str(t.value) for t in tree.arguments)
            return lambda node, scope: text in node.full_text

        if name not in (
            "nth-child",
            "nth-last-child",
            "nth-of-type",
            "nth-last-of-type",
        ):
            raise self.error(f"Unsupported pseudo-class function :{name}().")

        try:
            a, b = parse_series(tree.arguments)
        except ValueError as e:
            raise self.error(f"Invalid argument for :{name}().") from e

        of_type = name.endswith("of-type")
        from_end = name.startswith("nth-last-")

        def position(node: TagNode) -> int:
            siblings = (
                node.iterate_following_siblings(is_tag_node)
                if from_end
                else node.iterate_preceding_siblings(is_tag_node)
            )
            if of_type:
                return 1 + sum(1 for n in siblings if n.name == node.name)  # type: ignore
            return 1 + sum(1 for _ in siblings)

        def matcher(node: TagNode, scope: Scope) -> bool:
            offset = position(node) - b
            if a == 0:
                return offset == 0
            return offset % a == 0 and offset // a >= 0

        return matcher

    def compile_hash(self, tree: Hash) -> Matcher:
        id_ = tree.id
        if self.quirks_mode:
            id_ = id_.casefold()
            return lambda node, scope: node.attributes.get("id", "").casefold() == id_
        return lambda node, scope: node.attributes.get("id") == id_

    def compile_pseudo_class(self, name: str) -> Matcher:
        if (test := plugin_manager.pseudo_classes.get(name)) is None:
            raise self.error(f"Unsupported pseudo-class :{name}.")
        return lambda node, scope: test(node)

    def compile_relation(self, tree: Relation) -> Matcher:
        if (arguments := getattr(tree, "arguments", None)) is None:
            arguments = [(tree.combinator, tree.subselector)]

        matchers = [
            self._compile_relative(combinator, subtree)
            for combinator, subtree in arguments
        ]
        if len(matchers) == 1:
            return matchers[0]
        return lambda node, scope: any(m(node, scope) for m in matchers)

    def _compile_relative(self, combinator: Any, subtree: Any) -> Matcher:
        test = self.compile(getattr(subtree, "parsed_tree", subtree))

        match getattr(combinator, "value", combinator):
            case " " | None:

                def matcher(node: TagNode, scope: Scope) -> bool:
                    return any(
                        test(n, scope)  # type: ignore
                        for n in node.iterate_descendants(is_tag_node)
                    )

            case ">":

                def matcher(node: TagNode, scope: Scope) -> bool:
                    return any(
                        test(n, scope)  # type: ignore
                        for n in node.iterate_children(is_tag_node)
                    )

            case "+":

                def matcher(node: TagNode, scope: Scope) -> bool:
                    sibling = node.fetch_following_sibling(is_tag_node)
                    return sibling is not None and test(sibling, scope)  # type: ignore

            case "~":

                def matcher(node: TagNode, scope: Scope) -> bool:
                    return any(
                        test(n, scope)  # type: ignore
                        for n in node.iterate_following_siblings(is_tag_node)
                    )

            case combinator:
                raise self.error(f"Unsupported combinator {combinator!r} in :has().")

        return matcher


@lru_cache(maxsize=256)
def _compile(selector: str, xml_mode: bool, quirks_mode: bool) -> Matcher:
    logger.debug("Compiling selector %r.", selector)

    if not selector.strip():
        raise SelectorError(selector, "The selector is empty.")

    try:
        parsed = parse(_anchor_relative_selectors(selector))
    except CSSSelectorError as e:
        raise SelectorError(selector, str(e)) from e

    compiler = _Compiler(selector, xml_mode, quirks_mode)
    matchers = []
    for item in parsed:
        if item.pseudo_element is not None:
            raise compiler.error(
                f"Pseudo-elements like ::{item.pseudo_element} can't be matched."
            )
        matchers.append(compiler.compile(item.parsed_tree))

    if len(matchers) == 1:
        return matchers[0]

    def matcher(node: TagNode, scope: Scope) -> bool:
        return any(m(node, scope) for m in matchers)

    return matcher


def compile_selector(selector: str, options: Options = DEFAULT_OPTIONS) -> Matcher:
    """
    Returns a matcher function for a CSS selector. The results are cached per selector
    and the options that affect matching.

    :param selector: A CSS selector or a group of such.
    :param options: ``xml_mode`` makes tag and attribute names case-sensitive,
                    ``quirks_mode`` makes class and id matching case-insensitive.
    """
    return _compile(selector, bool(options.xml_mode), bool(options.quirks_mode))


def filter_nodes(
    nodes: Iterable[NodeBase],
    selector: str,
    options: Options = DEFAULT_OPTIONS,
    scope: Scope = (),
) -> list[TagNode]:
    """Returns the tag nodes that match the selector in the given order."""
    matcher = compile_selector(selector, options)
    return [n for n in nodes if isinstance(n, TagNode) and matcher(n, scope)]


def matches(
    node: NodeBase,
    selector: str,
    options: Options = DEFAULT_OPTIONS,
    scope: Scope = (),
) -> bool:
    """Tests whether a node is a tag node that matches the selector."""
    return isinstance(node, TagNode) and compile_selector(selector, options)(
        node, scope
    )


def _candidates(node: NodeBase, with_siblings: bool) -> Iterator[NodeBase]:
    yield from node.iterate_descendants(is_tag_node)
    if with_siblings:
        for sibling in node.iterate_following_siblings(is_tag_node):
            yield sibling
            yield from sibling.iterate_descendants(is_tag_node)


def select(
    selector: str, scope: Iterable[NodeBase], options: Options = DEFAULT_OPTIONS
) -> list[TagNode]:
    """
    Returns the descendant tag nodes of the scope nodes that match the selector. The
    result contains no duplicates and is sorted in document order. Selectors that
    begin with a sibling combinator, e.g. ``~ li``, also consider the following
    siblings of the scope nodes.
    """
    matcher = compile_selector(selector, options)
    scope = tuple(scope)
    with_siblings = any(
        p.strip().startswith(("+", "~")) for p in _split_selector_group(selector)
    )

    result: list[TagNode] = []
    for node in scope:
        for candidate in _candidates(node, with_siblings):
            if matcher(candidate, scope):  # type: ignore
                result.append(candidate)  # type: ignore

    if len(scope) > 1 or with_siblings:
        return _sort_nodes_in_document_order(result)  # type: ignore
    return result


__all__ = (
    compile_selector.__name__,
    filter_nodes.__name__,
    "Matcher",
    matches.__name__,
    select.__name__,
)
