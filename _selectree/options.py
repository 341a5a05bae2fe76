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

from collections.abc import Mapping
from typing import Any, NamedTuple, Optional


class Options(NamedTuple):
    """
    The configuration that a selection and everything derived from it shares.
    Instances are immutable, use :func:`flatten_options` or :meth:`Options._replace`
    to obtain altered ones.

    :param xml_mode: Parse and render as XML, tag and attribute names in selectors are
                     matched case-sensitively.
    :param decode_entities: Escape markup characters when rendering text and
                            attribute values. Without it contents are written verbatim.
    :param lower_case_tags: Lower-case tag names when parsing. Defaults to the opposite
                            of ``xml_mode``.
    :param lower_case_attribute_names: Lower-case attribute names when parsing.
                                       Defaults to the opposite of ``xml_mode``.
    :param self_closing_tags: Render tag nodes without children as ``<name/>``.
                              Defaults to ``xml_mode``.
    :param quirks_mode: Match class and id selectors case-insensitively.
    :param remove_comments: Ignore comments while parsing.
    :param remove_processing_instructions: Don't include processing instructions in
                                           parsed trees.
    :param base_url: The URL that relative ``href`` and ``src`` properties are
                     resolved against.
    :param backend: The name of a registered backend. When :obj:`None` it's picked
                    according to ``xml_mode``.
    """

    xml_mode: bool = False
    decode_entities: bool = True
    lower_case_tags: Optional[bool] = None
    lower_case_attribute_names: Optional[bool] = None
    self_closing_tags: Optional[bool] = None
    quirks_mode: bool = False
    remove_comments: bool = False
    remove_processing_instructions: bool = False
    base_url: Optional[str] = None
    backend: Optional[str] = None

    @property
    def lower_cases_attribute_names(self) -> bool:
        if self.lower_case_attribute_names is None:
            return not self.xml_mode
        return self.lower_case_attribute_names

    @property
    def lower_cases_tags(self) -> bool:
        if self.lower_case_tags is None:
            return not self.xml_mode
        return self.lower_case_tags

    @property
    def self_closes_tags(self) -> bool:
        if self.self_closing_tags is None:
            return self.xml_mode
        return self.self_closing_tags


DEFAULT_OPTIONS = Options()


def flatten_options(
    options: Optional[Options | Mapping[str, Any]] = None,
    base: Optional[Options] = None,
) -> Options:
    """
    Resolves partially given options onto the ``base`` options, which default to
    :obj:`DEFAULT_OPTIONS`.

    A mapping may contain the key ``xml`` with either a boolean or a mapping of further
    options. In the latter case these options apply and ``xml_mode`` is enabled.

    >>> options = flatten_options({"xml": {"decode_entities": False}})
    >>> options.xml_mode, options.decode_entities
    (True, False)
    """
    if base is None:
        base = DEFAULT_OPTIONS

    match options:
        case None:
            return base
        case Options():
            return options
        case Mapping():
            pass
        case _:
            raise TypeError("Options must be given as mapping or `Options` instance.")

    values = dict(options)
    xml = values.pop("xml", None)

    match xml:
        case None:
            pass
        case bool():
            values.setdefault("xml_mode", xml)
        case Mapping():
            values.update(xml)
            values["xml_mode"] = True
        case _:
            raise TypeError("The `xml` option must be a boolean or a mapping.")

    if unknown := set(values) - set(Options._fields):
        raise TypeError(f"Unrecognized options: {', '.join(sorted(unknown))}")

    return base._replace(**values)


__all__ = (Options.__name__, "DEFAULT_OPTIONS", flatten_options.__name__)
