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

"""These are the specific selectree exceptions."""

from __future__ import annotations

from typing import Optional


class SelectreeBaseException(Exception):
    pass


class CapabilityConflict(SelectreeBaseException, TypeError):
    """
    Raised when a capability's operation name is already taken by the selection class
    or by another capability that is composed along with it.
    """

    def __init__(self, name: str, capability: str):
        self.name = name
        self.capability = capability

    def __str__(self):
        return (
            f"The operation `{self.name}` of the capability `{self.capability}` "
            "collides with an existing attribute of the selection class."
        )


class InvalidCodePath(SelectreeBaseException, RuntimeError):
    """Raised when a code path that is not expected to be executed is reached."""

    def __init__(self):
        super().__init__(
            "An unintended path was taken through the code. Please report this bug."
        )


class InvalidOperation(SelectreeBaseException):
    """Raised when an invalid operation is attempted by the client code."""

    pass


class NoBackendAvailable(SelectreeBaseException, LookupError):
    def __init__(self, name: Optional[str]):
        self.name = name

    def __str__(self):
        if self.name is None:
            return "No backends are registered."
        return f"There's no backend registered with the name `{self.name}`."


class ParsingError(SelectreeBaseException):
    pass


class ParsingProcessingError(ParsingError):
    pass


class SelectorError(SelectreeBaseException, ValueError):
    """Raised when a CSS selector can't be parsed or uses unsupported features."""

    def __init__(self, selector: str, message: str):
        self.selector = selector
        self.message = message

    def __str__(self):
        return f"Invalid selector `{self.selector}`: {self.message}"


__all__ = (
    CapabilityConflict.__name__,
    InvalidCodePath.__name__,
    InvalidOperation.__name__,
    NoBackendAvailable.__name__,
    ParsingError.__name__,
    ParsingProcessingError.__name__,
    SelectorError.__name__,
    SelectreeBaseException.__name__,
)
