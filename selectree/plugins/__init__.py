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
Extensions are registered with the :obj:`plugin_manager`: backends by subclassing
:class:`BackendInterface`, capabilities that add operations to selections and
pseudo-classes for selectors. Modules that are declared as entrypoint in the
``selectree`` group are imported when the package is.
"""

from _selectree.plugins import BackendInterface, plugin_manager
from _selectree.plugins.lxml_backend import LxmlBackend
from _selectree.plugins.expat_backend import ExpatBackend


__all__ = (
    BackendInterface.__name__,
    ExpatBackend.__name__,
    LxmlBackend.__name__,
    "plugin_manager",
)
