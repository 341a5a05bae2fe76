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
A library to query and manipulate HTML and XML trees with chainable selections of
nodes. Start with :func:`load`:

>>> query = load('<ul id="fruits"><li class="apple">Apple</li></ul>')
>>> query("#fruits .apple").text()
'Apple'
"""

from __future__ import annotations

from _selectree.load import Loader, load
from _selectree.options import DEFAULT_OPTIONS, Options, flatten_options
from _selectree.plugins import plugin_manager as _plugin_manager
from _selectree.selection import Selection
from _selectree.static import contains, merge, text
from _selectree.utils import is_selection


# plugin loading


_plugin_manager.load_plugins()


__all__ = (
    "DEFAULT_OPTIONS",
    contains.__name__,
    flatten_options.__name__,
    is_selection.__name__,
    load.__name__,
    Loader.__name__,
    merge.__name__,
    Options.__name__,
    Selection.__name__,
    text.__name__,
)
