# Copyright 2025 CrownOps Engineering
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Typing helpers that moved into the stdlib after Python 3.10.

Names come from ``typing`` when the interpreter has them and from
``typing_extensions`` otherwise; type checkers always see the
``typing_extensions`` versions.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing_extensions import Self, TypedDict, Unpack, override
else:
    try:
        from typing import TypedDict, override  # py>=3.12
    except ImportError:
        from typing_extensions import TypedDict, override

    try:
        from typing import Self, Unpack  # py>=3.11
    except ImportError:  # py<3.11
        from typing_extensions import Self, Unpack

__all__ = ["Self", "TypedDict", "Unpack", "override"]
