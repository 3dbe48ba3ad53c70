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

"""Precedence between configuration layers.

Resolution layers rank command line > platform reset hook > config file >
default; explicit caller writes and presets always apply. ``UNSET``
marks "this layer supplied nothing", since ``None`` is a legitimate value for
several optional fields.
"""

from __future__ import annotations

import enum
from typing import Final

from targetrules.core.model_types import ValueOrigin


class Unset(enum.Enum):
    """Sentinel type for layers that supplied no value."""

    UNSET = enum.auto()

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Final = Unset.UNSET


def outranks(candidate: ValueOrigin, current: ValueOrigin) -> bool:
    """Return whether a write from ``candidate`` may replace a ``current`` value.

    Explicit caller assignments and presets always apply. Resolution layers
    only replace values from the same or a lower layer.

    Args:
        candidate: Origin of the incoming write.
        current: Origin of the stored value.

    Returns:
        ``True`` when the write should be applied.
    """
    if candidate in {ValueOrigin.EXPLICIT, ValueOrigin.PRESET}:
        return True
    return candidate.rank >= current.rank


__all__ = ["UNSET", "Unset", "outranks"]
