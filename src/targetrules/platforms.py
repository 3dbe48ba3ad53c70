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

"""Platform capability table.

Each platform has one ``PlatformCapability`` record: the platform groups it
belongs to, the platform classes it is part of, and the naming used for
cooked output. Lookups are plain table reads.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Final

from targetrules.core.model_types import PlatformClass, PlatformGroup, TargetPlatform, TargetType


@dataclass(slots=True, frozen=True)
class PlatformCapability:
    """Capabilities of one platform.

    Attributes:
        platform: Platform described by the record.
        groups: Platform groups the platform belongs to.
        classes: Platform classes the platform belongs to.
        cooked_name: Directory name used for cooked output.
        cooks_per_target_type: Whether cooked output is split per target
            type; other platforms only cook ``Game`` data.
    """

    platform: TargetPlatform
    groups: frozenset[PlatformGroup]
    classes: frozenset[PlatformClass]
    cooked_name: str
    cooks_per_target_type: bool = False


def _record(
    platform: TargetPlatform,
    groups: Iterable[PlatformGroup],
    classes: Iterable[PlatformClass] = (),
    *,
    cooked_name: str | None = None,
    desktop: bool = False,
) -> PlatformCapability:
    return PlatformCapability(
        platform=platform,
        groups=frozenset(groups),
        classes=frozenset({PlatformClass.ALL, *classes}),
        cooked_name=cooked_name or platform.value,
        cooks_per_target_type=desktop,
    )


_DESKTOP_EDITOR = (PlatformClass.DESKTOP, PlatformClass.EDITOR, PlatformClass.SERVER)

PLATFORM_CAPABILITIES: Final[Mapping[TargetPlatform, PlatformCapability]] = MappingProxyType(
    {
        record.platform: record
        for record in (
            _record(
                TargetPlatform.WIN32,
                (PlatformGroup.WINDOWS, PlatformGroup.MICROSOFT, PlatformGroup.DESKTOP),
                (PlatformClass.DESKTOP, PlatformClass.SERVER),
                cooked_name="Windows",
                desktop=True,
            ),
            _record(
                TargetPlatform.WIN64,
                (PlatformGroup.WINDOWS, PlatformGroup.MICROSOFT, PlatformGroup.DESKTOP),
                _DESKTOP_EDITOR,
                cooked_name="Windows",
                desktop=True,
            ),
            _record(
                TargetPlatform.MAC,
                (PlatformGroup.APPLE, PlatformGroup.UNIX, PlatformGroup.DESKTOP),
                _DESKTOP_EDITOR,
                desktop=True,
            ),
            _record(
                TargetPlatform.LINUX,
                (PlatformGroup.UNIX, PlatformGroup.LINUX, PlatformGroup.DESKTOP),
                _DESKTOP_EDITOR,
                desktop=True,
            ),
            _record(TargetPlatform.XBOX_ONE, (PlatformGroup.MICROSOFT, PlatformGroup.CONSOLE)),
            _record(TargetPlatform.PS4, (PlatformGroup.SONY, PlatformGroup.CONSOLE)),
            _record(TargetPlatform.SWITCH, (PlatformGroup.CONSOLE,)),
            _record(TargetPlatform.IOS, (PlatformGroup.APPLE, PlatformGroup.IOS, PlatformGroup.MOBILE)),
            _record(TargetPlatform.TVOS, (PlatformGroup.APPLE, PlatformGroup.IOS, PlatformGroup.MOBILE)),
            _record(TargetPlatform.ANDROID, (PlatformGroup.ANDROID, PlatformGroup.MOBILE)),
            _record(TargetPlatform.LUMIN, (PlatformGroup.ANDROID, PlatformGroup.MOBILE)),
            _record(TargetPlatform.HTML5, ()),
        )
    },
)

PLATFORM_GROUPS: Final[Mapping[PlatformGroup, frozenset[TargetPlatform]]] = MappingProxyType(
    {
        group: frozenset(record.platform for record in PLATFORM_CAPABILITIES.values() if group in record.groups)
        for group in PlatformGroup
    },
)


def capability(platform: TargetPlatform) -> PlatformCapability:
    """Return the capability record for ``platform``.

    Raises:
        KeyError: For ``TargetPlatform.UNKNOWN``.
    """
    return PLATFORM_CAPABILITIES[platform]


def is_platform_in_group(platform: TargetPlatform, group: PlatformGroup) -> bool:
    """Return whether ``platform`` belongs to ``group``."""
    return platform in PLATFORM_GROUPS[group]


def platforms_in_class(platform_class: PlatformClass) -> tuple[TargetPlatform, ...]:
    """Return the platforms of ``platform_class`` in declaration order."""
    return tuple(platform for platform, record in PLATFORM_CAPABILITIES.items() if platform_class in record.classes)


_DEFAULT_CLASS_BY_TYPE: Final[Mapping[TargetType, PlatformClass]] = MappingProxyType(
    {TargetType.PROGRAM: PlatformClass.DESKTOP, TargetType.EDITOR: PlatformClass.EDITOR},
)


def supported_platforms(
    target_type: TargetType,
    declared: Iterable[TargetPlatform] | None = None,
) -> tuple[TargetPlatform, ...]:
    """Return the platforms a target can be built for.

    Args:
        target_type: Type of the target.
        declared: Explicit list of supported platforms, if the target declares one.

    Returns:
        The declared platforms without duplicates, or the default class for
        the target type: Desktop for programs, Editor for editors, All otherwise.
    """
    if declared is not None:
        return tuple(dict.fromkeys(declared))
    return platforms_in_class(_DEFAULT_CLASS_BY_TYPE.get(target_type, PlatformClass.ALL))


__all__ = [
    "PLATFORM_CAPABILITIES",
    "PLATFORM_GROUPS",
    "PlatformCapability",
    "capability",
    "is_platform_in_group",
    "platforms_in_class",
    "supported_platforms",
]
