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

"""Target-type presets.

Every target type except ``Program`` forces a bundle of settings once
resolution is done. Preset writes are unconditional and recorded with the
``PRESET`` origin. Applying a preset twice leaves the configuration unchanged:
scalar assignments are repeated with the same values and global definitions
are only appended when missing.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Final

from targetrules.core.model_types import LogComponent, ResolutionStage, TargetLinkType, TargetType, ValueOrigin
from targetrules.logging import structured_extra

if TYPE_CHECKING:
    from targetrules.configuration import MutableConfiguration

logger: logging.Logger = logging.getLogger("targetrules.presets")


@dataclass(slots=True, frozen=True)
class PresetBundle:
    """Settings forced for one target type.

    Attributes:
        assignments: Field values to force, keyed by root field name.
        global_definitions: Definitions appended to ``GlobalDefinitions``.
        exports_follow_link_type: Set ``bHasExports`` from ``LinkType == Modular``.
    """

    assignments: Mapping[str, object]
    global_definitions: tuple[str, ...] = ()
    exports_follow_link_type: bool = True


PRESET_BUNDLES: Final[Mapping[TargetType, PresetBundle]] = MappingProxyType(
    {
        TargetType.GAME: PresetBundle(
            MappingProxyType(
                {
                    "bBuildWithEditorOnlyData": False,
                    "bBuildRequiresCookedData": True,
                    "bCompileAgainstEngine": True,
                },
            ),
            ("UE_GAME=1",),
        ),
        TargetType.CLIENT: PresetBundle(
            MappingProxyType(
                {
                    "bBuildWithEditorOnlyData": False,
                    "bBuildRequiresCookedData": True,
                    "bCompileAgainstEngine": True,
                    "bWithServerCode": False,
                },
            ),
            ("UE_GAME=1",),
        ),
        TargetType.EDITOR: PresetBundle(
            MappingProxyType(
                {
                    "bBuildWithEditorOnlyData": True,
                    "bBuildRequiresCookedData": False,
                    "bCompileAgainstEngine": True,
                    "bWithPerfCounters": True,
                    "bIncludePluginsForTargetPlatforms": True,
                },
            ),
            ("UE_EDITOR=1",),
        ),
        TargetType.SERVER: PresetBundle(
            MappingProxyType(
                {
                    "bBuildWithEditorOnlyData": False,
                    "bBuildRequiresCookedData": True,
                    "bCompileAgainstEngine": True,
                    "bWithPerfCounters": True,
                },
            ),
            ("UE_SERVER=1", "USE_NULL_RHI=1"),
        ),
    },
)


class TargetTypePresetApplier:
    """Applies target-type preset bundles."""

    def __init__(self, bundles: Mapping[TargetType, PresetBundle] | None = None) -> None:
        self._bundles = bundles if bundles is not None else PRESET_BUNDLES

    def apply(self, config: MutableConfiguration, target_type: TargetType | None = None) -> MutableConfiguration:
        """Apply the preset for ``target_type`` to ``config``.

        Args:
            config: Resolved configuration.
            target_type: Type whose bundle to apply; defaults to the
                configuration's ``Type``. A different type is written to
                ``Type`` first.

        Returns:
            ``config``, advanced to ``PRESET_APPLIED``.

        Raises:
            IncompleteResolutionError: If ``config`` was never resolved.
            ConfigurationFrozenError: If ``config`` is frozen.
        """
        config.require_stage(ResolutionStage.RESOLVED)
        root = config.root
        if target_type is None:
            target_type = TargetType.from_str(str(root.read("Type")))
        elif root.read("Type") != target_type:
            root.set("Type", target_type, ValueOrigin.PRESET)

        bundle = self._bundles.get(target_type)
        if bundle is not None:
            for name, value in bundle.assignments.items():
                root.set(name, value, ValueOrigin.PRESET)
            if bundle.exports_follow_link_type:
                root.set("bHasExports", root.read("LinkType") == TargetLinkType.MODULAR, ValueOrigin.PRESET)
            root.extend("GlobalDefinitions", bundle.global_definitions, origin=ValueOrigin.PRESET, unique=True)

        config.advance(ResolutionStage.PRESET_APPLIED)
        logger.debug(
            "Applied %s preset to %s",
            target_type,
            config.name,
            extra=structured_extra(
                component=LogComponent.PRESETS,
                target=config.name,
                target_type=target_type,
                details={"assignments": sorted(bundle.assignments) if bundle else []},
            ),
        )
        return config


__all__ = ["PRESET_BUNDLES", "PresetBundle", "TargetTypePresetApplier"]
