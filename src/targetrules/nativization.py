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

"""Lookup of the generated plugin holding nativized Blueprint assets."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Final

from targetrules.core.model_types import ConfigHierarchyType, LogComponent, TargetPlatform, TargetType
from targetrules.logging import structured_extra
from targetrules.platforms import capability

if TYPE_CHECKING:
    from targetrules.environment import ResolvedConfiguration
    from targetrules.sources.base import ConfigFileReader

logger: logging.Logger = logging.getLogger("targetrules.nativization")

PACKAGING_SETTINGS_SECTION: Final[str] = "/Script/UnrealEd.ProjectPackagingSettings"
NATIVIZATION_METHOD_KEY: Final[str] = "BlueprintNativizationMethod"
NATIVIZATION_DISABLED: Final[str] = "Disabled"

_NATIVIZED_TYPES: Final[frozenset[TargetType]] = frozenset({TargetType.GAME, TargetType.CLIENT, TargetType.SERVER})


def nativized_plugin_path(project_dir: Path, platform: TargetPlatform, target_type: TargetType) -> Path:
    """Return where the cook writes the nativized assets plugin.

    Windows platforms share one directory; platforms that only cook ``Game``
    data use ``Game`` regardless of the target type.
    """
    record = capability(platform)
    type_dir = target_type.value if record.cooks_per_target_type else TargetType.GAME.value
    return (
        project_dir
        / "Intermediate"
        / "Plugins"
        / "NativizedAssets"
        / record.cooked_name
        / type_dir
        / "NativizedAssets.uplugin"
    )


def find_nativized_plugin(
    config: ResolvedConfiguration,
    reader: ConfigFileReader,
    *,
    exists: Callable[[Path], bool] = Path.is_file,
) -> Path | None:
    """Return the nativized assets plugin for ``config``, if it applies.

    Only Game, Client and Server targets with a project file are considered.
    The project's Game config hierarchy (for the host platform) decides
    whether nativization is enabled.

    Args:
        config: Resolved target configuration.
        reader: Config-file reader.
        exists: File existence check.

    Returns:
        Path of the plugin descriptor, or ``None`` when nativization is off or
        the plugin has not been generated.
    """
    identity = config.identity
    project_dir = identity.project_directory
    target_type = TargetType.from_str(str(config.root.read("Type")))
    if project_dir is None or target_type not in _NATIVIZED_TYPES:
        return None
    method = reader.get(
        ConfigHierarchyType.GAME,
        PACKAGING_SETTINGS_SECTION,
        NATIVIZATION_METHOD_KEY,
        project_dir,
        config.host.platform,
    )
    if method is None or str(method) == NATIVIZATION_DISABLED:
        return None
    plugin = nativized_plugin_path(project_dir, identity.platform, target_type)
    if exists(plugin):
        return plugin
    logger.warning(
        "%s is configured for nativization, but the generated code plugin is missing at %s. "
        "Cook %s data before building the %s target; if no Blueprint assets needed conversion "
        "this warning can be ignored.",
        identity.name,
        plugin,
        target_type,
        identity.platform,
        extra=structured_extra(
            component=LogComponent.NATIVIZATION,
            target=identity.name,
            target_type=target_type,
            platform=identity.platform,
            path=plugin,
        ),
    )
    return None


__all__ = [
    "NATIVIZATION_METHOD_KEY",
    "PACKAGING_SETTINGS_SECTION",
    "find_nativized_plugin",
    "nativized_plugin_path",
]
