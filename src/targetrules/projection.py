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

# ignore JUSTIFIED: identity accessors follow the PascalCase field naming of target settings
# ruff: noqa: N802

"""Read-only projection of a resolved configuration.

``ReadOnlyProjector.project`` wraps a ``MutableConfiguration`` in an
``ImmutableConfiguration``. The projection holds no values of its own: every
read goes to the backing configuration at call time, so it reflects any write
made before the configuration was frozen. List fields are returned as tuples
built at call time. Deprecated aliases forward to the current value of their
replacement. Every write path raises ``ReadOnlyConfigurationError``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING, Any, NoReturn

from targetrules.configuration import freeze_value
from targetrules.core.model_types import (
    LogComponent,
    PlatformGroup,
    ResolutionStage,
    TargetConfiguration,
    TargetPlatform,
    TargetType,
    ValueOrigin,
)
from targetrules.exceptions import ReadOnlyConfigurationError, UnknownFieldError
from targetrules.logging import structured_extra
from targetrules.platforms import is_platform_in_group, supported_platforms

if TYPE_CHECKING:
    from pathlib import Path

    from targetrules.configuration import ConfigurableGroup, MutableConfiguration
    from targetrules.core.type_aliases import FieldName, GroupName
    from targetrules.fields.registry import FieldRegistry, GroupSpec
    from targetrules.identity import BuildVersion, HostFacts, TargetIdentity

logger: logging.Logger = logging.getLogger("targetrules.projection")


class ImmutableGroup:
    """Read-only view of one field group."""

    __slots__ = ("_group",)

    def __init__(self, group: ConfigurableGroup) -> None:
        object.__setattr__(self, "_group", group)

    @property
    def name(self) -> GroupName:
        """Group name."""
        return self._group.name

    @property
    def spec(self) -> GroupSpec:
        """Field table of the group."""
        return self._group.spec

    def get(self, name: str) -> Any:
        """Return the current value of ``name``, logging deprecated use."""
        return freeze_value(self._group.get(name))

    def read(self, name: str) -> Any:
        """Return the current value of ``name`` without deprecation logging."""
        return freeze_value(self._group.read(name))

    def origin(self, name: str) -> ValueOrigin:
        """Return which layer wrote ``name``."""
        return self._group.origin(name)

    def snapshot(self) -> dict[FieldName, object]:
        """Return the current value of every stored field."""
        return self._group.snapshot()

    def __contains__(self, name: object) -> bool:
        return name in self._group

    def __iter__(self) -> Iterator[FieldName]:
        return iter(self._group)

    def __getitem__(self, name: str) -> Any:
        return self.get(name)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self.get(name)
        except UnknownFieldError:
            msg = f"{self._group.name} has no field '{name}'"
            raise AttributeError(msg) from None

    def __setattr__(self, name: str, value: object) -> NoReturn:
        raise ReadOnlyConfigurationError(name)

    def __delattr__(self, name: str) -> NoReturn:
        raise ReadOnlyConfigurationError(name)

    def __setitem__(self, name: str, value: object) -> NoReturn:
        raise ReadOnlyConfigurationError(name)

    def __delitem__(self, name: str) -> NoReturn:
        raise ReadOnlyConfigurationError(name)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._group.name!r})"


class ImmutableConfiguration:
    """Read-only view of a target configuration.

    Root fields are attributes (``projection.LinkType``); platform groups are
    ``ImmutableGroup`` attributes (``projection.IOSPlatform``). Identity and
    host facts are exposed under their conventional names.
    """

    __slots__ = ("_config", "_groups")

    def __init__(self, config: MutableConfiguration) -> None:
        object.__setattr__(self, "_config", config)
        object.__setattr__(self, "_groups", {group.name: ImmutableGroup(group) for group in config.groups})

    # Identity and host facts

    @property
    def identity(self) -> TargetIdentity:
        """Identity of the target."""
        return self._config.identity

    @property
    def host(self) -> HostFacts:
        """Host facts captured for the resolution."""
        return self._config.host

    @property
    def registry(self) -> FieldRegistry:
        """Field registry backing the configuration."""
        return self._config.registry

    @property
    def stage(self) -> ResolutionStage:
        """Lifecycle stage of the backing configuration."""
        return self._config.stage

    @property
    def name(self) -> str:
        """Target name."""
        return self._config.name

    @property
    def Name(self) -> str:
        """Target name."""
        return self._config.identity.name

    @property
    def Platform(self) -> TargetPlatform:
        """Platform being built."""
        return self._config.identity.platform

    @property
    def Configuration(self) -> TargetConfiguration:
        """Build configuration."""
        return self._config.identity.configuration

    @property
    def Architecture(self) -> str:
        """Architecture, empty for the default."""
        return self._config.identity.architecture

    @property
    def ProjectFile(self) -> Path | None:
        """Project file, if any."""
        return self._config.identity.project_file

    @property
    def Version(self) -> BuildVersion:
        """Engine build version."""
        return self._config.identity.version

    @property
    def HostPlatform(self) -> TargetPlatform:
        """Platform of the machine running the build."""
        return self._config.host.platform

    @property
    def bIsEngineInstalled(self) -> bool:
        """Whether the engine is an installed build."""
        return self._config.host.engine_installed

    @property
    def bGenerateProjectFiles(self) -> bool:
        """Whether project files are being generated."""
        return self._config.host.generating_project_files

    def is_in_platform_group(self, group: PlatformGroup) -> bool:
        """Return whether the target platform belongs to ``group``."""
        return is_platform_in_group(self._config.identity.platform, group)

    def supported_platforms(self, declared: Iterable[TargetPlatform] | None = None) -> tuple[TargetPlatform, ...]:
        """Return the platforms the target supports; see ``platforms.supported_platforms``."""
        return supported_platforms(TargetType.from_str(str(self.root.read("Type"))), declared)

    # Field access

    @property
    def root(self) -> ImmutableGroup:
        """The root ``Target`` group."""
        return self._groups[self._config.root.name]

    @property
    def groups(self) -> tuple[ImmutableGroup, ...]:
        """All groups, root first."""
        return tuple(self._groups.values())

    def group(self, name: str) -> ImmutableGroup:
        """Return the view of group ``name``."""
        try:
            return self._groups[name]
        except KeyError:
            raise UnknownFieldError(name, "configuration") from None

    def get(self, qualified: str) -> Any:
        """Return the value of ``Field`` or ``Group.Field``."""
        group_name, _, field = qualified.rpartition(".")
        return (self.group(group_name) if group_name else self.root).get(field)

    def origin(self, qualified: str) -> ValueOrigin:
        """Return the origin of ``Field`` or ``Group.Field``."""
        return self._config.origin(qualified)

    def snapshot(self) -> dict[GroupName, dict[FieldName, object]]:
        """Return the current values of every group."""
        return self._config.snapshot()

    def __getitem__(self, qualified: str) -> Any:
        return self.get(qualified)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        groups = object.__getattribute__(self, "_groups")
        if name in groups:
            return groups[name]
        try:
            return self.root.get(name)
        except UnknownFieldError:
            msg = f"Configuration has no field or group '{name}'"
            raise AttributeError(msg) from None

    def __setattr__(self, name: str, value: object) -> NoReturn:
        raise ReadOnlyConfigurationError(name)

    def __delattr__(self, name: str) -> NoReturn:
        raise ReadOnlyConfigurationError(name)

    def __setitem__(self, name: str, value: object) -> NoReturn:
        raise ReadOnlyConfigurationError(name)

    def __delitem__(self, name: str) -> NoReturn:
        raise ReadOnlyConfigurationError(name)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(target={self._config.name!r})"


class ReadOnlyProjector:
    """Builds read-only projections."""

    def project(self, config: MutableConfiguration) -> ImmutableConfiguration:
        """Return a live read-only view of ``config``.

        Raises:
            IncompleteResolutionError: If ``config`` was never resolved.
        """
        config.require_stage(ResolutionStage.RESOLVED)
        logger.debug(
            "Projected %s at stage %s",
            config.name,
            config.stage,
            extra=structured_extra(component=LogComponent.PROJECTION, target=config.name),
        )
        return ImmutableConfiguration(config)


__all__ = ["ImmutableConfiguration", "ImmutableGroup", "ReadOnlyProjector"]
