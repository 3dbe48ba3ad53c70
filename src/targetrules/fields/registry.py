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

"""Field registry: the ordered tables of configurable fields.

The registry holds the root ``Target`` group and one group per platform
extension. It is built once at import time and validated up front so that
broken tables (duplicate names, dangling aliases, cyclic computed defaults)
fail immediately rather than during a build.
"""

from __future__ import annotations

import graphlib
import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from targetrules.core.model_types import LogComponent
from targetrules.core.type_aliases import ROOT_GROUP, FieldName, GroupName
from targetrules.exceptions import FieldRegistryError, UnknownFieldError
from targetrules.fields.descriptors import ComputedDefault
from targetrules.logging import structured_extra

if TYPE_CHECKING:
    from targetrules.core.model_types import TargetPlatform
    from targetrules.fields.descriptors import FieldDescriptor

logger: logging.Logger = logging.getLogger("targetrules.registry")


def _empty_index() -> dict[str, FieldDescriptor]:
    return {}


@dataclass(slots=True, frozen=True)
class GroupSpec:
    """Ordered table of descriptors forming one configurable object.

    Attributes:
        name: Group name, e.g. ``Target`` or ``IOSPlatform``.
        fields: Descriptors in declaration order.
        platform: Platform the group extends, ``None`` for the root group.
    """

    name: GroupName
    fields: tuple[FieldDescriptor, ...]
    platform: TargetPlatform | None = None
    _index: dict[str, FieldDescriptor] = field(default_factory=_empty_index, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        for descriptor in self.fields:
            if descriptor.name in self._index:
                msg = f"Duplicate field '{descriptor.name}' in {self.name}"
                raise FieldRegistryError(msg)
            self._index[descriptor.name] = descriptor

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __iter__(self) -> Iterator[FieldDescriptor]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def get(self, name: str) -> FieldDescriptor:
        """Return the descriptor for ``name``.

        Raises:
            UnknownFieldError: If the group has no such field.
        """
        try:
            return self._index[name]
        except KeyError:
            raise UnknownFieldError(name, self.name) from None

    @property
    def names(self) -> tuple[FieldName, ...]:
        """Field names in declaration order."""
        return tuple(descriptor.name for descriptor in self.fields)

    def stored_fields(self) -> tuple[FieldDescriptor, ...]:
        """Descriptors that own storage (everything except forwarding aliases)."""
        return tuple(descriptor for descriptor in self.fields if not descriptor.is_alias)

    def environment_sensitive(self) -> tuple[FieldDescriptor, ...]:
        """Stored descriptors tagged ``EnvironmentSensitive``."""
        return tuple(descriptor for descriptor in self.stored_fields() if descriptor.is_environment_sensitive)


class FieldRegistry:
    """Root field group plus platform extension groups."""

    def __init__(self, root: GroupSpec, platform_groups: Sequence[GroupSpec] = ()) -> None:
        """Build and validate a registry.

        Args:
            root: Root ``Target`` group.
            platform_groups: Platform extension groups in resolution order.

        Raises:
            FieldRegistryError: If any table is inconsistent.
        """
        self._root = root
        self._platform_groups = tuple(platform_groups)
        self._groups: dict[str, GroupSpec] = {}
        for group in (root, *self._platform_groups):
            if group.name in self._groups:
                msg = f"Duplicate group '{group.name}'"
                raise FieldRegistryError(msg)
            self._groups[group.name] = group
        for group in self.groups:
            self._validate_group(group)
        logger.debug(
            "Field registry built with %d groups",
            len(self._groups),
            extra=structured_extra(component=LogComponent.REGISTRY, details={"groups": list(self._groups)}),
        )

    @property
    def root(self) -> GroupSpec:
        """The root ``Target`` group."""
        return self._root

    @property
    def platform_groups(self) -> tuple[GroupSpec, ...]:
        """Platform extension groups in resolution order."""
        return self._platform_groups

    @property
    def groups(self) -> tuple[GroupSpec, ...]:
        """All groups, root first."""
        return (self._root, *self._platform_groups)

    def group(self, name: str) -> GroupSpec:
        """Return the group called ``name``.

        Raises:
            UnknownFieldError: If no such group is registered.
        """
        try:
            return self._groups[name]
        except KeyError:
            raise UnknownFieldError(name, "registry") from None

    def lookup(self, qualified: str) -> tuple[GroupSpec, FieldDescriptor]:
        """Resolve ``Field`` or ``Group.Field`` to its group and descriptor."""
        group_name, _, field_name = qualified.rpartition(".")
        group = self.group(group_name) if group_name else self._root
        return group, group.get(field_name)

    def _validate_group(self, group: GroupSpec) -> None:
        flags: dict[str, str] = {}
        graph: dict[str, set[str]] = {}
        for descriptor in group:
            for binding in descriptor.command_line:
                owner = flags.setdefault(binding.flag.lower(), descriptor.name)
                if owner != descriptor.name:
                    msg = f"Flag '{binding.flag}' bound to both '{owner}' and '{descriptor.name}' in {group.name}"
                    raise FieldRegistryError(msg)
            if descriptor.deprecation is not None and descriptor.is_alias:
                self._validate_alias(group, descriptor)
            if isinstance(descriptor.default, ComputedDefault):
                for dependency in descriptor.default.depends_on:
                    if dependency not in group:
                        msg = f"Computed field '{descriptor.name}' depends on unknown field '{dependency}'"
                        raise FieldRegistryError(msg)
                    if group.get(dependency).is_alias:
                        msg = f"Computed field '{descriptor.name}' depends on alias '{dependency}'"
                        raise FieldRegistryError(msg)
                graph[descriptor.name] = set(descriptor.default.depends_on)
        try:
            graphlib.TopologicalSorter(graph).prepare()
        except graphlib.CycleError as exc:
            chain = " -> ".join(str(node) for node in exc.args[1])
            msg = f"Cyclic computed defaults in {group.name}: {chain}"
            raise FieldRegistryError(msg) from exc

    def _validate_alias(self, group: GroupSpec, descriptor: FieldDescriptor) -> None:
        deprecation = descriptor.deprecation
        if deprecation is None or deprecation.replacement is None:
            msg = f"Alias '{descriptor.name}' in {group.name} has no replacement"
            raise FieldRegistryError(msg)
        target_group = self._groups.get(deprecation.group or group.name)
        if target_group is None or deprecation.replacement not in target_group:
            msg = f"Alias '{descriptor.name}' forwards to unknown field '{deprecation.replacement}'"
            raise FieldRegistryError(msg)
        if target_group.get(deprecation.replacement).is_alias:
            msg = f"Alias '{descriptor.name}' forwards to another alias"
            raise FieldRegistryError(msg)


__all__ = ["ROOT_GROUP", "FieldRegistry", "GroupSpec"]
