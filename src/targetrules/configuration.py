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

"""Mutable per-target configuration store.

A ``MutableConfiguration`` owns one ``ConfigurableGroup`` for the root
``Target`` fields and one per platform extension. Groups keep, for every
stored field, its current value and the ``ValueOrigin`` that wrote it. Fields
with a computed default store an ``Override`` instead of a value and evaluate
their default on every read until an explicit value is recorded.

Writes from resolution layers go through ``set(..., origin=...)`` and are
refused when a higher layer already wrote the field. Plain attribute
assignment (``config.bUseStaticCRT = True``) records an explicit override.
Every write is coerced to the declared field type first; a value that does
not fit raises ``SourceCoercionError`` and leaves the field unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING, Any, cast

from targetrules._internal.coercion import coerce_value
from targetrules._internal.precedence import Unset, outranks
from targetrules.core.model_types import LogComponent, ResolutionStage, ValueOrigin
from targetrules.exceptions import (
    ConfigurationFrozenError,
    CyclicDefaultError,
    IdentityError,
    IncompleteResolutionError,
    TargetRulesTypeError,
    UndeclaredDependencyError,
    UnknownFieldError,
)
from targetrules.fields import DEFAULT_REGISTRY
from targetrules.fields.descriptors import AliasMode, ComputedDefault, IdentityDefault, Override
from targetrules.identity import HostFacts, TargetIdentity
from targetrules.logging import structured_extra

if TYPE_CHECKING:
    from targetrules.core.type_aliases import FieldName, GroupName
    from targetrules.fields.descriptors import FieldDescriptor
    from targetrules.fields.registry import FieldRegistry, GroupSpec

logger: logging.Logger = logging.getLogger("targetrules.configuration")


def freeze_value(value: object) -> object:
    """Return ``value`` with lists converted to tuples for comparison or display."""
    if isinstance(value, list):
        return tuple(cast("list[object]", value))
    return value


class _DependencyReader:
    """Field access handed to computed defaults, limited to declared dependencies.

    The reader carries the chain of computed fields being evaluated by the
    current call, so concurrent readers of one configuration never share it.
    """

    __slots__ = ("_allowed", "_chain", "_group")

    def __init__(self, group: ConfigurableGroup, chain: tuple[str, ...], allowed: Iterable[str]) -> None:
        self._group = group
        self._chain = chain
        self._allowed = frozenset(allowed)

    def __getitem__(self, name: str) -> Any:
        if name not in self._allowed:
            raise UndeclaredDependencyError(self._chain[-1], name)
        # ignore JUSTIFIED: the reader evaluates dependencies on behalf of its group
        return self._group._read(self._group.spec.get(name), self._chain)  # noqa: SLF001


class ConfigurableGroup:
    """Values for one field group of one target."""

    __slots__ = ("_origins", "_owner", "_spec", "_values")

    def __init__(self, spec: GroupSpec, owner: MutableConfiguration) -> None:
        """Create the group with every stored field at its static default.

        Args:
            spec: Field table of the group.
            owner: Configuration that owns the group.
        """
        object.__setattr__(self, "_spec", spec)
        object.__setattr__(self, "_owner", owner)
        object.__setattr__(self, "_values", {})
        object.__setattr__(self, "_origins", {})
        for descriptor in spec.stored_fields():
            self._values[descriptor.name] = self._initial_value(descriptor)
            self._origins[descriptor.name] = ValueOrigin.DEFAULT

    @property
    def spec(self) -> GroupSpec:
        """Field table of the group."""
        return self._spec

    @property
    def name(self) -> GroupName:
        """Group name."""
        return self._spec.name

    @property
    def owner(self) -> MutableConfiguration:
        """Configuration that owns the group."""
        return self._owner

    # Reads

    def get(self, name: str) -> Any:
        """Return the current value of ``name``, logging deprecated use."""
        descriptor = self._spec.get(name)
        if descriptor.is_deprecated:
            self._warn_deprecated(descriptor)
        return self._read(descriptor)

    def read(self, name: str) -> Any:
        """Return the current value of ``name`` without deprecation logging."""
        return self._read(self._spec.get(name))

    def origin(self, name: str) -> ValueOrigin:
        """Return which layer last wrote ``name`` (aliases report their replacement)."""
        descriptor = self._spec.get(name)
        if descriptor.is_alias:
            group, replacement = self._alias_target(descriptor)
            return group.origin(replacement.name)
        return self._origins[descriptor.name]

    def override(self, name: str) -> Override[Any]:
        """Return the override slot of a computed field."""
        descriptor = self._spec.get(name)
        if not descriptor.is_computed:
            msg = f"{self.name}.{name} has no computed default"
            raise TargetRulesTypeError(msg)
        return cast("Override[Any]", self._values[descriptor.name])

    def is_overridden(self, name: str) -> bool:
        """Return whether ``name`` holds an explicit override."""
        descriptor = self._spec.get(name)
        if descriptor.is_computed:
            return self.override(name).is_explicit
        return self.origin(name).is_override

    def snapshot(self) -> dict[FieldName, object]:
        """Return the resolved value of every stored field, lists as tuples."""
        return {descriptor.name: freeze_value(self._read(descriptor)) for descriptor in self._spec.stored_fields()}

    # Writes

    def set(self, name: str, value: object, origin: ValueOrigin = ValueOrigin.EXPLICIT) -> bool:
        """Write ``value`` to ``name`` on behalf of ``origin``.

        Args:
            name: Field name within this group.
            value: New value; coerced to the declared type.
            origin: Layer performing the write.

        Returns:
            ``True`` if the value was stored, ``False`` if a higher layer
            already owns the field or the field is a read-only alias.

        Raises:
            ConfigurationFrozenError: If the configuration is frozen.
            UnknownFieldError: If the group has no such field.
            SourceCoercionError: If ``value`` does not fit the declared type.
        """
        descriptor = self._spec.get(name)
        self._owner.ensure_writable(f"{self.name}.{name}")
        if descriptor.is_deprecated:
            self._warn_deprecated(descriptor)
        if descriptor.is_alias:
            return self._write_alias(descriptor, value, origin)
        return self._store(descriptor, value, origin)

    def extend(
        self,
        name: str,
        items: Iterable[object],
        *,
        origin: ValueOrigin | None = None,
        unique: bool = False,
    ) -> list[object]:
        """Append ``items`` to a list field.

        Args:
            name: List field within this group.
            items: Values to append.
            origin: Layer performing the write; ``None`` keeps the current origin.
            unique: Skip items already present.

        Returns:
            The items actually appended.
        """
        descriptor = self._spec.get(name)
        if not descriptor.is_list:
            msg = f"{self.name}.{name} is not a list field"
            raise TargetRulesTypeError(msg)
        self._owner.ensure_writable(f"{self.name}.{name}")
        if descriptor.is_alias:
            if descriptor.is_deprecated:
                self._warn_deprecated(descriptor)
            group, replacement = self._alias_target(descriptor)
            if cast("Any", descriptor.deprecation).mode is AliasMode.GET_ONLY:
                self._ignore_alias_write(descriptor)
                return []
            return group.extend(replacement.name, items, origin=origin, unique=unique)
        if origin is not None and not outranks(origin, self._origins[descriptor.name]):
            return []
        current = cast("list[object]", self._values[descriptor.name])
        added: list[object] = []
        for item in items:
            if unique and item in current:
                continue
            current.append(item)
            added.append(item)
        if origin is not None and added:
            self._origins[descriptor.name] = origin
        return added

    def clear_override(self, name: str) -> None:
        """Restore ``name`` to its declared default.

        For computed fields this re-enables the default function; for plain
        fields the static default is re-evaluated.
        """
        descriptor = self._spec.get(name)
        self._owner.ensure_writable(f"{self.name}.{name}")
        if descriptor.is_alias:
            group, replacement = self._alias_target(descriptor)
            group.clear_override(replacement.name)
            return
        self._values[descriptor.name] = self._initial_value(descriptor)
        self._origins[descriptor.name] = ValueOrigin.DEFAULT

    # Mapping and attribute protocol

    def __contains__(self, name: object) -> bool:
        return name in self._spec

    def __iter__(self) -> Iterator[FieldName]:
        return iter(self._spec.names)

    def __getitem__(self, name: str) -> Any:
        return self.get(name)

    def __setitem__(self, name: str, value: object) -> None:
        self.set(name, value)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self.get(name)
        except UnknownFieldError:
            msg = f"{self._spec.name} has no field '{name}'"
            raise AttributeError(msg) from None

    def __setattr__(self, name: str, value: object) -> None:
        if name.startswith("_"):
            object.__setattr__(self, name, value)
            return
        self.set(name, value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._spec.name!r}, target={self._owner.name!r})"

    # Internals

    def _initial_value(self, descriptor: FieldDescriptor) -> object:
        rule = descriptor.default
        if isinstance(rule, ComputedDefault):
            return Override.default()
        if isinstance(rule, IdentityDefault):
            return rule.evaluate(self._owner.identity)
        return rule.evaluate()

    def _read(self, descriptor: FieldDescriptor, chain: tuple[str, ...] = ()) -> Any:
        if descriptor.is_alias:
            group, replacement = self._alias_target(descriptor)
            value = group.read(replacement.name)
            deprecation = cast("Any", descriptor.deprecation)
            return deprecation.read(value) if deprecation.read is not None else value
        stored = self._values[descriptor.name]
        if descriptor.is_computed:
            override = cast("Override[Any]", stored)
            return override.resolve(lambda: self._evaluate(descriptor, chain))
        return stored

    def _evaluate(self, descriptor: FieldDescriptor, chain: tuple[str, ...]) -> object:
        rule = cast("ComputedDefault", descriptor.default)
        if descriptor.name in chain:
            raise CyclicDefaultError([*chain, descriptor.name])
        return rule.function(_DependencyReader(self, (*chain, descriptor.name), rule.depends_on))

    def _store(self, descriptor: FieldDescriptor, value: object, origin: ValueOrigin) -> bool:
        value = self._coerce(descriptor, value, origin)
        current = self._origins[descriptor.name]
        if not outranks(origin, current):
            logger.debug(
                "Keeping %s value of %s.%s; %s write refused",
                current,
                self.name,
                descriptor.name,
                origin,
                extra=structured_extra(
                    component=LogComponent.CONFIGURATION,
                    target=self._owner.name,
                    group=self.name,
                    field=descriptor.name,
                    origin=origin,
                ),
            )
            return False
        if descriptor.is_computed:
            marker = descriptor.default_marker
            if not isinstance(marker, Unset) and value == marker:
                self._values[descriptor.name] = Override.default()
                self._origins[descriptor.name] = ValueOrigin.DEFAULT
                return True
            self._values[descriptor.name] = Override.explicit(value)
        else:
            self._values[descriptor.name] = value
        self._origins[descriptor.name] = origin
        return True

    def _write_alias(self, descriptor: FieldDescriptor, value: object, origin: ValueOrigin) -> bool:
        deprecation = cast("Any", descriptor.deprecation)
        if deprecation.mode is AliasMode.GET_ONLY:
            self._ignore_alias_write(descriptor)
            return False
        group, replacement = self._alias_target(descriptor)
        value = self._coerce(descriptor, value, origin)
        converted = deprecation.write(value) if deprecation.write is not None else value
        return group._store(replacement, converted, origin)

    def _coerce(self, descriptor: FieldDescriptor, value: object, origin: ValueOrigin) -> object:
        return coerce_value(descriptor.value_type, value, field=f"{self.name}.{descriptor.name}", source=origin)

    def _alias_target(self, descriptor: FieldDescriptor) -> tuple[ConfigurableGroup, FieldDescriptor]:
        deprecation = cast("Any", descriptor.deprecation)
        group = self._owner.group(deprecation.group) if deprecation.group else self
        return group, group.spec.get(deprecation.replacement)

    def _ignore_alias_write(self, descriptor: FieldDescriptor) -> None:
        logger.warning(
            "Ignoring write to read-only field %s.%s",
            self.name,
            descriptor.name,
            extra=structured_extra(
                component=LogComponent.CONFIGURATION,
                target=self._owner.name,
                group=self.name,
                field=descriptor.name,
            ),
        )

    def _warn_deprecated(self, descriptor: FieldDescriptor) -> None:
        message = cast("Any", descriptor.deprecation).message
        logger.warning(
            "%s (target %s)",
            message,
            self._owner.name,
            extra=structured_extra(
                component=LogComponent.CONFIGURATION,
                target=self._owner.name,
                group=self.name,
                field=descriptor.name,
            ),
        )


class MutableConfiguration:
    """Resolved field values for one target.

    Root fields are reachable as attributes (``config.LinkType``) and platform
    groups by name (``config.IOSPlatform.bStripSymbols``). Qualified names
    such as ``"IOSPlatform.bStripSymbols"`` work with ``get``/``set`` and
    item access.
    """

    __slots__ = ("_groups", "_host", "_identity", "_registry", "_stage")

    def __init__(
        self,
        identity: TargetIdentity,
        *,
        host: HostFacts | None = None,
        registry: FieldRegistry | None = None,
    ) -> None:
        """Create a configuration with every field at its static default.

        Args:
            identity: Validated target identity.
            host: Process-wide host facts; detected when omitted.
            registry: Field registry; the built-in registry when omitted.

        Raises:
            IdentityError: If ``identity`` is not a ``TargetIdentity``.
        """
        if not isinstance(identity, TargetIdentity):
            raise IdentityError("identity", f"must be a TargetIdentity (got {type(identity).__name__})")
        object.__setattr__(self, "_identity", identity)
        object.__setattr__(self, "_host", host if host is not None else HostFacts.detect())
        object.__setattr__(self, "_registry", registry if registry is not None else DEFAULT_REGISTRY)
        object.__setattr__(self, "_stage", ResolutionStage.PENDING)
        groups = {spec.name: ConfigurableGroup(spec, self) for spec in self._registry.groups}
        object.__setattr__(self, "_groups", groups)

    @property
    def identity(self) -> TargetIdentity:
        """Identity of the target."""
        return self._identity

    @property
    def name(self) -> str:
        """Target name."""
        return self._identity.name

    @property
    def host(self) -> HostFacts:
        """Host facts captured for this resolution."""
        return self._host

    @property
    def registry(self) -> FieldRegistry:
        """Field registry backing this configuration."""
        return self._registry

    @property
    def stage(self) -> ResolutionStage:
        """Current lifecycle stage."""
        return self._stage

    @property
    def is_frozen(self) -> bool:
        """Whether writes are rejected."""
        return self._stage is ResolutionStage.FROZEN

    @property
    def root(self) -> ConfigurableGroup:
        """The root ``Target`` group."""
        return self._groups[self._registry.root.name]

    @property
    def groups(self) -> tuple[ConfigurableGroup, ...]:
        """All groups, root first, in registry order."""
        return tuple(self._groups.values())

    @property
    def platform_groups(self) -> tuple[ConfigurableGroup, ...]:
        """Platform extension groups in registry order."""
        return self.groups[1:]

    def group(self, name: str) -> ConfigurableGroup:
        """Return the group called ``name``."""
        try:
            return self._groups[name]
        except KeyError:
            raise UnknownFieldError(name, "configuration") from None

    def get(self, qualified: str) -> Any:
        """Return the value of ``Field`` or ``Group.Field``."""
        group, field = self._split(qualified)
        return group.get(field)

    def set(self, qualified: str, value: object, origin: ValueOrigin = ValueOrigin.EXPLICIT) -> bool:
        """Write ``Field`` or ``Group.Field``; see ``ConfigurableGroup.set``."""
        group, field = self._split(qualified)
        return group.set(field, value, origin)

    def origin(self, qualified: str) -> ValueOrigin:
        """Return the origin of ``Field`` or ``Group.Field``."""
        group, field = self._split(qualified)
        return group.origin(field)

    def clear_override(self, qualified: str) -> None:
        """Restore ``Field`` or ``Group.Field`` to its declared default."""
        group, field = self._split(qualified)
        group.clear_override(field)

    def snapshot(self) -> dict[GroupName, dict[FieldName, object]]:
        """Return resolved values of every group, keyed by group name."""
        return {group.name: group.snapshot() for group in self.groups}

    def advance(self, stage: ResolutionStage) -> None:
        """Move the lifecycle forward to ``stage``; earlier stages are ignored."""
        if self.is_frozen:
            return
        if stage.at_least(self._stage):
            object.__setattr__(self, "_stage", stage)

    def freeze(self) -> None:
        """Reject all further writes.

        Raises:
            IncompleteResolutionError: If the configuration was never resolved.
        """
        self.require_stage(ResolutionStage.RESOLVED)
        object.__setattr__(self, "_stage", ResolutionStage.FROZEN)

    def require_stage(self, required: ResolutionStage) -> None:
        """Raise unless the configuration reached ``required``."""
        if not self._stage.at_least(required):
            raise IncompleteResolutionError(self.name, self._stage, required)

    def ensure_writable(self, field: str) -> None:
        """Raise ``ConfigurationFrozenError`` if the configuration is frozen."""
        if self.is_frozen:
            raise ConfigurationFrozenError(self.name, field)

    def _split(self, qualified: str) -> tuple[ConfigurableGroup, str]:
        group_name, _, field = qualified.rpartition(".")
        return (self.group(group_name) if group_name else self.root), field

    def __getitem__(self, qualified: str) -> Any:
        return self.get(qualified)

    def __setitem__(self, qualified: str, value: object) -> None:
        self.set(qualified, value)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        groups = cast("dict[str, ConfigurableGroup]", object.__getattribute__(self, "_groups"))
        if name in groups:
            return groups[name]
        try:
            return self.root.get(name)
        except UnknownFieldError:
            msg = f"Configuration has no field or group '{name}'"
            raise AttributeError(msg) from None

    def __setattr__(self, name: str, value: object) -> None:
        if name.startswith("_"):
            object.__setattr__(self, name, value)
            return
        self.root.set(name, value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(target={self.name!r}, stage={self._stage.value!r})"


__all__ = ["ConfigurableGroup", "MutableConfiguration", "freeze_value"]
