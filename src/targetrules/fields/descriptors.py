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

"""Declarative metadata for configurable fields.

Each configurable field is described once by a ``FieldDescriptor``: its type,
how its default is produced, whether it must match across a shared build
environment, which config-file keys and command-line flags populate it, and
whether it is a deprecated alias of another field. Resolution, projection and
validation are all driven from these descriptors; nothing inspects classes at
runtime.

Defaults come in three shapes:

- ``Constant``: a fixed value (lists are copied per configuration).
- ``IdentityDefault``: a pure function of the ``TargetIdentity``, evaluated
  once when static defaults are applied.
- ``ComputedDefault``: a pure function of other resolved fields, evaluated on
  every read unless an explicit ``Override`` is recorded.
"""

from __future__ import annotations

import copy
import typing
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Generic, Protocol, TypeVar

from targetrules._internal.precedence import UNSET, Unset
from targetrules.compat import StrEnum
from targetrules.core.model_types import ConfigHierarchyType, ConsistencyTag
from targetrules.core.type_aliases import FieldName, GroupName

if TYPE_CHECKING:
    from targetrules.identity import TargetIdentity

T = TypeVar("T")

BUILD_SETTINGS_SECTION = "/Script/BuildSettings.BuildSettings"
BUILD_CONFIGURATION_SECTION = "BuildConfiguration"


class FieldReader(Protocol):
    """Read access to resolved field values, as seen by computed defaults."""

    def __getitem__(self, name: str) -> Any: ...


@dataclass(slots=True, frozen=True)
class Constant:
    """Fixed default value."""

    value: object = None

    def evaluate(self) -> object:
        """Return a fresh copy of the default value."""
        if isinstance(self.value, (list, dict, set)):
            return copy.deepcopy(self.value)
        return self.value


@dataclass(slots=True, frozen=True)
class IdentityDefault:
    """Default derived from the target identity."""

    function: Callable[[TargetIdentity], object]

    def evaluate(self, identity: TargetIdentity) -> object:
        """Evaluate the default for ``identity``."""
        return self.function(identity)


@dataclass(slots=True, frozen=True)
class ComputedDefault:
    """Default computed from other fields of the same group.

    Attributes:
        function: Pure function reading only ``depends_on`` fields.
        depends_on: Names of the fields the function reads.
    """

    function: Callable[[FieldReader], object]
    depends_on: tuple[str, ...] = ()


DefaultRule = Constant | IdentityDefault | ComputedDefault


@dataclass(slots=True, frozen=True)
class Override(Generic[T]):
    """Optional explicit value shadowing a computed default.

    An ``Override`` is either ``Override.default()`` (no explicit value, read
    the computed default) or ``Override.explicit(value)``.
    """

    is_explicit: bool = False
    explicit_value: T | None = None

    @classmethod
    def default(cls) -> Override[T]:
        """Return the "no explicit value" state."""
        return cls()

    @classmethod
    def explicit(cls, value: T) -> Override[T]:
        """Return an override holding ``value``."""
        return cls(is_explicit=True, explicit_value=value)

    @property
    def value(self) -> T:
        """Explicit value; only valid when ``is_explicit``."""
        if not self.is_explicit:
            msg = "Override has no explicit value"
            raise ValueError(msg)
        return typing.cast("T", self.explicit_value)

    def resolve(self, default: Callable[[], T]) -> T:
        """Return the explicit value, or evaluate ``default``."""
        if self.is_explicit:
            return typing.cast("T", self.explicit_value)
        return default()


@dataclass(slots=True, frozen=True)
class ConfigFileBinding:
    """Location of a field's value in a config-file hierarchy."""

    hierarchy: ConfigHierarchyType
    section: str
    key: str


def ini(key: str, section: str = BUILD_SETTINGS_SECTION) -> ConfigFileBinding:
    """Return an engine-hierarchy binding in the build settings section."""
    return ConfigFileBinding(ConfigHierarchyType.ENGINE, section, key)


def xml(key: str) -> ConfigFileBinding:
    """Return a build-configuration binding keyed by the field name."""
    return ConfigFileBinding(ConfigHierarchyType.BUILD_CONFIGURATION, BUILD_CONFIGURATION_SECTION, key)


@dataclass(slots=True, frozen=True)
class CommandLineBinding:
    """A command-line spelling that populates a field.

    Attributes:
        flag: Flag text, e.g. ``-NoPCH`` or ``-EnablePlugin=``. Flags ending in
            ``=`` or ``:`` are prefix flags whose remainder is the value.
        value: Value forced by the flag regardless of any text given with it.
        list_separator: Separator splitting one argument into several list
            entries.
    """

    flag: str
    value: object = UNSET
    list_separator: str | None = None

    @property
    def is_prefix(self) -> bool:
        """Whether the flag carries its value as a suffix."""
        return self.flag.endswith(("=", ":"))

    @property
    def forces_value(self) -> bool:
        """Whether the flag always produces the same value."""
        return not isinstance(self.value, Unset)

    def match(self, argument: str) -> object:
        """Return the raw value ``argument`` supplies, or ``UNSET``.

        Matching is case-insensitive on the flag text.

        Args:
            argument: One pre-tokenized command-line argument.

        Returns:
            The forced value, the value text, ``"true"`` for bare boolean
            flags, or ``UNSET`` when the argument does not match.
        """
        lowered = argument.lower()
        flag = self.flag.lower()
        if self.is_prefix:
            if not lowered.startswith(flag):
                return UNSET
            return self.value if self.forces_value else argument[len(flag) :]
        if lowered == flag:
            return self.value if self.forces_value else "true"
        if lowered.startswith(flag + "="):
            return self.value if self.forces_value else argument[len(flag) + 1 :]
        return UNSET

    def split(self, text: str) -> list[str]:
        """Split a list-valued argument on the declared separator."""
        if self.list_separator is None:
            return [text]
        return [item for item in text.split(self.list_separator) if item]


class AliasMode(StrEnum):
    """How a deprecated field forwards to its replacement.

    Attributes:
        NONE: Stored field that is merely deprecated.
        GET_ONLY: Reads forward to the replacement; writes warn and are ignored.
        GET_SET: Reads and writes both forward to the replacement.
    """

    NONE = "none"
    GET_ONLY = "get-only"
    GET_SET = "get-set"


@dataclass(slots=True, frozen=True)
class Deprecation:
    """Deprecation metadata for a field.

    Attributes:
        message: Warning logged whenever the field is used.
        replacement: Field that replaces this one.
        group: Group holding the replacement; ``None`` means the same group.
        mode: Forwarding behaviour.
        read: Converts the replacement's value into this field's value.
        write: Converts a value written here into the replacement's value.
    """

    message: str
    replacement: str | None = None
    group: GroupName | None = None
    mode: AliasMode = AliasMode.NONE
    read: Callable[[Any], object] | None = None
    write: Callable[[Any], object] | None = None


def _no_bindings() -> tuple[ConfigFileBinding, ...]:
    return ()


def _no_flags() -> tuple[CommandLineBinding, ...]:
    return ()


@dataclass(slots=True, frozen=True)
class FieldDescriptor:
    """Static metadata for one configurable field.

    Attributes:
        name: Field identifier, also the key used in config files.
        value_type: Declared type; values from sources are coerced to it.
        default: Default rule.
        tag: Consistency tag.
        config_bindings: Config-file locations, applied in order.
        command_line: Command-line spellings.
        deprecation: Deprecation info, if the field is deprecated.
        default_marker: Value that, written to a computed field, clears its
            override instead of becoming one.
        doc: One-line description.
    """

    name: FieldName
    value_type: Any
    default: DefaultRule = field(default_factory=Constant)
    tag: ConsistencyTag = ConsistencyTag.LOCAL
    config_bindings: tuple[ConfigFileBinding, ...] = field(default_factory=_no_bindings)
    command_line: tuple[CommandLineBinding, ...] = field(default_factory=_no_flags)
    deprecation: Deprecation | None = None
    default_marker: object = UNSET
    doc: str = ""

    @property
    def is_computed(self) -> bool:
        """Whether reads evaluate a computed default unless overridden."""
        return isinstance(self.default, ComputedDefault)

    @property
    def is_alias(self) -> bool:
        """Whether the field forwards to a replacement instead of storing a value."""
        return self.deprecation is not None and self.deprecation.mode is not AliasMode.NONE

    @property
    def is_deprecated(self) -> bool:
        """Whether using the field logs a deprecation warning."""
        return self.deprecation is not None

    @property
    def is_list(self) -> bool:
        """Whether the field holds a list of values."""
        return typing.get_origin(self.value_type) is list

    @property
    def is_environment_sensitive(self) -> bool:
        """Whether the field must match across a shared build environment."""
        return self.tag is ConsistencyTag.ENVIRONMENT_SENSITIVE


def define(
    name: str,
    value_type: Any,
    default: object = None,
    *,
    sensitive: bool = False,
    config: Iterable[ConfigFileBinding] = (),
    cli: Iterable[str | CommandLineBinding] = (),
    deprecation: Deprecation | None = None,
    default_marker: object = UNSET,
    doc: str = "",
) -> FieldDescriptor:
    """Build a ``FieldDescriptor`` with compact syntax for the field tables.

    Args:
        name: Field identifier.
        value_type: Declared type.
        default: A default rule, or a plain value wrapped in ``Constant``.
        sensitive: Tag the field ``EnvironmentSensitive``.
        config: Config-file bindings.
        cli: Command-line flags; plain strings become simple bindings.
        deprecation: Deprecation info.
        default_marker: Value that clears the override of a computed field.
        doc: One-line description.

    Returns:
        The descriptor.
    """
    rule = default if isinstance(default, (Constant, IdentityDefault, ComputedDefault)) else Constant(default)
    flags = tuple(flag if isinstance(flag, CommandLineBinding) else CommandLineBinding(flag) for flag in cli)
    return FieldDescriptor(
        name=FieldName(name),
        value_type=value_type,
        default=rule,
        tag=ConsistencyTag.ENVIRONMENT_SENSITIVE if sensitive else ConsistencyTag.LOCAL,
        config_bindings=tuple(config),
        command_line=flags,
        deprecation=deprecation,
        default_marker=default_marker,
        doc=doc,
    )


__all__ = [
    "BUILD_CONFIGURATION_SECTION",
    "BUILD_SETTINGS_SECTION",
    "AliasMode",
    "CommandLineBinding",
    "ComputedDefault",
    "ConfigFileBinding",
    "Constant",
    "DefaultRule",
    "Deprecation",
    "FieldDescriptor",
    "FieldReader",
    "IdentityDefault",
    "Override",
    "define",
    "ini",
    "xml",
]
