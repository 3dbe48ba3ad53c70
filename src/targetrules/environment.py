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

"""Shared build environment consistency.

Targets that share compiled engine binaries must agree on every field tagged
``EnvironmentSensitive``. ``SharedEnvironmentValidator`` compares two resolved
configurations and reports every disagreement; it never changes either
configuration. ``plan_build_environments`` applies an ``EnvironmentPolicy`` to
those reports for a whole set of targets.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

from targetrules.configuration import freeze_value
from targetrules.core.model_types import (
    EnvironmentPolicy,
    LogComponent,
    ResolutionStage,
    TargetBuildEnvironment,
    TargetLinkType,
    TargetType,
)
from targetrules.core.type_aliases import ROOT_GROUP
from targetrules.exceptions import (
    IncompleteResolutionError,
    SharedEnvironmentMismatchError,
    TargetRulesValidationError,
)
from targetrules.logging import structured_extra

if TYPE_CHECKING:
    from targetrules.fields.registry import FieldRegistry
    from targetrules.identity import HostFacts, TargetIdentity

logger: logging.Logger = logging.getLogger("targetrules.environment")


class _ReadableGroup(Protocol):
    def read(self, name: str) -> Any: ...


class ResolvedConfiguration(Protocol):
    """Read access shared by mutable and immutable configurations."""

    @property
    def name(self) -> str: ...

    @property
    def stage(self) -> ResolutionStage: ...

    @property
    def registry(self) -> FieldRegistry: ...

    @property
    def identity(self) -> TargetIdentity: ...

    @property
    def host(self) -> HostFacts: ...

    @property
    def root(self) -> _ReadableGroup: ...

    def group(self, name: str) -> _ReadableGroup: ...


@dataclass(slots=True, frozen=True)
class FieldMismatch:
    """One environment-sensitive field on which two targets disagree."""

    group: str
    field: str
    value_a: object
    value_b: object

    @property
    def qualified_name(self) -> str:
        """``Field`` for root fields, ``Group.Field`` otherwise."""
        return self.field if self.group == ROOT_GROUP else f"{self.group}.{self.field}"


@dataclass(slots=True, frozen=True)
class ConsistencyReport:
    """Result of comparing two targets.

    Attributes:
        target_a: Name of the first target.
        target_b: Name of the second target.
        mismatches: Every differing environment-sensitive field.
    """

    target_a: str
    target_b: str
    mismatches: tuple[FieldMismatch, ...] = ()

    @property
    def is_compatible(self) -> bool:
        """Whether the two targets may share a build environment."""
        return not self.mismatches

    @property
    def fields(self) -> tuple[str, ...]:
        """Qualified names of the mismatching fields."""
        return tuple(mismatch.qualified_name for mismatch in self.mismatches)

    def __iter__(self) -> Iterator[FieldMismatch]:
        return iter(self.mismatches)

    def __len__(self) -> int:
        return len(self.mismatches)

    def describe(self) -> str:
        """Return a multi-line, human readable summary."""
        if self.is_compatible:
            return f"{self.target_a} and {self.target_b} are compatible"
        lines = [f"{self.target_a} and {self.target_b} differ on {len(self.mismatches)} field(s):"]
        lines.extend(
            f"  {mismatch.qualified_name}: {mismatch.value_a!r} != {mismatch.value_b!r}" for mismatch in self.mismatches
        )
        return "\n".join(lines)


class SharedEnvironmentValidator:
    """Compares environment-sensitive fields of two targets."""

    def validate(self, a: ResolvedConfiguration, b: ResolvedConfiguration) -> ConsistencyReport:
        """Return every environment-sensitive difference between ``a`` and ``b``.

        Both configurations must have had their target-type preset applied.
        List values are compared as ordered sequences.

        Raises:
            IncompleteResolutionError: If either configuration is not yet at
                stage ``PRESET_APPLIED``.
            TargetRulesValidationError: If the two configurations were built
                from different field registries.
        """
        for config in (a, b):
            _require_preset_applied(config)
        if a.registry is not b.registry:
            msg = f"Cannot compare {a.name} with {b.name}: they use different field registries"
            raise TargetRulesValidationError(msg)
        mismatches: list[FieldMismatch] = []
        for spec in a.registry.groups:
            group_a = a.group(spec.name)
            group_b = b.group(spec.name)
            for descriptor in spec.environment_sensitive():
                value_a = freeze_value(group_a.read(descriptor.name))
                value_b = freeze_value(group_b.read(descriptor.name))
                if value_a != value_b:
                    mismatches.append(FieldMismatch(spec.name, descriptor.name, value_a, value_b))
        report = ConsistencyReport(a.name, b.name, tuple(mismatches))
        logger.debug(
            "Compared %s with %s: %d mismatch(es)",
            a.name,
            b.name,
            len(report),
            extra=structured_extra(
                component=LogComponent.ENVIRONMENT,
                target=a.name,
                details={"other": b.name, "fields": list(report.fields)},
            ),
        )
        return report


def _require_preset_applied(config: ResolvedConfiguration) -> None:
    if not config.stage.at_least(ResolutionStage.PRESET_APPLIED):
        raise IncompleteResolutionError(config.name, config.stage, ResolutionStage.PRESET_APPLIED)


def effective_build_environment(config: ResolvedConfiguration) -> TargetBuildEnvironment:
    """Return whether ``config`` builds in a shared or unique environment.

    An explicit ``BuildEnvironment`` wins. Otherwise installed engines and
    modular non-program targets share, and everything else is unique.
    """
    root = config.root
    explicit = root.read("BuildEnvironment")
    if explicit != TargetBuildEnvironment.DEFAULT:
        return TargetBuildEnvironment.from_str(str(explicit))
    if config.host.engine_installed:
        return TargetBuildEnvironment.SHARED
    if root.read("LinkType") == TargetLinkType.MODULAR and root.read("Type") != TargetType.PROGRAM:
        return TargetBuildEnvironment.SHARED
    return TargetBuildEnvironment.UNIQUE


@dataclass(slots=True, frozen=True)
class EnvironmentPlan:
    """Assignment of targets to shared or unique build environments.

    Attributes:
        shared: Targets that build in the shared environment.
        unique: Targets that build in their own environment.
        reports: Non-empty reports that moved targets out of the shared set.
    """

    shared: tuple[ResolvedConfiguration, ...]
    unique: tuple[ResolvedConfiguration, ...]
    reports: tuple[ConsistencyReport, ...] = ()

    @property
    def shared_names(self) -> tuple[str, ...]:
        """Names of the shared targets."""
        return tuple(config.name for config in self.shared)

    @property
    def unique_names(self) -> tuple[str, ...]:
        """Names of the unique targets."""
        return tuple(config.name for config in self.unique)


def plan_build_environments(
    configs: Sequence[ResolvedConfiguration],
    policy: EnvironmentPolicy = EnvironmentPolicy.ERROR,
    *,
    validator: SharedEnvironmentValidator | None = None,
) -> EnvironmentPlan:
    """Decide which targets share a build environment.

    Every target whose effective environment is ``Shared`` is compared with
    the first such target.

    Args:
        configs: Configurations at stage ``PRESET_APPLIED`` or later.
        policy: What to do with mismatching targets.
        validator: Validator to use.

    Returns:
        The environment plan, preserving input order within each set.

    Raises:
        IncompleteResolutionError: If any configuration is not ready.
        SharedEnvironmentMismatchError: Under ``EnvironmentPolicy.ERROR`` when
            any shared target mismatches; carries every report.
    """
    for config in configs:
        _require_preset_applied(config)
    validator = validator if validator is not None else SharedEnvironmentValidator()
    candidates = [config for config in configs if effective_build_environment(config) is TargetBuildEnvironment.SHARED]
    if not candidates:
        return EnvironmentPlan(shared=(), unique=tuple(configs))

    baseline = candidates[0]
    reports: list[ConsistencyReport] = []
    rejected: set[int] = set()
    for config in candidates[1:]:
        report = validator.validate(baseline, config)
        if not report.is_compatible:
            reports.append(report)
            rejected.add(id(config))

    if reports and policy is EnvironmentPolicy.ERROR:
        raise SharedEnvironmentMismatchError(reports)
    for report in reports:
        logger.warning(
            "Moving %s to a unique build environment: %s",
            report.target_b,
            ", ".join(report.fields),
            extra=structured_extra(
                component=LogComponent.ENVIRONMENT,
                target=report.target_b,
                details={"baseline": report.target_a, "fields": list(report.fields)},
            ),
        )
    shared_ids = {id(config) for config in candidates} - rejected
    return EnvironmentPlan(
        shared=tuple(config for config in configs if id(config) in shared_ids),
        unique=tuple(config for config in configs if id(config) not in shared_ids),
        reports=tuple(reports),
    )


__all__ = [
    "ConsistencyReport",
    "EnvironmentPlan",
    "FieldMismatch",
    "ResolvedConfiguration",
    "SharedEnvironmentValidator",
    "effective_build_environment",
    "plan_build_environments",
]
