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

"""Exception hierarchy for targetrules.

Every error raised by the resolution engine derives from ``TargetRulesError``.
Structured exceptions keep the offending field, value or path as attributes so
callers can react per field rather than parsing messages.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from targetrules.core.model_types import ResolutionStage, ValueOrigin
    from targetrules.environment import ConsistencyReport


class TargetRulesError(Exception):
    """Base error for all targetrules exceptions."""


class TargetRulesValidationError(TargetRulesError, ValueError):
    """Raised when input data fails validation checks."""


class TargetRulesTypeError(TargetRulesError, TypeError):
    """Raised when input data has an unexpected type."""


class IdentityError(TargetRulesValidationError):
    """Raised when a target identity is missing a required field or is invalid."""

    def __init__(self, field: str, reason: str) -> None:
        """Initialise the error.

        Args:
            field: Identity attribute that failed validation.
            reason: Human readable explanation.
        """
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid target identity: {field} {reason}")


class FieldRegistryError(TargetRulesValidationError):
    """Raised when the field registry is internally inconsistent."""


class UnknownFieldError(TargetRulesValidationError, KeyError):
    """Raised when a field name is not registered in the addressed group."""

    def __init__(self, name: str, group: str) -> None:
        """Initialise the error.

        Args:
            name: Requested field name.
            group: Group that was searched.
        """
        self.name = name
        self.group = group
        super().__init__(f"Unknown field '{name}' in {group}")

    def __str__(self) -> str:
        return str(self.args[0])


class SourceCoercionError(TargetRulesTypeError):
    """Raised when a config-file or command-line value cannot be coerced."""

    def __init__(self, field: str, raw_value: object, source: ValueOrigin | str, detail: str = "") -> None:
        """Initialise the error.

        Args:
            field: Qualified name of the field being populated.
            raw_value: Value as it came from the source.
            source: Source layer that supplied the value.
            detail: Optional validator message.
        """
        self.field = field
        self.raw_value = raw_value
        self.source = source
        self.detail = detail
        message = f"Cannot coerce {source} value {raw_value!r} for field '{field}'"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class CyclicDefaultError(TargetRulesError):
    """Raised when evaluating a computed default re-enters itself."""

    def __init__(self, chain: Sequence[str]) -> None:
        """Initialise the error.

        Args:
            chain: Evaluation chain ending in the repeated field.
        """
        self.chain = tuple(chain)
        super().__init__("Cyclic computed default: " + " -> ".join(self.chain))


class UndeclaredDependencyError(TargetRulesError):
    """Raised when a computed default reads a field it did not declare."""

    def __init__(self, field: str, dependency: str) -> None:
        """Initialise the error.

        Args:
            field: Computed field whose default function misbehaved.
            dependency: Field that was read without being declared.
        """
        self.field = field
        self.dependency = dependency
        super().__init__(f"Default for '{field}' read undeclared dependency '{dependency}'")


class ConfigurationFrozenError(TargetRulesError):
    """Raised when a frozen configuration is written to."""

    def __init__(self, target: str, field: str) -> None:
        """Initialise the error.

        Args:
            target: Name of the target that owns the configuration.
            field: Field the caller attempted to write.
        """
        self.target = target
        self.field = field
        super().__init__(f"Configuration for '{target}' is frozen; cannot set '{field}'")


class ReadOnlyConfigurationError(TargetRulesError, AttributeError):
    """Raised on any write attempt through a read-only projection."""

    def __init__(self, field: str) -> None:
        """Initialise the error.

        Args:
            field: Attribute the caller attempted to write.
        """
        self.field = field
        super().__init__(f"Read-only configuration: cannot set '{field}'")


class IncompleteResolutionError(TargetRulesError):
    """Raised when a configuration is used before reaching a required stage."""

    def __init__(self, target: str, stage: ResolutionStage, required: ResolutionStage) -> None:
        """Initialise the error.

        Args:
            target: Name of the target.
            stage: Current stage of its configuration.
            required: Stage the operation needs.
        """
        self.target = target
        self.stage = stage
        self.required = required
        super().__init__(f"Configuration for '{target}' is at stage '{stage}'; '{required}' is required")


class SharedEnvironmentMismatchError(TargetRulesError):
    """Raised when targets slated to share a build environment disagree."""

    def __init__(self, reports: Sequence[ConsistencyReport]) -> None:
        """Initialise the error.

        Args:
            reports: Non-empty consistency reports, one per mismatching pair.
        """
        self.reports = tuple(reports)
        lines = [report.describe() for report in self.reports]
        super().__init__("Targets cannot share a build environment:\n" + "\n".join(lines))


class ConfigReadError(TargetRulesValidationError):
    """Raised when a config file cannot be read from disk."""

    def __init__(self, path: Path, error: Exception) -> None:
        """Initialise the error.

        Args:
            path: Config file that could not be read.
            error: Underlying exception.
        """
        self.path = path
        self.error = error
        super().__init__(f"Unable to read {path}: {error}")


class InvalidConfigFileError(TargetRulesValidationError):
    """Raised when a config file does not have the expected shape."""

    def __init__(self, path: Path, error: Exception) -> None:
        """Initialise the error.

        Args:
            path: Config file that failed validation.
            error: Underlying validation exception.
        """
        self.path = path
        self.error = error
        super().__init__(f"Invalid config file {path}: {error}")


__all__ = [
    "ConfigReadError",
    "ConfigurationFrozenError",
    "CyclicDefaultError",
    "FieldRegistryError",
    "IdentityError",
    "IncompleteResolutionError",
    "InvalidConfigFileError",
    "ReadOnlyConfigurationError",
    "SharedEnvironmentMismatchError",
    "SourceCoercionError",
    "TargetRulesError",
    "TargetRulesTypeError",
    "TargetRulesValidationError",
    "UndeclaredDependencyError",
    "UnknownFieldError",
]
