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

"""Interfaces for the collaborators that feed resolution.

Config-file lookup, the platform reset hook and the crypto key store are
external systems; resolution only depends on the protocols below. Concrete
adapters live in the sibling modules.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from targetrules.sources.collaborators import DEFAULT_RESET_HOOKS

if TYPE_CHECKING:
    from pathlib import Path

    from targetrules.configuration import MutableConfiguration
    from targetrules.core.model_types import ConfigHierarchyType, TargetPlatform
    from targetrules.sources.collaborators import CryptoSettings
    from targetrules.sources.command_line import CommandLineSource


class ConfigFileReader(Protocol):
    """Lookup of one key in a config-file hierarchy."""

    def get(
        self,
        hierarchy: ConfigHierarchyType,
        section: str,
        key: str,
        project_dir: Path | None,
        platform: TargetPlatform,
    ) -> object | None:
        """Return the raw value stored for ``key``, or ``None`` when absent."""
        ...


class PlatformResetHook(Protocol):
    """Platform engineering defaults applied after sources are read."""

    def reset_defaults(self, platform: TargetPlatform, config: MutableConfiguration) -> None:
        """Write platform defaults into ``config``."""
        ...


class CryptoKeyStore(Protocol):
    """Lookup of encryption and signing keys for a project."""

    def lookup(self, project_dir: Path | None, platform: TargetPlatform) -> CryptoSettings | None:
        """Return the crypto settings for the project, or ``None``."""
        ...


def _default_hooks() -> Mapping[TargetPlatform, PlatformResetHook]:
    return DEFAULT_RESET_HOOKS


@dataclass(slots=True, frozen=True)
class ConfigSources:
    """Everything resolution reads besides the target identity.

    Attributes:
        config_files: Config-file reader, or ``None`` to skip config files.
        command_line: Parsed command line, or ``None``.
        reset_hooks: Platform reset hooks keyed by platform.
        crypto: Crypto key store, or ``None`` for "no encryption, no signing".
    """

    config_files: ConfigFileReader | None = None
    command_line: CommandLineSource | None = None
    reset_hooks: Mapping[TargetPlatform, PlatformResetHook] = field(default_factory=_default_hooks)
    crypto: CryptoKeyStore | None = None


__all__ = ["ConfigFileReader", "ConfigSources", "CryptoKeyStore", "PlatformResetHook"]
