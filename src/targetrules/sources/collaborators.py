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

"""Concrete platform reset hooks and crypto key stores."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Final

from targetrules.core.model_types import TargetPlatform, ValueOrigin

if TYPE_CHECKING:
    from pathlib import Path

    from targetrules.configuration import MutableConfiguration


@dataclass(slots=True, frozen=True)
class SigningKey:
    """Public half of an RSA pak signing key."""

    exponent: bytes
    modulus: bytes


@dataclass(slots=True, frozen=True)
class CryptoSettings:
    """Encryption and signing key material for a project.

    Attributes:
        encryption_key: AES key bytes, or ``None`` when encryption is off.
        signing_key: Signing key, or ``None`` when pak signing is off.
    """

    encryption_key: bytes | None = None
    signing_key: SigningKey | None = None

    @property
    def is_any_encryption_enabled(self) -> bool:
        """Whether an encryption key is configured."""
        return bool(self.encryption_key)

    @property
    def is_pak_signing_enabled(self) -> bool:
        """Whether a signing key is configured."""
        return self.signing_key is not None and bool(self.signing_key.modulus)


def _empty_crypto_table() -> Mapping[TargetPlatform, CryptoSettings]:
    return {}


@dataclass(slots=True, frozen=True)
class StaticCryptoKeyStore:
    """Key store answering from fixed settings, optionally per platform."""

    default: CryptoSettings | None = None
    per_platform: Mapping[TargetPlatform, CryptoSettings] = field(default_factory=_empty_crypto_table)

    def lookup(self, project_dir: Path | None, platform: TargetPlatform) -> CryptoSettings | None:
        """Return the settings for ``platform``; the project directory is unused."""
        del project_dir
        return self.per_platform.get(platform, self.default)


@dataclass(slots=True, frozen=True)
class TablePlatformResetHook:
    """Reset hook that writes a fixed table of field values.

    Keys are field names, optionally qualified with a platform group
    (``"IOSPlatform.bStripSymbols"``). Writes use the ``PLATFORM_RESET`` origin,
    so fields already set on the command line keep their value.
    """

    values: Mapping[str, object]

    def reset_defaults(self, platform: TargetPlatform, config: MutableConfiguration) -> None:
        """Apply the table to ``config``."""
        del platform
        for name, value in self.values.items():
            config.set(name, value, ValueOrigin.PLATFORM_RESET)


_DISABLE_CEF3: Final[TablePlatformResetHook] = TablePlatformResetHook(MappingProxyType({"bCompileCEF3": False}))

DEFAULT_RESET_HOOKS: Final[Mapping[TargetPlatform, TablePlatformResetHook]] = MappingProxyType(
    {
        TargetPlatform.XBOX_ONE: _DISABLE_CEF3,
        TargetPlatform.PS4: _DISABLE_CEF3,
        TargetPlatform.SWITCH: _DISABLE_CEF3,
        TargetPlatform.HTML5: _DISABLE_CEF3,
    },
)

__all__ = [
    "DEFAULT_RESET_HOOKS",
    "CryptoSettings",
    "SigningKey",
    "StaticCryptoKeyStore",
    "TablePlatformResetHook",
]
