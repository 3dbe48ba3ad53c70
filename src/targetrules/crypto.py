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

"""Preprocessor definitions registering encryption and signing keys."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from targetrules.sources.collaborators import CryptoSettings

ENCRYPTION_KEY_MACRO: Final[str] = "IMPLEMENT_ENCRYPTION_KEY_REGISTRATION()"
SIGNING_KEY_MACRO: Final[str] = "IMPLEMENT_SIGNING_KEY_REGISTRATION()"


def format_hex_bytes(data: bytes) -> str:
    """Format bytes as ``0xAB,0xCD,...``.

    Example:
        >>> format_hex_bytes(bytes([0, 171, 255]))
        '0x00,0xAB,0xFF'
    """
    return ",".join(f"0x{byte:02X}" for byte in data)


def encryption_definition(settings: CryptoSettings | None) -> str:
    """Return the encryption key registration definition."""
    if settings is None or not settings.is_any_encryption_enabled or settings.encryption_key is None:
        return f"{ENCRYPTION_KEY_MACRO}="
    return f"{ENCRYPTION_KEY_MACRO}=UE_REGISTER_ENCRYPTION_KEY({format_hex_bytes(settings.encryption_key)})"


def signing_definition(settings: CryptoSettings | None) -> str:
    """Return the signing key registration definition."""
    if settings is None or not settings.is_pak_signing_enabled or settings.signing_key is None:
        return f"{SIGNING_KEY_MACRO}="
    key = settings.signing_key
    return (
        f"{SIGNING_KEY_MACRO}=UE_REGISTER_SIGNING_KEY("
        f"UE_LIST_ARGUMENT({format_hex_bytes(key.exponent)}), "
        f"UE_LIST_ARGUMENT({format_hex_bytes(key.modulus)}))"
    )


def crypto_definitions(settings: CryptoSettings | None) -> tuple[str, str]:
    """Return the encryption and signing definitions, in that order."""
    return encryption_definition(settings), signing_definition(settings)


__all__ = [
    "ENCRYPTION_KEY_MACRO",
    "SIGNING_KEY_MACRO",
    "crypto_definitions",
    "encryption_definition",
    "format_hex_bytes",
    "signing_definition",
]
