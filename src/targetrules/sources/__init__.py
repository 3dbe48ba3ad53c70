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

"""Configuration sources consumed by resolution."""

from __future__ import annotations

from .base import ConfigFileReader, ConfigSources, CryptoKeyStore, PlatformResetHook
from .collaborators import (
    DEFAULT_RESET_HOOKS,
    CryptoSettings,
    SigningKey,
    StaticCryptoKeyStore,
    TablePlatformResetHook,
)
from .command_line import CommandLineSource
from .config_file import ConfigDocumentModel, InMemoryConfigFileReader, TomlConfigFileReader, load_config_document

__all__ = [
    "DEFAULT_RESET_HOOKS",
    "CommandLineSource",
    "ConfigDocumentModel",
    "ConfigFileReader",
    "ConfigSources",
    "CryptoKeyStore",
    "CryptoSettings",
    "InMemoryConfigFileReader",
    "PlatformResetHook",
    "SigningKey",
    "StaticCryptoKeyStore",
    "TablePlatformResetHook",
    "TomlConfigFileReader",
    "load_config_document",
]
