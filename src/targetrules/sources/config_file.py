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

"""Config-file readers.

``TomlConfigFileReader`` reads a layered hierarchy of TOML documents, one
table per section:

.. code-block:: toml

    ["/Script/BuildSettings.BuildSettings"]
    bCompileICU = false

For hierarchy ``Engine`` and platform ``Win64`` the files are, lowest
precedence first::

    <engine>/Config/DefaultEngine.toml
    <engine>/Config/Win64/Win64Engine.toml
    <project>/Config/DefaultEngine.toml
    <project>/Config/Win64/Win64Engine.toml

Missing files are skipped. Merged hierarchies are cached per reader.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from typing import TYPE_CHECKING, Final

from pydantic import JsonValue, RootModel, ValidationError

from targetrules.compat import tomllib
from targetrules.core.model_types import ConfigHierarchyType, LogComponent, TargetPlatform
from targetrules.exceptions import ConfigReadError, InvalidConfigFileError
from targetrules.logging import structured_extra

if TYPE_CHECKING:
    from pathlib import Path

logger: logging.Logger = logging.getLogger("targetrules.sources")

CONFIG_DIRECTORY: Final[str] = "Config"

ConfigKey = tuple[ConfigHierarchyType, str, str]
SectionMap = dict[str, dict[str, JsonValue]]


class ConfigDocumentModel(RootModel[dict[str, dict[str, JsonValue]]]):
    """One config document: section name -> key -> value."""

    def section(self, name: str) -> Mapping[str, JsonValue]:
        """Return the keys of ``name``, empty when the section is absent."""
        return self.root.get(name, {})


def load_config_document(path: Path) -> ConfigDocumentModel:
    """Read and validate one TOML config document.

    Raises:
        ConfigReadError: If the file cannot be read or parsed.
        InvalidConfigFileError: If the document is not a table of tables.
    """
    try:
        raw = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as exc:
        raise ConfigReadError(path, exc) from exc
    try:
        return ConfigDocumentModel.model_validate(raw)
    except ValidationError as exc:
        raise InvalidConfigFileError(path, exc) from exc


class InMemoryConfigFileReader:
    """Config-file reader backed by dictionaries.

    Values registered for a specific platform shadow the platform-independent
    ones. The project directory is ignored.
    """

    def __init__(
        self,
        values: Mapping[ConfigKey, object] | None = None,
        *,
        per_platform: Mapping[TargetPlatform, Mapping[ConfigKey, object]] | None = None,
    ) -> None:
        self._values: dict[ConfigKey, object] = dict(values or {})
        self._per_platform: dict[TargetPlatform, dict[ConfigKey, object]] = {
            platform: dict(entries) for platform, entries in (per_platform or {}).items()
        }

    def put(
        self,
        hierarchy: ConfigHierarchyType,
        section: str,
        key: str,
        value: object,
        *,
        platform: TargetPlatform | None = None,
    ) -> None:
        """Store ``value``, optionally only for ``platform``."""
        table = self._values if platform is None else self._per_platform.setdefault(platform, {})
        table[(hierarchy, section, key)] = value

    def get(
        self,
        hierarchy: ConfigHierarchyType,
        section: str,
        key: str,
        project_dir: Path | None,
        platform: TargetPlatform,
    ) -> object | None:
        """Return the stored value or ``None``."""
        del project_dir
        lookup = (hierarchy, section, key)
        platform_values = self._per_platform.get(platform, {})
        if lookup in platform_values:
            return platform_values[lookup]
        return self._values.get(lookup)


class TomlConfigFileReader:
    """Layered TOML config hierarchy reader."""

    def __init__(self, engine_dir: Path | None = None) -> None:
        """Create a reader.

        Args:
            engine_dir: Engine root whose ``Config`` directory forms the base
                layer; ``None`` reads project files only.
        """
        self._engine_dir = engine_dir
        self._cache: dict[tuple[ConfigHierarchyType, Path | None, TargetPlatform], SectionMap] = {}
        self._lock = threading.Lock()

    def candidate_files(
        self,
        hierarchy: ConfigHierarchyType,
        project_dir: Path | None,
        platform: TargetPlatform,
    ) -> list[Path]:
        """Return the files of a hierarchy, lowest precedence first."""
        files: list[Path] = []
        for root in (self._engine_dir, project_dir):
            if root is None:
                continue
            config_dir = root / CONFIG_DIRECTORY
            files.append(config_dir / f"Default{hierarchy.value}.toml")
            files.append(config_dir / platform.value / f"{platform.value}{hierarchy.value}.toml")
        return files

    def get(
        self,
        hierarchy: ConfigHierarchyType,
        section: str,
        key: str,
        project_dir: Path | None,
        platform: TargetPlatform,
    ) -> object | None:
        """Return the merged value of ``section.key``, or ``None``."""
        merged = self._hierarchy(hierarchy, project_dir, platform)
        return merged.get(section, {}).get(key)

    def _hierarchy(
        self,
        hierarchy: ConfigHierarchyType,
        project_dir: Path | None,
        platform: TargetPlatform,
    ) -> SectionMap:
        cache_key = (hierarchy, project_dir, platform)
        with self._lock:
            cached = self._cache.get(cache_key)
        if cached is not None:
            return cached
        merged: SectionMap = {}
        for path in self.candidate_files(hierarchy, project_dir, platform):
            if not path.is_file():
                continue
            document = load_config_document(path)
            for section, values in document.root.items():
                merged.setdefault(section, {}).update(values)
            logger.debug(
                "Read %s config layer %s",
                hierarchy,
                path,
                extra=structured_extra(component=LogComponent.SOURCES, platform=platform, path=path),
            )
        with self._lock:
            return self._cache.setdefault(cache_key, merged)


__all__ = [
    "ConfigDocumentModel",
    "InMemoryConfigFileReader",
    "TomlConfigFileReader",
    "load_config_document",
]
