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


"""Unit tests for nativized asset plugin lookup."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from targetrules.core.model_types import ConfigHierarchyType, TargetPlatform, TargetType
from targetrules.nativization import (
    NATIVIZATION_METHOD_KEY,
    PACKAGING_SETTINGS_SECTION,
    find_nativized_plugin,
    nativized_plugin_path,
)
from targetrules.sources import InMemoryConfigFileReader
from tests.fixtures.builders import build_identity, build_preset_config

pytestmark = pytest.mark.unit

PROJECT = Path("Projects") / "MyGame"


def _reader(method: str | None) -> InMemoryConfigFileReader:
    reader = InMemoryConfigFileReader()
    if method is not None:
        reader.put(ConfigHierarchyType.GAME, PACKAGING_SETTINGS_SECTION, NATIVIZATION_METHOD_KEY, method)
    return reader


def _always(_path: Path) -> bool:
    return True


def _never(_path: Path) -> bool:
    return False


def test_plugin_path_per_platform() -> None:
    base = PROJECT / "Intermediate" / "Plugins" / "NativizedAssets"
    assert nativized_plugin_path(PROJECT, TargetPlatform.WIN64, TargetType.CLIENT) == (
        base / "Windows" / "Client" / "NativizedAssets.uplugin"
    )
    assert nativized_plugin_path(PROJECT, TargetPlatform.PS4, TargetType.SERVER) == (
        base / "PS4" / "Game" / "NativizedAssets.uplugin"
    )


def test_find_plugin_when_enabled() -> None:
    identity = build_identity(project_file=PROJECT / "MyGame.uproject")
    config = build_preset_config(TargetType.GAME, identity=identity)
    plugin = find_nativized_plugin(config, _reader("Inclusive"), exists=_always)
    assert plugin == PROJECT / "Intermediate" / "Plugins" / "NativizedAssets" / "Windows" / "Game" / (
        "NativizedAssets.uplugin"
    )


@pytest.mark.parametrize("method", [None, "Disabled"])
def test_no_plugin_when_disabled(method: str | None) -> None:
    identity = build_identity(project_file=PROJECT / "MyGame.uproject")
    config = build_preset_config(TargetType.GAME, identity=identity)
    assert find_nativized_plugin(config, _reader(method), exists=_always) is None


def test_no_plugin_for_editor_or_projectless_targets() -> None:
    editor = build_preset_config(TargetType.EDITOR, identity=build_identity(project_file=PROJECT / "MyGame.uproject"))
    assert find_nativized_plugin(editor, _reader("Inclusive"), exists=_always) is None
    projectless = build_preset_config(TargetType.GAME)
    assert find_nativized_plugin(projectless, _reader("Inclusive"), exists=_always) is None


def test_missing_plugin_logs_warning(caplog: pytest.LogCaptureFixture) -> None:
    identity = build_identity(project_file=PROJECT / "MyGame.uproject")
    config = build_preset_config(TargetType.GAME, identity=identity)
    caplog.set_level(logging.WARNING, logger="targetrules.nativization")
    assert find_nativized_plugin(config, _reader("Exclusive"), exists=_never) is None
    assert len(caplog.records) == 1
    assert "generated code plugin is missing" in caplog.records[0].getMessage()
    assert getattr(caplog.records[0], "target", None) == "MyGame"


def test_find_plugin_checks_the_filesystem(tmp_path: Path) -> None:
    identity = build_identity(project_file=tmp_path / "MyGame.uproject")
    config = build_preset_config(TargetType.GAME, identity=identity)
    plugin = nativized_plugin_path(tmp_path, TargetPlatform.WIN64, TargetType.GAME)
    plugin.parent.mkdir(parents=True)
    plugin.write_text("{}", encoding="utf-8")
    assert find_nativized_plugin(config, _reader("Inclusive")) == plugin
