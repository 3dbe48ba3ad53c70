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


"""Unit tests for structured logging helpers."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from targetrules.core.model_types import LogComponent, LogFormat, TargetPlatform, TargetType
from targetrules.logging import configure_logging, structured_extra

pytestmark = pytest.mark.unit


def test_structured_extra_drops_missing_and_stringifies() -> None:
    extra = structured_extra(
        component=LogComponent.RESOLVER,
        target="MyGame",
        target_type=TargetType.GAME,
        platform=TargetPlatform.WIN64,
        path=Path("Config") / "DefaultEngine.toml",
        details={},
    )
    assert extra == {
        "component": LogComponent.RESOLVER,
        "target": "MyGame",
        "target_type": "Game",
        "platform": "Win64",
        "path": str(Path("Config") / "DefaultEngine.toml"),
    }


def test_configure_logging_json_emits_structured_payload(capsys: pytest.CaptureFixture[str]) -> None:
    config = configure_logging("json", log_level="debug")
    assert config.format is LogFormat.JSON
    assert config.level == logging.DEBUG

    logging.getLogger("targetrules.resolver").info(
        "Resolved configuration for %s",
        "MyGame",
        extra=structured_extra(component=LogComponent.RESOLVER, target="MyGame", details={"groups": 11}),
    )
    payload = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
    assert payload["message"] == "Resolved configuration for MyGame"
    assert payload["level"] == "info"
    assert payload["logger"] == "targetrules.resolver"
    assert payload["component"] == "resolver"
    assert payload["target"] == "MyGame"
    assert payload["details"] == {"groups": 11}


def test_configure_logging_text_format(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging(LogFormat.TEXT, log_level="warning")
    logger = logging.getLogger("targetrules.environment")
    logger.info("hidden")
    logger.warning("Moving %s to a unique build environment", "MyEditor")
    err = capsys.readouterr().err
    assert "hidden" not in err
    assert "[WARNING] Moving MyEditor to a unique build environment" in err


def test_configure_logging_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TARGETRULES_LOG_FORMAT", "json")
    monkeypatch.setenv("TARGETRULES_LOG_LEVEL", "error")
    config = configure_logging()
    assert config.format is LogFormat.JSON
    assert config.level_name == "error"
    assert logging.getLogger("targetrules.presets").level == logging.ERROR


def test_configure_logging_unknown_level_falls_back_to_info() -> None:
    config = configure_logging("text", log_level="chatty")
    assert config.level == logging.INFO
