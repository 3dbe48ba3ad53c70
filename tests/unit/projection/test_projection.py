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


"""Unit tests for read-only projections."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from targetrules.configuration import MutableConfiguration
from targetrules.core.model_types import (
    PlatformGroup,
    ResolutionStage,
    TargetConfiguration,
    TargetLinkType,
    TargetPlatform,
    TargetType,
    ValueOrigin,
)
from targetrules.exceptions import IncompleteResolutionError, ReadOnlyConfigurationError, UnknownFieldError
from targetrules.projection import ImmutableConfiguration, ReadOnlyProjector
from tests.fixtures.builders import INSTALLED_HOST, LINUX_HOST, build_identity, build_preset_config

pytestmark = pytest.mark.unit


@pytest.fixture
def config() -> MutableConfiguration:
    return build_preset_config(TargetType.GAME)


@pytest.fixture
def projection(config: MutableConfiguration) -> ImmutableConfiguration:
    return ReadOnlyProjector().project(config)


def test_project_requires_resolution() -> None:
    pending = MutableConfiguration(build_identity(), host=LINUX_HOST)
    with pytest.raises(IncompleteResolutionError) as excinfo:
        ReadOnlyProjector().project(pending)
    assert excinfo.value.stage is ResolutionStage.PENDING


def test_projection_reads_current_values(config: MutableConfiguration, projection: ImmutableConfiguration) -> None:
    assert projection.bUseStaticCRT is False
    config.bUseStaticCRT = True
    assert projection.bUseStaticCRT is True
    config.LinkType = TargetLinkType.MODULAR
    assert projection.LinkType is TargetLinkType.MODULAR
    assert projection.origin("LinkType") is ValueOrigin.EXPLICIT


def test_projection_returns_tuples_for_lists(
    config: MutableConfiguration,
    projection: ImmutableConfiguration,
) -> None:
    assert projection.GlobalDefinitions == ("UE_GAME=1",)
    config.root.extend("GlobalDefinitions", ["EXTRA=1"])
    assert projection.GlobalDefinitions == ("UE_GAME=1", "EXTRA=1")
    assert projection["GlobalDefinitions"] == ("UE_GAME=1", "EXTRA=1")


def test_projection_aliases_follow_replacement(
    config: MutableConfiguration,
    projection: ImmutableConfiguration,
) -> None:
    config.DisablePlugins = ["Paper2D"]
    assert projection.ExcludePlugins == ("Paper2D",)
    config.IOSPlatform.bStripSymbols = True
    assert projection.bStripSymbolsOnIOS is True
    assert projection.IOSPlatform.bStripSymbols is True


def test_projection_rejects_every_write(projection: ImmutableConfiguration) -> None:
    with pytest.raises(ReadOnlyConfigurationError):
        projection.bUseStaticCRT = True
    with pytest.raises(ReadOnlyConfigurationError):
        projection["bUseStaticCRT"] = True
    with pytest.raises(ReadOnlyConfigurationError):
        del projection.bUseStaticCRT
    with pytest.raises(ReadOnlyConfigurationError):
        del projection["bUseStaticCRT"]
    with pytest.raises(ReadOnlyConfigurationError):
        projection.IOSPlatform.bStripSymbols = True
    with pytest.raises(ReadOnlyConfigurationError):
        projection.root["bIWYU"] = True
    with pytest.raises(AttributeError):
        projection.bIWYU = True
    assert projection.bIWYU is False


def test_projection_exposes_identity_and_host(tmp_path_factory: pytest.TempPathFactory) -> None:
    project_file = tmp_path_factory.mktemp("MyGame") / "MyGame.uproject"
    identity = build_identity(
        "MyGame",
        TargetPlatform.PS4,
        configuration=TargetConfiguration.SHIPPING,
        project_file=project_file,
    )
    projection = ReadOnlyProjector().project(build_preset_config(identity=identity, host=INSTALLED_HOST))
    assert projection.Name == "MyGame"
    assert projection.name == "MyGame"
    assert projection.Platform is TargetPlatform.PS4
    assert projection.Configuration is TargetConfiguration.SHIPPING
    assert projection.Architecture == ""
    assert projection.ProjectFile == project_file
    assert projection.Version.changelist == 0
    assert projection.HostPlatform is TargetPlatform.WIN64
    assert projection.bIsEngineInstalled is True
    assert projection.bGenerateProjectFiles is False
    assert projection.is_in_platform_group(PlatformGroup.SONY)
    assert not projection.is_in_platform_group(PlatformGroup.WINDOWS)


def test_projection_supported_platforms() -> None:
    editor = ReadOnlyProjector().project(build_preset_config(TargetType.EDITOR))
    assert editor.supported_platforms() == (TargetPlatform.WIN64, TargetPlatform.MAC, TargetPlatform.LINUX)
    declared = editor.supported_platforms([TargetPlatform.LINUX, TargetPlatform.LINUX, TargetPlatform.MAC])
    assert declared == (TargetPlatform.LINUX, TargetPlatform.MAC)


def test_projection_groups_and_lookup(projection: ImmutableConfiguration) -> None:
    assert projection.root.name == "Target"
    assert [group.name for group in projection.groups][:2] == ["Target", "AndroidPlatform"]
    assert projection.get("WindowsPlatform.bUseBundledDbgHelp") is True
    assert "LinkType" in projection.root
    assert projection.group("IOSPlatform").spec.platform is TargetPlatform.IOS
    with pytest.raises(UnknownFieldError):
        projection.group("NoSuchPlatform")
    assert not hasattr(projection, "bNotAField")
    assert projection.snapshot()["Target"]["GlobalDefinitions"] == ("UE_GAME=1",)


def test_projection_reports_deprecated_reads(
    projection: ImmutableConfiguration,
    caplog: pytest.LogCaptureFixture,
) -> None:
    caplog.set_level(logging.WARNING, logger="targetrules.configuration")
    assert projection.bBuildEditor is False
    assert any("bBuildEditor is deprecated" in record.getMessage() for record in caplog.records)
    caplog.clear()
    assert projection.root.read("bBuildEditor") is False
    assert not caplog.records


def test_frozen_projection_keeps_reading(config: MutableConfiguration, projection: ImmutableConfiguration) -> None:
    config.freeze()
    assert projection.stage is ResolutionStage.FROZEN
    assert projection.LinkType is TargetLinkType.MONOLITHIC


def test_concurrent_reads_of_computed_fields_agree() -> None:
    config = build_preset_config(TargetType.EDITOR)
    config.freeze()
    projection = ReadOnlyProjector().project(config)
    names = ("LinkType", "bBuildDeveloperTools", "bCompileSpeedTree", "bHasExports")
    expected = tuple(projection.get(name) for name in names)
    start = threading.Barrier(8)

    def _read_repeatedly() -> set[tuple[object, ...]]:
        start.wait()
        return {tuple(projection.get(name) for name in names) for _ in range(2_000)}

    with ThreadPoolExecutor(max_workers=8) as executor:
        futures = [executor.submit(_read_repeatedly) for _ in range(8)]
        observed = [future.result() for future in futures]

    assert expected[0] is TargetLinkType.MODULAR
    assert all(values == {expected} for values in observed)
