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


"""Unit tests for target identity and host facts."""

from __future__ import annotations

from pathlib import Path

import pytest

from targetrules.core.model_types import TargetConfiguration, TargetPlatform
from targetrules.exceptions import IdentityError
from targetrules.identity import BuildVersion, HostFacts, TargetIdentity

pytestmark = pytest.mark.unit


def test_identity_defaults() -> None:
    identity = TargetIdentity("MyGame", TargetPlatform.WIN64)
    assert identity.configuration is TargetConfiguration.DEVELOPMENT
    assert identity.architecture == ""
    assert identity.project_directory is None
    assert identity.version == BuildVersion()


def test_project_directory() -> None:
    identity = TargetIdentity("MyGame", TargetPlatform.MAC, project_file=Path("Games") / "MyGame" / "MyGame.uproject")
    assert identity.project_directory == Path("Games") / "MyGame"


@pytest.mark.parametrize(
    ("kwargs", "field"),
    [
        ({"name": "", "platform": TargetPlatform.WIN64}, "name"),
        ({"name": "   ", "platform": TargetPlatform.WIN64}, "name"),
        ({"name": "MyGame", "platform": TargetPlatform.UNKNOWN}, "platform"),
        ({"name": "MyGame", "platform": "Win64"}, "platform"),
        ({"name": "MyGame", "platform": TargetPlatform.WIN64, "configuration": "Debug"}, "configuration"),
        ({"name": "MyGame", "platform": TargetPlatform.WIN64, "architecture": "arm 64"}, "architecture"),
    ],
)
def test_invalid_identity(kwargs: dict[str, object], field: str) -> None:
    with pytest.raises(IdentityError) as excinfo:
        TargetIdentity(**kwargs)  # type: ignore[arg-type]
    assert excinfo.value.field == field
    assert isinstance(excinfo.value, ValueError)


def test_identity_is_immutable() -> None:
    identity = TargetIdentity("MyGame", TargetPlatform.WIN64)
    with pytest.raises(AttributeError):
        identity.name = "Other"  # type: ignore[misc]


def test_build_version() -> None:
    assert BuildVersion("++UE4+Release-4.22", 0).default_build_version() == "++UE4+Release-4.22-CL-0"
    assert BuildVersion(build_version_string="4.22.3").default_build_version() == "4.22.3"
    assert BuildVersion(changelist=10, is_promoted_build=True).is_formal
    assert not BuildVersion(changelist=10).is_formal
    assert not BuildVersion(is_promoted_build=True).is_formal
    with pytest.raises(IdentityError):
        BuildVersion(changelist=-1)


def test_host_facts_detect(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TARGETRULES_ENGINE_INSTALLED", "1")
    monkeypatch.delenv("TARGETRULES_GENERATE_PROJECT_FILES", raising=False)
    host = HostFacts.detect()
    assert host.engine_installed
    assert not host.generating_project_files
    assert host.platform in {TargetPlatform.WIN64, TargetPlatform.MAC, TargetPlatform.LINUX}
