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


"""Sample engine and project trees with layered TOML config files."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from pathlib import Path

__all__ = ["ProjectLayout", "write_project_layout"]

ENGINE_DEFAULTS: Final[str] = """\
["/Script/BuildSettings.BuildSettings"]
bCompileICU = true
bCompileRecast = false
bWithPerfCounters = false
"""

PROJECT_ENGINE: Final[str] = """\
["/Script/BuildSettings.BuildSettings"]
bCompileICU = false

["/Script/WindowsTargetPlatform.WindowsTargetSettings"]
bEnablePIXProfiling = false
"""

PROJECT_WIN64_ENGINE: Final[str] = """\
["/Script/BuildSettings.BuildSettings"]
bCompileRecast = true
"""

PROJECT_BUILD_CONFIGURATION: Final[str] = """\
[BuildConfiguration]
bUseUnityBuild = false
MinGameModuleSourceFilesForUnityBuild = 8

[WindowsPlatform]
Compiler = "VisualStudio2019"
"""

PROJECT_GAME: Final[str] = """\
["/Script/UnrealEd.ProjectPackagingSettings"]
BlueprintNativizationMethod = "Inclusive"
"""


@dataclass(slots=True, frozen=True)
class ProjectLayout:
    """Engine and project directories populated with TOML config files."""

    engine_dir: Path
    project_dir: Path

    @property
    def project_file(self) -> Path:
        """Project file of the sample project."""
        return self.project_dir / "MyGame.uproject"


def _write(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def write_project_layout(root: Path) -> ProjectLayout:
    """Create ``Engine`` and ``MyGame`` trees under ``root``.

    Engine defaults are overridden by the project's ``DefaultEngine.toml``,
    which is in turn overridden by ``Config/Win64/Win64Engine.toml`` for
    Win64 targets.
    """
    layout = ProjectLayout(engine_dir=root / "Engine", project_dir=root / "MyGame")
    _write(layout.engine_dir / "Config" / "DefaultEngine.toml", ENGINE_DEFAULTS)
    _write(layout.project_dir / "Config" / "DefaultEngine.toml", PROJECT_ENGINE)
    _write(layout.project_dir / "Config" / "Win64" / "Win64Engine.toml", PROJECT_WIN64_ENGINE)
    _write(layout.project_dir / "Config" / "DefaultBuildConfiguration.toml", PROJECT_BUILD_CONFIGURATION)
    _write(layout.project_dir / "Config" / "DefaultGame.toml", PROJECT_GAME)
    _write(layout.project_file, "{}")
    return layout
