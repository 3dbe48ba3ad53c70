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

"""Target identity and process-wide host facts.

``TargetIdentity`` names one target (name, platform, configuration,
architecture, project file, build version). It is validated on construction
and never mutated, so resolution can never start with a partially identified
target. ``HostFacts`` captures read-only facts about the running process that
every resolution may consult concurrently.
"""

from __future__ import annotations

import os
import re
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

from targetrules.core.model_types import TargetConfiguration, TargetPlatform
from targetrules.exceptions import IdentityError

ENGINE_INSTALLED_ENV: Final[str] = "TARGETRULES_ENGINE_INSTALLED"
GENERATE_PROJECT_FILES_ENV: Final[str] = "TARGETRULES_GENERATE_PROJECT_FILES"

_ARCHITECTURE_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[A-Za-z0-9_\-+.]*$")
_TRUTHY: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})


@dataclass(slots=True, frozen=True)
class BuildVersion:
    """Version descriptor of the engine build producing a target.

    Attributes:
        branch_name: Source branch, e.g. ``++UE4+Release-4.22``.
        changelist: Changelist number; ``0`` for local builds.
        is_promoted_build: Whether the build came from a promoted label.
        build_version_string: Optional explicit build version.
    """

    branch_name: str = "UE4"
    changelist: int = 0
    is_promoted_build: bool = False
    build_version_string: str | None = None

    def __post_init__(self) -> None:
        if self.changelist < 0:
            raise IdentityError("version.changelist", f"must be non-negative (got {self.changelist})")

    @property
    def is_formal(self) -> bool:
        """Whether this version describes a formal (promoted, numbered) build."""
        return self.changelist != 0 and self.is_promoted_build

    def default_build_version(self) -> str:
        """Return the build version string used when none is configured."""
        if self.build_version_string:
            return self.build_version_string
        return f"{self.branch_name}-CL-{self.changelist}"


@dataclass(slots=True, frozen=True)
class TargetIdentity:
    """Immutable identity of one target.

    Attributes:
        name: Target name, e.g. ``MyGame``.
        platform: Platform being built for.
        configuration: Build configuration.
        architecture: Architecture, or an empty string for the default.
        project_file: Project file of the owning project, if any.
        version: Engine build version.
    """

    name: str
    platform: TargetPlatform
    configuration: TargetConfiguration = TargetConfiguration.DEVELOPMENT
    architecture: str = ""
    project_file: Path | None = None
    version: BuildVersion = field(default_factory=BuildVersion)

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise IdentityError("name", "is required")
        if not isinstance(self.platform, TargetPlatform):
            raise IdentityError("platform", "is required")
        if self.platform is TargetPlatform.UNKNOWN:
            raise IdentityError("platform", "must not be Unknown")
        if not isinstance(self.configuration, TargetConfiguration):
            raise IdentityError("configuration", f"must be a TargetConfiguration (got {self.configuration!r})")
        if not isinstance(self.architecture, str) or not _ARCHITECTURE_PATTERN.match(self.architecture):
            raise IdentityError("architecture", f"is not a valid architecture name ({self.architecture!r})")

    @property
    def project_directory(self) -> Path | None:
        """Directory containing the project file, if there is one."""
        return None if self.project_file is None else self.project_file.parent


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in _TRUTHY


def _detect_host_platform() -> TargetPlatform:
    if sys.platform.startswith("win"):
        return TargetPlatform.WIN64
    if sys.platform == "darwin":
        return TargetPlatform.MAC
    return TargetPlatform.LINUX


@dataclass(slots=True, frozen=True)
class HostFacts:
    """Process-wide facts fixed at start-up.

    Attributes:
        platform: Platform of the machine running the build.
        engine_installed: Whether the engine is an installed (binary) build.
        generating_project_files: Whether the process generates IDE project
            files rather than building.
    """

    platform: TargetPlatform
    engine_installed: bool = False
    generating_project_files: bool = False

    @classmethod
    def detect(cls) -> HostFacts:
        """Capture host facts from the running interpreter and environment."""
        return cls(
            platform=_detect_host_platform(),
            engine_installed=_env_flag(ENGINE_INSTALLED_ENV),
            generating_project_files=_env_flag(GENERATE_PROJECT_FILES_ENV),
        )


__all__ = ["BuildVersion", "HostFacts", "TargetIdentity"]
