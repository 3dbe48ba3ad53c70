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

# ignore JUSTIFIED: StrEnum inheritance stack exceeds pylint threshold
# pylint: disable=too-many-ancestors, useless-suppression

"""Enumerations for targets, platforms and the resolution lifecycle.

Enum values use the spellings found in config files and on the command line
(``Game``, ``Win64``, ``Monolithic``). Lookups through ``from_str`` are
case-insensitive so ``-UniqueBuildEnvironment`` style inputs and hand-written
config files resolve to the same members.
"""

from __future__ import annotations

from typing import Final

from targetrules.compat import Self, StrEnum


class _LookupEnum(StrEnum):
    """Base for enums that accept case-insensitive names or values."""

    @classmethod
    def from_str(cls, raw: str) -> Self:
        """Create an enum member from a string value or member name.

        Args:
            raw: Value (``"Monolithic"``) or member name (``"MONOLITHIC"``).

        Returns:
            Matching enum member.

        Raises:
            ValueError: If the string matches no member.
        """
        text = raw.strip().lower()
        for member in cls:
            if text in {member.value.lower(), member.name.lower()}:
                return member
        label = cls.__name__
        msg = f"Unknown {label} '{raw}'"
        raise ValueError(msg)


class TargetType(_LookupEnum):
    """Category of target being built.

    Attributes:
        GAME: Cooked monolithic game executable.
        EDITOR: Uncooked modular editor executable and DLLs.
        CLIENT: Cooked monolithic game client without server code.
        SERVER: Cooked monolithic game server without client code.
        PROGRAM: Standalone program, modular or monolithic.
    """

    GAME = "Game"
    EDITOR = "Editor"
    CLIENT = "Client"
    SERVER = "Server"
    PROGRAM = "Program"


class TargetLinkType(_LookupEnum):
    """How the modules of a target are linked.

    ``DEFAULT`` is accepted as input and means "no explicit choice"; the
    resolved link type is always ``MONOLITHIC`` or ``MODULAR``.
    """

    DEFAULT = "Default"
    MONOLITHIC = "Monolithic"
    MODULAR = "Modular"


class TargetBuildEnvironment(_LookupEnum):
    """Whether engine binaries and intermediates are shared with other targets."""

    DEFAULT = "Default"
    SHARED = "Shared"
    UNIQUE = "Unique"


class TargetPlatform(_LookupEnum):
    """Platforms a target can be built for."""

    UNKNOWN = "Unknown"
    WIN32 = "Win32"
    WIN64 = "Win64"
    MAC = "Mac"
    XBOX_ONE = "XboxOne"
    PS4 = "PS4"
    IOS = "IOS"
    ANDROID = "Android"
    HTML5 = "HTML5"
    LINUX = "Linux"
    TVOS = "TVOS"
    SWITCH = "Switch"
    LUMIN = "Lumin"


class TargetConfiguration(_LookupEnum):
    """Build configurations."""

    UNKNOWN = "Unknown"
    DEBUG = "Debug"
    DEBUG_GAME = "DebugGame"
    DEVELOPMENT = "Development"
    SHIPPING = "Shipping"
    TEST = "Test"


class CppStandardVersion(_LookupEnum):
    """C++ language standard passed to the compiler."""

    DEFAULT = "Default"
    CPP14 = "Cpp14"
    CPP17 = "Cpp17"
    LATEST = "Latest"


class GeneratedCodeVersion(_LookupEnum):
    """Header-tool code generation version a target may pin."""

    NONE = "None"
    V1 = "V1"
    V2 = "V2"
    VLATEST = "VLatest"


class WindowsCompiler(_LookupEnum):
    """Compiler family used for Windows targets."""

    DEFAULT = "Default"
    CLANG = "Clang"
    INTEL = "Intel"
    VISUAL_STUDIO_2017 = "VisualStudio2017"
    VISUAL_STUDIO_2019 = "VisualStudio2019"


class ConsistencyTag(_LookupEnum):
    """Whether a field must match across targets in a shared build environment.

    Attributes:
        ENVIRONMENT_SENSITIVE: Affects binary compatibility; must be identical
            for every target sharing compiled artifacts.
        LOCAL: Only affects the owning target.
    """

    ENVIRONMENT_SENSITIVE = "EnvironmentSensitive"
    LOCAL = "Local"


class ConfigHierarchyType(_LookupEnum):
    """Config-file hierarchies a field can be bound to."""

    ENGINE = "Engine"
    GAME = "Game"
    BUILD_CONFIGURATION = "BuildConfiguration"


class ValueOrigin(_LookupEnum):
    """Where the current value of a field came from.

    Origins form the resolution precedence chain (lowest to highest):
    default, config file, platform reset, command line. Explicit caller
    assignments and target-type presets happen after resolution and are
    applied unconditionally.
    """

    DEFAULT = "default"
    CONFIG_FILE = "config-file"
    PLATFORM_RESET = "platform-reset"
    COMMAND_LINE = "command-line"
    EXPLICIT = "explicit"
    PRESET = "preset"

    @property
    def rank(self) -> int:
        """Position of this origin in the precedence chain."""
        return _ORIGIN_RANKS[self]

    @property
    def is_override(self) -> bool:
        """Whether values of this origin count as explicit overrides."""
        return self in {ValueOrigin.COMMAND_LINE, ValueOrigin.EXPLICIT, ValueOrigin.PRESET}


_ORIGIN_RANKS: Final[dict[ValueOrigin, int]] = {
    ValueOrigin.DEFAULT: 0,
    ValueOrigin.CONFIG_FILE: 1,
    ValueOrigin.PLATFORM_RESET: 2,
    ValueOrigin.COMMAND_LINE: 3,
    ValueOrigin.EXPLICIT: 4,
    ValueOrigin.PRESET: 5,
}


class ResolutionStage(_LookupEnum):
    """Lifecycle of a mutable configuration."""

    PENDING = "pending"
    RESOLVED = "resolved"
    PRESET_APPLIED = "preset-applied"
    FROZEN = "frozen"

    @property
    def rank(self) -> int:
        """Ordinal of the stage; later stages compare greater."""
        return list(ResolutionStage).index(self)

    def at_least(self, other: ResolutionStage) -> bool:
        """Return whether this stage is ``other`` or later."""
        return self.rank >= other.rank


class EnvironmentPolicy(_LookupEnum):
    """What to do when targets slated to share an environment disagree.

    Attributes:
        ERROR: Raise with the full list of mismatches.
        FORCE_UNIQUE: Move mismatching targets into unique environments.
    """

    ERROR = "error"
    FORCE_UNIQUE = "force-unique"


class PlatformClass(_LookupEnum):
    """Broad platform classes used for default supported-platform lists."""

    ALL = "All"
    DESKTOP = "Desktop"
    EDITOR = "Editor"
    SERVER = "Server"


class PlatformGroup(_LookupEnum):
    """Named platform groups."""

    WINDOWS = "Windows"
    MICROSOFT = "Microsoft"
    APPLE = "Apple"
    IOS = "IOS"
    UNIX = "Unix"
    LINUX = "Linux"
    ANDROID = "Android"
    SONY = "Sony"
    DESKTOP = "Desktop"
    MOBILE = "Mobile"
    CONSOLE = "Console"


class LogFormat(_LookupEnum):
    """Log output formats."""

    TEXT = "text"
    JSON = "json"


class LogComponent(_LookupEnum):
    """Loggable components of the resolution engine."""

    REGISTRY = "registry"
    SOURCES = "sources"
    CONFIGURATION = "configuration"
    RESOLVER = "resolver"
    PRESETS = "presets"
    PROJECTION = "projection"
    ENVIRONMENT = "environment"
    NATIVIZATION = "nativization"
    API = "api"


__all__ = [
    "ConfigHierarchyType",
    "ConsistencyTag",
    "CppStandardVersion",
    "EnvironmentPolicy",
    "GeneratedCodeVersion",
    "LogComponent",
    "LogFormat",
    "PlatformClass",
    "PlatformGroup",
    "ResolutionStage",
    "TargetBuildEnvironment",
    "TargetConfiguration",
    "TargetLinkType",
    "TargetPlatform",
    "TargetType",
    "ValueOrigin",
    "WindowsCompiler",
]
