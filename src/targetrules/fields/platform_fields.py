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

"""Field tables for the per-platform extension groups.

Every target owns one instance of each group regardless of the platform it
builds for; only the matching group is usually consulted by the toolchain,
but all groups pass through resolution and consistency validation.
"""

from __future__ import annotations

from typing import Final

from targetrules.core.model_types import ConfigHierarchyType, TargetPlatform, WindowsCompiler
from targetrules.core.type_aliases import GroupName
from targetrules.fields.descriptors import CommandLineBinding, ConfigFileBinding, define, ini
from targetrules.fields.registry import GroupSpec


def _toolchain(section: str, key: str) -> ConfigFileBinding:
    return ConfigFileBinding(ConfigHierarchyType.BUILD_CONFIGURATION, section, key)


ANDROID_FIELDS = GroupSpec(
    GroupName("AndroidPlatform"),
    (
        define("Architectures", list[str], [], cli=[CommandLineBinding("-Architectures=", list_separator="+")]),
        define("GPUArchitectures", list[str], []),
        define(
            "bEnableAddressSanitizer",
            bool,
            False,
            sensitive=True,
            config=[_toolchain("AndroidToolChain", "bEnableAddressSanitizer")],
        ),
    ),
    platform=TargetPlatform.ANDROID,
)

HTML5_FIELDS = GroupSpec(
    GroupName("HTML5Platform"),
    (
        define("bEnableTracing", bool, False, cli=["-Tracing"]),
        define("bUseWebAssembly", bool, True, sensitive=True),
    ),
    platform=TargetPlatform.HTML5,
)

IOS_FIELDS = GroupSpec(
    GroupName("IOSPlatform"),
    (
        define("bStripSymbols", bool, False, cli=["-StripSymbols"], doc="Strip symbols from the IPA."),
        define("bCreateStubIPA", bool, True, cli=[CommandLineBinding("-NoCreateStub", value=False)]),
        define(
            "bGeneratedSYMFile",
            bool,
            True,
            config=[ini("bGeneratedSYMFile", "/Script/IOSRuntimeSettings.IOSRuntimeSettings")],
        ),
        define(
            "bShipForBitcode",
            bool,
            False,
            sensitive=True,
            config=[ini("bShipForBitcode", "/Script/IOSRuntimeSettings.IOSRuntimeSettings")],
        ),
    ),
    platform=TargetPlatform.IOS,
)

LUMIN_FIELDS = GroupSpec(
    GroupName("LuminPlatform"),
    (define("bUseMobileRendering", bool, True, sensitive=True),),
    platform=TargetPlatform.LUMIN,
)

LINUX_FIELDS = GroupSpec(
    GroupName("LinuxPlatform"),
    (
        define("bEnableAddressSanitizer", bool, False, sensitive=True, cli=["-EnableASan"]),
        define("bEnableThreadSanitizer", bool, False, sensitive=True, cli=["-EnableTSan"]),
        define("bEnableUndefinedBehaviorSanitizer", bool, False, sensitive=True, cli=["-EnableUBSan"]),
        define("bPreservePSYM", bool, False, config=[_toolchain("LinuxToolChain", "bPreservePSYM")]),
    ),
    platform=TargetPlatform.LINUX,
)

MAC_FIELDS = GroupSpec(
    GroupName("MacPlatform"),
    (
        define(
            "bEnableAddressSanitizer",
            bool,
            False,
            sensitive=True,
            config=[_toolchain("MacToolChain", "bEnableAddressSanitizer")],
        ),
        define(
            "bEnableThreadSanitizer",
            bool,
            False,
            sensitive=True,
            config=[_toolchain("MacToolChain", "bEnableThreadSanitizer")],
        ),
    ),
    platform=TargetPlatform.MAC,
)

PS4_FIELDS = GroupSpec(
    GroupName("PS4Platform"),
    (define("bEnableRazorCpu", bool, False, cli=["-RazorCpu"]),),
    platform=TargetPlatform.PS4,
)

SWITCH_FIELDS = GroupSpec(
    GroupName("SwitchPlatform"),
    (
        define("bUseLTO", bool, False, sensitive=True, cli=["-SwitchLTO"]),
        define("bEnableNvnProfiling", bool, False),
    ),
    platform=TargetPlatform.SWITCH,
)

WINDOWS_FIELDS = GroupSpec(
    GroupName("WindowsPlatform"),
    (
        define(
            "Compiler",
            WindowsCompiler,
            WindowsCompiler.DEFAULT,
            sensitive=True,
            config=[_toolchain("WindowsPlatform", "Compiler")],
            cli=[
                CommandLineBinding("-2017", value=WindowsCompiler.VISUAL_STUDIO_2017),
                CommandLineBinding("-2019", value=WindowsCompiler.VISUAL_STUDIO_2019),
                CommandLineBinding("-Compiler="),
            ],
            doc="Compiler toolchain; targets sharing binaries must agree.",
        ),
        define("CompilerVersion", str | None, None, sensitive=True, cli=["-CompilerVersion="]),
        define(
            "WindowsSdkVersion",
            str | None,
            None,
            sensitive=True,
            config=[_toolchain("WindowsPlatform", "WindowsSdkVersion")],
        ),
        define(
            "bStrictConformanceMode",
            bool,
            False,
            sensitive=True,
            config=[_toolchain("WindowsPlatform", "bStrictConformanceMode")],
        ),
        define(
            "PCHMemoryAllocationFactor",
            int,
            0,
            config=[_toolchain("WindowsPlatform", "PCHMemoryAllocationFactor")],
        ),
        define("bUseBundledDbgHelp", bool, True),
        define(
            "bPixProfilingEnabled",
            bool,
            True,
            config=[ini("bEnablePIXProfiling", "/Script/WindowsTargetPlatform.WindowsTargetSettings")],
        ),
    ),
    platform=TargetPlatform.WIN64,
)

XBOX_ONE_FIELDS = GroupSpec(
    GroupName("XboxOnePlatform"),
    (define("bUseXboxLive", bool, True, sensitive=True),),
    platform=TargetPlatform.XBOX_ONE,
)

PLATFORM_FIELD_GROUPS: Final[tuple[GroupSpec, ...]] = (
    ANDROID_FIELDS,
    HTML5_FIELDS,
    IOS_FIELDS,
    LUMIN_FIELDS,
    LINUX_FIELDS,
    MAC_FIELDS,
    PS4_FIELDS,
    SWITCH_FIELDS,
    WINDOWS_FIELDS,
    XBOX_ONE_FIELDS,
)

__all__ = [
    "ANDROID_FIELDS",
    "HTML5_FIELDS",
    "IOS_FIELDS",
    "LINUX_FIELDS",
    "LUMIN_FIELDS",
    "MAC_FIELDS",
    "PLATFORM_FIELD_GROUPS",
    "PS4_FIELDS",
    "SWITCH_FIELDS",
    "WINDOWS_FIELDS",
    "XBOX_ONE_FIELDS",
]
