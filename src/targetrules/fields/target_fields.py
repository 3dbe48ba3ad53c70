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

"""Field table for the root ``Target`` group.

Each entry mirrors one setting a target can carry. Fields marked
``sensitive=True`` affect binary compatibility and must be identical across
targets sharing a build environment. Bindings list where config files and the
command line can supply values.
"""

from __future__ import annotations

import operator
from pathlib import Path
from typing import Final

from targetrules.core.model_types import (
    CppStandardVersion,
    GeneratedCodeVersion,
    TargetBuildEnvironment,
    TargetConfiguration,
    TargetLinkType,
    TargetType,
)
from targetrules.core.type_aliases import GroupName
from targetrules.fields.descriptors import (
    AliasMode,
    CommandLineBinding,
    ComputedDefault,
    Deprecation,
    FieldDescriptor,
    FieldReader,
    IdentityDefault,
    define,
    ini,
    xml,
)

IOS_GROUP: Final[GroupName] = GroupName("IOSPlatform")


def _link_type(fields: FieldReader) -> TargetLinkType:
    return TargetLinkType.MODULAR if fields["Type"] is TargetType.EDITOR else TargetLinkType.MONOLITHIC


def _build_developer_tools(fields: FieldReader) -> bool:
    return bool(fields["bCompileAgainstEngine"]) and fields["Type"] in {TargetType.EDITOR, TargetType.PROGRAM}


def _launch_module_name(fields: FieldReader) -> str | None:
    return None if fields["Type"] is TargetType.PROGRAM else "Launch"


def _compile_speed_tree(fields: FieldReader) -> bool:
    return fields["Type"] is TargetType.EDITOR


def _adaptive_unity_disables_pch_for_project(fields: FieldReader) -> bool:
    return bool(fields["bAdaptiveUnityDisablesPCH"])


def _is_editor(target_type: TargetType) -> bool:
    return target_type is TargetType.EDITOR


TARGET_FIELDS: Final[tuple[FieldDescriptor, ...]] = (
    define("Type", TargetType, TargetType.GAME, doc="Category of target."),
    # Third-party and feature toggles
    define("bUsesSteam", bool, False),
    define("bUsesCEF3", bool, False),
    define("bUsesSlate", bool, True, doc="Whether the target uses the Slate UI framework."),
    define("bUseStaticCRT", bool, False, sensitive=True, doc="Link against the static C runtime."),
    define(
        "bDebugBuildsActuallyUseDebugCRT",
        bool,
        False,
        sensitive=True,
        config=[xml("bDebugBuildsActuallyUseDebugCRT")],
    ),
    define("bOutputPubliclyDistributable", bool, False),
    define("UndecoratedConfiguration", TargetConfiguration, TargetConfiguration.DEVELOPMENT, sensitive=True),
    define(
        "bBuildAllPlugins",
        bool,
        False,
        deprecation=Deprecation("bBuildAllPlugins is deprecated; use bPrecompile to build modules outside the target"),
    ),
    define("bBuildAllModules", bool, False, cli=["-AllModules"]),
    define("AdditionalPlugins", list[str], []),
    define("EnablePlugins", list[str], [], cli=[CommandLineBinding("-EnablePlugin=", list_separator="+")]),
    define("DisablePlugins", list[str], [], cli=[CommandLineBinding("-DisablePlugin=", list_separator="+")]),
    define(
        "ExcludePlugins",
        list[str],
        deprecation=Deprecation(
            "ExcludePlugins has been renamed to DisablePlugins",
            replacement="DisablePlugins",
            mode=AliasMode.GET_ONLY,
        ),
    ),
    define("PakSigningKeysFile", str, ""),
    define("SolutionDirectory", str, ""),
    define("bBuildInSolutionByDefault", bool | None, None),
    define("bShouldCompileAsDLL", bool, False, sensitive=True, doc="Compile as a DLL; requires a monolithic link."),
    define("ExeBinariesSubFolder", str, "", sensitive=True),
    define("GeneratedCodeVersion", GeneratedCodeVersion, GeneratedCodeVersion.NONE),
    # Physics and engine subsystems
    define("bEnableMeshEditor", bool, False, sensitive=True),
    define("bCompileChaos", bool, False, sensitive=True),
    define("bUseChaos", bool, False, sensitive=True),
    define("bCompileImmediatePhysics", bool, False, sensitive=True),
    define("bCustomSceneQueryStructure", bool, False, sensitive=True),
    define("bCompilePhysX", bool, True, sensitive=True),
    define("bCompileAPEX", bool, True, sensitive=True, config=[ini("bCompileApex")]),
    define("bCompileNvCloth", bool, True, sensitive=True),
    define("bCompileICU", bool, True, sensitive=True, config=[ini("bCompileICU")]),
    define("bCompileCEF3", bool, True, sensitive=True, config=[ini("bCompileCEF3")]),
    define(
        "bBuildEditor",
        bool,
        deprecation=Deprecation(
            "bBuildEditor is deprecated; set Type instead",
            replacement="Type",
            mode=AliasMode.GET_ONLY,
            read=_is_editor,
        ),
    ),
    define("bBuildRequiresCookedData", bool, False, sensitive=True),
    define(
        "bBuildWithEditorOnlyData",
        bool,
        True,
        sensitive=True,
        cli=[CommandLineBinding("-NoEditorOnlyData", value=False)],
    ),
    define(
        "bBuildDeveloperTools",
        bool,
        ComputedDefault(_build_developer_tools, ("bCompileAgainstEngine", "Type")),
        sensitive=True,
        doc="Compile developer tools; defaults on for Editor and Program targets built against the engine.",
    ),
    define("bForceBuildTargetPlatforms", bool, False),
    define("bForceBuildShaderFormats", bool, False),
    define("bCompileCustomSQLitePlatform", bool, True, sensitive=True, config=[ini("bCompileCustomSQLitePlatform")]),
    define(
        "bCompileLeanAndMeanUE",
        bool,
        deprecation=Deprecation(
            "bCompileLeanAndMeanUE is deprecated; set bBuildDeveloperTools to the opposite value",
            replacement="bBuildDeveloperTools",
            mode=AliasMode.GET_SET,
            read=operator.not_,
            write=operator.not_,
        ),
    ),
    define("bUseCacheFreedOSAllocs", bool, True, sensitive=True, config=[ini("bUseCacheFreedOSAllocs")]),
    define("bCompileAgainstEngine", bool, True, sensitive=True),
    define("bCompileAgainstCoreUObject", bool, True, sensitive=True),
    define("bCompileAgainstApplicationCore", bool, True, sensitive=True),
    define("bCompileRecast", bool, True, sensitive=True, config=[ini("bCompileRecast")]),
    define(
        "bCompileSpeedTree",
        bool,
        ComputedDefault(_compile_speed_tree, ("Type",)),
        sensitive=True,
        config=[ini("bCompileSpeedTree")],
    ),
    define("bForceEnableExceptions", bool, False, sensitive=True),
    define("bUseInlining", bool, True, sensitive=True, config=[xml("bUseInlining")]),
    define("bForceEnableObjCExceptions", bool, False, sensitive=True),
    define("bForceEnableRTTI", bool, False, sensitive=True),
    define("bWithServerCode", bool, True, sensitive=True),
    define("bCompileWithStatsWithoutEngine", bool, False, sensitive=True),
    define("bCompileWithPluginSupport", bool, False, sensitive=True, config=[ini("bCompileWithPluginSupport")]),
    define("bIncludePluginsForTargetPlatforms", bool, False, sensitive=True),
    define("bWithPerfCounters", bool, False, sensitive=True, config=[ini("bWithPerfCounters")]),
    define("bWithLiveCoding", bool, False, sensitive=True),
    define("bUseLoggingInShipping", bool, False, sensitive=True),
    define("bLoggingToMemoryEnabled", bool, False, sensitive=True),
    define("bUseLauncherChecks", bool, False),
    define("bUseChecksInShipping", bool, False, sensitive=True),
    define("bCompileFreeType", bool, True, sensitive=True, config=[ini("bCompileFreeType")]),
    define("bCompileForSize", bool, False, sensitive=True, config=[ini("bCompileForSize")]),
    define("bForceCompileDevelopmentAutomationTests", bool, False),
    define("bForceCompilePerformanceAutomationTests", bool, False),
    define("bEventDrivenLoader", bool, False, sensitive=True),
    define("bUseXGEController", bool, True, config=[xml("bUseXGEController")]),
    define("bUseBackwardsCompatibleDefaults", bool, True),
    # Compilation behaviour
    define("bIWYU", bool, False, cli=["-IWYU"]),
    define("bEnforceIWYU", bool, True),
    define("bHasExports", bool, False, doc="Whether the final executable exports symbols."),
    define("bPrecompile", bool, False, cli=["-Precompile"]),
    define("bEnableOSX109Support", bool, False),
    define("bIsBuildingConsoleApplication", bool, False),
    define("bDisableSymbolCache", bool, True),
    define(
        "bUseUnityBuild",
        bool,
        True,
        config=[xml("bUseUnityBuild")],
        cli=[CommandLineBinding("-DisableUnity", value=False)],
    ),
    define("bForceUnityBuild", bool, False, config=[xml("bForceUnityBuild")], cli=["-ForceUnity"]),
    define("bUseAdaptiveUnityBuild", bool, True, config=[xml("bUseAdaptiveUnityBuild")]),
    define(
        "bAdaptiveUnityDisablesOptimizations", bool, False, config=[xml("bAdaptiveUnityDisablesOptimizations")]
    ),
    define("bAdaptiveUnityDisablesPCH", bool, False, config=[xml("bAdaptiveUnityDisablesPCH")]),
    define(
        "bAdaptiveUnityDisablesPCHForProject",
        bool,
        ComputedDefault(_adaptive_unity_disables_pch_for_project, ("bAdaptiveUnityDisablesPCH",)),
        config=[xml("bAdaptiveUnityDisablesProjectPCH")],
    ),
    define("bAdaptiveUnityCreatesDedicatedPCH", bool, False, config=[xml("bAdaptiveUnityCreatesDedicatedPCH")]),
    define(
        "bAdaptiveUnityEnablesEditAndContinue", bool, False, config=[xml("bAdaptiveUnityEnablesEditAndContinue")]
    ),
    define("MinGameModuleSourceFilesForUnityBuild", int, 32, config=[xml("MinGameModuleSourceFilesForUnityBuild")]),
    define("bShadowVariableErrors", bool, False, config=[xml("bShadowVariableErrors")], cli=["-ShadowVariableErrors"]),
    define("bUndefinedIdentifierErrors", bool, True, config=[xml("bUndefinedIdentifierErrors")]),
    define(
        "bUseFastMonoCalls",
        bool,
        True,
        config=[xml("bUseFastMonoCalls")],
        cli=[
            CommandLineBinding("-FastMonoCalls", value=True),
            CommandLineBinding("-NoFastMonoCalls", value=False),
        ],
    ),
    define("bUseFastSemanticsRenderContexts", bool, True, config=[xml("bUseFastSemanticsRenderContexts")]),
    define("NumIncludedBytesPerUnityCPP", int, 384 * 1024, config=[xml("NumIncludedBytesPerUnityCPP")]),
    define("bStressTestUnity", bool, False, config=[xml("bStressTestUnity")], cli=["-StressTestUnity"]),
    define("bForceDebugInfo", bool, False, cli=["-ForceDebugInfo"]),
    define("bDisableDebugInfo", bool, False, config=[xml("bDisableDebugInfo")], cli=["-NoDebugInfo"]),
    define("bDisableDebugInfoForGeneratedCode", bool, False, config=[xml("bDisableDebugInfoForGeneratedCode")]),
    define("bOmitPCDebugInfoInDevelopment", bool, False, config=[xml("bOmitPCDebugInfoInDevelopment")]),
    define(
        "bUsePDBFiles",
        bool,
        False,
        config=[xml("bUsePDBFiles")],
        cli=[CommandLineBinding("-NoPDB", value=False)],
    ),
    define(
        "bUsePCHFiles",
        bool,
        True,
        config=[xml("bUsePCHFiles")],
        cli=[CommandLineBinding("-NoPCH", value=False)],
    ),
    define("MinFilesUsingPrecompiledHeader", int, 6, config=[xml("MinFilesUsingPrecompiledHeader")]),
    define("bForcePrecompiledHeaderForGameModules", bool, True, config=[xml("bForcePrecompiledHeaderForGameModules")]),
    define(
        "bUseIncrementalLinking", bool, False, config=[xml("bUseIncrementalLinking")], cli=["-IncrementalLinking"]
    ),
    define("bAllowLTCG", bool, False, config=[xml("bAllowLTCG")], cli=["-LTCG"]),
    define(
        "bPGOProfile",
        bool,
        False,
        config=[xml("bPGOProfile")],
        cli=[CommandLineBinding("-PGOProfile", value=True)],
    ),
    define(
        "bPGOOptimize", bool, False, config=[xml("bPGOOptimize")], cli=[CommandLineBinding("-PGOOptimize", value=True)]
    ),
    define("bAllowASLRInShipping", bool, True, config=[xml("bAllowASLRInShipping")]),
    define("bSupportEditAndContinue", bool, False, config=[xml("bSupportEditAndContinue")]),
    define("bOmitFramePointers", bool, True, config=[xml("bOmitFramePointers")]),
    define(
        "bStripSymbolsOnIOS",
        bool,
        deprecation=Deprecation(
            "bStripSymbolsOnIOS is deprecated; use IOSPlatform.bStripSymbols",
            replacement="bStripSymbols",
            group=IOS_GROUP,
            mode=AliasMode.GET_SET,
        ),
    ),
    define(
        "bCreateStubIPA",
        bool,
        deprecation=Deprecation(
            "bCreateStubIPA is deprecated; use IOSPlatform.bCreateStubIPA",
            replacement="bCreateStubIPA",
            group=IOS_GROUP,
            mode=AliasMode.GET_SET,
        ),
    ),
    define("bUseMallocProfiler", bool, False, config=[xml("bUseMallocProfiler")]),
    define(
        "bUseSharedPCHs",
        bool,
        True,
        config=[xml("bUseSharedPCHs")],
        cli=[CommandLineBinding("-NoSharedPCH", value=False)],
    ),
    define("bUseShippingPhysXLibraries", bool, False, config=[xml("bUseShippingPhysXLibraries")]),
    define("bUseCheckedPhysXLibraries", bool, False, config=[xml("bUseCheckedPhysXLibraries")]),
    define("bCheckLicenseViolations", bool, True, config=[xml("bCheckLicenseViolations")]),
    define("bBreakBuildOnLicenseViolation", bool, True, config=[xml("bBreakBuildOnLicenseViolation")]),
    define("bUseFastPDBLinking", bool | None, None, config=[xml("bUseFastPDBLinking")], cli=["-FastPDB"]),
    define("bCreateMapFile", bool, False, config=[xml("bCreateMapFile")], cli=["-MapFile"]),
    define("BundleVersion", str | None, None, cli=["-BundleVersion"]),
    define(
        "bDeployAfterCompile",
        bool,
        False,
        cli=["-Deploy", CommandLineBinding("-SkipDeploy", value=False)],
    ),
    define("bAllowRemotelyCompiledPCHs", bool, False),
    define("bCheckSystemHeadersForModification", bool, False, config=[xml("bCheckSystemHeadersForModification")]),
    define("bDisableLinking", bool, False, cli=["-NoLink"]),
    define(
        "bFormalBuild",
        bool,
        IdentityDefault(lambda identity: identity.version.is_formal),
        cli=["-Formal"],
        doc="Formal builds carry a changelist from a promoted build.",
    ),
    define("bFlushBuildDirOnRemoteMac", bool, False, config=[xml("bFlushBuildDirOnRemoteMac")], cli=["-FlushMac"]),
    define("bPrintToolChainTimingInfo", bool, False, config=[xml("bPrintToolChainTimingInfo")], cli=["-Timing"]),
    define("bHideSymbolsByDefault", bool, False, cli=["-HideSymbolsByDefault"]),
    define("ToolChainName", str | None, None, cli=["-ToolChain"]),
    define("bDisableUnverifiedCertificates", bool, False),
    define("bAllowGeneratedIniWhenCooked", bool, True),
    define("bAllowNonUFSIniWhenCooked", bool, True),
    define("bLegacyPublicIncludePaths", bool, True),
    define("CppStandard", CppStandardVersion, CppStandardVersion.LATEST, sensitive=True, config=[xml("CppStandard")]),
    define("bNoManifestChanges", bool, False, cli=["-NoManifestChanges"]),
    define(
        "BuildVersion",
        str | None,
        IdentityDefault(lambda identity: identity.version.default_build_version()),
        cli=["-BuildVersion"],
    ),
    # Linking and layout
    define(
        "LinkType",
        TargetLinkType,
        ComputedDefault(_link_type, ("Type",)),
        sensitive=True,
        cli=[
            CommandLineBinding("-Monolithic", value=TargetLinkType.MONOLITHIC),
            CommandLineBinding("-Modular", value=TargetLinkType.MODULAR),
        ],
        default_marker=TargetLinkType.DEFAULT,
        doc="Monolithic or modular linking; editors default to modular.",
    ),
    define("GlobalDefinitions", list[str], [], sensitive=True, cli=["-Define:"]),
    define("ProjectDefinitions", list[str], []),
    define(
        "LaunchModuleName",
        str | None,
        ComputedDefault(_launch_module_name, ("Type",)),
        doc="Module providing the entry point; programs have none by default.",
    ),
    define("ExtraModuleNames", list[str], []),
    define("ManifestFileNames", list[Path], [], cli=["-Manifest"]),
    define("DependencyListFileNames", list[Path], [], cli=["-DependencyList"]),
    define(
        "BuildEnvironment",
        TargetBuildEnvironment,
        TargetBuildEnvironment.DEFAULT,
        cli=[
            CommandLineBinding("-SharedBuildEnvironment", value=TargetBuildEnvironment.SHARED),
            CommandLineBinding("-UniqueBuildEnvironment", value=TargetBuildEnvironment.UNIQUE),
        ],
    ),
    define("PreBuildSteps", list[str], []),
    define("PostBuildSteps", list[str], []),
    define("AdditionalBuildProducts", list[str], []),
    define("AdditionalCompilerArguments", str | None, None, sensitive=True, cli=["-CompilerArguments="]),
    define("AdditionalLinkerArguments", str | None, None, sensitive=True, cli=["-LinkerArguments="]),
    define("GeneratedProjectName", str | None, None),
)

__all__ = ["IOS_GROUP", "TARGET_FIELDS"]
