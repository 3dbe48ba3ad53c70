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

"""targetrules: target build configuration resolution.

Resolves the build configuration of one target from its identity, config
files and command line, applies target-type presets, and exposes the result
as a read-only projection. Targets slated to share compiled binaries are
checked for consistency on every environment-sensitive field.
"""

from __future__ import annotations

from targetrules._internal.error_codes import error_code_catalog, error_code_for
from targetrules.api import TargetRequest, TargetResult, build_target, resolve_targets
from targetrules.configuration import ConfigurableGroup, MutableConfiguration
from targetrules.core.model_types import (
    EnvironmentPolicy,
    PlatformGroup,
    ResolutionStage,
    TargetBuildEnvironment,
    TargetConfiguration,
    TargetLinkType,
    TargetPlatform,
    TargetType,
    ValueOrigin,
)
from targetrules.environment import (
    ConsistencyReport,
    EnvironmentPlan,
    FieldMismatch,
    SharedEnvironmentValidator,
    effective_build_environment,
    plan_build_environments,
)
from targetrules.exceptions import (
    ConfigurationFrozenError,
    IdentityError,
    IncompleteResolutionError,
    ReadOnlyConfigurationError,
    SharedEnvironmentMismatchError,
    SourceCoercionError,
    TargetRulesError,
)
from targetrules.fields import DEFAULT_REGISTRY, Override
from targetrules.identity import BuildVersion, HostFacts, TargetIdentity
from targetrules.logging import configure_logging
from targetrules.nativization import find_nativized_plugin
from targetrules.presets import TargetTypePresetApplier
from targetrules.projection import ImmutableConfiguration, ImmutableGroup, ReadOnlyProjector
from targetrules.resolver import ConfigResolver
from targetrules.sources import (
    CommandLineSource,
    ConfigSources,
    CryptoSettings,
    InMemoryConfigFileReader,
    SigningKey,
    StaticCryptoKeyStore,
    TomlConfigFileReader,
)

__all__ = [
    "DEFAULT_REGISTRY",
    "BuildVersion",
    "CommandLineSource",
    "ConfigResolver",
    "ConfigSources",
    "ConfigurableGroup",
    "ConfigurationFrozenError",
    "ConsistencyReport",
    "CryptoSettings",
    "EnvironmentPlan",
    "EnvironmentPolicy",
    "FieldMismatch",
    "HostFacts",
    "IdentityError",
    "ImmutableConfiguration",
    "ImmutableGroup",
    "InMemoryConfigFileReader",
    "IncompleteResolutionError",
    "MutableConfiguration",
    "Override",
    "PlatformGroup",
    "ReadOnlyConfigurationError",
    "ReadOnlyProjector",
    "ResolutionStage",
    "SharedEnvironmentMismatchError",
    "SharedEnvironmentValidator",
    "SigningKey",
    "SourceCoercionError",
    "StaticCryptoKeyStore",
    "TargetBuildEnvironment",
    "TargetConfiguration",
    "TargetIdentity",
    "TargetLinkType",
    "TargetPlatform",
    "TargetRequest",
    "TargetResult",
    "TargetRulesError",
    "TargetType",
    "TargetTypePresetApplier",
    "TomlConfigFileReader",
    "ValueOrigin",
    "configure_logging",
    "effective_build_environment",
    "error_code_catalog",
    "error_code_for",
    "find_nativized_plugin",
    "plan_build_environments",
    "resolve_targets",
]
