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


"""Shared Hypothesis strategies for property-based tests."""

from __future__ import annotations

from hypothesis import strategies as st

from targetrules.core.model_types import TargetConfiguration, TargetPlatform, TargetType
from targetrules.fields import DEFAULT_REGISTRY
from targetrules.identity import BuildVersion, TargetIdentity

__all__ = [
    "bool_field_names",
    "definition_lists",
    "identities",
    "plugin_names",
    "resolvable_platforms",
    "target_types",
]

_PRESET_FIELDS = frozenset(
    {
        "bBuildWithEditorOnlyData",
        "bBuildRequiresCookedData",
        "bCompileAgainstEngine",
        "bWithServerCode",
        "bWithPerfCounters",
        "bIncludePluginsForTargetPlatforms",
        "bHasExports",
    },
)


def target_types() -> st.SearchStrategy[TargetType]:
    """Every target type."""
    return st.sampled_from(list(TargetType))


def resolvable_platforms() -> st.SearchStrategy[TargetPlatform]:
    """Platforms accepted by ``TargetIdentity``."""
    return st.sampled_from([platform for platform in TargetPlatform if platform is not TargetPlatform.UNKNOWN])


def identities() -> st.SearchStrategy[TargetIdentity]:
    """Valid target identities.

    Returns:
        Strategy building identities from short alphanumeric names, every
        resolvable platform and configuration, and arbitrary changelists.
    """
    return st.builds(
        TargetIdentity,
        name=st.from_regex(r"[A-Za-z][A-Za-z0-9]{0,15}", fullmatch=True),
        platform=resolvable_platforms(),
        configuration=st.sampled_from(
            [item for item in TargetConfiguration if item is not TargetConfiguration.UNKNOWN],
        ),
        version=st.builds(
            BuildVersion,
            changelist=st.integers(min_value=0, max_value=10_000_000),
            is_promoted_build=st.booleans(),
        ),
    )


def bool_field_names() -> st.SearchStrategy[str]:
    """Plain boolean root fields that no preset touches."""
    names = [
        descriptor.name
        for descriptor in DEFAULT_REGISTRY.root.stored_fields()
        if descriptor.value_type is bool
        and not descriptor.is_computed
        and not descriptor.is_deprecated
        and descriptor.name not in _PRESET_FIELDS
    ]
    return st.sampled_from(sorted(names))


def plugin_names(max_size: int = 5) -> st.SearchStrategy[list[str]]:
    """Lists of plugin names that survive ``+`` splitting."""
    name = st.from_regex(r"[A-Za-z][A-Za-z0-9_]{0,11}", fullmatch=True)
    return st.lists(name, min_size=1, max_size=max_size)


def definition_lists(max_size: int = 4) -> st.SearchStrategy[list[str]]:
    """Lists of ``NAME=VALUE`` preprocessor definitions."""
    definition = st.from_regex(r"[A-Z][A-Z0-9_]{0,10}=[01]", fullmatch=True)
    return st.lists(definition, max_size=max_size)
