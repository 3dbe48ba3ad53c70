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


"""Property-based tests for sources and precedence."""

from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from targetrules.core.model_types import ConfigHierarchyType, ValueOrigin
from targetrules.fields import DEFAULT_REGISTRY
from targetrules.fields.descriptors import BUILD_CONFIGURATION_SECTION
from targetrules.sources import CommandLineSource
from tests.fixtures.builders import build_resolved_config, build_sources
from tests.property_based.strategies import plugin_names

pytestmark = pytest.mark.property

ENABLE_PLUGINS = DEFAULT_REGISTRY.root.get("EnablePlugins")


@given(st.lists(plugin_names(), min_size=1, max_size=4))
def test_plugin_flags_concatenate_in_order(batches: list[list[str]]) -> None:
    arguments = [f"-EnablePlugin={'+'.join(batch)}" for batch in batches]
    expected = [name for batch in batches for name in batch]
    assert CommandLineSource(arguments).lookup(ENABLE_PLUGINS) == expected


@settings(max_examples=50)
@given(st.one_of(st.none(), st.booleans()), st.one_of(st.none(), st.booleans()))
def test_command_line_beats_config_file(config_value: bool | None, cli_value: bool | None) -> None:
    values: dict[tuple[ConfigHierarchyType, str, str], object] = {}
    if config_value is not None:
        values[(ConfigHierarchyType.BUILD_CONFIGURATION, BUILD_CONFIGURATION_SECTION, "bForceUnityBuild")] = (
            config_value
        )
    arguments = [] if cli_value is None else [f"-ForceUnity={str(cli_value).lower()}"]
    config = build_resolved_config(sources=build_sources(arguments, values))

    if cli_value is not None:
        assert config.bForceUnityBuild is cli_value
        assert config.origin("bForceUnityBuild") is ValueOrigin.COMMAND_LINE
    elif config_value is not None:
        assert config.bForceUnityBuild is config_value
        assert config.origin("bForceUnityBuild") is ValueOrigin.CONFIG_FILE
    else:
        assert config.bForceUnityBuild is False
        assert config.origin("bForceUnityBuild") is ValueOrigin.DEFAULT
