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


"""Unit tests for field descriptors and bindings."""

from __future__ import annotations

import pytest

from targetrules._internal.precedence import UNSET
from targetrules.core.model_types import ConfigHierarchyType, ConsistencyTag, TargetLinkType
from targetrules.fields import (
    DEFAULT_REGISTRY,
    AliasMode,
    CommandLineBinding,
    ComputedDefault,
    Constant,
    IdentityDefault,
    Override,
    define,
)
from targetrules.fields.descriptors import ini, xml

pytestmark = pytest.mark.unit


def test_constant_returns_fresh_lists() -> None:
    default = Constant(["A"])
    first = default.evaluate()
    assert isinstance(first, list)
    first.append("B")
    assert default.evaluate() == ["A"]


def test_override_states() -> None:
    unset: Override[int] = Override.default()
    assert not unset.is_explicit
    assert unset.resolve(lambda: 7) == 7
    with pytest.raises(ValueError, match="no explicit value"):
        _ = unset.value

    explicit = Override.explicit(3)
    assert explicit.is_explicit
    assert explicit.value == 3
    assert explicit.resolve(lambda: 7) == 3


def test_override_can_hold_none() -> None:
    override: Override[None] = Override.explicit(None)
    assert override.is_explicit
    assert override.resolve(lambda: "Launch") is None


@pytest.mark.parametrize(
    ("argument", "expected"),
    [
        ("-NoPCH", False),
        ("-nopch", False),
        ("-NoPCH=true", False),
        ("-NoPCHFiles", UNSET),
        ("NoPCH", UNSET),
    ],
)
def test_forced_value_binding(argument: str, expected: object) -> None:
    binding = CommandLineBinding("-NoPCH", value=False)
    assert binding.match(argument) == expected


def test_bare_flag_binding() -> None:
    binding = CommandLineBinding("-Formal")
    assert binding.match("-Formal") == "true"
    assert binding.match("-formal=false") == "false"
    assert binding.match("-Formality") is UNSET
    assert not binding.is_prefix
    assert not binding.forces_value


def test_prefix_binding_keeps_value_case() -> None:
    binding = CommandLineBinding("-Define:")
    assert binding.is_prefix
    assert binding.match("-define:WITH_FOO=1") == "WITH_FOO=1"
    assert binding.match("-Define") is UNSET


def test_list_binding_splits_on_separator() -> None:
    binding = CommandLineBinding("-EnablePlugin=", list_separator="+")
    assert binding.split("A+B++C") == ["A", "B", "C"]
    assert CommandLineBinding("-Define:").split("A+B") == ["A+B"]


def test_config_binding_helpers() -> None:
    engine = ini("bCompileICU")
    assert engine.hierarchy is ConfigHierarchyType.ENGINE
    assert engine.section == "/Script/BuildSettings.BuildSettings"
    build = xml("bUsePCHFiles")
    assert build.hierarchy is ConfigHierarchyType.BUILD_CONFIGURATION
    assert build.section == "BuildConfiguration"
    assert build.key == "bUsePCHFiles"


def test_define_wraps_plain_defaults_and_flags() -> None:
    descriptor = define("bExample", bool, True, sensitive=True, cli=["-Example"])
    assert isinstance(descriptor.default, Constant)
    assert descriptor.tag is ConsistencyTag.ENVIRONMENT_SENSITIVE
    assert descriptor.is_environment_sensitive
    assert descriptor.command_line == (CommandLineBinding("-Example"),)
    assert not descriptor.is_computed
    assert not descriptor.is_list


def test_define_keeps_default_rules() -> None:
    rule = IdentityDefault(lambda identity: identity.name)
    assert define("Label", str, rule).default is rule
    computed = define("Derived", int, ComputedDefault(lambda fields: fields["Base"] + 1, ("Base",)))
    assert computed.is_computed


def test_builtin_descriptor_properties() -> None:
    root = DEFAULT_REGISTRY.root
    link_type = root.get("LinkType")
    assert link_type.is_computed
    assert link_type.default_marker is TargetLinkType.DEFAULT
    assert root.get("GlobalDefinitions").is_list
    assert root.get("ExcludePlugins").is_alias
    deprecation = root.get("bCompileLeanAndMeanUE").deprecation
    assert deprecation is not None
    assert deprecation.mode is AliasMode.GET_SET
    build_all = root.get("bBuildAllPlugins")
    assert build_all.is_deprecated
    assert not build_all.is_alias
