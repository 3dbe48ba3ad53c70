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


"""Property-based tests for projections and environment validation."""

from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from targetrules.core.model_types import TargetType
from targetrules.environment import SharedEnvironmentValidator
from targetrules.fields import DEFAULT_REGISTRY
from targetrules.projection import ReadOnlyProjector
from tests.fixtures.builders import build_identity, build_preset_config
from tests.property_based.strategies import bool_field_names

pytestmark = pytest.mark.property

_WRITES = st.lists(st.tuples(bool_field_names(), st.booleans()), max_size=10)


@settings(max_examples=50)
@given(_WRITES)
def test_projection_reads_through_to_latest_writes(writes: list[tuple[str, bool]]) -> None:
    config = build_preset_config(TargetType.GAME)
    projection = ReadOnlyProjector().project(config)
    for name, value in writes:
        config.set(name, value)
        assert projection.get(name) is value
    assert projection.snapshot() == config.snapshot()


@settings(max_examples=50)
@given(_WRITES, _WRITES)
def test_validation_is_symmetric_and_exact(
    writes_a: list[tuple[str, bool]],
    writes_b: list[tuple[str, bool]],
) -> None:
    a = build_preset_config(TargetType.EDITOR, identity=build_identity("A"))
    b = build_preset_config(TargetType.EDITOR, identity=build_identity("B"))
    for name, value in writes_a:
        a.set(name, value)
    for name, value in writes_b:
        b.set(name, value)

    validator = SharedEnvironmentValidator()
    forward = validator.validate(a, b)
    backward = validator.validate(b, a)
    assert forward.fields == backward.fields

    expected = tuple(
        descriptor.name
        for descriptor in DEFAULT_REGISTRY.root.environment_sensitive()
        if a.root.read(descriptor.name) != b.root.read(descriptor.name)
    )
    assert forward.fields == expected
    assert validator.validate(a, a).is_compatible
