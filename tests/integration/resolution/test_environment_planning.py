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


"""Concurrent resolution followed by shared environment planning."""

from __future__ import annotations

import pytest

from targetrules import TargetRequest, resolve_targets
from targetrules.core.model_types import EnvironmentPolicy, TargetType
from targetrules.environment import SharedEnvironmentValidator, plan_build_environments
from targetrules.exceptions import SharedEnvironmentMismatchError
from tests.fixtures.builders import INSTALLED_HOST, LINUX_HOST, build_identity, build_sources

pytestmark = pytest.mark.integration


def _requests(*editor_arguments: tuple[str, ...]) -> list[TargetRequest]:
    requests = [
        TargetRequest(build_identity(f"Editor{index}"), TargetType.EDITOR, build_sources(arguments))
        for index, arguments in enumerate(editor_arguments)
    ]
    requests.append(TargetRequest(build_identity("MyGame"), TargetType.GAME))
    requests.append(TargetRequest(build_identity("UnrealPak"), TargetType.PROGRAM))
    return requests


def test_compatible_editors_share_an_environment() -> None:
    results = resolve_targets(_requests((), ("-IWYU",), ()), max_workers=4, host=LINUX_HOST)
    targets = [result.unwrap() for result in results]

    plan = plan_build_environments(targets)
    assert plan.shared_names == ("Editor0", "Editor1", "Editor2")
    assert plan.unique_names == ("MyGame", "UnrealPak")


def test_mismatching_editor_fails_the_plan() -> None:
    results = resolve_targets(_requests((), ("-Define:HOTFIX=1",)), max_workers=4, host=LINUX_HOST)
    targets = [result.unwrap() for result in results]

    with pytest.raises(SharedEnvironmentMismatchError) as excinfo:
        plan_build_environments(targets)
    (report,) = excinfo.value.reports
    assert report.target_a == "Editor0"
    assert report.target_b == "Editor1"
    assert report.fields == ("GlobalDefinitions",)


def test_force_unique_policy_splits_mismatching_editor() -> None:
    results = resolve_targets(_requests((), ("-2019",), ()), max_workers=4, host=LINUX_HOST)
    targets = [result.unwrap() for result in results]

    plan = plan_build_environments(targets, EnvironmentPolicy.FORCE_UNIQUE)
    assert plan.shared_names == ("Editor0", "Editor2")
    assert plan.unique_names == ("Editor1", "MyGame", "UnrealPak")
    assert plan.reports[0].fields == ("WindowsPlatform.Compiler",)


def test_installed_engine_compares_every_target() -> None:
    results = resolve_targets(_requests(()), max_workers=2, host=INSTALLED_HOST)
    targets = [result.unwrap() for result in results]

    plan = plan_build_environments(targets, EnvironmentPolicy.FORCE_UNIQUE)
    assert plan.shared_names == ("Editor0",)
    assert set(plan.unique_names) == {"MyGame", "UnrealPak"}
    editor, game = targets[0], targets[1]
    report = SharedEnvironmentValidator().validate(editor, game)
    assert "bBuildWithEditorOnlyData" in report.fields
    assert "LinkType" in report.fields
