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


"""Fixtures for multi-component integration tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from tests.fixtures.projects import ProjectLayout, write_project_layout

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def project_layout(tmp_path: Path) -> ProjectLayout:
    """Provide an engine and a project with layered config files.

    Returns:
        ``ProjectLayout`` rooted under ``tmp_path``.
    """
    return write_project_layout(tmp_path)
