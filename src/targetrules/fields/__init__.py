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

"""Declarative field registry for target configurations."""

from __future__ import annotations

from typing import Final

from targetrules.core.type_aliases import ROOT_GROUP

from .descriptors import (
    AliasMode,
    CommandLineBinding,
    ComputedDefault,
    ConfigFileBinding,
    Constant,
    Deprecation,
    FieldDescriptor,
    FieldReader,
    IdentityDefault,
    Override,
    define,
)
from .platform_fields import PLATFORM_FIELD_GROUPS
from .registry import FieldRegistry, GroupSpec
from .target_fields import TARGET_FIELDS

TARGET_GROUP: Final[GroupSpec] = GroupSpec(ROOT_GROUP, TARGET_FIELDS)
DEFAULT_REGISTRY: Final[FieldRegistry] = FieldRegistry(TARGET_GROUP, PLATFORM_FIELD_GROUPS)

__all__ = [
    "DEFAULT_REGISTRY",
    "TARGET_GROUP",
    "AliasMode",
    "CommandLineBinding",
    "ComputedDefault",
    "ConfigFileBinding",
    "Constant",
    "Deprecation",
    "FieldDescriptor",
    "FieldReader",
    "FieldRegistry",
    "GroupSpec",
    "IdentityDefault",
    "Override",
    "define",
]
