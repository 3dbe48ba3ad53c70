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

"""Coercion of raw source values into declared field types.

Config files and the command line deliver strings, numbers and lists; field
descriptors declare Python types. Coercion goes through a cached pydantic
``TypeAdapter`` per declared type. Enum-typed fields are matched
case-insensitively first, so ``monolithic`` and ``Monolithic`` both resolve.
"""

from __future__ import annotations

import enum
import functools
import types
import typing
from typing import Any, cast

from pydantic import TypeAdapter, ValidationError

from targetrules.exceptions import SourceCoercionError

if typing.TYPE_CHECKING:
    from targetrules.core.model_types import ValueOrigin


@functools.cache
def _adapter(value_type: Any) -> TypeAdapter[Any]:
    return TypeAdapter(value_type)


def _enum_member(enum_type: type[enum.Enum], raw: object) -> enum.Enum | None:
    if isinstance(raw, enum_type):
        return raw
    if not isinstance(raw, str):
        return None
    from_str = getattr(enum_type, "from_str", None)
    if from_str is None:
        return None
    try:
        return cast("enum.Enum", from_str(raw))
    except ValueError:
        return None


def _enum_types(value_type: object) -> tuple[type[enum.Enum], ...]:
    if isinstance(value_type, type) and issubclass(value_type, enum.Enum):
        return (value_type,)
    origin = typing.get_origin(value_type)
    if origin in {typing.Union, types.UnionType}:
        return tuple(
            arg for arg in typing.get_args(value_type) if isinstance(arg, type) and issubclass(arg, enum.Enum)
        )
    return ()


def coerce_value(value_type: object, raw: object, *, field: str, source: ValueOrigin | str) -> object:
    """Coerce ``raw`` to ``value_type``.

    Args:
        value_type: Declared type of the field.
        raw: Value delivered by the source.
        field: Qualified field name, for error reporting.
        source: Layer that delivered the value, for error reporting.

    Returns:
        The validated value.

    Raises:
        SourceCoercionError: If the value cannot be represented as the type.
    """
    for enum_type in _enum_types(value_type):
        member = _enum_member(enum_type, raw)
        if member is not None:
            return member
    try:
        return _adapter(value_type).validate_python(raw)
    except ValidationError as exc:
        details = "; ".join(str(error["msg"]) for error in exc.errors())
        raise SourceCoercionError(field, raw, source, details) from exc


__all__ = ["coerce_value"]
