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

"""Command-line source.

Arguments arrive pre-tokenized. A field may bind several spellings:

- ``-Name``: boolean true (or the binding's forced value).
- ``-Name=Value``: the value text.
- ``-Prefix=Value`` / ``-Prefix:Value``: prefix flags carrying their value.
- ``-Name=A+B``: several list entries split on the declared separator.

Flag matching is case-insensitive. For scalar fields the last matching
argument wins; list fields collect every match in argument order.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from targetrules._internal.precedence import UNSET, Unset
from targetrules.fields import DEFAULT_REGISTRY

if TYPE_CHECKING:
    from targetrules.fields.descriptors import CommandLineBinding, FieldDescriptor
    from targetrules.fields.registry import FieldRegistry


class CommandLineSource:
    """Pre-tokenized command-line arguments."""

    def __init__(self, arguments: Iterable[str] = ()) -> None:
        self._arguments = tuple(arguments)

    @property
    def arguments(self) -> tuple[str, ...]:
        """Arguments in the order given."""
        return self._arguments

    def lookup(self, descriptor: FieldDescriptor) -> object:
        """Return the raw value the arguments supply for ``descriptor``.

        Args:
            descriptor: Field to look up.

        Returns:
            The raw value (a list for list fields), or ``UNSET`` when no
            argument matches.
        """
        if not descriptor.command_line:
            return UNSET
        if descriptor.is_list:
            items: list[object] = []
            for argument in self._arguments:
                binding, raw = _first_match(descriptor.command_line, argument)
                if binding is None:
                    continue
                items.extend(binding.split(raw) if isinstance(raw, str) else [raw])
            return items or UNSET
        result: object = UNSET
        for argument in self._arguments:
            binding, raw = _first_match(descriptor.command_line, argument)
            if binding is not None:
                result = raw
        return result

    def unused_arguments(self, registry: FieldRegistry | None = None) -> tuple[str, ...]:
        """Return arguments that match no binding of any registered field."""
        registry = registry if registry is not None else DEFAULT_REGISTRY
        bindings = [binding for group in registry.groups for descriptor in group for binding in descriptor.command_line]
        return tuple(argument for argument in self._arguments if _first_match(bindings, argument)[0] is None)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self._arguments)!r})"


def _first_match(
    bindings: Iterable[CommandLineBinding],
    argument: str,
) -> tuple[CommandLineBinding | None, object]:
    for binding in bindings:
        raw = binding.match(argument)
        if not isinstance(raw, Unset):
            return binding, raw
    return None, UNSET


__all__ = ["CommandLineSource"]
