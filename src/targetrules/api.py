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

"""High-level entry points: build one target, or many concurrently."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from targetrules.core.model_types import LogComponent, TargetType
from targetrules.exceptions import TargetRulesError
from targetrules.identity import HostFacts
from targetrules.logging import structured_extra
from targetrules.presets import TargetTypePresetApplier
from targetrules.projection import ImmutableConfiguration, ReadOnlyProjector
from targetrules.resolver import ConfigResolver
from targetrules.sources.base import ConfigSources

if TYPE_CHECKING:
    from targetrules.fields.registry import FieldRegistry
    from targetrules.identity import TargetIdentity

logger: logging.Logger = logging.getLogger("targetrules.api")


def _no_overrides() -> Mapping[str, object]:
    return MappingProxyType({})


@dataclass(slots=True, frozen=True)
class TargetRequest:
    """Everything needed to build one target.

    Attributes:
        identity: Target identity.
        target_type: Type of the target.
        sources: Config sources for the target.
        overrides: Explicit caller values keyed by ``Field`` or ``Group.Field``.
    """

    identity: TargetIdentity
    target_type: TargetType = TargetType.GAME
    sources: ConfigSources = field(default_factory=ConfigSources)
    overrides: Mapping[str, object] = field(default_factory=_no_overrides)


@dataclass(slots=True, frozen=True)
class TargetResult:
    """Outcome of building one requested target."""

    request: TargetRequest
    configuration: ImmutableConfiguration | None = None
    error: TargetRulesError | None = None

    @property
    def ok(self) -> bool:
        """Whether the target was built."""
        return self.error is None

    def unwrap(self) -> ImmutableConfiguration:
        """Return the configuration or raise the recorded error."""
        if self.error is not None:
            raise self.error
        if self.configuration is None:
            msg = f"No configuration for {self.request.identity.name}"
            raise TargetRulesError(msg)
        return self.configuration


def build_target(
    identity: TargetIdentity,
    target_type: TargetType = TargetType.GAME,
    sources: ConfigSources | None = None,
    overrides: Mapping[str, object] | None = None,
    *,
    host: HostFacts | None = None,
    registry: FieldRegistry | None = None,
) -> ImmutableConfiguration:
    """Resolve, apply the preset, freeze and project one target.

    Args:
        identity: Target identity.
        target_type: Type of the target.
        sources: Config sources.
        overrides: Explicit caller values.
        host: Host facts; detected when omitted.
        registry: Field registry; the built-in registry when omitted.

    Returns:
        The frozen, read-only configuration.
    """
    resolver = ConfigResolver(registry, host=host)
    config = resolver.resolve(identity, sources, target_type, overrides)
    TargetTypePresetApplier().apply(config, target_type)
    config.freeze()
    return ReadOnlyProjector().project(config)


def resolve_targets(
    requests: Sequence[TargetRequest],
    *,
    max_workers: int | None = None,
    host: HostFacts | None = None,
    registry: FieldRegistry | None = None,
) -> list[TargetResult]:
    """Build several targets concurrently.

    Each target owns its configuration; only ``host`` is shared. A failure in
    one target is recorded in its result and does not affect the others.

    Args:
        requests: Targets to build.
        max_workers: Worker threads; ``1`` builds serially.
        host: Host facts shared by every target; detected once when omitted.
        registry: Field registry.

    Returns:
        One result per request, in request order.
    """
    if not requests:
        return []
    shared_host = host if host is not None else HostFacts.detect()

    def _build(request: TargetRequest) -> TargetResult:
        try:
            configuration = build_target(
                request.identity,
                request.target_type,
                request.sources,
                request.overrides,
                host=shared_host,
                registry=registry,
            )
        except TargetRulesError as exc:
            logger.error(  # noqa: TRY400  # JUSTIFIED: the exception is returned in the result
                "Failed to resolve %s: %s",
                request.identity.name,
                exc,
                extra=structured_extra(
                    component=LogComponent.API,
                    target=request.identity.name,
                    target_type=request.target_type,
                    platform=request.identity.platform,
                ),
            )
            return TargetResult(request, error=exc)
        return TargetResult(request, configuration=configuration)

    if max_workers == 1 or len(requests) == 1:
        return [_build(request) for request in requests]
    results: dict[int, TargetResult] = {}
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        future_map = {executor.submit(_build, request): index for index, request in enumerate(requests)}
        for future in as_completed(future_map):
            results[future_map[future]] = future.result()
    return [results[index] for index in range(len(requests))]


__all__ = ["TargetRequest", "TargetResult", "build_target", "resolve_targets"]
