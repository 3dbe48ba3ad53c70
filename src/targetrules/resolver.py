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

"""Layered resolution of one target's configuration.

``ConfigResolver.resolve`` builds a ``MutableConfiguration`` from a target
identity and its sources. Layers run in a fixed order, root group first and
then each platform group:

1. Static defaults (constants and identity-derived values).
2. Config-file values.
3. Command-line values.
4. The platform reset hook, which cannot replace command-line values.
5. Caller overrides, recorded as explicit.
6. Crypto key registration definitions, appended to ``ProjectDefinitions``
   even when a caller override replaced the list.

Values read from sources are coerced to the declared field type; a value that
does not fit aborts resolution of that target with ``SourceCoercionError``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING

from targetrules._internal.precedence import Unset
from targetrules.configuration import MutableConfiguration
from targetrules.core.model_types import LogComponent, ResolutionStage, TargetType, ValueOrigin
from targetrules.crypto import crypto_definitions
from targetrules.fields import DEFAULT_REGISTRY
from targetrules.logging import structured_extra
from targetrules.sources.base import ConfigSources

if TYPE_CHECKING:
    from targetrules.configuration import ConfigurableGroup
    from targetrules.fields.registry import FieldRegistry
    from targetrules.identity import HostFacts, TargetIdentity
    from targetrules.sources.base import ConfigFileReader
    from targetrules.sources.command_line import CommandLineSource

logger: logging.Logger = logging.getLogger("targetrules.resolver")


class ConfigResolver:
    """Produces resolved mutable configurations."""

    def __init__(self, registry: FieldRegistry | None = None, *, host: HostFacts | None = None) -> None:
        """Create a resolver.

        Args:
            registry: Field registry; the built-in registry when omitted.
            host: Host facts shared by every resolution; detected per
                configuration when omitted.
        """
        self._registry = registry if registry is not None else DEFAULT_REGISTRY
        self._host = host

    def resolve(
        self,
        identity: TargetIdentity,
        sources: ConfigSources | None = None,
        target_type: TargetType | None = None,
        overrides: Mapping[str, object] | None = None,
    ) -> MutableConfiguration:
        """Resolve the configuration of one target.

        Args:
            identity: Validated identity of the target.
            sources: Config files, command line, reset hooks and key store.
            target_type: Type of the target, stored in the root ``Type`` field.
            overrides: Explicit caller values keyed by ``Field`` or
                ``Group.Field``.

        Returns:
            A configuration at stage ``RESOLVED``.

        Raises:
            IdentityError: If ``identity`` is not a valid identity.
            SourceCoercionError: If a source value does not fit its field.
            UnknownFieldError: If an override names an unknown field.
        """
        sources = sources if sources is not None else ConfigSources()
        config = MutableConfiguration(identity, host=self._host, registry=self._registry)
        if target_type is not None:
            config.root.set("Type", target_type, ValueOrigin.EXPLICIT)

        if sources.config_files is not None:
            for group in config.groups:
                self._apply_config_files(config, group, sources.config_files)
        if sources.command_line is not None:
            for group in config.groups:
                self._apply_command_line(group, sources.command_line)
            self._log_unused_arguments(config, sources.command_line)

        hook = sources.reset_hooks.get(identity.platform)
        if hook is not None:
            hook.reset_defaults(identity.platform, config)

        for qualified, raw in (overrides or {}).items():
            config.set(qualified, raw, ValueOrigin.EXPLICIT)

        settings = sources.crypto.lookup(identity.project_directory, identity.platform) if sources.crypto else None
        config.root.extend("ProjectDefinitions", crypto_definitions(settings), unique=True)

        config.advance(ResolutionStage.RESOLVED)
        logger.info(
            "Resolved configuration for %s",
            identity.name,
            extra=structured_extra(
                component=LogComponent.RESOLVER,
                target=identity.name,
                target_type=config.root.read("Type"),
                platform=identity.platform,
            ),
        )
        return config

    @staticmethod
    def _apply_config_files(config: MutableConfiguration, group: ConfigurableGroup, reader: ConfigFileReader) -> None:
        identity = config.identity
        for descriptor in group.spec.stored_fields():
            for binding in descriptor.config_bindings:
                raw = reader.get(
                    binding.hierarchy,
                    binding.section,
                    binding.key,
                    identity.project_directory,
                    identity.platform,
                )
                if raw is not None:
                    group.set(descriptor.name, raw, ValueOrigin.CONFIG_FILE)

    @staticmethod
    def _apply_command_line(group: ConfigurableGroup, command_line: CommandLineSource) -> None:
        for descriptor in group.spec.stored_fields():
            raw = command_line.lookup(descriptor)
            if not isinstance(raw, Unset):
                group.set(descriptor.name, raw, ValueOrigin.COMMAND_LINE)

    def _log_unused_arguments(self, config: MutableConfiguration, command_line: CommandLineSource) -> None:
        unused = command_line.unused_arguments(self._registry)
        if unused:
            logger.debug(
                "Arguments not consumed by %s: %s",
                config.name,
                " ".join(unused),
                extra=structured_extra(
                    component=LogComponent.RESOLVER,
                    target=config.name,
                    details={"unused_arguments": list(unused)},
                ),
            )


__all__ = ["ConfigResolver"]
