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

"""Structured logging utilities shared across targetrules components."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Final, Literal, cast

from targetrules.compat import TypedDict, Unpack, override
from targetrules.core.model_types import LogComponent, LogFormat

ROOT_LOGGER_NAME: Final[str] = "targetrules"
LOG_FORMAT_ENV: Final[str] = "TARGETRULES_LOG_FORMAT"
LOG_LEVEL_ENV: Final[str] = "TARGETRULES_LOG_LEVEL"

LOG_FORMATS: Final[tuple[Literal["text", "json"], ...]] = cast(
    "tuple[Literal['text', 'json'], ...]",
    tuple(format_.value for format_ in LogFormat),
)
LOG_LEVELS: Final[tuple[Literal["debug", "info", "warning", "error"], ...]] = (
    "debug",
    "info",
    "warning",
    "error",
)
STRUCTURED_FIELDS: Final[tuple[str, ...]] = (
    "component",
    "target",
    "target_type",
    "platform",
    "field",
    "group",
    "origin",
    "path",
    "details",
)
CHILD_LOGGERS: Final[tuple[str, ...]] = (
    "targetrules.registry",
    "targetrules.sources",
    "targetrules.configuration",
    "targetrules.resolver",
    "targetrules.presets",
    "targetrules.projection",
    "targetrules.environment",
    "targetrules.nativization",
    "targetrules.api",
)


@dataclass(slots=True, frozen=True)
class LogConfig:
    """Resolved logging configuration."""

    format: LogFormat
    level: int
    level_name: str


def _jsonable(value: object) -> object:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Mapping):
        return {str(key): _jsonable(item) for key, item in cast("Mapping[object, object]", value).items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in cast("Iterable[object]", value)]
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    return str(value)


class JSONLogFormatter(logging.Formatter):
    """Render log records as structured JSON objects."""

    @override
    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as a JSON string.

        Args:
            record: Log record to serialise.

        Returns:
            JSON-formatted string containing standard and structured fields.
        """
        payload: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "message": record.getMessage(),
            "logger": record.name,
        }
        for field in STRUCTURED_FIELDS:
            if hasattr(record, field):
                payload[field] = getattr(record, field)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(_jsonable(payload), ensure_ascii=False)


class TextLogFormatter(logging.Formatter):
    """Readable, single-line formatter."""

    def __init__(self) -> None:
        super().__init__("[%(levelname)s] %(message)s")


def _coerce_log_format(log_format: LogFormat | str) -> LogFormat:
    if isinstance(log_format, LogFormat):
        return log_format
    return LogFormat.from_str(log_format)


def _coerce_log_level(level: str | int) -> tuple[int, str]:
    if isinstance(level, int):
        return level, logging.getLevelName(level).lower()
    value = str(level).strip().lower()
    match value:
        case "debug":
            return logging.DEBUG, "debug"
        case "warning":
            return logging.WARNING, "warning"
        case "error":
            return logging.ERROR, "error"
        case _:
            return logging.INFO, "info"


def _select_format(preferred: LogFormat | str | None) -> LogFormat:
    if preferred is not None:
        return _coerce_log_format(preferred)
    env_value = os.getenv(LOG_FORMAT_ENV)
    return _coerce_log_format(env_value) if env_value else LogFormat.TEXT


def _select_level(level: str | int | None) -> tuple[int, str]:
    if level is not None:
        return _coerce_log_level(level)
    env_value = os.getenv(LOG_LEVEL_ENV)
    if env_value:
        return _coerce_log_level(env_value)
    return _coerce_log_level("info")


def _configure_handler(log_format: LogFormat) -> logging.Handler:
    handler = logging.StreamHandler()
    if log_format is LogFormat.JSON:
        handler.setFormatter(JSONLogFormatter())
    else:
        handler.setFormatter(TextLogFormatter())
    return handler


def configure_logging(
    log_format: LogFormat | str | None = None,
    *,
    log_level: str | int | None = None,
) -> LogConfig:
    """Configure targetrules logging.

    Args:
        log_format: Desired output format. ``None`` falls back to
            ``TARGETRULES_LOG_FORMAT`` or ``text``.
        log_level: Preferred verbosity. ``None`` consults
            ``TARGETRULES_LOG_LEVEL`` or defaults to ``info``.

    Returns:
        The selected format and numeric level, which are applied to the root
        ``targetrules`` logger and its component loggers.
    """
    selected_format = _select_format(log_format)
    level_value, level_name = _select_level(log_level)

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.handlers.clear()
    root_logger.addHandler(_configure_handler(selected_format))
    root_logger.setLevel(level_value)
    root_logger.propagate = False

    for child in CHILD_LOGGERS:
        logging.getLogger(child).setLevel(level_value)
    return LogConfig(format=selected_format, level=level_value, level_name=level_name)


class _StructuredLogBase(TypedDict):
    component: LogComponent


class StructuredLogExtra(_StructuredLogBase, total=False):
    """Structured logging extras accepted by targetrules log records."""

    target: str
    target_type: str
    platform: str
    field: str
    group: str
    origin: str
    path: str
    details: Mapping[str, object]


class _StructuredLogKwargs(TypedDict, total=False):
    target: str
    target_type: object
    platform: object
    field: str
    group: str
    origin: object
    path: str | os.PathLike[str]
    details: Mapping[str, object]


def structured_extra(
    component: LogComponent,
    **kwargs: Unpack[_StructuredLogKwargs],
) -> StructuredLogExtra:
    """Return a consistently typed ``logging.extra`` payload.

    Args:
        component: Logical logging component for the record.
        **kwargs: Optional structured fields (target, field, platform, ...).

    Returns:
        Mapping suitable for the ``extra`` parameter when emitting log records.
    """
    extra: StructuredLogExtra = {"component": component}
    payload = cast("dict[str, object]", kwargs)
    raw_extra = cast("dict[str, object]", extra)
    for key in ("target", "target_type", "platform", "field", "group", "origin"):
        value = payload.get(key)
        if value is not None:
            raw_extra[key] = str(value)
    path = payload.get("path")
    if path is not None:
        raw_extra["path"] = os.fspath(cast("str | os.PathLike[str]", path))
    details = payload.get("details")
    if isinstance(details, Mapping) and details:
        raw_extra["details"] = dict(cast("Mapping[str, object]", details))
    return extra


__all__ = [
    "LOG_FORMATS",
    "LOG_LEVELS",
    "LogConfig",
    "StructuredLogExtra",
    "configure_logging",
    "structured_extra",
]
