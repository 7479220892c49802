# Copyright The OpenTelemetry Authors
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


"""Settings for agent process tracing.

Settings are read once, when the event router is built, and are never
re-read per event.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple

from opentelemetry.instrumentation.agent_process.environment_variables import (
    OTEL_INSTRUMENTATION_AGENT_PROCESS_BACKENDS,
    OTEL_INSTRUMENTATION_AGENT_PROCESS_ENABLED,
    OTEL_INSTRUMENTATION_AGENT_PROCESS_MAX_ATTRIBUTE_LENGTH,
    OTEL_INSTRUMENTATION_AGENT_PROCESS_TRACE_AGENT_EVENTS,
    OTEL_INSTRUMENTATION_AGENT_PROCESS_TRACE_LIFECYCLE_STATES,
    OTEL_INSTRUMENTATION_AGENT_PROCESS_TRACE_OBJECT_BINDING,
    OTEL_INSTRUMENTATION_AGENT_PROCESS_TRACE_PLANNING,
    OTEL_INSTRUMENTATION_AGENT_PROCESS_TRACE_STATE_TRANSITIONS,
    OTEL_INSTRUMENTATION_AGENT_PROCESS_TRACE_TOOL_CALLS,
    OTEL_INSTRUMENTATION_AGENT_PROCESS_TRACER_NAME,
)
from opentelemetry.instrumentation.agent_process.version import __version__

logger = logging.getLogger(__name__)

_SERVICE_NAME_ENV = "OTEL_SERVICE_NAME"

DEFAULT_BACKENDS: Tuple[str, ...] = ("observation", "opentracing", "opentelemetry")
DEFAULT_MAX_ATTRIBUTE_LENGTH = 4000
DEFAULT_SERVICE_NAME = "agent-process"
DEFAULT_TRACER_NAME = "opentelemetry.instrumentation.agent_process"


def _resolve_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in {"true", "1", "yes", "on"}:
        return True
    if text in {"false", "0", "no", "off"}:
        return False
    return default


def _resolve_backends(value: Optional[str]) -> Tuple[str, ...]:
    if not value:
        return DEFAULT_BACKENDS
    names = tuple(
        name.strip().lower() for name in value.split(",") if name.strip()
    )
    return names or DEFAULT_BACKENDS


def _resolve_max_length(value: Optional[str]) -> int:
    if value is None or not value.strip():
        return DEFAULT_MAX_ATTRIBUTE_LENGTH
    try:
        length = int(value)
    except ValueError:
        length = -1
    if length < 0:
        logger.warning(
            "%s is not a valid value for `%s`. Must be a non-negative integer. Defaulting to %s.",
            value,
            OTEL_INSTRUMENTATION_AGENT_PROCESS_MAX_ATTRIBUTE_LENGTH,
            DEFAULT_MAX_ATTRIBUTE_LENGTH,
        )
        return DEFAULT_MAX_ATTRIBUTE_LENGTH
    return length


@dataclass(frozen=True)
class AgentProcessSettings:
    """Configuration surface of the event router."""

    enabled: bool = True
    backend_preference: Tuple[str, ...] = field(
        default_factory=lambda: DEFAULT_BACKENDS
    )
    service_name: str = DEFAULT_SERVICE_NAME
    tracer_name: str = DEFAULT_TRACER_NAME
    tracer_version: str = __version__
    max_attribute_length: int = DEFAULT_MAX_ATTRIBUTE_LENGTH
    trace_agent_events: bool = True
    trace_tool_calls: bool = True
    trace_planning: bool = True
    trace_state_transitions: bool = True
    trace_lifecycle_states: bool = True
    trace_object_binding: bool = False

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None
    ) -> "AgentProcessSettings":
        """Build settings from ``OTEL_INSTRUMENTATION_AGENT_PROCESS_*`` variables."""
        env = os.environ if environ is None else environ
        return cls(
            enabled=_resolve_bool(
                env.get(OTEL_INSTRUMENTATION_AGENT_PROCESS_ENABLED), True
            ),
            backend_preference=_resolve_backends(
                env.get(OTEL_INSTRUMENTATION_AGENT_PROCESS_BACKENDS)
            ),
            service_name=env.get(_SERVICE_NAME_ENV) or DEFAULT_SERVICE_NAME,
            tracer_name=env.get(OTEL_INSTRUMENTATION_AGENT_PROCESS_TRACER_NAME)
            or DEFAULT_TRACER_NAME,
            max_attribute_length=_resolve_max_length(
                env.get(OTEL_INSTRUMENTATION_AGENT_PROCESS_MAX_ATTRIBUTE_LENGTH)
            ),
            trace_agent_events=_resolve_bool(
                env.get(OTEL_INSTRUMENTATION_AGENT_PROCESS_TRACE_AGENT_EVENTS),
                True,
            ),
            trace_tool_calls=_resolve_bool(
                env.get(OTEL_INSTRUMENTATION_AGENT_PROCESS_TRACE_TOOL_CALLS),
                True,
            ),
            trace_planning=_resolve_bool(
                env.get(OTEL_INSTRUMENTATION_AGENT_PROCESS_TRACE_PLANNING),
                True,
            ),
            trace_state_transitions=_resolve_bool(
                env.get(
                    OTEL_INSTRUMENTATION_AGENT_PROCESS_TRACE_STATE_TRANSITIONS
                ),
                True,
            ),
            trace_lifecycle_states=_resolve_bool(
                env.get(
                    OTEL_INSTRUMENTATION_AGENT_PROCESS_TRACE_LIFECYCLE_STATES
                ),
                True,
            ),
            trace_object_binding=_resolve_bool(
                env.get(OTEL_INSTRUMENTATION_AGENT_PROCESS_TRACE_OBJECT_BINDING),
                False,
            ),
        )
