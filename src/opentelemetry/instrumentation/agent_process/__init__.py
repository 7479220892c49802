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


"""
Tracing for multi-agent processes. Lifecycle events of a running agent
process (agents and sub-agents, actions, tool calls, planning, state and
lifecycle changes, object binding) become a nested span tree, and the span of
the agent, action or tool call in progress is the current span, so LLM and
HTTP client instrumentations nest their own spans under it.

Usage
-----
.. code:: python

    from opentelemetry.instrumentation.agent_process import (
        AgentCreated,
        AgentCompleted,
        ActionStarted,
        ActionFinished,
        create_event_router,
    )

    router = create_event_router()
    router.handle(AgentCreated(run_id="run-1", agent_name="TravelPlanner"))
    router.handle(ActionStarted(run_id="run-1", action_name="travel.FindFlights"))
    # LLM client spans created here are children of the "FindFlights" span
    router.handle(ActionFinished(run_id="run-1", action_name="travel.FindFlights"))
    router.handle(AgentCompleted(run_id="run-1"))

Settings are read from ``OTEL_INSTRUMENTATION_AGENT_PROCESS_*`` environment
variables unless an :class:`AgentProcessSettings` is passed.

API
---
"""

from __future__ import annotations

import logging
from typing import Optional

from opentelemetry.metrics import MeterProvider
from opentelemetry.trace import TracerProvider

from opentelemetry.instrumentation.agent_process.backends import (
    NoOpBackend,
    select_backend,
)
from opentelemetry.instrumentation.agent_process.config import (
    AgentProcessSettings,
)
from opentelemetry.instrumentation.agent_process.event_router import (
    EventRouter,
)
from opentelemetry.instrumentation.agent_process.events import (
    ActionFinished,
    ActionStarted,
    AgentCompleted,
    AgentCreated,
    AgentFailed,
    GoalAchieved,
    LifecycleEntered,
    LifecycleState,
    ObjectAdded,
    ObjectBound,
    Plan,
    PlanFormulated,
    PlanReady,
    ProcessEvent,
    StateChanged,
    ToolCallRequested,
    ToolCallResponded,
    ToolGroupMetadata,
)
from opentelemetry.instrumentation.agent_process.version import __version__

logger = logging.getLogger(__name__)


def create_event_router(
    settings: Optional[AgentProcessSettings] = None,
    tracer_provider: Optional[TracerProvider] = None,
    meter_provider: Optional[MeterProvider] = None,
) -> EventRouter:
    """Build an :class:`EventRouter` on the first available tracing backend.

    The global tracer and meter providers are used when none are given.
    """
    if settings is None:
        settings = AgentProcessSettings.from_env()
    if not settings.enabled:
        logger.debug("Agent process tracing is disabled")
        return EventRouter(settings, NoOpBackend())
    backend = select_backend(
        settings.backend_preference,
        tracer_provider=tracer_provider,
        meter_provider=meter_provider,
        tracer_name=settings.tracer_name,
        tracer_version=settings.tracer_version,
    )
    return EventRouter(settings, backend)


__all__ = [
    "__version__",
    "ActionFinished",
    "ActionStarted",
    "AgentCompleted",
    "AgentCreated",
    "AgentFailed",
    "AgentProcessSettings",
    "EventRouter",
    "GoalAchieved",
    "LifecycleEntered",
    "LifecycleState",
    "ObjectAdded",
    "ObjectBound",
    "Plan",
    "PlanFormulated",
    "PlanReady",
    "ProcessEvent",
    "StateChanged",
    "ToolCallRequested",
    "ToolCallResponded",
    "ToolGroupMetadata",
    "create_event_router",
]
