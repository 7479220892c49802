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


"""Parent selection for every span the engine opens.

=========================  ===============================================
Category                   Parent
=========================  ===============================================
agent, top level           none, a new trace
agent, sub-agent           open agent span of ``parent_run_id``, else none
action                     open agent span of ``run_id``
tool call                  ambient current span, else open action span of
                           ``run_id``, else its agent span
goal, planning, state,     open action span of ``run_id``, else its agent
lifecycle, object          span
=========================  ===============================================

Non-agent spans with no resolvable parent fall back to whatever span is
ambient when they are created.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, NamedTuple, Optional

from opentelemetry.instrumentation.agent_process.backends.base import SpanRole
from opentelemetry.instrumentation.agent_process.registry import (
    ActiveSpanRegistry,
    RegistryKey,
)


class EventCategory(Enum):
    AGENT = "agent"
    ACTION = "action"
    TOOL = "tool"
    GOAL = "goal"
    PLANNING = "planning"
    STATE = "state"
    LIFECYCLE = "lifecycle"
    OBJECT = "object"


class ParentResolution(NamedTuple):
    parent: Any
    role: SpanRole


_AMBIENT = ParentResolution(None, SpanRole.INTERNAL)
_NEW_TRACE = ParentResolution(None, SpanRole.ROOT)


def _span_of(entry) -> Optional[ParentResolution]:
    if entry is None:
        return None
    return ParentResolution(entry.span, SpanRole.INTERNAL)


def resolve_parent(
    category: EventCategory,
    run_id: str,
    parent_run_id: Optional[str],
    registry: ActiveSpanRegistry,
    ambient: Any = None,
) -> ParentResolution:
    """Pick the parent span for a new span of ``category`` in ``run_id``.

    ``ambient`` is the valid ambient current span, if any; it only matters
    for tool calls.
    """
    if category is EventCategory.AGENT:
        if parent_run_id:
            parent = _span_of(registry.get(RegistryKey.agent(parent_run_id)))
            if parent is not None:
                return parent
        return _NEW_TRACE

    agent = registry.get(RegistryKey.agent(run_id))
    if category is EventCategory.ACTION:
        return _span_of(agent) or _AMBIENT

    if category is EventCategory.TOOL and ambient is not None:
        return ParentResolution(ambient, SpanRole.INTERNAL)

    return (
        _span_of(registry.find_action(run_id)) or _span_of(agent) or _AMBIENT
    )
