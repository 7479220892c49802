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


"""Lifecycle events emitted by a running agent process.

Every event carries the ``run_id`` of the process that produced it and, for
sub-agents, the ``parent_run_id`` of the process that spawned it. Opaque
payloads (blackboard objects, results, states) are only ever rendered to
strings, never inspected.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from typing import Any, List, Optional


class LifecycleState(Enum):
    WAITING = "WAITING"
    PAUSED = "PAUSED"
    STUCK = "STUCK"


@dataclass(kw_only=True)
class ToolGroupMetadata:
    name: Optional[str] = None
    description: Optional[str] = None
    role: Optional[str] = None


def _new_actions() -> List[Any]:
    return []


@dataclass(kw_only=True)
class Plan:
    """A formulated plan: an ordered list of actions towards a goal.

    Actions and goal may be plain names or objects exposing ``name``.
    """

    actions: List[Any] = field(default_factory=_new_actions)
    goal: Any = None


@dataclass(kw_only=True)
class ProcessEvent:
    run_id: str
    parent_run_id: Optional[str] = None


@dataclass(kw_only=True)
class AgentCreated(ProcessEvent):
    agent_name: str
    goal_name: Optional[str] = None
    planner_type: Optional[str] = None
    # A display string, or the blackboard objects themselves
    blackboard: Any = None


@dataclass(kw_only=True)
class AgentCompleted(ProcessEvent):
    blackboard: Any = None
    last_result: Any = None


@dataclass(kw_only=True)
class AgentFailed(ProcessEvent):
    failure_info: Any = None


@dataclass(kw_only=True)
class ActionStarted(ProcessEvent):
    action_name: str
    short_name: Optional[str] = None
    description: Optional[str] = None
    inputs: Optional[str] = None

    def __post_init__(self):
        if not self.short_name:
            self.short_name = self.action_name.rsplit(".", 1)[-1]


@dataclass(kw_only=True)
class ActionFinished(ProcessEvent):
    action_name: str
    status: Optional[str] = None
    running_time: Optional[timedelta] = None
    blackboard: Any = None
    last_result: Any = None


@dataclass(kw_only=True)
class ToolCallRequested(ProcessEvent):
    tool_name: str
    tool_input: Optional[str] = None
    correlation_id: Optional[str] = None
    tool_group: Optional[ToolGroupMetadata] = None


@dataclass(kw_only=True)
class ToolCallResponded(ProcessEvent):
    tool_name: str
    running_time: Optional[timedelta] = None
    # Raw value, exception, or a success-or-error wrapper
    result: Any = None


@dataclass(kw_only=True)
class GoalAchieved(ProcessEvent):
    goal_name: str
    blackboard: Any = None
    last_result: Any = None
    world_state: Optional[str] = None


@dataclass(kw_only=True)
class PlanReady(ProcessEvent):
    planner_type: Optional[str] = None
    world_state: Optional[str] = None
    blackboard: Any = None


@dataclass(kw_only=True)
class PlanFormulated(ProcessEvent):
    planner_type: Optional[str] = None
    plan: Optional[Plan] = None
    world_state: Optional[str] = None


@dataclass(kw_only=True)
class StateChanged(ProcessEvent):
    new_state: Any = None


@dataclass(kw_only=True)
class LifecycleEntered(ProcessEvent):
    state: LifecycleState
    blackboard: Any = None


@dataclass(kw_only=True)
class ObjectAdded(ProcessEvent):
    value: Any = None


@dataclass(kw_only=True)
class ObjectBound(ProcessEvent):
    name: str
    value: Any = None
