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


"""Attribute keys and values shared by the event handlers.

GenAI keys come from the semantic conventions package when the installed
version defines them, with the literal key as fallback.
"""

from __future__ import annotations

from opentelemetry.semconv._incubating.attributes import (
    gen_ai_attributes as GenAIAttributes,
)


def _attr(name: str, fallback: str) -> str:
    return getattr(GenAIAttributes, name, fallback)


GEN_AI_OPERATION_NAME = _attr("GEN_AI_OPERATION_NAME", "gen_ai.operation.name")
GEN_AI_CONVERSATION_ID = _attr(
    "GEN_AI_CONVERSATION_ID", "gen_ai.conversation.id"
)
GEN_AI_AGENT_NAME = _attr("GEN_AI_AGENT_NAME", "gen_ai.agent.name")
GEN_AI_TOOL_NAME = _attr("GEN_AI_TOOL_NAME", "gen_ai.tool.name")
GEN_AI_TOOL_TYPE = _attr("GEN_AI_TOOL_TYPE", "gen_ai.tool.type")
GEN_AI_TOOL_DESCRIPTION = _attr(
    "GEN_AI_TOOL_DESCRIPTION", "gen_ai.tool.description"
)
GEN_AI_TOOL_CALL_ARGUMENTS = _attr(
    "GEN_AI_TOOL_CALL_ARGUMENTS", "gen_ai.tool.call.arguments"
)
GEN_AI_TOOL_CALL_RESULT = _attr(
    "GEN_AI_TOOL_CALL_RESULT", "gen_ai.tool.call.result"
)

INPUT_VALUE = "input.value"
OUTPUT_VALUE = "output.value"


class GenAIOperationName:
    INVOKE_AGENT = "invoke_agent"
    EXECUTE_TOOL = "execute_tool"
    # Not part of the GenAI conventions
    EXECUTE_ACTION = "execute_action"
    PLANNING = "planning"
    REPLANNING = "replanning"


class GenAIToolType:
    FUNCTION = "function"


class EventType:
    AGENT_PROCESS = "agent_process"
    ACTION = "action"
    GOAL_ACHIEVED = "goal_achieved"
    TOOL_CALL = "tool_call"
    PLANNING_READY = "planning_ready"
    PLAN_FORMULATED = "plan_formulated"
    REPLANNING = "replanning"
    STATE_TRANSITION = "state_transition"
    LIFECYCLE_PREFIX = "lifecycle_"
    OBJECT_ADDED = "object_added"
    OBJECT_BOUND = "object_bound"


class AgentProcessAttributes:
    EVENT_TYPE = "agent_process.event.type"

    AGENT_NAME = "agent_process.agent.name"
    AGENT_RUN_ID = "agent_process.agent.run_id"
    AGENT_GOAL = "agent_process.agent.goal"
    AGENT_IS_SUBAGENT = "agent_process.agent.is_subagent"
    AGENT_PARENT_ID = "agent_process.agent.parent_id"
    AGENT_PLANNER_TYPE = "agent_process.agent.planner_type"
    AGENT_INPUT = "agent_process.agent.input"
    AGENT_STATUS = "agent_process.agent.status"
    AGENT_RESULT = "agent_process.agent.result"
    AGENT_ERROR = "agent_process.agent.error"

    ACTION_NAME = "agent_process.action.name"
    ACTION_SHORT_NAME = "agent_process.action.short_name"
    ACTION_RUN_ID = "agent_process.action.run_id"
    ACTION_DESCRIPTION = "agent_process.action.description"
    ACTION_STATUS = "agent_process.action.status"
    ACTION_DURATION_MS = "agent_process.action.duration_ms"
    ACTION_RESULT = "agent_process.action.result"

    GOAL_NAME = "agent_process.goal.name"
    GOAL_SHORT_NAME = "agent_process.goal.short_name"
    GOAL_WORLD_STATE = "agent_process.goal.world_state"

    TOOL_NAME = "agent_process.tool.name"
    TOOL_CORRELATION_ID = "agent_process.tool.correlation_id"
    TOOL_GROUP_NAME = "agent_process.tool.group.name"
    TOOL_GROUP_ROLE = "agent_process.tool.group.role"
    TOOL_DURATION_MS = "agent_process.tool.duration_ms"
    TOOL_STATUS = "agent_process.tool.status"
    TOOL_ERROR_TYPE = "agent_process.tool.error.type"
    TOOL_ERROR_MESSAGE = "agent_process.tool.error.message"

    PLAN_PLANNER_TYPE = "agent_process.plan.planner_type"
    PLAN_ITERATION = "agent_process.plan.iteration"
    PLAN_IS_REPLANNING = "agent_process.plan.is_replanning"
    PLAN_ACTIONS_COUNT = "agent_process.plan.actions_count"
    PLAN_ACTIONS = "agent_process.plan.actions"
    PLAN_GOAL = "agent_process.plan.goal"

    STATE_TO = "agent_process.state.to"
    STATE_VALUE = "agent_process.state.value"

    LIFECYCLE_STATE = "agent_process.lifecycle.state"

    OBJECT_TYPE = "agent_process.object.type"
    OBJECT_NAME = "agent_process.object.name"
    OBJECT_VALUE = "agent_process.object.value"


class AgentStatus:
    COMPLETED = "completed"
    FAILED = "failed"


class ToolStatus:
    SUCCESS = "success"
    ERROR = "error"


NO_CORRELATION_ID = "-"
UNKNOWN_TYPE = "Unknown"
UNKNOWN_GOAL = "unknown"

AGENT_FAILED_DESCRIPTION = "Agent process failed"
SHUTDOWN_DESCRIPTION = "Application shutdown"
SUPERSEDED_DESCRIPTION = "Superseded by a new span for the same key"

OPERATION_DURATION_METRIC = "agent_process.operation.duration"
OPERATION_TYPE = "agent_process.operation.type"
OPERATION_NAME = "agent_process.operation.name"
OPERATION_STATUS = "agent_process.operation.status"
