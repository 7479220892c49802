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


"""Translation of agent process events into spans.

:class:`EventRouter` is the single entry point. Each event kind has a
handler that resolves the parent span, builds the attributes and opens,
closes or records a span through :class:`SpanLifecycleManager`. Agent, action
and tool call spans stay open until their closing event and are made ambient
while open, so spans created by other instrumentations (an LLM client, an
HTTP client) nest under them.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any, Callable, Dict, Optional, Tuple, Type

from opentelemetry.instrumentation.agent_process.backends.base import (
    SpanBackend,
    SpanStatus,
)
from opentelemetry.instrumentation.agent_process.config import (
    AgentProcessSettings,
)
from opentelemetry.instrumentation.agent_process.constants import (
    AGENT_FAILED_DESCRIPTION,
    GEN_AI_AGENT_NAME,
    GEN_AI_CONVERSATION_ID,
    GEN_AI_OPERATION_NAME,
    GEN_AI_TOOL_CALL_ARGUMENTS,
    GEN_AI_TOOL_CALL_RESULT,
    GEN_AI_TOOL_DESCRIPTION,
    GEN_AI_TOOL_NAME,
    GEN_AI_TOOL_TYPE,
    INPUT_VALUE,
    NO_CORRELATION_ID,
    OUTPUT_VALUE,
    UNKNOWN_GOAL,
    AgentProcessAttributes as Attrs,
    AgentStatus,
    EventType,
    GenAIOperationName,
    GenAIToolType,
    ToolStatus,
)
from opentelemetry.instrumentation.agent_process.context import (
    ContextPropagationBridge,
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
    PlanFormulated,
    PlanReady,
    ProcessEvent,
    StateChanged,
    ToolCallRequested,
    ToolCallResponded,
)
from opentelemetry.instrumentation.agent_process.hierarchy import (
    EventCategory,
    resolve_parent,
)
from opentelemetry.instrumentation.agent_process.registry import (
    ActiveSpanRegistry,
    PlanIterationCounter,
    RegistryKey,
)
from opentelemetry.instrumentation.agent_process.results import (
    extract_outcome,
)
from opentelemetry.instrumentation.agent_process.sanitize import (
    display_name,
    format_plan,
    safe_str,
    short_name,
    snapshot,
    truncate,
    type_name,
)
from opentelemetry.instrumentation.agent_process.span_manager import (
    SpanLifecycleManager,
)
from opentelemetry.instrumentation.agent_process.utils import dont_throw

logger = logging.getLogger(__name__)

_Handler = Callable[[Any], None]


def _lazy_str(value: Any) -> Optional[Callable[[], str]]:
    if value is None:
        return None
    return lambda: str(value)


def _lazy_snapshot(blackboard: Any) -> Callable[[], Optional[str]]:
    return lambda: snapshot(blackboard) or None


def _millis(running_time: Optional[timedelta]) -> Optional[int]:
    if not isinstance(running_time, timedelta):
        if running_time is not None:
            logger.debug(
                "Ignoring running time of type: %s",
                type(running_time).__name__,
            )
        return None
    return running_time // timedelta(milliseconds=1)


def _lifecycle_label(state: Any) -> str:
    if isinstance(state, LifecycleState):
        return state.value
    return str(state).upper()


class EventRouter:
    """Turns agent process events into a nested span tree.

    One router owns the open spans and plan counters of every run it sees.
    :meth:`handle` never raises.
    """

    def __init__(
        self, settings: AgentProcessSettings, backend: SpanBackend
    ) -> None:
        self._settings = settings
        self._backend = backend
        self._registry = ActiveSpanRegistry()
        self._plan_iterations = PlanIterationCounter()
        self._bridge = ContextPropagationBridge(backend)
        self._spans = SpanLifecycleManager(
            backend,
            self._registry,
            self._bridge,
            settings.max_attribute_length,
        )
        self._handlers: Dict[Type[ProcessEvent], Tuple[bool, _Handler]] = {
            AgentCreated: (settings.trace_agent_events, self._on_agent_created),
            AgentCompleted: (
                settings.trace_agent_events,
                self._on_agent_completed,
            ),
            AgentFailed: (settings.trace_agent_events, self._on_agent_failed),
            ActionStarted: (
                settings.trace_agent_events,
                self._on_action_started,
            ),
            ActionFinished: (
                settings.trace_agent_events,
                self._on_action_finished,
            ),
            GoalAchieved: (settings.trace_agent_events, self._on_goal_achieved),
            ToolCallRequested: (
                settings.trace_tool_calls,
                self._on_tool_call_requested,
            ),
            ToolCallResponded: (
                settings.trace_tool_calls,
                self._on_tool_call_responded,
            ),
            PlanReady: (settings.trace_planning, self._on_plan_ready),
            PlanFormulated: (settings.trace_planning, self._on_plan_formulated),
            StateChanged: (
                settings.trace_state_transitions,
                self._on_state_changed,
            ),
            LifecycleEntered: (
                settings.trace_lifecycle_states,
                self._on_lifecycle_entered,
            ),
            ObjectAdded: (settings.trace_object_binding, self._on_object_added),
            ObjectBound: (settings.trace_object_binding, self._on_object_bound),
        }

    @property
    def settings(self) -> AgentProcessSettings:
        return self._settings

    @property
    def backend(self) -> SpanBackend:
        return self._backend

    @property
    def registry(self) -> ActiveSpanRegistry:
        return self._registry

    @property
    def plan_iterations(self) -> PlanIterationCounter:
        return self._plan_iterations

    @property
    def bridge(self) -> ContextPropagationBridge:
        return self._bridge

    def _lookup(self, event: Any) -> Optional[Tuple[bool, _Handler]]:
        for cls in type(event).__mro__:
            entry = self._handlers.get(cls)
            if entry is not None:
                return entry
        return None

    @dont_throw
    def handle(self, event: ProcessEvent) -> None:
        if not self._settings.enabled:
            return
        entry = self._lookup(event)
        if entry is None:
            return
        enabled, handler = entry
        try:
            if enabled:
                handler(event)
        finally:
            if isinstance(event, (AgentCompleted, AgentFailed)):
                self._plan_iterations.remove(event.run_id)

    @dont_throw
    def shutdown(self) -> None:
        """End all spans still open with an error status and forget every run."""
        self._spans.shutdown()
        self._plan_iterations.clear()

    def _truncate(self, value: Optional[str]) -> str:
        return truncate(value, self._settings.max_attribute_length)

    # Agents

    @dont_throw
    def _on_agent_created(self, event: AgentCreated) -> None:
        run_id = event.run_id
        is_subagent = bool(event.parent_run_id)
        resolution = resolve_parent(
            EventCategory.AGENT, run_id, event.parent_run_id, self._registry
        )
        input_snapshot = snapshot(event.blackboard)
        key = RegistryKey.agent(run_id)
        self._spans.start_span(
            key,
            event.agent_name,
            resolution.parent,
            {
                GEN_AI_OPERATION_NAME: GenAIOperationName.INVOKE_AGENT,
                GEN_AI_CONVERSATION_ID: run_id,
                GEN_AI_AGENT_NAME: event.agent_name,
                Attrs.AGENT_NAME: event.agent_name,
                Attrs.AGENT_RUN_ID: run_id,
                Attrs.AGENT_GOAL: event.goal_name or UNKNOWN_GOAL,
                Attrs.AGENT_IS_SUBAGENT: is_subagent,
                Attrs.AGENT_PARENT_ID: event.parent_run_id or "",
                Attrs.AGENT_PLANNER_TYPE: event.planner_type,
                Attrs.EVENT_TYPE: EventType.AGENT_PROCESS,
                INPUT_VALUE: input_snapshot or None,
                Attrs.AGENT_INPUT: input_snapshot or None,
            },
            scoping=True,
            kind=resolution.role,
        )
        if input_snapshot:
            self._registry.get(key).input_captured = True
        self._plan_iterations.reset(run_id)

    @dont_throw
    def _on_agent_completed(self, event: AgentCompleted) -> None:
        self._spans.end_span(
            RegistryKey.agent(event.run_id),
            SpanStatus.OK,
            {
                Attrs.AGENT_STATUS: AgentStatus.COMPLETED,
                OUTPUT_VALUE: _lazy_snapshot(event.blackboard),
                Attrs.AGENT_RESULT: _lazy_str(event.last_result),
            },
        )

    @dont_throw
    def _on_agent_failed(self, event: AgentFailed) -> None:
        failure = event.failure_info
        self._spans.end_span(
            RegistryKey.agent(event.run_id),
            SpanStatus.ERROR,
            {
                Attrs.AGENT_STATUS: AgentStatus.FAILED,
                Attrs.AGENT_ERROR: _lazy_str(failure),
            },
            error=failure if isinstance(failure, BaseException) else None,
            description=AGENT_FAILED_DESCRIPTION,
        )

    # Actions

    @dont_throw
    def _on_action_started(self, event: ActionStarted) -> None:
        run_id = event.run_id
        resolution = resolve_parent(
            EventCategory.ACTION, run_id, event.parent_run_id, self._registry
        )
        self._spans.start_span(
            RegistryKey.action(run_id, event.action_name),
            event.short_name,
            resolution.parent,
            {
                GEN_AI_OPERATION_NAME: GenAIOperationName.EXECUTE_ACTION,
                Attrs.ACTION_NAME: event.action_name,
                Attrs.ACTION_SHORT_NAME: event.short_name,
                Attrs.ACTION_RUN_ID: run_id,
                Attrs.ACTION_DESCRIPTION: event.description,
                Attrs.EVENT_TYPE: EventType.ACTION,
                INPUT_VALUE: event.inputs or None,
            },
            scoping=True,
            kind=resolution.role,
        )

    @dont_throw
    def _on_action_finished(self, event: ActionFinished) -> None:
        # The action span is always OK: a failed action fails its agent
        self._spans.end_span(
            RegistryKey.action(event.run_id, event.action_name),
            SpanStatus.OK,
            {
                Attrs.ACTION_STATUS: event.status,
                Attrs.ACTION_DURATION_MS: _millis(event.running_time),
                OUTPUT_VALUE: _lazy_snapshot(event.blackboard),
                Attrs.ACTION_RESULT: _lazy_str(event.last_result),
            },
        )

    @dont_throw
    def _on_goal_achieved(self, event: GoalAchieved) -> None:
        goal = short_name(event.goal_name)
        resolution = resolve_parent(
            EventCategory.GOAL, event.run_id, event.parent_run_id, self._registry
        )
        self._spans.instant_span(
            f"goal:{goal}",
            resolution.parent,
            {
                Attrs.GOAL_NAME: event.goal_name,
                Attrs.GOAL_SHORT_NAME: goal,
                Attrs.EVENT_TYPE: EventType.GOAL_ACHIEVED,
                INPUT_VALUE: _lazy_snapshot(event.blackboard),
                OUTPUT_VALUE: _lazy_str(event.last_result),
                Attrs.GOAL_WORLD_STATE: event.world_state,
            },
            operation_type=EventType.GOAL_ACHIEVED,
        )

    # Tools

    @dont_throw
    def _on_tool_call_requested(self, event: ToolCallRequested) -> None:
        run_id = event.run_id
        resolution = resolve_parent(
            EventCategory.TOOL,
            run_id,
            event.parent_run_id,
            self._registry,
            ambient=self._bridge.current(),
        )
        correlation_id = event.correlation_id
        if correlation_id == NO_CORRELATION_ID:
            correlation_id = None
        group = event.tool_group
        self._spans.start_span(
            RegistryKey.tool(run_id, event.tool_name),
            f"tool:{event.tool_name}",
            resolution.parent,
            {
                GEN_AI_OPERATION_NAME: GenAIOperationName.EXECUTE_TOOL,
                GEN_AI_TOOL_NAME: event.tool_name,
                GEN_AI_TOOL_TYPE: GenAIToolType.FUNCTION,
                Attrs.TOOL_NAME: event.tool_name,
                Attrs.EVENT_TYPE: EventType.TOOL_CALL,
                Attrs.TOOL_CORRELATION_ID: correlation_id,
                GEN_AI_TOOL_DESCRIPTION: (
                    group.description or None if group else None
                ),
                Attrs.TOOL_GROUP_NAME: group.name if group else None,
                Attrs.TOOL_GROUP_ROLE: group.role if group else None,
                INPUT_VALUE: event.tool_input,
                GEN_AI_TOOL_CALL_ARGUMENTS: event.tool_input,
            },
            scoping=True,
            kind=resolution.role,
        )

    @dont_throw
    def _on_tool_call_responded(self, event: ToolCallResponded) -> None:
        outcome = extract_outcome(event.result)
        attributes: Dict[str, Any] = {
            Attrs.TOOL_DURATION_MS: _millis(event.running_time),
        }
        status = SpanStatus.OK
        description = None
        error = None
        if outcome.result is not None:
            result = safe_str(outcome.result)
            attributes[OUTPUT_VALUE] = result
            attributes[GEN_AI_TOOL_CALL_RESULT] = result
            attributes[Attrs.TOOL_STATUS] = ToolStatus.SUCCESS
        elif outcome.error is not None:
            error = outcome.error
            message = self._truncate(safe_str(error))
            attributes[Attrs.TOOL_STATUS] = ToolStatus.ERROR
            attributes[Attrs.TOOL_ERROR_TYPE] = type(error).__name__
            attributes[Attrs.TOOL_ERROR_MESSAGE] = message
            status = SpanStatus.ERROR
            description = message
        else:
            attributes[Attrs.TOOL_STATUS] = ToolStatus.SUCCESS
        self._spans.end_span(
            RegistryKey.tool(event.run_id, event.tool_name),
            status,
            attributes,
            error=error,
            description=description,
        )

    # Planning

    @dont_throw
    def _on_plan_ready(self, event: PlanReady) -> None:
        run_id = event.run_id
        agent_key = RegistryKey.agent(run_id)
        agent = self._registry.get(agent_key)
        if agent is not None and not agent.input_captured:
            input_snapshot = snapshot(event.blackboard)
            if input_snapshot:
                self._spans.update_span(
                    agent_key, {INPUT_VALUE: input_snapshot}
                )
                agent.input_captured = True

        resolution = resolve_parent(
            EventCategory.PLANNING, run_id, event.parent_run_id, self._registry
        )
        self._spans.instant_span(
            "planning:ready",
            resolution.parent,
            {
                Attrs.EVENT_TYPE: EventType.PLANNING_READY,
                Attrs.AGENT_RUN_ID: run_id,
                Attrs.PLAN_PLANNER_TYPE: event.planner_type,
                INPUT_VALUE: event.world_state,
            },
            operation_type=EventType.PLANNING_READY,
        )

    @dont_throw
    def _on_plan_formulated(self, event: PlanFormulated) -> None:
        run_id = event.run_id
        iteration = self._plan_iterations.increment(run_id)
        is_replanning = iteration > 1
        if is_replanning:
            name = "planning:replanning"
            operation = GenAIOperationName.REPLANNING
            event_type = EventType.REPLANNING
        else:
            name = "planning:formulated"
            operation = GenAIOperationName.PLANNING
            event_type = EventType.PLAN_FORMULATED

        attributes: Dict[str, Any] = {
            GEN_AI_OPERATION_NAME: operation,
            Attrs.EVENT_TYPE: event_type,
            Attrs.AGENT_RUN_ID: run_id,
            Attrs.PLAN_ITERATION: iteration,
            Attrs.PLAN_IS_REPLANNING: is_replanning,
            Attrs.PLAN_PLANNER_TYPE: event.planner_type,
            INPUT_VALUE: event.world_state,
        }
        plan = event.plan
        if plan is not None:
            steps = format_plan(plan.actions, plan.goal)
            attributes[Attrs.PLAN_ACTIONS_COUNT] = len(plan.actions or ())
            attributes[OUTPUT_VALUE] = steps
            attributes[Attrs.PLAN_ACTIONS] = steps
            attributes[Attrs.PLAN_GOAL] = display_name(plan.goal)

        resolution = resolve_parent(
            EventCategory.PLANNING, run_id, event.parent_run_id, self._registry
        )
        self._spans.instant_span(
            name, resolution.parent, attributes, operation_type=event_type
        )
        logger.debug(
            "Recorded plan iteration %s for run %s", iteration, run_id
        )

    # State and lifecycle

    @dont_throw
    def _on_state_changed(self, event: StateChanged) -> None:
        state = type_name(event.new_state)
        resolution = resolve_parent(
            EventCategory.STATE, event.run_id, event.parent_run_id, self._registry
        )
        self._spans.instant_span(
            f"state:{state}",
            resolution.parent,
            {
                Attrs.EVENT_TYPE: EventType.STATE_TRANSITION,
                Attrs.AGENT_RUN_ID: event.run_id,
                Attrs.STATE_TO: state,
                INPUT_VALUE: _lazy_str(event.new_state),
                Attrs.STATE_VALUE: _lazy_str(event.new_state),
            },
            operation_type=EventType.STATE_TRANSITION,
        )

    @dont_throw
    def _on_lifecycle_entered(self, event: LifecycleEntered) -> None:
        label = _lifecycle_label(event.state)
        event_type = EventType.LIFECYCLE_PREFIX + label.lower()
        resolution = resolve_parent(
            EventCategory.LIFECYCLE,
            event.run_id,
            event.parent_run_id,
            self._registry,
        )
        self._spans.instant_span(
            f"lifecycle:{label.lower()}",
            resolution.parent,
            {
                Attrs.EVENT_TYPE: event_type,
                Attrs.AGENT_RUN_ID: event.run_id,
                Attrs.LIFECYCLE_STATE: label,
                INPUT_VALUE: _lazy_snapshot(event.blackboard),
            },
            operation_type=event_type,
        )

    # Object binding

    @dont_throw
    def _on_object_added(self, event: ObjectAdded) -> None:
        resolution = resolve_parent(
            EventCategory.OBJECT, event.run_id, event.parent_run_id, self._registry
        )
        self._spans.instant_span(
            "object:added",
            resolution.parent,
            {
                Attrs.EVENT_TYPE: EventType.OBJECT_ADDED,
                Attrs.AGENT_RUN_ID: event.run_id,
                Attrs.OBJECT_TYPE: type_name(event.value),
                INPUT_VALUE: _lazy_str(event.value),
                Attrs.OBJECT_VALUE: _lazy_str(event.value),
            },
            operation_type=EventType.OBJECT_ADDED,
        )

    @dont_throw
    def _on_object_bound(self, event: ObjectBound) -> None:
        resolution = resolve_parent(
            EventCategory.OBJECT, event.run_id, event.parent_run_id, self._registry
        )
        self._spans.instant_span(
            "object:bound",
            resolution.parent,
            {
                Attrs.EVENT_TYPE: EventType.OBJECT_BOUND,
                Attrs.AGENT_RUN_ID: event.run_id,
                Attrs.OBJECT_NAME: event.name,
                Attrs.OBJECT_TYPE: type_name(event.value),
                INPUT_VALUE: _lazy_str(event.value),
                Attrs.OBJECT_VALUE: _lazy_str(event.value),
            },
            operation_type=EventType.OBJECT_BOUND,
        )
