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


import pytest

from opentelemetry import trace
from opentelemetry.instrumentation.agent_process import (
    AgentCompleted,
    AgentCreated,
    AgentProcessSettings,
    EventRouter,
    ToolCallRequested,
    ToolCallResponded,
)
from opentelemetry.instrumentation.agent_process.backends.base import (
    NoOpBackend,
    SpanRole,
    SpanStatus,
)
from opentelemetry.trace import SpanKind, StatusCode


class TestOpenTelemetryBackend:
    def test_root_and_child_spans(self, backend, span_exporter):
        root = backend.create_span("root", SpanRole.ROOT, attributes={"a": 1})
        child = backend.create_span("child", SpanRole.INTERNAL, parent=root)
        backend.finish_span(child, SpanStatus.OK)
        backend.finish_span(root, SpanStatus.OK, attributes={"b": "2"})

        child_span, root_span = span_exporter.get_finished_spans()
        assert root_span.parent is None
        assert root_span.kind is SpanKind.SERVER
        assert dict(root_span.attributes) == {"a": 1, "b": "2"}
        assert child_span.kind is SpanKind.INTERNAL
        assert child_span.parent.span_id == root_span.context.span_id

    def test_finish_with_error(self, backend, span_exporter):
        span = backend.create_span("op", SpanRole.ROOT)
        backend.finish_span(
            span,
            SpanStatus.ERROR,
            description="failed",
            error=ValueError("failed"),
        )

        (finished,) = span_exporter.get_finished_spans()
        assert finished.status.status_code is StatusCode.ERROR
        assert finished.status.description == "failed"
        assert finished.events[0].attributes["exception.type"] == "ValueError"

    def test_current_span_only_reports_valid_spans(self, backend):
        assert backend.current_span() is None
        span = backend.create_span("op", SpanRole.ROOT)
        token = backend.push_scope(span)
        assert backend.current_span() is span
        backend.pop_scope(token)
        assert backend.current_span() is None


class TestObservationBackend:
    def test_records_duration_for_every_finished_span(
        self, observation_backend, span_exporter, metric_points
    ):
        router = EventRouter(AgentProcessSettings(), observation_backend)
        router.handle(AgentCreated(run_id="run-1", agent_name="Planner"))
        router.handle(ToolCallRequested(run_id="run-1", tool_name="calc"))
        router.handle(
            ToolCallResponded(
                run_id="run-1", tool_name="calc", result=ValueError("x")
            )
        )
        router.handle(AgentCompleted(run_id="run-1"))

        assert len(span_exporter.get_finished_spans()) == 2
        points = metric_points("agent_process.operation.duration")
        by_type = {
            point.attributes["agent_process.operation.type"]: point
            for point in points
        }
        assert set(by_type) == {"agent", "tool"}
        assert by_type["tool"].attributes[
            "agent_process.operation.status"
        ] == "error"
        assert by_type["agent"].attributes[
            "agent_process.operation.name"
        ] == "Planner"
        assert by_type["agent"].count == 1

    def test_supports_metrics(self, observation_backend, backend):
        assert observation_backend.supports_metrics
        assert not backend.supports_metrics


class TestOpenTracingShimBackend:
    @pytest.fixture
    def shim_backend(self, tracer_provider):
        pytest.importorskip("opentelemetry.shim.opentracing_shim")
        from opentelemetry.instrumentation.agent_process.backends.opentracing_shim import (  # pylint: disable=import-outside-toplevel
            OpenTracingShimBackend,
        )

        return OpenTracingShimBackend(tracer_provider=tracer_provider)

    def test_spans_are_bridged_to_opentelemetry(
        self, shim_backend, span_exporter
    ):
        router = EventRouter(AgentProcessSettings(), shim_backend)
        router.handle(AgentCreated(run_id="run-1", agent_name="Planner"))
        assert trace.get_current_span().get_span_context().is_valid
        router.handle(ToolCallRequested(run_id="run-1", tool_name="calc"))
        router.handle(
            ToolCallResponded(
                run_id="run-1", tool_name="calc", result=ValueError("bad")
            )
        )
        router.handle(AgentCompleted(run_id="run-1"))

        spans = {span.name: span for span in span_exporter.get_finished_spans()}
        agent, tool = spans["Planner"], spans["tool:calc"]
        assert agent.parent is None
        assert tool.parent.span_id == agent.context.span_id
        assert tool.status.status_code is StatusCode.ERROR
        assert tool.attributes["error"] is True
        assert tool.attributes["agent_process.tool.status"] == "error"
        assert not trace.get_current_span().get_span_context().is_valid


class TestNoOpBackend:
    def test_router_on_noop_backend_tracks_nothing_visible(self, span_exporter):
        router = EventRouter(AgentProcessSettings(), NoOpBackend())
        router.handle(AgentCreated(run_id="run-1", agent_name="Planner"))
        assert router.bridge.current() is None
        router.handle(AgentCompleted(run_id="run-1"))

        assert len(router.registry) == 0
        assert not span_exporter.get_finished_spans()
