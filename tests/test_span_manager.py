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


import unittest.mock

import pytest

from opentelemetry.instrumentation.agent_process.backends.base import (
    SpanBackend,
    SpanRole,
    SpanStatus,
)
from opentelemetry.instrumentation.agent_process.constants import (
    OPERATION_NAME,
    OPERATION_STATUS,
    OPERATION_TYPE,
)
from opentelemetry.instrumentation.agent_process.context import (
    ContextPropagationBridge,
)
from opentelemetry.instrumentation.agent_process.registry import (
    ActiveSpanRegistry,
    RegistryKey,
)
from opentelemetry.instrumentation.agent_process.span_manager import (
    SpanLifecycleManager,
)


class TestSpanLifecycleManager:
    @pytest.fixture
    def backend(self):
        backend = unittest.mock.Mock(spec=SpanBackend)
        backend.supports_metrics = False
        return backend

    @pytest.fixture
    def registry(self):
        return ActiveSpanRegistry()

    @pytest.fixture
    def manager(self, backend, registry):
        return SpanLifecycleManager(
            backend, registry, ContextPropagationBridge(backend), 10
        )

    @pytest.mark.parametrize("scoping", [True, False])
    def test_start_span_registers_entry(
        self, manager, backend, registry, scoping
    ):
        key = RegistryKey.agent("run-1")
        parent = unittest.mock.Mock()

        span = manager.start_span(
            key, "agent", parent, {"a": "b"}, scoping=scoping
        )

        assert span is backend.create_span.return_value
        backend.create_span.assert_called_once_with(
            "agent", SpanRole.INTERNAL, parent, {"a": "b"}
        )
        entry = registry.get(key)
        assert entry.span is span
        assert entry.name == "agent"
        if scoping:
            backend.push_scope.assert_called_once_with(span)
            assert entry.scope is backend.push_scope.return_value
        else:
            backend.push_scope.assert_not_called()
            assert entry.scope is None

    def test_attributes_are_resolved(self, manager, backend):
        def failing():
            raise RuntimeError("boom")

        manager.start_span(
            RegistryKey.agent("run-1"),
            "agent",
            None,
            {
                "missing": None,
                "lazy": lambda: "computed",
                "lazy_none": lambda: None,
                "failing": failing,
                "long": "0123456789abc",
                "flag": True,
                "count": 3,
                "other": ["x"],
            },
        )

        attributes = backend.create_span.call_args.args[3]
        assert attributes == {
            "lazy": "computed",
            "long": "0123456789...",
            "flag": True,
            "count": 3,
            "other": "['x']",
        }

    def test_end_span_pops_scope_before_finishing(
        self, manager, backend, registry
    ):
        key = RegistryKey.action("run-1", "act")
        span = manager.start_span(key, "act", None, scoping=True)
        token = backend.push_scope.return_value

        manager.end_span(
            key, SpanStatus.OK, {"result": "done"}, description=None
        )

        assert key not in registry
        names = [call[0] for call in backend.method_calls]
        assert names.index("pop_scope") < names.index("finish_span")
        backend.pop_scope.assert_called_once_with(token)
        backend.finish_span.assert_called_once_with(
            span,
            SpanStatus.OK,
            description=None,
            attributes={"result": "done"},
            error=None,
        )

    def test_end_span_finishes_even_if_pop_fails(
        self, manager, backend, registry
    ):
        key = RegistryKey.agent("run-1")
        manager.start_span(key, "agent", None)
        backend.pop_scope.side_effect = RuntimeError("detach failed")

        with pytest.raises(RuntimeError):
            manager.end_span(key)

        backend.finish_span.assert_called_once()
        assert key not in registry

    def test_start_span_ends_span_open_under_same_key(
        self, manager, backend, registry
    ):
        key = RegistryKey.tool("run-1", "search")
        first_span = unittest.mock.Mock()
        second_span = unittest.mock.Mock()
        backend.create_span.side_effect = [first_span, second_span]
        backend.push_scope.side_effect = ["first-token", "second-token"]

        manager.start_span(key, "tool:search", None)
        manager.start_span(key, "tool:search", None)

        backend.pop_scope.assert_called_once_with("first-token")
        backend.finish_span.assert_called_once_with(
            first_span,
            SpanStatus.ERROR,
            description="Superseded by a new span for the same key",
            attributes={},
            error=None,
        )
        entry = registry.get(key)
        assert entry.span is second_span
        assert entry.scope == "second-token"

    def test_start_span_finishes_span_when_push_fails(
        self, manager, backend, registry
    ):
        key = RegistryKey.agent("run-1")
        error = RuntimeError("attach failed")
        backend.push_scope.side_effect = error

        with pytest.raises(RuntimeError):
            manager.start_span(key, "agent", None)

        backend.finish_span.assert_called_once_with(
            backend.create_span.return_value, SpanStatus.ERROR, error=error
        )
        assert key not in registry

    def test_end_span_unknown_key_is_noop(self, manager, backend):
        manager.end_span(RegistryKey.tool("run-1", "missing"))

        backend.pop_scope.assert_not_called()
        backend.finish_span.assert_not_called()

    def test_end_span_with_error(self, manager, backend):
        key = RegistryKey.tool("run-1", "search")
        span = manager.start_span(key, "tool:search", None)
        error = ValueError("bad")

        manager.end_span(
            key, SpanStatus.ERROR, error=error, description="bad"
        )

        backend.finish_span.assert_called_once_with(
            span,
            SpanStatus.ERROR,
            description="bad",
            attributes={},
            error=error,
        )

    def test_instant_span_is_never_registered_or_scoped(
        self, manager, backend, registry
    ):
        manager.instant_span("planning:ready", None, {"k": "v"})

        backend.create_span.assert_called_once_with(
            "planning:ready", SpanRole.INTERNAL, None, {"k": "v"}
        )
        backend.push_scope.assert_not_called()
        backend.finish_span.assert_called_once()
        assert len(registry) == 0

    def test_update_span(self, manager, backend):
        key = RegistryKey.agent("run-1")
        span = manager.start_span(key, "agent", None)

        assert manager.update_span(key, {"input.value": "snapshot"})
        assert not manager.update_span(
            RegistryKey.agent("run-2"), {"input.value": "x"}
        )
        backend.set_attributes.assert_called_once_with(
            span, {"input.value": "snapshot"}
        )

    def test_shutdown_ends_open_spans_without_popping_scopes(
        self, manager, backend, registry
    ):
        manager.start_span(RegistryKey.agent("run-1"), "agent", None)
        manager.start_span(RegistryKey.action("run-1", "act"), "act", None)

        manager.shutdown()

        assert len(registry) == 0
        backend.pop_scope.assert_not_called()
        assert backend.finish_span.call_count == 2
        for call in backend.finish_span.call_args_list:
            assert call.args[1] is SpanStatus.ERROR
            assert call.kwargs["description"] == "Application shutdown"

    def test_durations_recorded_when_backend_supports_metrics(
        self, manager, backend
    ):
        backend.supports_metrics = True
        key = RegistryKey.tool("run-1", "search")

        with unittest.mock.patch("timeit.default_timer", return_value=10.0):
            manager.start_span(key, "tool:search", None)
        with unittest.mock.patch("timeit.default_timer", return_value=12.5):
            manager.end_span(key)

        backend.record_duration.assert_called_once_with(
            2.5,
            {
                OPERATION_TYPE: "tool",
                OPERATION_NAME: "tool:search",
                OPERATION_STATUS: "ok",
            },
        )
