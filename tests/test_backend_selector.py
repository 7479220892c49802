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


from unittest import mock

from opentelemetry.instrumentation.agent_process import (
    AgentProcessSettings,
    create_event_router,
)
from opentelemetry.instrumentation.agent_process.backends.base import (
    NoOpBackend,
)
from opentelemetry.instrumentation.agent_process.backends.observation import (
    ObservationBackend,
)
from opentelemetry.instrumentation.agent_process.backends.otel import (
    OpenTelemetryBackend,
)
from opentelemetry.instrumentation.agent_process.backends.selector import (
    BACKEND_CANDIDATES,
    select_backend,
)
from opentelemetry.instrumentation.dependencies import DependencyConflict

_SELECTOR = "opentelemetry.instrumentation.agent_process.backends.selector"


def _missing(*names):
    def conflicts(requirements):
        for requirement in requirements:
            if requirement.split()[0] in names:
                return DependencyConflict(requirement)
        return None

    return conflicts


def test_default_preference_order():
    assert list(BACKEND_CANDIDATES) == [
        "observation",
        "opentracing",
        "opentelemetry",
    ]


def test_first_available_backend_wins(tracer_provider):
    backend = select_backend(
        ["observation", "opentelemetry"], tracer_provider=tracer_provider
    )

    assert isinstance(backend, ObservationBackend)


def test_unavailable_backends_are_skipped_with_warning(tracer_provider):
    with mock.patch(
        f"{_SELECTOR}.get_dependency_conflicts",
        side_effect=_missing("opentelemetry-sdk", "opentracing"),
    ), mock.patch(f"{_SELECTOR}.logger") as logger:
        backend = select_backend(
            ["observation", "opentracing", "opentelemetry"],
            tracer_provider=tracer_provider,
        )

    assert type(backend) is OpenTelemetryBackend
    assert logger.warning.call_count == 2
    logger.info.assert_called_once()


def test_unknown_backend_is_skipped():
    with mock.patch(f"{_SELECTOR}.logger") as logger:
        backend = select_backend(["zipkin", "opentelemetry"])

    assert isinstance(backend, OpenTelemetryBackend)
    logger.warning.assert_called_once()


def test_backend_failing_to_initialize_is_skipped():
    with mock.patch.object(
        ObservationBackend, "__init__", side_effect=RuntimeError("no meter")
    ):
        backend = select_backend(["observation", "opentelemetry"])

    assert type(backend) is OpenTelemetryBackend


def test_falls_back_to_noop_when_nothing_is_available():
    with mock.patch(
        f"{_SELECTOR}.get_dependency_conflicts",
        return_value=DependencyConflict("opentelemetry-api"),
    ), mock.patch(f"{_SELECTOR}.logger") as logger:
        backend = select_backend(
            ["observation", "opentracing", "opentelemetry"]
        )

    assert isinstance(backend, NoOpBackend)
    assert logger.warning.call_count == 4


def test_empty_preference_gives_noop():
    assert isinstance(select_backend([]), NoOpBackend)


class TestCreateEventRouter:
    def test_uses_preferred_backend(self, tracer_provider, meter_provider):
        router = create_event_router(
            AgentProcessSettings(backend_preference=("opentelemetry",)),
            tracer_provider=tracer_provider,
            meter_provider=meter_provider,
        )

        assert type(router.backend) is OpenTelemetryBackend

    def test_disabled_settings_skip_backend_selection(self):
        with mock.patch(
            "opentelemetry.instrumentation.agent_process.select_backend"
        ) as select:
            router = create_event_router(AgentProcessSettings(enabled=False))

        select.assert_not_called()
        assert isinstance(router.backend, NoOpBackend)

    def test_reads_settings_from_environment(self, monkeypatch):
        monkeypatch.setenv(
            "OTEL_INSTRUMENTATION_AGENT_PROCESS_BACKENDS", "opentelemetry"
        )
        monkeypatch.setenv(
            "OTEL_INSTRUMENTATION_AGENT_PROCESS_TRACE_OBJECT_BINDING", "true"
        )

        router = create_event_router()

        assert router.settings.backend_preference == ("opentelemetry",)
        assert router.settings.trace_object_binding is True
        assert type(router.backend) is OpenTelemetryBackend
