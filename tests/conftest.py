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


"""Test configuration and fixtures for agent process instrumentation tests."""

import pytest

from opentelemetry.instrumentation.agent_process import (
    AgentProcessSettings,
    EventRouter,
)
from opentelemetry.instrumentation.agent_process.backends.observation import (
    ObservationBackend,
)
from opentelemetry.instrumentation.agent_process.backends.otel import (
    OpenTelemetryBackend,
)
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import InMemoryMetricReader
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import (
    InMemorySpanExporter,
)


@pytest.fixture(scope="function", name="span_exporter")
def fixture_span_exporter():
    exporter = InMemorySpanExporter()
    yield exporter
    exporter.clear()


@pytest.fixture(scope="function", name="tracer_provider")
def fixture_tracer_provider(span_exporter):
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(span_exporter))
    return provider


@pytest.fixture(scope="function", name="metric_reader")
def fixture_metric_reader():
    return InMemoryMetricReader()


@pytest.fixture(scope="function", name="meter_provider")
def fixture_meter_provider(metric_reader):
    return MeterProvider(metric_readers=[metric_reader])


@pytest.fixture(scope="function", name="settings")
def fixture_settings():
    return AgentProcessSettings()


@pytest.fixture(scope="function", name="backend")
def fixture_backend(tracer_provider):
    return OpenTelemetryBackend(tracer_provider=tracer_provider)


@pytest.fixture(scope="function", name="observation_backend")
def fixture_observation_backend(tracer_provider, meter_provider):
    return ObservationBackend(
        tracer_provider=tracer_provider, meter_provider=meter_provider
    )


@pytest.fixture(scope="function", name="router")
def fixture_router(settings, backend):
    return EventRouter(settings, backend)


@pytest.fixture(scope="function", name="finished_spans")
def fixture_finished_spans(span_exporter):
    """Finished spans by name."""

    def _get():
        return {span.name: span for span in span_exporter.get_finished_spans()}

    return _get


@pytest.fixture(scope="function", name="metric_points")
def fixture_metric_points(meter_provider, metric_reader):
    def _get(name):
        return _collect_metric_points(meter_provider, metric_reader, name)

    return _get


def _collect_metric_points(meter_provider, metric_reader, name):
    meter_provider.force_flush()
    data = metric_reader.get_metrics_data()
    points = []
    for resource_metric in (data and data.resource_metrics) or []:
        for scope_metric in resource_metric.scope_metrics or []:
            for metric in scope_metric.metrics or []:
                if metric.name == name:
                    points.extend(metric.data.data_points or [])
    return points
