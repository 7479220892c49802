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


"""Tracing plus metrics: every finished operation is both a span and a
duration measurement."""

from __future__ import annotations

from typing import Optional

from opentelemetry.metrics import Histogram, MeterProvider, get_meter
from opentelemetry.semconv.schemas import Schemas
from opentelemetry.trace import TracerProvider

from opentelemetry.instrumentation.agent_process.backends.otel import (
    OpenTelemetryBackend,
)
from opentelemetry.instrumentation.agent_process.constants import (
    OPERATION_DURATION_METRIC,
)
from opentelemetry.instrumentation.agent_process.version import __version__

_DEFAULT_INSTRUMENTATION_NAME = "opentelemetry.instrumentation.agent_process"


class ObservationBackend(OpenTelemetryBackend):
    name = "observation"
    supports_metrics = True

    def __init__(
        self,
        tracer_provider: Optional[TracerProvider] = None,
        meter_provider: Optional[MeterProvider] = None,
        tracer_name: str = _DEFAULT_INSTRUMENTATION_NAME,
        tracer_version: str = __version__,
        **kwargs,
    ) -> None:
        super().__init__(
            tracer_provider=tracer_provider,
            tracer_name=tracer_name,
            tracer_version=tracer_version,
        )
        meter = get_meter(
            tracer_name,
            tracer_version,
            meter_provider,
            schema_url=Schemas.V1_28_0.value,
        )
        self._duration_histogram: Histogram = meter.create_histogram(
            name=OPERATION_DURATION_METRIC,
            unit="s",
            description="Duration of agent process operations",
        )

    def record_duration(self, duration, attributes=None):
        self._duration_histogram.record(max(duration, 0.0), attributes=attributes)
