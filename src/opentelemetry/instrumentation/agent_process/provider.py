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


"""Wiring of an SDK tracer provider for applications that have none.

Requires the ``sdk`` extra.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import SpanProcessor, TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, SpanExporter

from opentelemetry.instrumentation.agent_process.config import (
    AgentProcessSettings,
)

logger = logging.getLogger(__name__)


def create_tracer_provider(
    settings: AgentProcessSettings,
    exporters: Iterable[SpanExporter] = (),
    processors: Iterable[SpanProcessor] = (),
) -> Optional[TracerProvider]:
    """Build a :class:`TracerProvider` exporting to every given exporter.

    ``processors`` are added first, then each exporter behind a
    :class:`BatchSpanProcessor`. Returns ``None`` when there is no exporter,
    in which case the application keeps its own (or the no-op) provider.
    """
    exporters = list(exporters)
    if not exporters:
        logger.warning(
            "No span exporter configured, agent process spans will not be exported"
        )
        return None

    provider = TracerProvider(
        resource=Resource.create({SERVICE_NAME: settings.service_name})
    )
    for processor in processors:
        provider.add_span_processor(processor)
    for exporter in exporters:
        provider.add_span_processor(BatchSpanProcessor(exporter))
    logger.info(
        "Created tracer provider for %s with %s exporter(s)",
        settings.service_name,
        len(exporters),
    )
    return provider
