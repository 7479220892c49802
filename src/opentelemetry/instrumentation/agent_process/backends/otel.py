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


from __future__ import annotations

from typing import Optional

from opentelemetry import context as context_api
from opentelemetry import trace
from opentelemetry.semconv.schemas import Schemas
from opentelemetry.trace import (
    SpanKind,
    TracerProvider,
    get_tracer,
    set_span_in_context,
)
from opentelemetry.trace.status import Status, StatusCode

from opentelemetry.instrumentation.agent_process.backends.base import (
    SpanBackend,
    SpanRole,
    SpanStatus,
)
from opentelemetry.instrumentation.agent_process.version import __version__

_DEFAULT_TRACER_NAME = "opentelemetry.instrumentation.agent_process"


class OpenTelemetryBackend(SpanBackend):
    """Spans created directly with the OpenTelemetry tracing API.

    Scopes are OpenTelemetry runtime context tokens, so the scoped span is
    what ``opentelemetry.trace.get_current_span()`` returns to any other
    instrumentation running on the same thread or task.
    """

    name = "opentelemetry"

    def __init__(
        self,
        tracer_provider: Optional[TracerProvider] = None,
        tracer_name: str = _DEFAULT_TRACER_NAME,
        tracer_version: str = __version__,
        **kwargs,
    ) -> None:
        self._tracer = get_tracer(
            tracer_name,
            tracer_version,
            tracer_provider,
            schema_url=Schemas.V1_28_0.value,
        )

    def create_span(self, name, role, parent=None, attributes=None):
        if role is SpanRole.ROOT:
            # An empty context has no current span: the span starts a new trace
            ctx = context_api.Context()
            kind = SpanKind.SERVER
        else:
            ctx = set_span_in_context(parent) if parent is not None else None
            kind = SpanKind.INTERNAL
        return self._tracer.start_span(
            name=name, context=ctx, kind=kind, attributes=attributes
        )

    def set_attributes(self, span, attributes):
        span.set_attributes(attributes)

    def finish_span(
        self, span, status, description=None, attributes=None, error=None
    ):
        if attributes:
            span.set_attributes(attributes)
        if error is not None:
            span.record_exception(error)
        if status is SpanStatus.ERROR:
            span.set_status(Status(StatusCode.ERROR, description))
        else:
            span.set_status(Status(StatusCode.OK))
        span.end()

    def push_scope(self, span):
        return context_api.attach(set_span_in_context(span))

    def pop_scope(self, token):
        context_api.detach(token)

    def current_span(self):
        span = trace.get_current_span()
        if span.get_span_context().is_valid:
            return span
        return None
