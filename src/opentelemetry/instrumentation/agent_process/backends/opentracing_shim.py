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


"""Spans created through the OpenTracing API, bridged onto OpenTelemetry by
the OpenTracing shim.

Handles are ``SpanShim`` objects and scopes are ``ScopeShim`` objects. The
shim's scope manager stores the active span in the OpenTelemetry runtime
context, so spans scoped here are still visible to OpenTelemetry
instrumentations.
"""

from __future__ import annotations

from typing import Optional

from opentelemetry.shim.opentracing_shim import create_tracer
from opentelemetry.trace import TracerProvider, get_tracer_provider
from opentelemetry.trace.status import Status, StatusCode

from opentelemetry.instrumentation.agent_process.backends.base import (
    SpanBackend,
    SpanRole,
    SpanStatus,
)

_SPAN_KIND_TAG = "span.kind"
_ERROR_TAG = "error"


class OpenTracingShimBackend(SpanBackend):
    name = "opentracing"

    def __init__(
        self, tracer_provider: Optional[TracerProvider] = None, **kwargs
    ) -> None:
        self._tracer = create_tracer(tracer_provider or get_tracer_provider())

    def create_span(self, name, role, parent=None, attributes=None):
        tags = dict(attributes or {})
        if role is SpanRole.ROOT:
            tags[_SPAN_KIND_TAG] = "server"
            return self._tracer.start_span(
                operation_name=name, tags=tags, ignore_active_span=True
            )
        return self._tracer.start_span(
            operation_name=name, child_of=parent, tags=tags
        )

    def set_attributes(self, span, attributes):
        for key, value in attributes.items():
            span.set_tag(key, value)

    def finish_span(
        self, span, status, description=None, attributes=None, error=None
    ):
        if attributes:
            self.set_attributes(span, attributes)
        otel_span = span.unwrap()
        if error is not None:
            span.log_kv(
                {
                    "event": _ERROR_TAG,
                    "error.kind": type(error).__name__,
                    "message": str(error),
                }
            )
            otel_span.record_exception(error)
        if status is SpanStatus.ERROR:
            span.set_tag(_ERROR_TAG, True)
            otel_span.set_status(Status(StatusCode.ERROR, description))
        else:
            otel_span.set_status(Status(StatusCode.OK))
        span.finish()

    def push_scope(self, span):
        return self._tracer.scope_manager.activate(span, False)

    def pop_scope(self, token):
        token.close()

    def current_span(self):
        return self._tracer.active_span
