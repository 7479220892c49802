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


OTEL_INSTRUMENTATION_AGENT_PROCESS_ENABLED = (
    "OTEL_INSTRUMENTATION_AGENT_PROCESS_ENABLED"
)
"""
.. envvar:: OTEL_INSTRUMENTATION_AGENT_PROCESS_ENABLED

Master switch for agent process tracing. Must be one of ``true`` or ``false``
(case-insensitive). Defaults to ``true``.
"""

OTEL_INSTRUMENTATION_AGENT_PROCESS_BACKENDS = (
    "OTEL_INSTRUMENTATION_AGENT_PROCESS_BACKENDS"
)
"""
.. envvar:: OTEL_INSTRUMENTATION_AGENT_PROCESS_BACKENDS

Comma separated, ordered list of span backends to try. Known values are
``observation``, ``opentracing`` and ``opentelemetry``. Defaults to
``observation,opentracing,opentelemetry``.
"""

OTEL_INSTRUMENTATION_AGENT_PROCESS_TRACER_NAME = (
    "OTEL_INSTRUMENTATION_AGENT_PROCESS_TRACER_NAME"
)
"""
.. envvar:: OTEL_INSTRUMENTATION_AGENT_PROCESS_TRACER_NAME

Instrumentation scope name used when acquiring the tracer and meter.
"""

OTEL_INSTRUMENTATION_AGENT_PROCESS_MAX_ATTRIBUTE_LENGTH = (
    "OTEL_INSTRUMENTATION_AGENT_PROCESS_MAX_ATTRIBUTE_LENGTH"
)
"""
.. envvar:: OTEL_INSTRUMENTATION_AGENT_PROCESS_MAX_ATTRIBUTE_LENGTH

Maximum length of string attributes before they are truncated. Defaults to
``4000``.
"""

OTEL_INSTRUMENTATION_AGENT_PROCESS_TRACE_AGENT_EVENTS = (
    "OTEL_INSTRUMENTATION_AGENT_PROCESS_TRACE_AGENT_EVENTS"
)
"""
.. envvar:: OTEL_INSTRUMENTATION_AGENT_PROCESS_TRACE_AGENT_EVENTS

Trace agents, actions and goals. Defaults to ``true``.
"""

OTEL_INSTRUMENTATION_AGENT_PROCESS_TRACE_TOOL_CALLS = (
    "OTEL_INSTRUMENTATION_AGENT_PROCESS_TRACE_TOOL_CALLS"
)
"""
.. envvar:: OTEL_INSTRUMENTATION_AGENT_PROCESS_TRACE_TOOL_CALLS

Defaults to ``true``.
"""

OTEL_INSTRUMENTATION_AGENT_PROCESS_TRACE_PLANNING = (
    "OTEL_INSTRUMENTATION_AGENT_PROCESS_TRACE_PLANNING"
)
"""
.. envvar:: OTEL_INSTRUMENTATION_AGENT_PROCESS_TRACE_PLANNING

Defaults to ``true``.
"""

OTEL_INSTRUMENTATION_AGENT_PROCESS_TRACE_STATE_TRANSITIONS = (
    "OTEL_INSTRUMENTATION_AGENT_PROCESS_TRACE_STATE_TRANSITIONS"
)
"""
.. envvar:: OTEL_INSTRUMENTATION_AGENT_PROCESS_TRACE_STATE_TRANSITIONS

Defaults to ``true``.
"""

OTEL_INSTRUMENTATION_AGENT_PROCESS_TRACE_LIFECYCLE_STATES = (
    "OTEL_INSTRUMENTATION_AGENT_PROCESS_TRACE_LIFECYCLE_STATES"
)
"""
.. envvar:: OTEL_INSTRUMENTATION_AGENT_PROCESS_TRACE_LIFECYCLE_STATES

Trace waiting, paused and stuck lifecycle states. Defaults to ``true``.
"""

OTEL_INSTRUMENTATION_AGENT_PROCESS_TRACE_OBJECT_BINDING = (
    "OTEL_INSTRUMENTATION_AGENT_PROCESS_TRACE_OBJECT_BINDING"
)
"""
.. envvar:: OTEL_INSTRUMENTATION_AGENT_PROCESS_TRACE_OBJECT_BINDING

Trace objects added to and bound on the blackboard. This is verbose and
defaults to ``false``.
"""
