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


"""Creation, scoping and finalization of spans through a backend."""

from __future__ import annotations

import logging
import timeit
from typing import Any, Callable, Dict, Mapping, Optional, Union

from opentelemetry.instrumentation.agent_process.backends.base import (
    SpanBackend,
    SpanRole,
    SpanStatus,
)
from opentelemetry.instrumentation.agent_process.constants import (
    OPERATION_NAME,
    OPERATION_STATUS,
    OPERATION_TYPE,
    SHUTDOWN_DESCRIPTION,
    SUPERSEDED_DESCRIPTION,
)
from opentelemetry.instrumentation.agent_process.context import (
    ContextPropagationBridge,
)
from opentelemetry.instrumentation.agent_process.registry import (
    ActiveSpanRegistry,
    RegistryEntry,
    RegistryKey,
)
from opentelemetry.instrumentation.agent_process.sanitize import (
    safe_str,
    truncate,
)

logger = logging.getLogger(__name__)

# Callables are evaluated when the attributes are applied
AttributeValue = Union[str, bool, int, float, Callable[[], Any], None]
AttributeMap = Mapping[str, AttributeValue]


class SpanLifecycleManager:
    def __init__(
        self,
        backend: SpanBackend,
        registry: ActiveSpanRegistry,
        bridge: ContextPropagationBridge,
        max_attribute_length: int,
    ) -> None:
        self._backend = backend
        self._registry = registry
        self._bridge = bridge
        self._max_attribute_length = max_attribute_length

    @property
    def backend(self) -> SpanBackend:
        return self._backend

    def _resolve_attributes(
        self, attributes: Optional[AttributeMap]
    ) -> Dict[str, Any]:
        """Evaluate lazy values, drop missing ones and truncate strings.

        A failing lazy value drops only its own attribute.
        """
        resolved: Dict[str, Any] = {}
        for key, value in (attributes or {}).items():
            if callable(value):
                try:
                    value = value()
                except Exception:  # pylint: disable=broad-exception-caught
                    logger.debug(
                        "Failed to compute span attribute %s",
                        key,
                        exc_info=True,
                    )
                    continue
            if value is None:
                continue
            if isinstance(value, str):
                value = truncate(value, self._max_attribute_length)
            elif not isinstance(value, (bool, int, float)):
                value = safe_str(value)
                if value is None:
                    continue
                value = truncate(value, self._max_attribute_length)
            resolved[key] = value
        return resolved

    def start_span(
        self,
        key: RegistryKey,
        name: str,
        parent: Any,
        attributes: Optional[AttributeMap] = None,
        scoping: bool = True,
        kind: SpanRole = SpanRole.INTERNAL,
    ) -> Any:
        """Open a span, optionally make it ambient, and register it under ``key``.

        A span still open under the same key is ended with an error status
        first.
        """
        if key in self._registry:
            logger.debug("Replacing open span for %s", key)
            self.end_span(
                key, SpanStatus.ERROR, description=SUPERSEDED_DESCRIPTION
            )

        span = self._backend.create_span(
            name, kind, parent, self._resolve_attributes(attributes)
        )
        scope = None
        if scoping:
            try:
                scope = self._bridge.push(span)
            except Exception as exc:
                self._backend.finish_span(span, SpanStatus.ERROR, error=exc)
                raise
        self._registry.put(
            key,
            RegistryEntry(
                span=span,
                scope=scope,
                name=name,
                category=key.category,
                started_at=timeit.default_timer(),
            ),
        )
        logger.debug("Started span %s for %s", name, key)
        return span

    def update_span(self, key: RegistryKey, attributes: AttributeMap) -> bool:
        entry = self._registry.get(key)
        if entry is None:
            return False
        resolved = self._resolve_attributes(attributes)
        if resolved:
            self._backend.set_attributes(entry.span, resolved)
        return True

    def end_span(
        self,
        key: RegistryKey,
        status: SpanStatus = SpanStatus.OK,
        attributes: Optional[AttributeMap] = None,
        error: Optional[BaseException] = None,
        description: Optional[str] = None,
    ) -> None:
        """Close the span registered under ``key``; unknown keys are ignored.

        The scope is released before the span is finalized so that the
        ambient context the span replaced is current again.
        """
        entry = self._registry.remove(key)
        if entry is None:
            logger.debug("No open span for %s", key)
            return
        try:
            self._bridge.pop(entry.scope)
        finally:
            self._finish(
                entry.span,
                entry.name,
                entry.category.value,
                entry.started_at,
                status,
                description,
                self._resolve_attributes(attributes),
                error,
            )
        logger.debug("Ended span %s for %s", entry.name, key)

    def instant_span(
        self,
        name: str,
        parent: Any,
        attributes: Optional[AttributeMap] = None,
        status: SpanStatus = SpanStatus.OK,
        operation_type: Optional[str] = None,
    ) -> None:
        """Record a point-in-time span. Never scoped, never registered."""
        span = self._backend.create_span(
            name, SpanRole.INTERNAL, parent, self._resolve_attributes(attributes)
        )
        self._finish(
            span,
            name,
            operation_type or name,
            timeit.default_timer(),
            status,
            None,
            None,
            None,
        )

    def shutdown(self) -> None:
        """End every open span with an error status.

        Scopes are left alone: they belong to the threads that opened them.
        """
        for key, entry in self._registry.drain().items():
            try:
                self._finish(
                    entry.span,
                    entry.name,
                    entry.category.value,
                    entry.started_at,
                    SpanStatus.ERROR,
                    SHUTDOWN_DESCRIPTION,
                    None,
                    None,
                )
            except Exception:  # pylint: disable=broad-exception-caught
                logger.debug(
                    "Failed to end span %s on shutdown", key, exc_info=True
                )

    def _finish(
        self,
        span: Any,
        name: str,
        operation_type: str,
        started_at: float,
        status: SpanStatus,
        description: Optional[str],
        attributes: Optional[Dict[str, Any]],
        error: Optional[BaseException],
    ) -> None:
        self._backend.finish_span(
            span,
            status,
            description=description,
            attributes=attributes,
            error=error,
        )
        if self._backend.supports_metrics:
            self._backend.record_duration(
                timeit.default_timer() - started_at,
                {
                    OPERATION_TYPE: operation_type,
                    OPERATION_NAME: name,
                    OPERATION_STATUS: status.value,
                },
            )
