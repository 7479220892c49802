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


"""Choice of the tracing backend, walking a preference list.

Backend modules are imported only after their requirements are known to be
installed, so a missing optional dependency never raises at import time.
"""

from __future__ import annotations

import importlib
import logging
from typing import Any, Dict, Iterable, NamedTuple, Tuple

from opentelemetry.instrumentation.dependencies import (
    get_dependency_conflicts,
)

from opentelemetry.instrumentation.agent_process.backends.base import (
    NoOpBackend,
    SpanBackend,
)

logger = logging.getLogger(__name__)


class BackendCandidate(NamedTuple):
    module: str
    class_name: str
    requirements: Tuple[str, ...]


_PACKAGE = "opentelemetry.instrumentation.agent_process.backends"

BACKEND_CANDIDATES: Dict[str, BackendCandidate] = {
    "observation": BackendCandidate(
        f"{_PACKAGE}.observation",
        "ObservationBackend",
        ("opentelemetry-api", "opentelemetry-sdk"),
    ),
    "opentracing": BackendCandidate(
        f"{_PACKAGE}.opentracing_shim",
        "OpenTracingShimBackend",
        ("opentracing", "opentelemetry-opentracing-shim >= 0.51b0"),
    ),
    "opentelemetry": BackendCandidate(
        f"{_PACKAGE}.otel",
        "OpenTelemetryBackend",
        ("opentelemetry-api",),
    ),
}


def select_backend(preference: Iterable[str], **kwargs: Any) -> SpanBackend:
    """Return the first constructible backend named in ``preference``.

    ``kwargs`` are passed to the backend constructor (``tracer_provider``,
    ``meter_provider``, ``tracer_name``, ``tracer_version``). Falls back to
    :class:`NoOpBackend` when no candidate is available.
    """
    for name in preference:
        candidate = BACKEND_CANDIDATES.get(name)
        if candidate is None:
            logger.warning("Unknown tracing backend %s, skipping", name)
            continue

        conflict = get_dependency_conflicts(candidate.requirements)
        if conflict is not None:
            logger.warning(
                "Tracing backend %s is unavailable: %s", name, conflict
            )
            continue

        try:
            module = importlib.import_module(candidate.module)
            backend = getattr(module, candidate.class_name)(**kwargs)
        except Exception:  # pylint: disable=broad-exception-caught
            logger.warning(
                "Failed to initialize tracing backend %s", name, exc_info=True
            )
            continue

        logger.info("Agent process tracing uses the %s backend", name)
        return backend

    logger.warning(
        "No tracing backend available, agent process events will not be traced"
    )
    return NoOpBackend()
