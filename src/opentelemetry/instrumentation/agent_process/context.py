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

import logging
from contextlib import contextmanager
from typing import Any, Iterator

from opentelemetry.instrumentation.agent_process.backends.base import (
    SpanBackend,
)

logger = logging.getLogger(__name__)


class ContextPropagationBridge:
    """Ambient current span, as seen by instrumentations the engine does not
    control.

    Pushes and pops must pair up in LIFO order on the thread that pushed.
    """

    def __init__(self, backend: SpanBackend) -> None:
        self._backend = backend

    def push(self, span: Any) -> Any:
        return self._backend.push_scope(span)

    def pop(self, token: Any) -> None:
        if token is None:
            return
        self._backend.pop_scope(token)

    def current(self) -> Any:
        return self._backend.current_span()

    @contextmanager
    def scoped(self, span: Any) -> Iterator[Any]:
        token = self.push(span)
        try:
            yield span
        finally:
            self.pop(token)
