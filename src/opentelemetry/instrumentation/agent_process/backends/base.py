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


"""Interface between the span hierarchy engine and a tracing API."""

from __future__ import annotations

import abc
from enum import Enum
from typing import Any, Mapping, Optional

Attributes = Mapping[str, Any]


class SpanRole(Enum):
    # Starts a new trace, ignoring whatever is ambient
    ROOT = "root"
    # Child of the given parent, or of the ambient span when there is none
    INTERNAL = "internal"


class SpanStatus(Enum):
    OK = "ok"
    ERROR = "error"


class SpanBackend(abc.ABC):
    """A tracing API the engine can create, finish and scope spans with.

    Span and scope handles are opaque to the engine; a backend only ever
    receives back handles it produced itself (or that ``current_span``
    returned).
    """

    name: str = "abstract"
    supports_metrics: bool = False

    @abc.abstractmethod
    def create_span(
        self,
        name: str,
        role: SpanRole,
        parent: Any = None,
        attributes: Optional[Attributes] = None,
    ) -> Any:
        pass

    @abc.abstractmethod
    def set_attributes(self, span: Any, attributes: Attributes) -> None:
        pass

    @abc.abstractmethod
    def finish_span(
        self,
        span: Any,
        status: SpanStatus,
        description: Optional[str] = None,
        attributes: Optional[Attributes] = None,
        error: Optional[BaseException] = None,
    ) -> None:
        pass

    @abc.abstractmethod
    def push_scope(self, span: Any) -> Any:
        """Make ``span`` the ambient current span and return a release token."""

    @abc.abstractmethod
    def pop_scope(self, token: Any) -> None:
        pass

    @abc.abstractmethod
    def current_span(self) -> Any:
        """The ambient current span, or ``None`` when nothing valid is set."""

    def record_duration(
        self, duration: float, attributes: Optional[Attributes] = None
    ) -> None:
        """Record one finished operation. Only called when ``supports_metrics``."""


class NoOpBackend(SpanBackend):
    name = "noop"

    def create_span(self, name, role, parent=None, attributes=None):
        return None

    def set_attributes(self, span, attributes):
        pass

    def finish_span(
        self, span, status, description=None, attributes=None, error=None
    ):
        pass

    def push_scope(self, span):
        return None

    def pop_scope(self, token):
        pass

    def current_span(self):
        return None
