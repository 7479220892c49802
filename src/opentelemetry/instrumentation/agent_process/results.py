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


"""Normalization of tool call results.

Tool results arrive in whatever shape the runtime produced: the raw value,
an exception, or a success-or-error wrapper exposing accessor methods.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

logger = logging.getLogger(__name__)

_SUCCESS_ACCESSORS = ("get_or_none", "getOrNull")
_ERROR_ACCESSORS = ("exception_or_none", "exceptionOrNull")


@dataclass(frozen=True)
class ToolOutcome:
    result: Any = None
    error: Optional[BaseException] = None


def _find_accessor(value: Any, names):
    for name in names:
        accessor = getattr(value, name, None)
        if callable(accessor):
            return accessor
    return None


def extract_outcome(value: Any) -> ToolOutcome:
    if value is None:
        return ToolOutcome()
    if isinstance(value, BaseException):
        return ToolOutcome(error=value)
    try:
        get_result = _find_accessor(value, _SUCCESS_ACCESSORS)
        if get_result is None:
            return ToolOutcome(result=value)
        result = get_result()
        if result is not None:
            return ToolOutcome(result=result)
        get_error = _find_accessor(value, _ERROR_ACCESSORS)
        error = get_error() if get_error is not None else None
        if isinstance(error, BaseException):
            return ToolOutcome(error=error)
        return ToolOutcome()
    except Exception as exc:  # pylint: disable=broad-exception-caught
        logger.debug(
            "Could not extract tool result from %s: %s",
            type(value).__name__,
            exc,
        )
        return ToolOutcome()
