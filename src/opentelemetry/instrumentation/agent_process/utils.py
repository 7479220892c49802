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

import functools
import logging
import traceback
from typing import Any, Callable, TypeVar

F = TypeVar("F", bound=Callable[..., Any])


def dont_throw(func: F) -> F:
    """Decorator that wraps a function and logs exceptions instead of throwing.

    Event handling must never break the agent process that emits the events.
    """
    logger = logging.getLogger(func.__module__)

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except Exception:  # pylint: disable=broad-exception-caught
            logger.debug(
                "OpenTelemetry agent process instrumentation failed in %s, error: %s",
                func.__name__,
                traceback.format_exc(),
            )
            return None

    return wrapper  # type: ignore[return-value]
