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


"""String rendering and truncation for span attribute values."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

logger = logging.getLogger(__name__)

TRUNCATION_MARKER = "..."
OBJECT_SEPARATOR = "\n---\n"
EMPTY_PLAN = "[]"


def truncate(
    value: Optional[str], max_length: int, marker: str = TRUNCATION_MARKER
) -> str:
    """Cut ``value`` to ``max_length`` characters and append ``marker``.

    ``None`` becomes the empty string. Values that already fit are returned
    unchanged.
    """
    if value is None:
        return ""
    if len(value) <= max_length:
        return value
    return value[:max_length] + marker


def safe_str(value: Any) -> Optional[str]:
    """``str(value)``, or ``None`` if the object cannot be rendered."""
    if value is None:
        return None
    if isinstance(value, str):
        return value
    try:
        return str(value)
    except Exception:  # pylint: disable=broad-exception-caught
        logger.debug(
            "Failed to render object of type: %s", type(value).__name__
        )
        return None


def type_name(value: Any, default: str = "Unknown") -> str:
    if value is None:
        return default
    return type(value).__name__


def short_name(name: str) -> str:
    return name.rsplit(".", 1)[-1]


def display_name(value: Any) -> Optional[str]:
    """Name of a plan action or goal given either as a string or an object."""
    if value is None:
        return None
    if isinstance(value, str):
        return value
    name = getattr(value, "name", None)
    return name if isinstance(name, str) else safe_str(value)


def format_objects(objects: Optional[Iterable[Any]]) -> str:
    """Render blackboard objects as ``Type: value`` blocks."""
    if not objects:
        return ""
    blocks = []
    for obj in objects:
        if obj is None:
            continue
        blocks.append(f"{type(obj).__name__}: {safe_str(obj) or ''}")
    return OBJECT_SEPARATOR.join(blocks)


def snapshot(blackboard: Any) -> str:
    """Display string for a blackboard given as text or as its objects.

    Anything that cannot be iterated is rendered with ``str()``.
    """
    if blackboard is None:
        return ""
    if isinstance(blackboard, str):
        return blackboard
    try:
        return format_objects(blackboard)
    except Exception:  # pylint: disable=broad-exception-caught
        logger.debug(
            "Failed to list blackboard of type: %s",
            type(blackboard).__name__,
        )
        return safe_str(blackboard) or ""


def format_plan(actions: Optional[Iterable[Any]], goal: Any = None) -> str:
    actions = list(actions or ())
    if not actions:
        return EMPTY_PLAN
    lines = [
        f"{index}. {display_name(action)}"
        for index, action in enumerate(actions, start=1)
    ]
    goal_name = display_name(goal)
    if goal_name is not None:
        lines.append(f"-> Goal: {goal_name}")
    return "\n".join(lines)
