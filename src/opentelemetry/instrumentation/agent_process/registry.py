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


"""Bookkeeping of open spans and plan iterations, per run."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, NamedTuple, Optional


class SpanCategory(Enum):
    AGENT = "agent"
    ACTION = "action"
    TOOL = "tool"


class RegistryKey(NamedTuple):
    category: SpanCategory
    run_id: str
    discriminator: Optional[str] = None

    @classmethod
    def agent(cls, run_id: str) -> "RegistryKey":
        return cls(SpanCategory.AGENT, run_id)

    @classmethod
    def action(cls, run_id: str, action_name: str) -> "RegistryKey":
        return cls(SpanCategory.ACTION, run_id, action_name)

    @classmethod
    def tool(cls, run_id: str, tool_name: str) -> "RegistryKey":
        return cls(SpanCategory.TOOL, run_id, tool_name)


@dataclass
class RegistryEntry:
    span: Any
    scope: Any
    name: str
    category: SpanCategory
    started_at: float
    input_captured: bool = False


class ActiveSpanRegistry:
    """Open spans by key. At most one entry per key; removal is idempotent."""

    def __init__(self) -> None:
        self._entries: Dict[RegistryKey, RegistryEntry] = {}

    def put(self, key: RegistryKey, entry: RegistryEntry) -> None:
        self._entries[key] = entry

    def get(self, key: RegistryKey) -> Optional[RegistryEntry]:
        return self._entries.get(key)

    def remove(self, key: RegistryKey) -> Optional[RegistryEntry]:
        return self._entries.pop(key, None)

    def find_action(self, run_id: str) -> Optional[RegistryEntry]:
        """First open action span of ``run_id``, in insertion order."""
        for key, entry in list(self._entries.items()):
            if key.category is SpanCategory.ACTION and key.run_id == run_id:
                return entry
        return None

    def drain(self) -> Dict[RegistryKey, RegistryEntry]:
        entries = dict(self._entries)
        self._entries.clear()
        return entries

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


class PlanIterationCounter:
    def __init__(self) -> None:
        self._iterations: Dict[str, int] = {}

    def reset(self, run_id: str) -> None:
        self._iterations[run_id] = 0

    def increment(self, run_id: str) -> int:
        iteration = self._iterations.get(run_id, 0) + 1
        self._iterations[run_id] = iteration
        return iteration

    def get(self, run_id: str) -> Optional[int]:
        return self._iterations.get(run_id)

    def remove(self, run_id: str) -> None:
        self._iterations.pop(run_id, None)

    def clear(self) -> None:
        self._iterations.clear()

    def __contains__(self, run_id: object) -> bool:
        return run_id in self._iterations
