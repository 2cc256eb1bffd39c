# Copyright 2026 Firefly Software Solutions Inc.
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
"""Per-bean construction metrics kept on each registration."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from beanline.container.construction import ConstructionOutcome
    from beanline.container.phases import ConstructionState


@dataclass
class BeanMetrics:
    """What the container observed while building one registration.

    ``resolution_count`` counts lookups, including cached singleton hits;
    ``creation_count`` counts completed construction passes only. Updates
    go through the ``record_*`` methods, which serialize concurrent writers.
    """

    creation_time_ns: int = 0
    resolution_count: int = 0
    creation_count: int = 0
    created_at: float | None = None
    substituted: bool = False
    populated: bool = False
    last_path: tuple[ConstructionState, ...] = ()
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def record_resolution(self) -> None:
        with self._lock:
            self.resolution_count += 1

    def record_construction(self, outcome: ConstructionOutcome, elapsed_ns: int) -> None:
        """Fold a finished construction pass into these metrics."""
        with self._lock:
            self.creation_time_ns = elapsed_ns
            self.creation_count += 1
            self.created_at = time.time()
            self.substituted = outcome.substituted
            self.populated = outcome.populated
            self.last_path = outcome.path
