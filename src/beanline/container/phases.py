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
"""Construction phases, pipeline states, and per-phase results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from beanline.container.property_values import PropertyValues


class Phase(Enum):
    """One of the four interceptor callbacks; the value is the callback name."""

    BEFORE_INSTANTIATION = "before_instantiation"
    AFTER_INSTANTIATION = "after_instantiation"
    PROPERTIES = "process_properties"
    PROPERTY_VALUES = "process_property_values"


class ConstructionState(Enum):
    """States of a single construction pass.

    ``START -> MAYBE_SUBSTITUTED -> INSTANTIATED -> MAYBE_POPULATED -> DONE``,
    with ``ABORTED`` reachable from any non-terminal state.
    """

    START = "start"
    MAYBE_SUBSTITUTED = "maybe_substituted"
    INSTANTIATED = "instantiated"
    MAYBE_POPULATED = "maybe_populated"
    DONE = "done"
    ABORTED = "aborted"


@dataclass(frozen=True)
class Continue:
    """The interceptor keeps the default behaviour."""


@dataclass(frozen=True)
class Substitute:
    """Use *bean* instead of instantiating the target type."""

    bean: Any


@dataclass(frozen=True)
class Suppress:
    """Skip property population for this bean."""


@dataclass(frozen=True)
class Rewrite:
    """Replace the working property values."""

    property_values: PropertyValues


@dataclass(frozen=True)
class Defer:
    """No opinion; fall back to the interceptor's legacy callback."""


PhaseResult = Continue | Substitute | Suppress | Rewrite | Defer
