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
"""Registration metadata: scopes, component descriptors, and per-bean registrations."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any

from beanline.container.metrics import BeanMetrics


class Scope(Enum):
    """How many instances a registration produces.

    Every instance, singleton or transient, goes through a full construction
    pass; a singleton simply caches the outcome of its first one.
    """

    SINGLETON = auto()
    TRANSIENT = auto()


@dataclass(frozen=True)
class ComponentDescriptor:
    """Identity of the bean being constructed; read-only for the pipeline."""

    bean_type: type
    bean_name: str
    factory_produced: bool = False

    @property
    def has_bean_class(self) -> bool:
        """True when the concrete class is known ahead of instantiation."""
        return isinstance(self.bean_type, type) and not self.factory_produced


@dataclass
class Registration:
    """A registered bean: how to build it, what to set on it, and what happened so far."""

    impl_type: type
    scope: Scope = Scope.SINGLETON
    instance: Any = field(default=None, repr=False)
    name: str = ""
    factory: Callable[[], Any] | None = field(default=None, repr=False)
    properties: dict[str, Any] = field(default_factory=dict)
    metrics: BeanMetrics = field(default_factory=BeanMetrics, repr=False)

    @property
    def bean_name(self) -> str:
        return self.name or self.impl_type.__name__

    @property
    def substituted(self) -> bool:
        """True if the last construction returned an interceptor-supplied bean."""
        return self.metrics.substituted

    def descriptor(self) -> ComponentDescriptor:
        return ComponentDescriptor(
            bean_type=self.impl_type,
            bean_name=self.bean_name,
            factory_produced=self.factory is not None,
        )
