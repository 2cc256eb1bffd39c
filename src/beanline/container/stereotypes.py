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
"""Stereotype decorators: mark a class as a bean and describe how to register it.

- @component: generic managed bean
- @service: business logic layer
- @repository: data access layer
- @configuration: holds @bean factory methods, expanded by the ApplicationContext
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, TypeVar, overload

from beanline.container.registry import Scope

T = TypeVar("T", bound=type)

_COMPONENT_ATTR = "__beanline_component__"


@dataclass(frozen=True)
class ComponentMetadata:
    """Registration defaults recorded by a stereotype decorator."""

    stereotype: str
    name: str = ""
    scope: Scope = Scope.SINGLETON
    properties: Mapping[str, Any] = field(default_factory=dict)


def component_metadata(cls: type) -> ComponentMetadata | None:
    """Metadata left by a stereotype decorator on *cls* or a base class."""
    return getattr(cls, _COMPONENT_ATTR, None)


def is_configuration(cls: type) -> bool:
    metadata = component_metadata(cls)
    return metadata is not None and metadata.stereotype == "configuration"


def _make_stereotype(stereotype_name: str) -> Callable[..., Any]:
    """Build a decorator usable bare (``@service``) or with options (``@service(name=...)``)."""

    @overload
    def stereotype(cls: T) -> T: ...

    @overload
    def stereotype(
        *,
        name: str = "",
        scope: Scope = Scope.SINGLETON,
        properties: Mapping[str, Any] | None = None,
    ) -> Callable[[T], T]: ...

    def stereotype(
        cls: T | None = None,
        *,
        name: str = "",
        scope: Scope = Scope.SINGLETON,
        properties: Mapping[str, Any] | None = None,
    ) -> T | Callable[[T], T]:
        metadata = ComponentMetadata(
            stereotype=stereotype_name,
            name=name,
            scope=scope,
            properties=dict(properties or {}),
        )

        def decorator(cls: T) -> T:
            setattr(cls, _COMPONENT_ATTR, metadata)
            return cls

        if cls is not None:
            return decorator(cls)
        return decorator

    stereotype.__name__ = stereotype_name
    stereotype.__qualname__ = stereotype_name
    return stereotype


component = _make_stereotype("component")
service = _make_stereotype("service")
repository = _make_stereotype("repository")
configuration = _make_stereotype("configuration")
