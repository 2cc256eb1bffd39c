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
"""Autowired field injection, performed as a construction interceptor."""

from __future__ import annotations

import typing
from typing import TYPE_CHECKING, Annotated, Any, get_origin

from beanline.container.exceptions import NoSuchBeanError, NoUniqueBeanError
from beanline.container.interceptor import InstantiationAwareBeanPostProcessor

if TYPE_CHECKING:
    from beanline.container.container import Container
    from beanline.container.property_values import PropertyValues


class Autowired:
    """Marks a class attribute for field injection by the DI container.

    Usage::

        @service
        class OrderService:
            repo: OrderRepository = Autowired()
            cache: CacheAdapter = Autowired(qualifier="redis_cache")
            metrics: MetricsCollector = Autowired(required=False)

    Resolved values are added to the bean's property values by
    :class:`AutowiredFieldInjector`, so an interceptor that skips or
    suppresses property population also skips field injection.

    Args:
        qualifier: If set, resolve by bean name instead of type.
        required: If ``False``, unresolvable dependencies are set to ``None``
            instead of raising ``NoSuchBeanError``. Defaults to ``True``.
    """

    __slots__ = ("qualifier", "required")

    def __init__(self, *, qualifier: str | None = None, required: bool = True) -> None:
        self.qualifier = qualifier
        self.required = required

    def __repr__(self) -> str:
        parts: list[str] = []
        if self.qualifier:
            parts.append(f"qualifier={self.qualifier!r}")
        if not self.required:
            parts.append("required=False")
        return f"Autowired({', '.join(parts)})"


def autowired_fields(cls: type) -> dict[str, tuple[Any, Autowired]]:
    """Map each ``Autowired()`` attribute of *cls* to its type hint and marker."""
    try:
        hints = typing.get_type_hints(cls, include_extras=True)
    except Exception:
        return {}

    fields: dict[str, tuple[Any, Autowired]] = {}
    for attr_name, attr_type in hints.items():
        marker = getattr(cls, attr_name, None)
        if isinstance(marker, Autowired):
            fields[attr_name] = (attr_type, marker)
    return fields


class AutowiredFieldInjector(InstantiationAwareBeanPostProcessor):
    """Adds resolved ``Autowired()`` dependencies to each bean's property values.

    Values already present in the property values (declared explicitly or
    added by an earlier interceptor) are left untouched.
    """

    def __init__(self, container: Container) -> None:
        self._container = container

    def process_properties(self, pvs: PropertyValues, bean: Any, bean_name: str) -> PropertyValues:
        fields = autowired_fields(type(bean))
        if not fields:
            return pvs

        result = pvs.copy()
        for attr_name, (attr_type, marker) in fields.items():
            if attr_name in result:
                continue
            result[attr_name] = self._resolve_field(type(bean), attr_name, attr_type, marker)
        return result

    def _resolve_field(self, owner: type, attr_name: str, attr_type: Any, marker: Autowired) -> Any:
        if marker.qualifier:
            return self._container.resolve_by_name(marker.qualifier)
        if get_origin(attr_type) is Annotated:
            return self._container.resolve_dependency(attr_type)
        try:
            return self._container.resolve(attr_type)
        except (NoSuchBeanError, NoUniqueBeanError):
            if not marker.required:
                return None
            raise NoSuchBeanError(
                bean_type=attr_type if isinstance(attr_type, type) else None,
                required_by=f"{owner.__qualname__}.{attr_name}",
                parameter=f"{attr_name}: {getattr(attr_type, '__name__', repr(attr_type))} = Autowired()",
            ) from None
