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
"""@bean factory methods, @primary, and Qualifier for disambiguation."""

from __future__ import annotations

import inspect
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any, TypeVar, overload

from beanline.container.registry import Scope

F = TypeVar("F", bound=Callable)
T = TypeVar("T", bound=type)

_BEAN_ATTR = "__beanline_bean__"


@dataclass(frozen=True)
class BeanMethod:
    """Registration options of a @bean method; an empty name means the method name."""

    name: str = ""
    scope: Scope = Scope.SINGLETON
    properties: Mapping[str, Any] = field(default_factory=dict)


@overload
def bean(func: F) -> F: ...


@overload
def bean(
    *,
    name: str = "",
    scope: Scope = Scope.SINGLETON,
    properties: Mapping[str, Any] | None = None,
) -> Callable[[F], F]: ...


def bean(
    func: F | None = None,
    *,
    name: str = "",
    scope: Scope = Scope.SINGLETON,
    properties: Mapping[str, Any] | None = None,
) -> F | Callable[[F], F]:
    """Mark a method inside a @configuration class as a bean factory.

    The return annotation is the type the bean is registered under. The
    produced bean skips ``before_instantiation`` (its class is only known
    once the method has run) but still goes through the later construction
    phases, which apply *properties*.
    """
    options = BeanMethod(name=name, scope=scope, properties=dict(properties or {}))

    def decorator(func: F) -> F:
        setattr(func, _BEAN_ATTR, options)
        return func

    if func is not None:
        return decorator(func)
    return decorator


def bean_method_options(func: Any) -> BeanMethod | None:
    return getattr(func, _BEAN_ATTR, None)


def bean_methods(instance: Any) -> Iterator[tuple[str, Callable[..., Any], BeanMethod]]:
    """Yield ``(attribute name, bound method, options)`` for every @bean method of *instance*."""
    for attr_name, func in inspect.getmembers(type(instance), inspect.isfunction):
        options = bean_method_options(func)
        if options is not None:
            yield attr_name, getattr(instance, attr_name), options


def primary(cls: T) -> T:
    """Prefer this implementation when several are bound to the same interface."""
    cls.__beanline_primary__ = True  # type: ignore[attr-defined]
    return cls


def is_primary(cls: type) -> bool:
    return bool(getattr(cls, "__beanline_primary__", False))


class Qualifier:
    """Used with ``typing.Annotated`` to inject a bean by name.

    Usage::

        def __init__(self, store: Annotated[DataSource, Qualifier("reporting")]):
            ...
    """

    __slots__ = ("name",)

    def __init__(self, name: str) -> None:
        self.name = name

    def __repr__(self) -> str:
        return f"Qualifier({self.name!r})"
