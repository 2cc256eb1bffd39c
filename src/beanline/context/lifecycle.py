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
"""Initialization and destruction hooks that run around constructed beans.

The ApplicationContext runs these on every bean it creates, right after the
construction pipeline is done with it:

- ``BeanPostProcessor.before_init`` (not for substituted beans)
- ``@post_construct`` methods (not for substituted beans)
- ``BeanPostProcessor.after_init``

``@pre_destroy`` methods run when the context stops.

A coroutine ``@post_construct`` cannot be awaited from a synchronous
``get_bean``; it is held as a :class:`PendingPostConstruct` and completed by
``start()``. Beans created after ``start()`` need synchronous hooks.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Protocol, TypeVar, runtime_checkable

import structlog

from beanline.container.exceptions import BeanCreationException

F = TypeVar("F", bound=Callable)

logger = structlog.get_logger("beanline.context.lifecycle")

_POST_CONSTRUCT_ATTR = "__beanline_post_construct__"
_PRE_DESTROY_ATTR = "__beanline_pre_destroy__"


@runtime_checkable
class BeanPostProcessor(Protocol):
    """Hook into bean initialization; both methods may return a replacement bean."""

    def before_init(self, bean: Any, bean_name: str) -> Any: ...

    def after_init(self, bean: Any, bean_name: str) -> Any: ...


def post_construct(func: F) -> F:
    """Run *func* once the bean's properties are populated.

    May be a coroutine function. Not called on substituted beans.
    """
    setattr(func, _POST_CONSTRUCT_ATTR, True)
    return func


def pre_destroy(func: F) -> F:
    """Run *func* when the context stops. May be a coroutine function."""
    setattr(func, _PRE_DESTROY_ATTR, True)
    return func


def _marked_methods(instance: Any, marker: str) -> list[tuple[str, Callable[..., Any]]]:
    return [
        (name, getattr(instance, name))
        for name, func in inspect.getmembers(type(instance), inspect.isfunction)
        if getattr(func, marker, False)
    ]


def _post_construct_failed(instance: Any, name: str, exc: Exception) -> BeanCreationException:
    return BeanCreationException(
        subsystem="lifecycle",
        provider=type(instance).__qualname__,
        reason=f"@post_construct {name}() failed: {exc}",
    )


@dataclass
class PendingPostConstruct:
    """@post_construct work left over once a method returned an awaitable."""

    instance: Any
    name: str
    awaitable: Awaitable[Any]
    remaining: list[tuple[str, Callable[..., Any]]] = field(default_factory=list)

    async def complete(self) -> None:
        """Await the held result, then run the remaining methods in order."""
        name, awaitable = self.name, self.awaitable
        try:
            await awaitable
            for name, method in self.remaining:
                result = method()
                if inspect.isawaitable(result):
                    await result
        except Exception as exc:
            raise _post_construct_failed(self.instance, name, exc) from exc

    def discard(self) -> None:
        close = getattr(self.awaitable, "close", None)
        if callable(close):
            close()


def begin_post_construct(instance: Any) -> PendingPostConstruct | None:
    """Call @post_construct methods in order until one returns an awaitable.

    Returns ``None`` when every method completed synchronously.
    """
    methods = _marked_methods(instance, _POST_CONSTRUCT_ATTR)
    for index, (name, method) in enumerate(methods):
        try:
            result = method()
        except Exception as exc:
            raise _post_construct_failed(instance, name, exc) from exc
        if inspect.isawaitable(result):
            return PendingPostConstruct(instance, name, result, methods[index + 1 :])
    return None


async def invoke_pre_destroy(instance: Any) -> None:
    """Call every @pre_destroy method of *instance*; failures are logged and skipped."""
    for name, method in _marked_methods(instance, _PRE_DESTROY_ATTR):
        try:
            result = method()
            if inspect.isawaitable(result):
                await result
        except Exception as exc:
            logger.warning(
                "pre_destroy_failed",
                bean_type=type(instance).__qualname__,
                method=name,
                error=str(exc),
            )
