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
"""@order and precedence helpers.

Order decides which interceptor the ApplicationContext registers first,
which singleton it creates first, and which post-processor runs first.
Lower values come first; undecorated classes have order 0.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any, TypeVar

T = TypeVar("T", bound=type)
E = TypeVar("E")

HIGHEST_PRECEDENCE: int = -(2**31)
LOWEST_PRECEDENCE: int = 2**31 - 1

_ORDER_ATTR = "__beanline_order__"


def order(value: int) -> Callable[[T], T]:
    """Set the order value of a bean, interceptor, or post-processor class."""

    def decorator(cls: T) -> T:
        setattr(cls, _ORDER_ATTR, value)
        return cls

    return decorator


def get_order(cls: type) -> int:
    return getattr(cls, _ORDER_ATTR, 0)


def sorted_by_order(items: Iterable[E], cls_of: Callable[[E], Any] = type) -> list[E]:
    """Stable sort of *items* by the order of ``cls_of(item)``; ties keep input order."""
    return sorted(items, key=lambda item: get_order(cls_of(item)))
