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
"""InterceptorRegistry — ordered, freeze-once collection of construction interceptors."""

from __future__ import annotations

import threading
from collections.abc import Iterable, Iterator
from typing import Any

import structlog

from beanline.container.interceptor import is_instantiation_aware
from beanline.kernel.exceptions import InterceptorRegistrationError

logger = structlog.get_logger("beanline.container.interceptors")


class InterceptorRegistry:
    """Interceptors in registration order.

    Registration is append-only and closes when :meth:`freeze` is called,
    which the container does before its first construction. Iteration reads
    an immutable snapshot, so concurrent construction passes never lock.
    The registry does not sort; callers wanting precedence order register
    in that order.
    """

    def __init__(self, interceptors: Iterable[Any] = ()) -> None:
        self._lock = threading.Lock()
        self._snapshot: tuple[Any, ...] = ()
        self._frozen = False
        for interceptor in interceptors:
            self.register(interceptor)

    def register(self, interceptor: Any) -> None:
        """Append *interceptor*; rejected once the registry is frozen."""
        if not is_instantiation_aware(interceptor):
            raise InterceptorRegistrationError(
                f"{type(interceptor).__qualname__} defines no construction callback",
                code="INTERCEPTOR_INVALID",
            )
        with self._lock:
            if self._frozen:
                raise InterceptorRegistrationError(
                    f"Cannot register {type(interceptor).__qualname__}: "
                    "the container is already constructing beans",
                    code="INTERCEPTOR_REGISTRY_FROZEN",
                )
            self._snapshot = (*self._snapshot, interceptor)
        logger.debug(
            "interceptor_registered",
            interceptor=type(interceptor).__qualname__,
            position=len(self._snapshot) - 1,
        )

    def freeze(self) -> None:
        """Close registration. Idempotent."""
        if self._frozen:
            return
        with self._lock:
            self._frozen = True
        logger.debug("interceptor_registry_frozen", size=len(self._snapshot))

    @property
    def frozen(self) -> bool:
        return self._frozen

    def snapshot(self) -> tuple[Any, ...]:
        return self._snapshot

    def __iter__(self) -> Iterator[Any]:
        return iter(self._snapshot)

    def __len__(self) -> int:
        return len(self._snapshot)

    def __contains__(self, interceptor: object) -> bool:
        return any(i is interceptor for i in self._snapshot)
