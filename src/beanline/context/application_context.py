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
"""ApplicationContext — the central bean registry and lifecycle manager."""

from __future__ import annotations

import functools
import typing
from typing import Any, TypeVar

import structlog

from beanline.container.bean import bean_methods
from beanline.container.container import Container
from beanline.container.exceptions import BeanCreationException
from beanline.container.interceptor import is_instantiation_aware
from beanline.container.interceptor_registry import InterceptorRegistry
from beanline.container.ordering import sorted_by_order
from beanline.container.registry import Registration, Scope
from beanline.container.stereotypes import is_configuration
from beanline.context.lifecycle import (
    BeanPostProcessor,
    PendingPostConstruct,
    begin_post_construct,
    invoke_pre_destroy,
)
from beanline.context.properties import ContextProperties
from beanline.core.config import Config
from beanline.kernel.exceptions import InterceptorRegistrationError
from beanline.logging.port import LoggingPort

T = TypeVar("T")

logger = structlog.get_logger("beanline.context")


class ApplicationContext:
    """Central bean registry and lifecycle manager.

    Wraps the DI Container and adds:
    - Construction interceptors, ordered by ``@order`` and installed right
      before the first bean is constructed (at the latest, by ``start()``)
    - @bean factory method resolution from @configuration classes
    - BeanPostProcessor hooks around @post_construct for every created bean
    - @pre_destroy on stop
    """

    def __init__(self, config: Config, logging_port: LoggingPort | None = None) -> None:
        self._config = config
        self._properties = config.bind(ContextProperties)
        self._container = Container(
            before_freeze=self._install_interceptors,
            post_create=self._initialize_bean,
        )
        self._interceptors: list[Any] = []
        self._post_processors: list[BeanPostProcessor] = []
        self._pending_init: list[tuple[Registration, PendingPostConstruct]] = []
        self._pending_closed = False
        self._started = False

        if logging_port is not None:
            logging_port.configure(config)

        self._container.register_instance(Config, config)

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register_bean(self, cls: type, **kwargs: Any) -> None:
        """Register a bean class with the context.

        Accepts ``name``, ``scope`` and ``properties`` keyword arguments.
        """
        self._container.register(
            cls,
            scope=kwargs.get("scope", Scope.SINGLETON),
            name=kwargs.get("name", ""),
            properties=kwargs.get("properties"),
        )

    def register_interceptor(self, interceptor: Any) -> None:
        """Register a construction interceptor; only allowed before any bean is constructed."""
        if self._started or self._container.interceptors.frozen:
            raise InterceptorRegistrationError(
                f"Cannot register {type(interceptor).__qualname__}: the context is already constructing beans",
                code="INTERCEPTOR_REGISTRY_FROZEN",
            )
        if not is_instantiation_aware(interceptor):
            raise InterceptorRegistrationError(
                f"{type(interceptor).__qualname__} defines no construction callback",
                code="INTERCEPTOR_INVALID",
            )
        self._interceptors.append(interceptor)

    def register_post_processor(self, processor: BeanPostProcessor) -> None:
        """Register a BeanPostProcessor."""
        self._post_processors.append(processor)

    # ------------------------------------------------------------------
    # Bean access
    # ------------------------------------------------------------------

    def get_bean(self, bean_type: type[T]) -> T:
        """Resolve a bean by type."""
        return self._container.resolve(bean_type)

    def get_bean_by_name(self, name: str) -> Any:
        """Resolve a bean by its registered name."""
        return self._container.resolve_by_name(name)

    def get_beans_of_type(self, bean_type: type[T]) -> list[T]:
        """Resolve all beans of the given type, sorted by @order."""
        results = self._container.resolve_all(bean_type)
        return sorted_by_order(results)

    def contains_bean(self, name: str) -> bool:
        """Check if a named bean exists."""
        return self._container.contains(name)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def container(self) -> Container:
        """Escape hatch: direct access to the underlying Container."""
        return self._container

    @property
    def config(self) -> Config:
        return self._config

    @property
    def properties(self) -> ContextProperties:
        return self._properties

    @property
    def started(self) -> bool:
        return self._started

    @property
    def bean_count(self) -> int:
        """Number of beans created by the container so far."""
        return len(self._created_registrations())

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Start the context: install interceptors, create singletons, run lifecycle hooks."""
        try:
            await self._do_start()
        except BeanCreationException:
            raise  # Already a clear error, propagate as-is
        except Exception as exc:
            raise BeanCreationException(
                subsystem="startup",
                provider="unknown",
                reason=str(exc),
            ) from exc

    async def _do_start(self) -> None:
        """Internal startup logic."""
        # 1. Install interceptors; the registry is closed from here on
        self._container.freeze_interceptors()

        # 2. Turn @bean methods of @configuration classes into factory-produced registrations
        self._process_configurations()

        # 3. Eagerly create singletons (sorted by @order)
        if self._properties.eager_init:
            for reg in sorted_by_order(self._container.registrations(), lambda r: r.impl_type):
                if reg.scope == Scope.SINGLETON and reg.instance is None:
                    self._container.resolve(reg.impl_type)

        # 4. Finish coroutine @post_construct hooks held back since construction
        while self._pending_init:
            reg, pending = self._pending_init.pop(0)
            await pending.complete()
            bean = self._after_init(pending.instance, reg.bean_name)
            if reg.instance is pending.instance:
                reg.instance = bean

        self._pending_closed = True
        self._started = True
        logger.info(
            "context_started",
            beans=self.bean_count,
            interceptors=len(self._container.interceptors),
        )

    async def stop(self) -> None:
        """Stop the context: call @pre_destroy on created beans in reverse order."""
        for reg in reversed(self._created_registrations()):
            if reg.instance is not None:
                await invoke_pre_destroy(reg.instance)

        self._started = False
        logger.info("context_stopped")

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _created_registrations(self) -> list[Registration]:
        return [reg for reg in self._container.registrations() if reg.metrics.creation_count > 0]

    def _install_interceptors(self, registry: InterceptorRegistry) -> None:
        """Hand queued interceptors to the container registry just before it freezes."""
        pending = self._interceptors
        if self._properties.order_interceptors:
            pending = sorted_by_order(pending)
        for interceptor in pending:
            registry.register(interceptor)

    def _initialize_bean(self, reg: Registration, bean: Any) -> Any:
        """Run the outer initialization lifecycle on a freshly constructed bean."""
        bean_name = reg.bean_name
        if reg.substituted:
            return self._after_init(bean, bean_name)

        for pp in sorted_by_order(self._post_processors):
            bean = self._call_post_processor(pp.before_init, bean, bean_name)

        pending = begin_post_construct(bean)
        if pending is None:
            return self._after_init(bean, bean_name)
        if self._pending_closed:
            pending.discard()
            raise BeanCreationException(
                subsystem="lifecycle",
                provider=type(bean).__qualname__,
                reason=(
                    f"@post_construct {pending.name}() is a coroutine, but '{bean_name}' "
                    "was created after start(); only synchronous hooks can run there"
                ),
            )
        # after_init runs once start() has awaited the rest
        self._pending_init.append((reg, pending))
        return bean

    def _after_init(self, bean: Any, bean_name: str) -> Any:
        for pp in sorted_by_order(self._post_processors):
            bean = self._call_post_processor(pp.after_init, bean, bean_name)
        return bean

    @staticmethod
    def _call_post_processor(hook: Any, bean: Any, bean_name: str) -> Any:
        try:
            return hook(bean, bean_name)
        except BeanCreationException:
            raise
        except Exception as exc:
            raise BeanCreationException(
                subsystem="lifecycle",
                provider=type(getattr(hook, "__self__", hook)).__qualname__,
                reason=f"{hook.__name__}() failed for bean '{bean_name}': {exc}",
            ) from exc

    def _process_configurations(self) -> None:
        """Find @configuration beans and register their @bean methods as factories."""
        for cls in [reg.impl_type for reg in self._container.registrations()]:
            if not is_configuration(cls):
                continue

            config_instance = self._container.resolve(cls)

            for attr_name, method, options in bean_methods(config_instance):
                return_type = typing.get_type_hints(method).get("return")
                if return_type is None:
                    logger.warning("bean_method_skipped", method=attr_name, reason="no return annotation")
                    continue

                self._container.register(
                    return_type,
                    scope=options.scope,
                    name=options.name or attr_name,
                    properties=options.properties,
                    factory=functools.partial(self._call_bean_method, method),
                )

    def _call_bean_method(self, method: Any) -> Any:
        """Call a @bean method, injecting its parameters from the container."""
        hints = typing.get_type_hints(method)
        hints.pop("return", None)

        kwargs: dict[str, Any] = {}
        for param_name, param_type in hints.items():
            kwargs[param_name] = self._container.resolve_dependency(param_type)

        return method(**kwargs)

