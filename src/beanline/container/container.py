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
"""Lightweight DI container with type-hint based resolution.

Every bean the container creates goes through a :class:`ConstructionPipeline`,
so registered interceptors can substitute the bean, skip its property
population, or rewrite the property values before they are applied.
"""

from __future__ import annotations

import contextvars
import difflib
import inspect
import threading
import time
import types
import typing
from collections.abc import Callable, Mapping
from typing import Annotated, Any, TypeVar, Union, cast, get_args, get_origin

import structlog

from beanline.container.autowired import AutowiredFieldInjector
from beanline.container.bean import Qualifier, is_primary
from beanline.container.construction import ConstructionPipeline
from beanline.container.exceptions import (
    BeanCreationException,
    BeanCurrentlyInCreationError,
    BeanInstantiationError,
    NoSuchBeanError,
    NoUniqueBeanError,
    NotWritablePropertyError,
)
from beanline.container.interceptor_registry import InterceptorRegistry
from beanline.container.property_values import PropertyValues
from beanline.container.registry import Registration, Scope
from beanline.container.stereotypes import component_metadata

T = TypeVar("T")

logger = structlog.get_logger("beanline.container")

_MISSING = object()


class Container:
    """Dependency injection container.

    Supports constructor injection via type hints, field injection via
    ``Autowired``, declared property values, factory-produced beans,
    interface-to-implementation binding, named beans, @primary resolution,
    Qualifier-based disambiguation, ``Optional[T]`` and ``list[T]``
    parameter types, and circular dependency detection.

    Interceptors must be registered on :attr:`interceptors` before the first
    bean is created; the registry is frozen at that point.

    Args:
        before_freeze: Called once with the registry just before it is frozen,
            so an owner can install interceptors it has been holding back.
        post_create: Called with the registration and the constructed bean
            after every construction pass; its return value is the bean that
            gets cached and handed out.
    """

    def __init__(
        self,
        before_freeze: Callable[[InterceptorRegistry], None] | None = None,
        post_create: Callable[[Registration, Any], Any] | None = None,
    ) -> None:
        self._registrations: dict[type, Registration] = {}
        self._named: dict[str, Registration] = {}
        self._bindings: dict[type, list[type]] = {}
        # Per thread/task so concurrent constructions don't see each other's chain.
        self._resolving: contextvars.ContextVar[tuple[type, ...]] = contextvars.ContextVar(
            f"beanline_resolving_{id(self)}", default=()
        )
        self._interceptors = InterceptorRegistry()
        self._interceptors.register(AutowiredFieldInjector(self))
        self._pipeline = ConstructionPipeline(self._interceptors)
        self._before_freeze = before_freeze
        self._post_create = post_create
        self._freeze_lock = threading.Lock()

    @property
    def interceptors(self) -> InterceptorRegistry:
        """Interceptor registry consulted for every bean this container creates."""
        return self._interceptors

    @property
    def pipeline(self) -> ConstructionPipeline:
        return self._pipeline

    def freeze_interceptors(self) -> None:
        """Run the ``before_freeze`` hook once, then close the interceptor registry."""
        if self._interceptors.frozen:
            return
        with self._freeze_lock:
            if self._interceptors.frozen:
                return
            if self._before_freeze is not None:
                self._before_freeze(self._interceptors)
            self._interceptors.freeze()

    def register(
        self,
        cls: type,
        scope: Scope = Scope.SINGLETON,
        name: str = "",
        properties: Mapping[str, Any] | None = None,
        factory: Callable[[], Any] | None = None,
    ) -> None:
        """Register a class for injection.

        Args:
            cls: The bean type (for factory-produced beans, the factory's return type).
            scope: Lifecycle scope; a stereotype's ``scope=`` wins for plain classes.
            name: Optional bean name for lookup by name.
            properties: Values set on the bean after instantiation.
            factory: Zero-argument callable producing the bean instead of ``cls(...)``.
        """
        metadata = component_metadata(cls) if factory is None else None
        bean_name = name or (metadata.name if metadata else "")
        bean_scope = metadata.scope if metadata else scope
        declared = dict(metadata.properties) if metadata else {}
        declared.update(properties or {})
        reg = Registration(
            impl_type=cls,
            scope=bean_scope,
            name=bean_name,
            properties=declared,
            factory=factory,
        )
        self._registrations[cls] = reg
        if bean_name:
            self._named[bean_name] = reg

    def register_instance(self, cls: type, instance: Any, name: str = "") -> None:
        """Register an already-built singleton; it never goes through construction."""
        self.register(cls, name=name)
        reg = self._registrations[cls]
        reg.scope = Scope.SINGLETON
        reg.instance = instance

    def unregister(self, cls: type) -> Registration | None:
        """Remove a registration and its named entry."""
        reg = self._registrations.pop(cls, None)
        if reg is not None and reg.name and self._named.get(reg.name) is reg:
            del self._named[reg.name]
        return reg

    def bind(self, interface: type, implementation: type) -> None:
        """Bind an interface/base class to a concrete implementation."""
        if interface not in self._bindings:
            self._bindings[interface] = []
        if implementation not in self._bindings[interface]:
            self._bindings[interface].append(implementation)

    def registrations(self) -> list[Registration]:
        """Registrations in registration order."""
        return list(self._registrations.values())

    def get_registration(self, cls: type) -> Registration | None:
        return self._registrations.get(cls)

    def resolve(self, cls: type[T]) -> T:
        """Resolve an instance of the given type."""
        if cls in self._registrations:
            return cast(T, self._resolve_registration(self._registrations[cls]))

        impls = self._bindings.get(cls, [])
        if not impls:
            raise NoSuchBeanError(
                bean_type=cls,
                suggestions=self._get_similar_type_names(
                    getattr(cls, "__name__", ""),
                ),
            )

        if len(impls) == 1:
            return cast(T, self._resolve_registration(self._registrations[impls[0]]))

        # Multiple impls: pick @primary
        for impl in impls:
            if is_primary(impl):
                return cast(T, self._resolve_registration(self._registrations[impl]))

        raise NoUniqueBeanError(bean_type=cls, candidates=impls)

    def resolve_by_name(self, name: str) -> Any:
        """Resolve a bean by its registered name."""
        if name not in self._named:
            raise NoSuchBeanError(
                bean_name=name,
                suggestions=list(self._named.keys()),
            )
        return self._resolve_registration(self._named[name])

    def resolve_all(self, cls: type[T]) -> list[T]:
        """Resolve all implementations bound to an interface."""
        impls = self._bindings.get(cls, [])
        return [self._resolve_registration(self._registrations[impl]) for impl in impls]

    def resolve_dependency(self, param_type: Any) -> Any:
        """Resolve a constructor/field type hint, honouring Annotated, Optional and list."""
        return self._resolve_param(param_type)

    def contains(self, name: str) -> bool:
        """Check if a named bean exists."""
        return name in self._named

    def _resolve_registration(self, reg: Registration) -> Any:
        """Resolve a single registration, handling scope."""
        reg.metrics.record_resolution()
        if reg.scope == Scope.SINGLETON and reg.instance is not None:
            return reg.instance

        instance = self._create_instance(reg)

        if reg.scope == Scope.SINGLETON:
            reg.instance = instance

        return instance

    def _create_instance(self, reg: Registration) -> Any:
        """Run the construction pipeline for *reg*."""
        chain = self._resolving.get()
        if reg.impl_type in chain:
            raise BeanCurrentlyInCreationError(chain=list(chain), current=reg.impl_type)
        self.freeze_interceptors()
        token = self._resolving.set((*chain, reg.impl_type))
        started = time.perf_counter_ns()
        try:
            outcome = self._pipeline.construct(
                reg.descriptor(),
                instantiate=lambda _descriptor: self._instantiate(reg),
                apply_properties=self._apply_properties,
                property_values=PropertyValues(reg.properties),
            )
            reg.metrics.record_construction(outcome, time.perf_counter_ns() - started)
            # The hook runs inside the creation chain.
            bean = outcome.bean if self._post_create is None else self._post_create(reg, outcome.bean)
        finally:
            self._resolving.reset(token)

        logger.debug(
            "bean_created",
            bean_name=reg.bean_name,
            substituted=outcome.substituted,
            populated=outcome.populated,
        )
        return bean

    def _instantiate(self, reg: Registration) -> Any:
        """Default instantiation: factory call or constructor injection."""
        if reg.factory is not None:
            return self._call_guarded(reg, reg.factory)

        init = reg.impl_type.__init__  # type: ignore[misc]
        if init is object.__init__:
            return self._call_guarded(reg, reg.impl_type)

        hints = typing.get_type_hints(init, include_extras=True)
        hints.pop("return", None)
        sig = inspect.signature(init)

        kwargs: dict[str, Any] = {}
        for param_name, param_type in hints.items():
            param = sig.parameters.get(param_name)
            has_default = param is not None and param.default is not inspect.Parameter.empty
            try:
                kwargs[param_name] = self._resolve_param(param_type)
            except (NoSuchBeanError, NoUniqueBeanError):
                if has_default:
                    continue
                raise NoSuchBeanError(
                    bean_type=param_type if isinstance(param_type, type) else None,
                    required_by=f"{reg.impl_type.__qualname__}.__init__()",
                    parameter=f"{param_name}: {getattr(param_type, '__name__', repr(param_type))}",
                    suggestions=self._get_similar_type_names(
                        getattr(param_type, "__name__", ""),
                    ),
                ) from None

        return self._call_guarded(reg, reg.impl_type, **kwargs)

    @staticmethod
    def _call_guarded(reg: Registration, target: Callable[..., Any], **kwargs: Any) -> Any:
        try:
            return target(**kwargs)
        except BeanCreationException:
            raise
        except Exception as exc:
            raise BeanInstantiationError(
                bean_type=reg.impl_type,
                bean_name=reg.bean_name,
                cause=exc,
            ) from exc

    def _apply_properties(self, bean: Any, pvs: PropertyValues) -> None:
        """Default property population: ``setattr`` for every value."""
        bean_cls = type(bean)
        declared = _declared_names(bean_cls)
        for name, value in pvs.items():
            attr = inspect.getattr_static(bean_cls, name, _MISSING)
            if isinstance(attr, property) and attr.fset is None:
                raise NotWritablePropertyError(
                    bean_type=bean_cls, property_name=name, reason="read-only property"
                )
            if attr is _MISSING and name not in declared and name not in getattr(bean, "__dict__", {}):
                raise NotWritablePropertyError(
                    bean_type=bean_cls, property_name=name, reason="not declared on the bean class"
                )
            try:
                setattr(bean, name, value)
            except AttributeError as exc:
                raise NotWritablePropertyError(
                    bean_type=bean_cls, property_name=name, reason=str(exc)
                ) from exc

    def _resolve_param(self, param_type: Any) -> Any:
        """Resolve a single parameter, handling Annotated, Optional, and list."""
        # Handle Annotated[T, Qualifier("name")]
        if get_origin(param_type) is Annotated:
            args = get_args(param_type)
            base_type = args[0]
            for metadata in args[1:]:
                if isinstance(metadata, Qualifier):
                    return self.resolve_by_name(metadata.name)
            return self._resolve_param(base_type)

        # Handle Optional[T] (Union[T, None] or T | None via PEP 604)
        if get_origin(param_type) is Union or isinstance(param_type, types.UnionType):
            args = get_args(param_type)
            non_none = [a for a in args if a is not type(None)]
            if len(non_none) == 1:
                try:
                    return self.resolve(non_none[0])
                except (NoSuchBeanError, NoUniqueBeanError):
                    return None

        # Handle list[T]
        if get_origin(param_type) is list:
            args = get_args(param_type)
            if args:
                return self.resolve_all(args[0])

        # Class references cannot be auto-resolved
        if param_type is type or get_origin(param_type) is type:
            raise NoSuchBeanError(
                bean_type=param_type if isinstance(param_type, type) else None,
            )

        return self.resolve(param_type)

    def _get_similar_type_names(self, name: str) -> list[str]:
        """Return registered type names similar to *name* using fuzzy matching."""
        if not name:
            return []
        registered_names = [getattr(cls, "__name__", repr(cls)) for cls in self._registrations]
        return difflib.get_close_matches(name, registered_names, n=5, cutoff=0.4)


def _declared_names(cls: type) -> set[str]:
    """Names annotated anywhere in the class hierarchy of *cls*."""
    names: set[str] = set()
    for klass in cls.__mro__:
        try:
            names.update(inspect.get_annotations(klass))
        except Exception:
            continue
    return names
