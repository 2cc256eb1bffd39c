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
"""InstantiationAwareBeanPostProcessor — hooks around bean instantiation and population.

An interceptor is any object exposing one or more of the four construction
callbacks below. Callbacks an interceptor does not provide fall back to the
module-level ``default_*`` functions, so a duck-typed object that only
implements ``before_instantiation`` is as valid as a full subclass of
:class:`InstantiationAwareBeanPostProcessor`.

=========================  =====================================================
Callback                   Non-default effect
=========================  =====================================================
before_instantiation       non-``None`` return replaces the bean entirely and
                           skips instantiation and population
after_instantiation        ``False`` skips population and stops later
                           interceptors' ``after_instantiation``
process_properties         returned ``PropertyValues`` replace the working set;
                           ``NOT_HANDLED`` defers to ``process_property_values``
process_property_values    ``None`` suppresses population (deprecated)
=========================  =====================================================
"""

from __future__ import annotations

import enum
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any, Final

if TYPE_CHECKING:
    from beanline.container.property_values import PropertyDescriptor, PropertyValues


class NotHandled(enum.Enum):
    """Type of the ``NOT_HANDLED`` sentinel returned by ``process_properties``."""

    NOT_HANDLED = "NOT_HANDLED"

    def __repr__(self) -> str:
        return "NOT_HANDLED"


NOT_HANDLED: Final = NotHandled.NOT_HANDLED
"""No opinion: the pipeline calls the same interceptor's legacy callback instead."""


def default_before_instantiation(bean_type: type, bean_name: str) -> Any | None:
    return None


def default_after_instantiation(bean: Any, bean_name: str) -> bool:
    return True


def default_process_properties(
    pvs: PropertyValues, bean: Any, bean_name: str
) -> PropertyValues | NotHandled:
    return NOT_HANDLED


def default_process_property_values(
    pvs: PropertyValues,
    descriptors: Sequence[PropertyDescriptor],
    bean: Any,
    bean_name: str,
) -> PropertyValues | None:
    return pvs


DEFAULT_CALLBACKS: Final[dict[str, Callable[..., Any]]] = {
    "before_instantiation": default_before_instantiation,
    "after_instantiation": default_after_instantiation,
    "process_properties": default_process_properties,
    "process_property_values": default_process_property_values,
}


def is_instantiation_aware(obj: Any) -> bool:
    """Return True if *obj* provides at least one construction callback."""
    return any(callable(getattr(obj, name, None)) for name in DEFAULT_CALLBACKS)


class InstantiationAwareBeanPostProcessor:
    """Base class with a no-op default for every construction callback.

    Subclass and override only what you need::

        class LazyProxyInterceptor(InstantiationAwareBeanPostProcessor):
            def before_instantiation(self, bean_type, bean_name):
                if bean_type is ReportService:
                    return LazyProxy(bean_type)
                return None

    Interceptors are shared by every construction, possibly from several
    threads at once, so they must be stateless or synchronize internally.
    """

    def before_instantiation(self, bean_type: type, bean_name: str) -> Any | None:
        """Called before the container instantiates *bean_type*.

        Return an object to use instead of the default instance, or ``None``
        to proceed. A returned object only receives ``after_init`` from
        registered ``BeanPostProcessor``s.
        """
        return default_before_instantiation(bean_type, bean_name)

    def after_instantiation(self, bean: Any, bean_name: str) -> bool:
        """Called on the bare instance, before any property is set.

        Return ``False`` to skip property population for this bean; later
        interceptors are then not asked either.
        """
        return default_after_instantiation(bean, bean_name)

    def process_properties(
        self, pvs: PropertyValues, bean: Any, bean_name: str
    ) -> PropertyValues | NotHandled:
        """Post-process the property values about to be applied to *bean*.

        Return the values to apply (possibly *pvs* itself), or ``NOT_HANDLED``
        to have :meth:`process_property_values` called instead.
        """
        return default_process_properties(pvs, bean, bean_name)

    def process_property_values(
        self,
        pvs: PropertyValues,
        descriptors: Sequence[PropertyDescriptor],
        bean: Any,
        bean_name: str,
    ) -> PropertyValues | None:
        """Deprecated form of :meth:`process_properties` with property descriptors.

        Return the values to apply, or ``None`` to skip property population.
        """
        return default_process_property_values(pvs, descriptors, bean, bean_name)
