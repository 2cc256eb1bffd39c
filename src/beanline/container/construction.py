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
"""ConstructionPipeline — drives one bean through the interceptor phases.

A construction pass moves through::

    START -> MAYBE_SUBSTITUTED -> DONE                       (substituted)
    START -> INSTANTIATED -> DONE                            (population skipped)
    START -> INSTANTIATED -> MAYBE_POPULATED -> DONE         (populated or suppressed)

Any failure moves the pass to ``ABORTED`` and is re-raised: interceptor
failures as :class:`ConstructionError`, container failures unchanged.
Passes share nothing but the (frozen) registry, so the container may run
many of them concurrently.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

import structlog

from beanline.container.exceptions import ConstructionError
from beanline.container.interceptor import DEFAULT_CALLBACKS, NOT_HANDLED
from beanline.container.interceptor_registry import InterceptorRegistry
from beanline.container.phases import (
    ConstructionState,
    Continue,
    Defer,
    Phase,
    PhaseResult,
    Rewrite,
    Substitute,
    Suppress,
)
from beanline.container.property_values import (
    PropertyDescriptor,
    PropertyValues,
    describe_properties,
)
from beanline.container.registry import ComponentDescriptor

logger = structlog.get_logger("beanline.container.construction")


@dataclass(frozen=True)
class ConstructionOutcome:
    """Result of a completed construction pass.

    Attributes:
        bean: The default instance, or the substitute.
        substituted: True if ``before_instantiation`` supplied *bean*.
        populated: True if ``apply_properties`` was called.
        property_values: The values applied, or ``None`` when population
            was skipped or suppressed.
        path: States visited, ending in ``ConstructionState.DONE``.
    """

    bean: Any
    substituted: bool
    populated: bool
    property_values: PropertyValues | None
    path: tuple[ConstructionState, ...]

    @property
    def state(self) -> ConstructionState:
        return self.path[-1]


def _before_instantiation_result(raw: Any) -> PhaseResult:
    return Continue() if raw is None else Substitute(raw)


def _after_instantiation_result(raw: Any) -> PhaseResult:
    return Suppress() if raw is False else Continue()


def _properties_result(raw: Any) -> PhaseResult:
    if raw is NOT_HANDLED or raw is None:
        return Defer()
    return Rewrite(_as_property_values(raw))


def _property_values_result(raw: Any) -> PhaseResult:
    if raw is None:
        return Suppress()
    return Rewrite(_as_property_values(raw))


def _as_property_values(raw: Any) -> PropertyValues:
    if isinstance(raw, PropertyValues):
        return raw
    if isinstance(raw, Mapping):
        return PropertyValues(raw)
    raise TypeError(f"expected PropertyValues or a mapping, got {type(raw).__name__}")


_INTERPRETERS: dict[Phase, Callable[[Any], PhaseResult]] = {
    Phase.BEFORE_INSTANTIATION: _before_instantiation_result,
    Phase.AFTER_INSTANTIATION: _after_instantiation_result,
    Phase.PROPERTIES: _properties_result,
    Phase.PROPERTY_VALUES: _property_values_result,
}


class ConstructionPipeline:
    """Consults the registry's interceptors at each phase of bean construction."""

    def __init__(self, registry: InterceptorRegistry) -> None:
        self._registry = registry

    @property
    def registry(self) -> InterceptorRegistry:
        return self._registry

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------

    def run_before_instantiation(self, descriptor: ComponentDescriptor) -> Any | None:
        """Return the first substitute any interceptor offers, or ``None``.

        Interceptors after the one that substitutes are not consulted.
        Factory-produced beans are never offered for substitution.
        """
        if not descriptor.has_bean_class:
            return None
        for interceptor in self._registry:
            result = self._consult(
                Phase.BEFORE_INSTANTIATION,
                interceptor,
                descriptor.bean_name,
                descriptor.bean_type,
                descriptor.bean_name,
            )
            if isinstance(result, Substitute):
                logger.debug(
                    "bean_substituted",
                    bean_name=descriptor.bean_name,
                    interceptor=type(interceptor).__qualname__,
                    substitute_type=type(result.bean).__qualname__,
                )
                return result.bean
        return None

    def run_after_instantiation(self, bean: Any, bean_name: str) -> bool:
        """Return False as soon as one interceptor vetoes property population."""
        for interceptor in self._registry:
            result = self._consult(Phase.AFTER_INSTANTIATION, interceptor, bean_name, bean, bean_name)
            if isinstance(result, Suppress):
                logger.debug(
                    "property_population_skipped",
                    bean_name=bean_name,
                    interceptor=type(interceptor).__qualname__,
                )
                return False
        return True

    def run_property_interception(
        self,
        pvs: PropertyValues,
        bean: Any,
        bean_name: str,
        descriptors: Sequence[PropertyDescriptor] | None = None,
    ) -> PropertyValues | None:
        """Thread *pvs* through every interceptor; ``None`` means suppress population.

        An interceptor answering ``NOT_HANDLED`` from ``process_properties``
        has its own ``process_property_values`` called instead. Descriptors
        are only computed when such a fallback happens.
        """
        current = pvs
        for interceptor in self._registry:
            result = self._consult(Phase.PROPERTIES, interceptor, bean_name, current, bean, bean_name)
            if isinstance(result, Defer):
                if descriptors is None:
                    descriptors = describe_properties(type(bean))
                result = self._consult(
                    Phase.PROPERTY_VALUES,
                    interceptor,
                    bean_name,
                    current,
                    descriptors,
                    bean,
                    bean_name,
                )
                if isinstance(result, Suppress):
                    logger.debug(
                        "property_population_suppressed",
                        bean_name=bean_name,
                        interceptor=type(interceptor).__qualname__,
                    )
                    return None
            if isinstance(result, Rewrite):
                current = result.property_values
        return current

    # ------------------------------------------------------------------
    # Full pass
    # ------------------------------------------------------------------

    def construct(
        self,
        descriptor: ComponentDescriptor,
        instantiate: Callable[[ComponentDescriptor], Any],
        apply_properties: Callable[[Any, PropertyValues], None],
        property_values: PropertyValues | None = None,
        descriptors: Sequence[PropertyDescriptor] | None = None,
    ) -> ConstructionOutcome:
        """Run one construction pass for *descriptor*.

        Args:
            descriptor: The bean being constructed.
            instantiate: Default instantiation; called only when no interceptor substitutes.
            apply_properties: Default population; called only when not skipped or suppressed.
            property_values: Declared values; copied, never mutated.
            descriptors: Property descriptors for legacy callbacks, derived lazily if omitted.
        """
        path = [ConstructionState.START]
        try:
            substitute = self.run_before_instantiation(descriptor)
            if substitute is not None:
                path += [ConstructionState.MAYBE_SUBSTITUTED, ConstructionState.DONE]
                return ConstructionOutcome(
                    bean=substitute,
                    substituted=True,
                    populated=False,
                    property_values=None,
                    path=tuple(path),
                )

            bean = instantiate(descriptor)
            path.append(ConstructionState.INSTANTIATED)

            if not self.run_after_instantiation(bean, descriptor.bean_name):
                path.append(ConstructionState.DONE)
                return ConstructionOutcome(
                    bean=bean,
                    substituted=False,
                    populated=False,
                    property_values=None,
                    path=tuple(path),
                )

            path.append(ConstructionState.MAYBE_POPULATED)
            pvs = property_values.copy() if property_values is not None else PropertyValues()
            final = self.run_property_interception(pvs, bean, descriptor.bean_name, descriptors)
            if final is not None:
                apply_properties(bean, final)
            path.append(ConstructionState.DONE)
            return ConstructionOutcome(
                bean=bean,
                substituted=False,
                populated=final is not None,
                property_values=final,
                path=tuple(path),
            )
        except Exception as exc:
            logger.warning(
                "construction_aborted",
                bean_name=descriptor.bean_name,
                state=path[-1].value,
                error=type(exc).__name__,
            )
            raise

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _consult(phase: Phase, interceptor: Any, bean_name: str, *args: Any) -> PhaseResult:
        """Call *interceptor*'s callback for *phase* (or the default) and classify the answer."""
        callback = getattr(interceptor, phase.value, None) or DEFAULT_CALLBACKS[phase.value]
        try:
            return _INTERPRETERS[phase](callback(*args))
        except Exception as exc:
            raise ConstructionError(
                phase=phase,
                interceptor=interceptor,
                bean_name=bean_name,
                cause=exc,
            ) from exc
