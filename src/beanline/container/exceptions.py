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
"""Container exceptions — fatal errors during bean creation.

``ConstructionError`` wraps failures raised by interceptors. ``ContainerError``
and its subclasses are raised by the container itself (resolution, default
instantiation, property population) and pass through the construction
pipeline unchanged.
"""

from __future__ import annotations

from typing import Any

from beanline.container.phases import Phase
from beanline.kernel.exceptions import InfrastructureException


class BeanCreationException(InfrastructureException):
    """Fatal error during bean creation — the bean is never published."""

    def __init__(self, subsystem: str, provider: str, reason: str) -> None:
        self.subsystem = subsystem
        self.provider = provider
        self.reason = reason
        message = f"Failed to create bean in {subsystem} via '{provider}': {reason}"
        super().__init__(message=message, code=f"BEAN_CREATION_{subsystem.upper()}")


class ConstructionError(BeanCreationException):
    """An interceptor callback failed; the construction pass was aborted.

    Attributes:
        phase: The callback that failed.
        interceptor: The interceptor instance that raised.
        bean_name: Name of the bean being constructed.
        cause: The original exception (also chained as ``__cause__``).
    """

    def __init__(
        self,
        *,
        phase: Phase,
        interceptor: Any,
        bean_name: str,
        cause: BaseException,
    ) -> None:
        self.phase = phase
        self.interceptor = interceptor
        self.bean_name = bean_name
        self.cause = cause

        interceptor_name = type(interceptor).__qualname__
        headline = f"Interceptor '{interceptor_name}' failed in {phase.value}() for bean '{bean_name}'"

        lines = [f"ConstructionError: {headline}"]
        lines.append("")
        lines.append(f"  Cause: {cause.__class__.__name__}: {cause}")

        BeanCreationException.__init__(
            self,
            subsystem="construction",
            provider=interceptor_name,
            reason=f"{headline}: {cause.__class__.__name__}: {cause}",
        )
        self.code = f"CONSTRUCTION_{phase.name}"
        self.context = {"bean_name": bean_name, "phase": phase.value, "interceptor": interceptor_name}
        self.args = ("\n".join(lines),)

    def __str__(self) -> str:
        return self.args[0] if self.args else ""


class ContainerError(BeanCreationException):
    """Base for errors raised by the container's own resolution and creation steps."""


class NoSuchBeanError(ContainerError):
    """No bean found for the requested type or name."""

    def __init__(
        self,
        *,
        bean_type: type | None = None,
        bean_name: str | None = None,
        required_by: str | None = None,
        parameter: str | None = None,
        suggestions: list[str] | None = None,
    ) -> None:
        self.bean_type = bean_type
        self.bean_name = bean_name
        self.required_by = required_by
        self.parameter = parameter
        self.suggestions = suggestions or []

        type_desc = (
            getattr(bean_type, "__name__", repr(bean_type))
            if bean_type is not None
            else None
        )
        if type_desc:
            headline = f"No bean of type '{type_desc}' is registered"
        elif bean_name:
            headline = f"No bean named '{bean_name}' is registered"
        else:
            headline = "No matching bean is registered"

        lines = [f"NoSuchBeanError: {headline}"]

        if required_by or parameter:
            lines.append("")
            if required_by:
                lines.append(f"  Required by: {required_by}")
            if parameter:
                lines.append(f"    Parameter: {parameter}")

        lines.append("")
        lines.append("  Suggestions:")
        lines.append("    - Add @component, @service, or @bean to a class that produces this type")
        lines.append("    - Check that the class was passed to register_bean()")

        if self.suggestions:
            lines.append("")
            lines.append(f"  Similar registered types: {', '.join(self.suggestions)}")

        BeanCreationException.__init__(
            self,
            subsystem="resolution",
            provider=required_by or "container",
            reason=headline,
        )
        self.args = ("\n".join(lines),)

    def __str__(self) -> str:
        return self.args[0] if self.args else ""


class NoUniqueBeanError(ContainerError):
    """Multiple beans match the requested type but none is marked ``@primary``."""

    def __init__(
        self,
        *,
        bean_type: type,
        candidates: list[type],
        required_by: str | None = None,
        parameter: str | None = None,
    ) -> None:
        self.bean_type = bean_type
        self.candidates = candidates
        self.required_by = required_by
        self.parameter = parameter

        type_name = getattr(bean_type, "__name__", repr(bean_type))
        candidate_names = [getattr(c, "__name__", repr(c)) for c in candidates]
        headline = f"Multiple beans of type '{type_name}' found but none is marked @primary"

        lines = [f"NoUniqueBeanError: {headline}"]
        lines.append("")
        lines.append(f"  Candidates: {candidate_names}")

        if required_by or parameter:
            lines.append("")
            if required_by:
                lines.append(f"  Required by: {required_by}")
            if parameter:
                lines.append(f"    Parameter: {parameter}")

        lines.append("")
        lines.append("  Fix: Mark one implementation with @primary, or use Qualifier('name') to disambiguate")

        BeanCreationException.__init__(
            self,
            subsystem="resolution",
            provider=required_by or "container",
            reason=headline,
        )
        self.args = ("\n".join(lines),)

    def __str__(self) -> str:
        return self.args[0] if self.args else ""


class BeanCurrentlyInCreationError(ContainerError):
    """Circular dependency detected during bean resolution.

    The ``chain`` attribute contains the dependency path in resolution order.
    """

    def __init__(self, *, chain: list[type], current: type) -> None:
        self.chain = chain
        self.current = current

        chain_names = [t.__name__ for t in chain]
        chain_names.append(current.__name__)
        headline = f"Circular dependency: {' -> '.join(chain_names)}"

        lines = [f"BeanCurrentlyInCreationError: {headline}"]
        lines.append("")
        lines.append("  Suggestion: Break the cycle with @post_construct or a factory pattern")

        BeanCreationException.__init__(
            self,
            subsystem="resolution",
            provider=current.__name__,
            reason=headline,
        )
        self.args = ("\n".join(lines),)

    def __str__(self) -> str:
        return self.args[0] if self.args else ""


class BeanInstantiationError(ContainerError):
    """The bean's constructor or factory method raised."""

    def __init__(self, *, bean_type: type, bean_name: str, cause: BaseException) -> None:
        self.bean_type = bean_type
        self.bean_name = bean_name
        self.cause = cause
        BeanCreationException.__init__(
            self,
            subsystem="instantiation",
            provider=bean_type.__qualname__,
            reason=f"Could not instantiate bean '{bean_name}': {cause.__class__.__name__}: {cause}",
        )


class NotWritablePropertyError(ContainerError):
    """A property value names an attribute the bean does not declare or cannot set."""

    def __init__(self, *, bean_type: type, property_name: str, reason: str) -> None:
        self.bean_type = bean_type
        self.property_name = property_name
        BeanCreationException.__init__(
            self,
            subsystem="population",
            provider=bean_type.__qualname__,
            reason=f"Property '{property_name}' is not writable: {reason}",
        )
