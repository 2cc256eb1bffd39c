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
"""Beanline exception hierarchy.

Every framework error derives from :class:`BeanlineException` so callers can
catch all of them with a single clause, or target a specific subclass.
"""

from __future__ import annotations


class BeanlineException(Exception):
    """Base exception for all Beanline errors.

    Carries an optional error code and context dict for structured error data.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "CONSTRUCTION_AFTER_INSTANTIATION").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


class InfrastructureException(BeanlineException):
    """Failures of the container infrastructure itself."""


class InterceptorRegistrationError(InfrastructureException):
    """An interceptor could not be registered.

    Raised when the registry is already serving constructions, or when the
    object offers none of the construction callbacks.
    """
