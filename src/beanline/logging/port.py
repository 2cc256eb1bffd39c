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
"""LoggingPort — how Beanline hands logging configuration to a backend.

Beanline itself always logs through ``structlog.get_logger(...)`` under
these names:

- ``beanline.container``: bean creation
- ``beanline.container.interceptors``: interceptor registration and freezing
- ``beanline.container.construction``: substitutions, skipped or suppressed
  population, aborted constructions
- ``beanline.context`` and ``beanline.context.lifecycle``: start, stop, hooks

A port implementation decides where those events end up.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from beanline.core.config import Config


@runtime_checkable
class LoggingPort(Protocol):
    """Backend that ApplicationContext configures from ``beanline.logging.*``."""

    def configure(self, config: Config) -> None: ...

    def get_logger(self, name: str) -> Any: ...

    def set_level(self, name: str, level: str) -> None: ...
