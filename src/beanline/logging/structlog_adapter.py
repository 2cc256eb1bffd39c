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
"""StructlogAdapter — the default LoggingPort, rendering Beanline events with structlog."""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from beanline.core.config import Config

CONSTRUCTION_LOGGER = "beanline.container.construction"


class StructlogAdapter:
    """Configures structlog and stdlib levels from the ``beanline.logging`` section.

    Recognised keys::

        beanline:
          logging:
            format: console            # or json
            trace_construction: false  # DEBUG for every construction decision
            level:
              root: INFO
              beanline.container: WARNING
    """

    def __init__(self) -> None:
        self._root_level = "INFO"
        self._format = "console"
        self._module_levels: dict[str, str] = {}
        self._trace_construction = False

    @property
    def root_level(self) -> str:
        return self._root_level

    @property
    def output_format(self) -> str:
        return self._format

    @property
    def trace_construction(self) -> bool:
        return self._trace_construction

    def configure(self, config: Config) -> None:
        levels = dict(config.get_section("beanline.logging.level"))
        self._root_level = str(levels.pop("root", "INFO")).upper()
        self._module_levels = {name: str(level).upper() for name, level in levels.items()}
        self._format = str(config.get("beanline.logging.format", "console")).lower()
        trace = config.get("beanline.logging.trace_construction", False)
        self._trace_construction = trace is True or str(trace).lower() in ("true", "1", "yes")
        if self._trace_construction:
            self._module_levels[CONSTRUCTION_LOGGER] = "DEBUG"

        structlog.configure(
            processors=_processors(self._format),
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        logging.basicConfig(
            format="%(message)s",
            stream=sys.stdout,
            level=getattr(logging, self._root_level, logging.INFO),
            force=True,
        )
        for name, level in self._module_levels.items():
            self.set_level(name, level)

    def get_logger(self, name: str) -> Any:
        return structlog.get_logger(name)

    def set_level(self, name: str, level: str) -> None:
        """Set the stdlib level of logger *name*; unknown level names mean INFO."""
        logging.getLogger(name).setLevel(getattr(logging, level.upper(), logging.INFO))


def _processors(output_format: str) -> list[Any]:
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if output_format == "json":
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer())
    return processors
