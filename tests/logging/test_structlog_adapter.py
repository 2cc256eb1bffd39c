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
"""Tests for StructlogAdapter and the LoggingPort it implements."""

import logging
from typing import Any

from beanline.context import ApplicationContext
from beanline.core.config import Config
from beanline.logging import LoggingPort, StructlogAdapter


class TestLoggingPort:
    def test_adapter_conforms(self):
        assert isinstance(StructlogAdapter(), LoggingPort)

    def test_incomplete_class_does_not_conform(self):
        class Incomplete:
            def get_logger(self, name: str) -> Any:
                return None

        assert not isinstance(Incomplete(), LoggingPort)


class TestConfigure:
    def test_packaged_defaults(self):
        adapter = StructlogAdapter()
        adapter.configure(Config.defaults())
        assert adapter.root_level == "INFO"
        assert adapter.output_format == "console"

    def test_reads_root_level_and_format(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({"beanline": {"logging": {"format": "JSON", "level": {"root": "debug"}}}}))
        assert adapter.root_level == "DEBUG"
        assert adapter.output_format == "json"
        assert logging.getLogger().level == logging.DEBUG

    def test_applies_per_module_levels(self):
        adapter = StructlogAdapter()
        config = Config({"beanline": {"logging": {"level": {"root": "INFO", "beanline.container": "warning"}}}})
        adapter.configure(config)
        assert logging.getLogger("beanline.container").level == logging.WARNING

    def test_trace_construction_lowers_pipeline_logger(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({"beanline": {"logging": {"trace_construction": True}}}))
        assert adapter.trace_construction is True
        assert logging.getLogger("beanline.container.construction").level == logging.DEBUG

    def test_trace_construction_off_by_default(self):
        adapter = StructlogAdapter()
        adapter.configure(Config.defaults())
        assert adapter.trace_construction is False

    def test_set_level(self):
        adapter = StructlogAdapter()
        adapter.set_level("beanline.context", "error")
        assert logging.getLogger("beanline.context").level == logging.ERROR

    def test_get_logger_is_usable(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({}))
        logger = adapter.get_logger("beanline.test")
        assert callable(getattr(logger, "info", None))


class TestContextIntegration:
    def test_context_configures_logging_port(self):
        adapter = StructlogAdapter()
        ApplicationContext(
            Config({"beanline": {"logging": {"format": "json"}}}),
            logging_port=adapter,
        )
        assert adapter.output_format == "json"
