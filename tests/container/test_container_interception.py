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
"""Tests for construction interceptors running inside the Container."""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from beanline.container import (
    Autowired,
    ConstructionError,
    Container,
    InstantiationAwareBeanPostProcessor,
    NOT_HANDLED,
    Phase,
    PropertyValues,
    Scope,
)


class Repository:
    pass


class Settings:
    host: str = "localhost"
    port: int = 0


class Report:
    repository: Repository = Autowired()
    title: str = ""


class StubReport:
    pass


class Substituting(InstantiationAwareBeanPostProcessor):
    def __init__(self, target, replacement):
        self.target = target
        self.replacement = replacement
        self.seen = []

    def before_instantiation(self, bean_type, bean_name):
        self.seen.append(bean_name)
        if bean_type is self.target:
            return self.replacement
        return None


class Vetoing(InstantiationAwareBeanPostProcessor):
    def __init__(self, target):
        self.target = target

    def after_instantiation(self, bean, bean_name):
        return not isinstance(bean, self.target)


class PortRewriter(InstantiationAwareBeanPostProcessor):
    def process_properties(self, pvs, bean, bean_name):
        if "port" not in pvs:
            return NOT_HANDLED
        rewritten = pvs.copy()
        rewritten["port"] = int(rewritten["port"]) + 1
        return rewritten


class TestSubstitution:
    def test_substitute_is_returned_and_cached(self):
        stub = StubReport()
        container = Container()
        container.interceptors.register(Substituting(Report, stub))
        container.register(Repository)
        container.register(Report)

        assert container.resolve(Report) is stub
        assert container.resolve(Report) is stub
        reg = container.get_registration(Report)
        assert reg.substituted is True
        assert reg.metrics.populated is False
        assert reg.metrics.creation_count == 1

    def test_substituted_bean_skips_autowiring(self):
        stub = StubReport()
        container = Container()
        container.interceptors.register(Substituting(Report, stub))
        container.register(Report)
        # Repository is not registered, so autowiring would fail.
        assert container.resolve(Report) is stub

    def test_factory_bean_skips_before_instantiation(self):
        interceptor = Substituting(Settings, StubReport())
        container = Container()
        container.interceptors.register(interceptor)
        produced = Settings()
        container.register(Settings, factory=lambda: produced, name="settings")

        assert container.resolve(Settings) is produced
        assert interceptor.seen == []


class TestVeto:
    def test_veto_skips_properties_and_autowiring(self):
        container = Container()
        container.interceptors.register(Vetoing(Report))
        container.register(Report, properties={"title": "Q3"})

        report = container.resolve(Report)
        assert report.title == ""
        assert "repository" not in report.__dict__
        assert container.get_registration(Report).metrics.populated is False

    def test_other_beans_are_populated(self):
        container = Container()
        container.interceptors.register(Vetoing(Report))
        container.register(Settings, properties={"host": "db"})

        assert container.resolve(Settings).host == "db"
        assert container.get_registration(Settings).metrics.populated is True


class TestPropertyRewrite:
    def test_rewritten_values_are_applied(self):
        container = Container()
        container.interceptors.register(PortRewriter())
        container.register(Settings, properties={"host": "db", "port": 8080})

        settings = container.resolve(Settings)
        assert settings.host == "db"
        assert settings.port == 8081

    def test_declared_values_are_not_mutated(self):
        container = Container()
        container.interceptors.register(PortRewriter())
        container.register(Settings, properties={"port": 1}, scope=Scope.TRANSIENT)

        assert container.resolve(Settings).port == 2
        assert container.resolve(Settings).port == 2
        assert container.get_registration(Settings).properties == {"port": 1}

    def test_autowired_fields_reach_later_interceptors(self):
        seen = []

        class Spy(InstantiationAwareBeanPostProcessor):
            def process_properties(self, pvs, bean, bean_name):
                seen.append(dict(pvs))
                return pvs

        container = Container()
        container.interceptors.register(Spy())
        container.register(Repository)
        container.register(Report, properties={"title": "Q3"})

        report = container.resolve(Report)
        assert isinstance(report.repository, Repository)
        assert report.title == "Q3"
        report_values = [values for values in seen if "title" in values]
        assert set(report_values[0]) == {"title", "repository"}

    def test_interceptor_failure_is_wrapped(self):
        class Broken(InstantiationAwareBeanPostProcessor):
            def process_properties(self, pvs, bean, bean_name):
                raise RuntimeError("boom")

        container = Container()
        container.interceptors.register(Broken())
        container.register(Settings, name="settings")

        with pytest.raises(ConstructionError) as exc_info:
            container.resolve(Settings)
        assert exc_info.value.phase is Phase.PROPERTIES
        assert exc_info.value.bean_name == "settings"
        assert isinstance(exc_info.value.__cause__, RuntimeError)


class TestConcurrentConstruction:
    def test_parallel_transient_constructions(self):
        calls = []
        lock = threading.Lock()

        class Counting(InstantiationAwareBeanPostProcessor):
            def after_instantiation(self, bean, bean_name):
                with lock:
                    calls.append(bean_name)
                return True

        container = Container()
        container.interceptors.register(Counting())
        container.register(Repository, scope=Scope.TRANSIENT)
        container.register(Report, scope=Scope.TRANSIENT, properties={"title": "r"})

        with ThreadPoolExecutor(max_workers=8) as pool:
            reports = list(pool.map(lambda _: container.resolve(Report), range(50)))

        assert len({id(r) for r in reports}) == 50
        assert all(isinstance(r.repository, Repository) for r in reports)
        assert calls.count("Report") == 50
        assert calls.count("Repository") == 50

    def test_circular_chain_is_per_thread(self):
        barrier = threading.Barrier(2)

        class Slow:
            def __init__(self) -> None:
                barrier.wait(timeout=5)

        container = Container()
        container.register(Slow, scope=Scope.TRANSIENT)

        with ThreadPoolExecutor(max_workers=2) as pool:
            results = list(pool.map(lambda _: container.resolve(Slow), range(2)))

        assert all(isinstance(r, Slow) for r in results)
