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
"""Tests for InterceptorRegistry — ordering, validation, and freezing."""

import threading

import pytest

from beanline.container import Container, InstantiationAwareBeanPostProcessor, InterceptorRegistry
from beanline.kernel.exceptions import InterceptorRegistrationError


class Noop(InstantiationAwareBeanPostProcessor):
    pass


class Greeter:
    pass


class TestRegistration:
    def test_iterates_in_registration_order(self):
        a, b, c = Noop(), Noop(), Noop()
        registry = InterceptorRegistry([a, b])
        registry.register(c)
        assert list(registry) == [a, b, c]
        assert len(registry) == 3

    def test_accepts_duck_typed_interceptor(self):
        class OnlyBefore:
            def before_instantiation(self, bean_type, bean_name):
                return None

        registry = InterceptorRegistry()
        interceptor = OnlyBefore()
        registry.register(interceptor)
        assert interceptor in registry

    def test_rejects_object_without_callbacks(self):
        registry = InterceptorRegistry()
        with pytest.raises(InterceptorRegistrationError) as exc_info:
            registry.register(object())
        assert exc_info.value.code == "INTERCEPTOR_INVALID"

    def test_same_interceptor_may_be_registered_twice(self):
        noop = Noop()
        registry = InterceptorRegistry([noop, noop])
        assert registry.snapshot() == (noop, noop)


class TestFreeze:
    def test_register_after_freeze_is_rejected(self):
        registry = InterceptorRegistry([Noop()])
        registry.freeze()
        with pytest.raises(InterceptorRegistrationError) as exc_info:
            registry.register(Noop())
        assert exc_info.value.code == "INTERCEPTOR_REGISTRY_FROZEN"
        assert len(registry) == 1

    def test_freeze_is_idempotent(self):
        registry = InterceptorRegistry()
        registry.freeze()
        registry.freeze()
        assert registry.frozen is True

    def test_container_freezes_on_first_construction(self):
        container = Container()
        container.register(Greeter)
        assert container.interceptors.frozen is False
        container.resolve(Greeter)
        assert container.interceptors.frozen is True
        with pytest.raises(InterceptorRegistrationError):
            container.interceptors.register(Noop())

    def test_snapshot_taken_before_registration_is_unchanged(self):
        registry = InterceptorRegistry([Noop()])
        snapshot = registry.snapshot()
        registry.register(Noop())
        assert len(snapshot) == 1
        assert len(registry) == 2


class TestConcurrentRegistration:
    def test_parallel_registration_keeps_every_interceptor(self):
        registry = InterceptorRegistry()
        interceptors = [Noop() for _ in range(200)]

        def worker(chunk):
            for interceptor in chunk:
                registry.register(interceptor)

        threads = [threading.Thread(target=worker, args=(interceptors[i::4],)) for i in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(registry) == 200
        assert {id(i) for i in registry} == {id(i) for i in interceptors}
