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
"""Tests for the InstantiationAwareBeanPostProcessor contract and its defaults."""

from beanline.container import NOT_HANDLED, InstantiationAwareBeanPostProcessor, PropertyValues
from beanline.container.interceptor import (
    DEFAULT_CALLBACKS,
    NotHandled,
    default_process_property_values,
    is_instantiation_aware,
)
from beanline.container.phases import Phase


class Target:
    pass


class TestDefaults:
    def test_before_instantiation_proceeds(self):
        assert InstantiationAwareBeanPostProcessor().before_instantiation(Target, "target") is None

    def test_after_instantiation_continues(self):
        assert InstantiationAwareBeanPostProcessor().after_instantiation(Target(), "target") is True

    def test_process_properties_has_no_opinion(self):
        pvs = PropertyValues({"a": 1})
        result = InstantiationAwareBeanPostProcessor().process_properties(pvs, Target(), "target")
        assert result is NOT_HANDLED

    def test_legacy_returns_input_unchanged(self):
        pvs = PropertyValues({"a": 1})
        result = InstantiationAwareBeanPostProcessor().process_property_values(pvs, (), Target(), "target")
        assert result is pvs

    def test_default_free_functions_cover_every_phase(self):
        assert set(DEFAULT_CALLBACKS) == {phase.value for phase in Phase}
        pvs = PropertyValues()
        assert default_process_property_values(pvs, (), Target(), "t") is pvs


class TestSentinel:
    def test_sentinel_is_singleton_enum_member(self):
        assert isinstance(NOT_HANDLED, NotHandled)
        assert list(NotHandled) == [NOT_HANDLED]
        assert repr(NOT_HANDLED) == "NOT_HANDLED"

    def test_sentinel_is_distinct_from_empty_values(self):
        assert NOT_HANDLED is not None
        assert NOT_HANDLED != PropertyValues()


class TestCapabilitySet:
    def test_subclass_is_instantiation_aware(self):
        assert is_instantiation_aware(InstantiationAwareBeanPostProcessor())

    def test_any_single_callback_is_enough(self):
        class LegacyOnly:
            def process_property_values(self, pvs, descriptors, bean, bean_name):
                return pvs

        assert is_instantiation_aware(LegacyOnly())

    def test_plain_object_is_not(self):
        assert not is_instantiation_aware(object())

    def test_non_callable_attribute_does_not_count(self):
        class Confused:
            before_instantiation = "not a method"

        assert not is_instantiation_aware(Confused())
