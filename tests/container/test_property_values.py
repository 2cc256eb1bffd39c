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
"""Tests for PropertyValues and property descriptors."""

from typing import ClassVar

from beanline.container import Autowired, PropertyDescriptor, PropertyValues, describe_properties


class Dependency:
    pass


class Profile:
    name: str
    age: int = 0
    registry: ClassVar[dict] = {}
    dependency: Dependency = Autowired()
    _secret: str = ""

    @property
    def display(self) -> str:
        return self.name

    @property
    def nickname(self) -> str:
        return self._nickname

    @nickname.setter
    def nickname(self, value: str) -> None:
        self._nickname = value


class TestPropertyValues:
    def test_preserves_insertion_order(self):
        pvs = PropertyValues([("b", 2), ("a", 1)])
        pvs["c"] = 3
        assert list(pvs) == ["b", "a", "c"]

    def test_copy_is_independent(self):
        pvs = PropertyValues({"a": 1})
        clone = pvs.copy()
        clone["a"] = 2
        del clone["a"]
        assert pvs == {"a": 1}
        assert len(clone) == 0

    def test_compares_equal_to_mapping(self):
        assert PropertyValues({"a": 1}) == {"a": 1}
        assert PropertyValues({"a": 1}) != {"a": 2}

    def test_repr(self):
        assert repr(PropertyValues({"a": 1})) == "PropertyValues({'a': 1})"


class TestDescribeProperties:
    def test_includes_public_annotated_attributes_and_properties(self):
        names = [d.name for d in describe_properties(Profile)]
        assert names == ["name", "age", "display", "nickname"]

    def test_types_and_writability(self):
        by_name = {d.name: d for d in describe_properties(Profile)}
        assert by_name["age"] == PropertyDescriptor(name="age", property_type=int)
        assert by_name["display"].writable is False
        assert by_name["display"].property_type is str
        assert by_name["nickname"].writable is True

    def test_plain_class_has_no_descriptors(self):
        class Empty:
            pass

        assert describe_properties(Empty) == ()
