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
"""Tests for @order decorator and ordering constants."""

from beanline.container.ordering import HIGHEST_PRECEDENCE, LOWEST_PRECEDENCE, get_order, order, sorted_by_order


class TestOrderDecorator:
    def test_sets_order_attribute(self):
        @order(5)
        class MyService:
            pass

        assert MyService.__beanline_order__ == 5
        assert get_order(MyService) == 5

    def test_preserves_class(self):
        @order(1)
        class MyService:
            """My doc."""

        assert MyService.__name__ == "MyService"
        assert MyService.__doc__ == "My doc."

    def test_undecorated_defaults_to_zero(self):
        class Plain:
            pass

        assert get_order(Plain) == 0

    def test_stacks_with_stereotype(self):
        from beanline.container.stereotypes import component_metadata, service

        @order(3)
        @service
        class OrderedService:
            pass

        assert OrderedService.__beanline_order__ == 3
        assert component_metadata(OrderedService).stereotype == "service"


class TestOrderConstants:
    def test_highest_precedence(self):
        assert HIGHEST_PRECEDENCE == -(2**31)

    def test_lowest_precedence(self):
        assert LOWEST_PRECEDENCE == 2**31 - 1

    def test_highest_less_than_lowest(self):
        assert HIGHEST_PRECEDENCE < LOWEST_PRECEDENCE


class TestSortedByOrder:
    def test_sorts_instances_by_class_order(self):
        @order(2)
        class Late:
            pass

        @order(-1)
        class Early:
            pass

        class Default:
            pass

        items = [Late(), Default(), Early()]
        assert [type(i) for i in sorted_by_order(items)] == [Early, Default, Late]

    def test_ties_keep_input_order(self):
        class A:
            pass

        class B:
            pass

        assert sorted_by_order([B, A], cls_of=lambda cls: cls) == [B, A]
