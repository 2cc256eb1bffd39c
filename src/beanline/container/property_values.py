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
"""Property values applied to a bean after instantiation, and their descriptors."""

from __future__ import annotations

import typing
from collections.abc import Iterable, Iterator, Mapping, MutableMapping
from dataclasses import dataclass
from typing import Any, ClassVar, get_origin

from beanline.container.autowired import Autowired


class PropertyValues(MutableMapping[str, Any]):
    """Ordered mapping of property name to the value the container will set.

    Interceptors may mutate it in place or return a new instance; either way
    the next interceptor sees the values as left by the previous one.
    """

    __slots__ = ("_values",)

    def __init__(
        self,
        values: Mapping[str, Any] | Iterable[tuple[str, Any]] | None = None,
    ) -> None:
        self._values: dict[str, Any] = dict(values or {})

    def __getitem__(self, name: str) -> Any:
        return self._values[name]

    def __setitem__(self, name: str, value: Any) -> None:
        self._values[name] = value

    def __delitem__(self, name: str) -> None:
        del self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def copy(self) -> PropertyValues:
        return PropertyValues(self._values)

    def __repr__(self) -> str:
        return f"PropertyValues({self._values!r})"


@dataclass(frozen=True)
class PropertyDescriptor:
    """A settable property of a bean class, as seen by legacy interceptors."""

    name: str
    property_type: Any = Any
    writable: bool = True


def describe_properties(cls: type) -> tuple[PropertyDescriptor, ...]:
    """Describe the public properties of *cls*.

    Annotated class attributes and ``property`` objects are included.
    Private names, ``ClassVar`` annotations and ``Autowired`` fields (which
    the container injects itself) are left out.
    """
    try:
        hints = typing.get_type_hints(cls)
    except Exception:
        hints = {}

    descriptors: dict[str, PropertyDescriptor] = {}
    for name, hint in hints.items():
        if name.startswith("_") or hint is ClassVar or get_origin(hint) is ClassVar:
            continue
        if isinstance(getattr(cls, name, None), Autowired):
            continue
        descriptors[name] = PropertyDescriptor(name=name, property_type=hint)

    for klass in reversed(cls.__mro__):
        for name, attr in vars(klass).items():
            if isinstance(attr, property) and not name.startswith("_"):
                descriptors[name] = PropertyDescriptor(
                    name=name,
                    property_type=_return_type(attr),
                    writable=attr.fset is not None,
                )

    return tuple(descriptors.values())


def _return_type(prop: property) -> Any:
    """Return annotation of a property getter, or ``Any`` when unresolvable."""
    if prop.fget is None:
        return Any
    try:
        return typing.get_type_hints(prop.fget).get("return", Any)
    except Exception:
        return Any
