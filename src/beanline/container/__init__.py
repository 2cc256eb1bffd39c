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
"""Beanline DI Container — dependency injection with construction interceptors."""

from beanline.container.autowired import Autowired, AutowiredFieldInjector
from beanline.container.bean import BeanMethod, Qualifier, bean, primary
from beanline.container.construction import ConstructionOutcome, ConstructionPipeline
from beanline.container.container import Container
from beanline.container.exceptions import (
    BeanCreationException,
    BeanCurrentlyInCreationError,
    BeanInstantiationError,
    ConstructionError,
    ContainerError,
    NoSuchBeanError,
    NoUniqueBeanError,
    NotWritablePropertyError,
)
from beanline.container.interceptor import (
    NOT_HANDLED,
    InstantiationAwareBeanPostProcessor,
    NotHandled,
)
from beanline.container.interceptor_registry import InterceptorRegistry
from beanline.container.ordering import HIGHEST_PRECEDENCE, LOWEST_PRECEDENCE, order, sorted_by_order
from beanline.container.phases import ConstructionState, Phase
from beanline.container.property_values import (
    PropertyDescriptor,
    PropertyValues,
    describe_properties,
)
from beanline.container.registry import ComponentDescriptor, Scope
from beanline.container.stereotypes import (
    ComponentMetadata,
    component,
    configuration,
    repository,
    service,
)

__all__ = [
    "Autowired",
    "AutowiredFieldInjector",
    "BeanCreationException",
    "BeanMethod",
    "BeanCurrentlyInCreationError",
    "BeanInstantiationError",
    "ComponentDescriptor",
    "ComponentMetadata",
    "ConstructionError",
    "ConstructionOutcome",
    "ConstructionPipeline",
    "ConstructionState",
    "Container",
    "ContainerError",
    "HIGHEST_PRECEDENCE",
    "InstantiationAwareBeanPostProcessor",
    "InterceptorRegistry",
    "LOWEST_PRECEDENCE",
    "NOT_HANDLED",
    "NoSuchBeanError",
    "NoUniqueBeanError",
    "NotHandled",
    "NotWritablePropertyError",
    "Phase",
    "PropertyDescriptor",
    "PropertyValues",
    "Qualifier",
    "Scope",
    "bean",
    "component",
    "configuration",
    "describe_properties",
    "order",
    "primary",
    "repository",
    "service",
    "sorted_by_order",
]
