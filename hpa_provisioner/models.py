#!/usr/bin/env python
# -*- coding: utf-8

# Copyright 2017-2019 The FIAAS Authors
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#      http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""HorizontalPodAutoscaler models for the autoscaling API versions beyond v1

The k8s library only ships autoscaling/v1, which can express a single CPU
target. The v2 family adds a list of metrics, and changed how a target is
expressed between v2beta1 and v2beta2.
"""

from k8s.base import Model
from k8s.fields import Field, RequiredField, ListField
from k8s.models.autoscaler import CrossVersionObjectReference
from k8s.models.common import ObjectMeta


# autoscaling/v2beta1

class ResourceMetricSourceV2beta1(Model):
    name = RequiredField(str)
    targetAverageUtilization = Field(int)
    targetAverageValue = Field(str)


class MetricSpecV2beta1(Model):
    type = RequiredField(str)
    resource = Field(ResourceMetricSourceV2beta1)


class HorizontalPodAutoscalerSpecV2beta1(Model):
    scaleTargetRef = RequiredField(CrossVersionObjectReference)
    minReplicas = Field(int, 1)
    maxReplicas = RequiredField(int)
    metrics = ListField(MetricSpecV2beta1)


class HorizontalPodAutoscalerV2beta1(Model):
    class Meta:
        list_url = "/apis/autoscaling/v2beta1/horizontalpodautoscalers"
        url_template = "/apis/autoscaling/v2beta1/namespaces/{namespace}/horizontalpodautoscalers/{name}"

    apiVersion = Field(str, "autoscaling/v2beta1")  # NOQA
    kind = Field(str, "HorizontalPodAutoscaler")

    metadata = Field(ObjectMeta)
    spec = Field(HorizontalPodAutoscalerSpecV2beta1)


# autoscaling/v2beta2 and autoscaling/v2 share the same schema

class MetricTarget(Model):
    type = RequiredField(str)
    averageUtilization = Field(int)
    averageValue = Field(str)
    value = Field(str)


class ResourceMetricSource(Model):
    name = RequiredField(str)
    target = RequiredField(MetricTarget)


class MetricSpec(Model):
    type = RequiredField(str)
    resource = Field(ResourceMetricSource)


class HorizontalPodAutoscalerSpecV2(Model):
    scaleTargetRef = RequiredField(CrossVersionObjectReference)
    minReplicas = Field(int, 1)
    maxReplicas = RequiredField(int)
    metrics = ListField(MetricSpec)


class HorizontalPodAutoscalerV2beta2(Model):
    class Meta:
        list_url = "/apis/autoscaling/v2beta2/horizontalpodautoscalers"
        url_template = "/apis/autoscaling/v2beta2/namespaces/{namespace}/horizontalpodautoscalers/{name}"

    apiVersion = Field(str, "autoscaling/v2beta2")  # NOQA
    kind = Field(str, "HorizontalPodAutoscaler")

    metadata = Field(ObjectMeta)
    spec = Field(HorizontalPodAutoscalerSpecV2)


class HorizontalPodAutoscalerV2(Model):
    class Meta:
        list_url = "/apis/autoscaling/v2/horizontalpodautoscalers"
        url_template = "/apis/autoscaling/v2/namespaces/{namespace}/horizontalpodautoscalers/{name}"

    apiVersion = Field(str, "autoscaling/v2")  # NOQA
    kind = Field(str, "HorizontalPodAutoscaler")

    metadata = Field(ObjectMeta)
    spec = Field(HorizontalPodAutoscalerSpecV2)
