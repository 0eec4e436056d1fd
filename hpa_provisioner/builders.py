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

"""Build the Deployment and HorizontalPodAutoscaler objects to submit

Everything in here is pure: objects are constructed in memory, and nothing
talks to the API-server.
"""

from k8s.models.autoscaler import HorizontalPodAutoscaler, HorizontalPodAutoscalerSpec, CrossVersionObjectReference
from k8s.models.common import ObjectMeta
from k8s.models.deployment import Deployment, DeploymentSpec, PodTemplateSpec, LabelSelector
from k8s.models.pod import Container, ContainerPort, PodSpec, ResourceRequirements

from .errors import ValidationError, UnsupportedVersionError
from .models import HorizontalPodAutoscalerV2beta1, HorizontalPodAutoscalerSpecV2beta1, MetricSpecV2beta1, \
    ResourceMetricSourceV2beta1, HorizontalPodAutoscalerV2beta2, HorizontalPodAutoscalerV2, \
    HorizontalPodAutoscalerSpecV2, MetricSpec, ResourceMetricSource, MetricTarget
from .specs import AUTO_API_VERSION

WORKLOAD_KIND = "Deployment"
WORKLOAD_API_VERSION = "apps/v1"
DEPRECATED_AUTOSCALING_VERSIONS = ("v2beta1", "v2beta2")


def build_deployment(spec):
    metadata = ObjectMeta(name=spec.deployment_name, namespace=spec.namespace)
    container = Container(name=spec.container_name,
                          image=spec.image,
                          ports=[ContainerPort(containerPort=spec.container_port)],
                          resources=ResourceRequirements(requests={"cpu": spec.cpu_request,
                                                                   "memory": spec.memory_request}))
    pod_metadata = ObjectMeta(labels=dict(spec.labels))
    pod_template_spec = PodTemplateSpec(metadata=pod_metadata, spec=PodSpec(containers=[container]))
    deployment_spec = DeploymentSpec(replicas=spec.replicas,
                                     selector=LabelSelector(matchLabels=dict(spec.labels)),
                                     template=pod_template_spec)
    return Deployment(metadata=metadata, spec=deployment_spec)


def build_autoscaler(spec, api_version=None):
    """Build a HorizontalPodAutoscaler for the given autoscaling API version

    The version defaults to the one in the ProvisioningSpec. It must be concrete
    at this point, negotiating "auto" is the job of the ClusterClient.
    """
    if api_version is None:
        api_version = spec.autoscaling_api_version
    try:
        factory = _AUTOSCALER_FACTORIES[api_version]
    except KeyError:
        raise UnsupportedVersionError("No HorizontalPodAutoscaler model for autoscaling/{}, use one of {}".format(
            api_version, ", ".join(supported_autoscaling_versions())))
    metadata = ObjectMeta(name=spec.autoscaler_name, namespace=spec.namespace)
    scale_target_ref = CrossVersionObjectReference(kind=WORKLOAD_KIND, name=spec.deployment_name,
                                                   apiVersion=WORKLOAD_API_VERSION)
    return factory(spec, metadata, scale_target_ref)


def supported_autoscaling_versions():
    """Versions we can build, oldest first"""
    return list(_AUTOSCALER_FACTORIES.keys())


def _resource_targets(spec):
    targets = [("cpu", spec.target_cpu_utilization)]
    if spec.target_memory_utilization is not None:
        targets.append(("memory", spec.target_memory_utilization))
    return targets


def _autoscaler_v1(spec, metadata, scale_target_ref):
    if spec.target_memory_utilization is not None:
        raise ValidationError("autoscaling/v1 can only target CPU utilization")
    autoscaler_spec = HorizontalPodAutoscalerSpec(scaleTargetRef=scale_target_ref,
                                                  minReplicas=spec.min_replicas,
                                                  maxReplicas=spec.max_replicas,
                                                  targetCPUUtilizationPercentage=spec.target_cpu_utilization)
    return HorizontalPodAutoscaler(metadata=metadata, spec=autoscaler_spec)


def _autoscaler_v2beta1(spec, metadata, scale_target_ref):
    metrics = [MetricSpecV2beta1(type="Resource",
                                 resource=ResourceMetricSourceV2beta1(name=name, targetAverageUtilization=utilization))
               for name, utilization in _resource_targets(spec)]
    autoscaler_spec = HorizontalPodAutoscalerSpecV2beta1(scaleTargetRef=scale_target_ref,
                                                         minReplicas=spec.min_replicas,
                                                         maxReplicas=spec.max_replicas,
                                                         metrics=metrics)
    return HorizontalPodAutoscalerV2beta1(metadata=metadata, spec=autoscaler_spec)


def _v2_spec(spec, scale_target_ref):
    metrics = [MetricSpec(type="Resource",
                          resource=ResourceMetricSource(name=name,
                                                        target=MetricTarget(type="Utilization",
                                                                            averageUtilization=utilization)))
               for name, utilization in _resource_targets(spec)]
    return HorizontalPodAutoscalerSpecV2(scaleTargetRef=scale_target_ref,
                                         minReplicas=spec.min_replicas,
                                         maxReplicas=spec.max_replicas,
                                         metrics=metrics)


def _autoscaler_v2beta2(spec, metadata, scale_target_ref):
    return HorizontalPodAutoscalerV2beta2(metadata=metadata, spec=_v2_spec(spec, scale_target_ref))


def _autoscaler_v2(spec, metadata, scale_target_ref):
    return HorizontalPodAutoscalerV2(metadata=metadata, spec=_v2_spec(spec, scale_target_ref))


_AUTOSCALER_FACTORIES = {
    "v1": _autoscaler_v1,
    "v2beta1": _autoscaler_v2beta1,
    "v2beta2": _autoscaler_v2beta2,
    "v2": _autoscaler_v2,
}


def validate_spec(spec):
    """Reject parameters the API-server would refuse, before anything is submitted"""
    errors = []
    for field in ("namespace", "deployment_name", "autoscaler_name", "image"):
        if not getattr(spec, field):
            errors.append("{} must be set".format(field))
    if spec.image and not spec.container_name:
        errors.append("no container name can be derived from image {}".format(spec.image))
    if not spec.labels:
        errors.append("at least one label is required for the selector")
    if spec.replicas < 1:
        errors.append("replicas must be positive, got {}".format(spec.replicas))
    if not 1 <= spec.container_port <= 65535:
        errors.append("container_port must be between 1 and 65535, got {}".format(spec.container_port))
    errors.extend(_replica_bound_errors(spec.min_replicas, spec.max_replicas))
    for name, utilization in _resource_targets(spec):
        if not 1 <= utilization <= 100:
            errors.append("target {} utilization must be between 1 and 100 percent, got {}".format(name, utilization))
    if spec.target_memory_utilization is not None and spec.autoscaling_api_version == "v1":
        errors.append("autoscaling/v1 can only target CPU utilization")
    versions = supported_autoscaling_versions() + [AUTO_API_VERSION]
    if spec.autoscaling_api_version not in versions:
        errors.append("autoscaling_api_version must be one of {}, got {}".format(", ".join(versions),
                                                                                 spec.autoscaling_api_version))
    if errors:
        raise ValidationError("Invalid provisioning parameters: {}".format("; ".join(errors)))


def validate_deployment(deployment):
    selector = deployment.spec.selector.matchLabels or {}
    template_labels = deployment.spec.template.metadata.labels or {}
    mismatched = sorted(key for key, value in selector.items() if template_labels.get(key) != value)
    if not selector or mismatched:
        raise ValidationError("Deployment {}: selector {} does not match template labels {}".format(
            deployment.metadata.name, selector, template_labels))


def validate_autoscaler(autoscaler):
    errors = _replica_bound_errors(autoscaler.spec.minReplicas, autoscaler.spec.maxReplicas)
    if errors:
        raise ValidationError("HorizontalPodAutoscaler {}: {}".format(autoscaler.metadata.name, "; ".join(errors)))


def _replica_bound_errors(min_replicas, max_replicas):
    errors = []
    if min_replicas < 1:
        errors.append("min_replicas must be at least 1, got {}".format(min_replicas))
    if max_replicas < 1:
        errors.append("max_replicas must be at least 1, got {}".format(max_replicas))
    if min_replicas > max_replicas:
        errors.append("min_replicas ({}) must not exceed max_replicas ({})".format(min_replicas, max_replicas))
    return errors
