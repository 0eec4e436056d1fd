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
import re
from collections import namedtuple

AUTO_API_VERSION = "auto"
DNS_LABEL_MAX_LENGTH = 63
_INVALID_LABEL_CHARACTERS = re.compile(r"[^a-z0-9-]+")

DEFAULT_NAMESPACE = "default"
DEFAULT_DEPLOYMENT_NAME = "nginx-deployment"
DEFAULT_AUTOSCALER_NAME = "nginx-hpa"
DEFAULT_IMAGE = "nginx:1.20"
DEFAULT_CONTAINER_PORT = 80
DEFAULT_REPLICAS = 2
DEFAULT_CPU_REQUEST = "100m"
DEFAULT_MEMORY_REQUEST = "128Mi"
DEFAULT_LABELS = {"app": "nginx"}
DEFAULT_MIN_REPLICAS = 2
DEFAULT_MAX_REPLICAS = 10
DEFAULT_TARGET_CPU_UTILIZATION = 70
# Deprecated in Kubernetes 1.12, not served since 1.25. Pass another version (or "auto") for newer clusters.
DEFAULT_AUTOSCALING_API_VERSION = "v2beta1"


class ProvisioningSpec(namedtuple("ProvisioningSpec", [
    "namespace",
    "deployment_name",
    "autoscaler_name",
    "image",
    "container_port",
    "replicas",
    "cpu_request",
    "memory_request",
    "labels",
    "min_replicas",
    "max_replicas",
    "target_cpu_utilization",
    "target_memory_utilization",
    "autoscaling_api_version",
])):
    __slots__ = ()

    @property
    def container_name(self):
        """Name of the single container, derived from the image repository

        Lowercased, with runs of characters that are not allowed in a DNS-1123 label replaced by a dash.
        Empty when nothing usable is left.
        """
        repository = self.image.split("@", 1)[0].rsplit("/", 1)[-1].split(":", 1)[0]
        name = _INVALID_LABEL_CHARACTERS.sub("-", repository.lower()).strip("-")
        return name[:DNS_LABEL_MAX_LENGTH].rstrip("-")


def default_spec(**overrides):
    spec = ProvisioningSpec(
        namespace=DEFAULT_NAMESPACE,
        deployment_name=DEFAULT_DEPLOYMENT_NAME,
        autoscaler_name=DEFAULT_AUTOSCALER_NAME,
        image=DEFAULT_IMAGE,
        container_port=DEFAULT_CONTAINER_PORT,
        replicas=DEFAULT_REPLICAS,
        cpu_request=DEFAULT_CPU_REQUEST,
        memory_request=DEFAULT_MEMORY_REQUEST,
        labels=dict(DEFAULT_LABELS),
        min_replicas=DEFAULT_MIN_REPLICAS,
        max_replicas=DEFAULT_MAX_REPLICAS,
        target_cpu_utilization=DEFAULT_TARGET_CPU_UTILIZATION,
        target_memory_utilization=None,
        autoscaling_api_version=DEFAULT_AUTOSCALING_API_VERSION,
    )
    return spec._replace(**overrides)
