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
from .builders import build_deployment, build_autoscaler, validate_spec, validate_deployment, validate_autoscaler, \
    DEPRECATED_AUTOSCALING_VERSIONS
from .errors import ProvisioningError
from .specs import AUTO_API_VERSION


class State(object):
    START = "Start"
    WORKLOAD_SUBMITTED = "WorkloadSubmitted"
    POLICY_SUBMITTED = "PolicySubmitted"
    DONE = "Done"
    FAILED = "Failed"


class Provisioner(object):
    """Creates the Deployment, then the HorizontalPodAutoscaler scaling it

    Stops at the first failure. A Deployment that was created before the
    autoscaler failed is left in the cluster.
    """

    def __init__(self, cluster_client, log):
        self._cluster_client = cluster_client
        self._log = log
        self.state = State.START
        self.submitted = []

    def provision(self, spec):
        try:
            validate_spec(spec)
            api_version = self._resolve_autoscaling_version(spec)
            deployment = build_deployment(spec)
            autoscaler = build_autoscaler(spec, api_version)
            validate_deployment(deployment)
            validate_autoscaler(autoscaler)
        except ProvisioningError as e:
            self._fail("Unable to prepare provisioning of %s: %s", spec.deployment_name, e)
            raise

        self._log.info("=== Creating Deployment ===")
        try:
            self._cluster_client.create_workload(deployment)
        except ProvisioningError as e:
            self._fail("Failed to create Deployment %s: %s", spec.deployment_name, e)
            raise
        self._submitted(deployment, State.WORKLOAD_SUBMITTED)
        self._log.info("Created Deployment: %s", spec.deployment_name)

        deprecated = api_version in DEPRECATED_AUTOSCALING_VERSIONS
        self._log.info("=== Creating HPA using %sautoscaling/%s API ===", "deprecated " if deprecated else "", api_version)
        try:
            self._cluster_client.create_autoscaler(autoscaler)
        except ProvisioningError as e:
            self._fail("Failed to create HPA %s: %s (Deployment %s was created and is left in place)",
                       spec.autoscaler_name, e, spec.deployment_name)
            raise
        self._submitted(autoscaler, State.POLICY_SUBMITTED)
        self._log.info("Created HPA using autoscaling/%s%s: %s", api_version, " (deprecated API)" if deprecated else "",
                       spec.autoscaler_name)

        self.state = State.DONE
        return self.submitted

    def _resolve_autoscaling_version(self, spec):
        if spec.autoscaling_api_version == AUTO_API_VERSION:
            return self._cluster_client.negotiate_autoscaling_version()
        return spec.autoscaling_api_version

    def _submitted(self, obj, state):
        self.submitted.append(obj)
        self.state = state

    def _fail(self, msg, *args):
        self.state = State.FAILED
        self._log.error(msg, *args)
