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
import logging

from k8s.client import Client

from .builders import supported_autoscaling_versions
from .errors import translate_api_errors, UnsupportedVersionError

LOG = logging.getLogger(__name__)

AUTOSCALING_GROUP_URL = "/apis/autoscaling"


class ClusterClient(object):
    """The calls we make against the API-server

    Objects are always created, never updated: an object that already exists
    fails with ConflictError.
    """

    def __init__(self):
        self._client = Client()

    @translate_api_errors
    def create_workload(self, deployment):
        LOG.debug("Creating Deployment %s in namespace %s", deployment.metadata.name, deployment.metadata.namespace)
        deployment.save()
        return deployment

    @translate_api_errors
    def create_autoscaler(self, autoscaler):
        # Only the collection URL names the version, the v1 model from the k8s library has no apiVersion field
        LOG.debug("Creating HorizontalPodAutoscaler %s in namespace %s (%s)", autoscaler.metadata.name,
                  autoscaler.metadata.namespace, autoscaler._meta.url_template)
        autoscaler.save()
        return autoscaler

    @translate_api_errors
    def served_autoscaling_versions(self):
        resp = self._client.get(AUTOSCALING_GROUP_URL)
        return [version[u"version"] for version in resp.json().get(u"versions", [])]

    def negotiate_autoscaling_version(self):
        """Select the newest autoscaling version that is both served and buildable"""
        served = set(self.served_autoscaling_versions())
        for version in reversed(supported_autoscaling_versions()):
            if version in served:
                LOG.info("Negotiated autoscaling/%s (served: %s)", version, ", ".join(sorted(served)))
                return version
        raise UnsupportedVersionError("None of the autoscaling versions served by the cluster ({}) are supported".format(
            ", ".join(sorted(served)) or "none"))
