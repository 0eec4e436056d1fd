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
from unittest import mock

import pytest
import yaml
from k8s import config

from fake_api_server import FakeApiServer, make_response, make_status
from hpa_provisioner.specs import default_spec

pytest.helpers.register(make_response)
pytest.helpers.register(make_status)


@pytest.fixture
def spec():
    return default_spec()


# k8s client library mocks


@pytest.fixture(autouse=True)
def k8s_config(monkeypatch):
    """Configure k8s for test-runs"""
    monkeypatch.setattr(config, "api_server", "https://10.0.0.1")
    monkeypatch.setattr(config, "api_token", "password")
    monkeypatch.setattr(config, "verify_ssl", False)
    monkeypatch.setattr(config, "cert", None)
    monkeypatch.setattr(config, "debug", False)


@pytest.fixture
def api_server():
    return FakeApiServer()


@pytest.fixture()
def get(api_server):
    with mock.patch('k8s.client.Client.get') as mockk:
        mockk.side_effect = api_server.get
        yield mockk


@pytest.fixture()
def post(api_server):
    with mock.patch('k8s.client.Client.post') as mockk:
        mockk.side_effect = api_server.post
        yield mockk


@pytest.fixture
def kubeconfig_file(tmpdir):
    kubeconfig = {
        "apiVersion": "v1",
        "kind": "Config",
        "current-context": "demo",
        "contexts": [{"name": "demo", "context": {"cluster": "demo-cluster", "user": "demo-user"}}],
        "clusters": [{"name": "demo-cluster", "cluster": {"server": "https://demo.example.com:6443/",
                                                          "insecure-skip-tls-verify": True}}],
        "users": [{"name": "demo-user", "user": {"token": "demo-token"}}],
    }
    path = tmpdir.join("config")
    with path.open("w") as fobj:
        yaml.safe_dump(kubeconfig, fobj)
    return path.strpath
