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
import pyaml
import pytest

from hpa_provisioner.config import Configuration, KeyValue, InvalidConfigurationException
from hpa_provisioner.specs import default_spec


class TestConfig(object):

    @pytest.mark.parametrize("format", ["plain", "json"])
    def test_log_format_param(self, format):
        config = Configuration(["--log-format", format])

        assert config.log_format == format

    def test_invalid_log_format_param(self):
        with pytest.raises(SystemExit):
            Configuration(["--log-format", "fail"])

    def test_default_parameter_values(self, monkeypatch):
        monkeypatch.setenv("HOME", "/home/tester")

        config = Configuration([])

        assert not config.debug
        assert config.kubeconfig == "/home/tester/.kube/config"
        assert config.context is None
        assert config.log_format == "plain"
        assert config.namespace == "default"
        assert config.deployment_name == "nginx-deployment"
        assert config.autoscaler_name == "nginx-hpa"
        assert config.image == "nginx:1.20"
        assert config.labels == {"app": "nginx"}
        assert config.autoscaling_api_version == "v2beta1"
        assert config.target_memory_utilization is None

    def test_defaults_give_default_spec(self):
        assert Configuration([]).provisioning_spec() == default_spec()

    @pytest.mark.parametrize("arg,key", [
        ("--kubeconfig", "kubeconfig"),
        ("--context", "context"),
        ("--namespace", "namespace"),
        ("--deployment-name", "deployment_name"),
        ("--autoscaler-name", "autoscaler_name"),
        ("--image", "image"),
        ("--cpu-request", "cpu_request"),
        ("--memory-request", "memory_request"),
    ])
    def test_parameters(self, arg, key):
        config = Configuration([arg, "value"])

        assert getattr(config, key) == "value"

    @pytest.mark.parametrize("arg,key", [
        ("--container-port", "container_port"),
        ("--replicas", "replicas"),
        ("--min-replicas", "min_replicas"),
        ("--max-replicas", "max_replicas"),
        ("--target-cpu-utilization", "target_cpu_utilization"),
        ("--target-memory-utilization", "target_memory_utilization"),
    ])
    def test_int_parameters(self, arg, key):
        config = Configuration([arg, "5"])

        assert getattr(config, key) == 5

    def test_debug_flag(self):
        assert Configuration([]).debug is False
        assert Configuration(["--debug"]).debug is True

    @pytest.mark.parametrize("version", ["v1", "v2beta1", "v2beta2", "v2", "auto"])
    def test_autoscaling_api_version(self, version):
        config = Configuration(["--autoscaling-api-version", version])

        assert config.provisioning_spec().autoscaling_api_version == version

    def test_invalid_autoscaling_api_version(self):
        with pytest.raises(SystemExit):
            Configuration(["--autoscaling-api-version", "v3"])

    def test_labels_replace_default(self):
        config = Configuration(["--label", "app=web", "--label=tier=frontend"])

        assert config.labels == {"app": "web", "tier": "frontend"}
        assert config.provisioning_spec().labels == {"app": "web", "tier": "frontend"}

    def test_invalid_label(self):
        with pytest.raises(SystemExit):
            Configuration(["--label", "no-value"])

    @pytest.mark.parametrize("key,attr,value", [
        ("namespace", "namespace", "apps"),
        ("image", "image", "registry.example.com/team/web:2.1"),
        ("autoscaling-api-version", "autoscaling_api_version", "v2"),
        ("log-format", "log_format", "json"),
    ])
    def test_config_from_file(self, key, attr, value, tmpdir):
        config_file = tmpdir.join("config.yaml")
        with config_file.open("w") as fobj:
            pyaml.dump({key: value}, fobj, safe=True, default_style='"')
        config = Configuration(["--config-file", config_file.strpath])
        assert getattr(config, attr) == value

    def test_labels_from_file(self, tmpdir):
        config_file = tmpdir.join("config.yaml")
        with config_file.open("w") as fobj:
            pyaml.dump({"label": ["app=web", "tier=frontend"]}, fobj, safe=True, default_style='"')
        config = Configuration(["--config-file", config_file.strpath])
        assert config.labels == {"app": "web", "tier": "frontend"}

    def test_command_line_overrides_file(self, tmpdir):
        config_file = tmpdir.join("config.yaml")
        with config_file.open("w") as fobj:
            pyaml.dump({"max-replicas": "20"}, fobj, safe=True, default_style='"')
        config = Configuration(["--config-file", config_file.strpath, "--max-replicas", "30"])
        assert config.max_replicas == 30

    def test_repr_lists_parameters(self):
        assert "namespace=default" in repr(Configuration([]))


class TestKeyValue(object):
    @pytest.mark.parametrize("arg,key,value", [
        ("app=nginx", "app", "nginx"),
        ("app.kubernetes.io/name=nginx", "app.kubernetes.io/name", "nginx"),
        ("formula=a=b", "formula", "a=b"),
        ("empty=", "empty", ""),
    ])
    def test_split_on_first_equals(self, arg, key, value):
        kv = KeyValue(arg)

        assert kv.key == key
        assert kv.value == value
        assert kv == KeyValue(arg)

    @pytest.mark.parametrize("arg", ["no-value", "=value"])
    def test_invalid(self, arg):
        with pytest.raises(InvalidConfigurationException):
            KeyValue(arg)
