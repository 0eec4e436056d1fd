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
import os
from argparse import Namespace

import configargparse

from .builders import supported_autoscaling_versions
from . import specs

EPILOG = """
Args that start with '--' (eg. --log-format) can also be set in a config file
(specified via -c). The config file uses YAML syntax and must represent
a YAML 'mapping' (for details, see http://learn.getgrav.org/advanced/yaml).

It is possible to specify '--label' multiple times to add more than one label.
In the config-file, these should be defined as a YAML list
(see https://github.com/bw2/ConfigArgParse#special-values).

If an arg is specified in more than one place, then commandline values
override config file values which override defaults.
"""

PROVISIONING_LONG_HELP = """
The Deployment and HorizontalPodAutoscaler to create. The defaults create
nginx-deployment (two replicas of nginx:1.20) in the default namespace, and
nginx-hpa scaling it between 2 and 10 replicas at 70% CPU utilization.
"""

AUTOSCALING_API_VERSION_HELP = """
Version of the autoscaling API to create the HorizontalPodAutoscaler with.
v2beta1 is deprecated, and not served by clusters running Kubernetes 1.25 or
later. Use 'auto' to pick the newest version the cluster serves.
"""

LABEL_LONG_HELP = """
Labels on the pods of the Deployment, which are also used as its selector.
Specify as `<key>=<value>`. Default: {}
""".format(", ".join("{}={}".format(k, v) for k, v in specs.DEFAULT_LABELS.items()))


def default_kubeconfig():
    home = os.path.expanduser("~")
    if home and home != "~":
        return os.path.join(home, ".kube", "config")
    return ""


class Configuration(Namespace):
    VALID_LOG_FORMAT = ("plain", "json")

    def __init__(self, args=None, **kwargs):
        super(Configuration, self).__init__(**kwargs)
        self._parse_args(args)

    def _parse_args(self, args):
        parser = configargparse.ArgParser(
            add_config_file_help=False,
            add_env_var_help=False,
            config_file_parser_class=configargparse.YAMLConfigFileParser,
            args_for_setting_config_path=["-c", "--config-file"],
            ignore_unknown_config_file_keys=True,
            description="%(prog)s creates a Deployment and a HorizontalPodAutoscaler for it",
            epilog=EPILOG,
            formatter_class=configargparse.ArgumentDefaultsHelpFormatter,
        )
        kubeconfig = default_kubeconfig()
        parser.add_argument(
            "--kubeconfig",
            help="(optional) absolute path to the kubeconfig file" if kubeconfig
            else "absolute path to the kubeconfig file",
            default=kubeconfig,
        )
        parser.add_argument("--context", help="Kubeconfig context to use (default: current-context)", default=None)
        parser.add_argument(
            "--log-format", help="Set logformat (default: %(default)s)", choices=self.VALID_LOG_FORMAT, default="plain"
        )
        parser.add_argument(
            "--debug",
            help="Enable debug logging (including the k8s library's request/response dumps)",
            action="store_true",
        )
        provisioning_parser = parser.add_argument_group("Provisioning", PROVISIONING_LONG_HELP)
        provisioning_parser.add_argument("--namespace", help="Namespace to create objects in",
                                         default=specs.DEFAULT_NAMESPACE)
        provisioning_parser.add_argument("--deployment-name", help="Name of the Deployment",
                                         default=specs.DEFAULT_DEPLOYMENT_NAME)
        provisioning_parser.add_argument("--autoscaler-name", help="Name of the HorizontalPodAutoscaler",
                                         default=specs.DEFAULT_AUTOSCALER_NAME)
        provisioning_parser.add_argument("--image", help="Container image to run", default=specs.DEFAULT_IMAGE)
        provisioning_parser.add_argument("--container-port", help="Port exposed by the container", type=int,
                                         default=specs.DEFAULT_CONTAINER_PORT)
        provisioning_parser.add_argument("--replicas", help="Initial number of replicas", type=int,
                                         default=specs.DEFAULT_REPLICAS)
        provisioning_parser.add_argument("--cpu-request", help="CPU requested by each pod",
                                         default=specs.DEFAULT_CPU_REQUEST)
        provisioning_parser.add_argument("--memory-request", help="Memory requested by each pod",
                                         default=specs.DEFAULT_MEMORY_REQUEST)
        provisioning_parser.add_argument("--min-replicas", help="Lower bound for the autoscaler", type=int,
                                         default=specs.DEFAULT_MIN_REPLICAS)
        provisioning_parser.add_argument("--max-replicas", help="Upper bound for the autoscaler", type=int,
                                         default=specs.DEFAULT_MAX_REPLICAS)
        provisioning_parser.add_argument("--target-cpu-utilization", help="Target average CPU utilization in percent",
                                         type=int, default=specs.DEFAULT_TARGET_CPU_UTILIZATION)
        provisioning_parser.add_argument("--target-memory-utilization",
                                         help="Target average memory utilization in percent (not with v1)",
                                         type=int, default=None)
        provisioning_parser.add_argument(
            "--autoscaling-api-version",
            help=AUTOSCALING_API_VERSION_HELP,
            choices=supported_autoscaling_versions() + [specs.AUTO_API_VERSION],
            default=specs.DEFAULT_AUTOSCALING_API_VERSION,
        )
        label_parser = parser.add_argument_group("Labels", LABEL_LONG_HELP)
        label_parser.add_argument(
            "--label",
            default=[],
            help="Pod label, also used as selector",
            action="append",
            type=KeyValue,
            dest="labels",
        )

        parser.parse_args(args, namespace=self)
        self.labels = {label.key: label.value for label in self.labels} or dict(specs.DEFAULT_LABELS)

    def provisioning_spec(self):
        return specs.ProvisioningSpec(
            namespace=self.namespace,
            deployment_name=self.deployment_name,
            autoscaler_name=self.autoscaler_name,
            image=self.image,
            container_port=self.container_port,
            replicas=self.replicas,
            cpu_request=self.cpu_request,
            memory_request=self.memory_request,
            labels=dict(self.labels),
            min_replicas=self.min_replicas,
            max_replicas=self.max_replicas,
            target_cpu_utilization=self.target_cpu_utilization,
            target_memory_utilization=self.target_memory_utilization,
            autoscaling_api_version=self.autoscaling_api_version,
        )

    def __repr__(self):
        return "Configuration({})".format(
            ", ".join(
                "{}={}".format(key, self.__dict__[key])
                for key in vars(self)
                if not key.startswith("_") and not key.isupper() and "token" not in key
            )
        )


class KeyValue(object):
    def __init__(self, arg):
        try:
            self.key, self.value = arg.split("=", 1)
        except ValueError:
            raise InvalidConfigurationException("Expected <key>=<value>, got {!r}".format(arg))
        if not self.key:
            raise InvalidConfigurationException("Expected <key>=<value>, got {!r}".format(arg))

    def __eq__(self, other):
        if not isinstance(other, self.__class__):
            return False
        return other.key == self.key and other.value == self.value

    def __repr__(self):
        return "KeyValue({}={})".format(self.key, self.value)


class InvalidConfigurationException(ValueError):
    pass
