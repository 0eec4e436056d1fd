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
import sys

import pinject

from .cluster import ClusterClient
from .config import Configuration
from .errors import ProvisioningError, ConfigError
from .kubeconfig import load_kubeconfig, init_k8s_client
from .logsetup import init_logging
from .provisioner import Provisioner


class MainBindings(pinject.BindingSpec):
    def __init__(self, config: Configuration, log: logging.Logger):
        self._config = config
        self._log = log

    def configure(self, bind):
        bind("config", to_instance=self._config)
        bind("log", to_instance=self._log)
        bind("cluster_client", to_class=ClusterClient)
        bind("provisioner", to_class=Provisioner)


class Main(object):
    @pinject.copy_args_to_internal_fields
    def __init__(self, provisioner, config):
        pass

    def run(self):
        return self._provisioner.provision(self._config.provisioning_spec())


def main(args=None):
    cfg = Configuration(args)
    init_logging(cfg)
    log = logging.getLogger(__name__)
    log.debug("hpa-provisioner starting with configuration %r", cfg)

    try:
        kubeconfig = load_kubeconfig(cfg.kubeconfig, cfg.context)
    except ConfigError as e:
        log.error("Error building kubeconfig: %s", e)
        sys.exit(1)
    init_k8s_client(kubeconfig, cfg.debug)

    obj_graph = pinject.new_object_graph(modules=None, binding_specs=[MainBindings(cfg, log)])
    try:
        obj_graph.provide(Main).run()
    except ProvisioningError:
        # The Provisioner has already logged the failure
        sys.exit(1)
    log.info("Provisioning completed successfully!")


if __name__ == "__main__":
    main()
