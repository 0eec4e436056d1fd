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
import atexit
import base64
import binascii
import logging
import os
import shutil
import tempfile

import yaml
from k8s import config as k8s_config
from k8s.client import Client
from requests.adapters import HTTPAdapter

from .errors import ConfigError

LOG = logging.getLogger(__name__)


class KubeConfig(object):
    """Connection parameters for one context of a kubeconfig file"""

    def __init__(self, context, server, api_cert=None, insecure=False, token=None, client_cert=None,
                 client_key=None):
        self.context = context
        self.server = server
        self.api_cert = api_cert
        self.insecure = insecure
        self.token = token
        self.client_cert = client_cert
        self.client_key = client_key

    @property
    def verify_ssl(self):
        if self.insecure:
            return False
        return self.api_cert if self.api_cert else True

    def __repr__(self):
        return "KubeConfig(context={}, server={}, api_cert={}, insecure={}, client_cert={})".format(
            self.context, self.server, self.api_cert, self.insecure, self.client_cert)


def load_kubeconfig(path, context=None):
    """Read the kubeconfig at path, and resolve the selected (default: current) context"""
    if not path:
        raise ConfigError("No kubeconfig given, and no home directory to look for one in")
    try:
        with open(path, "r") as fobj:
            config = yaml.safe_load(fobj)
    except IOError as e:
        raise ConfigError("Unable to read kubeconfig {}: {}".format(path, e)) from e
    except yaml.YAMLError as e:
        raise ConfigError("Unable to parse kubeconfig {}: {}".format(path, e)) from e
    if not isinstance(config, dict):
        raise ConfigError("Kubeconfig {} is not a YAML mapping".format(path))
    return _Resolver(path, config).resolve(context)


def init_k8s_client(kubeconfig, debug=False):
    """Point the k8s library at the cluster described by kubeconfig"""
    k8s_config.api_server = kubeconfig.server
    if kubeconfig.token:
        k8s_config.api_token = kubeconfig.token
    if kubeconfig.client_cert:
        k8s_config.cert = (kubeconfig.client_cert, kubeconfig.client_key)
    if not kubeconfig.token and not kubeconfig.client_cert:
        LOG.warning("Context %s has no token or client certificate, requests will be anonymous", kubeconfig.context)
    k8s_config.verify_ssl = kubeconfig.verify_ssl
    k8s_config.debug = debug
    _disable_retries()
    LOG.debug("Using %r", kubeconfig)


def _disable_retries():
    """Send each request once, the k8s library otherwise retries every method (POST included) on 429 and 5xx"""
    adapter = HTTPAdapter(max_retries=0)
    for prefix in ("http://", "https://"):
        Client._session.mount(prefix, adapter)


class _Resolver(object):
    def __init__(self, path, config):
        self._path = path
        self._base_dir = os.path.dirname(os.path.abspath(path))
        self._config = config
        self._workdir = None

    def resolve(self, context_name=None):
        if not context_name:
            context_name = self._config.get(u"current-context")
        if not context_name:
            raise ConfigError("Kubeconfig {} has no current-context, and no context was selected".format(self._path))
        context = self._find_named_item(u"contexts", context_name).get(u"context") or {}
        cluster_name = context.get(u"cluster")
        if not cluster_name:
            raise ConfigError("Context {} in kubeconfig {} does not name a cluster".format(context_name, self._path))
        cluster = self._find_named_item(u"clusters", cluster_name).get(u"cluster") or {}
        server = cluster.get(u"server")
        if not server:
            raise ConfigError("Cluster {} in kubeconfig {} has no server".format(cluster_name, self._path))
        user = {}
        if context.get(u"user"):
            user = self._find_named_item(u"users", context[u"user"]).get(u"user") or {}
        client_cert = self._file_or_data(user, u"client-certificate")
        client_key = self._file_or_data(user, u"client-key")
        if bool(client_cert) != bool(client_key):
            raise ConfigError("User {} in kubeconfig {} needs both client-certificate and client-key".format(
                context[u"user"], self._path))
        return KubeConfig(context=context_name,
                          server=server.rstrip("/"),
                          api_cert=self._file_or_data(cluster, u"certificate-authority"),
                          insecure=bool(cluster.get(u"insecure-skip-tls-verify", False)),
                          token=self._token(user),
                          client_cert=client_cert,
                          client_key=client_key)

    def _find_named_item(self, section, name):
        for item in self._config.get(section) or []:
            if item.get(u"name") == name:
                return item
        raise ConfigError("Unable to find {} {} in kubeconfig {}".format(section[:-1], name, self._path))

    def _token(self, user):
        if user.get(u"token"):
            return user[u"token"]
        token_file = user.get(u"tokenFile")
        if token_file:
            try:
                with open(self._resolve_path(token_file), "r") as fobj:
                    return fobj.read().strip()
            except IOError as e:
                raise ConfigError("Unable to read tokenFile {}: {}".format(token_file, e)) from e
        return None

    def _file_or_data(self, section, key):
        """Resolve `key` as a path, or decode `key-data` to a file, since requests only accepts paths"""
        data = section.get(key + u"-data")
        if data:
            try:
                raw_data = base64.b64decode(data, validate=True)
            except (binascii.Error, ValueError) as e:
                raise ConfigError("Invalid base64 in {}-data in kubeconfig {}".format(key, self._path)) from e
            return self._save_to_file(key, raw_data)
        path = section.get(key)
        if path:
            return self._resolve_path(path)
        return None

    def _resolve_path(self, path):
        return os.path.join(self._base_dir, os.path.expanduser(path))

    def _save_to_file(self, name, raw_data):
        if self._workdir is None:
            self._workdir = tempfile.mkdtemp(prefix="hpa-provisioner-")
            atexit.register(shutil.rmtree, self._workdir, True)
        path = os.path.join(self._workdir, name)
        with open(path, "wb") as fobj:
            fobj.write(raw_data)
        return path
