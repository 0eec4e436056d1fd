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
import functools
import logging

import requests

LOG = logging.getLogger(__name__)


class ProvisioningError(Exception):
    """Base class for everything that makes a provisioning run fail"""

    def __init__(self, message, status_code=None):
        super(ProvisioningError, self).__init__(message)
        self.status_code = status_code


class ConfigError(ProvisioningError):
    """The kubeconfig could not be read or does not describe a usable cluster"""


class ClusterConnectionError(ProvisioningError):
    """The API-server could not be reached, or refused our credentials"""


class ValidationError(ProvisioningError):
    """The object was rejected as invalid, either locally or by the API-server"""


class ConflictError(ProvisioningError):
    """An object with the same name already exists in the namespace"""


class UnsupportedVersionError(ProvisioningError):
    """The requested API version is not served by the cluster, or not known to us"""


def translate_api_errors(func):
    """Turn exceptions from the k8s client library into ProvisioningErrors

    The server's own status message is kept as the message, and the original
    exception is chained as the cause.
    """

    @functools.wraps(func)
    def _wrap(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except requests.RequestException as e:
            # k8s client exceptions carry the response, transport failures do not
            if e.response is None:
                raise ClusterConnectionError("Unable to reach API-server: {}".format(e)) from e
            raise error_from_response(e.response) from e

    return _wrap


def error_from_response(response):
    status_code = response.status_code
    status = _status_json(response)
    message = "{} {}: {}".format(status_code, status.get("reason") or response.reason, _status_message(response, status))
    if status_code == 409:
        exc = ConflictError
    elif status_code in (400, 422):
        exc = ValidationError
    elif status_code in (401, 403):
        exc = ClusterConnectionError
    elif status_code == 404 and not (status.get("details") or {}).get("name"):
        # A named NotFound is about a specific object (typically the namespace),
        # an anonymous one means the collection URL itself is not served
        exc = UnsupportedVersionError
    else:
        exc = ProvisioningError
    return exc(message, status_code=status_code)


def _status_json(response):
    try:
        status = response.json()
    except ValueError:
        LOG.debug("Response from API-server was not JSON: %r", response.text)
        return {}
    return status if isinstance(status, dict) else {}


def _status_message(response, status):
    message = status.get("message")
    if message:
        return message
    text = (response.text or "").strip()
    return text if text else "no message from API-server"
