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


import datetime
import json
import logging
import sys

from .errors import ProvisioningError

PLAIN_FORMAT = "[%(asctime)s|%(levelname)7s] %(message)s [%(name)s]"


class JsonFormatter(logging.Formatter):
    """One logstash-style JSON object per line

    When a ProvisioningError is among the arguments of the message, its class
    and HTTP status are added as `error` and `status_code`, so failed runs can
    be told apart without parsing the message.
    """

    def format(self, record):
        fields = {
            "@timestamp": self.format_time(record),
            "@version": 1,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        error = _provisioning_error(record)
        if error is not None:
            fields["error"] = type(error).__name__
            if error.status_code is not None:
                fields["status_code"] = error.status_code
        if record.exc_info:
            fields["throwable"] = self.formatException(record.exc_info)
        return json.dumps(fields)

    @staticmethod
    def format_time(record):
        """ELK is strict about it's timestamp, so use more strict ISO-format"""
        dt = datetime.datetime.fromtimestamp(record.created)
        return dt.isoformat()


def _provisioning_error(record):
    if record.exc_info and isinstance(record.exc_info[1], ProvisioningError):
        return record.exc_info[1]
    args = record.args if isinstance(record.args, tuple) else ()
    for arg in args:
        if isinstance(arg, ProvisioningError):
            return arg
    return None


def init_logging(config):
    """Set up logging system

    - Always logs to stdout
    - Select format from config.log_format
    -- json - Use the logstash formatter to output json
    -- plain or blank - Use plain formatting
    """
    root = logging.getLogger()
    root.setLevel(logging.INFO)
    if config.debug:
        root.setLevel(logging.DEBUG)
    root.addHandler(_create_default_handler(config))
    _set_special_levels(config)


def _create_default_handler(config):
    handler = logging.StreamHandler(sys.stdout)
    if _json_format(config):
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT))
    return handler


def _set_special_levels(config):
    # The k8s library dumps full requests and responses at DEBUG, only wanted with --debug
    if not config.debug:
        logging.getLogger("k8s").setLevel(logging.INFO)
    logging.getLogger("urllib3").setLevel(logging.WARN)


def _json_format(config):
    return config.log_format == "json"
