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

from setuptools import setup, find_packages


def read(filename):
    with open(os.path.join(os.path.dirname(__file__), filename)) as f:
        return f.read()


GENERIC_REQ = [
    "ConfigArgParse >= 1.5.3",
    "PyYAML >= 6.0",
    "pinject >= 0.14.1",
    "decorator < 5.0.0",  # transitive dep from pinject, which relies on the 4.x API
    "six >= 1.12.0",  # transitive dep from pinject
    "k8s >= 0.24.1",
]

DEPLOY_REQ = [
    "urllib3 >= 1.26.17",
    "requests >= 2.31.0",
]

FLAKE8_REQ = [
    "flake8-print >= 3.1.4",
    "flake8-comprehensions >= 1.4.1",
    "pep8-naming >= 0.11.1",
    "flake8 >= 3.9.0",
]

TESTS_REQ = [
    "pytest-cov >= 4.1.0",
    "pytest-helpers-namespace >= 2021.12.29",
    "pytest >= 7.4.2",
    "pyaml >= 19.4.1",
]

DEV_TOOLS = [
    "tox >= 3.14.5",
    "black ~= 22.0",
]


if __name__ == "__main__":
    setup(
        name="hpa-provisioner",
        author="FINN Team Infrastructure",
        author_email="FINN-TechteamInfrastruktur@finn.no",
        version="1.0",
        packages=find_packages(exclude=("tests", "tests.*")),
        zip_safe=True,
        include_package_data=True,
        # Requirements
        install_requires=GENERIC_REQ + DEPLOY_REQ,
        extras_require={
            "dev": TESTS_REQ + FLAKE8_REQ + DEV_TOOLS,
            "test": TESTS_REQ,
            "ci": DEV_TOOLS,
        },
        # Metadata
        description="Create a Deployment and a HorizontalPodAutoscaler scaling it",
        long_description=read("README.md"),
        # Entrypoints
        entry_points={
            "console_scripts": [
                "hpa-provisioner = hpa_provisioner:main",
            ]
        },
    )
