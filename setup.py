# Copyright 2020-present Kensho Technologies, LLC.
import codecs
import logging
import os
import re

from setuptools import find_packages, setup


# Python documentation recommends a single source of truth for the package version.
#  https://packaging.python.org/guides/single-sourcing-package-version/
#  #single-sourcing-the-version

PACKAGE_NAME = "gpg_expiry"


logger = logging.getLogger(__name__)


def read_file(filename):
    """Read package file as text to get name and version"""
    # intentionally *not* adding an encoding option to open. See here:
    # https://github.com/pypa/virtualenv/issues/201#issuecomment-3145690
    here = os.path.abspath(os.path.dirname(__file__))
    with codecs.open(os.path.join(here, PACKAGE_NAME, filename), "r") as f:
        return f.read()


def find_version():
    """Only define version in one place"""
    version_file = read_file("__init__.py")
    version_match = re.search(r'^__version__ = ["\']([^"\']*)["\']', version_file, re.M)
    if version_match:
        return version_match.group(1)
    raise RuntimeError("Unable to find version string.")


def find_name():
    """Only define name in one place"""
    name_file = read_file("__init__.py")
    name_match = re.search(r'^__package_name__ = ["\']([^"\']*)["\']', name_file, re.M)
    if name_match:
        return name_match.group(1)
    raise RuntimeError("Unable to find name string.")


REQUIRED_PACKAGES = [
    "click>=7.0,<9",
    "funcy>=1.10,<3",
    "gpg>=1.10.0,<2",
    "voluptuous>=0.11.5,<1",
]
DEV_DEPENDENCIES = [
    "black",
    "flake8",
    "isort",
    "pytest>=5.3.4",
]
EXTRAS_REQUIRE = {"dev": DEV_DEPENDENCIES}

setup(
    name=find_name(),
    version=find_version(),
    description="List expiring GnuPG keys and format expiry notices for their owners",
    packages=find_packages(),
    install_requires=REQUIRED_PACKAGES,
    extras_require=EXTRAS_REQUIRE,
    entry_points={
        "console_scripts": [
            "gpg-expires=gpg_expiry.commands.list_expiring:main",
            "gpg-format-expiry-notice=gpg_expiry.commands.format_notice:main",
        ]
    },
    python_requires=">=3.6",
)
