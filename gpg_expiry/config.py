# Copyright 2020-present Kensho Technologies, LLC.
"""Options for the two commands, gathered once and passed around as immutable tuples."""
from collections import namedtuple
import os

from voluptuous import All, Any, In, Invalid, Schema

from .utils import NON_EMPTY_STRING


DEFAULT_BEFORE = "+30days"
DEFAULT_AFTER = "yesterday"
ALL_AFTER = "@0"  # the start of the epoch, i.e. every expiration date
DEFAULT_CAPABILITIES = "e"
DEFAULT_OUTPUT_FORMAT = "fpr"
OUTPUT_FORMATS = ("fpr", "fprdate", "list", "colon")
DEFAULT_SUBJECT = "GPG Key Expiry Notice"

GPG_BINARY_ENVVAR = "GPG_EXPIRY_GPG_BINARY"
DATE_BINARY_ENVVAR = "GPG_EXPIRY_DATE_BINARY"
_DEFAULT_GPG_BINARY = "gpg"
_DEFAULT_DATE_BINARY = "date"

ExpiresConfig = namedtuple(
    "ExpiresConfig",
    [
        "after",
        "before",
        "after_epoch",
        "before_epoch",
        "warn",
        "capabilities",
        "output_format",
        "quiet",
        "fingerprints",
    ],
)

NoticeConfig = namedtuple(
    "NoticeConfig", ["subject", "encrypt", "sign_as", "output_directory", "to_stdout"]
)


def _ordered_window(config_dict):
    """Reject windows whose lower bound lies after their upper bound."""
    if config_dict["after_epoch"] > config_dict["before_epoch"]:
        raise Invalid(
            "{} ({}) is after {} ({})".format(
                config_dict["after"],
                config_dict["after_epoch"],
                config_dict["before"],
                config_dict["before_epoch"],
            )
        )
    return config_dict


def _single_output_target(config_dict):
    """Require exactly one of an output directory and standard output."""
    has_directory = config_dict["output_directory"] is not None
    if has_directory == config_dict["to_stdout"]:
        raise Invalid("standard output, or directory, which one?")
    return config_dict


_EXPIRES_SCHEMA = Schema(
    All(
        Schema(
            {
                "after": NON_EMPTY_STRING,
                "before": NON_EMPTY_STRING,
                "after_epoch": int,
                "before_epoch": int,
                "warn": bool,
                "capabilities": NON_EMPTY_STRING,
                "output_format": In(OUTPUT_FORMATS, msg="Invalid format"),
                "quiet": bool,
                "fingerprints": tuple,
            },
            required=True,
        ),
        _ordered_window,
    )
)

_NOTICE_SCHEMA = Schema(
    All(
        Schema(
            {
                "subject": NON_EMPTY_STRING,
                "encrypt": bool,
                "sign_as": Any(None, NON_EMPTY_STRING),
                "output_directory": Any(None, NON_EMPTY_STRING),
                "to_stdout": bool,
            },
            required=True,
        ),
        _single_output_target,
    )
)


def validate_expires_config(**options) -> ExpiresConfig:
    """Build an ExpiresConfig, raising voluptuous.Invalid on bad or inconsistent options"""
    return ExpiresConfig(**_EXPIRES_SCHEMA(options))


def validate_notice_config(**options) -> NoticeConfig:
    """Build a NoticeConfig, raising voluptuous.Invalid on bad or inconsistent options"""
    return NoticeConfig(**_NOTICE_SCHEMA(options))


def get_gpg_binary():
    """Get the gpg executable, overridable with the `GPG_EXPIRY_GPG_BINARY` env var"""
    return os.environ.get(GPG_BINARY_ENVVAR) or _DEFAULT_GPG_BINARY


def get_date_binary():
    """Get the date executable, overridable with the `GPG_EXPIRY_DATE_BINARY` env var"""
    return os.environ.get(DATE_BINARY_ENVVAR) or _DEFAULT_DATE_BINARY
