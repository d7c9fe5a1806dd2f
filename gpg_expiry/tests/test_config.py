# Copyright 2020-present Kensho Technologies, LLC.
import os

from voluptuous import Invalid

from ..config import (
    GPG_BINARY_ENVVAR,
    ExpiresConfig,
    NoticeConfig,
    get_date_binary,
    get_gpg_binary,
    validate_expires_config,
    validate_notice_config,
)
from .utils import EnvvarCleanupTestCase


def _expires_options(**overrides):
    options = {
        "after": "yesterday",
        "before": "+30days",
        "after_epoch": 1000,
        "before_epoch": 2000,
        "warn": False,
        "capabilities": "e",
        "output_format": "fpr",
        "quiet": False,
        "fingerprints": (),
    }
    options.update(overrides)
    return options


def _notice_options(**overrides):
    options = {
        "subject": "GPG Key Expiry Notice",
        "encrypt": True,
        "sign_as": None,
        "output_directory": "mails",
        "to_stdout": False,
    }
    options.update(overrides)
    return options


class TestExpiresConfig(EnvvarCleanupTestCase):
    def test_valid(self):
        config = validate_expires_config(**_expires_options())
        self.assertIsInstance(config, ExpiresConfig)
        self.assertEqual(config.before_epoch, 2000)
        with self.assertRaises(AttributeError):
            config.warn = True  # configurations are immutable

    def test_equal_bounds_are_allowed(self):
        validate_expires_config(**_expires_options(after_epoch=2000))

    def test_inverted_window(self):
        with self.assertRaisesRegex(Invalid, "yesterday \\(3000\\) is after \\+30days"):
            validate_expires_config(**_expires_options(after_epoch=3000))

    def test_invalid_format(self):
        with self.assertRaisesRegex(Invalid, "Invalid format"):
            validate_expires_config(**_expires_options(output_format="json"))

    def test_empty_capabilities(self):
        with self.assertRaises(Invalid):
            validate_expires_config(**_expires_options(capabilities=""))

    def test_missing_option(self):
        options = _expires_options()
        del options["quiet"]
        with self.assertRaises(Invalid):
            validate_expires_config(**options)


class TestNoticeConfig(EnvvarCleanupTestCase):
    def test_valid(self):
        config = validate_notice_config(**_notice_options())
        self.assertEqual(config, NoticeConfig("GPG Key Expiry Notice", True, None, "mails", False))
        validate_notice_config(**_notice_options(output_directory=None, to_stdout=True))

    def test_exactly_one_output(self):
        with self.assertRaisesRegex(Invalid, "which one"):
            validate_notice_config(**_notice_options(to_stdout=True))
        with self.assertRaisesRegex(Invalid, "which one"):
            validate_notice_config(**_notice_options(output_directory=None))

    def test_empty_signer(self):
        with self.assertRaises(Invalid):
            validate_notice_config(**_notice_options(sign_as=""))


class TestBinaries(EnvvarCleanupTestCase):
    def test_defaults(self):
        self.assertEqual(get_gpg_binary(), "gpg")
        self.assertEqual(get_date_binary(), "date")

    def test_overrides(self):
        os.environ[GPG_BINARY_ENVVAR] = "/usr/local/bin/gpg2"
        self.assertEqual(get_gpg_binary(), "/usr/local/bin/gpg2")
