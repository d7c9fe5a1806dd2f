# Copyright 2020-present Kensho Technologies, LLC.
import os
import unittest

from . import KEYRING_LISTING, split_listing
from ..config import DATE_BINARY_ENVVAR, GPG_BINARY_ENVVAR
from ..exceptions import ArmorError, KeyLookupError
from ..keyring import Keyring


_ENVVARS = (GPG_BINARY_ENVVAR, DATE_BINARY_ENVVAR, "GNUPGHOME")


class FakeKeyring(Keyring):
    """A keyring serving a fixed colon listing, recording what it was asked to do.

    The armor transform does not encrypt or sign anything, it only marks the body so tests can
    tell which operation was requested.
    """

    def __init__(self, listing=KEYRING_LISTING, fail_armor=False):
        self.listing = listing
        self.keys = split_listing(listing)
        self.fail_armor = fail_armor
        self.listed = []
        self.looked_up = []
        self.armored = []

    def _find_key(self, fingerprint):
        for lines in self.keys.values():
            if any(line.startswith("fpr:") and line.split(":")[9] == fingerprint for line in lines):
                return lines
        return None

    def list_public_keys(self, fingerprints=()):
        self.listed.append(tuple(fingerprints))
        if not fingerprints:
            return self.listing.splitlines()
        lines = []
        for fingerprint in fingerprints:
            key_lines = self._find_key(fingerprint.upper())
            if key_lines is not None:
                lines.extend(key_lines)
        return lines

    def lookup_key(self, fingerprint):
        self.looked_up.append(fingerprint)
        lines = self._find_key(fingerprint)
        if lines is None:
            raise KeyLookupError("Invalid key {}: No public key".format(fingerprint))
        return list(lines)

    def display_key(self, fingerprint, colons=False):
        lines = self._find_key(fingerprint)
        if lines is None:
            raise KeyLookupError("Could not list key {}".format(fingerprint))
        if colons:
            return "\n".join(lines) + "\n"
        return "pub   {}\n\n".format(fingerprint)

    def armor_transform(self, body, encrypt_to=None, sign_as=None):
        self.armored.append((body, encrypt_to, sign_as))
        if self.fail_armor:
            raise ArmorError("Could not encrypt notice body: unusable public key")
        if encrypt_to is not None:
            return "-----BEGIN PGP MESSAGE-----\nto={} signer={}\n".format(encrypt_to, sign_as)
        if sign_as is not None:
            return "-----BEGIN PGP SIGNED MESSAGE-----\n{}signer={}\n".format(body, sign_as)
        return body


class EnvvarCleanupTestCase(unittest.TestCase):
    """A helper to leave env vars untouched

    The binaries and home directory used by the commands are configured through environment
    variables. Their values are stored before every test method and restored afterwards, so
    tests may modify them freely.
    """

    def setUp(self) -> None:
        """Store the old values of the env vars"""
        self.old_values = {envvar: os.environ.get(envvar) for envvar in _ENVVARS}
        for envvar in _ENVVARS:
            os.environ.pop(envvar, None)  # it might not exist, so use pop

    def tearDown(self) -> None:
        """Reset the env vars to what they were before the test"""
        for envvar, old_value in self.old_values.items():
            if old_value is not None:
                os.environ[envvar] = old_value
            else:
                os.environ.pop(envvar, None)
