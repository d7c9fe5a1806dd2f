# Copyright 2020-present Kensho Technologies, LLC.
"""The narrow interface to the OpenPGP keyring, and its implementation on top of gpg."""
import logging
import subprocess
from typing import Iterable, List, Optional

from voluptuous import validate

from .config import get_gpg_binary
from .exceptions import KeyLookupError
from .utils import ENCODING, NON_EMPTY_STRING, gpg_environment


logger = logging.getLogger(__name__)

_LIST_ARGS = ["--list-public-keys", "--with-colons", "--with-fingerprint"]


class Keyring:
    """Everything the commands need from a keyring. The keyring is never modified."""

    def list_public_keys(self, fingerprints: Iterable[str] = ()) -> List[str]:
        """Return the colon listing of all public keys, or of the given ones only."""
        raise NotImplementedError("you must override me")

    def lookup_key(self, fingerprint: str) -> List[str]:
        """Return the colon listing of a single key, raising KeyLookupError if it is unknown."""
        raise NotImplementedError("you must override me")

    def display_key(self, fingerprint: str, colons: bool = False) -> str:
        """Return the listing of a key as gpg shows it to users, or in colon format."""
        raise NotImplementedError("you must override me")

    def armor_transform(
        self, body: str, encrypt_to: Optional[str] = None, sign_as: Optional[str] = None
    ) -> str:
        """Encrypt and/or sign the body, or return it untouched when neither is requested."""
        raise NotImplementedError("you must override me")


class GpgKeyring(Keyring):
    """Keyring backed by the gpg executable and GPGME.

    Args:
        home_dir: string, the GnuPG home directory. Defaults to gpg's own choice
                  ($GNUPGHOME or ~/.gnupg).
        gpg_binary: string, the gpg executable. Defaults to $GPG_EXPIRY_GPG_BINARY or "gpg".
    """

    def __init__(self, home_dir=None, gpg_binary=None):
        self.home_dir = home_dir
        self.gpg_binary = gpg_binary or get_gpg_binary()

    def _build_command(self, gpg_args):
        """Produce the full gpg command line, always in batch mode."""
        return [self.gpg_binary, "--batch"] + list(gpg_args)

    def _run(self, gpg_args):
        """Run gpg, returning the completed process without checking its exit status."""
        command = self._build_command(gpg_args)
        logger.debug("Running %s", command)
        try:
            return subprocess.run(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                env=gpg_environment(self.home_dir),
            )
        except OSError as e:
            raise KeyLookupError("Could not run {}: {}".format(self.gpg_binary, e))

    def list_public_keys(self, fingerprints=()):
        # An unknown entry in the restriction list makes gpg exit non-zero, but the keys
        # it did find are still listed.
        completed = self._run(_LIST_ARGS + list(fingerprints))
        if completed.returncode != 0:
            logger.warning(
                "gpg exited with status %s while listing keys: %s",
                completed.returncode,
                completed.stderr.decode(ENCODING, "replace").strip(),
            )
        return completed.stdout.decode(ENCODING, "replace").splitlines()

    @validate(fingerprint=NON_EMPTY_STRING)
    def lookup_key(self, fingerprint):
        completed = self._run(_LIST_ARGS + [fingerprint])
        if completed.returncode != 0:
            raise KeyLookupError(
                "Invalid key {}: {}".format(
                    fingerprint, completed.stderr.decode(ENCODING, "replace").strip()
                )
            )
        return completed.stdout.decode(ENCODING, "replace").splitlines()

    @validate(fingerprint=NON_EMPTY_STRING, colons=bool)
    def display_key(self, fingerprint, colons=False):
        gpg_args = ["--list-keys"]
        if colons:
            gpg_args.append("--with-colons")
        completed = self._run(gpg_args + [fingerprint])
        if completed.returncode != 0:
            raise KeyLookupError(
                "Could not list key {}: {}".format(
                    fingerprint, completed.stderr.decode(ENCODING, "replace").strip()
                )
            )
        return completed.stdout.decode(ENCODING, "replace")

    def armor_transform(self, body, encrypt_to=None, sign_as=None):
        if encrypt_to is None and sign_as is None:
            return body

        # GPGME is only needed once a notice is actually encrypted or signed.
        from .armor import armor_body

        return armor_body(body, encrypt_to=encrypt_to, sign_as=sign_as, home_dir=self.home_dir)
