# Copyright 2020-present Kensho Technologies, LLC.
class GpgExpiryError(Exception):
    """Base class for errors raised while inspecting keys or formatting notices."""


class RecordFormatError(GpgExpiryError):
    """Raise when a colon-delimited keyring record cannot be parsed."""


class FingerprintError(GpgExpiryError, ValueError):
    """Raise when a string is not a valid 40 hex digit fingerprint."""


class KeyLookupError(GpgExpiryError):
    """Raise when a key cannot be found, or does not resolve to exactly one key."""


class NoValidIdentitiesError(GpgExpiryError):
    """Raise when a key has no identity that is neither invalid, expired nor revoked."""


class ArmorError(GpgExpiryError):
    """Raise when gpg fails to encrypt or sign a notice body."""


class InvalidDateError(GpgExpiryError):
    """Raise when a date expression cannot be evaluated."""
