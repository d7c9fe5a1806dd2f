# Copyright 2020-present Kensho Technologies, LLC.
import logging
import string
from typing import IO, Iterator

from .exceptions import FingerprintError


logger = logging.getLogger(__name__)

FINGERPRINT_LENGTH = 40
ALLOWED_FINGERPRINT_CHARACTERS = frozenset(string.digits + "ABCDEF")


def is_fingerprint_valid(fingerprint: str) -> bool:
    """Validate that a normalized fingerprint is exactly 40 uppercase hex digits"""
    if len(fingerprint) != FINGERPRINT_LENGTH:
        return False
    elif set(fingerprint).difference(ALLOWED_FINGERPRINT_CHARACTERS):
        return False
    else:
        return True


def normalize_fingerprint(value: str) -> str:
    """Uppercase a fingerprint and drop any whitespace, then validate it.

    Args:
        value: string, a fingerprint as a user may type or paste it,
               e.g. "56bc 24e2 0c87 c09d 3f8c  76a9 6fd2 0a30 75cf faf2"

    Returns:
        string, the 40 character uppercase fingerprint

    Raises:
        FingerprintError, if the result is not 40 hexadecimal digits
    """
    if not isinstance(value, str):
        raise FingerprintError("Found fingerprint of type {} instead of `str`".format(type(value)))
    fingerprint = "".join(value.upper().split())
    if not is_fingerprint_valid(fingerprint):
        raise FingerprintError("Invalid fingerprint {}".format(value))
    return fingerprint


def read_fingerprint_lines(stream: IO[str]) -> Iterator[str]:
    """Yield the stripped, non-blank lines of a text stream, without validating them."""
    for line in stream:
        line = line.strip()
        if line:
            yield line
