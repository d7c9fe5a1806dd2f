# Copyright 2020-present Kensho Technologies, LLC.
"""Parse the colon-delimited key listing produced by `gpg --with-colons --with-fingerprint`.

Only a handful of fields matter here (1-indexed, as in gpg's doc/DETAILS):
    1: record type, e.g. pub, sub, fpr, uid
    2: validity, e.g. u (ultimate), f (full), e (expired), r (revoked)
    7: expiration date in seconds since the epoch, empty for keys that never expire
    10: the fingerprint on fpr records, the user id on uid records
    12: key capabilities on pub and sub records, e.g. "scESC"
"""
from collections import namedtuple
import logging
import re
from typing import Iterable, Iterator

from .exceptions import RecordFormatError


logger = logging.getLogger(__name__)

PRIMARY_KEY = "pub"
SUBKEY = "sub"
FINGERPRINT = "fpr"
IDENTITY = "uid"
KEY_RECORD_TYPES = frozenset({PRIMARY_KEY, SUBKEY})
NO_EXPIRATION = 0

_RECORD_TYPE_FIELD = 0
_VALIDITY_FIELD = 1
_EXPIRY_FIELD = 6
_VALUE_FIELD = 9
_CAPABILITIES_FIELD = 11
_ESCAPED_BYTE = re.compile(r"\\x([0-9a-fA-F]{2})")

KeyRecord = namedtuple(
    "KeyRecord", ["record_type", "validity", "expiry_epoch", "capabilities", "value"]
)
KeySummary = namedtuple("KeySummary", ["fingerprint", "expiry_epoch", "capabilities"])


def _get_field(fields, index):
    """Return the field at the given index, or an empty string if the record is too short."""
    if index < len(fields):
        return fields[index]
    return ""


def _parse_expiry(raw_expiry, line):
    """Convert the expiration field to epoch seconds, treating an empty field as no expiration."""
    if not raw_expiry:
        return NO_EXPIRATION
    if not raw_expiry.isdigit():
        raise RecordFormatError(
            "Found non-numeric expiration date {!r} in record {!r}".format(raw_expiry, line)
        )
    return int(raw_expiry)


def unescape_value(value: str) -> str:
    """Decode the \\xHH escapes gpg uses for colons and control characters in user ids."""
    if "\\x" not in value:
        return value
    raw = _ESCAPED_BYTE.sub(lambda match: chr(int(match.group(1), 16)), value)
    # Escaped bytes may be parts of a multi-byte UTF-8 sequence.
    try:
        return raw.encode("latin-1").decode("utf-8")
    except (UnicodeEncodeError, UnicodeDecodeError):
        return raw


def parse_record(line: str) -> KeyRecord:
    """Parse a single colon-delimited record."""
    fields = line.rstrip("\r\n").split(":")
    record_type = fields[_RECORD_TYPE_FIELD]
    value = _get_field(fields, _VALUE_FIELD)
    if record_type == IDENTITY:
        value = unescape_value(value)
    return KeyRecord(
        record_type=record_type,
        validity=_get_field(fields, _VALIDITY_FIELD),
        expiry_epoch=_parse_expiry(_get_field(fields, _EXPIRY_FIELD), line),
        capabilities=_get_field(fields, _CAPABILITIES_FIELD),
        value=value,
    )


def iter_records(lines: Iterable[str]) -> Iterator[KeyRecord]:
    """Parse every non-blank line into a KeyRecord."""
    for line in lines:
        if not line.strip():
            continue
        yield parse_record(line)


def classify_records(lines: Iterable[str]) -> Iterator[KeySummary]:
    """Reduce a key listing to one KeySummary per fingerprint record.

    gpg prints each fpr record right after the pub or sub record it belongs to, so the
    expiration and capabilities of the most recently seen pub/sub record are attached to
    the next fingerprint. This is a single forward pass over the input; the ordering is
    trusted, not checked.

    Args:
        lines: iterable of colon-delimited records

    Yields:
        KeySummary for every fpr record, in input order. A fingerprint seen before any
        pub/sub record gets no expiration (0) and no capabilities ("").
    """
    current_expiry = NO_EXPIRATION
    current_capabilities = ""
    for record in iter_records(lines):
        if record.record_type in KEY_RECORD_TYPES:
            current_expiry = record.expiry_epoch
            current_capabilities = record.capabilities
        elif record.record_type == FINGERPRINT:
            yield KeySummary(record.value, current_expiry, current_capabilities)


def format_summary(summary: KeySummary) -> str:
    """Render a summary as the space-delimited "<FPR> <EXPIRY_EPOCH> <CAPS>" line."""
    return "{} {} {}".format(summary.fingerprint, summary.expiry_epoch, summary.capabilities)
