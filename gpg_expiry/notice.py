# Copyright 2020-present Kensho Technologies, LLC.
"""Compose the reminder mails sent to owners of expiring keys."""
from collections import namedtuple
import logging
from typing import Iterable, Optional, Tuple

from voluptuous import Any, validate

from .dates import format_epoch
from .exceptions import KeyLookupError, NoValidIdentitiesError
from .fingerprints import normalize_fingerprint
from .keyring import Keyring
from .records import (
    FINGERPRINT,
    IDENTITY,
    KEY_RECORD_TYPES,
    NO_EXPIRATION,
    PRIMARY_KEY,
    iter_records,
)
from .utils import NON_EMPTY_STRING


logger = logging.getLogger(__name__)

GENERATOR = "gpg-format-expiry-notice"
MAIL_SUFFIX = ".mail"
# Identities that are not valid (n), expired (e) or revoked (r) receive no mail.
UNACCEPTABLE_VALIDITIES = frozenset("ner")

Notice = namedtuple("Notice", ["fingerprint", "recipient_uids", "expiry_epoch", "subject", "body"])

_BODY_TEMPLATE = (
    "This message is to remind you that your GPG key:\n"
    "> {fingerprint}\n"
    "Will expire on:\n"
    "> {expiry}\n"
)


def collect_key_details(lines: Iterable[str], fingerprint: str) -> Tuple[Tuple[str, ...], int]:
    """Find the usable identities and the expiration of a key in its colon listing.

    Args:
        lines: the colon listing of exactly one key
        fingerprint: string, the normalized fingerprint that was looked up. It may belong to
                     the primary key or to one of its subkeys.

    Returns:
        tuple of (recipient user ids in listing order without duplicates, expiration epoch
        of the key or subkey carrying the fingerprint)

    Raises:
        KeyLookupError, if the listing does not hold exactly one key, or lacks the fingerprint
    """
    recipient_uids = []
    primary_key_count = 0
    current_expiry = NO_EXPIRATION
    fingerprint_expiry = None
    for record in iter_records(lines):
        if record.record_type in KEY_RECORD_TYPES:
            current_expiry = record.expiry_epoch
            if record.record_type == PRIMARY_KEY:
                primary_key_count += 1
        elif record.record_type == FINGERPRINT and record.value.upper() == fingerprint:
            fingerprint_expiry = current_expiry
        elif record.record_type == IDENTITY and record.validity not in UNACCEPTABLE_VALIDITIES:
            if record.value not in recipient_uids:
                recipient_uids.append(record.value)

    if primary_key_count != 1:
        raise KeyLookupError(
            "Expected exactly one key for {}, found {}".format(fingerprint, primary_key_count)
        )
    if fingerprint_expiry is None:
        raise KeyLookupError("Fingerprint {} not found in its key listing".format(fingerprint))
    return tuple(recipient_uids), fingerprint_expiry


def compose_body(fingerprint: str, expiry_epoch: int) -> str:
    """The plain text reminder, before any encryption or signing"""
    return _BODY_TEMPLATE.format(fingerprint=fingerprint, expiry=format_epoch(expiry_epoch))


@validate(
    fingerprint=NON_EMPTY_STRING,
    subject=NON_EMPTY_STRING,
    encrypt=bool,
    sign_as=Any(None, NON_EMPTY_STRING),
)
def compose_notice(
    keyring: Keyring,
    fingerprint: str,
    subject: str,
    encrypt: bool = True,
    sign_as: Optional[str] = None,
) -> Notice:
    """Build the expiry notice for one key.

    Args:
        keyring: Keyring to look the key up in and to encrypt/sign with
        fingerprint: string, fingerprint of the key whose owner is notified
        subject: string, the mail subject
        encrypt: bool, whether to encrypt the body to the key itself
        sign_as: string, key to sign the body with. The signature is a clear signature
                 unless the body is also encrypted.

    Returns:
        Notice, with the body already encrypted and/or signed as requested

    Raises:
        FingerprintError, if the fingerprint is malformed
        KeyLookupError, if the key cannot be found or is ambiguous
        NoValidIdentitiesError, if every identity of the key is invalid, expired or revoked
        ArmorError, if encryption or signing fails
    """
    fingerprint = normalize_fingerprint(fingerprint)
    lines = keyring.lookup_key(fingerprint)
    recipient_uids, expiry_epoch = collect_key_details(lines, fingerprint)
    if not recipient_uids:
        raise NoValidIdentitiesError("No valid identities for {}".format(fingerprint))

    logger.info(
        "Composing notice for %s (expires %s) to %s",
        fingerprint,
        format_epoch(expiry_epoch),
        ", ".join(recipient_uids),
    )
    body = keyring.armor_transform(
        compose_body(fingerprint, expiry_epoch),
        encrypt_to=fingerprint if encrypt else None,
        sign_as=sign_as,
    )
    return Notice(fingerprint, recipient_uids, expiry_epoch, subject, body)


def render_notice(notice: Notice) -> str:
    """Render the notice as a mail: one To: header per identity, a subject, then the body."""
    headers = ["To: {}".format(uid) for uid in notice.recipient_uids]
    headers.append("Subject: {}".format(notice.subject))
    headers.append("X-Generator: {}".format(GENERATOR))
    return "\n".join(headers) + "\n\n" + notice.body


def notice_filename(fingerprint: str) -> str:
    """Name of the file a notice for the given key is written to."""
    return fingerprint + MAIL_SUFFIX
