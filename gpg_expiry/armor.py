# Copyright 2020-present Kensho Technologies, LLC.
"""Encrypt and sign notice bodies through GPGME."""
import logging

import gpg
from voluptuous import Any, validate

from .exceptions import ArmorError
from .utils import ENCODING, NON_EMPTY_STRING


logger = logging.getLogger(__name__)

OPTIONAL_STRING = Any(None, NON_EMPTY_STRING)


def _get_context(home_dir):
    """Make a GPGME context producing ASCII armored output."""
    return gpg.Context(
        home_dir=home_dir,
        armor=True,
        pinentry_mode=gpg.constants.PINENTRY_MODE_LOOPBACK,
    )


def _encrypt(ctx, body, encrypt_to, sign_as):
    """Encrypt the body to the given key, signing it as well when a signer is given."""
    recipient = ctx.get_key(encrypt_to)
    if sign_as is not None:
        ctx.signers = [ctx.get_key(sign_as, secret=True)]
    ciphertext, _, _ = ctx.encrypt(body, recipients=[recipient], sign=sign_as is not None)
    return ciphertext


def _clear_sign(ctx, body, sign_as):
    """Clear-sign the body, keeping it readable."""
    ctx.signers = [ctx.get_key(sign_as, secret=True)]
    signed_data, _ = ctx.sign(body, mode=gpg.constants.sig.mode.CLEAR)
    return signed_data


@validate(body=str, encrypt_to=OPTIONAL_STRING, sign_as=OPTIONAL_STRING)
def armor_body(body, encrypt_to=None, sign_as=None, home_dir=None):
    """Optionally encrypt and sign a message body.

    Args:
        body: string, the plain text body
        encrypt_to: string, fingerprint of the key to encrypt to. If omitted the body stays
                    readable and is only clear-signed when sign_as is given.
        sign_as: string, fingerprint or user id of the secret key to sign with
        home_dir: string, the GnuPG home directory, defaults to gpg's own default

    Returns:
        string, the armored body, or the body itself when neither option is given

    Raises:
        ArmorError, if a key is missing or gpg fails to encrypt or sign
    """
    if encrypt_to is None and sign_as is None:
        return body

    with _get_context(home_dir) as ctx:
        try:
            if encrypt_to is not None:
                logger.debug("Encrypting notice body to %s", encrypt_to)
                armored = _encrypt(ctx, body.encode(ENCODING), encrypt_to, sign_as)
            else:
                logger.debug("Clear-signing notice body as %s", sign_as)
                armored = _clear_sign(ctx, body.encode(ENCODING), sign_as)
        except (gpg.errors.GpgError, KeyError) as e:
            raise ArmorError(
                "Could not {} notice body: {}".format(
                    "encrypt" if encrypt_to is not None else "sign", e
                )
            )
    return armored.decode(ENCODING)
