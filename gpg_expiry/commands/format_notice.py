# Copyright 2020-present Kensho Technologies, LLC.
"""gpg-format-expiry-notice: write reminder mails for the owners of expiring keys."""
import logging
import os
from typing import Iterable, List, Optional

import click
from voluptuous import Invalid

from . import (
    CONTEXT_SETTINGS,
    ExitOneCommand,
    homedir_option,
    reject_empty_value,
    verbose_option,
    warn_about_unknown_options,
)
from ..config import DEFAULT_SUBJECT, NoticeConfig, validate_notice_config
from ..exceptions import FingerprintError, GpgExpiryError
from ..fingerprints import normalize_fingerprint, read_fingerprint_lines
from ..keyring import GpgKeyring, Keyring
from ..notice import compose_notice, notice_filename, render_notice
from ..utils import ENCODING, configure_logging


logger = logging.getLogger(__name__)

EPILOG = """\b
Examples:
    Generate a message for a key
        $ gpg-format-expiry-notice --stdout $key_fingerprint
    Generate messages for all expiring keys, one file each in ./dir
        $ gpg-expires | gpg-format-expiry-notice -f - -o ./dir
    Generate a message and mail it immediately
        $ gpg-format-expiry-notice --stdout $key_fingerprint | mail -t
"""


def read_input_fingerprints(file_path: Optional[str], arguments: Iterable[str]) -> List[str]:
    """Gather the candidate fingerprints from a file, from stdin ("-") or from the arguments."""
    if file_path is None:
        return list(arguments)
    # click.open_file maps "-" to stdin
    try:
        with click.open_file(file_path, "r", encoding=ENCODING, errors="replace") as fi:
            return list(read_fingerprint_lines(fi))
    except (IOError, OSError) as e:
        raise click.ClickException("Cannot read {}: {}".format(file_path, e))


def prepare_output_directory(output_directory: str) -> None:
    """Create the output directory (and its parents) unless it already exists."""
    try:
        os.makedirs(output_directory, exist_ok=True)
    except OSError as e:
        raise click.ClickException("Can't make {}: {}".format(output_directory, e))


def write_notice(config: NoticeConfig, fingerprint: str, message: str) -> None:
    """Send a rendered notice to stdout, or to <output_directory>/<fingerprint>.mail."""
    if config.to_stdout:
        click.echo(message)
        return
    mail_path = os.path.join(config.output_directory, notice_filename(fingerprint))
    # encoded up front, a failed notice must not leave a partial file
    contents = (message + "\n").encode(ENCODING)
    with open(mail_path, "wb") as fo:
        fo.write(contents)
    logger.info("Wrote %s", mail_path)


def generate_notices(keyring: Keyring, config: NoticeConfig, candidates: Iterable[str]) -> int:
    """Write one notice per usable fingerprint, logging and skipping the others.

    Returns:
        int, the number of notices written
    """
    written = 0
    for candidate in candidates:
        try:
            fingerprint = normalize_fingerprint(candidate)
        except FingerprintError:
            logger.error("Invalid fingerprint %s", candidate)
            continue

        try:
            notice = compose_notice(
                keyring, fingerprint, config.subject, encrypt=config.encrypt, sign_as=config.sign_as
            )
            write_notice(config, fingerprint, render_notice(notice))
        except (GpgExpiryError, IOError, OSError, UnicodeError) as e:
            logger.error("%s", e)
            logger.error("Could not generate message for %s", fingerprint)
            continue
        written += 1
    return written


@click.command(cls=ExitOneCommand, context_settings=CONTEXT_SETTINGS, epilog=EPILOG)
@click.option(
    "-o",
    "--output-directory",
    "--outputdir",
    "output_directory",
    default=None,
    callback=reject_empty_value,
    help="Store the notices in this directory, one <fingerprint>.mail file per key.",
)
@click.option("--stdout", "to_stdout", is_flag=True, help="Print the notices to stdout.")
@click.option(
    "-p",
    "--plain",
    is_flag=True,
    help="Do not encrypt the body. Combined with --signas the body is clear-signed.",
)
@click.option(
    "-u",
    "--signas",
    "sign_as",
    default=None,
    callback=reject_empty_value,
    help="Sign the body with KEY.",
)
@click.option(
    "-f",
    "--file",
    "file_path",
    default=None,
    callback=reject_empty_value,
    help='Read fingerprints from this file, or from stdin if it is "-".',
)
@click.option(
    "-s",
    "--subject",
    default=DEFAULT_SUBJECT,
    show_default=True,
    callback=reject_empty_value,
    help="The mail subject.",
)
@homedir_option
@verbose_option
@click.argument("fingerprints", nargs=-1)
@click.pass_context
def main(
    ctx,
    output_directory,
    to_stdout,
    plain,
    sign_as,
    file_path,
    subject,
    homedir,
    verbose,
    fingerprints,
):
    """Format emails reminding key owners that their GnuPG key is going to expire."""
    configure_logging(verbose)
    arguments = warn_about_unknown_options(list(fingerprints) + ctx.args)

    try:
        config = validate_notice_config(
            subject=subject,
            encrypt=not plain,
            sign_as=sign_as,
            output_directory=output_directory,
            to_stdout=to_stdout,
        )
    except Invalid as e:
        raise click.ClickException(str(e))

    if config.output_directory is not None:
        prepare_output_directory(config.output_directory)

    candidates = read_input_fingerprints(file_path, arguments)
    written = generate_notices(GpgKeyring(home_dir=homedir), config, candidates)
    logger.info("Generated %s of %s notices", written, len(candidates))
