# Copyright 2020-present Kensho Technologies, LLC.
"""gpg-expires: list the keys of a GnuPG keyring that expire within a time window."""
import logging
from typing import Iterator

import click
from voluptuous import Invalid

from . import (
    CONTEXT_SETTINGS,
    STDIN_FILE,
    ExitOneCommand,
    homedir_option,
    reject_empty_value,
    verbose_option,
    warn_about_unknown_options,
)
from ..config import (
    ALL_AFTER,
    DEFAULT_AFTER,
    DEFAULT_BEFORE,
    DEFAULT_CAPABILITIES,
    DEFAULT_OUTPUT_FORMAT,
    OUTPUT_FORMATS,
    ExpiresConfig,
    validate_expires_config,
)
from ..dates import format_epoch, resolve_date_expression
from ..exceptions import GpgExpiryError, InvalidDateError, KeyLookupError
from ..filters import filter_by_capabilities, filter_by_expiry_window
from ..fingerprints import read_fingerprint_lines
from ..keyring import GpgKeyring, Keyring
from ..records import NO_EXPIRATION, KeySummary, classify_records, format_summary
from ..utils import ENCODING, configure_logging


logger = logging.getLogger(__name__)

EPILOG = """\b
Formats:
    fpr      the fingerprint
    fprdate  the fingerprint and the expiration epoch
    list     the output of `gpg --list-keys`
    colon    the output of `gpg --list-keys --with-colons`

\b
Examples:
    Check a set of defined keys
        $ cat keys.txt | gpg-expires
    Show keys that expired within the last year
        $ gpg-expires -a -1year -b today -f list
    Keys expiring next year, in order of expiration
        $ gpg-expires --before "next year" --format fprdate | sort -k2
"""


def select_expiring_keys(keyring: Keyring, config: ExpiresConfig) -> Iterator[KeySummary]:
    """List the keyring and keep the keys matching the capabilities and the expiry window."""
    lines = keyring.list_public_keys(config.fingerprints)
    summaries = classify_records(lines)
    summaries = filter_by_capabilities(summaries, config.capabilities)
    return filter_by_expiry_window(
        summaries, config.after_epoch, config.before_epoch, config.warn
    )


def render_summary(keyring: Keyring, summary: KeySummary, output_format: str) -> str:
    """Render one selected key in the requested output format, including the final newline.

    fpr and fprdate keep the leading fields of the "<FPR> <EXPIRY_EPOCH> <CAPS>" line.
    """
    fields = format_summary(summary).split(" ")
    if output_format == "fpr":
        return fields[0] + "\n"
    elif output_format == "fprdate":
        return " ".join(fields[:2]) + "\n"
    elif output_format in ("list", "colon"):
        return keyring.display_key(summary.fingerprint, colons=output_format == "colon")
    else:
        raise ValueError("Invalid format: {}".format(output_format))


def _format_bound(epoch):
    if epoch == NO_EXPIRATION:
        return "start of the epoch"
    return format_epoch(epoch)


def describe_window(config: ExpiresConfig) -> str:
    """The header describing the selected window, as shown on stderr."""
    return "Keys expiring:\n  after: {} ({})\n  before: {} ({})".format(
        config.after,
        _format_bound(config.after_epoch),
        config.before,
        _format_bound(config.before_epoch),
    )


def list_expiring_keys(keyring: Keyring, config: ExpiresConfig) -> int:
    """Print every selected key to stdout, returning how many were printed."""
    printed = 0
    for summary in select_expiring_keys(keyring, config):
        try:
            click.echo(render_summary(keyring, summary, config.output_format), nl=False)
        except KeyLookupError as e:
            logger.error("%s", e)
            continue
        printed += 1
    logger.info("Found %s expiring keys", printed)
    return printed


@click.command(cls=ExitOneCommand, context_settings=CONTEXT_SETTINGS, epilog=EPILOG)
@click.option("-q", "--quiet", is_flag=True, help="Do not print the window header to stderr.")
@click.option("-w", "--warn", is_flag=True, help="Also list keys without an expiration date.")
@click.option(
    "-b",
    "--before",
    default=DEFAULT_BEFORE,
    show_default=True,
    callback=reject_empty_value,
    help="Show keys expiring before this date(1) expression.",
)
@click.option(
    "-a",
    "--after",
    default=DEFAULT_AFTER,
    show_default=True,
    callback=reject_empty_value,
    help="Show keys expiring after this date(1) expression.",
)
@click.option("--all", "all_keys", is_flag=True, help="Set --after to the start of the epoch.")
@click.option(
    "-c",
    "--capabilities",
    default=DEFAULT_CAPABILITIES,
    show_default=True,
    callback=reject_empty_value,
    help="Only check keys with any of these capabilities (eg. esca).",
)
@click.option(
    "-f",
    "--format",
    "output_format",
    default=DEFAULT_OUTPUT_FORMAT,
    show_default=True,
    callback=reject_empty_value,
    help="Output format: {}.".format("|".join(OUTPUT_FORMATS)),
)
@homedir_option
@verbose_option
@click.pass_context
def main(ctx, quiet, warn, before, after, all_keys, capabilities, output_format, homedir, verbose):
    """List keys in the GnuPG keyring that are going to expire in the given time frame.

    Fingerprints piped to stdin restrict the check to those keys.
    """
    configure_logging(verbose)
    warn_about_unknown_options(ctx.args)

    if output_format not in OUTPUT_FORMATS:
        raise click.ClickException("Invalid format: {}".format(output_format))
    if all_keys:
        after = ALL_AFTER

    try:
        before_epoch = resolve_date_expression(before)
        after_epoch = resolve_date_expression(after)
    except InvalidDateError as e:
        raise click.ClickException("{}. See man date".format(e))

    fingerprints = ()
    with click.open_file(STDIN_FILE, "r", encoding=ENCODING, errors="replace") as stdin:
        if not stdin.isatty():
            fingerprints = tuple(read_fingerprint_lines(stdin))

    try:
        config = validate_expires_config(
            after=after,
            before=before,
            after_epoch=after_epoch,
            before_epoch=before_epoch,
            warn=warn,
            capabilities=capabilities,
            output_format=output_format,
            quiet=quiet,
            fingerprints=fingerprints,
        )
    except Invalid as e:
        raise click.ClickException(str(e))

    if not config.quiet:
        click.echo(describe_window(config), err=True)

    try:
        list_expiring_keys(GpgKeyring(home_dir=homedir), config)
    except GpgExpiryError as e:
        raise click.ClickException(str(e))
