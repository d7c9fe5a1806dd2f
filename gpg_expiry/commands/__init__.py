# Copyright 2020-present Kensho Technologies, LLC.
"""Pieces shared by the command line tools."""
import logging

import click


logger = logging.getLogger(__name__)

STDIN_FILE = "-"

CONTEXT_SETTINGS = {
    "help_option_names": ["-h", "--help"],
    "ignore_unknown_options": True,
    "allow_extra_args": True,
}


class ExitOneCommand(click.Command):
    """A click command whose usage errors exit with status 1, like every other failure."""

    def make_context(self, info_name, args, parent=None, **extra):
        try:
            return super(ExitOneCommand, self).make_context(
                info_name, args, parent=parent, **extra
            )
        except click.UsageError as e:
            e.exit_code = 1
            raise


def is_option_like(argument):
    """Whether a leftover command line argument looks like an option."""
    return argument.startswith("-") and argument != STDIN_FILE


def warn_about_unknown_options(arguments):
    """Warn about, then drop, the options click did not recognize. Return the other arguments."""
    remaining = []
    for argument in arguments:
        if is_option_like(argument):
            logger.warning("Unknown option (ignored): %s", argument)
        else:
            remaining.append(argument)
    return remaining


def reject_empty_value(ctx, param, value):
    """Reject empty option values such as `--before=`."""
    if value is not None and not value:
        raise click.BadParameter("requires a non-empty option argument.")
    return value


verbose_option = click.option(
    "-v", "--verbose", count=True, help="Log more details to stderr, repeat for debug output."
)
homedir_option = click.option(
    "--homedir",
    envvar="GNUPGHOME",
    default=None,
    type=click.Path(file_okay=False),
    help="GnuPG home directory, defaults to $GNUPGHOME or gpg's own default.",
)
