# Copyright 2020-present Kensho Technologies, LLC.
"""Various utilities"""
import logging
import os

import click
from voluptuous import All, Length


ENCODING = "utf-8"
NON_EMPTY_STRING = All(str, Length(min=1))
LOG_FORMAT = "%(levelname)s: %(message)s"
PACKAGE_LOGGER_NAME = "gpg_expiry"


class ClickEchoHandler(logging.Handler):
    """Logging handler writing to whatever stderr click currently sees."""

    def emit(self, record):
        try:
            click.echo(self.format(record), err=True)
        except Exception:  # noqa
            self.handleError(record)


def configure_logging(verbosity: int = 0) -> None:
    """Send this package's log records to stderr.

    Args:
        verbosity: number of times -v was given. 0 logs warnings and errors,
            1 adds info messages and 2 or more adds debug messages.
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    package_logger.setLevel(level)
    for handler in list(package_logger.handlers):
        if isinstance(handler, ClickEchoHandler):
            package_logger.removeHandler(handler)
    handler = ClickEchoHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger.addHandler(handler)


def gpg_environment(home_dir=None):
    """Produce the environment for running gpg, pointing it at the given home directory."""
    env = dict(os.environ)
    # Listing keys never needs an agent, unset the env var.
    env.pop("GPG_AGENT_INFO", None)
    if home_dir is not None:
        env["GNUPGHOME"] = home_dir
    return env
