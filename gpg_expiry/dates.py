# Copyright 2020-present Kensho Technologies, LLC.
"""Evaluate free-form date expressions and render epochs for humans.

Date expressions are handed to GNU date(1), which understands relative forms such as
"+30days", "yesterday", "next year", "-1year" as well as "@<epoch>" and ISO dates.
"""
from datetime import datetime, timezone
import logging
import subprocess

from voluptuous import validate

from .config import get_date_binary
from .exceptions import InvalidDateError
from .records import NO_EXPIRATION
from .utils import ENCODING, NON_EMPTY_STRING


logger = logging.getLogger(__name__)

HUMAN_DATE_FORMAT = "%a %b %d %H:%M:%S UTC %Y"
NEVER = "never"


@validate(expression=NON_EMPTY_STRING)
def resolve_date_expression(expression, date_binary=None):
    """Convert a date(1) expression to seconds since the epoch.

    Args:
        expression: string, anything `date -d` accepts
        date_binary: string, the date executable, defaults to the configured one

    Returns:
        int, seconds since the epoch

    Raises:
        InvalidDateError, if date rejects the expression or cannot be run
    """
    command = [date_binary or get_date_binary(), "-d", expression, "+%s"]
    logger.debug("Running %s", command)
    try:
        output = subprocess.check_output(command, stderr=subprocess.PIPE)
    except subprocess.CalledProcessError as e:
        raise InvalidDateError(
            "Invalid date {!r}: {}".format(expression, e.stderr.decode(ENCODING, "replace").strip())
        )
    except OSError as e:
        raise InvalidDateError("Could not run {}: {}".format(command[0], e))

    try:
        return int(output.decode(ENCODING).strip())
    except ValueError:
        raise InvalidDateError(
            "Unexpected output {!r} while evaluating date {!r}".format(output, expression)
        )


def format_epoch(epoch: int) -> str:
    """Render an expiration epoch as a UTC date, or "never" for keys without expiration"""
    if epoch == NO_EXPIRATION:
        return NEVER
    return datetime.fromtimestamp(epoch, tz=timezone.utc).strftime(HUMAN_DATE_FORMAT)
