# Copyright 2020-present Kensho Technologies, LLC.
"""Select key summaries by capability and by expiration window."""
from typing import Iterable, Iterator

import funcy
from voluptuous import validate

from .records import NO_EXPIRATION, KeySummary


def has_any_capability(summary: KeySummary, capabilities: str) -> bool:
    """Whether the key has at least one of the requested capability characters."""
    return bool(frozenset(summary.capabilities) & frozenset(capabilities))


def is_in_expiry_window(
    expiry_epoch: int, after_epoch: int, before_epoch: int, warn_on_unset: bool = False
) -> bool:
    """Whether an expiration falls strictly between the bounds.

    Keys without an expiration (epoch 0) are also selected when warn_on_unset is set.
    The bounds are not checked for ordering; inverted bounds simply select nothing.
    """
    if after_epoch < expiry_epoch < before_epoch:
        return True
    return warn_on_unset and expiry_epoch == NO_EXPIRATION


@validate(capabilities=str)
def filter_by_capabilities(
    summaries: Iterable[KeySummary], capabilities: str
) -> Iterator[KeySummary]:
    """Lazily keep the summaries sharing at least one capability with the requested set.

    The test is a case-sensitive character set intersection: "e" requests encryption subkeys,
    "E" keys usable for encryption as a whole. An empty request matches nothing.
    """
    return funcy.filter(lambda summary: has_any_capability(summary, capabilities), summaries)


@validate(after_epoch=int, before_epoch=int, warn_on_unset=bool)
def filter_by_expiry_window(
    summaries: Iterable[KeySummary],
    after_epoch: int,
    before_epoch: int,
    warn_on_unset: bool = False,
) -> Iterator[KeySummary]:
    """Lazily keep the summaries expiring inside (after_epoch, before_epoch), in input order."""
    return funcy.filter(
        lambda summary: is_in_expiry_window(
            summary.expiry_epoch, after_epoch, before_epoch, warn_on_unset
        ),
        summaries,
    )
