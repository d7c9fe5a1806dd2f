# Copyright 2020-present Kensho Technologies, LLC.
__package_name__ = "gpg-expiry"
__version__ = "1.0.0"

from .filters import filter_by_capabilities, filter_by_expiry_window  # noqa isort:skip
from .fingerprints import normalize_fingerprint  # noqa
from .notice import compose_notice, render_notice  # noqa
from .records import classify_records  # noqa
