"""
core.domain.references — Human-facing reference numbers.

Every ledger row carries a receipt-style id shown to users and admins,
e.g. ``TXN-1718000000000-4K9ZQA``: a prefix, the creation time in epoch
milliseconds and six random upper-case base-36 characters.  These ids are
for display and lookup only; uniqueness of the business key is enforced
elsewhere.
"""

from __future__ import annotations

import secrets
import string
import time

_ALPHABET = string.digits + string.ascii_uppercase
SUFFIX_LENGTH = 6


def generate_reference(prefix: str) -> str:
    millis = int(time.time() * 1000)
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(SUFFIX_LENGTH))
    return f"{prefix}-{millis}-{suffix}"
