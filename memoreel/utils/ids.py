"""
Identifier helpers.

Row ids are ULIDs: 26 Crockford base32 characters whose lexical order
follows creation time, so "id < cursor" means "older".
"""

import secrets

from ulid import ULID

# Largest possible ULID. Used as the cursor for the most recent page.
FIRST_PAGE_CURSOR = "7ZZZZZZZZZZZZZZZZZZZZZZZZZ"


def new_id() -> str:
    return str(ULID())


def new_token() -> str:
    """Opaque single-use token for email confirmation and verification links."""
    return secrets.token_urlsafe(32)
