"""
Codec for the reels.recipients JSONB column.

Recipients are never physically removed from the stored array. Deleting one
sets its deleted_at in place, and decode_recipients() hides every entry that
carries a deleted_at, so a deleted recipient never reappears in memory.
"""

from collections.abc import Iterable

from pydantic import TypeAdapter, ValidationError

from memoreel.models.domain.reel_domain import Recipient

EMPTY_ARRAY = b"[]"

_recipients_adapter = TypeAdapter(list[Recipient])


class RecipientDecodeError(ValueError):
    """Stored recipients could not be turned back into Recipient objects."""


def encode_recipients(recipients: Iterable[Recipient] | None) -> bytes:
    """Serialize recipients to a JSON array. Nothing to store is "[]", never "null"."""
    items = list(recipients or [])
    if not items:
        return EMPTY_ARRAY
    return _recipients_adapter.dump_json(items)


def decode_recipients(value) -> list[Recipient]:
    """Parse a stored JSON array, dropping soft-deleted recipients."""
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise RecipientDecodeError(
            f"recipients must be stored as bytes, got {type(value).__name__}"
        )

    raw = bytes(value)
    if raw == EMPTY_ARRAY:
        return []

    try:
        recipients = _recipients_adapter.validate_json(raw)
    except ValidationError as e:
        raise RecipientDecodeError(f"invalid recipients document: {e}") from e

    return [recipient for recipient in recipients if recipient.deleted_at is None]
