"""Provider metadata parsing.

Bank-linked entries carry the aggregator's transaction record as an opaque
blob (usually JSON text). Everything downstream treats "no metadata" and
"unreadable metadata" the same way: as no information.
"""

import json
from collections.abc import Mapping
from typing import Any

from ledger_normalizer.models.entry import RawEntry
from ledger_normalizer.utils.logging_config import get_logger

logger = get_logger(__name__)

_EMPTY_BLOBS = {"", "{}", "[]", "null"}


def parse_metadata(value: Any) -> dict[str, Any] | None:
    """Deserialize a provider metadata blob.

    Args:
        value: JSON text, an already-decoded mapping, or None.

    Returns:
        Metadata as a dict, or None if absent, empty or malformed.
    """
    if value is None:
        return None

    if isinstance(value, Mapping):
        return dict(value) if value else None

    if isinstance(value, (bytes, bytearray)):
        try:
            value = value.decode("utf-8")
        except UnicodeDecodeError:
            logger.debug("Provider metadata is not valid UTF-8, ignoring")
            return None

    if not isinstance(value, str) or not value.strip():
        return None

    try:
        decoded = json.loads(value)
    # JSONDecodeError is a ValueError; oversized integer literals raise a plain one
    except (ValueError, RecursionError) as e:
        logger.debug(f"Unreadable provider metadata ignored: {e}")
        return None

    if not isinstance(decoded, dict) or not decoded:
        return None
    return decoded


def entry_metadata(entry: RawEntry) -> dict[str, Any] | None:
    """Parse the metadata attached to an entry."""
    return parse_metadata(entry.provider_metadata)


def has_metadata(entry: RawEntry) -> bool:
    """True if the entry carries a non-empty metadata blob.

    A blob that fails to decode still marks the entry as aggregator-sourced;
    serialized empty values ("{}", "null") do not.
    """
    value = entry.provider_metadata
    if value is None:
        return False
    if isinstance(value, Mapping):
        return bool(value)
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8", errors="replace")
    if isinstance(value, str):
        return value.strip() not in _EMPTY_BLOBS
    return True
