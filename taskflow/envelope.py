"""Response envelope normalisation.

The backend is not consistent about how it wraps collections. A list of
tasks may arrive as any of::

    [...]
    {"content": [...]}
    {"data": [...]}
    {"data": {"content": [...]}}

``classify`` names the shape explicitly and ``unwrap_list`` flattens it.
Anything else is ``UNRECOGNIZED`` and yields an empty list.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Any, List, Mapping, Optional, Tuple


logger = logging.getLogger(__name__)


class EnvelopeShape(str, Enum):
    BARE_LIST = "bare_list"
    CONTENT_LIST = "content_list"
    DATA_LIST = "data_list"
    DATA_CONTENT_LIST = "data_content_list"
    UNRECOGNIZED = "unrecognized"


def classify(payload: Any) -> Tuple[EnvelopeShape, List[Any]]:
    """Return the envelope shape and the items it carries.

    Shapes are tried in a fixed order, so a payload carrying both
    ``content`` and ``data`` lists resolves to ``CONTENT_LIST``.
    """
    if isinstance(payload, list):
        return EnvelopeShape.BARE_LIST, payload
    if not isinstance(payload, Mapping):
        return EnvelopeShape.UNRECOGNIZED, []
    if isinstance(payload.get("content"), list):
        return EnvelopeShape.CONTENT_LIST, payload["content"]
    data = payload.get("data")
    if isinstance(data, list):
        return EnvelopeShape.DATA_LIST, data
    if isinstance(data, Mapping) and isinstance(data.get("content"), list):
        return EnvelopeShape.DATA_CONTENT_LIST, data["content"]
    return EnvelopeShape.UNRECOGNIZED, []


def unwrap_list(payload: Any, *, source: str = "response") -> List[Any]:
    shape, items = classify(payload)
    if shape is EnvelopeShape.UNRECOGNIZED:
        logger.warning("Unrecognised list envelope in %s; treating as empty", source)
    return list(items)


def unwrap_item(payload: Any) -> Optional[Mapping[str, Any]]:
    """Return the single entity of an ``{"data": {...}}`` envelope.

    A bare object that already looks like an entity (has an ``id``) is
    accepted as is.
    """
    if not isinstance(payload, Mapping):
        return None
    data = payload.get("data")
    if isinstance(data, Mapping):
        return data
    if "id" in payload:
        return payload
    return None


def error_message(payload: Any) -> Optional[str]:
    """Extract the human message from an error envelope, if any."""
    if isinstance(payload, Mapping):
        for key in ("message", "error", "detail"):
            value = payload.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    if isinstance(payload, str) and payload.strip():
        return payload.strip()[:500]
    return None
