"""Masking of athlete identity in logs and error reports.

Identifiers become unsalted blake2b digests so one athlete can still be
followed across records. Names are masked wherever they appear, including
inside alert messages such as ``"Drew has low recovery score (15)"``.
"""

from __future__ import annotations

import hashlib
from typing import Any

__all__ = [
    "mask_identifier",
    "mask_name",
    "redact_name",
    "scrub_sensitive_mapping",
]

_DIGEST_SIZE = 10
_IDENTIFIER_PREFIXES = {"athlete_id": "athlete", "chat_id": "chat"}
_NAME_KEYS = frozenset({"name", "subject_name"})
_FREE_TEXT_KEYS = ("message", "msg")


def _digest(value: str) -> str:
    normalised = value.strip().encode("utf-8", "ignore")
    return hashlib.blake2b(normalised, digest_size=_DIGEST_SIZE).hexdigest()


def mask_identifier(value: int | str, *, prefix: str = "id") -> str:
    """Return an anonymised representation of ``value`` suitable for logs."""

    digest = _digest(f"{prefix}:{value}")
    return f"{prefix}-{digest[:6]}...{digest[-4:]}"


def mask_name(name: str) -> str:
    """Mask an athlete's display name while keeping it traceable across events."""

    cleaned = name.strip()
    if not cleaned:
        return "athlete-anon"
    return f"athlete-{_digest(f'name:{cleaned}')[:8]}"


def redact_name(text: str, name: str) -> str:
    """Replace every occurrence of ``name`` in ``text`` with its mask.

    >>> redact_name("Drew shows concerning metrics", "Drew") == (
    ...     mask_name("Drew") + " shows concerning metrics"
    ... )
    True
    """

    cleaned = name.strip()
    if not cleaned:
        return text
    return text.replace(cleaned, mask_name(cleaned))


def scrub_sensitive_mapping(mapping: dict[str, Any]) -> dict[str, Any]:
    """Mask identifiers and names in ``mapping`` and nested containers in-place.

    A name found next to a free-text field (an alert's ``message``) is also
    redacted from that text.
    """

    for key, value in list(mapping.items()):
        if value is None:
            continue
        lowered = key.lower() if isinstance(key, str) else None
        if lowered in _IDENTIFIER_PREFIXES and isinstance(value, (int, str)):
            mapping[key] = mask_identifier(value, prefix=_IDENTIFIER_PREFIXES[lowered])
        elif lowered in _NAME_KEYS and isinstance(value, str):
            for text_key in _FREE_TEXT_KEYS:
                text = mapping.get(text_key)
                if isinstance(text, str):
                    mapping[text_key] = redact_name(text, value)
            mapping[key] = mask_name(value)
        elif isinstance(value, dict):
            scrub_sensitive_mapping(value)
        elif isinstance(value, (list, tuple)):
            mapping[key] = type(value)(
                scrub_sensitive_mapping(item) if isinstance(item, dict) else item
                for item in value
            )
    return mapping
