"""starledger.core.encoding

Payload wire form and canonical serialization.

A payload travels as hex of its canonical JSON. Two implementations that agree on
the bytes agree on the digest.
"""

from __future__ import annotations

import binascii
import hashlib
import json
from typing import Any

from starledger.core.exceptions import PayloadError


def canonical_json(data: Any) -> str:
    """Canonical JSON serialization used for hashing and the payload wire form."""

    return json.dumps(data, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def sha256_hex(data: str) -> str:
    """SHA-256 of the UTF-8 bytes of ``data`` as 64 lowercase hex characters."""

    return hashlib.sha256(data.encode("utf-8")).hexdigest()


def encode_payload(payload: Any) -> str:
    """Encode a structured payload to its hex wire form.

    Raises:
        PayloadError: if the payload is not JSON-serializable.
    """

    try:
        text = canonical_json(payload)
    except (TypeError, ValueError) as e:
        raise PayloadError(f"payload is not JSON-serializable: {e}") from e
    return text.encode("utf-8").hex()


def decode_payload(body: str) -> Any:
    """Decode a hex wire-form body back to its structured payload.

    Raises:
        PayloadError: if the body is not hex, not UTF-8, or not JSON.
    """

    try:
        raw = bytes.fromhex(body)
    except (TypeError, ValueError) as e:
        raise PayloadError("payload body is not hex-encoded") from e

    try:
        return json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise PayloadError(f"payload body does not decode to JSON: {e}") from e


def is_hex_digest(value: object, *, length: int) -> bool:
    """Strict digest check: a ``str`` of exactly ``length`` lowercase hex characters."""

    if not isinstance(value, str) or len(value) != length:
        return False
    if value != value.lower():
        return False
    try:
        binascii.unhexlify(value)
    except (binascii.Error, ValueError):
        return False
    return True
