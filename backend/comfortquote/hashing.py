"""Identifier helpers for generated estimates.

``stable_hash`` is a 32-bit rolling string hash (``h = h * 31 + c``) over the
compact JSON form of a payload. For strings, booleans, integers and
ordinary decimals it matches the hash the browser wizard computes, so an
estimate ID produced here can be recomputed client side. Floats that Python
writes in exponent form (``1e-07`` where ``JSON.stringify`` writes ``1e-7``)
serialize differently and hash differently. It is not cryptographic and
collisions are accepted.
"""

from __future__ import annotations

import json
import logging
import random
import string
import struct
import time
from typing import Any

logger = logging.getLogger(__name__)

HASH_LENGTH = 8

_BASE36_DIGITS = string.digits + string.ascii_lowercase
_UINT32 = 0xFFFFFFFF
_INT32_SIGN = 0x80000000


def to_base36(value: int) -> str:
    """Render a non-negative integer in lowercase base 36."""
    if value < 0:
        msg = f"Cannot render negative value {value} in base 36"
        raise ValueError(msg)
    if value == 0:
        return "0"
    digits: list[str] = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36_DIGITS[rem])
    return "".join(reversed(digits))


def _js_number(value: Any) -> Any:
    """Render integral floats as ints so JSON output matches ``JSON.stringify``."""
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return int(value)
    return value


def to_compact_json(payload: dict[str, Any]) -> str:
    """Serialize a flat payload like ``JSON.stringify``, keys in order.

    Integral floats are written as integers. Exponent-form floats keep
    Python's spelling (``1e-07``).
    """
    normalized = {key: _js_number(value) for key, value in payload.items()}
    return json.dumps(normalized, separators=(",", ":"), ensure_ascii=False)


def rolling_hash(text: str) -> int:
    """Signed 32-bit ``h * 31 + c`` hash over the UTF-16 code units of ``text``."""
    h = 0
    for (code_unit,) in struct.iter_unpack("<H", text.encode("utf-16-le")):
        h = (h * 31 + code_unit) & _UINT32
    if h & _INT32_SIGN:
        h -= _UINT32 + 1
    return h


def stable_hash(payload: dict[str, Any]) -> str:
    """Deterministic 8-character base-36 hash of ``payload``.

    Never raises. If hashing fails the result falls back to a time and
    random based value, which gives up determinism for that one call.
    """
    try:
        digest = to_base36(abs(rolling_hash(to_compact_json(payload))))
        return digest[:HASH_LENGTH].rjust(HASH_LENGTH, "0")
    except Exception:
        logger.warning("Estimate hash failed; using non-deterministic fallback", exc_info=True)
        return _fallback_hash()


def _fallback_hash() -> str:
    stamp = to_base36(int(time.time() * 1000))[-4:]
    noise = "".join(random.choices(_BASE36_DIGITS, k=HASH_LENGTH - len(stamp)))  # noqa: S311
    return (stamp + noise)[:HASH_LENGTH]


def new_submission_id() -> str:
    """Unique-per-call storage ID: ``sub-<epoch ms>-<9 random base36 chars>``.

    Not derived from input. Never use it to deduplicate or look up estimates.
    """
    suffix = "".join(random.choices(_BASE36_DIGITS, k=9))  # noqa: S311
    return f"sub-{int(time.time() * 1000)}-{suffix}"
