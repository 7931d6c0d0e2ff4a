"""
Deterministic byte encodings.

Used for pool id derivation and for the request payloads callers sign, so the
same logical request always hashes to the same bytes.
"""

from __future__ import annotations

import hashlib
import json
import re
from typing import Any, Optional


_HEX_CHARS_RE = re.compile(r"^[0-9a-fA-F]*$")


def _reject_non_canonical(value: Any) -> None:
    if isinstance(value, float):
        raise TypeError("floats are not allowed in canonical encoding")
    if isinstance(value, dict):
        for k, v in value.items():
            if not isinstance(k, str):
                raise TypeError("dict keys must be str for canonical encoding")
            _reject_non_canonical(v)
    elif isinstance(value, (list, tuple)):
        for item in value:
            _reject_non_canonical(item)


def canonical_json_bytes(value: Any) -> bytes:
    """
    Canonical JSON encoding for hashing/signing.

    Rules:
    - UTF-8
    - sort_keys=True
    - separators=(',', ':') (no whitespace)
    - floats rejected (amounts are integers; floats have ambiguous renderings)
    """
    _reject_non_canonical(value)
    text = json.dumps(
        value,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    )
    return text.encode("utf-8")


def sha256_hex(data: bytes) -> str:
    return "0x" + hashlib.sha256(data).hexdigest()


def domain_sep_bytes(label: str, version: int = 1) -> bytes:
    """
    Domain separation prefix: ``cpamm:<label>:v<version>\\0``.

    ASCII-only and NUL-terminated so concatenation with a payload is unambiguous.
    """
    if not isinstance(label, str) or not label:
        raise TypeError("label must be a non-empty str")
    if "\x00" in label:
        raise ValueError("label must not contain NUL")
    try:
        label_bytes = label.encode("ascii")
    except UnicodeEncodeError as exc:
        raise ValueError("label must be ASCII") from exc
    if not isinstance(version, int) or isinstance(version, bool) or version <= 0:
        raise ValueError("version must be a positive int")
    return b"cpamm:" + label_bytes + b":v" + str(version).encode("ascii") + b"\x00"


def encode_str(value: str) -> bytes:
    """Length-prefixed UTF-8 (4-byte big-endian length)."""
    if not isinstance(value, str):
        raise TypeError("value must be a str")
    raw = value.encode("utf-8")
    return len(raw).to_bytes(4, "big") + raw


def hex_to_bytes_allow_0x(hex_str: str, *, name: str, expected_nbytes: Optional[int] = None) -> bytes:
    if not isinstance(hex_str, str):
        raise TypeError(f"{name} must be a str")
    body = hex_str[2:] if hex_str.lower().startswith("0x") else hex_str
    if len(body) % 2 != 0 or not _HEX_CHARS_RE.fullmatch(body):
        raise ValueError(f"{name} must be valid hex")
    out = bytes.fromhex(body)
    if expected_nbytes is not None and len(out) != expected_nbytes:
        raise ValueError(f"{name} must decode to exactly {expected_nbytes} bytes")
    return out
