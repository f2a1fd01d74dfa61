from __future__ import annotations

"""
Common API byte types.

- HexBytes: 0x-prefixed (or bare) even-length hex string, or a JSON array of
            ints in 0..255, decoded to ``bytes``.
- Bytes32:  HexBytes of exactly 32 bytes (signature halves, coordinates,
            message hashes).

JSON arrays are accepted because the browser SDK posts raw ``Uint8Array``
values serialized as number lists.
"""

import re
from typing import Annotated, Any

from pydantic import BeforeValidator
from pydantic_core import PydanticCustomError

_HEX_RE = re.compile(r"^[0-9a-fA-F]*$")

# Error type the problem+json handler maps to 400 bad_request.
HEX_ERROR_TYPE = "hex_bytes"


def _coerce_bytes(v: Any) -> bytes:
    if isinstance(v, (bytes, bytearray)):
        return bytes(v)
    if isinstance(v, str):
        s = v.strip()
        if s[:2].lower() == "0x":
            s = s[2:]
        if len(s) % 2 != 0 or not _HEX_RE.match(s):
            raise PydanticCustomError(HEX_ERROR_TYPE, "expected even-length hex string")
        return bytes.fromhex(s)
    if isinstance(v, (list, tuple)):
        if not all(isinstance(b, int) and not isinstance(b, bool) and 0 <= b <= 255 for b in v):
            raise PydanticCustomError(HEX_ERROR_TYPE, "byte arrays must contain integers in 0..255")
        return bytes(v)
    raise PydanticCustomError(HEX_ERROR_TYPE, "expected hex string or array of bytes")


def _coerce_bytes32(v: Any) -> bytes:
    b = _coerce_bytes(v)
    if len(b) != 32:
        raise PydanticCustomError(HEX_ERROR_TYPE, "expected 32 bytes, got {length}", {"length": len(b)})
    return b


HexBytes = Annotated[bytes, BeforeValidator(_coerce_bytes)]
Bytes32 = Annotated[bytes, BeforeValidator(_coerce_bytes32)]


def to_hex(b: bytes) -> str:
    """Lowercase 0x-prefixed hex."""
    return "0x" + bytes(b).hex()


__all__ = ["HexBytes", "Bytes32", "HEX_ERROR_TYPE", "to_hex"]
