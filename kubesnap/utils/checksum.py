"""Payload checksum helpers."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel
from pydantic_core import to_json

_FNV32_OFFSET = 0x811C9DC5
_FNV32_PRIME = 0x01000193


def fnv1a32(data: bytes) -> int:
    """Return the 32-bit FNV-1a hash of data."""
    value = _FNV32_OFFSET
    for byte in data:
        value ^= byte
        value = (value * _FNV32_PRIME) & 0xFFFFFFFF
    return value


def encode_payload(payload: Any) -> bytes:
    """Encode a payload as compact JSON, using field aliases for models."""
    if isinstance(payload, BaseModel):
        return payload.model_dump_json(by_alias=True).encode("utf-8")
    return to_json(payload, by_alias=True)


def checksum_payload(payload: Any) -> str:
    """Return the checksum of a payload as 8 lower-case hex digits.

    Raises:
        pydantic_core.PydanticSerializationError: If the payload cannot be
            encoded as JSON.
    """
    return f"{fnv1a32(encode_payload(payload)):08x}"


__all__ = ["checksum_payload", "encode_payload", "fnv1a32"]
