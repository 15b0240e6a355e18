"""Low-level value types shared by extended keys."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

BIP32_HARDEN = 0x8000_0000
"""Indices at or above this value denote hardened derivation."""

CURVE_ORDER = bytes.fromhex(
    "fffffffffffffffffffffffffffffffebaaedce6af48a03bbfd25e8cd0364141"
)
"""The order of the secp256k1 group, big-endian."""


def _coerce_bytes(value, size: int, name: str) -> bytes:
    if isinstance(value, int):
        raise TypeError(f"{name} must be bytes, not int")
    data = bytes(value)
    if len(data) != size:
        raise ValueError(f"{name} must be {size} bytes, got {len(data)}")
    return data


class Hint(Enum):
    """Preferred output type, taken from the xpub/ypub/zpub version convention."""

    LEGACY = "legacy"
    COMPATIBILITY = "compatibility"
    SEGWIT = "segwit"


@dataclass(frozen=True)
class KeyFingerprint:
    """A 4-byte key fingerprint."""

    value: bytes

    def __post_init__(self):
        object.__setattr__(self, "value", _coerce_bytes(self.value, 4, "fingerprint"))

    def eq_slice(self, other) -> bool:
        """True if ``other`` holds exactly these fingerprint bytes."""
        return self.value == bytes(other)

    def to_bytes(self) -> bytes:
        return self.value

    @classmethod
    def read_from(cls, reader) -> KeyFingerprint:
        """Read a fingerprint from a binary stream."""
        data = reader.read(4)
        if len(data) != 4:
            raise EOFError("expected 4 bytes for a key fingerprint")
        return cls(data)

    def __repr__(self) -> str:
        return f"KeyFingerprint({self.value.hex()})"


@dataclass(frozen=True)
class ChainCode:
    """A 32-byte chain code."""

    value: bytes

    def __post_init__(self):
        object.__setattr__(self, "value", _coerce_bytes(self.value, 32, "chain code"))

    def __repr__(self) -> str:
        return f"ChainCode({self.value.hex()})"


@dataclass(frozen=True)
class XKeyInfo:
    """Metadata carried by an extended key."""

    depth: int
    parent: KeyFingerprint
    index: int
    chain_code: ChainCode
    hint: Hint

    def __post_init__(self):
        if not 0 <= self.depth <= 0xFF:
            raise ValueError(f"depth must fit in one byte, got {self.depth}")
        if not 0 <= self.index <= 0xFFFF_FFFF:
            raise ValueError(f"index must fit in 32 bits, got {self.index}")