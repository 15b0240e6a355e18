"""Base58check and network-specific serialization of extended keys."""

from __future__ import annotations

import hashlib
import io
from dataclasses import dataclass

from .ecdsa import SigningKey, VerifyingKey
from .errors import (
    B58Error,
    BadB58ChecksumError,
    BadPaddingError,
    BadXPrivVersionBytesError,
    BadXPubVersionBytesError,
)
from .primitives import ChainCode, Hint, KeyFingerprint, XKeyInfo
from .xkeys import XPriv, XPub

_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
_ALPHABET_INDEX = {char: idx for idx, char in enumerate(_ALPHABET)}


def _hash256(data: bytes) -> bytes:
    return hashlib.sha256(hashlib.sha256(data).digest()).digest()


def _b58encode(data: bytes) -> str:
    number = int.from_bytes(data, "big")
    digits = []
    while number:
        number, rem = divmod(number, 58)
        digits.append(_ALPHABET[rem])
    leading = len(data) - len(data.lstrip(b"\x00"))
    return "1" * leading + "".join(reversed(digits))


def _b58decode(s: str) -> bytes:
    number = 0
    for char in s:
        try:
            number = number * 58 + _ALPHABET_INDEX[char]
        except KeyError:
            raise B58Error(f"invalid base58 character {char!r}") from None
    leading = len(s) - len(s.lstrip("1"))
    body = number.to_bytes((number.bit_length() + 7) // 8, "big") if number else b""
    return b"\x00" * leading + body


def decode_b58_check(s: str) -> bytes:
    """Decode a base58check string and return its payload."""
    data = _b58decode(s)
    if len(data) < 4:
        raise BadB58ChecksumError()
    payload, checksum = data[:-4], data[-4:]
    if _hash256(payload)[:4] != checksum:
        raise BadB58ChecksumError()
    return payload


def encode_b58_check(data) -> str:
    """Encode bytes as a base58check string."""
    data = bytes(data)
    return _b58encode(data + _hash256(data)[:4])


@dataclass(frozen=True)
class NetworkParams:
    """Version bytes used to serialize extended keys on one network."""

    priv_version: int
    bip49_priv_version: int
    bip84_priv_version: int
    pub_version: int
    bip49_pub_version: int
    bip84_pub_version: int

    def _priv_versions(self) -> dict[Hint, int]:
        return {
            Hint.LEGACY: self.priv_version,
            Hint.COMPATIBILITY: self.bip49_priv_version,
            Hint.SEGWIT: self.bip84_priv_version,
        }

    def _pub_versions(self) -> dict[Hint, int]:
        return {
            Hint.LEGACY: self.pub_version,
            Hint.COMPATIBILITY: self.bip49_pub_version,
            Hint.SEGWIT: self.bip84_pub_version,
        }


MAIN = NetworkParams(
    priv_version=0x0488_ADE4,
    bip49_priv_version=0x049D_7878,
    bip84_priv_version=0x04B2_430C,
    pub_version=0x0488_B21E,
    bip49_pub_version=0x049D_7CB2,
    bip84_pub_version=0x04B2_4746,
)
"""Mainnet version bytes."""

TEST = NetworkParams(
    priv_version=0x0435_8394,
    bip49_priv_version=0x044A_4E28,
    bip84_priv_version=0x045F_18BC,
    pub_version=0x0435_87CF,
    bip49_pub_version=0x044A_5262,
    bip84_pub_version=0x045F_1CF6,
)
"""Testnet version bytes."""


def _as_stream(reader):
    if isinstance(reader, (bytes, bytearray, memoryview)):
        return io.BytesIO(bytes(reader))
    return reader


def _read_exact(reader, size: int) -> bytes:
    data = reader.read(size)
    if len(data) != size:
        raise EOFError(f"expected {size} bytes, got {len(data)}")
    return bytes(data)


def _unwrap(key, cls, attr: str):
    if isinstance(key, cls):
        return key
    inner = getattr(key, attr, None)
    if isinstance(inner, cls):
        return inner
    raise TypeError(f"expected {cls.__name__}, got {type(key).__name__}")


def _key_details(info: XKeyInfo) -> bytes:
    return (
        bytes([info.depth])
        + info.parent.to_bytes()
        + info.index.to_bytes(4, "big")
        + info.chain_code.value
    )


def _read_info(reader, hint: Hint) -> XKeyInfo:
    depth = _read_exact(reader, 1)[0]
    parent = KeyFingerprint(_read_exact(reader, 4))
    index = int.from_bytes(_read_exact(reader, 4), "big")
    chain_code = ChainCode(_read_exact(reader, 32))
    return XKeyInfo(depth=depth, parent=parent, index=index, chain_code=chain_code, hint=hint)


def _read_xpriv_body(reader, hint: Hint) -> XPriv:
    info = _read_info(reader, hint)
    padding = _read_exact(reader, 1)[0]
    if padding != 0:
        raise BadPaddingError(padding)
    key = SigningKey.from_bytes(_read_exact(reader, 32))
    return XPriv(key, info)


def _read_xpub_body(reader, hint: Hint) -> XPub:
    info = _read_info(reader, hint)
    key = VerifyingKey.from_sec1_bytes(_read_exact(reader, 33))
    return XPub(key, info)


class XKeyEncoder:
    """Serializes extended keys using one network's version bytes."""

    def __init__(self, params: NetworkParams):
        self.params = params

    def __repr__(self) -> str:
        return f"XKeyEncoder({self.params!r})"

    def write_xpub(self, key) -> bytes:
        """The 78-byte serialization of an extended public key."""
        xpub = _unwrap(key, XPub, "xpub")
        version = self.params._pub_versions()[xpub.xkey_info.hint]
        return version.to_bytes(4, "big") + _key_details(xpub.xkey_info) + xpub.key.to_bytes()

    def write_xpriv(self, key) -> bytes:
        """The 78-byte serialization of an extended private key."""
        xpriv = _unwrap(key, XPriv, "xpriv")
        version = self.params._priv_versions()[xpriv.xkey_info.hint]
        return (
            version.to_bytes(4, "big")
            + _key_details(xpriv.xkey_info)
            + b"\x00"
            + xpriv.key.to_bytes()
        )

    def read_xpriv(self, reader) -> XPriv:
        """Read an extended private key from a binary stream or bytes."""
        reader = _as_stream(reader)
        version_bytes = _read_exact(reader, 4)
        version = int.from_bytes(version_bytes, "big")
        for hint, expected in self.params._priv_versions().items():
            if version == expected:
                return _read_xpriv_body(reader, hint)
        raise BadXPrivVersionBytesError(version_bytes)

    def read_xpub(self, reader) -> XPub:
        """Read an extended public key from a binary stream or bytes."""
        reader = _as_stream(reader)
        version_bytes = _read_exact(reader, 4)
        version = int.from_bytes(version_bytes, "big")
        for hint, expected in self.params._pub_versions().items():
            if version == expected:
                return _read_xpub_body(reader, hint)
        raise BadXPubVersionBytesError(version_bytes)

    def read_xpriv_without_network(self, reader) -> XPriv:
        """Read an xpriv ignoring its version bytes; the hint is always legacy."""
        reader = _as_stream(reader)
        _read_exact(reader, 4)
        return _read_xpriv_body(reader, Hint.LEGACY)

    def read_xpub_without_network(self, reader) -> XPub:
        """Read an xpub ignoring its version bytes; the hint is always legacy."""
        reader = _as_stream(reader)
        _read_exact(reader, 4)
        return _read_xpub_body(reader, Hint.LEGACY)

    def xpriv_to_base58(self, key) -> str:
        return encode_b58_check(self.write_xpriv(key))

    def xpub_to_base58(self, key) -> str:
        return encode_b58_check(self.write_xpub(key))

    def xpriv_from_base58(self, s: str) -> XPriv:
        return self.read_xpriv(decode_b58_check(s))

    def xpub_from_base58(self, s: str) -> XPub:
        return self.read_xpub(decode_b58_check(s))


MAINNET_ENCODER = XKeyEncoder(MAIN)
"""Encoder for mainnet extended keys."""

TESTNET_ENCODER = XKeyEncoder(TEST)
"""Encoder for testnet extended keys."""