"""Default (mainnet) parsing of extended keys and a fingerprint shortcut."""

from __future__ import annotations

from .ecdsa import VerifyingKey
from .enc import MAINNET_ENCODER
from .primitives import KeyFingerprint
from .xkeys import XPriv, XPub, hash160

ENCODER = MAINNET_ENCODER
"""The encoder used when no network is named."""


def parse_xpriv(s: str) -> XPriv:
    """Parse a base58check extended private key with the default encoder."""
    return ENCODER.xpriv_from_base58(s)


def parse_xpub(s: str) -> XPub:
    """Parse a base58check extended public key with the default encoder."""
    return ENCODER.xpub_from_base58(s)


def fingerprint_of(key: VerifyingKey) -> KeyFingerprint:
    """First 4 bytes of the HASH160 of a public key."""
    return KeyFingerprint(hash160(key.to_bytes())[:4])