"""Extended private and public keys and child key derivation."""

from __future__ import annotations

import hashlib
import hmac
from dataclasses import dataclass
from typing import Iterable, Optional, Union

from Crypto.Hash import RIPEMD160

from .ecdsa import RecoverableSignature, Signature, SigningKey, VerifyingKey
from .errors import HardenedDerivationError, InvalidKeyError, SeedTooShortError
from .path import DerivationPath
from .primitives import BIP32_HARDEN, CURVE_ORDER, ChainCode, Hint, KeyFingerprint, XKeyInfo

SEED = b"Bitcoin seed"
"""The HMAC key BIP32 uses to generate a root node."""

_N = int.from_bytes(CURVE_ORDER, "big")
_MIN_SEED_LENGTH = 16

PathLike = Union[str, DerivationPath, Iterable[int]]


def hash160(data) -> bytes:
    """RIPEMD160 of the SHA256 of ``data``."""
    inner = hashlib.sha256(bytes(data)).digest()
    return RIPEMD160.new(inner).digest()


def hmac_and_split(seed, data) -> tuple[int, ChainCode]:
    """HMAC-SHA512 ``data`` under ``seed``; return the left scalar and right chain code.

    Raises InvalidKeyError if the left half is zero or not below the curve order.
    """
    result = hmac.new(bytes(seed), bytes(data), hashlib.sha512).digest()
    left = int.from_bytes(result[:32], "big")
    if not 0 < left < _N:
        raise InvalidKeyError()
    return left, ChainCode(result[32:])


def _as_path(path: PathLike) -> DerivationPath:
    if isinstance(path, DerivationPath):
        return path
    if isinstance(path, str):
        return DerivationPath.parse(path)
    return DerivationPath(tuple(path))


def _fingerprint_of(key: VerifyingKey) -> KeyFingerprint:
    return KeyFingerprint(hash160(key.to_bytes())[:4])


@dataclass(frozen=True, repr=False)
class XPriv:
    """A BIP32 extended private key."""

    key: SigningKey
    xkey_info: XKeyInfo

    def __repr__(self) -> str:
        return f"XPriv(fingerprint={self.fingerprint()!r}, info={self.xkey_info!r})"

    @classmethod
    def root_node(cls, hmac_key, data, hint: Optional[Hint] = None) -> XPriv:
        """Generate a root node using a custom HMAC key."""
        return cls.custom_root_node(hmac_key, data, hint)

    @classmethod
    def root_from_seed(cls, data, hint: Optional[Hint] = None) -> XPriv:
        """Generate a root node from seed data (use at least 128 bits)."""
        return cls.custom_root_from_seed(data, hint)

    @classmethod
    def custom_root_node(cls, hmac_key, data, hint: Optional[Hint] = None) -> XPriv:
        """Generate a root node from ``data`` keyed by ``hmac_key``."""
        data = bytes(data)
        if len(data) < _MIN_SEED_LENGTH:
            raise SeedTooShortError()
        secret, chain_code = hmac_and_split(hmac_key, data)
        return cls(
            SigningKey(secret),
            XKeyInfo(
                depth=0,
                parent=KeyFingerprint(bytes(4)),
                index=0,
                chain_code=chain_code,
                hint=Hint.SEGWIT if hint is None else hint,
            ),
        )

    @classmethod
    def custom_root_from_seed(cls, data, hint: Optional[Hint] = None) -> XPriv:
        """Generate a root node from seed data using the standard HMAC key."""
        return cls.custom_root_node(SEED, data, hint)

    def verify_key(self) -> XPub:
        """The matching extended public key."""
        return XPub(self.key.verify_key(), self.xkey_info)

    def fingerprint(self) -> KeyFingerprint:
        """First 4 bytes of the HASH160 of the public key."""
        return _fingerprint_of(self.key.verify_key())

    def derive_child(self, index: int) -> XPriv:
        """Derive the private child at ``index`` (or a later index if that one is invalid)."""
        if index >= BIP32_HARDEN:
            data = b"\x00" + self.key.to_bytes() + index.to_bytes(4, "big")
        else:
            data = self.key.verify_key().to_bytes() + index.to_bytes(4, "big")
        try:
            tweak, chain_code = hmac_and_split(self.xkey_info.chain_code.value, data)
        except InvalidKeyError:
            return self.derive_child(index + 1)
        return XPriv(
            self.key.tweaked(tweak),
            XKeyInfo(
                depth=self.xkey_info.depth + 1,
                parent=self.fingerprint(),
                index=index,
                chain_code=chain_code,
                hint=self.xkey_info.hint,
            ),
        )

    def derive_path(self, path: PathLike) -> XPriv:
        """Derive through every index of ``path``, given as a string or indices."""
        current = self
        for index in _as_path(path):
            current = current.derive_child(index)
        return current

    def sign_digest(self, digest) -> Signature:
        """Sign a 32-byte digest."""
        return self.key.sign_digest(digest)

    def sign_digest_recoverable(self, digest) -> RecoverableSignature:
        """Sign a 32-byte digest, keeping the recovery id."""
        return self.key.sign_digest_recoverable(digest)


@dataclass(frozen=True, repr=False, eq=False)
class XPub:
    """A BIP32 extended public key. Equality compares the public key only."""

    key: VerifyingKey
    xkey_info: XKeyInfo

    def __eq__(self, other) -> bool:
        if not isinstance(other, XPub):
            return NotImplemented
        return self.key.to_bytes() == other.key.to_bytes()

    def __hash__(self) -> int:
        return hash(self.key.to_bytes())

    def __repr__(self) -> str:
        return (
            f"XPub(public_key={self.to_bytes().hex()}, "
            f"fingerprint={self.fingerprint()!r}, info={self.xkey_info!r})"
        )

    def to_bytes(self) -> bytes:
        """The compressed SEC1 public key."""
        return self.key.to_bytes()

    def fingerprint(self) -> KeyFingerprint:
        """First 4 bytes of the HASH160 of the public key."""
        return KeyFingerprint(self.pubkey_hash160()[:4])

    def pubkey_hash160(self) -> bytes:
        """HASH160 of the compressed public key."""
        return hash160(self.key.to_bytes())

    def derive_child(self, index: int) -> XPub:
        """Derive the public child at ``index``; hardened indices are refused."""
        if index >= BIP32_HARDEN:
            raise HardenedDerivationError()
        data = self.key.to_bytes() + index.to_bytes(4, "big")
        try:
            tweak, chain_code = hmac_and_split(self.xkey_info.chain_code.value, data)
        except InvalidKeyError:
            return self.derive_child(index + 1)
        return XPub(
            self.key.tweaked(tweak),
            XKeyInfo(
                depth=self.xkey_info.depth + 1,
                parent=self.fingerprint(),
                index=index,
                chain_code=chain_code,
                hint=self.xkey_info.hint,
            ),
        )

    def derive_path(self, path: PathLike) -> XPub:
        """Derive through every index of ``path``, given as a string or indices."""
        current = self
        for index in _as_path(path):
            current = current.derive_child(index)
        return current

    def verify_digest(self, digest, signature) -> None:
        """Raise BackendError unless ``signature`` is valid for ``digest``."""
        self.key.verify_digest(digest, signature)