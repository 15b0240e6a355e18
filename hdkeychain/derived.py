"""Extended keys and public keys coupled with their derivation from a root."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .ecdsa import RecoverableSignature, Signature, VerifyingKey
from .path import DerivationPath, KeyDerivation
from .primitives import Hint, KeyFingerprint
from .xkeys import SEED, PathLike, XPriv, XPub, _as_path, hash160


class DerivedKey:
    """Mixin for keys that carry a ``derivation`` attribute.

    Ancestry checks here compare root fingerprints, which may collide, and
    path prefixes. They are cheap but can be fooled; use
    ``DerivedXPriv.is_private_ancestor_of`` or
    ``DerivedXPub.is_public_ancestor_of`` for a precise answer.
    """

    derivation: KeyDerivation

    def same_root(self, other: DerivedKey) -> bool:
        """True if both keys share a root fingerprint."""
        return self.derivation.same_root(other.derivation)

    def is_possible_ancestor_of(self, other: DerivedKey) -> bool:
        """True if the roots match and this key's path is a prefix of the other's."""
        return self.derivation.is_possible_ancestor_of(other.derivation)

    def path_to_descendant(self, other: DerivedKey) -> Optional[DerivationPath]:
        """The path from this key to ``other``, or None if it is definitely not a descendant."""
        return self.derivation.path_to_descendant(other.derivation)


def _root_derivation(xpriv: XPriv) -> KeyDerivation:
    return KeyDerivation(root=xpriv.fingerprint(), path=DerivationPath())


@dataclass(frozen=True)
class DerivedXPriv(DerivedKey):
    """An extended private key together with its derivation."""

    xpriv: XPriv
    derivation: KeyDerivation

    @classmethod
    def root_node(cls, hmac_key, data, hint: Optional[Hint] = None) -> DerivedXPriv:
        """Generate a root node using a custom HMAC key."""
        return cls.custom_root_node(hmac_key, data, hint)

    @classmethod
    def root_from_seed(cls, data, hint: Optional[Hint] = None) -> DerivedXPriv:
        """Generate a root node from seed data (use at least 128 bits)."""
        return cls.custom_root_from_seed(data, hint)

    @classmethod
    def custom_root_node(cls, hmac_key, data, hint: Optional[Hint] = None) -> DerivedXPriv:
        """Generate a root node from ``data`` keyed by ``hmac_key``."""
        xpriv = XPriv.custom_root_node(hmac_key, data, hint)
        return cls(xpriv, _root_derivation(xpriv))

    @classmethod
    def custom_root_from_seed(cls, data, hint: Optional[Hint] = None) -> DerivedXPriv:
        """Generate a root node from seed data using the standard HMAC key."""
        return cls.custom_root_node(SEED, data, hint)

    def verify_key(self) -> DerivedXPub:
        """The matching derived extended public key."""
        return DerivedXPub(self.xpriv.verify_key(), self.derivation)

    def is_private_ancestor_of(self, other: DerivedXPub) -> bool:
        """True if deriving from this key along the path reaches ``other``."""
        path = self.path_to_descendant(other)
        if path is None:
            return False
        return self.derive_path(path).verify_key() == other

    def derive_child(self, index: int) -> DerivedXPriv:
        """Derive the private child at ``index``, extending the derivation."""
        return DerivedXPriv(self.xpriv.derive_child(index), self.derivation.extended(index))

    def derive_path(self, path: PathLike) -> DerivedXPriv:
        """Derive through every index of ``path``, given as a string or indices."""
        current = self
        for index in _as_path(path):
            current = current.derive_child(index)
        return current

    def sign_digest(self, digest) -> Signature:
        """Sign a 32-byte digest."""
        return self.xpriv.sign_digest(digest)

    def sign_digest_recoverable(self, digest) -> RecoverableSignature:
        """Sign a 32-byte digest, keeping the recovery id."""
        return self.xpriv.sign_digest_recoverable(digest)


@dataclass(frozen=True)
class DerivedXPub(DerivedKey):
    """An extended public key together with its derivation."""

    xpub: XPub
    derivation: KeyDerivation

    def is_public_ancestor_of(self, other: DerivedXPub) -> bool:
        """True if public derivation along the path reaches ``other``.

        Raises HardenedDerivationError if the path holds a hardened index.
        """
        path = self.path_to_descendant(other)
        if path is None:
            return False
        return self.derive_path(path) == other

    def derive_child(self, index: int) -> DerivedXPub:
        """Derive the public child at ``index``, extending the derivation."""
        return DerivedXPub(self.xpub.derive_child(index), self.derivation.extended(index))

    def derive_path(self, path: PathLike) -> DerivedXPub:
        """Derive through every index of ``path``, given as a string or indices."""
        current = self
        for index in _as_path(path):
            current = current.derive_child(index)
        return current

    def to_bytes(self) -> bytes:
        """The compressed SEC1 public key."""
        return self.xpub.to_bytes()

    def verify_digest(self, digest, signature) -> None:
        """Raise BackendError unless ``signature`` is valid for ``digest``."""
        self.xpub.verify_digest(digest, signature)


@dataclass(frozen=True, repr=False)
class DerivedPubkey(DerivedKey):
    """A plain public key together with its derivation."""

    key: VerifyingKey
    derivation: KeyDerivation

    def __repr__(self) -> str:
        return (
            f"DerivedPubkey(public_key={self.key.to_bytes().hex()}, "
            f"fingerprint={self.fingerprint()!r}, derivation={self.derivation!r})"
        )

    def pubkey_hash160(self) -> bytes:
        """HASH160 of the compressed public key."""
        return hash160(self.key.to_bytes())

    def fingerprint(self) -> KeyFingerprint:
        """First 4 bytes of the HASH160 of the public key."""
        return KeyFingerprint(self.pubkey_hash160()[:4])

    def to_bytes(self) -> bytes:
        """The compressed SEC1 public key."""
        return self.key.to_bytes()

    def verify_digest(self, digest, signature) -> None:
        """Raise BackendError unless ``signature`` is valid for ``digest``."""
        self.key.verify_digest(digest, signature)