"""ECDSA over secp256k1: keys, signatures and public-key recovery."""

from __future__ import annotations

import hashlib
import hmac
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple, Union

from .errors import BackendError, BadTweakError
from .primitives import CURVE_ORDER

_P = 2**256 - 2**32 - 977
_N = int.from_bytes(CURVE_ORDER, "big")
_HALF_N = _N // 2
_G = (
    0x79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798,
    0x483ADA7726A3C4655DA4FBFC0E1108A8FD17B448A68554199C47D08FFB10D4B8,
)

_Point = Optional[Tuple[int, int]]


def _on_curve(x: int, y: int) -> bool:
    return 0 <= x < _P and 0 <= y < _P and (y * y - x * x * x - 7) % _P == 0


def _point_add(a: _Point, b: _Point) -> _Point:
    if a is None:
        return b
    if b is None:
        return a
    x1, y1 = a
    x2, y2 = b
    if x1 == x2:
        if (y1 + y2) % _P == 0:
            return None
        lam = 3 * x1 * x1 * pow(2 * y1, -1, _P) % _P
    else:
        lam = (y2 - y1) * pow(x2 - x1, -1, _P) % _P
    x3 = (lam * lam - x1 - x2) % _P
    return x3, (lam * (x1 - x3) - y1) % _P


def _point_mul(k: int, point: _Point) -> _Point:
    result: _Point = None
    addend = point
    k %= _N
    while k:
        if k & 1:
            result = _point_add(result, addend)
        addend = _point_add(addend, addend)
        k >>= 1
    return result


def _lift_x(x: int, odd: int) -> Optional[int]:
    if x >= _P:
        return None
    rhs = (pow(x, 3, _P) + 7) % _P
    y = pow(rhs, (_P + 1) // 4, _P)
    if y * y % _P != rhs:
        return None
    return y if (y & 1) == odd else _P - y


def _digest_to_int(digest) -> int:
    data = bytes(digest)
    if len(data) != 32:
        raise ValueError(f"digest must be 32 bytes, got {len(data)}")
    return int.from_bytes(data, "big")


def _rfc6979_nonces(secret: int, z: int) -> Iterator[int]:
    """Deterministic nonce candidates (RFC 6979 with HMAC-SHA256)."""

    def mac(key: bytes, data: bytes) -> bytes:
        return hmac.new(key, data, hashlib.sha256).digest()

    x = secret.to_bytes(32, "big")
    h1 = (z % _N).to_bytes(32, "big")
    v = b"\x01" * 32
    k = b"\x00" * 32
    k = mac(k, v + b"\x00" + x + h1)
    v = mac(k, v)
    k = mac(k, v + b"\x01" + x + h1)
    v = mac(k, v)
    while True:
        v = mac(k, v)
        candidate = int.from_bytes(v, "big")
        if 1 <= candidate < _N:
            yield candidate
        k = mac(k, v + b"\x00")
        v = mac(k, v)


def _check_scalars(r: int, s: int) -> None:
    if not (1 <= r < _N and 1 <= s < _N):
        raise BackendError("signature scalar out of range")


def _encode_der_int(value: int) -> bytes:
    body = value.to_bytes((value.bit_length() + 7) // 8 or 1, "big")
    if body[0] & 0x80:
        body = b"\x00" + body
    return b"\x02" + bytes([len(body)]) + body


def _read_der_int(data: bytes) -> tuple[int, bytes]:
    if len(data) < 2 or data[0] != 0x02:
        raise BackendError("malformed DER signature")
    length = data[1]
    body = data[2 : 2 + length]
    if length == 0 or len(body) != length or body[0] & 0x80:
        raise BackendError("malformed DER signature")
    if length > 1 and body[0] == 0 and not body[1] & 0x80:
        raise BackendError("non-minimal DER integer")
    return int.from_bytes(body, "big"), data[2 + length :]


@dataclass(frozen=True)
class Signature:
    """An ECDSA signature ``(r, s)``."""

    r: int
    s: int

    def __post_init__(self):
        _check_scalars(self.r, self.s)

    def to_der(self) -> bytes:
        body = _encode_der_int(self.r) + _encode_der_int(self.s)
        return b"\x30" + bytes([len(body)]) + body

    @classmethod
    def from_der(cls, data) -> Signature:
        data = bytes(data)
        if len(data) < 8 or data[0] != 0x30 or data[1] != len(data) - 2:
            raise BackendError("malformed DER signature")
        r, rest = _read_der_int(data[2:])
        s, rest = _read_der_int(rest)
        if rest:
            raise BackendError("trailing bytes after DER signature")
        return cls(r, s)

    def to_bytes(self) -> bytes:
        """The 64-byte ``r || s`` form."""
        return self.r.to_bytes(32, "big") + self.s.to_bytes(32, "big")


@dataclass(frozen=True)
class RecoverableSignature:
    """An ECDSA signature with the id needed to recover the public key."""

    r: int
    s: int
    recovery_id: int

    def __post_init__(self):
        _check_scalars(self.r, self.s)
        if not 0 <= self.recovery_id <= 3:
            raise BackendError(f"invalid recovery id {self.recovery_id}")

    @classmethod
    def from_bytes(cls, data) -> RecoverableSignature:
        """Read the 65-byte ``r || s || v`` form."""
        data = bytes(data)
        if len(data) != 65:
            raise BackendError("recoverable signature must be 65 bytes")
        return cls(
            int.from_bytes(data[:32], "big"), int.from_bytes(data[32:64], "big"), data[64]
        )

    def to_bytes(self) -> bytes:
        return self.to_signature().to_bytes() + bytes([self.recovery_id])

    def to_signature(self) -> Signature:
        return Signature(self.r, self.s)

    def recover_verify_key(self, digest) -> VerifyingKey:
        """Recover the public key that produced this signature over ``digest``."""
        z = _digest_to_int(digest)
        x = self.r + (self.recovery_id >> 1) * _N
        y = _lift_x(x, self.recovery_id & 1)
        if y is None:
            raise BackendError("cannot recover public key")
        r_inv = pow(self.r, -1, _N)
        point = _point_add(
            _point_mul(self.s * r_inv, (x, y)), _point_mul(-z * r_inv, _G)
        )
        if point is None:
            raise BackendError("cannot recover public key")
        return VerifyingKey(*point)


@dataclass(frozen=True, repr=False)
class SigningKey:
    """A secp256k1 private key."""

    secret: int

    def __post_init__(self):
        if not 1 <= self.secret < _N:
            raise BackendError("secret scalar out of range")

    def __repr__(self) -> str:
        return f"SigningKey(public={self.verify_key().to_bytes().hex()})"

    @classmethod
    def from_bytes(cls, data) -> SigningKey:
        data = bytes(data)
        if len(data) != 32:
            raise BackendError("private key must be 32 bytes")
        return cls(int.from_bytes(data, "big"))

    def to_bytes(self) -> bytes:
        return self.secret.to_bytes(32, "big")

    def verify_key(self) -> VerifyingKey:
        point = _point_mul(self.secret, _G)
        assert point is not None
        return VerifyingKey(*point)

    def tweaked(self, scalar: int) -> SigningKey:
        """The key whose secret is this secret plus ``scalar``."""
        secret = (self.secret + scalar) % _N
        if secret == 0:
            raise BadTweakError()
        return SigningKey(secret)

    def _sign(self, digest) -> RecoverableSignature:
        z = _digest_to_int(digest)
        for k in _rfc6979_nonces(self.secret, z):
            point = _point_mul(k, _G)
            assert point is not None
            r = point[0] % _N
            if r == 0:
                continue
            s = pow(k, -1, _N) * (z + r * self.secret) % _N
            if s == 0:
                continue
            recovery_id = (point[1] & 1) | (2 if point[0] >= _N else 0)
            if s > _HALF_N:
                s = _N - s
                recovery_id ^= 1
            return RecoverableSignature(r, s, recovery_id)
        raise BackendError("nonce generation exhausted")

    def sign_digest(self, digest) -> Signature:
        """Sign a 32-byte digest deterministically, with low S."""
        return self._sign(digest).to_signature()

    def sign_digest_recoverable(self, digest) -> RecoverableSignature:
        """Sign a 32-byte digest and keep the recovery id."""
        return self._sign(digest)


@dataclass(frozen=True, repr=False)
class VerifyingKey:
    """A secp256k1 public key (affine point)."""

    x: int
    y: int

    def __post_init__(self):
        if not _on_curve(self.x, self.y):
            raise BackendError("point is not on the curve")

    def __repr__(self) -> str:
        return f"VerifyingKey({self.to_bytes().hex()})"

    @classmethod
    def from_sec1_bytes(cls, data) -> VerifyingKey:
        """Read a compressed (33-byte) or uncompressed (65-byte) SEC1 point."""
        data = bytes(data)
        if len(data) == 33 and data[0] in (2, 3):
            x = int.from_bytes(data[1:], "big")
            y = _lift_x(x, data[0] & 1)
            if y is None:
                raise BackendError("point is not on the curve")
            return cls(x, y)
        if len(data) == 65 and data[0] == 4:
            return cls(int.from_bytes(data[1:33], "big"), int.from_bytes(data[33:], "big"))
        raise BackendError("malformed SEC1 public key")

    def to_bytes(self) -> bytes:
        """The 33-byte compressed SEC1 form."""
        return bytes([2 | (self.y & 1)]) + self.x.to_bytes(32, "big")

    def tweaked(self, scalar: int) -> VerifyingKey:
        """The key at this point plus ``scalar`` times the generator."""
        point = _point_add((self.x, self.y), _point_mul(scalar, _G))
        if point is None:
            raise BadTweakError()
        return VerifyingKey(*point)

    def verify_digest(
        self, digest, signature: Union[Signature, RecoverableSignature]
    ) -> None:
        """Raise BackendError unless ``signature`` is valid for ``digest``."""
        if isinstance(signature, RecoverableSignature):
            signature = signature.to_signature()
        z = _digest_to_int(digest)
        w = pow(signature.s, -1, _N)
        point = _point_add(
            _point_mul(z * w, _G), _point_mul(signature.r * w, (self.x, self.y))
        )
        if point is None or point[0] % _N != signature.r:
            raise BackendError("signature verification failed")