"""Derivation paths and their string form."""

from __future__ import annotations

import re
import struct
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Optional

from .errors import MalformattedDerivationError
from .primitives import BIP32_HARDEN, KeyFingerprint

_MAX_INDEX = 0xFFFF_FFFF
_DIGITS = re.compile(r"\+?[0-9]+")


def try_parse_index(s: str) -> int:
    """Parse one index such as ``"32"``, ``"32'"`` or ``"32h"``."""
    hardened = s.endswith(("'", "h"))
    body = s[:-1] if hardened else s
    if not _DIGITS.fullmatch(body):
        raise MalformattedDerivationError(s)
    value = int(body)
    if value > _MAX_INDEX or (hardened and value >= BIP32_HARDEN):
        raise MalformattedDerivationError(s)
    return value + BIP32_HARDEN if hardened else value


def try_parse_path(path: str) -> list[int]:
    """Parse a path such as ``"m/44'/0'/0/32"`` into its indices."""
    try:
        return [try_parse_index(part) for part in path.split("/") if part != "m"]
    except MalformattedDerivationError:
        raise MalformattedDerivationError(path) from None


def encode_index(idx: int, harden: str) -> str:
    """Render one index, marking hardened ones with ``harden``."""
    text = str(idx % BIP32_HARDEN)
    return text + harden if idx >= BIP32_HARDEN else text


@dataclass(frozen=True)
class DerivationPath(Sequence):
    """An immutable sequence of BIP32 child indices."""

    indices: tuple = ()

    def __post_init__(self):
        if isinstance(self.indices, (str, bytes)):
            raise TypeError("use DerivationPath.parse to read a path string")
        indices = tuple(self.indices)
        for idx in indices:
            if isinstance(idx, bool) or not isinstance(idx, int) or not 0 <= idx <= _MAX_INDEX:
                raise ValueError(f"invalid derivation index: {idx!r}")
        object.__setattr__(self, "indices", indices)

    @classmethod
    def parse(cls, s: str) -> DerivationPath:
        """Parse a derivation string."""
        return cls(try_parse_path(s))

    def __len__(self) -> int:
        return len(self.indices)

    def __iter__(self):
        return iter(self.indices)

    def __getitem__(self, key):
        if isinstance(key, slice):
            return DerivationPath(self.indices[key])
        return self.indices[key]

    def __str__(self) -> str:
        return self.derivation_string()

    def custom_string(self, root: str, joiner: str, harden: str) -> str:
        return joiner.join([root, *(encode_index(idx, harden) for idx in self.indices)])

    def last(self) -> Optional[int]:
        """The last index, or None for the root path."""
        return self.indices[-1] if self.indices else None

    def derivation_string(self) -> str:
        """The standard form, e.g. ``"m/44'/0'/0/32"``."""
        return self.custom_string("m", "/", "'")

    def starts_with(self, other: DerivationPath) -> bool:
        """True if ``other`` is a prefix of this path."""
        return self.indices[: len(other)] == tuple(other)

    def without_prefix(self, prefix: DerivationPath) -> Optional[DerivationPath]:
        """This path with ``prefix`` removed, or None if it is not a prefix."""
        if not self.starts_with(prefix):
            return None
        return DerivationPath(self.indices[len(prefix):])

    def last_hardened(self) -> tuple[int, Optional[int]]:
        """Position and value of the last hardened index, or ``(0, None)``."""
        for pos, idx in reversed(list(enumerate(self.indices))):
            if idx >= BIP32_HARDEN:
                return pos, idx
        return 0, None

    def resized(self, size: int, pad_with: int) -> DerivationPath:
        """Truncate to ``size`` or pad with ``pad_with`` up to it."""
        padding = (pad_with,) * max(0, size - len(self.indices))
        return DerivationPath(self.indices[:size] + padding)

    def extended(self, idx: int) -> DerivationPath:
        """A copy with ``idx`` appended."""
        return DerivationPath(self.indices + (idx,))


@dataclass(frozen=True)
class KeyDerivation:
    """A root fingerprint together with the path from that root."""

    root: KeyFingerprint
    path: DerivationPath

    def same_root(self, other: KeyDerivation) -> bool:
        """True if both derivations share a root fingerprint (which may collide)."""
        return self.root == other.root

    def is_possible_ancestor_of(self, other: KeyDerivation) -> bool:
        """True if the roots match and this path is a prefix of the other."""
        return self.same_root(other) and other.path.starts_with(self.path)

    def path_to_descendant(self, descendant: KeyDerivation) -> Optional[DerivationPath]:
        """The path leading from this derivation to ``descendant``, if any."""
        return descendant.path.without_prefix(self.path)

    def resized(self, size: int, pad_with: int) -> KeyDerivation:
        return KeyDerivation(self.root, self.path.resized(size, pad_with))

    def extended(self, idx: int) -> KeyDerivation:
        return KeyDerivation(self.root, self.path.extended(idx))

    def serialized_length(self) -> int:
        return 4 + 4 * len(self.path)

    def to_bytes(self) -> bytes:
        """Fingerprint followed by each index as a little-endian u32."""
        return self.root.to_bytes() + b"".join(struct.pack("<I", idx) for idx in self.path)