"""Exceptions raised while handling hierarchical deterministic keys."""


class Bip32Error(Exception):
    """Base class for every error raised by this package."""

    message = "BIP32 error"

    def __str__(self) -> str:
        if self.args:
            return str(self.args[0])
        return self.message


class BackendError(Bip32Error):
    """An elliptic-curve operation failed: bad key, bad signature or bad point."""

    message = "elliptic curve backend error"


class SeedTooShortError(Bip32Error):
    """Master key generation received fewer than 16 bytes of seed."""

    message = "Master key seed generation received <16 bytes"


class InvalidKeyError(Bip32Error):
    """The left half of the HMAC output was not a valid scalar."""

    message = "HMAC left segment was 0 or greater than the curve order"


class HardenedDerivationError(Bip32Error):
    """A hardened child was requested from a public key."""

    message = "Attempted to derive the hardened child of an xpub"


class BadTweakError(Bip32Error):
    """Tweaking a key produced the zero scalar or the point at infinity."""

    message = "Attempted to tweak an xpriv or xpub directly"


class BadXPrivVersionBytesError(Bip32Error):
    """Serialized xpriv carries version bytes no network recognises."""

    def __init__(self, version):
        self.version = bytes(version)
        super().__init__(
            f"Version bytes 0x{self.version.hex()} don't match any network xpriv version bytes"
        )


class BadXPubVersionBytesError(Bip32Error):
    """Serialized xpub carries version bytes no network recognises."""

    def __init__(self, version):
        self.version = bytes(version)
        super().__init__(
            f"Version bytes 0x{self.version.hex()} don't match any network xpub version bytes"
        )


class BadPaddingError(Bip32Error):
    """The padding byte in front of a serialized private key was not zero."""

    def __init__(self, byte):
        self.byte = byte
        super().__init__(f"Expected 0 padding byte. Got {byte}")


class BadB58ChecksumError(Bip32Error):
    """The checksum of a base58check string did not match its payload."""

    message = "Checksum mismatch on b58 deserialization"


class B58Error(Bip32Error):
    """A string could not be decoded as base58."""

    message = "invalid base58 string"


class MalformattedDerivationError(Bip32Error):
    """A derivation index or path string could not be parsed."""

    def __init__(self, value):
        self.value = value
        super().__init__(f"Malformatted index during derivation: {value}")


class NoRecoveryIDError(Bip32Error):
    """A DER signature was used where a recoverable signature is required."""

    message = (
        "Attempted to deserialize a DER signature to a recoverable signature. "
        "Use deserialize_vrs instead"
    )


class InvalidBip32PathError(Bip32Error):
    """A serialized derivation path was too long."""

    message = "Invalid Bip32 Path."