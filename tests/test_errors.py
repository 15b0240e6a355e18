import pytest

from hdkeychain.errors import (
    B58Error,
    BackendError,
    BadB58ChecksumError,
    BadPaddingError,
    BadTweakError,
    BadXPrivVersionBytesError,
    BadXPubVersionBytesError,
    Bip32Error,
    HardenedDerivationError,
    InvalidBip32PathError,
    MalformattedDerivationError,
    SeedTooShortError,
)


def test_seed_too_short_message():
    assert str(SeedTooShortError()) == "Master key seed generation received <16 bytes"


def test_hardened_derivation_message():
    assert str(HardenedDerivationError()) == "Attempted to derive the hardened child of an xpub"


def test_bad_padding_keeps_byte():
    err = BadPaddingError(7)
    assert err.byte == 7
    assert str(err) == "Expected 0 padding byte. Got 7"


def test_malformatted_derivation_keeps_value():
    err = MalformattedDerivationError("toast")
    assert err.value == "toast"
    assert str(err) == "Malformatted index during derivation: toast"


@pytest.mark.parametrize("cls", [BadXPrivVersionBytesError, BadXPubVersionBytesError])
def test_version_bytes_errors_show_hex(cls):
    err = cls([0x04, 0x88, 0xAD, 0xE4])
    assert err.version == bytes([0x04, 0x88, 0xAD, 0xE4])
    assert "0488ade4" in str(err)


@pytest.mark.parametrize(
    "cls",
    [
        BackendError,
        SeedTooShortError,
        BadTweakError,
        BadB58ChecksumError,
        B58Error,
        InvalidBip32PathError,
    ],
)
def test_errors_are_caught_as_base(cls):
    with pytest.raises(Bip32Error) as info:
        raise cls()
    assert str(info.value) == cls.message


def test_custom_message_overrides_default():
    assert str(BackendError("point is not on the curve")) == "point is not on the curve"