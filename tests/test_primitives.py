import dataclasses
import io

import pytest

from hdkeychain.primitives import ChainCode, Hint, KeyFingerprint, XKeyInfo


def test_fingerprint_eq_slice():
    fp = KeyFingerprint(b"\x01\x02\x03\x04")
    assert fp.eq_slice([1, 2, 3, 4])
    assert not fp.eq_slice(b"\x01\x02\x03\x05")
    assert not fp.eq_slice(b"\x01\x02\x03")


def test_fingerprint_accepts_list_and_compares_by_value():
    assert KeyFingerprint([0, 0, 0, 0]) == KeyFingerprint(bytes(4))


def test_fingerprint_read_from_round_trip():
    stream = io.BytesIO(b"\xde\xad\xbe\xef\xff")
    fp = KeyFingerprint.read_from(stream)
    assert fp.to_bytes() == b"\xde\xad\xbe\xef"
    assert stream.read() == b"\xff"


def test_fingerprint_short_read():
    with pytest.raises(EOFError):
        KeyFingerprint.read_from(io.BytesIO(b"\x01\x02"))


def test_fingerprint_repr_shows_hex():
    assert "deadbeef" in repr(KeyFingerprint(b"\xde\xad\xbe\xef"))


@pytest.mark.parametrize("raw", [b"", b"\x00" * 3, b"\x00" * 5])
def test_fingerprint_wrong_length(raw):
    with pytest.raises(ValueError):
        KeyFingerprint(raw)


def test_fingerprint_rejects_int():
    with pytest.raises(TypeError):
        KeyFingerprint(4)


def test_chain_code_length():
    assert ChainCode(bytes(range(32))).value == bytes(range(32))
    with pytest.raises(ValueError):
        ChainCode(bytes(31))


def _info(**overrides):
    fields = dict(
        depth=0,
        parent=KeyFingerprint(bytes(4)),
        index=0,
        chain_code=ChainCode(bytes(32)),
        hint=Hint.LEGACY,
    )
    fields.update(overrides)
    return XKeyInfo(**fields)


def test_xkey_info_equality():
    assert _info() == _info()
    assert _info(hint=Hint.SEGWIT) != _info()


def test_xkey_info_is_immutable():
    info = _info()
    with pytest.raises(dataclasses.FrozenInstanceError):
        info.depth = 3
    assert info.depth == 0


@pytest.mark.parametrize("overrides", [{"depth": 256}, {"depth": -1}, {"index": 1 << 32}])
def test_xkey_info_range_checks(overrides):
    with pytest.raises(ValueError):
        _info(**overrides)