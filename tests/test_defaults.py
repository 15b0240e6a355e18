import pytest

from hdkeychain.defaults import ENCODER, fingerprint_of, parse_xpriv, parse_xpub
from hdkeychain.errors import BadB58ChecksumError, BadXPubVersionBytesError
from hdkeychain.primitives import Hint, KeyFingerprint

XPRIV = (
    "xprv9s21ZrQH143K3QTDL4LXw2F7HEK3wJUD2nW2nRk4stbPy6cq3jPPqjiChkVvvNKmPGJxWUtg6LnF5kejMRNNU3TGtRBeJgk33yuGBxrMPHi"
)
XPUB = (
    "xpub661MyMwAqRbcFtXgS5sYJABqqG9YLmC4Q1Rdap9gSE8NqtwybGhePY2gZ29ESFjqJoCu1Rupje8YtGqsefD265TMg7usUDFdp6W1EGMcet8"
)
CHILD_XPUB = (
    "xpub68NZiKmJWnxxS6aaHmn81bvJeTESw724CRDs6HbuccFQN9Ku14VQrADWgqbhhTHBaohPX4CjNLf9fq9MYo6oDaPPLPxSb7gwQN3ih19Zm4Y"
)


def test_parse_xpriv_round_trip():
    xpriv = parse_xpriv(XPRIV)
    assert ENCODER.xpriv_to_base58(xpriv) == XPRIV
    assert xpriv.xkey_info.hint is Hint.LEGACY


def test_parse_xpub_round_trip():
    xpub = parse_xpub(CHILD_XPUB)
    assert ENCODER.xpub_to_base58(xpub) == CHILD_XPUB
    assert xpub.xkey_info.depth == 1


def test_parsed_keys_match():
    assert parse_xpriv(XPRIV).verify_key() == parse_xpub(XPUB)


def test_fingerprint_of_matches_xpub():
    xpub = parse_xpub(XPUB)
    assert fingerprint_of(xpub.key) == xpub.fingerprint()


def test_fingerprint_of_master_is_childs_parent():
    master = parse_xpriv(XPRIV)
    child = master.derive_child(0)
    assert child.xkey_info.parent == fingerprint_of(master.key.verify_key())


def test_fingerprint_of_bip32_master():
    xpub = parse_xpub(XPUB)
    assert fingerprint_of(xpub.key) == KeyFingerprint(bytes.fromhex("3442193e"))


def test_parse_xpub_rejects_xpriv():
    with pytest.raises(BadXPubVersionBytesError):
        parse_xpub(XPRIV)


def test_parse_xpriv_rejects_bad_checksum():
    tampered = XPRIV[:-1] + ("j" if XPRIV[-1] != "j" else "k")
    with pytest.raises(BadB58ChecksumError):
        parse_xpriv(tampered)