import hashlib

import pytest

from hdkeychain.errors import (
    BackendError,
    HardenedDerivationError,
    MalformattedDerivationError,
    SeedTooShortError,
)
from hdkeychain.path import DerivationPath
from hdkeychain.primitives import BIP32_HARDEN, Hint, KeyFingerprint
from hdkeychain.xkeys import SEED, XPriv, XPub, hash160, hmac_and_split

VECTOR_1_SEED = bytes(range(16))
VECTOR_2_SEED = bytes.fromhex(
    "fffcf9f6f3f0edeae7e4e1dedbd8d5d2cfccc9c6c3c0bdbab7b4b1aeaba8a5a2"
    "9f9c999693908d8a8784817e7b7875726f6c696663605d5a5754514e4b484542"
)
DIGEST = hashlib.sha256(b"message").digest()
WRONG_DIGEST = hashlib.sha256(b"other message").digest()


@pytest.fixture
def master():
    return XPriv.root_from_seed(VECTOR_1_SEED, Hint.LEGACY)


def test_vector_1_master_key(master):
    assert master.key.to_bytes().hex() == (
        "e8f32e723decf4051aefac8e2c93c9c5b214313817cdb01a1494b917c8436b35"
    )
    assert master.verify_key().to_bytes().hex() == (
        "0339a36013301597daef41fbe593a02cc513d0b55527ec2df1050e2e8ff49c85c2"
    )
    assert master.fingerprint() == KeyFingerprint(bytes.fromhex("3442193e"))


def test_root_metadata(master):
    info = master.xkey_info
    assert info.depth == 0
    assert info.index == 0
    assert info.parent == KeyFingerprint(bytes(4))
    assert info.hint is Hint.LEGACY
    assert info.chain_code == hmac_and_split(SEED, VECTOR_1_SEED)[1]


def test_root_secret_comes_from_hmac_left_half(master):
    secret, _ = hmac_and_split(SEED, VECTOR_1_SEED)
    assert master.key.secret == secret


def test_default_hint_is_segwit():
    key = XPriv.custom_root_from_seed(bytes(32))
    assert key.xkey_info.hint is Hint.SEGWIT


def test_root_node_uses_custom_key():
    custom = XPriv.root_node(b"other key", VECTOR_2_SEED, Hint.LEGACY)
    standard = XPriv.root_from_seed(VECTOR_2_SEED, Hint.LEGACY)
    assert custom.key.to_bytes() != standard.key.to_bytes()
    assert XPriv.root_node(SEED, VECTOR_2_SEED, Hint.LEGACY) == standard


def test_seed_too_short():
    with pytest.raises(SeedTooShortError):
        XPriv.custom_root_from_seed(bytes(2))
    with pytest.raises(SeedTooShortError):
        XPriv.root_from_seed(bytes(15))


def test_child_metadata(master):
    child = master.derive_child(BIP32_HARDEN)
    assert child.xkey_info.depth == 1
    assert child.xkey_info.index == BIP32_HARDEN
    assert child.xkey_info.parent == master.fingerprint()
    assert child.xkey_info.hint is master.xkey_info.hint


def test_public_and_private_derivation_agree(master):
    path = [0, 1, 2, 7]
    from_private = master.derive_path(path).verify_key()
    from_public = master.verify_key().derive_path(path)
    assert from_private == from_public
    assert from_private.xkey_info == from_public.xkey_info


def test_public_derivation_after_hardened_step(master):
    hardened = master.derive_child(BIP32_HARDEN)
    assert hardened.derive_child(5).verify_key() == hardened.verify_key().derive_child(5)


def test_hardened_public_derivation_fails(master):
    with pytest.raises(HardenedDerivationError):
        master.verify_key().derive_child(BIP32_HARDEN)
    with pytest.raises(HardenedDerivationError):
        master.verify_key().derive_path("m/0/1'")


def test_derive_path_accepts_strings(master):
    by_string = master.derive_path("m/0'/1/2h")
    by_indices = master.derive_path([BIP32_HARDEN, 1, 2 + BIP32_HARDEN])
    by_path = master.derive_path(DerivationPath((BIP32_HARDEN, 1, 2 + BIP32_HARDEN)))
    assert by_string.key.to_bytes() == by_indices.key.to_bytes()
    assert by_path.key.to_bytes() == by_indices.key.to_bytes()
    assert by_string.xkey_info.depth == 3


def test_derive_path_matches_step_by_step(master):
    stepped = master.derive_child(BIP32_HARDEN).derive_child(1)
    assert master.derive_path([BIP32_HARDEN, 1]) == stepped


def test_empty_path_returns_same_key(master):
    assert master.derive_path("m") == master
    assert master.derive_path([]) == master
    pub = master.verify_key()
    assert pub.derive_path(DerivationPath()) == pub


def test_bad_path_string(master):
    with pytest.raises(MalformattedDerivationError):
        master.derive_path("m/toast")


def test_fingerprint_is_hash160_prefix(master):
    pub = master.derive_child(3).verify_key()
    assert len(pub.pubkey_hash160()) == 20
    assert pub.pubkey_hash160() == hash160(pub.to_bytes())
    assert pub.fingerprint().to_bytes() == pub.pubkey_hash160()[:4]
    assert master.derive_child(3).fingerprint() == pub.fingerprint()


def test_xpub_equality_ignores_metadata(master):
    pub = master.verify_key()
    other = XPub(pub.key, master.derive_child(0).xkey_info)
    assert pub == other
    assert hash(pub) == hash(other)
    assert pub != master.derive_child(0).verify_key()


def test_sign_and_verify(master):
    child = master.derive_child(33)
    pub = child.verify_key()
    sig = child.sign_digest(DIGEST)
    pub.verify_digest(DIGEST, sig)
    with pytest.raises(BackendError):
        pub.verify_digest(WRONG_DIGEST, sig)


def test_recoverable_signature_recovers_key(master):
    child = master.derive_child(33)
    pub = child.verify_key()
    sig = child.sign_digest_recoverable(DIGEST)
    pub.verify_digest(DIGEST, sig)
    assert sig.recover_verify_key(DIGEST).to_bytes() == pub.to_bytes()
    with pytest.raises(BackendError):
        pub.verify_digest(WRONG_DIGEST, sig)


def test_descendant_signature_checked_by_public_derivation(master):
    path = [0, 1, 2]
    sig = master.derive_path(path).sign_digest(DIGEST)
    master.verify_key().derive_path(path).verify_digest(DIGEST, sig)
    with pytest.raises(BackendError):
        master.verify_key().derive_path([0, 1, 3]).verify_digest(DIGEST, sig)


def test_repr_hides_secret(master):
    text = repr(master)
    assert master.key.to_bytes().hex() not in text
    assert master.fingerprint().to_bytes().hex() in text