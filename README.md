# hdkeychain

Hierarchical deterministic keys for secp256k1, following BIP32, with the
BIP49 and BIP84 version-byte conventions for serialized extended keys.

The package can:

- build a root extended private key (`XPriv`) from seed data,
- derive private and public children, hardened and unhardened,
- parse and print derivation paths such as `m/44'/0'/0'/0/5`,
- encode and decode extended keys as base58check strings for mainnet and
  testnet,
- keep track of where a key came from (`DerivedXPriv`, `DerivedXPub`,
  `DerivedPubkey`) and check whether one key is an ancestor of another,
- sign 32-byte digests and verify the signatures, including recoverable
  signatures from which the public key can be recovered.

It is not designed for adversarial environments and has not had a security
review. The elliptic-curve arithmetic in `hdkeychain.ecdsa` is plain Python
integer arithmetic: it is slow and makes no attempt at constant-time
execution.

## Installation

```
pip install hdkeychain
```

The only runtime dependency is `pycryptodome`, used for the RIPEMD160 half
of the HASH160 digest.

## Modules

| Module | Contents |
| --- | --- |
| `hdkeychain.errors` | `Bip32Error` and its subclasses |
| `hdkeychain.primitives` | `Hint`, `KeyFingerprint`, `ChainCode`, `XKeyInfo`, `BIP32_HARDEN`, `CURVE_ORDER` |
| `hdkeychain.path` | `DerivationPath`, `KeyDerivation`, `try_parse_index`, `try_parse_path`, `encode_index` |
| `hdkeychain.ecdsa` | `SigningKey`, `VerifyingKey`, `Signature`, `RecoverableSignature` |
| `hdkeychain.xkeys` | `XPriv`, `XPub`, `hash160`, `hmac_and_split`, `SEED` |
| `hdkeychain.enc` | `XKeyEncoder`, `NetworkParams`, `MAIN`, `TEST`, `MAINNET_ENCODER`, `TESTNET_ENCODER`, `encode_b58_check`, `decode_b58_check` |
| `hdkeychain.defaults` | `parse_xpriv`, `parse_xpub`, `fingerprint_of` |
| `hdkeychain.derived` | `DerivedKey`, `DerivedXPriv`, `DerivedXPub`, `DerivedPubkey` |

## Derivation paths

```python
from hdkeychain.path import DerivationPath

path = DerivationPath.parse("m/44'/0'/0'/0/5")
print(path.derivation_string())   # m/44'/0'/0'/0/5
print(path.last_hardened())       # (2, 2147483648)
```

Hardened steps may be written with `'` or `h`; the leading `m` is optional.
A malformed string raises `MalformattedDerivationError`. `DerivationPath` is
an immutable sequence of indices and also offers `starts_with`,
`without_prefix`, `resized`, `extended` and `last`.

## Extended keys

```python
from hdkeychain.xkeys import XPriv

seed = bytes(range(16))           # use at least 128 bits of real entropy
root = XPriv.root_from_seed(seed, None)

child = root.derive_path("m/0'/1")
child_pub = child.verify_key()
print(child_pub.fingerprint())
```

`derive_path` accepts a path string, a `DerivationPath` or any iterable of
integer indices. A seed shorter than 16 bytes raises `SeedTooShortError`.
Public keys cannot derive hardened children; trying to do so raises
`HardenedDerivationError`. When no hint is given, root keys carry
`Hint.SEGWIT`, which selects the BIP84 version bytes when the key is
serialized. Two `XPub` objects compare equal when their public keys are
equal, whatever their metadata.

## Signing

```python
import hashlib

digest = hashlib.sha256(b"message").digest()
signature = child.sign_digest_recoverable(digest)
child_pub.verify_digest(digest, signature)          # raises BackendError if invalid
assert signature.recover_verify_key(digest) == child_pub.key
```

Signatures are deterministic (RFC 6979 nonces) and always have a low S
value. `Signature` converts to and from DER (`to_der`, `from_der`) and to
the 64-byte `r || s` form; `RecoverableSignature` reads and writes the
65-byte `r || s || v` form.

## Serialization

```python
from hdkeychain.enc import MAINNET_ENCODER
from hdkeychain.primitives import Hint
from hdkeychain.xkeys import XPriv

legacy_root = XPriv.root_from_seed(bytes(range(16)), Hint.LEGACY)
text = MAINNET_ENCODER.xpriv_to_base58(legacy_root)    # "xprv9s21ZrQH143K3QTD..."
assert MAINNET_ENCODER.xpriv_from_base58(text).key == legacy_root.key
```

An `XKeyEncoder` is built from a `NetworkParams` holding the six version
numbers of a network; `MAIN` and `TEST` are provided. It writes the standard
78-byte layout (`write_xpriv`, `write_xpub`), reads it back from bytes or a
binary stream (`read_xpriv`, `read_xpub`), and wraps both in base58check.
Unknown version bytes raise `BadXPrivVersionBytesError` or
`BadXPubVersionBytesError`; a bad checksum raises `BadB58ChecksumError`.
`read_xpriv_without_network` and `read_xpub_without_network` skip the
version check and give the key `Hint.LEGACY`.

`hdkeychain.defaults` parses mainnet strings with `parse_xpriv` and
`parse_xpub`, and `fingerprint_of` returns the fingerprint of a bare
`VerifyingKey`.

## Keys with their derivation

```python
from hdkeychain.derived import DerivedXPriv

master = DerivedXPriv.root_from_seed(bytes(range(16)), None)
descendant = master.derive_path("m/0'/1/2'").verify_key()

assert master.is_possible_ancestor_of(descendant)
assert master.is_private_ancestor_of(descendant)
print(master.path_to_descendant(descendant).derivation_string())   # m/0'/1/2'
```

`same_root` and `is_possible_ancestor_of` only compare root fingerprints and
path prefixes, so they can be fooled; `is_private_ancestor_of` and
`DerivedXPub.is_public_ancestor_of` re-derive the key and compare it. The
public check raises `HardenedDerivationError` if the path between the keys
contains a hardened step.

## What it does not do

The package works on seeds and extended keys only. It does not turn
mnemonic phrases into seeds, does not produce addresses or scripts, does not
read serialized `KeyDerivation` records (it only writes them with
`to_bytes`), and offers no command-line tool.

## Running the tests

```
pip install "hdkeychain[test]"
pytest
```