"""Hierarchical deterministic secp256k1 keys: BIP32 derivation, signing and BIP49/BIP84 encodings."""

__version__ = "0.1.0"