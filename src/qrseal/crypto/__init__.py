"""Key derivation and authenticated encryption primitives."""
from __future__ import annotations

from qrseal.crypto.aead import NONCE_LEN, TAG_LEN, decrypt, encrypt
from qrseal.crypto.kdf import SALT_LEN, Argon2Params, derive_key, generate_salt
from qrseal.crypto.runtime import ensure_initialized

__all__ = [
    "Argon2Params",
    "NONCE_LEN",
    "SALT_LEN",
    "TAG_LEN",
    "decrypt",
    "derive_key",
    "encrypt",
    "ensure_initialized",
    "generate_salt",
]
