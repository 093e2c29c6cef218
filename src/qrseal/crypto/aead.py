"""ChaCha20-Poly1305 helpers producing self-contained ``nonce || ct || tag`` blobs."""

from __future__ import annotations

import secrets

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import ChaCha20Poly1305

from qrseal.errors import DecryptionFailed

KEY_LEN = 32
NONCE_LEN = 12
TAG_LEN = 16

_DECRYPT_MESSAGE = "Decryption failed (bad key or corrupted data)"


def encrypt(plaintext: bytes, key: bytes) -> bytes:
    """Encrypt under a fresh random nonce and prepend that nonce."""

    nonce = secrets.token_bytes(NONCE_LEN)
    sealed = ChaCha20Poly1305(bytes(key)).encrypt(nonce, plaintext, None)
    return nonce + sealed


def decrypt(blob: bytes, key: bytes) -> bytes:
    """Split the nonce off ``blob``, verify the tag and decrypt.

    Every failure, including a blob too short to hold a nonce, raises
    :class:`DecryptionFailed` with the same message.
    """

    if len(blob) < NONCE_LEN:
        raise DecryptionFailed(_DECRYPT_MESSAGE)

    nonce, sealed = blob[:NONCE_LEN], blob[NONCE_LEN:]
    try:
        return ChaCha20Poly1305(bytes(key)).decrypt(nonce, sealed, None)
    except InvalidTag as exc:
        raise DecryptionFailed(_DECRYPT_MESSAGE) from exc
