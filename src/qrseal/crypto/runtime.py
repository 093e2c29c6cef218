"""Process-wide, initialize-once setup of the cryptographic backend."""

from __future__ import annotations

import logging
import secrets
import threading

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.backends.openssl.backend import backend
from cryptography.hazmat.primitives.ciphers.aead import ChaCha20Poly1305

from qrseal.errors import CryptoUnavailable

logger = logging.getLogger(__name__)

_lock = threading.Lock()
_initialized = False


def _self_test() -> None:
    key = ChaCha20Poly1305.generate_key()
    nonce = secrets.token_bytes(12)
    probe = secrets.token_bytes(32)
    cipher = ChaCha20Poly1305(key)
    try:
        recovered = cipher.decrypt(nonce, cipher.encrypt(nonce, probe, None), None)
    except InvalidTag as exc:
        raise CryptoUnavailable("ChaCha20-Poly1305 self-test failed") from exc
    if recovered != probe:
        raise CryptoUnavailable("ChaCha20-Poly1305 self-test returned wrong plaintext")


def ensure_initialized() -> None:
    """Initialize the crypto backend once per process.

    Safe to call from any thread, any number of times.
    """
    global _initialized
    if _initialized:
        return
    with _lock:
        if _initialized:
            return
        _self_test()
        logger.debug("crypto backend ready: %s", backend.openssl_version_text())
        _initialized = True


def is_initialized() -> bool:
    return _initialized
