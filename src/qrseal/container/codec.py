"""Encode/decode pipeline between raw payload bytes and the QR transport string."""
from __future__ import annotations

import base64
import binascii
import logging
from dataclasses import dataclass

import zstandard as zstd

from qrseal.container.format import ContainerRecord, pack_record, unpack_record
from qrseal.crypto import aead, kdf
from qrseal.crypto.runtime import ensure_initialized
from qrseal.crypto.secure_memory import secure_zeroize
from qrseal.errors import (
    CompressionError,
    InvalidPassword,
    InvalidSalt,
    TextDecodingError,
)

logger = logging.getLogger(__name__)

COMPRESSION_LEVEL = 16
# Only consulted for frames without a content size; ours always carry one.
MAX_DECOMPRESSED_SIZE = 64 * 1024 * 1024

__all__ = [
    "COMPRESSION_LEVEL",
    "RecordInfo",
    "decode_text",
    "deserialize",
    "encode_text",
    "inspect",
    "serialize",
]


@dataclass(frozen=True)
class RecordInfo:
    text_length: int
    record_length: int
    salt_length: int
    encrypted_length: int

    @property
    def ciphertext_length(self) -> int:
        return max(0, self.encrypted_length - aead.NONCE_LEN - aead.TAG_LEN)


def _require_password(password: str) -> None:
    if not password:
        raise InvalidPassword("Password must not be empty")


def _compress(data: bytes) -> bytes:
    try:
        return zstd.ZstdCompressor(level=COMPRESSION_LEVEL).compress(data)
    except zstd.ZstdError as exc:
        raise CompressionError(str(exc)) from exc


def _decompress(data: bytes) -> bytes:
    try:
        return zstd.ZstdDecompressor().decompress(data, max_output_size=MAX_DECOMPRESSED_SIZE)
    except zstd.ZstdError as exc:
        raise CompressionError(str(exc)) from exc


def encode_text(packed: bytes) -> str:
    return base64.b64encode(packed).decode("ascii")


def decode_text(text: str) -> bytes:
    """Strictly decode padded standard base64, ignoring surrounding whitespace."""
    try:
        return base64.b64decode(text.strip(), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise TextDecodingError(f"Invalid base64 transport string: {exc}") from exc


def serialize(raw_data: bytes, password: str) -> str:
    """Compress, encrypt and pack ``raw_data`` into a printable string.

    No size limit is applied; callers that render a QR code check the
    result against :data:`qrseal.qr.QR_CAPACITY` themselves.
    """
    _require_password(password)
    ensure_initialized()

    salt = kdf.generate_salt()
    key = bytearray(kdf.derive_key(password, salt))
    try:
        compressed = _compress(raw_data)
        encrypted = aead.encrypt(compressed, bytes(key))
    finally:
        secure_zeroize(key)

    packed = pack_record(ContainerRecord(salt=salt, encrypted=encrypted))
    text = encode_text(packed)
    logger.debug(
        "serialized %d bytes -> %d compressed -> %d packed -> %d chars",
        len(raw_data),
        len(compressed),
        len(packed),
        len(text),
    )
    return text


def deserialize(input_string: str, password: str) -> bytes:
    """Reverse :func:`serialize`.

    A wrong password and tampered data both raise
    :class:`~qrseal.errors.DecryptionFailed`.
    """
    _require_password(password)
    ensure_initialized()

    record = unpack_record(decode_text(input_string))
    if len(record.salt) != kdf.SALT_LEN:
        raise InvalidSalt(f"Salt must be {kdf.SALT_LEN} bytes long, got {len(record.salt)}")

    key = bytearray(kdf.derive_key(password, record.salt))
    try:
        decrypted = aead.decrypt(record.encrypted, bytes(key))
    finally:
        secure_zeroize(key)

    raw_data = _decompress(decrypted)
    logger.debug("deserialized %d chars -> %d bytes", len(input_string), len(raw_data))
    return raw_data


def inspect(input_string: str) -> RecordInfo:
    """Describe a transport string's structure without decrypting it."""
    packed = decode_text(input_string)
    record = unpack_record(packed)
    return RecordInfo(
        text_length=len(input_string.strip()),
        record_length=len(packed),
        salt_length=len(record.salt),
        encrypted_length=len(record.encrypted),
    )
