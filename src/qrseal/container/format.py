"""Binary layout of the container record carried inside the QR code."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from struct import Struct

from qrseal.errors import SerializationError

# <salt_len:u16> <salt> <encrypted_len:u32> <encrypted>
_SALT_LEN_STRUCT = Struct("<H")
_ENCRYPTED_LEN_STRUCT = Struct("<I")

MAX_SALT_LEN = 0xFFFF
MAX_ENCRYPTED_LEN = 0xFFFFFFFF


@dataclass(frozen=True)
class ContainerRecord:
    salt: bytes
    encrypted: bytes


def pack_record(record: ContainerRecord) -> bytes:
    """Serialize a record with explicit length prefixes for both fields."""

    if len(record.salt) > MAX_SALT_LEN:
        raise SerializationError("salt does not fit in a 16-bit length field")
    if not record.encrypted:
        raise SerializationError("encrypted field must not be empty")
    if len(record.encrypted) > MAX_ENCRYPTED_LEN:
        raise SerializationError("encrypted field does not fit in a 32-bit length field")

    return b"".join(
        (
            _SALT_LEN_STRUCT.pack(len(record.salt)),
            record.salt,
            _ENCRYPTED_LEN_STRUCT.pack(len(record.encrypted)),
            record.encrypted,
        )
    )


def unpack_record(data: bytes) -> ContainerRecord:
    """Parse ``data`` into a record; the buffer must be consumed exactly."""

    offset = 0
    try:
        (salt_len,) = _SALT_LEN_STRUCT.unpack_from(data, offset)
        offset += _SALT_LEN_STRUCT.size
        salt = data[offset : offset + salt_len]
        if len(salt) != salt_len:
            raise SerializationError("record truncated inside salt")
        offset += salt_len

        (encrypted_len,) = _ENCRYPTED_LEN_STRUCT.unpack_from(data, offset)
        offset += _ENCRYPTED_LEN_STRUCT.size
    except struct.error as exc:
        raise SerializationError("record truncated inside a length field") from exc

    if encrypted_len == 0:
        raise SerializationError("encrypted field must not be empty")
    encrypted = data[offset : offset + encrypted_len]
    if len(encrypted) != encrypted_len:
        raise SerializationError("record truncated inside encrypted data")
    offset += encrypted_len

    if offset != len(data):
        raise SerializationError(f"{len(data) - offset} trailing bytes after record")

    return ContainerRecord(salt=bytes(salt), encrypted=bytes(encrypted))


def record_overhead(salt_len: int) -> int:
    """Bytes the record adds on top of the encrypted blob."""

    return _SALT_LEN_STRUCT.size + salt_len + _ENCRYPTED_LEN_STRUCT.size
