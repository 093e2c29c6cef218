"""Key derivation helpers using Argon2id."""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass

from argon2.exceptions import HashingError
from argon2.low_level import ARGON2_VERSION, Type, hash_secret_raw

from qrseal.errors import InvalidPassword, InvalidSalt, KeyDerivationFailed

logger = logging.getLogger(__name__)

DEFAULT_MEM_COST_KIB = 64 * 1024  # 64 MiB
DEFAULT_TIME_COST = 3
DEFAULT_PARALLELISM = 1
DERIVED_KEY_LEN = 32
SALT_LEN = 16


@dataclass(frozen=True)
class Argon2Params:
    mem_cost_kib: int = DEFAULT_MEM_COST_KIB
    time_cost: int = DEFAULT_TIME_COST
    parallelism: int = DEFAULT_PARALLELISM


# The only profile the transport format knows about. Records carry no
# parameters, so changing this makes existing QR codes unreadable.
FORMAT_PARAMS = Argon2Params()


def generate_salt() -> bytes:
    """Return a fresh random salt for one encode operation."""

    return secrets.token_bytes(SALT_LEN)


def derive_key(password: str, salt: bytes) -> bytes:
    """Derive a 256-bit key from password and salt using Argon2id."""

    if not password:
        raise InvalidPassword("Password must not be empty")
    if len(salt) != SALT_LEN:
        raise InvalidSalt(f"Salt must be {SALT_LEN} bytes long, got {len(salt)}")

    params = FORMAT_PARAMS
    logger.debug(
        "deriving key: argon2id m=%d KiB t=%d p=%d",
        params.mem_cost_kib,
        params.time_cost,
        params.parallelism,
    )
    try:
        return hash_secret_raw(
            secret=password.encode("utf-8"),
            salt=salt,
            time_cost=params.time_cost,
            memory_cost=params.mem_cost_kib,
            parallelism=params.parallelism,
            hash_len=DERIVED_KEY_LEN,
            type=Type.ID,
            version=ARGON2_VERSION,
        )
    except (HashingError, MemoryError) as exc:
        raise KeyDerivationFailed("Key derivation failed") from exc
