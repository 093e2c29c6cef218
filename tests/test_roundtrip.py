import os

import pytest

from qrseal.container import deserialize, inspect, serialize
from qrseal.crypto import aead, kdf
from qrseal.errors import CapacityExceeded, DecryptionFailed
from qrseal.qr import QR_CAPACITY, ensure_fits

SCENARIO_BYTES = bytes(range(256))
TRANSPORT_ALPHABET = set("ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/=")


def test_scenario_correct_and_wrong_horse() -> None:
    text = serialize(SCENARIO_BYTES, "correct-horse")

    assert set(text) <= TRANSPORT_ALPHABET
    assert len(text) % 4 == 0
    assert len(text) < QR_CAPACITY
    assert deserialize(text, "correct-horse") == SCENARIO_BYTES

    with pytest.raises(DecryptionFailed):
        deserialize(text, "wrong-horse")


@pytest.mark.parametrize(
    ("payload", "password"),
    [
        (b"\x00", "a"),
        (b"hello qr", "p" * 20),
        (b"A" * 5000, "пароль"),
        (os.urandom(700), "correct horse"),
    ],
)
def test_roundtrip(payload: bytes, password: str, fast_kdf: kdf.Argon2Params) -> None:
    assert deserialize(serialize(payload, password), password) == payload


def test_encode_is_randomized_decode_is_stable(fast_kdf: kdf.Argon2Params) -> None:
    payload = b"same input twice"
    first = serialize(payload, "pw")
    second = serialize(payload, "pw")

    assert first != second
    assert inspect(first).salt_length == kdf.SALT_LEN
    assert deserialize(first, "pw") == payload
    assert deserialize(second, "pw") == payload


def test_compression_shrinks_redundant_input(fast_kdf: kdf.Argon2Params) -> None:
    text = serialize(b"0123456789" * 1000, "pw")
    details = inspect(text)
    assert details.ciphertext_length < 1000
    assert details.encrypted_length == details.ciphertext_length + aead.NONCE_LEN + aead.TAG_LEN


def test_codec_imposes_no_size_limit(fast_kdf: kdf.Argon2Params) -> None:
    payload = os.urandom(3000)

    text = serialize(payload, "tenchars!!")

    assert len(text) > QR_CAPACITY
    with pytest.raises(CapacityExceeded) as excinfo:
        ensure_fits(text)
    assert excinfo.value.length == len(text)
    assert deserialize(text, "tenchars!!") == payload
