import asyncio
import os
from pathlib import Path

import pytest

from qrseal import qr, service
from qrseal.crypto import kdf
from qrseal.errors import CapacityExceeded, DecryptionFailed, InvalidPassword


def test_encode_file_and_decode_text(tmp_path: Path, fast_kdf: kdf.Argon2Params) -> None:
    source = tmp_path / "note.txt"
    source.write_text("meet at noon", encoding="utf-8")

    result = service.encode_file(source, "correct-horse")

    assert result.png.startswith(b"\x89PNG")
    assert len(result.text) < qr.QR_CAPACITY
    assert service.decode_text(result.text, "correct-horse") == b"meet at noon"


def test_write_encoded_refuses_overwrite(tmp_path: Path, fast_kdf: kdf.Argon2Params) -> None:
    result = service.encode_bytes(b"data", "pw")
    image = tmp_path / "code.png"
    text = tmp_path / "code.txt"

    service.write_encoded(result, image, text_path=text)
    assert image.read_bytes() == result.png
    assert text.read_text(encoding="ascii").strip() == result.text

    with pytest.raises(FileExistsError):
        service.write_encoded(result, image)

    service.write_encoded(result, image, overwrite=True)


def test_write_decoded_creates_parent(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "out.bin"
    service.write_decoded(b"abc", target)
    assert target.read_bytes() == b"abc"

    with pytest.raises(FileExistsError):
        service.write_decoded(b"xyz", target)
    assert target.read_bytes() == b"abc"


def test_incompressible_payload_exceeds_capacity(fast_kdf: kdf.Argon2Params) -> None:
    with pytest.raises(CapacityExceeded):
        service.encode_bytes(os.urandom(3000), "tenchars!!")


@pytest.mark.parametrize("password", ["", "x" * 21])
def test_password_length_enforced(password: str) -> None:
    with pytest.raises(InvalidPassword):
        service.encode_bytes(b"data", password)
    with pytest.raises(InvalidPassword):
        service.decode_text("AAAA", password)


def test_async_encode_runs_in_worker(tmp_path: Path, fast_kdf: kdf.Argon2Params) -> None:
    source = tmp_path / "async.bin"
    source.write_bytes(b"\x01\x02\x03")

    result = asyncio.run(service.encode_file_async(source, "pw"))

    assert service.decode_text(result.text, "pw") == b"\x01\x02\x03"
    with pytest.raises(DecryptionFailed):
        service.decode_text(result.text, "other")


@pytest.mark.skipif(not qr.scanner_available(), reason="zbar library not available")
def test_decode_image_roundtrip(tmp_path: Path, fast_kdf: kdf.Argon2Params) -> None:
    payload = bytes(range(256))
    source = tmp_path / "bytes.bin"
    source.write_bytes(payload)
    image = tmp_path / "bytes.png"
    service.write_encoded(service.encode_file(source, "correct-horse"), image)

    assert service.decode_image(image, "correct-horse") == payload
    assert asyncio.run(service.decode_image_async(image, "correct-horse")) == payload
