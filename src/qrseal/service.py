"""File-level operations that glue the codec to QR images on disk.

Key derivation is deliberately slow. Event-loop callers should use the
``*_async`` variants, which run the blocking work in a worker thread.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path

from qrseal.container import deserialize, serialize
from qrseal.password_strength import check_password_length
from qrseal.qr import DEFAULT_RENDER_OPTIONS, RenderOptions, ensure_fits, render_qr, scan_qr

logger = logging.getLogger(__name__)

__all__ = [
    "EncodeResult",
    "decode_image",
    "decode_image_async",
    "decode_text",
    "encode_bytes",
    "encode_file",
    "encode_file_async",
    "write_decoded",
    "write_encoded",
]


@dataclass(frozen=True)
class EncodeResult:
    text: str
    png: bytes


def _ensure_output(path: Path, overwrite: bool) -> None:
    if path.exists():
        if not overwrite:
            raise FileExistsError(f"Refusing to overwrite existing file: {path}")
        if path.is_dir():
            raise IsADirectoryError(f"Output path is a directory: {path}")
        path.unlink()
    path.parent.mkdir(parents=True, exist_ok=True)


def encode_bytes(
    data: bytes,
    password: str,
    *,
    options: RenderOptions = DEFAULT_RENDER_OPTIONS,
) -> EncodeResult:
    """Serialize ``data``, enforce the QR capacity and render the image."""
    check_password_length(password)
    text = serialize(data, password)
    ensure_fits(text, options)
    return EncodeResult(text=text, png=render_qr(text, options))


def encode_file(
    input_path: Path,
    password: str,
    *,
    options: RenderOptions = DEFAULT_RENDER_OPTIONS,
) -> EncodeResult:
    raw = input_path.read_bytes()
    logger.debug("read %d bytes from %s", len(raw), input_path)
    return encode_bytes(raw, password, options=options)


def write_encoded(
    result: EncodeResult,
    image_path: Path,
    *,
    text_path: Path | None = None,
    overwrite: bool = False,
) -> None:
    _ensure_output(image_path, overwrite)
    if text_path is not None:
        _ensure_output(text_path, overwrite)
    image_path.write_bytes(result.png)
    if text_path is not None:
        text_path.write_text(result.text + "\n", encoding="ascii")


def decode_text(text: str, password: str) -> bytes:
    check_password_length(password)
    return deserialize(text, password)


def decode_image(image_path: Path, password: str) -> bytes:
    check_password_length(password)
    text = scan_qr(image_path)
    return deserialize(text, password)


def write_decoded(data: bytes, output_path: Path, *, overwrite: bool = False) -> None:
    _ensure_output(output_path, overwrite)
    output_path.write_bytes(data)


async def encode_file_async(
    input_path: Path,
    password: str,
    *,
    options: RenderOptions = DEFAULT_RENDER_OPTIONS,
) -> EncodeResult:
    return await asyncio.to_thread(encode_file, input_path, password, options=options)


async def decode_image_async(image_path: Path, password: str) -> bytes:
    return await asyncio.to_thread(decode_image, image_path, password)
