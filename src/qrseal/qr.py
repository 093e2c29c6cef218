"""QR rendering and scanning adapters around the transport string.

Rendering uses ``qrcode`` + Pillow. Scanning uses ``pyzbar``, which needs the
``zbar`` shared library; :func:`scanner_available` reports whether it loaded.
"""
from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

import qrcode
from PIL import Image, UnidentifiedImageError
from qrcode.constants import ERROR_CORRECT_H, ERROR_CORRECT_L, ERROR_CORRECT_M, ERROR_CORRECT_Q
from qrcode.exceptions import DataOverflowError

from qrseal.errors import (
    CapacityExceeded,
    ImageReadError,
    QrCodeNotFound,
    QrGenerationError,
)

try:  # pragma: no cover - depends on the system zbar library
    from pyzbar import pyzbar

    _PYZBAR_AVAILABLE = True
except ImportError:  # pragma: no cover - depends on the system zbar library
    _PYZBAR_AVAILABLE = False

logger = logging.getLogger(__name__)

ErrorCorrection = Literal["L", "M", "Q", "H"]

ERROR_CORRECTION_LEVELS = {
    "L": ERROR_CORRECT_L,
    "M": ERROR_CORRECT_M,
    "Q": ERROR_CORRECT_Q,
    "H": ERROR_CORRECT_H,
}

# Byte-mode capacity of a version 40 symbol per error-correction level.
BYTE_CAPACITY = {"L": 2953, "M": 2331, "Q": 1663, "H": 1273}

QR_CAPACITY = BYTE_CAPACITY["L"]


@dataclass(frozen=True)
class RenderOptions:
    error_correction: ErrorCorrection = "L"
    border: int = 4
    max_dimension: int = 512

    @property
    def capacity(self) -> int:
        return BYTE_CAPACITY[self.error_correction]


DEFAULT_RENDER_OPTIONS = RenderOptions()


def scanner_available() -> bool:
    """Return True if pyzbar and the zbar library are importable."""

    return _PYZBAR_AVAILABLE


def ensure_fits(text: str, options: RenderOptions = DEFAULT_RENDER_OPTIONS) -> None:
    """Reject transport strings that are not strictly below the QR capacity."""

    if len(text) >= options.capacity:
        raise CapacityExceeded(len(text), options.capacity)


def render_qr(text: str, options: RenderOptions = DEFAULT_RENDER_OPTIONS) -> bytes:
    """Render ``text`` into a PNG no larger than ``options.max_dimension`` px."""

    qr = qrcode.QRCode(
        version=None,
        error_correction=ERROR_CORRECTION_LEVELS[options.error_correction],
        box_size=1,
        border=options.border,
    )
    qr.add_data(text)
    try:
        qr.make(fit=True)
    except (DataOverflowError, ValueError) as exc:
        raise QrGenerationError(f"QR code generation failed: {exc}") from exc

    modules = qr.modules_count + 2 * options.border
    qr.box_size = max(1, options.max_dimension // modules)
    logger.debug("rendering QR version %d, %d px", qr.version, modules * qr.box_size)

    image = qr.make_image(fill_color="black", back_color="white")
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def _open_image(source: Path | bytes) -> Image.Image:
    try:
        if isinstance(source, bytes):
            image = Image.open(io.BytesIO(source))
        else:
            image = Image.open(source)
        image.load()
    except FileNotFoundError:
        raise
    except (UnidentifiedImageError, OSError) as exc:
        raise ImageReadError(f"Image read error: {exc}") from exc
    return image


def scan_qr(source: Path | bytes) -> str:
    """Decode the first QR symbol found in an image file or PNG/JPEG bytes."""

    if not _PYZBAR_AVAILABLE:
        raise ImageReadError("QR scanning requires pyzbar and the zbar library")

    image = _open_image(source).convert("L")
    symbols = pyzbar.decode(image, symbols=[pyzbar.ZBarSymbol.QRCODE])
    if not symbols:
        raise QrCodeNotFound("No QR code found in image")

    logger.debug("found %d QR symbol(s), using the first", len(symbols))
    return symbols[0].data.decode("utf-8", errors="replace")
