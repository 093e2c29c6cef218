import io

import pytest
from PIL import Image

from qrseal import qr
from qrseal.errors import CapacityExceeded, ImageReadError, QrCodeNotFound, QrGenerationError

needs_scanner = pytest.mark.skipif(not qr.scanner_available(), reason="zbar library not available")

SAMPLE = "QUJDREVGR0hJSktMTU5PUFFSU1RVVldYWVo="


def _blank_png() -> bytes:
    buffer = io.BytesIO()
    Image.new("L", (200, 200), color=255).save(buffer, format="PNG")
    return buffer.getvalue()


def test_capacity_matches_version_40_level_l() -> None:
    assert qr.QR_CAPACITY == 2953
    assert qr.RenderOptions().capacity == qr.QR_CAPACITY
    assert qr.RenderOptions(error_correction="H").capacity == 1273


def test_ensure_fits_is_strictly_below_capacity() -> None:
    qr.ensure_fits("a" * (qr.QR_CAPACITY - 1))
    with pytest.raises(CapacityExceeded) as excinfo:
        qr.ensure_fits("a" * qr.QR_CAPACITY)
    assert excinfo.value.limit == qr.QR_CAPACITY


def test_render_produces_bounded_png() -> None:
    png = qr.render_qr(SAMPLE)
    assert png.startswith(b"\x89PNG\r\n\x1a\n")
    with Image.open(io.BytesIO(png)) as image:
        assert max(image.size) <= qr.DEFAULT_RENDER_OPTIONS.max_dimension


def test_render_respects_custom_dimension() -> None:
    png = qr.render_qr(SAMPLE, qr.RenderOptions(max_dimension=128))
    with Image.open(io.BytesIO(png)) as image:
        assert max(image.size) <= 128


def test_render_rejects_oversized_text() -> None:
    with pytest.raises(QrGenerationError):
        qr.render_qr("a" * 3000)


@needs_scanner
def test_render_then_scan() -> None:
    assert qr.scan_qr(qr.render_qr(SAMPLE)) == SAMPLE


@needs_scanner
def test_scan_from_path(tmp_path) -> None:
    image_path = tmp_path / "code.png"
    image_path.write_bytes(qr.render_qr(SAMPLE))
    assert qr.scan_qr(image_path) == SAMPLE


@needs_scanner
def test_scan_blank_image_reports_not_found() -> None:
    with pytest.raises(QrCodeNotFound):
        qr.scan_qr(_blank_png())


@needs_scanner
def test_scan_non_image_reports_read_error() -> None:
    with pytest.raises(ImageReadError):
        qr.scan_qr(b"definitely not an image")


@needs_scanner
def test_scan_missing_file_propagates(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        qr.scan_qr(tmp_path / "missing.png")
