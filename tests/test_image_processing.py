import cv2
import numpy as np
import pytest

from conftest import make_image_bytes
from services.image_processing import compress_to_jpeg, decode_image, download_filename, to_png


class TestDecodeImage:

    def test_decodes_png(self, png_bytes):
        img = decode_image(png_bytes)
        assert img is not None
        assert img.shape[:2] == (24, 32)

    def test_garbage_is_none(self):
        assert decode_image(b"definitely not an image") is None

    def test_empty_is_none(self):
        assert decode_image(b"") is None


class TestCompressToJpeg:

    def test_output_is_jpeg(self, png_bytes):
        jpeg = compress_to_jpeg(png_bytes, 0.95)
        assert jpeg[:2] == b"\xff\xd8"
        assert decode_image(jpeg).shape[:2] == (24, 32)

    def test_lower_quality_is_smaller(self):
        noisy = make_image_bytes(".png", width=128, height=128)
        assert len(compress_to_jpeg(noisy, 0.1)) < len(compress_to_jpeg(noisy, 1.0))

    def test_transparent_pixels_become_black(self):
        rgba = np.zeros((8, 8, 4), dtype=np.uint8)
        rgba[:, :, :3] = 255
        rgba[:, :, 3] = 0
        ok, buf = cv2.imencode(".png", rgba)
        assert ok

        jpeg = compress_to_jpeg(buf.tobytes(), 1.0)
        decoded = decode_image(jpeg)
        assert decoded.ndim == 3 and decoded.shape[2] == 3
        assert decoded.max() < 10

    def test_grayscale_input(self):
        gray = np.full((10, 10), 128, dtype=np.uint8)
        ok, buf = cv2.imencode(".png", gray)
        assert ok
        assert compress_to_jpeg(buf.tobytes(), 0.5)[:2] == b"\xff\xd8"

    def test_undecodable_raises(self):
        with pytest.raises(ValueError):
            compress_to_jpeg(b"nope", 0.9)


def test_to_png(jpeg_bytes):
    png = to_png(jpeg_bytes)
    assert png[:8] == b"\x89PNG\r\n\x1a\n"


class TestDownloadFilename:

    def test_iso_timestamp_is_filename_safe(self):
        # 2024-01-02T03:04:05.678Z
        assert download_filename("progen-output", 1704164645678) == "progen-output-2024-01-02T03-04-05-678Z.jpg"

    def test_empty_prefix_falls_back(self):
        assert download_filename("", 1704164645000) == "progen-2024-01-02T03-04-05-000Z.jpg"
