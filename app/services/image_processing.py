import cv2
import numpy as np
from datetime import datetime, timezone
from typing import Optional
from core.config import FALLBACK_FILENAME_PREFIX, MIN_COMPRESSION_QUALITY, MAX_COMPRESSION_QUALITY
from core.logger import get_logger

logger = get_logger(__name__)


def decode_image(contents: bytes) -> Optional[np.ndarray]:
    """
    Decodes image bytes with OpenCV, keeping any alpha channel.
    Returns None if the data is not an image OpenCV understands.
    """
    if not contents:
        return None
    image_array = np.frombuffer(contents, np.uint8)
    return cv2.imdecode(image_array, cv2.IMREAD_UNCHANGED)


def _to_bgr_uint8(img: np.ndarray) -> np.ndarray:
    if img.dtype == np.uint16:
        img = (img / 257).astype(np.uint8)
    elif img.dtype != np.uint8:
        img = cv2.convertScaleAbs(img)

    if img.ndim == 2:
        return cv2.cvtColor(img, cv2.COLOR_GRAY2BGR)

    if img.shape[2] == 4:
        # Transparent pixels become black, the same as drawing onto a canvas and exporting JPEG
        bgr = img[:, :, :3].astype(np.float32)
        alpha = img[:, :, 3:4].astype(np.float32) / 255.0
        return (bgr * alpha).round().astype(np.uint8)

    return img


def compress_to_jpeg(contents: bytes, quality: float) -> bytes:
    """
    Re-encodes an image as JPEG. `quality` is a 0.1-1.0 fraction.
    """
    img = decode_image(contents)
    if img is None:
        raise ValueError("Stored image could not be decoded.")

    quality = min(max(quality, MIN_COMPRESSION_QUALITY), MAX_COMPRESSION_QUALITY)
    jpeg_quality = int(round(quality * 100))

    ok, buf = cv2.imencode('.jpg', _to_bgr_uint8(img), [cv2.IMWRITE_JPEG_QUALITY, jpeg_quality])
    if not ok:
        raise ValueError("JPEG encoding failed.")

    logger.debug(f"Compressed {len(contents)} bytes to {len(buf)} bytes at quality {jpeg_quality}")
    return buf.tobytes()


def to_png(contents: bytes) -> bytes:
    img = decode_image(contents)
    if img is None:
        raise ValueError("Image could not be decoded.")
    ok, buf = cv2.imencode('.png', img)
    if not ok:
        raise ValueError("PNG encoding failed.")
    return buf.tobytes()


def download_filename(prefix: str, timestamp_ms: int) -> str:
    """
    Builds "<prefix>-<ISO timestamp>.jpg" with ':' and '.' made filename safe,
    e.g. progen-output-2024-01-02T03-04-05-678Z.jpg
    """
    dt = datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc)
    iso = dt.strftime('%Y-%m-%dT%H:%M:%S') + f".{timestamp_ms % 1000:03d}Z"
    safe = iso.replace(':', '-').replace('.', '-')
    return f"{prefix or FALLBACK_FILENAME_PREFIX}-{safe}.jpg"
