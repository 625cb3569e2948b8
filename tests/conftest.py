"""Shared fixtures: fake Gemini client, sample images, clean session state."""

import cv2
import numpy as np
import pytest
from unittest.mock import AsyncMock, MagicMock

from core import session_store


def make_image_bytes(ext: str = ".png", width: int = 32, height: int = 24, channels: int = 3) -> bytes:
    rng = np.random.default_rng(0)
    img = rng.integers(0, 256, size=(height, width, channels), dtype=np.uint8)
    ok, buf = cv2.imencode(ext, img)
    assert ok
    return buf.tobytes()


def make_image_response(data: bytes = b"img", mime_type: str = "image/png"):
    """generate_content response carrying one inline image."""
    text_part = MagicMock()
    text_part.inline_data = None
    text_part.text = "Here is your image."

    image_part = MagicMock()
    image_part.inline_data = MagicMock()
    image_part.inline_data.data = data
    image_part.inline_data.mime_type = mime_type
    image_part.text = None

    candidate = MagicMock()
    candidate.content.parts = [text_part, image_part]

    response = MagicMock()
    response.candidates = [candidate]
    return response


def make_text_response(text: str = "I can't draw that."):
    part = MagicMock()
    part.inline_data = None
    part.text = text

    candidate = MagicMock()
    candidate.content.parts = [part]

    response = MagicMock()
    response.candidates = [candidate]
    return response


def make_fake_client(*responses):
    """
    Client whose aio.models.generate_content returns (or raises) the given
    responses in order. A single response is returned for every call.
    """
    client = MagicMock()
    if len(responses) == 1 and not isinstance(responses[0], Exception):
        client.aio.models.generate_content = AsyncMock(return_value=responses[0])
    else:
        client.aio.models.generate_content = AsyncMock(side_effect=list(responses))
    return client


@pytest.fixture(autouse=True)
def reset_session():
    session_store.generated_images.clear()
    session_store.source_image["current"] = None
    session_store.generation_state["is_generating"] = False
    yield
    session_store.generated_images.clear()
    session_store.source_image["current"] = None
    session_store.generation_state["is_generating"] = False


@pytest.fixture
def png_bytes():
    return make_image_bytes(".png")


@pytest.fixture
def jpeg_bytes():
    return make_image_bytes(".jpg")
