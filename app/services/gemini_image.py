import base64
from typing import Optional, Tuple
from google import genai
from core.config import GEMINI_API_KEY
from core.logger import get_logger
from core.models import GenerationRequest

logger = get_logger(__name__)


class MissingApiKeyError(RuntimeError):
    """Raised when no Gemini API key has been configured."""


def api_key_configured() -> bool:
    return bool(GEMINI_API_KEY)


def get_client() -> genai.Client:
    if not GEMINI_API_KEY:
        raise MissingApiKeyError("API Key not found. Please select an API Key.")
    return genai.Client(api_key=GEMINI_API_KEY)


def extract_image(response) -> Optional[Tuple[bytes, str]]:
    """
    Pulls the first inline image out of the first candidate.

    Returns None when the model answered without an image (a text-only
    refusal, for example).
    """
    candidates = getattr(response, "candidates", None)
    if not candidates:
        return None

    content = getattr(candidates[0], "content", None)
    parts = getattr(content, "parts", None) if content is not None else None
    if not parts:
        return None

    for part in parts:
        inline_data = getattr(part, "inline_data", None)
        if inline_data and inline_data.data:
            data = inline_data.data
            if isinstance(data, str):
                data = base64.b64decode(data)
            return data, inline_data.mime_type or "image/png"

    texts = [p.text for p in parts if getattr(p, "text", None)]
    if texts:
        logger.warning(f"Model returned text instead of an image: {' '.join(texts)[:200]}")
    return None


async def generate_single_image(client: genai.Client, request: GenerationRequest) -> Optional[Tuple[bytes, str, int]]:
    """
    Runs one generate_content call and returns (image bytes, mime type, seed),
    or None if the response carried no image.
    """
    try:
        response = await client.aio.models.generate_content(
            model=request.model,
            contents=request.parts,
            config=request.config,
        )
    except Exception as e:
        logger.error(f"Generation error (seed={request.seed}): {e}")
        raise

    image = extract_image(response)
    if image is None:
        logger.warning(f"No image in response for seed {request.seed}")
        return None

    data, mime_type = image
    logger.info(f"Received {mime_type} image ({len(data)} bytes) for seed {request.seed}")
    return data, mime_type, request.seed
