import random
from typing import List, Optional
from google.genai import types
from core.config import IMAGE_MODEL_NAME, RANDOM_SEED, MAX_SEED
from core.logger import get_logger
from core.models import GenerationSettings, GenerationRequest, SourceImage
from services.prompt_builder import build_full_prompt

logger = get_logger(__name__)


def resolve_seed(seed: int, rng: Optional[random.Random] = None) -> int:
    """
    Returns the seed to send to the model. A random seed is drawn client-side
    so the value actually used can be recorded on the gallery entry.
    """
    if seed != RANDOM_SEED:
        return seed
    rng = rng or random
    return rng.randrange(MAX_SEED)


def build_generation_request(
    settings: GenerationSettings,
    source_image: Optional[SourceImage] = None,
    rng: Optional[random.Random] = None,
) -> GenerationRequest:
    """
    Maps a settings snapshot onto a single generate_content call.

    The source image (if any) goes first, followed by the prompt text.
    """
    full_prompt = build_full_prompt(settings.prompt, settings.negative_prompt)
    seed = resolve_seed(settings.seed, rng)

    parts = []
    if source_image is not None:
        parts.append(types.Part.from_bytes(data=source_image.data, mime_type=source_image.mime_type))
    parts.append(types.Part.from_text(text=full_prompt))

    config = types.GenerateContentConfig(
        response_modalities=["TEXT", "IMAGE"],
        image_config=types.ImageConfig(
            aspect_ratio=settings.aspect_ratio.value,
            image_size=settings.image_size.value,
        ),
        temperature=settings.creativity,
        seed=seed,
    )

    return GenerationRequest(
        model=IMAGE_MODEL_NAME,
        parts=parts,
        config=config,
        seed=seed,
        prompt=full_prompt,
        has_source_image=source_image is not None,
    )


def build_batch_requests(
    settings: GenerationSettings,
    source_image: Optional[SourceImage] = None,
    rng: Optional[random.Random] = None,
) -> List[GenerationRequest]:
    # Built one by one so every random-seed request draws its own seed
    requests = [build_generation_request(settings, source_image, rng) for _ in range(settings.batch_size)]
    logger.info(
        f"Built {len(requests)} request(s) for model {IMAGE_MODEL_NAME} "
        f"(aspect_ratio={settings.aspect_ratio.value}, image_size={settings.image_size.value}, "
        f"seeds={[r.seed for r in requests]}, source_image={requests[0].has_source_image}, "
        f"prompt_chars={len(requests[0].prompt)})"
    )
    return requests
