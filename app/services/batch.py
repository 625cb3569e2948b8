import asyncio
import time
import uuid
from typing import List, Optional
from core.logger import get_logger
from core.models import GenerationSettings, GeneratedImage, SourceImage
from services.gemini_image import get_client, generate_single_image
from services.request_builder import build_batch_requests

logger = get_logger(__name__)


async def generate_images(
    settings: GenerationSettings,
    source_image: Optional[SourceImage] = None,
) -> List[GeneratedImage]:
    """
    Turns a settings snapshot into `batch_size` parallel model calls and wraps
    every returned image in a gallery entry.

    All calls are awaited together; if any of them raises, the whole batch
    fails and nothing is returned. Responses without an image are dropped, so
    the result may be shorter than the batch (or empty).
    """
    client = get_client()
    requests = build_batch_requests(settings, source_image)

    logger.info(f"Starting batch of {len(requests)} image(s).")
    started = time.monotonic()
    results = await asyncio.gather(*(generate_single_image(client, r) for r in requests))
    elapsed = time.monotonic() - started

    snapshot = settings.model_copy(deep=True)
    timestamp = int(time.time() * 1000)
    images = []
    for result in results:
        if result is None:
            continue
        data, mime_type, seed = result
        images.append(GeneratedImage(
            id=str(uuid.uuid4()),
            data=data,
            mime_type=mime_type,
            settings=snapshot.model_copy(deep=True),
            timestamp=timestamp,
            seed=seed,
        ))

    logger.info(f"Batch finished in {elapsed:.2f}s: {len(images)} of {len(requests)} request(s) returned an image.")
    return images
