from typing import List, Optional
from core.config import REUSED_INPUT_FILENAME
from core.logger import get_logger
from core.models import GeneratedImage, SourceImage
from core.session_store import generated_images, source_image, generation_state
from services.image_processing import to_png

logger = get_logger(__name__)


def add_images(images: List[GeneratedImage]) -> None:
    """Puts a new batch at the front of the gallery, keeping the batch's own order."""
    generated_images[:0] = images
    logger.info(f"Added {len(images)} image(s) to gallery ({len(generated_images)} total).")


def list_images() -> List[GeneratedImage]:
    return list(generated_images)


def get_image(image_id: str) -> Optional[GeneratedImage]:
    for image in generated_images:
        if image.id == image_id:
            return image
    return None


def delete_image(image_id: str) -> bool:
    for idx, image in enumerate(generated_images):
        if image.id == image_id:
            del generated_images[idx]
            logger.info(f"Deleted image {image_id}.")
            return True
    return False


def clear_gallery() -> int:
    removed = len(generated_images)
    generated_images.clear()
    logger.info(f"Cleared gallery ({removed} image(s) removed).")
    return removed


def set_source_image(image: SourceImage) -> None:
    source_image["current"] = image
    logger.info(f"Source image set: {image.filename} ({image.mime_type}, {len(image.data)} bytes)")


def get_source_image() -> Optional[SourceImage]:
    return source_image["current"]


def clear_source_image() -> bool:
    had_image = source_image["current"] is not None
    source_image["current"] = None
    return had_image


def use_as_input(image_id: str) -> Optional[SourceImage]:
    """
    Makes a gallery image the source image for the next generation.
    The image is stored as PNG regardless of what the model returned.
    """
    image = get_image(image_id)
    if image is None:
        return None
    data = image.data if image.mime_type == "image/png" else to_png(image.data)
    reused = SourceImage(data=data, mime_type="image/png", filename=REUSED_INPUT_FILENAME)
    set_source_image(reused)
    return reused


def try_begin_generation() -> bool:
    """Marks a batch as running. Returns False if one is already in flight."""
    if generation_state["is_generating"]:
        return False
    generation_state["is_generating"] = True
    return True


def end_generation() -> None:
    generation_state["is_generating"] = False


def is_generating() -> bool:
    return generation_state["is_generating"]
