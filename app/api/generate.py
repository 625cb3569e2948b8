from fastapi import APIRouter, HTTPException
from google.genai import errors as genai_errors
from core.logger import get_logger
from core.models import GenerationSettings, GenerateResponse, ImageSummary
from services.batch import generate_images
from services.gemini_image import MissingApiKeyError
from services.gallery import add_images, get_source_image, try_begin_generation, end_generation

router = APIRouter()
logger = get_logger(__name__)


@router.get("/settings/defaults", tags=["Generation"])
async def get_default_settings():
    # Everything except the prompt has a default
    defaults = {
        name: f.default for name, f in GenerationSettings.model_fields.items() if name != "prompt"
    }
    return GenerationSettings.model_construct(prompt="", **defaults).model_dump(mode="json")


@router.post("/generate", response_model=GenerateResponse, tags=["Generation"])
async def generate(settings: GenerationSettings):
    """
    Generates `batch_size` images in parallel from the settings snapshot and
    the current source image, then adds them to the front of the gallery.
    """
    if not try_begin_generation():
        raise HTTPException(status_code=409, detail="A generation is already in progress. Please wait for it to finish.")

    try:
        source_image = get_source_image()
        images = await generate_images(settings, source_image)
    except MissingApiKeyError as e:
        raise HTTPException(status_code=401, detail=str(e))
    except genai_errors.APIError as e:
        logger.error(f"Failed to generate: {e}")
        if e.code in (401, 403):
            raise HTTPException(status_code=403, detail="API key was rejected. Please select a valid API key.")
        raise HTTPException(status_code=502, detail="Generation failed. Please check your settings or API key.")
    except Exception:
        logger.exception("Failed to generate")
        raise HTTPException(status_code=502, detail="Generation failed. Please check your settings or API key.")
    finally:
        end_generation()

    add_images(images)

    if images:
        message = f"Generated {len(images)} of {settings.batch_size} image(s)."
    else:
        message = "The model did not return any images. Try adjusting the prompt."

    return GenerateResponse(
        message=message,
        requested=settings.batch_size,
        generated=len(images),
        images=[ImageSummary.from_image(img) for img in images],
    )
