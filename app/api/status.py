from fastapi import APIRouter
from core.config import IMAGE_MODEL_NAME
from core.logger import get_logger
from core.models import StatusResponse
from services.gallery import is_generating, list_images, get_source_image
from services.gemini_image import api_key_configured

router = APIRouter()
logger = get_logger(__name__)

@router.get("/status", response_model=StatusResponse, tags=["Status"])
async def get_status():
    """
    Reports whether an API key is available and what the session currently holds.
    """
    return StatusResponse(
        api_key_configured=api_key_configured(),
        model=IMAGE_MODEL_NAME,
        is_generating=is_generating(),
        gallery_size=len(list_images()),
        has_source_image=get_source_image() is not None,
    )
