import re
from typing import Optional
from urllib.parse import quote
from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import Response
from core.config import MIN_COMPRESSION_QUALITY, MAX_COMPRESSION_QUALITY
from core.logger import get_logger
from core.models import GalleryResponse, ImageSummary, SourceImageInfo
from services.gallery import list_images, get_image, delete_image, clear_gallery, use_as_input
from services.image_processing import compress_to_jpeg, download_filename

router = APIRouter(prefix="/gallery", tags=["Gallery"])
logger = get_logger(__name__)


def _content_disposition(filename: str) -> str:
    """
    Attachment header with an ASCII fallback name and the UTF-8 name (RFC 5987).
    """
    fallback = re.sub(r'[^A-Za-z0-9._-]', "_", filename)
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


def _get_or_404(image_id: str):
    image = get_image(image_id)
    if image is None:
        raise HTTPException(status_code=404, detail=f"Image with id '{image_id}' not found in the gallery.")
    return image


@router.get("", response_model=GalleryResponse)
async def get_gallery(include_data: bool = False):
    images = list_images()
    return GalleryResponse(
        total=len(images),
        images=[ImageSummary.from_image(img, include_data=include_data) for img in images],
    )


@router.delete("")
async def delete_all_images():
    removed = clear_gallery()
    return {"message": f"Removed {removed} image(s) from the gallery.", "removed": removed}


@router.get("/{image_id}", response_model=ImageSummary)
async def get_gallery_image(image_id: str, include_data: bool = False):
    return ImageSummary.from_image(_get_or_404(image_id), include_data=include_data)


@router.get("/{image_id}/image")
async def view_image(image_id: str):
    """
    Returns the image exactly as the model produced it.
    """
    image = _get_or_404(image_id)
    return Response(content=image.data, media_type=image.mime_type)


@router.get("/{image_id}/download")
async def download_image(
    image_id: str,
    quality: Optional[float] = Query(default=None, ge=MIN_COMPRESSION_QUALITY, le=MAX_COMPRESSION_QUALITY),
):
    """
    Returns the image as a JPEG attachment. Without `quality`, the compression
    quality stored with the image's settings is used.
    """
    image = _get_or_404(image_id)
    effective_quality = quality if quality is not None else image.settings.compression_quality

    try:
        jpeg = compress_to_jpeg(image.data, effective_quality)
    except ValueError as ve:
        logger.error(f"Could not compress image {image_id}: {ve}")
        raise HTTPException(status_code=500, detail=f"Could not prepare the download: {ve}")

    filename = download_filename(image.settings.filename_prefix, image.timestamp)
    return Response(
        content=jpeg,
        media_type="image/jpeg",
        headers={"Content-Disposition": _content_disposition(filename)},
    )


@router.delete("/{image_id}")
async def delete_gallery_image(image_id: str):
    if not delete_image(image_id):
        raise HTTPException(status_code=404, detail=f"Image with id '{image_id}' not found in the gallery.")
    return {"message": "Image deleted.", "id": image_id}


@router.post("/{image_id}/use-as-input", response_model=SourceImageInfo)
async def use_image_as_input(image_id: str):
    """
    Makes a generated image the source image for the next generation (Edit / Remix).
    """
    _get_or_404(image_id)
    try:
        source = use_as_input(image_id)
    except ValueError as ve:
        raise HTTPException(status_code=500, detail=f"Could not reuse the image: {ve}")
    return SourceImageInfo(filename=source.filename, mime_type=source.mime_type, size=len(source.data))
