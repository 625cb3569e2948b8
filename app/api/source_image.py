from fastapi import APIRouter, File, UploadFile, HTTPException
from fastapi.responses import Response
from core.config import MAX_UPLOAD_SIZE
from core.logger import get_logger
from core.models import SourceImage, SourceImageInfo
from services.gallery import set_source_image, get_source_image, clear_source_image
from services.image_processing import decode_image

router = APIRouter(prefix="/source-image", tags=["Source Image"])
logger = get_logger(__name__)


@router.put("", response_model=SourceImageInfo)
async def upload_source_image(file: UploadFile = File(...)):
    """
    Sets the image that is sent along with the prompt (image-to-image).
    """
    contents = await file.read()
    if len(contents) > MAX_UPLOAD_SIZE:
        raise HTTPException(
            status_code=413,  # Payload Too Large
            detail=f"The uploaded image exceeds the {MAX_UPLOAD_SIZE // (1024 * 1024)}MB size limit. Please upload a smaller image."
        )

    if decode_image(contents) is None:
        raise HTTPException(
            status_code=415,
            detail="Unsupported file format. Please upload an image in one of these formats: JPEG/JPG, PNG, BMP, TIFF, or WebP."
        )

    mime_type = file.content_type if file.content_type and file.content_type.startswith("image/") else "image/png"
    source = SourceImage(data=contents, mime_type=mime_type, filename=file.filename or "source_image")
    set_source_image(source)

    return SourceImageInfo(filename=source.filename, mime_type=source.mime_type, size=len(source.data))


@router.get("")
async def get_current_source_image():
    source = get_source_image()
    if source is None:
        raise HTTPException(status_code=404, detail="No source image is set.")
    return Response(
        content=source.data,
        media_type=source.mime_type,
    )


@router.delete("")
async def remove_source_image():
    if not clear_source_image():
        return {"message": "No source image was set."}
    logger.info("Source image cleared.")
    return {"message": "Source image removed."}
