import base64
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Any, List
from pydantic import BaseModel, Field, field_validator, model_validator, ValidationInfo
from core.config import (
    MIN_BATCH_SIZE,
    MAX_BATCH_SIZE,
    MIN_CREATIVITY,
    MAX_CREATIVITY,
    RANDOM_SEED,
    MAX_SEED,
    MIN_COMPRESSION_QUALITY,
    MAX_COMPRESSION_QUALITY,
    DEFAULT_FILENAME_PREFIX,
    DEFAULT_COMPRESSION_QUALITY,
    DEFAULT_CREATIVITY,
)


class AspectRatio(str, Enum):
    SQUARE = "1:1"
    PORTRAIT = "3:4"
    LANDSCAPE = "4:3"
    TALL = "9:16"
    WIDE = "16:9"


class ImageSize(str, Enum):
    RESOLUTION_1K = "1K"
    RESOLUTION_2K = "2K"
    RESOLUTION_4K = "4K"


class GenerationSettings(BaseModel):
    prompt: str
    negative_prompt: str = ""
    seed: int = RANDOM_SEED
    batch_size: int = Field(default=MIN_BATCH_SIZE, ge=MIN_BATCH_SIZE, le=MAX_BATCH_SIZE)
    aspect_ratio: AspectRatio = AspectRatio.SQUARE
    image_size: ImageSize = ImageSize.RESOLUTION_1K
    creativity: float = Field(default=DEFAULT_CREATIVITY, ge=MIN_CREATIVITY, le=MAX_CREATIVITY)
    filename_prefix: str = DEFAULT_FILENAME_PREFIX
    compression_quality: float = Field(
        default=DEFAULT_COMPRESSION_QUALITY, ge=MIN_COMPRESSION_QUALITY, le=MAX_COMPRESSION_QUALITY
    )

    @model_validator(mode='before')
    @classmethod
    def check_for_empty_body(cls, data):
        """
        Ensures the request body is not empty.
        """
        if not data:
            raise ValueError("Request body cannot be empty")
        return data

    @field_validator("prompt")
    @classmethod
    def not_empty(cls, v: str, info: ValidationInfo) -> str:
        """
        Validates that the prompt contains something to generate from.
        """
        if not v.strip():
            raise ValueError(f"'{info.field_name}' is a required field and cannot be empty.")
        return v

    @field_validator("seed", "batch_size", mode='before')
    @classmethod
    def reject_decimals(cls, v: Any, info: ValidationInfo) -> Any:
        """
        Rejects whole-number floats such as 1.0 that pydantic would otherwise coerce.
        """
        if isinstance(v, bool):
            raise ValueError(f"Please enter an integer number for {info.field_name}.")
        if isinstance(v, float):
            raise ValueError("Please enter an integer number (whole number without decimals).")
        return v

    @field_validator("seed")
    @classmethod
    def validate_seed(cls, v: int) -> int:
        if v == RANDOM_SEED:
            return v
        if v < 0 or v > MAX_SEED:
            raise ValueError(f"Seed must be -1 (random) or between 0 and {MAX_SEED}.")
        return v

    @field_validator("filename_prefix")
    @classmethod
    def strip_prefix(cls, v: str) -> str:
        return v.strip()


@dataclass
class SourceImage:
    """The image handed to the model alongside the prompt (img2img)."""
    data: bytes
    mime_type: str
    filename: str


@dataclass
class GeneratedImage:
    """A single gallery entry."""
    id: str
    data: bytes
    mime_type: str
    settings: GenerationSettings
    timestamp: int  # epoch milliseconds
    seed: int

    @property
    def url(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"


@dataclass
class GenerationRequest:
    """Everything needed for one generate_content call."""
    model: str
    parts: List[Any]
    config: Any
    seed: int
    prompt: str = ""
    has_source_image: bool = False


class ImageSummary(BaseModel):
    id: str
    mime_type: str
    timestamp: int
    seed: int
    settings: GenerationSettings
    image_url: str
    download_url: str
    data_url: Optional[str] = None

    @classmethod
    def from_image(cls, image: GeneratedImage, include_data: bool = False) -> "ImageSummary":
        return cls(
            id=image.id,
            mime_type=image.mime_type,
            timestamp=image.timestamp,
            seed=image.seed,
            settings=image.settings,
            image_url=f"/gallery/{image.id}/image",
            download_url=f"/gallery/{image.id}/download",
            data_url=image.url if include_data else None,
        )


class GenerateResponse(BaseModel):
    message: str
    requested: int
    generated: int
    images: List[ImageSummary]


class GalleryResponse(BaseModel):
    total: int
    images: List[ImageSummary]


class SourceImageInfo(BaseModel):
    filename: str
    mime_type: str
    size: int


class StatusResponse(BaseModel):
    api_key_configured: bool
    model: str
    is_generating: bool
    gallery_size: int
    has_source_image: bool
