import json
import re
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
import uvicorn
from api import generate, gallery, source_image, status
from core.config import IMAGE_MODEL_NAME, HOST, PORT, CORS_ALLOW_ORIGINS, MAX_BATCH_SIZE, MAX_SEED
from core.logger import get_logger
from core.models import AspectRatio, ImageSize
from services.gemini_image import api_key_configured
from fastapi.exceptions import RequestValidationError

logger = get_logger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application startup event triggered.")
    logger.info(f"Image model: {IMAGE_MODEL_NAME}")
    if not api_key_configured():
        logger.warning("No Gemini API key configured. Set GEMINI_API_KEY before generating images.")
    logger.info("Application startup complete.")
    yield
    logger.info("Application shutdown.")

app = FastAPI(title="ProGen Studio", lifespan=lifespan)

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handles Pydantic validation errors to return simple, user-friendly messages.
    """
    try:
        error = exc.errors()[0]
    except IndexError:
        return JSONResponse(
            status_code=422,
            content={"detail": "Validation error with unknown structure."},
        )

    error_type = error.get("type")

    if error_type == 'json_invalid':
        parser_message = error.get('msg', '')
        detailed_message = f"Invalid JSON syntax: {parser_message}. Please correct the formatting and try again."
        return JSONResponse(status_code=400, content={"detail": detailed_message})

    loc = error.get("loc") or ["body", "unknown"]
    field = loc[-1] if len(loc) > 1 else "body"
    error_msg = error.get('msg', '')

    valid_aspect_ratios = [a.value for a in AspectRatio]
    valid_image_sizes = [s.value for s in ImageSize]

    if field == 'body':
        detailed_message = "Request body cannot be empty. Please provide the generation settings."
    elif field == 'prompt':
        detailed_message = "The 'prompt' field is required and cannot be empty."
    elif field == 'aspect_ratio':
        detailed_message = f"Invalid 'aspect_ratio'. It must be one of: {', '.join(valid_aspect_ratios)}."
    elif field == 'image_size':
        detailed_message = f"Invalid 'image_size'. It must be one of: {', '.join(valid_image_sizes)}."
    elif field == 'batch_size':
        if 'decimal' in error_msg.lower() or 'integer' in error_msg.lower():
            detailed_message = "Please enter an integer number (whole number without decimals) for batch_size."
        else:
            detailed_message = f"The 'batch_size' must be a whole number between 1 and {MAX_BATCH_SIZE}."
    elif field == 'seed':
        detailed_message = f"The 'seed' must be -1 (random) or a whole number between 0 and {MAX_SEED}."
    elif field == 'creativity':
        detailed_message = "The 'creativity' must be a number between 0 and 2."
    elif field in ('compression_quality', 'quality'):
        detailed_message = f"The '{field}' must be a number between 0.1 and 1."
    elif field == 'file':
        detailed_message = "Please attach an image file in the 'file' form field."
    else:
        # Fallback for any other validation error
        detailed_message = f"There was an error with the '{field}' field: {error_msg}"

    return JSONResponse(
        status_code=422,  # Unprocessable Entity
        content={"detail": detailed_message},
    )

@app.middleware("http")
async def check_duplicate_json_keys_middleware(request: Request, call_next):
    if "application/json" in request.headers.get("content-type", ""):
        body = await request.body()

        async def receive():
            return {"type": "http.request", "body": body}
        request._receive = receive

        if body:
            try:
                pairs = json.JSONDecoder(object_pairs_hook=lambda x: x).decode(body.decode())
            except UnicodeDecodeError:
                return JSONResponse(
                    status_code=400,
                    content={"detail": "Invalid JSON syntax: the request body is not valid UTF-8. Please correct the encoding and try again."}
                )
            except json.JSONDecodeError as e:
                parser_message = str(e)

                # Handle empty value for a key
                if "Expecting value" in parser_message:
                    match = re.search(r'"(\w+)":\s*([,}\]])', body.decode())
                    if match:
                        field_name = match.group(1)
                        return JSONResponse(
                            status_code=400,
                            content={"detail": f"The field '{field_name}' cannot be empty. Please provide a value."}
                        )

                return JSONResponse(
                    status_code=400,
                    content={"detail": f"Invalid JSON syntax: {parser_message}. Please correct the formatting and try again."}
                )

            if isinstance(pairs, list) and all(isinstance(p, tuple) for p in pairs):
                seen_keys = {}
                for key, value in pairs:
                    if key in seen_keys:
                        if seen_keys[key] != value:
                            return JSONResponse(
                                status_code=400,
                                content={"detail": f"Duplicate key '{key}' found with conflicting values."}
                            )
                        return JSONResponse(
                            status_code=400,
                            content={"detail": f"Duplicate key found in JSON body: {key}"}
                        )
                    seen_keys[key] = value

    response = await call_next(request)
    return response

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(generate.router)
app.include_router(gallery.router)
app.include_router(source_image.router)
app.include_router(status.router)

if __name__ == "__main__":
    uvicorn.run(app, host=HOST, port=PORT)
