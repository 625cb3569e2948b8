import os
from dotenv import load_dotenv

load_dotenv()

# Gemini credentials (AI Studio injects API_KEY, the SDK reads GEMINI_API_KEY / GOOGLE_API_KEY)
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY") or os.getenv("API_KEY")
IMAGE_MODEL_NAME = os.getenv("IMAGE_MODEL_NAME", "gemini-3-pro-image-preview")

# Generation limits
MIN_BATCH_SIZE = 1
MAX_BATCH_SIZE = int(os.getenv("MAX_BATCH_SIZE", 4))
MIN_CREATIVITY = 0.0
MAX_CREATIVITY = 2.0
RANDOM_SEED = -1
MAX_SEED = 2147483647  # 2**31 - 1

# Download compression (JPEG quality as a 0..1 fraction)
MIN_COMPRESSION_QUALITY = 0.1
MAX_COMPRESSION_QUALITY = 1.0

# Default settings snapshot
DEFAULT_FILENAME_PREFIX = os.getenv("DEFAULT_FILENAME_PREFIX", "progen-output")
DEFAULT_COMPRESSION_QUALITY = float(os.getenv("DEFAULT_COMPRESSION_QUALITY", 0.95))
DEFAULT_CREATIVITY = 1.0
FALLBACK_FILENAME_PREFIX = "progen"

# Source image upload
MAX_UPLOAD_SIZE = int(os.getenv("MAX_UPLOAD_SIZE", 10 * 1024 * 1024))  # 10MB
REUSED_INPUT_FILENAME = "generated_input.png"

# Negative prompts are not a model parameter; they are folded into the prompt text
NEGATIVE_PROMPT_TEMPLATE = "\n\n(Note: strictly exclude the following elements: {negative_prompt})"

# Server
HOST = os.getenv("HOST", "127.0.0.1")
PORT = int(os.getenv("PORT", 8000))
CORS_ALLOW_ORIGINS = [o.strip() for o in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",") if o.strip()]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
