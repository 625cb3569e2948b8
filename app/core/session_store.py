from typing import Dict, List, Optional
from core.models import GeneratedImage, SourceImage

# In-memory session state. Nothing here survives a restart.
#
# generated_images: gallery entries, newest first
# source_image: the current img2img input, or None
# generation_state: {"is_generating": bool}
generated_images: List[GeneratedImage] = []
source_image: Dict[str, Optional[SourceImage]] = {"current": None}
generation_state = {"is_generating": False}
