"""
Request-scoped values passed between the upload acceptor and the image routes.
Nothing here is persisted or shared between requests.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class UploadedFile:
    """An accepted image upload, fully buffered in memory."""

    data: bytes
    mimetype: str
    size: int
    filename: Optional[str] = None


@dataclass(frozen=True)
class SuccessEnvelope:
    generated_image_url: str
    description: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": True,
            "generatedImageUrl": self.generated_image_url,
            "description": self.description,
        }
