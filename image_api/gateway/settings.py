"""
Process-wide settings for the image API.
Read once at startup from the environment (and .env) and never mutated.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from dotenv import load_dotenv

# Local development frontends allowed to make credentialed requests
DEFAULT_ALLOWED_ORIGINS: Tuple[str, ...] = (
    "http://localhost:5173",  # Vite dev server
    "http://localhost:3000",  # Same-host frontend
)

MAX_UPLOAD_BYTES = 30 * 1024 * 1024  # 30MB


@dataclass(frozen=True)
class Settings:
    """
    Immutable configuration shared by every request.

    Attributes:
        port (int): Port the development server listens on.
        openai_api_key (str, optional): External API credential. Only its presence is ever reported.
        environment (str): Deployment mode, e.g. "development" or "production".
            Stack traces are only exposed when it is explicitly "development".
        allowed_origins (tuple): Exact origins allowed for cross-origin requests.
        max_upload_bytes (int): Largest accepted image upload.
    """

    port: int = 3000
    openai_api_key: Optional[str] = None
    environment: str = "production"
    allowed_origins: Tuple[str, ...] = DEFAULT_ALLOWED_ORIGINS
    max_upload_bytes: int = MAX_UPLOAD_BYTES

    @property
    def openai_configured(self) -> bool:
        return bool(self.openai_api_key)

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def include_stack(self) -> bool:
        """Stack traces are only attached to error responses in development."""
        return self.environment == "development"


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build the settings object.

    Args:
        environ (Mapping, optional): Variables to read. Defaults to the process
            environment, after loading .env from the working directory.

    Returns:
        Settings: The frozen settings.

    Raises:
        ValueError: If PORT is not an integer.
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    return Settings(
        port=int(environ.get("PORT") or 3000),
        openai_api_key=environ.get("OPENAI_API_KEY") or None,
        environment=(environ.get("APP_ENV") or "production").strip().lower(),
    )
