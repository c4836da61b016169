"""
Origin policy for cross-origin requests.

Requests without an Origin header (curl, scripts, server-to-server) are
allowed. Browser requests must come from an origin on the allow-list, matched
as exact strings. Rejected requests never reach a route handler.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from flask import Flask, request
from flask_cors import CORS

from image_api.errors.exceptions import CorsRejection
from image_api.gateway.settings import Settings

# Paths answered regardless of the caller's origin
ORIGIN_EXEMPT_PATHS = ("/health",)


@dataclass(frozen=True)
class OriginDecision:
    allowed: bool
    reason: Optional[str] = None


def evaluate_origin(origin: Optional[str], allowed_origins: Iterable[str]) -> OriginDecision:
    """
    Decide whether a request with the given Origin header may proceed.

    Args:
        origin (str, optional): Value of the Origin header, None when absent.
        allowed_origins (Iterable[str]): Exact origins on the allow-list.

    Returns:
        OriginDecision: allowed=True, or allowed=False with a reason.
    """
    if origin is None:
        return OriginDecision(True, "no origin header")
    if origin in allowed_origins:
        return OriginDecision(True)
    return OriginDecision(False, f"Origin '{origin}' is not allowed")


def init_origin_policy(app: Flask, settings: Settings) -> None:
    """
    Attach credentialed CORS headers for allowed origins and reject all others
    before routing.
    """
    CORS(app, origins=list(settings.allowed_origins), supports_credentials=True)

    @app.before_request
    def check_origin() -> None:
        if request.path in ORIGIN_EXEMPT_PATHS:
            return None

        decision = evaluate_origin(request.headers.get("Origin"), settings.allowed_origins)
        if not decision.allowed:
            logging.warning(f"[CORS] Rejected {request.method} {request.path}: {decision.reason}")
            raise CorsRejection()
        return None
