"""
Image service route handlers.

Provides routes for:
- Image creation from an uploaded photo (/create-image)

Generation is not wired to a provider yet: every accepted upload gets the same
placeholder result. Validation failures are raised as typed errors and
rendered by `errors.handlers`.
"""

import logging
from typing import Any, Dict, Tuple

from flask import Blueprint, Response, current_app, jsonify, request

from image_api.errors.exceptions import MissingInput
from image_api.image_service.models import SuccessEnvelope, UploadedFile
from image_api.image_service.upload import IMAGE_FIELD, accept_upload

image_bp = Blueprint("image", __name__)

PLACEHOLDER_IMAGE_URL = "https://placehold.co/1024x1024/png?text=Generated+Image"
PLACEHOLDER_DESCRIPTION = (
    "Placeholder result: image generation is not enabled yet. "
    "The uploaded image was received and validated successfully."
)


# --- REQUEST LOGGING ---
@image_bp.before_request
def before_request() -> None:
    """
    Log every incoming request method and path to the image service.
    """
    logging.info(f"[Image] Incoming {request.method} {request.path}")


@image_bp.after_request
def after_request(response: Response) -> Response:
    """
    Log the response status code for every request.

    Args:
        response (Response): The Flask response object.

    Returns:
        Response: The passed-through response object.
    """
    logging.info(f"[Image] Response {response.status}")
    return response


def build_placeholder_result(upload: UploadedFile) -> SuccessEnvelope:
    """
    Stand-in for the generation call. Deterministic and independent of the upload.
    """
    return SuccessEnvelope(
        generated_image_url=PLACEHOLDER_IMAGE_URL,
        description=PLACEHOLDER_DESCRIPTION,
    )


def _request_params() -> Dict[str, Any]:
    """Query string and non-file form fields, merged. Logged only."""
    params: Dict[str, Any] = request.args.to_dict()
    params.update(request.form.to_dict())
    return params


# --- CREATE IMAGE ---
@image_bp.route("/create-image", methods=["POST"])
def create_image() -> Tuple[Response, int]:
    """
    Accept one image upload and return the generated image.

    Expects multipart/form-data with:
    - image (file): Required. Any image/* type, at most the configured size.
    - any other query or form fields (accepted, not validated)

    Returns:
        200: JSON with success, generatedImageUrl and description.
        400: Missing, oversized, mistyped or unexpected upload.
    """
    settings = current_app.config["SETTINGS"]

    upload = accept_upload(request.files, settings.max_upload_bytes)
    if upload is None:
        raise MissingInput(f"No file provided in the '{IMAGE_FIELD}' field")

    logging.info(
        f"[Image] Received {upload.filename} ({upload.mimetype}, {upload.size} bytes) "
        f"params={_request_params()}"
    )

    result = build_placeholder_result(upload)
    return jsonify(result.to_dict()), 200
