"""
Upload acceptor for the single `image` multipart field.

Checks run before any handler logic:
1. Only the `image` file field is accepted, and only once.
2. The declared content type must be `image/*`.
3. The file must not exceed the configured size limit. It is read in chunks,
   so an oversized upload is never fully held in memory.
"""

from typing import IO, Optional

from werkzeug.datastructures import FileStorage, MultiDict

from image_api.errors.exceptions import (
    InvalidFileType,
    UploadCountExceeded,
    UploadFieldUnexpected,
    UploadSizeExceeded,
)
from image_api.image_service.models import UploadedFile

IMAGE_FIELD = "image"
CHUNK_SIZE = 64 * 1024


def _size_error(max_bytes: int) -> UploadSizeExceeded:
    mb, remainder = divmod(max_bytes, 1024 * 1024)
    limit = f"{mb}MB" if mb and not remainder else f"{max_bytes} bytes"
    return UploadSizeExceeded(f"File size exceeds {limit} limit")


def read_limited(stream: IO[bytes], max_bytes: int) -> bytes:
    """
    Read a stream into memory, failing as soon as it grows past `max_bytes`.

    Raises:
        UploadSizeExceeded: If the stream holds more than `max_bytes` bytes.
    """
    buffer = bytearray()
    while True:
        chunk = stream.read(CHUNK_SIZE)
        if not chunk:
            break
        buffer.extend(chunk)
        if len(buffer) > max_bytes:
            raise _size_error(max_bytes)
    return bytes(buffer)


def accept_upload(files: "MultiDict[str, FileStorage]", max_bytes: int, field: str = IMAGE_FIELD) -> Optional[UploadedFile]:
    """
    Validate and buffer the uploaded image.

    Args:
        files (MultiDict): Parsed multipart files, usually `request.files`.
        max_bytes (int): Largest accepted file size.
        field (str): Name of the only accepted file field.

    Returns:
        UploadedFile: The buffered image, or None when no file was sent.

    Raises:
        UploadFieldUnexpected: A file was sent under another field name.
        UploadCountExceeded: More than one file was sent under `field`.
        InvalidFileType: The content type is not image/*.
        UploadSizeExceeded: The file is larger than `max_bytes`.
    """
    for name in files.keys():
        if name != field:
            raise UploadFieldUnexpected(f"Unexpected file field '{name}'")

    uploads = files.getlist(field)
    if not uploads:
        return None
    if len(uploads) > 1:
        raise UploadCountExceeded()

    storage = uploads[0]
    # Browsers send an empty part when the file input was left blank
    if not storage.filename:
        return None

    mimetype = storage.mimetype or ""
    if not mimetype.startswith("image/"):
        raise InvalidFileType()

    if storage.content_length and storage.content_length > max_bytes:
        raise _size_error(max_bytes)

    data = read_limited(storage.stream, max_bytes)
    return UploadedFile(data=data, mimetype=mimetype, size=len(data), filename=storage.filename)
