import io

import pytest

from image_api.gateway.server import create_app
from image_api.gateway.settings import Settings

TEST_UPLOAD_LIMIT = 1024


@pytest.fixture
def settings():
    # Small upload limit so size tests stay fast
    return Settings(
        openai_api_key="sk-test",
        environment="development",
        max_upload_bytes=TEST_UPLOAD_LIMIT,
    )

@pytest.fixture
def app(settings):
    app = create_app(settings)
    app.config["TESTING"] = True
    return app

@pytest.fixture
def client(app):
    return app.test_client()

@pytest.fixture
def make_image():
    """
    Builds the (stream, filename, content_type) tuple the test client posts as a file.
    """
    def _make(size=128, filename="tooth.png", content_type="image/png"):
        return (io.BytesIO(b"\x89PNG" + b"\x00" * max(size - 4, 0)), filename, content_type)
    return _make
