from datetime import datetime

import pytest

from image_api.gateway.server import MULTIPART_OVERHEAD_BYTES, create_app
from image_api.gateway.settings import Settings, load_settings


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    data = response.get_json()
    assert data["status"] == "ok"
    assert data["openaiConfigured"] is True
    assert data["timestamp"].endswith("Z")
    datetime.fromisoformat(data["timestamp"].replace("Z", "+00:00"))

def test_health_never_exposes_key(client):
    assert "sk-test" not in client.get("/health").get_data(as_text=True)

@pytest.mark.parametrize("key, expected", [(None, False), ("", False), ("sk-live", True)])
def test_health_reports_key_presence(key, expected):
    app = create_app(Settings(openai_api_key=key))
    response = app.test_client().get("/health")
    assert response.get_json()["openaiConfigured"] is expected

@pytest.mark.parametrize("value, expected", [("", False), ("   ", True), ("sk-live", True)])
def test_health_reflects_key_variable(value, expected):
    app = create_app(load_settings(environ={"OPENAI_API_KEY": value}))
    response = app.test_client().get("/health")
    assert response.status_code == 200
    assert response.get_json()["openaiConfigured"] is expected

@pytest.mark.parametrize("origin", [None, "http://localhost:5173", "http://evil.example"])
def test_health_ignores_origin(client, origin):
    headers = {"Origin": origin} if origin else {}
    response = client.get("/health", headers=headers)
    assert response.status_code == 200
    assert response.get_json()["status"] == "ok"

def test_create_app_applies_settings(app, settings):
    assert app.config["SETTINGS"] is settings
    assert app.config["MAX_CONTENT_LENGTH"] == settings.max_upload_bytes + MULTIPART_OVERHEAD_BYTES

def test_create_app_loads_settings_when_omitted(mocker):
    loaded = Settings(port=9999)
    load = mocker.patch("image_api.gateway.server.load_settings", return_value=loaded)

    app = create_app()

    load.assert_called_once()
    assert app.config["SETTINGS"] is loaded

def test_main_runs_on_configured_port(mocker):
    mocker.patch("image_api.gateway.server.load_settings", return_value=Settings(port=4321, environment="production"))
    run = mocker.patch("flask.Flask.run")

    from image_api.gateway.server import main
    main()

    run.assert_called_once_with(host="0.0.0.0", port=4321, debug=False)
