"""
Pytest fixtures for the deepfake backend. Images are generated with Pillow;
vendor calls are always mocked.
"""

from __future__ import annotations

import base64
import io
from unittest.mock import MagicMock

import pytest
from PIL import Image

CREDENTIAL_VARS = (
    "REALITY_DEFENDER_API_KEY",
    "SIGHTENGINE_API_USER",
    "SIGHTENGINE_API_SECRET",
    "GEMINI_API_KEY",
)


def make_image_bytes(fmt="PNG", size=(8, 8)):
    buf = io.BytesIO()
    Image.new("RGB", size, color=(200, 30, 30)).save(buf, fmt)
    return buf.getvalue()


def make_response(status_code=200, json_body=None, text=None):
    """Stand-in for a ``requests.Response``."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.ok = status_code < 400
    resp.reason = "OK" if resp.ok else "Error"
    if json_body is not None:
        resp.json.return_value = json_body
        resp.text = text if text is not None else str(json_body)
    else:
        resp.json.side_effect = ValueError("no json")
        resp.text = text or ""
    return resp


@pytest.fixture
def png_bytes():
    return make_image_bytes("PNG")


@pytest.fixture
def png_data_uri(png_bytes):
    return "data:image/png;base64," + base64.b64encode(png_bytes).decode("ascii")


@pytest.fixture
def no_credentials(monkeypatch):
    for name in CREDENTIAL_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def credentials(monkeypatch):
    monkeypatch.setenv("REALITY_DEFENDER_API_KEY", "rd-key")
    monkeypatch.setenv("SIGHTENGINE_API_USER", "se-user")
    monkeypatch.setenv("SIGHTENGINE_API_SECRET", "se-secret")
    monkeypatch.setenv("GEMINI_API_KEY", "gm-key")


@pytest.fixture
def client():
    from deepfake_backend.server import app

    app.config["TESTING"] = True
    return app.test_client()
