from __future__ import annotations

from unittest.mock import patch

import pytest
import requests

from conftest import make_response
from deepfake_backend import sightengine
from deepfake_backend.errors import ProviderError
from deepfake_backend.media import decode_media


def test_manipulated_status_is_fake():
    result = {
        "status": "MANIPULATED",
        "score": 0.97,
        "models": [
            {"name": "deepfake", "status": "MANIPULATED", "score": 0.97},
            {"name": "faceswap", "status": "AUTHENTIC", "score": 0.12},
        ],
    }
    report = sightengine.normalize(result)
    assert report["overall"] == {
        "classification": "Deepfake/Manipulated Image",
        "verdict": "FAKE",
        "confidence": 0.97,
        "manipulatedModelsCount": 1,
        "totalModelsUsed": 2,
    }
    assert report["details"][1] == {"name": "faceswap", "status": "AUTHENTIC", "confidence": 0.12}
    assert report["summary"]["authenticCount"] == 1
    assert report["summary"]["detectionLogic"].startswith("Using Sightengine overall status")
    assert report["rawResult"] is result


def test_manipulated_without_score_defaults_confidence():
    assert sightengine.normalize({"status": "MANIPULATED"})["overall"]["confidence"] == 0.9


def test_authentic_status_inverts_score():
    report = sightengine.normalize({"status": "AUTHENTIC", "score": 0.25})
    assert report["overall"]["verdict"] == "REAL"
    assert report["overall"]["classification"] == "Authentic Image"
    assert report["overall"]["confidence"] == pytest.approx(0.75)
    assert report["details"] == []


@pytest.mark.parametrize(
    "score, verdict, confidence",
    [(0.92, "FAKE", 0.92), (0.1, "REAL", 0.9), (0.5, "FAKE", 0.5)],
)
def test_success_body_uses_deepfake_score(score, verdict, confidence):
    result = {"status": "success", "type": {"deepfake": score}}
    overall = sightengine.normalize(result)["overall"]
    assert overall["verdict"] == verdict
    assert overall["confidence"] == pytest.approx(confidence)


def test_success_body_without_score_is_real():
    overall = sightengine.normalize({"status": "success"})["overall"]
    assert overall["verdict"] == "REAL"
    assert overall["confidence"] == 0


@patch("deepfake_backend.sightengine.requests.post")
def test_check_posts_multipart(mock_post, png_data_uri, png_bytes):
    body = {"status": "success", "type": {"deepfake": 0.02}}
    mock_post.return_value = make_response(json_body=body)

    assert sightengine.check(decode_media(png_data_uri), "user", "secret") == body

    kwargs = mock_post.call_args.kwargs
    assert kwargs["data"] == {"api_user": "user", "api_secret": "secret", "models": "deepfake"}
    assert kwargs["files"] == {"media": ("image.png", png_bytes, "image/png")}
    assert kwargs["timeout"] == 30


@patch("deepfake_backend.sightengine.requests.post")
def test_check_http_error(mock_post, png_data_uri):
    mock_post.return_value = make_response(status_code=500, text="boom")
    with pytest.raises(ProviderError, match="HTTP 500: boom"):
        sightengine.check(decode_media(png_data_uri), "user", "secret")


@patch("deepfake_backend.sightengine.requests.post")
def test_check_failure_status(mock_post, png_data_uri):
    body = {"status": "failure", "error": {"type": "credentials_error", "message": "Incorrect API user"}}
    mock_post.return_value = make_response(json_body=body)
    with pytest.raises(ProviderError, match="Sightengine API failure: Incorrect API user"):
        sightengine.check(decode_media(png_data_uri), "user", "secret")


@patch("deepfake_backend.sightengine.requests.post")
def test_check_invalid_json(mock_post, png_data_uri):
    mock_post.return_value = make_response(text="not json")
    with pytest.raises(ProviderError, match="Invalid JSON response from Sightengine: not json"):
        sightengine.check(decode_media(png_data_uri), "user", "secret")


@patch("deepfake_backend.sightengine.requests.post")
def test_check_timeout(mock_post, png_data_uri):
    mock_post.side_effect = requests.Timeout()
    with pytest.raises(ProviderError, match="timed out after 30s"):
        sightengine.check(decode_media(png_data_uri), "user", "secret")


def test_top_level_score_is_not_thresholded():
    overall = sightengine.normalize({"status": "success", "score": 0.8})["overall"]
    assert overall["verdict"] == "REAL"
    assert overall["confidence"] == 0.8


def test_manipulated_with_zero_score_defaults_confidence():
    overall = sightengine.normalize({"status": "MANIPULATED", "score": 0})["overall"]
    assert overall["verdict"] == "FAKE"
    assert overall["confidence"] == 0.9


def test_lowercase_status_is_not_counted():
    result = {
        "status": "AUTHENTIC",
        "models": [
            {"name": "a", "status": "manipulated", "score": 0.7},
            {"name": "b", "status": "MANIPULATED", "score": 0.8},
        ],
    }
    report = sightengine.normalize(result)
    assert report["summary"]["manipulatedCount"] == 1
    assert report["overall"]["manipulatedModelsCount"] == 1
