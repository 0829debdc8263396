"""Sightengine client and response normalization."""

import logging

import requests

from deepfake_backend import config
from deepfake_backend.errors import ProviderError
from deepfake_backend.report import (
    AUTHENTIC,
    FAKE,
    MANIPULATED,
    REAL,
    build_report,
    model_details,
)

log = logging.getLogger(__name__)

PROVIDER = "Sightengine"

DETECTION_LOGIC = "Using Sightengine overall status: MANIPULATED → FAKE; AUTHENTIC → REAL"


def check(image, api_user, api_secret, timeout=None):
    """Run the Sightengine ``deepfake`` model on ``image`` and return the JSON body."""
    timeout = timeout or config.SIGHTENGINE_TIMEOUT
    log.info("📤 Sending %s (%d bytes) to %s", image.mime_type, len(image.data), PROVIDER)

    # API parameters first, then media
    data = {"api_user": api_user, "api_secret": api_secret, "models": "deepfake"}
    files = {"media": (image.filename, image.data, image.mime_type)}

    try:
        response = requests.post(config.SIGHTENGINE_URL, data=data, files=files, timeout=timeout)
    except requests.Timeout:
        raise ProviderError(PROVIDER, f"{PROVIDER} request timed out after {timeout:g}s")
    except requests.RequestException as e:
        raise ProviderError(PROVIDER, f"{PROVIDER} request failed: {e}")

    log.info("%s response status: %s", PROVIDER, response.status_code)
    if not response.ok:
        raise ProviderError(PROVIDER, f"HTTP {response.status_code}: {response.text}")

    try:
        result = response.json()
    except ValueError:
        raise ProviderError(PROVIDER, f"Invalid JSON response from Sightengine: {response.text}")

    if result.get("status") == "failure":
        message = (result.get("error") or {}).get("message") or "Unknown error"
        raise ProviderError(PROVIDER, f"Sightengine API failure: {message}")

    return result


def normalize(result):
    status = result.get("status")
    score = result.get("score")
    deepfake_score = (result.get("type") or {}).get("deepfake")

    if status == MANIPULATED:
        fake = True
        confidence = score or 0.9
    elif status == AUTHENTIC:
        fake = False
        confidence = 1 - (score or 0)
    elif deepfake_score is not None:
        # plain "success" body: judge the deepfake score
        fake = deepfake_score >= config.DEEPFAKE_SCORE_THRESHOLD
        confidence = deepfake_score if fake else 1 - deepfake_score
    else:
        fake = False
        confidence = score or 0

    if fake:
        verdict, classification = FAKE, "Deepfake/Manipulated Image"
    else:
        verdict, classification = REAL, "Authentic Image"
    log.info("🧠 %s verdict: %s (%s)", PROVIDER, verdict, confidence)

    return build_report(
        classification=classification,
        verdict=verdict,
        confidence=confidence,
        details=model_details(result.get("models")),
        raw_result=result,
        detection_logic=DETECTION_LOGIC,
    )
