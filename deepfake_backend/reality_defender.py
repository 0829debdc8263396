"""Reality Defender client and response normalization."""

import logging

import requests

from deepfake_backend import config
from deepfake_backend.errors import ProviderError
from deepfake_backend.report import (
    FAKE,
    REAL,
    build_report,
    count_status,
    model_details,
)

log = logging.getLogger(__name__)

PROVIDER = "Reality Defender"


def detect(image, api_key, timeout=None):
    """Send ``image`` to Reality Defender and return the parsed JSON body."""
    timeout = timeout or config.REALITY_DEFENDER_TIMEOUT
    log.info("📤 Sending %s (%d bytes) to %s", image.mime_type, len(image.data), PROVIDER)

    try:
        response = requests.post(
            config.REALITY_DEFENDER_URL,
            headers={"X-API-Key": api_key},
            json={"media": image.to_data_uri(), "async": False},
            timeout=timeout,
        )
    except requests.Timeout:
        raise ProviderError(PROVIDER, f"{PROVIDER} request timed out after {timeout:g}s")
    except requests.RequestException as e:
        raise ProviderError(PROVIDER, f"{PROVIDER} request failed: {e}")

    if not response.ok:
        log.error("%s API error %s: %s", PROVIDER, response.status_code, response.text)
        raise ProviderError(PROVIDER, f"API request failed: {response.status_code} {response.reason}")

    try:
        return response.json()
    except ValueError:
        raise ProviderError(PROVIDER, f"Invalid JSON response from {PROVIDER}: {response.text}")


def count_manipulated(models):
    return count_status([m for m in models or [] if isinstance(m, dict)])


def normalize(result):
    """Reshape a Reality Defender response into the common report.

    With a per-model ``models`` list, the verdict is FAKE once more than
    ``MANIPULATED_MODEL_THRESHOLD`` models report MANIPULATED and REAL
    otherwise. Responses that only carry an ``overall`` block (with
    ``results`` keyed by model name) keep the vendor's own verdict.
    """
    models = result.get("models") or []
    overall = result.get("overall") or result
    classification = overall.get("classification") or "unknown"
    verdict = overall.get("verdict") or "unknown"
    confidence = overall.get("confidence") or 0

    if models:
        details = model_details(models)
        manipulated = count_manipulated(models)
        log.info("🧠 %s: %d/%d models MANIPULATED", PROVIDER, manipulated, len(models))

        if manipulated > config.MANIPULATED_MODEL_THRESHOLD:
            classification = verdict = FAKE
            raw_score = (result.get("rawResult") or {}).get("score")
            if raw_score is not None:
                confidence = raw_score
        else:
            classification = verdict = REAL
        logic = (
            f"More than {config.MANIPULATED_MODEL_THRESHOLD} models MANIPULATED → FAKE; "
            "otherwise REAL"
        )
    else:
        details = model_details(result.get("results") or result.get("details"))
        manipulated = count_manipulated(details)
        logic = f"Using {PROVIDER} overall verdict"

    report = build_report(
        classification=classification,
        verdict=verdict,
        confidence=confidence,
        details=details,
        raw_result=result.get("rawResult") or result,
        detection_logic=logic,
    )
    report["_metadata"] = {"manipulatedModelCount": manipulated}
    return report
