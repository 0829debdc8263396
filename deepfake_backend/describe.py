"""One-paragraph image descriptions from Gemini."""

import logging

from google import genai
from google.genai import types

from deepfake_backend import config
from deepfake_backend.errors import ProviderError

log = logging.getLogger(__name__)

PROVIDER = "Gemini"

PROMPT = "Provide a concise, one-paragraph description of the following image."


def describe_image(image, api_key, model=None):
    client = genai.Client(api_key=api_key)
    parts = [
        types.Part.from_bytes(data=image.data, mime_type=image.mime_type),
        types.Part(text=PROMPT),
    ]
    log.info("📤 Asking %s to describe a %dx%d %s", PROVIDER, image.width, image.height, image.format)
    try:
        resp = client.models.generate_content(
            model=model or config.GEMINI_MODEL,
            contents=[types.Content(role="user", parts=parts)],
        )
    except Exception as e:
        raise ProviderError(PROVIDER, f"{PROVIDER} request failed: {e}")

    if not resp.text:
        raise ProviderError(PROVIDER, "The Gemini API returned an empty response.")
    return resp.text.strip()
