import os

from dotenv import load_dotenv

load_dotenv()  # Load API keys from .env

# -----------------------------------------------------------------------------
# VENDOR ENDPOINTS
# -----------------------------------------------------------------------------
REALITY_DEFENDER_URL = os.environ.get(
    "REALITY_DEFENDER_URL", "https://api.realitydefender.com/v1/media/detect"
)
REALITY_DEFENDER_TIMEOUT = float(os.environ.get("REALITY_DEFENDER_TIMEOUT", "60"))

SIGHTENGINE_URL = os.environ.get(
    "SIGHTENGINE_URL", "https://api.sightengine.com/1.0/check.json"
)
SIGHTENGINE_TIMEOUT = float(os.environ.get("SIGHTENGINE_TIMEOUT", "30"))

GEMINI_MODEL = os.environ.get("GEMINI_MODEL", "gemini-2.5-flash")

# -----------------------------------------------------------------------------
# UPLOAD RULES
# -----------------------------------------------------------------------------
MAX_IMAGE_BYTES = 10 * 1024 * 1024
ALLOWED_FORMATS = {"JPEG", "PNG", "GIF", "WEBP"}

# -----------------------------------------------------------------------------
# VERDICT RULES
# -----------------------------------------------------------------------------
# More than this many models flagged MANIPULATED => overall FAKE
MANIPULATED_MODEL_THRESHOLD = 2
# Sightengine "type.deepfake" score at or above this => FAKE
DEEPFAKE_SCORE_THRESHOLD = 0.5


# Credentials are read on every call so a missing key surfaces per request.
def reality_defender_key():
    return os.environ.get("REALITY_DEFENDER_API_KEY")


def sightengine_credentials():
    return os.environ.get("SIGHTENGINE_API_USER"), os.environ.get("SIGHTENGINE_API_SECRET")


def gemini_key():
    return os.environ.get("GEMINI_API_KEY")
