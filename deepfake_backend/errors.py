"""Exceptions raised while handling a detection request.

Each carries the HTTP status the server answers with.
"""


class DetectionError(Exception):
    status_code = 500


class MediaError(DetectionError):
    """The uploaded media is missing, malformed, or not an accepted image."""

    status_code = 400

    def __init__(self, message, status_code=None):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code


class ConfigurationError(DetectionError):
    """A vendor credential is not configured."""


class ProviderError(DetectionError):
    """A vendor call failed or returned something unusable."""

    def __init__(self, provider, message):
        super().__init__(message)
        self.provider = provider
