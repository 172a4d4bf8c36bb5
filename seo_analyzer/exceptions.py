"""
seo_analyzer/exceptions.py
Errors raised while handling an analysis request.
Each one knows the HTTP status and the message shown to the client.
"""
from typing import Optional

GENERIC_FAILURE = "Failed to process SEO analysis. Please try again later."


class AnalysisError(Exception):
    status_code: int = 500

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class MissingFieldsError(AnalysisError):
    status_code = 400

    def __init__(self):
        super().__init__("Website URL and Main Topic are required")


class InvalidFieldError(AnalysisError):
    status_code = 400


class WebhookError(AnalysisError):
    """Upstream workflow unreachable or answered with a non-2xx status."""
    status_code = 500

    def __init__(self, reason: str):
        super().__init__(GENERIC_FAILURE, details=reason)


class WebhookResponseError(WebhookError):
    """Upstream answered 2xx but the body could not be parsed as JSON."""

    def __init__(self):
        super().__init__("Invalid response from webhook service")
