"""
seo_analyzer/utils/validation.py
Format checks for the analysis form, applied again on the server.
"""
import re
from typing import Optional
from urllib.parse import urlparse

from ..exceptions import InvalidFieldError, MissingFieldsError

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def validate_url(url: str) -> bool:
    try:
        p = urlparse(url)
    except ValueError:
        return False
    return bool(p.scheme and p.netloc)


def validate_email(email: Optional[str]) -> bool:
    if not email:
        return True  # optional field
    return EMAIL_RE.match(email) is not None


def check_submission(website_url: Optional[str], main_topic: Optional[str], email: Optional[str]) -> None:
    """Raise the first failing check: required fields, URL format, email format."""
    if not website_url or not main_topic:
        raise MissingFieldsError()
    if not validate_url(website_url):
        raise InvalidFieldError(
            "That doesn't look like a valid website URL. Try something like https://example.com"
        )
    if email and not validate_email(email):
        raise InvalidFieldError("Please check your email address format.")
