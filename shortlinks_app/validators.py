"""Validation helpers for shorten requests.

All checks are pure and never raise: malformed input is simply invalid.
"""

import logging
import re
from typing import Any

from pydantic import HttpUrl, TypeAdapter, ValidationError

from shortlinks_app.services.expiration import MAX_VALIDITY_MINUTES

logger = logging.getLogger(__name__)

SHORTCODE_MIN_LENGTH = 3
SHORTCODE_MAX_LENGTH = 20

RESERVED_SHORTCODES = frozenset({
    "api", "admin", "www", "shorturls", "stats", "analytics",
})

_SHORTCODE_PATTERN = re.compile(r"^[A-Za-z0-9]+$")
_http_url = TypeAdapter(HttpUrl)


def validate_url(url: Any) -> bool:
    """Return True if ``url`` is an absolute http(s) URL.

    Only the verdict is used; callers keep their own string because
    ``HttpUrl`` normalises (e.g. adds a trailing slash to a bare host).
    """
    if not url or not isinstance(url, str):
        logger.debug("URL rejected: not a string (%r)", url)
        return False
    
    try:
        _http_url.validate_python(url)
    except ValidationError as e:
        logger.debug("URL rejected: %s (%s)", url, e.errors()[0]["msg"])
        return False
    
    return True


def validate_shortcode(code: Any) -> bool:
    """Return True if ``code`` may be used as a custom shortcode."""
    if not code or not isinstance(code, str):
        logger.debug("Shortcode rejected: invalid type (%r)", code)
        return False
    
    if not SHORTCODE_MIN_LENGTH <= len(code) <= SHORTCODE_MAX_LENGTH:
        logger.debug("Shortcode rejected: length %d", len(code))
        return False
    
    # fullmatch so a trailing newline is not accepted by "$"
    if not _SHORTCODE_PATTERN.fullmatch(code):
        logger.debug("Shortcode rejected: not alphanumeric (%r)", code)
        return False
    
    if code.lower() in RESERVED_SHORTCODES:
        logger.debug("Shortcode rejected: reserved word (%r)", code)
        return False
    
    return True


def validate_validity_minutes(value: Any) -> bool:
    """Return True if ``value`` is absent or a whole number of minutes in (0, one year].

    JSON has a single number type, so ``5.0`` counts as a whole number.
    """
    if value is None:
        return True
    
    # bool is an int subclass; True must not pass as one minute
    if isinstance(value, bool):
        logger.debug("Validity rejected: not an integer (%r)", value)
        return False
    if isinstance(value, float) and not value.is_integer():
        logger.debug("Validity rejected: not a whole number (%r)", value)
        return False
    if not isinstance(value, (int, float)):
        logger.debug("Validity rejected: not an integer (%r)", value)
        return False
    
    if not 0 < value <= MAX_VALIDITY_MINUTES:
        logger.debug("Validity rejected: out of range (%s)", value)
        return False
    
    return True
