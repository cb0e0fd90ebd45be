"""
Error taxonomy for the short link core.

The service raises these; the HTTP layer maps ``kind`` to a status code.
Every failure path leaves the registry exactly as it was before the call.
"""

from enum import Enum


class ErrorKind(Enum):
    """Failure kinds surfaced to the caller layer"""
    INVALID_REQUEST = "invalid_request"
    INVALID_URL = "invalid_url"
    INVALID_VALIDITY = "invalid_validity"
    INVALID_SHORTCODE = "invalid_shortcode"
    SHORTCODE_TAKEN = "shortcode_taken"
    NOT_FOUND = "not_found"
    EXPIRED = "expired"
    INTERNAL = "internal"


class ShortenerError(Exception):
    """Base class for all core errors"""
    
    kind: ErrorKind = ErrorKind.INTERNAL
    default_message = "Internal server error"
    
    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidUrlError(ShortenerError):
    kind = ErrorKind.INVALID_URL
    default_message = "Invalid URL format. URL must start with http:// or https://"


class InvalidValidityError(ShortenerError):
    kind = ErrorKind.INVALID_VALIDITY
    default_message = "Validity must be a positive integer (minutes), at most one year"


class InvalidShortcodeError(ShortenerError):
    kind = ErrorKind.INVALID_SHORTCODE
    default_message = (
        "Invalid shortcode. Must be alphanumeric, 3-20 characters, "
        "and not a reserved word"
    )


class ShortcodeTakenError(ShortenerError):
    kind = ErrorKind.SHORTCODE_TAKEN
    default_message = "Shortcode already exists. Please choose a different one"


class NotFoundError(ShortenerError):
    kind = ErrorKind.NOT_FOUND
    default_message = "Short URL not found"


class ExpiredError(ShortenerError):
    kind = ErrorKind.EXPIRED
    default_message = "Short URL has expired"


class ShortCodeGenerationError(ShortenerError):
    """Raised when no free random code was found within the retry budget"""
    kind = ErrorKind.INTERNAL
    default_message = "Could not generate a unique shortcode"
