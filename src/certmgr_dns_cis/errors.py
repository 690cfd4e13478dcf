"""Challenge handler errors.

Every error carries the HTTP status code that the action reports back to
Cloud Functions when the error reaches `.ChallengeHandler.handle`.
"""
from typing import Optional

import requests


class Error(Exception):
    """Generic challenge handler error."""

    status_code = 500

    def __init__(self, *args: object, status_code: Optional[int] = None) -> None:
        super().__init__(*args)
        if status_code is not None:
            self.status_code = status_code


class ConfigurationError(Error):
    """Configuration sanity error."""


class AuthorizationError(Error):
    """Missing credential or notification from a disallowed instance."""

    status_code = 403


class VerificationError(Error):
    """The notification could not be decoded or its signature is invalid."""


class TransportError(Error):
    """Network level failure while talking to an upstream service."""


class UpstreamServiceError(Error):
    """An upstream service returned an unsuccessful response.

    :ivar response: The offending response, if any.
    :vartype response: `requests.Response` or None

    """
    def __init__(self, message: str, response: Optional[requests.Response] = None,
                 status_code: Optional[int] = None) -> None:
        super().__init__(message, status_code=status_code)
        self.response = response


class TokenError(UpstreamServiceError):
    """Failed to obtain an IAM access token."""


class PublicKeyError(UpstreamServiceError):
    """Failed to fetch the notification public key of an instance."""


class ZoneNotFoundError(UpstreamServiceError):
    """No active CIS zone matches the domain."""


class RecordError(UpstreamServiceError):
    """A CIS DNS record call failed."""
