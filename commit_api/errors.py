"""Error kinds for the commit message pipeline.

Every failure a request can hit maps to exactly one ErrorKind. Exceptions
carry structured fields; they are turned into text only when the HTTP
response is built (``str(error)``).
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    CREDENTIAL = "credential"
    UPSTREAM = "upstream"
    GENERATION = "generation"


class UpstreamFailure(str, Enum):
    STATUS = "status"
    MALFORMED_RESPONSE = "malformed_response"
    TRANSPORT = "transport"
    TIMEOUT = "timeout"


class CommitServiceError(Exception):
    """Base class for errors that terminate a generation request."""

    kind: ErrorKind
    status_code: int = 500


class InvalidRequestError(CommitServiceError):
    """Raised for a body that is not valid JSON or carries an empty diff."""

    kind = ErrorKind.VALIDATION
    status_code = 400


class CredentialError(CommitServiceError):
    """Raised when no API key is available from any source."""

    kind = ErrorKind.CREDENTIAL
    status_code = 400

    def __init__(self, message: str = (
        "No Gemini API key provided. Set GEMINI_API_KEY environment variable "
        "or include in request."
    )):
        super().__init__(message)


class UpstreamError(CommitServiceError):
    """Raised when the Gemini call fails or returns something unusable.

    Args:
        reason: Which part of the exchange failed.
        upstream_status: Upstream HTTP status, for ``UpstreamFailure.STATUS``.
        body: Raw upstream response text, for ``UpstreamFailure.STATUS``.
        detail: Underlying error description for the other reasons.
    """

    kind = ErrorKind.UPSTREAM
    status_code = 500

    def __init__(
        self,
        reason: UpstreamFailure,
        upstream_status: Optional[int] = None,
        body: Optional[str] = None,
        detail: Optional[str] = None,
    ):
        self.reason = reason
        self.upstream_status = upstream_status
        self.body = body
        self.detail = detail
        super().__init__(self.describe())

    def describe(self) -> str:
        if self.reason is UpstreamFailure.STATUS:
            return f"API request failed with status {self.upstream_status}: {self.body or ''}"
        if self.reason is UpstreamFailure.MALFORMED_RESPONSE:
            return f"Failed to parse response: {self.detail}"
        if self.reason is UpstreamFailure.TIMEOUT:
            return f"Request timed out: {self.detail}"
        return f"Request failed: {self.detail}"


class GenerationError(CommitServiceError):
    """Raised when Gemini answered but produced no usable text."""

    kind = ErrorKind.GENERATION
    status_code = 500

    def __init__(self, message: str = "No commit message generated"):
        super().__init__(message)
