# exceptions.py
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Categories of failure a caller can branch on."""

    CONFIGURATION = "configuration"
    AUTHENTICATION = "authentication"
    REMOTE_ERROR = "remote_error"
    UNEXPECTED_STATUS = "unexpected_status"
    MALFORMED_RESPONSE = "malformed_response"
    DOWNLOAD = "download"


class BrandCentralError(Exception):
    """Base class for every error raised by the connector."""

    kind: ErrorKind = ErrorKind.REMOTE_ERROR
    is_transient: bool = False

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class PermanentError(BrandCentralError):
    """An error that will not be fixed by a retry (e.g., a rejected request)."""

    is_transient = False


class TransientError(BrandCentralError):
    """A temporary error (e.g., a remote outage) that might resolve on a retry."""

    is_transient = True


class ConfigurationError(PermanentError):
    kind = ErrorKind.CONFIGURATION


class AuthenticationError(PermanentError):
    kind = ErrorKind.AUTHENTICATION


class RemoteApiError(PermanentError):
    """The remote API answered with an `{error, errors}` payload."""

    kind = ErrorKind.REMOTE_ERROR


class MalformedResponseError(PermanentError):
    kind = ErrorKind.MALFORMED_RESPONSE


class UnexpectedStatusError(TransientError):
    kind = ErrorKind.UNEXPECTED_STATUS


class DownloadError(TransientError):
    kind = ErrorKind.DOWNLOAD
