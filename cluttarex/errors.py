"""
Error taxonomy for Cluttarex.

Library code raises these; the HTTP handler and the CLI translate them into
responses and exit codes.
"""

from typing import Any, Dict, Optional


class CluttarexError(Exception):
    """Base exception for extraction errors."""

    status_code = 500

    def __init__(self, message: str, details: Optional[str] = None,
                 status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.details = details
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> Dict[str, Any]:
        """Return the JSON error body: ``{error, details?}``."""
        body = {'error': self.message}
        if self.details:
            body['details'] = self.details
        return body


class MissingInput(CluttarexError):
    """Raised when no target URL or page was supplied."""

    status_code = 400


class FetchFailed(CluttarexError):
    """Raised when the remote page is unreachable or answers with a non-2xx status."""

    status_code = 502


class InternalError(CluttarexError):
    """Raised when parsing or extraction fails unexpectedly."""

    status_code = 500

    def __init__(self, details: Optional[str] = None):
        super().__init__('Internal Server Error', details=details)
