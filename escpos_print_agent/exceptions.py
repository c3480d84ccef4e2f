"""
Custom exceptions for the ESC/POS Print Agent.

Exception Hierarchy:
    PrintAgentError (base)
    ├── ValidationError     - Request rejected before reaching the printer
    └── SessionError        - A spooler step failed
        ├── NoDeviceFound   - Device enumeration returned nothing
        ├── OpenFailed      - Host rejected the device bind
        ├── JobStartFailed  - StartDoc rejected
        ├── PageStartFailed - StartPage rejected
        ├── WriteFailed     - Transfer (or end of job) failed
        └── NotOpen         - Submit on a closed session without lazy open

Session errors carry the host error code where the spooler reports one.
"""

from typing import Optional, Dict, Any


class PrintAgentError(Exception):
    """Base exception for all print agent errors."""

    http_status = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(PrintAgentError):
    """Print request is malformed (missing lines, empty codes, bad copies...)."""

    http_status = 400


# =============================================================================
# SESSION ERRORS - Raised by SpoolerSession, mapped to JSON by the app
# =============================================================================

class SessionError(PrintAgentError):
    """
    A spooler session step failed.

    Attributes:
        host_error: Error code reported by the host spooler, if any
        kind: Short error name surfaced to HTTP clients
    """

    default_message = "Spooler session error"

    def __init__(self, host_error: Optional[int] = None, message: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        message = message or self.default_message
        if host_error is not None:
            message = f"{message} (host error {host_error})"
        super().__init__(message, details)
        self.host_error = host_error

    @property
    def kind(self) -> str:
        return type(self).__name__

    def to_dict(self) -> Dict[str, Any]:
        """Error payload for JSON responses."""
        return {
            'success': False,
            'error': self.message,
            'error_kind': self.kind,
            'host_error': self.host_error,
        }


class NoDeviceFound(SessionError):
    """No printer is registered with the host spooler."""

    http_status = 503
    default_message = "No printers found"


class OpenFailed(SessionError):
    """The host refused to open the printer."""

    default_message = "Error opening printer"


class JobStartFailed(SessionError):
    default_message = "Spooler rejected start of document"


class PageStartFailed(SessionError):
    default_message = "Spooler rejected start of page"


class WriteFailed(SessionError):
    default_message = "Error writing to printer"


class NotOpen(SessionError):
    default_message = "Printer is not open"
