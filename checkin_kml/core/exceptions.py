"""Custom exception hierarchy for the check-in export domain."""

from __future__ import annotations


class ExportError(RuntimeError):
    """Raised when an export run cannot be completed."""

    def __init__(self, message: str, *, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}

    def as_dict(self) -> dict:
        """Return a serializable representation."""
        payload = {"message": str(self)}
        if self.details:
            payload["details"] = self.details
        return payload


class TransportError(ExportError):
    """Network failure or a non-2xx response from the remote service."""

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        body: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details=details)
        self.status = status
        self.body = body


class DecodeError(ExportError):
    """The remote service answered with a body we could not decode."""
