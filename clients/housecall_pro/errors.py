from __future__ import annotations

from typing import Any, Optional


class HousecallProApiError(Exception):
    """
    A failed call to the Housecall Pro API.

    Wraps both transport failures (status_code is None) and non-2xx responses.
    `payload` keeps the upstream error body as decoded JSON when possible,
    otherwise the raw text.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        payload: Any = None,
        context: str = "",
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload
        self.context = context

    def __str__(self) -> str:
        parts = []
        if self.context:
            parts.append(self.context)
        if self.status_code is not None:
            parts.append(f"status={self.status_code}")
        prefix = " ".join(parts)
        return f"{prefix}: {self.message}" if prefix else self.message

    @staticmethod
    def message_from_payload(payload: Any) -> Optional[str]:
        """Pull a human readable message out of an upstream error body."""
        if not isinstance(payload, dict):
            return None

        errors = payload.get("errors")
        if isinstance(errors, list) and errors:
            first = errors[0]
            if isinstance(first, dict) and first.get("message"):
                return str(first["message"])

        for key in ("message", "error"):
            if payload.get(key):
                return str(payload[key])
        return None


class ValidationError(ValueError):
    """Missing or malformed input, raised before any request is made."""


class NodeOperationError(Exception):
    """Unknown resource or operation."""
