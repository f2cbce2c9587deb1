"""Exception types shared across the service."""
from typing import Any, Dict, Optional


class OCCError(Exception):
    """A call to the commerce platform failed."""

    def __init__(self, message: str, status_code: Optional[int] = None, payload: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    @property
    def details(self) -> str:
        """Platform error message when available, otherwise the transport error."""
        if isinstance(self.payload, dict):
            errors = self.payload.get("errors") or []
            if errors and isinstance(errors[0], dict) and errors[0].get("message"):
                return errors[0]["message"]
        return self.message


class APIError(Exception):
    """Error surfaced to HTTP clients as ``{"error": ..., "details": ...}``."""

    def __init__(self, status_code: int, error: str, details: Optional[str] = None):
        super().__init__(error)
        self.status_code = status_code
        self.error = error
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.error}
        if self.details is not None:
            body["details"] = self.details
        return body


class LLMError(Exception):
    """The model provider call failed or the model could not be set up."""
