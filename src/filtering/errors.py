"""
Smart filter error taxonomy.

Gateway errors are recovered inside the service by switching to the
rule-based extractor. The remaining errors carry a user-facing message and
an example-phrasing suggestion and are rendered by the API as HTTP 400.
"""

from typing import Any, Dict, Optional


class SmartFilterError(Exception):
    """Base class. `message` is shown to the user, `suggestion` hints at better phrasing."""

    status_code = 400

    def __init__(self, message: str, suggestion: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.suggestion = suggestion

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message}
        if self.suggestion:
            body["suggestion"] = self.suggestion
        return body


class InputRejected(SmartFilterError):
    """Query failed pre-validation; the user must rephrase."""


class GatewayUnavailable(SmartFilterError):
    """The language model could not be reached or kept failing after retries."""

    status_code = 502


class MalformedGatewayOutput(GatewayUnavailable):
    """The model answered, but not with a parseable filter object."""


class EmptyExtraction(SmartFilterError):
    """Neither the model nor the rules produced any filter."""


class LowConfidence(SmartFilterError):
    """The model's answer is structurally valid but below the trust threshold."""
