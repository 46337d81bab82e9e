from __future__ import annotations

from enum import Enum
from typing import Optional


class PlanErrorKind(str, Enum):
    """Ways a plan generation can fail."""
    CONFIGURATION = "ConfigurationError"
    TIMEOUT = "Timeout"
    PROVIDER = "ProviderError"
    EMPTY_RESPONSE = "EmptyResponse"
    MALFORMED_RESPONSE = "MalformedResponse"


HTTP_STATUS = {
    PlanErrorKind.CONFIGURATION: 400,
    PlanErrorKind.TIMEOUT: 504,
    PlanErrorKind.PROVIDER: 502,
    PlanErrorKind.EMPTY_RESPONSE: 502,
    PlanErrorKind.MALFORMED_RESPONSE: 502,
}

USER_MESSAGES = {
    PlanErrorKind.CONFIGURATION: "OpenAI API key not configured. Please add your API key to continue.",
    PlanErrorKind.TIMEOUT: "Request timeout - please try again",
    PlanErrorKind.PROVIDER: "Failed to generate plan",
    PlanErrorKind.EMPTY_RESPONSE: "Failed to generate plan: the coach returned an empty response",
    PlanErrorKind.MALFORMED_RESPONSE: "Failed to generate plan: the coach response could not be read",
}


class PlanGenerationError(Exception):
    """A terminal failure of a single plan generation.

    ``kind`` is what callers branch on. ``raw`` holds the provider text for
    diagnostics and must not be shown to end users.
    """

    def __init__(
        self,
        kind: PlanErrorKind,
        message: str,
        status_code: Optional[int] = None,
        raw: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.status_code = status_code
        self.raw = raw

    @property
    def http_status(self) -> int:
        return HTTP_STATUS[self.kind]

    @property
    def user_message(self) -> str:
        if self.kind is PlanErrorKind.PROVIDER and self.status_code is not None:
            return f"OpenAI API error: {self.status_code}"
        return USER_MESSAGES[self.kind]
