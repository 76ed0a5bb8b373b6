from typing import Any, Dict, List, Optional


class ModerationError(Exception):
    """Base for failures that end a moderation request with an error payload."""

    status_code: int = 500
    error: str = "Moderation failed"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.error)

    def payload(self) -> Dict[str, Any]:
        return {"error": self.error}


class GenerationParseError(ModerationError):
    """Sanitized generator output is not valid JSON."""

    status_code = 502
    error = "LLM did not return valid JSON"

    def __init__(self, raw: str, reason: str = ""):
        super().__init__(f"{self.error}: {reason}" if reason else None)
        self.raw = raw

    def payload(self) -> Dict[str, Any]:
        return {"error": self.error, "raw": self.raw}


class SchemaViolationError(ModerationError):
    """Generator output parsed but broke the Verdict contract."""

    status_code = 500
    error = "JSON failed schema"

    def __init__(self, obj: Any, details: List[str]):
        super().__init__(f"{self.error}: {'; '.join(details)}")
        self.obj = obj
        self.details = list(details)

    def payload(self) -> Dict[str, Any]:
        return {"error": self.error, "raw": self.obj, "details": self.details}


class UpstreamUnavailableError(ModerationError):
    """Provider could not be reached or answered with a non-success status."""

    status_code = 503
    error = "Generation provider unavailable"


class GenerationTimeoutError(ModerationError):
    status_code = 504
    error = "Generation timed out"
