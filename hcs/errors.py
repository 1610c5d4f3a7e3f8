"""
Error hierarchy for HCS generation.

  ValidationError     — out-of-range or unrecognized input, malformed code strings
  ConfigurationError  — missing or malformed signing secret / salt
  EncodingError       — canonical or JSON serialization failure

Every error carries a stable code so callers can map it onto their own
transport (HTTP status, exit code, ...).
"""


class HCSError(Exception):
    """Base exception for all HCS failures."""

    def __init__(self, message: str, code: str = "HCS_ERROR"):
        super().__init__(message)
        self.message = message
        self.code = code

    def to_dict(self) -> dict:
        return {"error": {"code": self.code, "message": self.message}}


class ValidationError(HCSError):
    """Input failed validation. Never retried, never silently recovered."""

    def __init__(self, message: str, field: str = ""):
        super().__init__(message, "VALIDATION_ERROR")
        self.field = field

    def to_dict(self) -> dict:
        body = super().to_dict()
        if self.field:
            body["error"]["field"] = self.field
        return body


class ConfigurationError(HCSError):
    """Signing configuration is missing or malformed."""

    def __init__(self, message: str):
        super().__init__(message, "CONFIGURATION_ERROR")


class EncodingError(HCSError):
    """Canonical bytes or a code payload could not be serialized."""

    def __init__(self, message: str):
        super().__init__(message, "ENCODING_ERROR")
