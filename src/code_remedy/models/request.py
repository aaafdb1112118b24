"""
Request models for the remediation service
"""
from dataclasses import dataclass, asdict
from typing import Any, Dict

from ..core.exceptions import RequestValidationError

WIRE_FIELDS = ("code", "error", "language")

@dataclass
class RemediationRequest:
    """
    Everything the model needs to suggest a fix: the user's code, the error it
    produced and the language it is written in. Built from the editor state when the
    dialog opens and thrown away once the call returns.
    """
    code: str
    error: str
    language: str

    def to_payload(self) -> Dict[str, str]:
        return asdict(self)

    @classmethod
    def from_payload(cls, payload: Any) -> "RemediationRequest":
        """Validates the {code, error, language} wire shape and builds a request."""
        if not isinstance(payload, dict):
            raise RequestValidationError("Request body must be a JSON object.")

        missing = [name for name in WIRE_FIELDS if name not in payload]
        if missing:
            raise RequestValidationError(f"Missing field(s): {', '.join(missing)}")

        wrong_type = [name for name in WIRE_FIELDS if not isinstance(payload[name], str)]
        if wrong_type:
            raise RequestValidationError(f"Field(s) must be strings: {', '.join(wrong_type)}")

        return cls(code=payload["code"], error=payload["error"], language=payload["language"])
