from dataclasses import dataclass

from .request import RemediationRequest

@dataclass(frozen=True)
class EditorSnapshot:
    """Read-only copy of the editor state taken when the dialog opens."""
    code: str
    language: str
    error: str

    def to_request(self) -> RemediationRequest:
        return RemediationRequest(code=self.code, error=self.error, language=self.language)
