"""
Response models from the remediation service
"""
from dataclasses import dataclass, field
from typing import Dict, Any

NO_SUGGESTION = "No suggestion available."
FAILURE_MESSAGE = "AI failed to fix the code."

@dataclass
class RemediationResponse:
    """Markdown suggestion returned by the model."""
    content: str
    model: str = ""
    usage: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.content

    @property
    def display_text(self) -> str:
        return self.content or NO_SUGGESTION
