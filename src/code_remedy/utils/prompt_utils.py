"""
Utility for building the remediation prompt sent to the model.
"""
import logging
from string import Template
from typing import Optional

from ..models.request import RemediationRequest

logger = logging.getLogger(__name__)

# The section headings below are what the dialog's markdown renderer styles.
# Language is interpolated exactly twice: the persona line and the source fence.
PROMPT_TEMPLATE = Template("""
# Code Analysis Task

You are an expert $language developer with 10+ years of experience debugging complex codebases. A developer needs your help fixing the following code that's producing an error.

## Source Code
```$language
$code
```

## Error Message
```
$error
```

## Your Task
Analyze this problem methodically and provide a solution:

### 1. Error Analysis
**Identify the exact cause of the error** with line numbers and specific patterns that created this issue.

### 2. Fixed Code
Provide the complete corrected code in a single fenced block tagged with the same language as the source code above. Make minimal changes while fixing the issue.

### 3. Solution Explanation
Explain how your fix resolves the problem and why it works. Be specific about each change made.

### 4. Key Improvements
* **Point 1**: First key improvement
* **Point 2**: Second key improvement
* **Point 3**: Third key improvement with performance or security implications

### 5. Best Practices
Share 1-2 essential best practices that would prevent similar errors in future development.

**Important formatting rules:**
- Use **bold text** for important concepts
- Create clear section headers with markdown heading syntax
- Keep code blocks properly formatted with language specification
- Use bullet points for lists
- Keep explanations concise and developer-focused
""")

TRUNCATION_MARKER = "... [truncated {count} characters]"


def truncate(text: str, limit: Optional[int]) -> str:
    """Cuts text down to `limit` characters and says how much was dropped."""
    if limit is None or len(text) <= limit:
        return text
    dropped = len(text) - limit
    logger.warning(f"Input of {len(text)} characters exceeds the {limit} character limit; truncating.")
    return text[:limit] + "\n" + TRUNCATION_MARKER.format(count=dropped)


class PromptBuilder:
    """Constructs the final prompt string from a RemediationRequest."""

    def __init__(self, max_code_chars: Optional[int] = None, max_error_chars: Optional[int] = None):
        self.max_code_chars = max_code_chars
        self.max_error_chars = max_error_chars

    def build(self, request: RemediationRequest) -> str:
        """Builds the prompt string."""
        # Inserted values are never re-scanned, so "$" in user code stays literal.
        return PROMPT_TEMPLATE.substitute(
            language=request.language,
            code=truncate(request.code, self.max_code_chars),
            error=truncate(request.error, self.max_error_chars),
        )


def build_prompt(request: RemediationRequest) -> str:
    """Renders the prompt with no length limits applied."""
    return PromptBuilder().build(request)
