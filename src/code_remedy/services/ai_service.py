"""
Remediation service: turns code, an error and a language into a fix suggestion
from a hosted chat-completion model.
"""
import asyncio
import logging
from typing import Any, Dict, Optional

import aiohttp

from ..core.config import Config
from ..core.exceptions import RemediationFailure
from ..models.request import RemediationRequest
from ..models.response import RemediationResponse
from ..utils.prompt_utils import PromptBuilder

logger = logging.getLogger(__name__)

# Fixed sampling policy: low randomness, bounded output, near-full nucleus.
MODEL = "gpt-4.1"
TEMPERATURE = 0.1
MAX_TOKENS = 2000
TOP_P = 0.9


class RemediationService:
    """Service for asking the chat-completion endpoint to fix a piece of code."""

    def __init__(self, config: Config):
        self.config = config
        # Missing credentials are a startup error, not a per-request one.
        self.api_key = config.require_api_key()
        self.prompt_builder = PromptBuilder(config.max_code_chars, config.max_error_chars)
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        self.session = aiohttp.ClientSession(timeout=self._timeout())
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.session and not self.session.closed:
            await self.session.close()
            self.session = None

    def _timeout(self) -> aiohttp.ClientTimeout:
        return aiohttp.ClientTimeout(total=self.config.timeout)

    @property
    def url(self) -> str:
        return f"{self.config.api_base.rstrip('/')}/chat/completions"

    def build_payload(self, request: RemediationRequest) -> Dict[str, Any]:
        """The chat-completion body: one user message holding the whole prompt."""
        return {
            "model": MODEL,
            "messages": [{"role": "user", "content": self.prompt_builder.build(request)}],
            "temperature": TEMPERATURE,
            "max_tokens": MAX_TOKENS,
            "top_p": TOP_P,
        }

    async def _post_chat(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        if self.session and not self.session.closed:
            return await self._send(self.session, payload)
        async with aiohttp.ClientSession(timeout=self._timeout()) as session:
            return await self._send(session, payload)

    async def _send(self, session: aiohttp.ClientSession, payload: Dict[str, Any]) -> Dict[str, Any]:
        headers = {"Authorization": f"Bearer {self.api_key}"}
        try:
            async with session.post(self.url, json=payload, headers=headers) as response:
                if response.status != 200:
                    error_text = await response.text()
                    raise RemediationFailure(f"Model API error ({response.status}): {error_text}")
                return await response.json(content_type=None)
        except asyncio.TimeoutError:
            raise RemediationFailure(f"Request to the model timed out after {self.config.timeout}s.")
        except aiohttp.ClientError as e:
            raise RemediationFailure(f"Connection error to {self.url}: {e}")
        except ValueError as e:
            raise RemediationFailure(f"Model API returned invalid JSON: {e}")

    @staticmethod
    def _extract_content(data: Any) -> str:
        """First choice's message content; a null or missing content becomes ""."""
        try:
            message = data["choices"][0].get("message") or {}
            content = message.get("content")
        except (KeyError, IndexError, TypeError, AttributeError):
            raise RemediationFailure("Model API response has no usable choices.")
        if content is None:
            return ""
        if not isinstance(content, str):
            raise RemediationFailure(f"Model API returned non-text content: {type(content).__name__}")
        return content

    async def remediate(self, request: RemediationRequest) -> RemediationResponse:
        """Sends one request to the model. No retries: any failure is final."""
        payload = self.build_payload(request)
        logger.debug(
            f"Requesting remediation: language={request.language}, "
            f"code={len(request.code)} chars, error={len(request.error)} chars"
        )
        data = await self._post_chat(payload)
        content = self._extract_content(data)
        if not content:
            logger.info("Model returned no content for the remediation request.")
        return RemediationResponse(
            content=content,
            model=data.get("model", MODEL),
            usage=data.get("usage") or {},
        )

    async def fix(self, code: str, error: str, language: str) -> str:
        """Returns the model's markdown suggestion, or "" when it had nothing to say."""
        response = await self.remediate(RemediationRequest(code=code, error=error, language=language))
        return response.content
