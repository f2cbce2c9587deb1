"""Chat model access for the shopping agent."""

from typing import Any, Optional

from occ_assistant.analytics.logger import logger
from occ_assistant.utils.config import settings
from occ_assistant.utils.errors import LLMError
from occ_assistant.utils.retry import llm_retry


NO_RESPONSE = "No response"


def message_text(message: Any) -> str:
    """Plain text of a chat model reply.

    Providers return either a string or a list of content parts.
    """
    content = getattr(message, "content", message)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type", "text") == "text":
                parts.append(part.get("text", ""))
        return "".join(parts)
    return ""


class LLMClient:
    """Single-prompt text generation against the configured provider."""

    def __init__(self, provider: Optional[str] = None, model: Optional[str] = None):
        self.provider = (provider or settings.llm_provider).lower()
        self.model = model or settings.llm_model
        self._llm = None

    def _initialize_llm(self):
        """Initialize LLM based on configured provider."""
        if self._llm is not None:
            return self._llm

        if self.provider == "google":
            if not settings.google_api_key:
                raise ValueError("GOOGLE_API_KEY is required when using Google provider")
            from langchain_google_genai import ChatGoogleGenerativeAI

            self._llm = ChatGoogleGenerativeAI(
                model=self.model,
                temperature=settings.llm_temperature,
                google_api_key=settings.google_api_key,
            )
        elif self.provider == "anthropic":
            if not settings.anthropic_api_key:
                raise ValueError("ANTHROPIC_API_KEY is required when using Anthropic provider")
            from langchain_anthropic import ChatAnthropic

            self._llm = ChatAnthropic(
                model=self.model,
                temperature=settings.llm_temperature,
                anthropic_api_key=settings.anthropic_api_key,
            )
        elif self.provider == "openai":
            if not settings.openai_api_key:
                raise ValueError("OPENAI_API_KEY is required when using OpenAI provider")
            from langchain_openai import ChatOpenAI

            self._llm = ChatOpenAI(
                model=self.model,
                temperature=settings.llm_temperature,
                openai_api_key=settings.openai_api_key,
            )
        else:
            raise ValueError(
                f"Unsupported LLM provider: {self.provider}. Use 'google', 'anthropic' or 'openai'"
            )

        logger.info(f"Initialized {self.provider} LLM: {self.model}")
        return self._llm

    @llm_retry
    async def _invoke(self, prompt: str) -> Any:
        llm = self._initialize_llm()
        return await llm.ainvoke(prompt)

    async def generate(self, prompt: str) -> str:
        """Send one prompt; empty replies come back as ``"No response"``."""
        try:
            reply = await self._invoke(prompt)
        except Exception as e:
            raise LLMError(str(e)) from e
        return message_text(reply) or NO_RESPONSE


# Global LLM client
llm_client = LLMClient()
