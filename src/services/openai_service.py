"""
OpenAI completion service for venue analysis.

Example:
  from services.openai_service import OpenAIService

  service = OpenAIService()
  text = await service.complete(prompt, schema=VENUE_SCHEMA)

  # Custom client for testing
  service = OpenAIService(client=fake_async_openai)
"""

from openai import AsyncOpenAI

from common.config import config
from common.errors import ExternalServiceError
from common.logging import get_logger
from common.openai_errors import handle_openai_errors
from enrichments.venue.prompts import SYSTEM_PROMPT

logger = get_logger(__name__)


class OpenAIService:
    _clients: dict[str, AsyncOpenAI] = {}

    def __init__(
        self,
        model: str = config.openai_model,
        temperature: float = config.temperature,
        timeout: float = config.ai_timeout,
        system_prompt: str = SYSTEM_PROMPT,
        client: AsyncOpenAI | None = None,
    ):
        self.model = model
        self.temperature = temperature
        self.timeout = timeout
        self.system_prompt = system_prompt
        self._client = client

    @classmethod
    def get_client(cls) -> AsyncOpenAI:
        """Shared AsyncOpenAI client (cached per API key)."""
        api_key = config.openai_key.get_secret_value()
        if not api_key:
            raise ExternalServiceError("openai", "OPENAI_KEY environment variable is required")

        if api_key not in cls._clients:
            cls._clients[api_key] = AsyncOpenAI(api_key=api_key)
        return cls._clients[api_key]

    @classmethod
    def clear_cache(cls) -> None:
        cls._clients.clear()

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = self.get_client()
        return self._client

    async def complete(self, prompt: str, *, schema: str | None = None) -> str:
        """Run one chat completion and return the raw response text.

        Raises:
            ExternalServiceError: SDK error, timeout or empty response.
        """
        if schema:
            prompt = f"{prompt}\n\nProvide a response in valid JSON format:\n{schema}"

        logger.debug(f"[AI] Requesting completion from {self.model} ({len(prompt)} chars)")
        with handle_openai_errors("AI"):
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": self.system_prompt},
                    {"role": "user", "content": prompt},
                ],
                temperature=self.temperature,
                response_format={"type": "json_object"},
                timeout=self.timeout,
            )

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise ExternalServiceError("openai", "Empty response from model")
        return content
