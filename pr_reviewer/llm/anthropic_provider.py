"""Anthropic Claude provider implementation (stateless)."""

from typing import Optional

import httpx
from anthropic import APIError as AnthropicAPIError
from anthropic import AsyncAnthropic
from anthropic import RateLimitError as AnthropicRateLimitError

from pr_reviewer.core.config import ModelOptions, Options
from pr_reviewer.core.logging import get_logger
from pr_reviewer.llm.base import BaseLLMProvider
from pr_reviewer.llm.context import ConversationContext
from pr_reviewer.llm.errors import InvalidResponseError, RateLimitError, TransientProviderError
from pr_reviewer.llm.models import ContinuationIds

logger = get_logger(__name__)


class AnthropicProvider(BaseLLMProvider):
    """
    Anthropic Claude provider.

    Every call is independent: one user message, no history, and a system
    instruction rendered fresh for the call. Returned ids never carry a
    conversation id.
    """

    def __init__(
        self,
        options: Options,
        model_options: ModelOptions,
        api_key: str,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize Anthropic provider.

        Args:
            options: Session options
            model_options: Model identifier (e.g., "claude-sonnet-4") and budget
            api_key: Anthropic API key
            http_client: Optional preconfigured httpx client
        """
        super().__init__(options, model_options, api_key)
        self.client = AsyncAnthropic(
            api_key=api_key,
            timeout=options.timeout,
            max_retries=0,
            http_client=http_client,
        )
        self.provider_name = "claude"

    async def _complete(
        self,
        message: str,
        context: Optional[ConversationContext],
        ids: ContinuationIds,
    ) -> tuple[str, ContinuationIds]:
        try:
            result = await self.client.messages.create(
                model=self.model,
                max_tokens=self.token_limits.response_tokens,
                temperature=self.options.model_temperature,
                system=self.build_system_message(),
                messages=[
                    {
                        "role": "user",
                        "content": message,
                    }
                ],
            )
        except AnthropicRateLimitError as e:
            retry_after = e.response.headers.get("retry-after", "")
            raise RateLimitError(
                f"Claude rate limit exceeded: {e}",
                retry_after=float(retry_after) if retry_after.isdigit() else None,
            ) from e
        except AnthropicAPIError as e:
            raise TransientProviderError(
                f"Claude API error: {e}",
                status_code=getattr(e, "status_code", None),
            ) from e

        if self.options.debug:
            logger.info(f"response: {result.model_dump_json()}")

        text = next(
            (block.text for block in result.content if block.type == "text"),
            None,
        )
        if text is None:
            raise InvalidResponseError(
                "Claude response has no text content",
                raw_response=result.model_dump_json(),
            )

        return text, ContinuationIds(parent_message_id=result.id, conversation_id=None)
