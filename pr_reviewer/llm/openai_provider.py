"""OpenAI chat completions provider (stateful thread)."""

import re
from typing import Any, Optional

import httpx
from openai import APIError as OpenAIAPIError
from openai import AsyncOpenAI
from openai import RateLimitError as OpenAIRateLimitError

from pr_reviewer.core.config import ModelOptions, Options
from pr_reviewer.core.logging import get_logger
from pr_reviewer.llm.base import BaseLLMProvider
from pr_reviewer.llm.context import ConversationContext, ConversationStore
from pr_reviewer.llm.errors import InvalidResponseError, RateLimitError, TransientProviderError
from pr_reviewer.llm.models import ChatMessage, ContinuationIds

logger = get_logger(__name__)

# o1, o3 and o4-mini families reject temperature and max_tokens
REASONING_MODEL_PATTERN = re.compile(r"^(o1|o3|o4-mini)")


def is_reasoning_model(model: str) -> bool:
    return REASONING_MODEL_PATTERN.match(model) is not None


class OpenAIProvider(BaseLLMProvider):
    """
    OpenAI provider that resends the conversation on every call.

    The provider itself keeps no thread state, so the history lives in the
    session's ConversationStore and is replayed with each request. The oldest
    exchanges are dropped once the history outgrows the request budget.
    """

    stateful = True

    def __init__(
        self,
        options: Options,
        model_options: ModelOptions,
        api_key: str,
        store: ConversationStore,
        organization: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize OpenAI provider.

        Args:
            options: Session options
            model_options: Model identifier (e.g., "gpt-4.1", "o3") and budget
            api_key: OpenAI API key
            store: Conversation store shared with the session
            organization: Optional OpenAI organization id
            http_client: Optional preconfigured httpx client
        """
        super().__init__(options, model_options, api_key)
        self.client = AsyncOpenAI(
            api_key=api_key,
            organization=organization,
            base_url=options.api_base_url,
            timeout=options.timeout,
            max_retries=0,
            http_client=http_client,
        )
        self.store = store
        self.provider_name = "openai"
        self.system_message = self.build_system_message()
        self.completion_params = self._build_completion_params()

    def _build_completion_params(self) -> dict[str, Any]:
        params: dict[str, Any] = {"model": self.model}
        if not is_reasoning_model(self.model):
            params["temperature"] = self.options.model_temperature
            params["max_tokens"] = self.token_limits.response_tokens
        return params

    def _begin(self, message: str, context: Optional[ConversationContext]) -> None:
        if context is None:
            raise ValueError("OpenAI provider requires a conversation context")
        self.store.append(context.key, ChatMessage(role="user", content=message))
        dropped = context.trim_to_budget(self.token_limits.request_tokens)
        if dropped:
            logger.info(
                f"Dropped {dropped} oldest messages to fit the request budget",
                conversation=context.key,
                request_tokens=self.token_limits.request_tokens,
            )

    def _commit(
        self, context: Optional[ConversationContext], text: str
    ) -> Optional[ChatMessage]:
        # The key may have been evicted while the request was in flight
        reply = ChatMessage(role="assistant", content=text)
        context.append(reply)
        return reply

    def _rollback(self, context: Optional[ConversationContext]) -> None:
        context.discard_unanswered()

    async def _complete(
        self,
        message: str,
        context: Optional[ConversationContext],
        ids: ContinuationIds,
    ) -> tuple[str, ContinuationIds]:
        try:
            completion = await self.client.chat.completions.create(
                messages=context.to_payload(),
                **self.completion_params,
            )
        except OpenAIRateLimitError as e:
            raise RateLimitError(f"OpenAI rate limit exceeded: {e}") from e
        except OpenAIAPIError as e:
            raise TransientProviderError(
                f"OpenAI API error: {e}",
                status_code=getattr(e, "status_code", None),
            ) from e

        if self.options.debug:
            logger.info(f"response: {completion.model_dump_json()}")

        if not completion.choices or not completion.choices[0].message.content:
            raise InvalidResponseError(
                "Empty response from OpenAI",
                raw_response=completion.model_dump_json(),
            )

        return completion.choices[0].message.content, ContinuationIds(
            parent_message_id=completion.id,
            conversation_id=context.key,
        )
