"""Chat session facade used by the reviewer."""

from typing import Optional, Union

import httpx
from pydantic import ValidationError

from pr_reviewer.core.config import Credentials, ModelOptions, Options
from pr_reviewer.core.logging import get_logger
from pr_reviewer.llm.base import BaseLLMProvider
from pr_reviewer.llm.context import DEFAULT_CONVERSATION_KEY, ConversationStore
from pr_reviewer.llm.models import ContinuationIds

logger = get_logger(__name__)


class Bot:
    """
    One chat session bound to a single provider and model.

    The provider is chosen once, at construction. `chat` never raises for a
    failed exchange; failures come back as `("", ContinuationIds())`.
    """

    def __init__(
        self,
        options: Options,
        model_options: ModelOptions,
        credentials: Optional[Credentials] = None,
        *,
        store: Optional[ConversationStore] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize a chat session.

        Args:
            options: Session options, including the provider choice
            model_options: Model identifier and token budget
            credentials: Provider API keys (defaults to the environment)
            store: Conversation store (a new one is created if omitted)
            http_client: Optional preconfigured httpx client for the provider

        Raises:
            ConfigurationError: If the provider is unknown or its API key is missing
        """
        if credentials is None:
            from pr_reviewer.core.config import settings

            credentials = settings.get_credentials()

        provider_name = options.ai_provider.lower()
        api_key = credentials.require(provider_name)

        self.options = options
        self.model_options = model_options
        self.token_limits = model_options.token_limits
        if store is None:
            store = ConversationStore(options.max_conversations)
        self.store = store
        self.closed = False
        self.provider = self._create_provider(
            provider_name, api_key, credentials, http_client
        )

        logger.info(
            f"Chat session initialized: {provider_name} with model: {model_options.model}",
            limits=self.token_limits.describe(),
        )

    def _create_provider(
        self,
        provider_name: str,
        api_key: str,
        credentials: Credentials,
        http_client: Optional[httpx.AsyncClient],
    ) -> BaseLLMProvider:
        if provider_name == "openai":
            from pr_reviewer.llm.openai_provider import OpenAIProvider

            return OpenAIProvider(
                self.options,
                self.model_options,
                api_key,
                store=self.store,
                organization=credentials.openai_api_org,
                http_client=http_client,
            )
        from pr_reviewer.llm.anthropic_provider import AnthropicProvider

        return AnthropicProvider(
            self.options,
            self.model_options,
            api_key,
            http_client=http_client,
        )

    async def chat(
        self,
        message: str,
        ids: Union[ContinuationIds, dict, None] = None,
    ) -> tuple[str, ContinuationIds]:
        """
        Send a message and return the reply.

        Args:
            message: User message text
            ids: Continuation ids returned by a previous call, to continue
                that conversation

        Returns:
            Tuple of (reply text, continuation ids); ("", empty ids) on failure
        """
        if not message:
            return "", ContinuationIds()
        if not isinstance(ids, ContinuationIds):
            try:
                ids = ContinuationIds.model_validate(ids or {})
            except ValidationError as e:
                logger.warning(f"Failed to chat: invalid continuation ids: {e}")
                return "", ContinuationIds()

        context = None
        if self.provider.stateful:
            key = ids.conversation_id or DEFAULT_CONVERSATION_KEY
            context = self.store.get_or_create(key, self.provider.system_message)

        result = await self.provider.send(message, context, ids)
        return result.text, result.ids

    async def aclose(self) -> None:
        await self.provider.aclose()
        self.closed = True

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.aclose()
