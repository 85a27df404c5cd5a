"""Base abstract class for LLM providers."""

import time
from abc import ABC, abstractmethod
from datetime import UTC, datetime
from typing import Optional

from pr_reviewer.core.config import ModelOptions, Options
from pr_reviewer.core.logging import get_logger
from pr_reviewer.llm.context import ConversationContext
from pr_reviewer.llm.errors import NotFoundError
from pr_reviewer.llm.models import ChatMessage, ChatResult, ContinuationIds
from pr_reviewer.llm.retry import with_retries

logger = get_logger(__name__)

# Some models occasionally open their reply with this fragment
ARTIFACT_PREFIX = "with "


def strip_artifact_prefix(text: str) -> str:
    """Remove one leading `ARTIFACT_PREFIX` from a reply."""
    if text.startswith(ARTIFACT_PREFIX):
        return text[len(ARTIFACT_PREFIX):]
    return text


class BaseLLMProvider(ABC):
    """
    Abstract base class for LLM providers.

    `send` is the only entry point. It never raises for a failed exchange:
    network, HTTP and parsing failures are retried, logged, and finally
    reported as an empty `ChatResult`.
    """

    # Whether the provider keeps a client-side conversation history
    stateful: bool = False

    def __init__(self, options: Options, model_options: ModelOptions, api_key: str):
        """
        Initialize LLM provider.

        Args:
            options: Session options (language, temperature, retries, ...)
            model_options: Model identifier and its token budget
            api_key: API key for the provider
        """
        self.options = options
        self.model = model_options.model
        self.token_limits = model_options.token_limits
        self.api_key = api_key
        self.provider_name = self.__class__.__name__.replace("Provider", "").lower()

    async def send(
        self,
        message: str,
        context: Optional[ConversationContext] = None,
        ids: Optional[ContinuationIds] = None,
    ) -> ChatResult:
        """
        Exchange one message with the provider.

        Args:
            message: User message text
            context: Conversation history (stateful providers only)
            ids: Continuation ids from the previous exchange

        Returns:
            ChatResult with the reply text and new continuation ids,
            or an empty ChatResult if the exchange failed

        Raises:
            NotFoundError: If the conversation was never created in the store
        """
        if not message:
            return ChatResult.empty()
        ids = ids or ContinuationIds()

        try:
            self._begin(message, context)
        except NotFoundError:
            raise
        except Exception as e:
            # e.g. the conversation is still waiting for another call's reply
            logger.warning(f"Failed to chat with {self.provider_name}: {e}")
            return ChatResult.empty()

        try:
            (text, new_ids), execution_time = await self._time_execution(
                with_retries(
                    lambda: self._complete(message, context, ids),
                    self.options.retries,
                    label=f"{self.provider_name}.complete",
                )
            )
        except NotFoundError:
            raise
        except Exception as e:
            logger.warning(f"Failed to chat with {self.provider_name}: {e}", exc_info=True)
            self._rollback(context)
            return ChatResult.empty()

        logger.info(
            f"{self.provider_name} sendMessage (including retries) response time: "
            f"{execution_time * 1000:.0f} ms",
            model=self.model,
        )

        text = strip_artifact_prefix(text)
        if self.options.debug:
            logger.info(f"{self.provider_name} responses: {text}")

        assistant_message = self._commit(context, text)
        return ChatResult(text=text, ids=new_ids, assistant_message=assistant_message)

    @abstractmethod
    async def _complete(
        self,
        message: str,
        context: Optional[ConversationContext],
        ids: ContinuationIds,
    ) -> tuple[str, ContinuationIds]:
        """
        Make one provider call and extract the reply.

        Called once per attempt. Implementations translate SDK and HTTP
        failures into TransientProviderError subclasses.

        Returns:
            Tuple of (raw reply text, continuation ids)
        """
        pass

    def _begin(self, message: str, context: Optional[ConversationContext]) -> None:
        """
        Hook run once before the first attempt.

        Raising skips the exchange without calling `_rollback`.
        """
        pass

    def _commit(
        self, context: Optional[ConversationContext], text: str
    ) -> Optional[ChatMessage]:
        """Hook run after a successful exchange. Returns the recorded reply."""
        return None

    def _rollback(self, context: Optional[ConversationContext]) -> None:
        """Hook run after the exchange failed for good."""
        pass

    def build_system_message(self, now: Optional[datetime] = None) -> str:
        """
        Render the system instruction sent with every request.

        Args:
            now: Moment used for the current date (defaults to now, UTC)

        Returns:
            System message text
        """
        current_date = (now or datetime.now(UTC)).strftime("%Y-%m-%d")
        return (
            f"{self.options.system_message}\n"
            f"Knowledge cutoff: {self.token_limits.knowledge_cutoff}\n"
            f"Current date: {current_date}\n"
            f"\n"
            f"IMPORTANT: Entire response must be in the language with ISO code: "
            f"{self.options.language}\n"
        )

    async def aclose(self) -> None:
        """Release the underlying HTTP client."""
        client = getattr(self, "client", None)
        if client is not None:
            await client.close()

    async def _time_execution(self, coro):
        """
        Execute a coroutine and measure execution time.

        Args:
            coro: Coroutine to execute

        Returns:
            Tuple of (result, execution_time_in_seconds)
        """
        start_time = time.time()
        result = await coro
        execution_time = time.time() - start_time
        return result, execution_time
