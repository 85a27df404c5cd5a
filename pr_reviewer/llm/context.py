"""Bounded, least-recently-used store of conversation histories."""

from collections import OrderedDict
from typing import Optional

from pr_reviewer.core.logging import get_logger
from pr_reviewer.llm.errors import NotFoundError
from pr_reviewer.llm.models import ChatMessage
from pr_reviewer.llm.tokens import estimate_message_tokens

logger = get_logger(__name__)

DEFAULT_CONVERSATION_KEY = "default"
DEFAULT_MAX_CONVERSATIONS = 1000


class ConversationContext:
    """
    Ordered message history of one conversation.

    The first message is always the system message. After it, user and
    assistant messages strictly alternate, starting with a user message.
    """

    def __init__(self, key: str, system_message: str):
        self.key = key
        self.messages: list[ChatMessage] = [
            ChatMessage(role="system", content=system_message)
        ]

    @property
    def system_message(self) -> ChatMessage:
        return self.messages[0]

    @property
    def awaiting_reply(self) -> bool:
        return self.messages[-1].role == "user"

    def append(self, message: ChatMessage) -> None:
        expected = "assistant" if self.awaiting_reply else "user"
        if message.role != expected:
            raise ValueError(
                f"Conversation {self.key!r} expects a {expected} message, "
                f"got {message.role}"
            )
        self.messages.append(message)

    def discard_unanswered(self) -> Optional[ChatMessage]:
        """Drop a trailing user message that never got a reply."""
        if self.awaiting_reply:
            return self.messages.pop()
        return None

    def trim_to_budget(self, budget: int) -> int:
        """
        Drop the oldest user/assistant pairs until the history fits `budget`.

        The system message and the newest message are always kept, even if
        they alone exceed the budget.

        Args:
            budget: Token budget for the whole history

        Returns:
            Number of messages dropped
        """
        total = sum(estimate_message_tokens(message) for message in self.messages)
        dropped = 0
        while total > budget and len(self.messages) > 3:
            total -= sum(estimate_message_tokens(message) for message in self.messages[1:3])
            del self.messages[1:3]
            dropped += 2
        return dropped

    def to_payload(self) -> list[dict]:
        return [message.to_payload() for message in self.messages]

    def __len__(self) -> int:
        return len(self.messages)

    def __repr__(self) -> str:
        return f"ConversationContext(key={self.key!r}, messages={len(self.messages)})"


class ConversationStore:
    """
    Map of conversation key to history, capped at `max_entries`.

    Every `get` and `create` marks the key most recently used. When an insert
    pushes the store over capacity, the least recently used key is evicted.
    """

    def __init__(self, max_entries: int = DEFAULT_MAX_CONVERSATIONS):
        if max_entries < 1:
            raise ValueError(f"max_entries must be at least 1, got {max_entries}")
        self.max_entries = max_entries
        self._contexts: OrderedDict[str, ConversationContext] = OrderedDict()

    def get(self, key: str) -> Optional[ConversationContext]:
        context = self._contexts.get(key)
        if context is not None:
            self._contexts.move_to_end(key)
        return context

    def create(self, key: str, system_message: str) -> ConversationContext:
        if key in self._contexts:
            raise ValueError(f"Conversation {key!r} already exists")
        context = ConversationContext(key, system_message)
        self._contexts[key] = context
        if len(self._contexts) > self.max_entries:
            evicted, _ = self._contexts.popitem(last=False)
            logger.debug("Evicted conversation", key=evicted, size=len(self._contexts))
        return context

    def get_or_create(self, key: str, system_message: str) -> ConversationContext:
        context = self.get(key)
        if context is None:
            context = self.create(key, system_message)
        return context

    def append(self, key: str, message: ChatMessage) -> ConversationContext:
        context = self._require(key)
        context.append(message)
        return context

    def discard_unanswered(self, key: str) -> Optional[ChatMessage]:
        return self._require(key).discard_unanswered()

    def keys(self) -> list[str]:
        """Keys from least to most recently used."""
        return list(self._contexts.keys())

    def _require(self, key: str) -> ConversationContext:
        try:
            return self._contexts[key]
        except KeyError:
            raise NotFoundError(f"Conversation {key!r} was never created") from None

    def __contains__(self, key: object) -> bool:
        return key in self._contexts

    def __len__(self) -> int:
        return len(self._contexts)
