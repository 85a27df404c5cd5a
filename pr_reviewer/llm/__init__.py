"""LLM session engine: providers, conversation state, retries and budgets."""

from pr_reviewer.llm.context import ConversationContext, ConversationStore
from pr_reviewer.llm.errors import (
    ConfigurationError,
    InvalidResponseError,
    LLMProviderError,
    NotFoundError,
    RateLimitError,
    RetryExhaustedError,
    TransientProviderError,
)
from pr_reviewer.llm.limits import TokenLimits, get_token_limits
from pr_reviewer.llm.models import ChatMessage, ChatResult, ContinuationIds
from pr_reviewer.llm.retry import with_retries

__all__ = [
    "ChatMessage",
    "ChatResult",
    "ConfigurationError",
    "ContinuationIds",
    "ConversationContext",
    "ConversationStore",
    "InvalidResponseError",
    "LLMProviderError",
    "NotFoundError",
    "RateLimitError",
    "RetryExhaustedError",
    "TokenLimits",
    "TransientProviderError",
    "get_token_limits",
    "with_retries",
]
