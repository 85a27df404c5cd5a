"""Rough token estimates for budgeting replayed history."""

from pr_reviewer.llm.models import ChatMessage

# Role and framing overhead per chat message
MESSAGE_OVERHEAD_TOKENS = 4


def estimate_tokens(text: str) -> int:
    """Conservative heuristic: 4 characters per token, minimum 1."""
    if not text:
        return 0
    return max(1, len(text) // 4)


def estimate_message_tokens(message: ChatMessage) -> int:
    return MESSAGE_OVERHEAD_TOKENS + estimate_tokens(message.content)
