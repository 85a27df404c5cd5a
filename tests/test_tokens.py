"""Tests for the token estimate heuristic."""

from __future__ import annotations

import pytest

from pr_reviewer.llm.models import ChatMessage
from pr_reviewer.llm.tokens import MESSAGE_OVERHEAD_TOKENS, estimate_message_tokens, estimate_tokens


class TestEstimateTokens:
    @pytest.mark.parametrize(
        "text, expected",
        [("", 0), ("a", 1), ("abc", 1), ("abcd", 1), ("a" * 400, 100), ("a" * 401, 100)],
    )
    def test_four_characters_per_token(self, text, expected):
        assert estimate_tokens(text) == expected

    def test_message_adds_overhead(self):
        message = ChatMessage(role="user", content="a" * 40)

        assert estimate_message_tokens(message) == MESSAGE_OVERHEAD_TOKENS + 10
