"""Per-model token budgets."""

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Safety buffer subtracted from every request budget
REQUEST_TOKEN_MARGIN = 100

DEFAULT_KNOWLEDGE_CUTOFF = "2021-09-01"

# model -> (max_tokens, response_tokens, knowledge_cutoff)
# Reasoning families reserve a large response share for hidden reasoning tokens.
MODEL_BUDGETS: dict[str, tuple[int, int, str]] = {
    "o4-mini": (200_000, 100_000, "2024-06-01"),
    "o3": (200_000, 100_000, "2024-06-01"),
    "o3-mini": (200_000, 100_000, "2023-10-01"),
    "o1": (200_000, 100_000, "2023-10-01"),
    "gpt-4.1": (1_047_576, 32_768, "2024-06-01"),
    "gpt-4.1-mini": (1_047_576, 32_768, "2024-06-01"),
    "gpt-4.1-nano": (1_047_576, 32_768, "2024-06-01"),
    "gpt-4o-mini": (128_000, 16_384, "2023-10-01"),
    "gpt-4-turbo": (128_000, 4_000, "2023-12-01"),
    "gpt-4": (8_000, 2_000, DEFAULT_KNOWLEDGE_CUTOFF),
    "claude-opus-4": (200_000, 32_768, "2025-03-01"),
    "claude-sonnet-4": (200_000, 64_000, "2025-03-01"),
    "claude-3-7-sonnet": (200_000, 16_384, "2024-12-01"),
    "claude-3-5-sonnet-20241022": (200_000, 8_192, "2024-04-01"),
    "claude-3-5-sonnet-20240620": (200_000, 8_192, "2024-04-01"),
    "claude-3-5-haiku-20241022": (200_000, 10_000, "2024-04-01"),
    "claude-3-haiku-20240307": (200_000, 4_096, "2024-04-01"),
    "claude-3-opus-20240229": (200_000, 4_096, "2023-08-01"),
}

DEFAULT_BUDGET: tuple[int, int, str] = (4_000, 1_000, DEFAULT_KNOWLEDGE_CUTOFF)


class TokenLimits(BaseModel):
    """Token budget for one model. `request_tokens` is always derived."""

    max_tokens: int = Field(..., gt=0, description="Model context window")
    response_tokens: int = Field(..., ge=0, description="Tokens reserved for the reply")
    knowledge_cutoff: str = Field(default=DEFAULT_KNOWLEDGE_CUTOFF)
    request_tokens: int = Field(default=0, description="Tokens available for the prompt")

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _derive_request_tokens(cls, data):
        if isinstance(data, dict):
            data = dict(data)
            data["request_tokens"] = (
                data.get("max_tokens", 0)
                - data.get("response_tokens", 0)
                - REQUEST_TOKEN_MARGIN
            )
        return data

    @model_validator(mode="after")
    def _check_request_budget(self) -> "TokenLimits":
        if self.request_tokens <= 0:
            raise ValueError(
                f"No room left for the request: max_tokens={self.max_tokens}, "
                f"response_tokens={self.response_tokens}"
            )
        return self

    def describe(self) -> str:
        return (
            f"max_tokens={self.max_tokens}, "
            f"request_tokens={self.request_tokens}, "
            f"response_tokens={self.response_tokens}"
        )


def get_token_limits(model: str) -> TokenLimits:
    """
    Resolve the token budget for a model identifier.

    Unknown identifiers get a conservative default budget instead of an error.

    Args:
        model: Model identifier (e.g., "gpt-4.1", "claude-sonnet-4")

    Returns:
        TokenLimits for the model
    """
    max_tokens, response_tokens, cutoff = MODEL_BUDGETS.get(model, DEFAULT_BUDGET)
    return TokenLimits(
        max_tokens=max_tokens,
        response_tokens=response_tokens,
        knowledge_cutoff=cutoff,
    )
