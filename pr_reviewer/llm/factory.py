"""Factory for the reviewer's chat sessions."""

from pr_reviewer.core.config import ModelOptions, Options, settings
from pr_reviewer.core.logging import get_logger
from pr_reviewer.llm.bot import Bot

logger = get_logger(__name__)

BOT_KINDS = ("light", "heavy")

# Cache of sessions, one per kind
_bots: dict[str, Bot] = {}


def get_bot(kind: str = "light") -> Bot:
    """
    Get the configured chat session for a model tier.

    "light" sessions use the cheaper model for summaries, "heavy" sessions use
    the stronger model for reviews. Sessions are created once and reused
    until closed.

    Args:
        kind: "light" or "heavy"

    Returns:
        Configured Bot instance

    Raises:
        ValueError: If kind is unknown
        ConfigurationError: If the provider configuration is invalid
    """
    if kind not in BOT_KINDS:
        raise ValueError(f"Unknown bot kind: {kind}. Must be one of: {', '.join(BOT_KINDS)}")

    bot = _bots.get(kind)
    if bot is not None and not bot.closed:
        return bot

    model = settings.light_model if kind == "light" else settings.heavy_model
    logger.info(f"Initializing {kind} bot: {settings.ai_provider} with model: {model}")

    bot = Bot(
        Options.from_settings(settings),
        ModelOptions(model=model),
        settings.get_credentials(),
    )
    _bots[kind] = bot
    return bot


def reset_bots() -> None:
    """Forget cached sessions (useful for testing)."""
    _bots.clear()
