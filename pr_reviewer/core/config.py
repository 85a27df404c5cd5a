"""Application configuration."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pr_reviewer.llm.errors import ConfigurationError
from pr_reviewer.llm.limits import TokenLimits, get_token_limits

SUPPORTED_PROVIDERS = ("openai", "claude")

DEFAULT_SYSTEM_MESSAGE = (
    "You are a highly experienced software engineer reviewing a pull request. "
    "Focus on correctness, security, performance and maintainability, "
    "and keep your feedback specific and actionable."
)


class Settings(BaseSettings):
    """Application settings."""

    # LLM Provider Selection
    ai_provider: str = "openai"  # Options: openai, claude

    # OpenAI
    openai_api_key: str = ""
    openai_api_org: Optional[str] = None
    openai_base_url: str = "https://api.openai.com/v1"

    # Anthropic (Claude)
    anthropic_api_key: str = ""

    # Models
    light_model: str = "gpt-4.1-mini"
    heavy_model: str = "gpt-4.1"
    model_temperature: float = 0.05

    # Exchanges
    retries: int = 5
    timeout_ms: int = 360_000
    review_language: str = "en-US"
    system_message: str = DEFAULT_SYSTEM_MESSAGE
    max_conversations: int = 1000

    # App Settings
    debug: bool = False
    log_level: str = "INFO"
    log_json: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        protected_namespaces=(),
    )

    def get_credentials(self) -> "Credentials":
        """Snapshot the provider API keys read from the environment."""
        return Credentials(
            openai_api_key=self.openai_api_key,
            openai_api_org=self.openai_api_org,
            anthropic_api_key=self.anthropic_api_key,
        )


class Credentials(BaseModel):
    """Provider API keys, resolved once and injected into a session."""

    openai_api_key: str = ""
    openai_api_org: Optional[str] = None
    anthropic_api_key: str = ""

    def require(self, provider: str) -> str:
        """Return the API key for `provider`, raising if it is unusable."""
        provider = provider.lower()
        if provider == "openai":
            if not self.openai_api_key:
                raise ConfigurationError(
                    "Unable to initialize OpenAI API, "
                    "'OPENAI_API_KEY' environment variable is not available"
                )
            return self.openai_api_key
        elif provider == "claude":
            if not self.anthropic_api_key:
                raise ConfigurationError(
                    "Unable to initialize Claude API, "
                    "'ANTHROPIC_API_KEY' environment variable is not available"
                )
            return self.anthropic_api_key
        else:
            raise ConfigurationError(
                f"Invalid AI_PROVIDER: {provider}. "
                f"Must be one of: {', '.join(SUPPORTED_PROVIDERS)}"
            )


class Options(BaseModel):
    """Per-session options shared by every provider."""

    ai_provider: str = Field(default="openai", description="openai or claude")
    language: str = Field(default="en-US", description="ISO code of the reply language")
    system_message: str = Field(default=DEFAULT_SYSTEM_MESSAGE)
    model_temperature: float = Field(default=0.05, ge=0.0, le=2.0)
    retries: int = Field(default=5, ge=0, description="Extra attempts after the first")
    timeout_ms: int = Field(default=360_000, gt=0)
    api_base_url: Optional[str] = Field(default=None, description="OpenAI-compatible base URL")
    max_conversations: int = Field(default=1000, ge=1)
    debug: bool = False

    model_config = ConfigDict(protected_namespaces=())

    @property
    def timeout(self) -> float:
        """Timeout in seconds."""
        return self.timeout_ms / 1000

    @classmethod
    def from_settings(cls, settings: Settings) -> "Options":
        return cls(
            ai_provider=settings.ai_provider.lower(),
            language=settings.review_language,
            system_message=settings.system_message,
            model_temperature=settings.model_temperature,
            retries=settings.retries,
            timeout_ms=settings.timeout_ms,
            api_base_url=settings.openai_base_url,
            max_conversations=settings.max_conversations,
            debug=settings.debug,
        )


class ModelOptions(BaseModel):
    """Model identifier plus its token budget."""

    model: str = "gpt-4.1"
    token_limits: Optional[TokenLimits] = None

    @model_validator(mode="after")
    def _resolve_limits(self) -> "ModelOptions":
        if self.token_limits is None:
            self.token_limits = get_token_limits(self.model)
        return self


settings = Settings()
