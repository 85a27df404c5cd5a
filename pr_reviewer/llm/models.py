"""Data models for LLM providers."""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["system", "user", "assistant"]


class ContinuationIds(BaseModel):
    """Ids returned after an exchange and fed back to continue a thread."""

    parent_message_id: Optional[str] = Field(
        default=None,
        description="Provider identifier of the last reply",
    )
    conversation_id: Optional[str] = Field(
        default=None,
        description="Conversation key, absent when the provider has no native threads",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "parent_message_id": "chatcmpl-9x2",
                "conversation_id": "summarize",
            }
        }
    )


class ChatMessage(BaseModel):
    """A single role-tagged message in a conversation."""

    role: Role = Field(..., description="Message author: system, user or assistant")
    content: str = Field(..., description="Message text")

    def to_payload(self) -> dict:
        return {"role": self.role, "content": self.content}


class ChatResult(BaseModel):
    """Normalized outcome of one exchange with a provider."""

    text: str = Field(default="", description="Reply text, empty on failure")
    ids: ContinuationIds = Field(default_factory=ContinuationIds)
    assistant_message: Optional[ChatMessage] = Field(
        default=None,
        description="Reply recorded into the conversation, if any",
    )

    @classmethod
    def empty(cls) -> "ChatResult":
        return cls()
