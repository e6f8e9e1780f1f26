"""API request and response models, plus the shape the model's JSON answer must have."""
from pydantic import BaseModel, Field, field_validator


class StartChatRequest(BaseModel):
    name: str = Field(..., description="Lead's name, substituted into the greeting")
    phone: str = Field(..., description="Lead's phone number; identifies the conversation")
    industry: str = Field(..., description="Industry key selecting the business profile")


class Turn(BaseModel):
    role: str = Field(..., description="'system', 'user' or 'assistant'")
    content: str


class StartChatResponse(BaseModel):
    reply: str = Field(..., description="Opening message: greeting plus first qualifying question")
    history: list[Turn] = Field(..., description="Conversation so far")


class ChatRequest(BaseModel):
    message: str = Field(..., description="Lead's latest message")
    phone: str = Field(..., description="Phone number used to start the chat")
    industry: str = Field(..., description="Industry key selecting the business profile")


class StructuredCompletion(BaseModel):
    """Validated model output; also the /api/chat success body."""

    reply: str
    classification: str = Field(..., description="Usually Hot, Cold or Invalid")
    metadata: dict[str, str]

    @field_validator("metadata", mode="before")
    @classmethod
    def _stringify_scalars(cls, value):
        # Models often emit numbers for budgets etc.; nested values still fail validation.
        if isinstance(value, dict):
            return {
                k: str(v) if isinstance(v, (int, float, bool)) else v
                for k, v in value.items()
            }
        return value


class ErrorResponse(BaseModel):
    error: str
