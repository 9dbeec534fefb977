from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field, StringConstraints

MAX_MESSAGE_LENGTH = 5000
MAX_TOTAL_MESSAGE_LENGTH = 8000
MAX_MESSAGES = 32

ChatRole = Literal["system", "user", "assistant"]


class ChatMessage(BaseModel):
    role: ChatRole
    content: str
    name: Optional[str] = None


class ChatCompletionRequest(BaseModel):
    """Pedido de chat completion aceito pelo OpenRouterClient."""

    model: str
    messages: List[ChatMessage]
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    top_p: Optional[float] = None


# Limites aplicados no proxy /api/smart
class SmartChatMessage(ChatMessage):
    content: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=MAX_MESSAGE_LENGTH)]
    name: Optional[Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=64)]] = None


class SmartChatRequest(ChatCompletionRequest):
    model: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
    messages: List[SmartChatMessage] = Field(min_length=1, max_length=MAX_MESSAGES)
    temperature: Optional[float] = Field(default=None, ge=0, le=2)
    max_tokens: Optional[int] = Field(default=None, ge=1, le=2048)
    top_p: Optional[float] = Field(default=None, ge=0, le=1)

    def total_content_length(self) -> int:
        return sum(len(message.content) for message in self.messages)


# Output normalizado
class ChatResponseMessage(BaseModel):
    role: str
    content: Optional[str] = None


class ChatChoice(BaseModel):
    index: int
    message: ChatResponseMessage
    finish_reason: Optional[str] = None


class ChatCompletionResponse(BaseModel):
    id: str
    model: str
    created: int
    choices: List[ChatChoice]

    def first_content(self) -> Optional[str]:
        if not self.choices:
            return None
        return self.choices[0].message.content


class ChatErrorResponse(BaseModel):
    message: str
    status: Optional[int] = None
    code: Optional[Union[str, int]] = None
    details: Optional[Union[str, List[str]]] = None
