from pydantic import BaseModel
from typing import Any, Dict, Literal, Optional

MessageRole = Literal["system", "user", "assistant"]


class ChatMessage(BaseModel):
    role: MessageRole
    content: str


class OpenRouterConfig(BaseModel):
    default_model: str = "openai/gpt-4o-mini"
    temperature: float = 0.7
    max_tokens: int = 1000
    top_p: float = 1
    frequency_penalty: float = 0
    presence_penalty: float = 0


class OpenRouterErrorInfo(BaseModel):
    message: str
    type: str
    code: Optional[str] = None


class OpenRouterState(BaseModel):
    is_loading: bool = False
    error: Optional[OpenRouterErrorInfo] = None
    config: OpenRouterConfig = OpenRouterConfig()


class ChatCompletionOptions(BaseModel):
    model: Optional[str] = None
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    top_p: Optional[float] = None
    frequency_penalty: Optional[float] = None
    presence_penalty: Optional[float] = None
    response_format: Optional[Dict[str, Any]] = None
