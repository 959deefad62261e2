import json
import logging
from typing import Any, Dict, List, Optional, Union

import httpx

from fiszki.core.config import OPENROUTER_BASE_URL, OPENROUTER_APP_TITLE
from fiszki.core.errors import OpenRouterError
from fiszki.models.openrouter import (
    ChatCompletionOptions,
    ChatMessage,
    OpenRouterConfig,
    OpenRouterErrorInfo,
    OpenRouterState,
)

logger = logging.getLogger(__name__)

VALID_ROLES = ("system", "user", "assistant")

Message = Union[ChatMessage, Dict[str, Any]]


class OpenRouterClient:
    """Thin wrapper around the OpenRouter chat-completion endpoint"""

    def __init__(
        self,
        api_key: str,
        http_client: httpx.AsyncClient,
        config: Optional[OpenRouterConfig] = None,
        base_url: str = OPENROUTER_BASE_URL,
    ):
        self.api_key = api_key
        self.http_client = http_client
        self.base_url = base_url.rstrip("/")
        self.state = OpenRouterState(config=config or OpenRouterConfig())

        if not api_key:
            self.state.error = OpenRouterErrorInfo(
                message="OpenRouter API key is not configured",
                type="configuration_error",
            )

    @staticmethod
    def _validate_messages(messages: List[Message]) -> List[ChatMessage]:
        if not messages:
            raise OpenRouterError("Messages array cannot be empty")

        validated = []
        for message in messages:
            if isinstance(message, dict):
                role, content = message.get("role"), message.get("content")
            else:
                role, content = message.role, message.content
            if not isinstance(content, str) or not content.strip():
                raise OpenRouterError("Message content cannot be empty")
            if role not in VALID_ROLES:
                raise OpenRouterError("Invalid message role")
            validated.append(ChatMessage(role=role, content=content))
        return validated

    def build_payload(self, messages: List[Message], **options) -> Dict[str, Any]:
        """Merge per-call options over the stored defaults"""
        validated = self._validate_messages(messages)
        opts = ChatCompletionOptions(**options)
        config = self.state.config

        def pick(value, default):
            return default if value is None else value

        payload = {
            "model": opts.model or config.default_model,
            "messages": [message.model_dump() for message in validated],
            "temperature": pick(opts.temperature, config.temperature),
            "max_tokens": pick(opts.max_tokens, config.max_tokens),
            "top_p": pick(opts.top_p, config.top_p),
            "frequency_penalty": pick(opts.frequency_penalty, config.frequency_penalty),
            "presence_penalty": pick(opts.presence_penalty, config.presence_penalty),
        }
        if opts.response_format is not None:
            payload["response_format"] = opts.response_format
        return payload

    async def _execute(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        if not self.api_key:
            raise OpenRouterError("OpenRouter API key is not configured")

        self.state.is_loading = True
        self.state.error = None
        try:
            response = await self.http_client.post(
                f"{self.base_url}/chat/completions",
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                    "X-Title": OPENROUTER_APP_TITLE,
                },
                json=payload,
            )
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            self.state.error = self._error_info(e.response, e)
            logger.error(f"OpenRouter API error: {self.state.error.message}")
            raise
        except httpx.HTTPError as e:
            self.state.error = OpenRouterErrorInfo(message=str(e) or type(e).__name__, type="network_error")
            logger.error(f"OpenRouter request failed: {e}")
            raise
        finally:
            self.state.is_loading = False

    @staticmethod
    def _error_info(response: httpx.Response, error: Exception) -> OpenRouterErrorInfo:
        try:
            body = response.json().get("error") or {}
        except (ValueError, AttributeError):
            body = {}
        code = body.get("code")
        return OpenRouterErrorInfo(
            message=body.get("message") or str(error),
            type=body.get("type") or "api_error",
            code=str(code) if code is not None else None,
        )

    @staticmethod
    def _parse_content(response: Dict[str, Any]) -> str:
        try:
            content = response["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            content = None
        if not content:
            raise OpenRouterError("Invalid response format from OpenRouter API")
        return content

    async def generate_response(self, messages: List[Message], **options) -> str:
        payload = self.build_payload(messages, **options)
        response = await self._execute(payload)
        return self._parse_content(response)

    async def generate_structured_response(
        self,
        messages: List[Message],
        schema_name: str,
        schema: Dict[str, Any],
        **options,
    ) -> Any:
        options["response_format"] = {
            "type": "json_schema",
            "json_schema": {
                "name": schema_name,
                "strict": True,
                "schema": schema,
            },
        }
        payload = self.build_payload(messages, **options)
        response = await self._execute(payload)
        content = self._parse_content(response)
        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            raise OpenRouterError("Failed to parse structured response as JSON") from e

    def get_model(self) -> str:
        return self.state.config.default_model
