"""
Clients for the hosted vision-language model

Two transport shapes are supported: chat completions carrying a stitched page
image, and the responses API carrying the PDF itself. Both send exactly one
synchronous request per document and never retry.
"""

import json
from typing import Any, Dict, Optional, Type

import requests
from pydantic import BaseModel, ValidationError

from .errors import ApiError, ConfigError, MalformedResponseError, TransportError
from .models import (
    ApiErrorBody,
    ChatCompletionResponse,
    ContentPart,
    IntelligenceRequest,
    ResponsesResponse,
)

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MAX_TOKENS = 300


class IntelligenceClient:
    """Transport shared by both API shapes: auth, POST and status handling"""

    endpoint = ""

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = DEFAULT_BASE_URL,
        session: Optional[requests.Session] = None,
    ):
        if not api_key or not api_key.strip():
            raise ConfigError("OPENAI_API_KEY is not set. Add it to .env or the environment.")
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {api_key.strip()}",
                "Content-Type": "application/json",
            }
        )

    @property
    def url(self) -> str:
        return f"{self.base_url}/{self.endpoint}"

    def send(self, request: IntelligenceRequest) -> str:
        """Send one request and return the assistant's raw answer text"""
        body = self._post(self.build_payload(request))
        return self.extract_text(body)

    def build_payload(self, request: IntelligenceRequest) -> Dict[str, Any]:
        raise NotImplementedError

    def extract_text(self, body: Dict[str, Any]) -> str:
        raise NotImplementedError

    def _post(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = self.session.post(self.url, json=payload)
        except requests.RequestException as e:
            raise TransportError(None, str(e)) from e

        status = response.status_code
        raw_body = response.text
        if not 200 <= status < 300:
            raise self._error_for(status, raw_body)

        try:
            return json.loads(raw_body)
        except ValueError as e:
            raise TransportError(status, raw_body) from e

    @staticmethod
    def _error_for(status: int, raw_body: str) -> Exception:
        """Structured API error when the body decodes, raw transport error otherwise"""
        try:
            detail = ApiErrorBody.model_validate_json(raw_body).error
        except ValidationError:
            return TransportError(status, raw_body)
        return ApiError(
            status=status,
            type=detail.type,
            message=detail.message,
            code=str(detail.code) if detail.code is not None else None,
            param=detail.param,
        )

    @staticmethod
    def _decode(envelope: Type[BaseModel], body: Dict[str, Any]):
        try:
            return envelope.model_validate(body)
        except ValidationError as e:
            raise MalformedResponseError(
                f"Unexpected response shape: {e.error_count()} validation error(s)",
                json.dumps(body)[:2000],
            ) from e

    def close(self):
        self.session.close()


class ChatCompletionsClient(IntelligenceClient):
    """Chat completions API with an inline PNG image part"""

    endpoint = "chat/completions"

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = DEFAULT_BASE_URL,
        session: Optional[requests.Session] = None,
        max_tokens: int = DEFAULT_MAX_TOKENS,
    ):
        super().__init__(api_key, base_url, session)
        self.max_tokens = max_tokens

    @staticmethod
    def _content_part(part: ContentPart) -> Dict[str, Any]:
        if part.kind == "text":
            return {"type": "text", "text": part.text}
        if part.kind == "image":
            return {
                "type": "image_url",
                "image_url": {"url": part.document.data_url(), "detail": "high"},
            }
        raise ValueError(f"Chat completions cannot carry a {part.kind!r} part")

    def build_payload(self, request: IntelligenceRequest) -> Dict[str, Any]:
        return {
            "model": request.model,
            "max_tokens": self.max_tokens,
            "temperature": 0.0,
            "messages": [
                {
                    "role": "user",
                    "content": [self._content_part(p) for p in request.parts],
                }
            ],
        }

    def extract_text(self, body: Dict[str, Any]) -> str:
        response = self._decode(ChatCompletionResponse, body)
        if not response.choices:
            raise MalformedResponseError("No choices returned from the API", json.dumps(body))

        message = response.choices[0].message
        if message is None or not message.content:
            raise MalformedResponseError(
                "No content in the API response message", json.dumps(body)
            )
        return message.content


class ResponsesClient(IntelligenceClient):
    """Responses API with the PDF uploaded inline as an input_file"""

    endpoint = "responses"

    @staticmethod
    def _content_part(part: ContentPart) -> Dict[str, Any]:
        if part.kind == "text":
            return {"type": "input_text", "text": part.text}
        if part.kind == "file":
            return {
                "type": "input_file",
                "filename": part.document.filename,
                "file_data": part.document.data_url(),
            }
        raise ValueError(f"Responses API cannot carry a {part.kind!r} part")

    def build_payload(self, request: IntelligenceRequest) -> Dict[str, Any]:
        return {
            "model": request.model,
            "input": [
                {
                    "role": "user",
                    "content": [self._content_part(p) for p in request.parts],
                }
            ],
        }

    def extract_text(self, body: Dict[str, Any]) -> str:
        response = self._decode(ResponsesResponse, body)

        # Reasoning and tool items may precede the assistant message
        messages = [item for item in response.output if item.type == "message"]
        if not messages:
            raise MalformedResponseError("No message in the API response output", json.dumps(body))

        for part in messages[0].content or []:
            if part.type == "output_text" and part.text:
                return part.text
        raise MalformedResponseError("No output text in the API response message", json.dumps(body))


TRANSPORTS = {
    "image": ChatCompletionsClient,
    "pdf": ResponsesClient,
}


def create_client(
    transport: str, api_key: Optional[str], base_url: str = DEFAULT_BASE_URL
) -> IntelligenceClient:
    try:
        client_class = TRANSPORTS[transport]
    except KeyError:
        raise ConfigError(f"Unknown transport: {transport}") from None
    return client_class(api_key, base_url)
