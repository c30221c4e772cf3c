import json
from unittest.mock import patch

import pytest
import requests

from papersmith.errors import ApiError, ConfigError, MalformedResponseError, TransportError
from papersmith.llm_client import ChatCompletionsClient, ResponsesClient, create_client
from papersmith.models import ContentPart, IntelligenceRequest, RenderedDocument


def make_response(status, body):
    response = requests.Response()
    response.status_code = status
    raw = body if isinstance(body, str) else json.dumps(body)
    response._content = raw.encode("utf-8")
    response.encoding = "utf-8"
    return response


def image_request():
    document = RenderedDocument("image", b"\x89PNG", "image/png", "scan.pdf")
    return IntelligenceRequest(
        model="gpt-4o-mini",
        parts=(ContentPart("text", text="prompt"), ContentPart("image", document=document)),
    )


def pdf_request():
    document = RenderedDocument("pdf", b"%PDF-1.4", "application/pdf", "scan.pdf")
    return IntelligenceRequest(
        model="gpt-4.1",
        parts=(ContentPart("file", document=document), ContentPart("text", text="prompt")),
    )


def chat_body(content):
    return {"choices": [{"index": 0, "message": {"role": "assistant", "content": content}}]}


@pytest.mark.parametrize("api_key", [None, "", "   "])
def test_missing_api_key_fails_fast(api_key):
    with pytest.raises(ConfigError):
        ChatCompletionsClient(api_key)


def test_auth_header_is_set():
    client = ChatCompletionsClient("sk-test")
    assert client.session.headers["Authorization"] == "Bearer sk-test"
    client.close()


def test_chat_payload_shape():
    client = ChatCompletionsClient("sk-test", base_url="https://example.test/v1/")
    payload = client.build_payload(image_request())

    assert payload["model"] == "gpt-4o-mini"
    assert payload["temperature"] == 0.0
    assert payload["max_tokens"] == 300
    (message,) = payload["messages"]
    assert message["role"] == "user"
    text_part, image_part = message["content"]
    assert text_part == {"type": "text", "text": "prompt"}
    assert image_part["type"] == "image_url"
    assert image_part["image_url"]["url"].startswith("data:image/png;base64,")
    assert image_part["image_url"]["detail"] == "high"
    assert client.url == "https://example.test/v1/chat/completions"


def test_chat_rejects_file_parts():
    client = ChatCompletionsClient("sk-test")
    with pytest.raises(ValueError):
        client.build_payload(pdf_request())


def test_responses_payload_shape():
    client = ResponsesClient("sk-test")
    payload = client.build_payload(pdf_request())

    assert payload["model"] == "gpt-4.1"
    (item,) = payload["input"]
    assert item["role"] == "user"
    file_part, text_part = item["content"]
    assert file_part["type"] == "input_file"
    assert file_part["filename"] == "scan.pdf"
    assert file_part["file_data"].startswith("data:application/pdf;base64,")
    assert text_part == {"type": "input_text", "text": "prompt"}
    assert client.url == "https://api.openai.com/v1/responses"


def test_chat_send_returns_first_choice_text():
    client = ChatCompletionsClient("sk-test")
    with patch.object(client.session, "post", return_value=make_response(200, chat_body('{"a": 1}'))) as post:
        assert client.send(image_request()) == '{"a": 1}'

    args, kwargs = post.call_args
    assert args[0] == "https://api.openai.com/v1/chat/completions"
    assert kwargs["json"]["model"] == "gpt-4o-mini"


def test_chat_no_choices():
    client = ChatCompletionsClient("sk-test")
    with patch.object(client.session, "post", return_value=make_response(200, {"choices": []})):
        with pytest.raises(MalformedResponseError, match="No choices"):
            client.send(image_request())


def test_chat_null_content():
    client = ChatCompletionsClient("sk-test")
    with patch.object(client.session, "post", return_value=make_response(200, chat_body(None))):
        with pytest.raises(MalformedResponseError, match="No content"):
            client.send(image_request())


def test_chat_unexpected_shape():
    client = ChatCompletionsClient("sk-test")
    body = {"choices": "nope"}
    with patch.object(client.session, "post", return_value=make_response(200, body)):
        with pytest.raises(MalformedResponseError):
            client.send(image_request())


def test_success_status_with_non_json_body():
    client = ChatCompletionsClient("sk-test")
    with patch.object(client.session, "post", return_value=make_response(200, "<html>gateway</html>")):
        with pytest.raises(TransportError) as e:
            client.send(image_request())
    assert e.value.status == 200
    assert e.value.raw_body == "<html>gateway</html>"


def test_structured_error_body_becomes_api_error():
    body = {
        "error": {
            "type": "requests",
            "message": "Rate limit reached for gpt-4o-mini",
            "code": "rate_limit_exceeded",
            "param": None,
        }
    }
    client = ChatCompletionsClient("sk-test")
    with patch.object(client.session, "post", return_value=make_response(429, body)):
        with pytest.raises(ApiError) as e:
            client.send(image_request())

    assert e.value.status == 429
    assert e.value.type == "requests"
    assert e.value.message == "Rate limit reached for gpt-4o-mini"
    assert e.value.code == "rate_limit_exceeded"


def test_unstructured_error_body_becomes_transport_error():
    client = ResponsesClient("sk-test")
    with patch.object(client.session, "post", return_value=make_response(502, "Bad Gateway")):
        with pytest.raises(TransportError) as e:
            client.send(pdf_request())

    assert e.value.status == 502
    assert e.value.raw_body == "Bad Gateway"


def test_connection_error_becomes_transport_error():
    client = ChatCompletionsClient("sk-test")
    with patch.object(client.session, "post", side_effect=requests.ConnectionError("refused")):
        with pytest.raises(TransportError) as e:
            client.send(image_request())
    assert e.value.status is None
    assert "refused" in e.value.raw_body


def test_responses_skips_reasoning_items():
    body = {
        "output": [
            {"type": "reasoning", "summary": []},
            {
                "type": "message",
                "role": "assistant",
                "content": [{"type": "output_text", "text": '{"filename": "x"}', "annotations": []}],
            },
        ]
    }
    client = ResponsesClient("sk-test")
    with patch.object(client.session, "post", return_value=make_response(200, body)):
        assert client.send(pdf_request()) == '{"filename": "x"}'


def test_responses_without_message():
    client = ResponsesClient("sk-test")
    with patch.object(client.session, "post", return_value=make_response(200, {"output": []})):
        with pytest.raises(MalformedResponseError, match="No message"):
            client.send(pdf_request())


def test_responses_message_without_text():
    body = {"output": [{"type": "message", "content": [{"type": "refusal", "refusal": "no"}]}]}
    client = ResponsesClient("sk-test")
    with patch.object(client.session, "post", return_value=make_response(200, body)):
        with pytest.raises(MalformedResponseError, match="No output text"):
            client.send(pdf_request())


def test_create_client_per_transport():
    assert isinstance(create_client("image", "sk-test"), ChatCompletionsClient)
    assert isinstance(create_client("pdf", "sk-test"), ResponsesClient)
    with pytest.raises(ConfigError):
        create_client("fax", "sk-test")


def test_responses_rejects_image_parts():
    client = ResponsesClient("sk-test")
    with pytest.raises(ValueError, match="Responses API cannot carry a 'image' part"):
        client.build_payload(image_request())
