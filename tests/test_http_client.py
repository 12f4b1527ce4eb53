"""Tests for the httpx-backed JSON collaborator."""

from __future__ import annotations

import json

import httpx
import pytest

from postmark_transport.core.interfaces import HttpClientError
from postmark_transport.core.models import Address, EmailMessage
from postmark_transport.transport import POSTMARK_ENDPOINT, HttpxJsonClient, PostmarkTransport


def _client(handler) -> HttpxJsonClient:
    return HttpxJsonClient(client=httpx.Client(transport=httpx.MockTransport(handler)))


def test_post_json_sends_json_and_decodes_body() -> None:
    seen: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["accept"] = request.headers["Accept"]
        seen["token"] = request.headers["X-Postmark-Server-Token"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"MessageID": "abc-123"})

    response = _client(handler).post_json(
        POSTMARK_ENDPOINT, {"From": "a@x.com"}, {"X-Postmark-Server-Token": "t"}
    )

    assert response.ok
    assert response.json("MessageID") == "abc-123"
    assert seen == {
        "accept": "application/json",
        "token": "t",
        "body": {"From": "a@x.com"},
    }


def test_non_json_error_body_decodes_to_empty_mapping() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="<html>oops</html>")

    response = _client(handler).post_json(POSTMARK_ENDPOINT, {}, {})

    assert response.status_code == 500
    assert response.body == {}
    assert response.reason == "Internal Server Error"
    assert isinstance(response.to_exception(), HttpClientError)


def test_network_errors_are_wrapped() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(HttpClientError) as excinfo:
        _client(handler).post_json(POSTMARK_ENDPOINT, {}, {})

    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)


def test_injected_client_is_not_closed() -> None:
    inner = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(200)))

    with HttpxJsonClient(client=inner):
        pass

    assert not inner.is_closed
    inner.close()


def test_end_to_end_send_over_mock_transport() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        if body["To"] != "b@x.com":
            return httpx.Response(422, json={"ErrorCode": 300, "Message": "bad"})
        return httpx.Response(200, json={"MessageID": "id-42", "ErrorCode": 0})

    transport = PostmarkTransport(_client(handler), token="t")
    message = EmailMessage(
        subject="Hi",
        from_addresses=(Address("a@x.com"),),
        to=(Address("b@x.com"),),
    )

    assert transport.send(message).message_id == "id-42"
