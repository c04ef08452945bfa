from __future__ import annotations

import base64
import json
from types import SimpleNamespace

import httpx
import pytest

from restcurl_client import (
    ApiError,
    AuthError,
    ClientConfig,
    DecodeError,
    OptionsError,
    RequestFailed,
    RestClient,
)


def _client(handler, **cfg) -> RestClient:
    return RestClient(config=ClientConfig(**cfg), transport=httpx.MockTransport(handler))


def test_get_json_associative_against_configured_server() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["url"] = str(request.url)
        seen["body"] = request.content
        return httpx.Response(200, text='{"id":1}')

    client = _client(handler, server="http://api.example.com", port="8080")
    result = client.GET("/users", {"json": True, "associative": True})

    assert seen == {"method": "GET", "url": "http://api.example.com:8080/users", "body": b""}
    assert result == {"id": 1}
    assert isinstance(result, dict)


def test_server_and_port_positional_construction() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        return httpx.Response(200, text="ok")

    client = RestClient("http://api.example.com", "8080", transport=httpx.MockTransport(handler))
    assert client.get("/ping") == "ok"
    assert seen["url"] == "http://api.example.com:8080/ping"


def test_config_and_server_are_exclusive() -> None:
    with pytest.raises(OptionsError):
        RestClient("http://a", "1", config=ClientConfig())


def test_associative_keeps_key_order() -> None:
    client = _client(lambda r: httpx.Response(200, text='{"b":1,"a":2,"c":3}'))
    result = client.get("http://h.test/x", json=True, associative=True)
    assert list(result) == ["b", "a", "c"]


def test_non_associative_decodes_to_namespaces() -> None:
    body = '{"id":1,"tags":[{"name":"x"}],"owner":{"login":"a"}}'
    client = _client(lambda r: httpx.Response(200, text=body))
    result = client.get("http://h.test/x", json=True)

    assert isinstance(result, SimpleNamespace)
    assert result.id == 1
    assert result.tags[0].name == "x"
    assert result.owner.login == "a"


def test_post_sends_literal_json_and_returns_raw_text() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["body"] = request.content
        seen["content_type"] = request.headers.get("content-type")
        return httpx.Response(201, text="  created: {not json}\n")

    result = _client(handler).POST("http://h.test/users", {"postfields": {"name": "a"}, "json": False})

    assert seen == {"method": "POST", "body": b'{"name":"a"}', "content_type": "application/json"}
    assert result == "  created: {not json}\n"


def test_put_with_empty_postfields_still_sends_json() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["body"] = request.content
        seen["content_type"] = request.headers.get("content-type")
        return httpx.Response(200, text="done")

    _client(handler).PUT("http://h.test/users/1")

    assert seen == {"method": "PUT", "body": b"{}", "content_type": "application/json"}


def test_safe_delete_sends_get_to_destroy() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, text="deleted")

    result = _client(handler).DELETE("http://h.test/users/5", {"safe": True})

    assert seen == {"method": "GET", "path": "/users/5/destroy", "body": {"_method": "put"}}
    assert result == "deleted"


def test_delete_without_safe_is_true_delete() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["body"] = request.content
        return httpx.Response(200, text="gone")

    _client(handler).delete("http://h.test/users/5")

    assert seen == {"method": "DELETE", "path": "/users/5", "body": b""}


def test_basic_auth_attached_when_complete() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["authorization"] = request.headers.get("authorization")
        return httpx.Response(200, text="ok")

    client = _client(handler)
    client.get("http://h.test/", auth={"login": "alice", "password": "secret"})
    expected = "Basic " + base64.b64encode(b"alice:secret").decode()
    assert seen["authorization"] == expected

    client.get("http://h.test/", auth={"login": "alice", "password": ""})
    assert seen["authorization"] is None


def test_transport_headers_override() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["content_type"] = request.headers.get("content-type")
        seen["trace"] = request.headers.get("x-trace")
        return httpx.Response(200, text="ok")

    _client(handler).post(
        "http://h.test/",
        curl_options={"headers": {"Content-Type": "application/vnd.api+json", "X-Trace": "abc"}},
    )
    assert seen == {"content_type": "application/vnd.api+json", "trace": "abc"}


def test_user_agent_from_config() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["ua"] = request.headers.get("user-agent")
        return httpx.Response(200, text="ok")

    _client(handler, user_agent="tests/1.0").get("http://h.test/")
    assert seen["ua"] == "tests/1.0"


def test_empty_body_is_true() -> None:
    client = _client(lambda r: httpx.Response(204))
    assert client.get("http://h.test/", json=True) is True
    assert client.delete("http://h.test/x") is True


def test_empty_body_policy_can_be_disabled() -> None:
    client = _client(lambda r: httpx.Response(204), empty_body_as_true=False)
    assert client.get("http://h.test/") == ""
    with pytest.raises(DecodeError):
        client.get("http://h.test/", json=True)


def test_transport_error_raises_request_failed() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(RequestFailed) as exc:
        _client(handler).put("http://h.test/users/1", postfields={"a": 1})

    assert exc.value.method == "PUT"
    assert exc.value.url == "http://h.test/users/1"
    assert exc.value.diagnostic == "connection refused"
    assert isinstance(exc.value.__cause__, httpx.ConnectError)


def test_safe_delete_error_reports_delete_verb() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(RequestFailed) as exc:
        _client(handler).delete("http://h.test/users/5", safe=True)

    assert exc.value.method == "DELETE"
    assert exc.value.url == "http://h.test/users/5/destroy"


def test_invalid_json_raises_decode_error() -> None:
    client = _client(lambda r: httpx.Response(200, text="<html>oops</html>"))
    with pytest.raises(DecodeError) as exc:
        client.get("http://h.test/", json=True)
    assert exc.value.method == "GET"
    assert exc.value.body == "<html>oops</html>"


def test_status_errors_are_returned_as_body_by_default() -> None:
    client = _client(lambda r: httpx.Response(404, text="not here"))
    assert client.get("http://h.test/") == "not here"


def test_raise_for_status_api_error_uses_detail() -> None:
    client = _client(lambda r: httpx.Response(404, json={"detail": "user not found"}))
    with pytest.raises(ApiError) as exc:
        client.get("http://h.test/users/9", raise_for_status=True)
    assert exc.value.status_code == 404
    assert str(exc.value) == "user not found"
    assert not isinstance(exc.value, AuthError)


def test_raise_for_status_auth_error() -> None:
    client = _client(lambda r: httpx.Response(401, text="denied"))
    with pytest.raises(AuthError) as exc:
        client.get("http://h.test/", raise_for_status=True)
    assert exc.value.status_code == 401
    assert exc.value.details == "denied"


def test_build_does_not_send() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("should not be called")

    client = _client(handler, server="http://api.example.com", port="8080")
    spec = client.build("DELETE", "/users/5", safe=True)
    assert spec.method == "GET"
    assert spec.url == "http://api.example.com:8080/users/5/destroy"


def test_unencodable_postfields_raise_before_sending() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("should not be called")

    with pytest.raises(OptionsError):
        _client(handler).post("http://h.test/users", postfields={"s": {1, 2}})
