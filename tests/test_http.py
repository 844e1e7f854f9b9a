import httpx
import pytest

from powerprox.core import http


def _serve(monkeypatch, handler) -> None:
    real_client = httpx.Client

    def client_factory(**kwargs):
        return real_client(transport=httpx.MockTransport(handler), **kwargs)

    monkeypatch.setattr(http.httpx, "Client", client_factory)


def test_get_json_sends_params_and_user_agent(monkeypatch):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["q"] = request.url.params["q"]
        seen["agent"] = request.headers["User-Agent"]
        return httpx.Response(200, json=[{"lat": "1", "lon": "2"}])

    _serve(monkeypatch, handler)

    assert http.get_json("https://geo.test/search", params={"q": "919 Botany Road"}) == [{"lat": "1", "lon": "2"}]
    assert seen == {"q": "919 Botany Road", "agent": http.DEFAULT_USER_AGENT}


def test_post_form_encodes_body(monkeypatch):
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
        assert b"Local_Suburb=4167" in request.content
        return httpx.Response(200, json={"Array_Suburb": "{}"})

    _serve(monkeypatch, handler)

    assert http.post_form("https://data.test/init", data={"Local_Suburb": "4167"}) == {"Array_Suburb": "{}"}


def test_non_json_body_is_an_http_error(monkeypatch):
    _serve(monkeypatch, lambda request: httpx.Response(200, text="<html>busy</html>"))

    with pytest.raises(httpx.HTTPError, match="not valid JSON"):
        http.get_json("https://geo.test/search")


def test_error_status_raises(monkeypatch):
    _serve(monkeypatch, lambda request: httpx.Response(503, json={}))

    with pytest.raises(httpx.HTTPStatusError):
        http.post_form("https://data.test/init", data={})
