"""
HTTP helpers.

Both upstream services are plain JSON-over-HTTP: the geocoder is a GET, the
property data service takes form POSTs. Non-2xx responses and bodies that are not
JSON both surface as `httpx.HTTPError`, so callers handle a single error family.
"""

from __future__ import annotations

from typing import Any

import httpx


DEFAULT_USER_AGENT = "powerprox/0.1.0 (+https://local)"


def _request_headers(headers: dict[str, str] | None) -> dict[str, str]:
    merged = {"User-Agent": DEFAULT_USER_AGENT}
    if headers:
        merged.update(headers)
    return merged


def _decode_json(resp: httpx.Response) -> Any:
    resp.raise_for_status()
    try:
        return resp.json()
    except ValueError as exc:
        raise httpx.DecodingError(
            f"response from {resp.request.url} is not valid JSON: {exc}",
            request=resp.request,
        ) from exc


def get_json(
    url: str,
    *,
    params: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
    timeout_seconds: float = 15,
) -> Any:
    """GET `url` and return the decoded JSON response.

    Raises:
        httpx.HTTPError: On transport errors, non-2xx status codes or a non-JSON body.
    """
    with httpx.Client(timeout=timeout_seconds, headers=_request_headers(headers)) as client:
        return _decode_json(client.get(url, params=params))


def post_form(
    url: str,
    *,
    data: dict[str, Any],
    headers: dict[str, str] | None = None,
    timeout_seconds: float = 15,
) -> Any:
    """POST `data` form-encoded and return the decoded JSON response."""
    with httpx.Client(timeout=timeout_seconds, headers=_request_headers(headers)) as client:
        return _decode_json(client.post(url, data=data))
