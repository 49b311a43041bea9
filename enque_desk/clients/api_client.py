"""
HTTP client for the Enque REST API.

Every resource service talks to the backend through ``EnqueApiClient`` so that
authentication headers, error translation and request logging live in one place.
"""

import time
from collections.abc import Mapping
from typing import Any

import httpx

from enque_desk.core.config import Settings
from enque_desk.core.errors import UpstreamError
from enque_desk.core.logging import log_upstream_request


QueryParams = Mapping[str, Any]


def filter_params(values: Mapping[str, Any]) -> dict[str, str]:
    """Encode list filters as ``filter[key]=value`` pairs, skipping unset values."""
    return {
        f"filter[{key}]": _to_param(value)
        for key, value in values.items()
        if value is not None
    }


def clean_params(values: Mapping[str, Any]) -> dict[str, str]:
    return {key: _to_param(value) for key, value in values.items() if value is not None}


def _to_param(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple, set)):
        return ",".join(str(item) for item in value)
    return str(value)


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict) and isinstance(payload.get("detail"), str):
        return payload["detail"]
    return f"{response.status_code} - {response.reason_phrase}"


class EnqueApiClient:
    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 15.0,
        token: str | None = None,
        transport: httpx.BaseTransport | None = None,
        http: httpx.Client | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self._http = http or httpx.Client(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout),
            transport=transport,
            follow_redirects=True,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: httpx.BaseTransport | None = None,
    ) -> "EnqueApiClient":
        return cls(settings.api_url, timeout=settings.api_timeout_seconds, transport=transport)

    def with_token(self, token: str | None) -> "EnqueApiClient":
        """Return a client that shares this connection pool but sends ``token``."""
        return EnqueApiClient(self.base_url, token=token, http=self._http)

    def close(self) -> None:
        self._http.close()

    def _headers(self, form: bool) -> dict[str, str]:
        headers = {
            "Content-Type": "application/x-www-form-urlencoded" if form else "application/json",
            "Accept": "application/json",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def request(
        self,
        method: str,
        path: str,
        *,
        params: QueryParams | None = None,
        json: Any = None,
        form: Mapping[str, str] | None = None,
    ) -> Any:
        started_at = time.perf_counter()
        try:
            response = self._http.request(
                method,
                path,
                params=params,
                json=json,
                data=form,
                headers=self._headers(form is not None),
            )
        except httpx.HTTPError as exc:
            elapsed_ms = int((time.perf_counter() - started_at) * 1000)
            log_upstream_request(method, path, None, elapsed_ms)
            raise UpstreamError(
                None,
                f"Could not reach the Enque API: {exc}",
                path=path,
                code="UPSTREAM_UNAVAILABLE",
            ) from exc

        elapsed_ms = int((time.perf_counter() - started_at) * 1000)
        log_upstream_request(method, path, response.status_code, elapsed_ms)

        if response.is_error:
            raise UpstreamError(response.status_code, _error_message(response), path=path)

        if response.status_code == httpx.codes.NO_CONTENT or not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamError(
                response.status_code,
                "The Enque API returned a response that is not JSON.",
                path=path,
                code="UPSTREAM_INVALID_RESPONSE",
            ) from exc

    def get(self, path: str, params: QueryParams | None = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, json: Any = None, *, form: Mapping[str, str] | None = None) -> Any:
        return self.request("POST", path, json=json, form=form)

    def put(self, path: str, json: Any = None) -> Any:
        return self.request("PUT", path, json=json)

    def delete(self, path: str, json: Any = None) -> Any:
        return self.request("DELETE", path, json=json)
