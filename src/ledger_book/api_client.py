"""HTTP client wrapper for the bookkeeping API."""

from __future__ import annotations

from typing import Any

import httpx

from ledger_book.config import Settings
from ledger_book.exceptions import APIError, AuthenticationError, PermissionDeniedError
from ledger_book.logging_config import get_logger

logger = get_logger(__name__)

_ERRORS_BY_STATUS: dict[int, type[APIError]] = {
    401: AuthenticationError,
    403: PermissionDeniedError,
}


def _error_detail(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text
    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if "detail" in payload:
            raw_detail = payload["detail"]
            return raw_detail if isinstance(raw_detail, str) else str(raw_detail)
    return response.text


class LedgerAPIClient:
    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        *,
        api_key: str | None = None,
        access_token: str | None = None,
        client: httpx.Client | None = None,
        timeout: float = 30.0,
    ) -> None:
        headers: dict[str, str] = {}
        if api_key:
            headers["X-API-Key"] = api_key
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"

        if client is None:
            client = httpx.Client(base_url=base_url, timeout=timeout, headers=headers)
        else:
            client.headers.update(headers)
        self._client = client
        self._base_url = base_url

    @classmethod
    def from_settings(cls, settings: Settings) -> LedgerAPIClient:
        return cls(
            settings.api_base_url,
            api_key=settings.api_key,
            access_token=settings.access_token,
            timeout=settings.timeout,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> LedgerAPIClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def request_json(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        """Send a request and decode the JSON body.

        Raises:
            APIError: On any non-2xx answer (AuthenticationError for 401,
                PermissionDeniedError for 403).
        """
        if params is not None:
            params = {k: v for k, v in params.items() if v is not None}
        r = self._client.request(method, path, params=params, json=json)
        if 200 <= r.status_code < 300:
            if r.status_code == 204 or not r.content:
                return None
            return r.json()

        detail = _error_detail(r)
        logger.warning(
            "api_request_failed",
            method=method,
            path=path,
            status_code=r.status_code,
            detail=detail,
        )
        error_cls = _ERRORS_BY_STATUS.get(r.status_code, APIError)
        raise error_cls(status_code=r.status_code, detail=detail)
