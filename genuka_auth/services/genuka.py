# genuka_auth/services/genuka.py
"""
Genuka API client.

Wraps the OAuth token endpoints and the authenticated admin API. Per-call
credentials travel in an immutable ``RequestContext`` instead of being set on
a shared client.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from genuka_auth.core.config import Settings
from genuka_auth.core.errors import TokenExchangeError, UpstreamError
from genuka_auth.schemas.token import TokenGrant

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestContext:
    access_token: str
    company_id: Optional[str] = None

    def headers(self) -> Dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.access_token}",
            "Accept": "application/json",
        }
        if self.company_id:
            headers["X-Company"] = self.company_id
        return headers


class GenukaClient:
    def __init__(self, settings: Settings, http: Optional[httpx.Client] = None):
        self.settings = settings
        self.base_url = settings.GENUKA_URL.rstrip("/")
        self._owns_http = http is None
        self.http = http or httpx.Client(
            timeout=settings.HTTP_TIMEOUT_SECONDS,
            # certificados self-signed no ambiente local
            verify=not settings.is_local,
        )

    def close(self) -> None:
        if self._owns_http:
            self.http.close()

    def __enter__(self) -> "GenukaClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _url(self, endpoint: str) -> str:
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    def _send(self, method: str, url: str, error_cls: type[UpstreamError], **kwargs: Any) -> httpx.Response:
        # uma única tentativa; timeout vem do httpx.Client
        try:
            return self.http.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.error("Genuka unreachable: %s", exc, extra={"endpoint": url})
            raise error_cls(f"Genuka request failed: {exc}") from exc

    # ---------- OAuth ----------
    def exchange_code(self, code: str) -> TokenGrant:
        """
        Exchange an authorization code for access/refresh tokens.

        Single attempt. Raises:
            TokenExchangeError: non-2xx response or no ``access_token`` in the body.
        """
        response = self._send(
            "POST",
            self._url("oauth/token"),
            TokenExchangeError,
            data={
                "grant_type": "authorization_code",
                "code": code,
                "client_id": self.settings.GENUKA_CLIENT_ID,
                "client_secret": self.settings.GENUKA_CLIENT_SECRET,
                "redirect_uri": self.settings.GENUKA_REDIRECT_URI,
            },
            headers={"Accept": "application/json"},
        )
        if not response.is_success:
            logger.error(
                "Token exchange failed: status=%s body=%s",
                response.status_code,
                response.text,
                extra={"status": response.status_code, "body": response.text},
            )
            raise TokenExchangeError(
                f"Failed to exchange code for token: {response.text}",
                status=response.status_code,
                body=response.text,
            )
        return self._parse_grant(response, "Access token not found in response")

    def refresh_access_token(self, refresh_token: str) -> TokenGrant:
        response = self._send(
            "POST",
            self._url("oauth/refresh"),
            TokenExchangeError,
            json={
                "refresh_token": refresh_token,
                "client_id": self.settings.GENUKA_CLIENT_ID,
                "client_secret": self.settings.GENUKA_CLIENT_SECRET,
            },
            headers={"Accept": "application/json"},
        )
        if not response.is_success:
            logger.error(
                "Token refresh failed: status=%s body=%s",
                response.status_code,
                response.text,
                extra={"status": response.status_code, "body": response.text},
            )
            raise TokenExchangeError(
                f"Failed to refresh token: {response.text}",
                status=response.status_code,
                body=response.text,
            )
        return self._parse_grant(response, "Access token not found in refresh response")

    @staticmethod
    def _parse_grant(response: httpx.Response, missing_message: str) -> TokenGrant:
        try:
            data = response.json()
        except ValueError:
            data = None
        if not isinstance(data, dict) or not data.get("access_token"):
            raise TokenExchangeError(missing_message, status=response.status_code, body=response.text)
        try:
            return TokenGrant.model_validate(data)
        except PydanticValidationError as exc:
            raise TokenExchangeError(missing_message, status=response.status_code, body=response.text) from exc

    # ---------- admin API ----------
    def get_company(self, ctx: RequestContext) -> Dict[str, Any]:
        return self.get(ctx, f"{self.settings.GENUKA_API_VERSION}/admin/company")

    def get(self, ctx: RequestContext, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self._request("GET", ctx, endpoint, params=params)

    def post(self, ctx: RequestContext, endpoint: str, data: Optional[Dict[str, Any]] = None) -> Any:
        return self._request("POST", ctx, endpoint, json=data or {})

    def put(self, ctx: RequestContext, endpoint: str, data: Optional[Dict[str, Any]] = None) -> Any:
        return self._request("PUT", ctx, endpoint, json=data or {})

    def delete(self, ctx: RequestContext, endpoint: str) -> Any:
        return self._request("DELETE", ctx, endpoint)

    def _request(self, method: str, ctx: RequestContext, endpoint: str, **kwargs: Any) -> Any:
        response = self._send(method, self._url(endpoint), UpstreamError, headers=ctx.headers(), **kwargs)
        if not response.is_success:
            logger.error(
                "Genuka API %s %s failed for company %s: status=%s body=%s",
                method,
                endpoint,
                ctx.company_id,
                response.status_code,
                response.text,
                extra={
                    "endpoint": endpoint,
                    "company_id": ctx.company_id,
                    "status": response.status_code,
                    "body": response.text,
                },
            )
            raise UpstreamError(
                f"Genuka API request failed: {response.text}",
                status=response.status_code,
                body=response.text,
            )
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamError(
                "Genuka API returned a non-JSON body",
                status=response.status_code,
                body=response.text,
            ) from exc
