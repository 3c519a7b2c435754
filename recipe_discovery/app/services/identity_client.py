"""
Client for the external identity service (GoTrue-compatible auth API).

Sign-in, sign-up and sign-out are delegated; the bearer tokens the service
issues are verified locally by `api.deps`. Failures surface as IdentityError
carrying a message suitable for showing to the user.
"""
import logging
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import httpx
from pydantic import ValidationError

from recipe_discovery.app.schemas.auth import AuthSession

logger = logging.getLogger(__name__)

SUPPORTED_OAUTH_PROVIDERS = ("google",)


class IdentityError(Exception):
    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text[:200] or f"Identity service error: {resp.status_code}"
    if isinstance(body, dict):
        for key in ("error_description", "msg", "message", "error"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return f"Identity service error: {resp.status_code}"


def _json_body(resp: httpx.Response) -> Dict[str, Any]:
    try:
        body = resp.json()
    except ValueError:
        body = None
    if not isinstance(body, dict):
        logger.warning("Identity service returned a non-object body: status=%s, body=%s", resp.status_code, resp.text[:200])
        raise IdentityError("Identity service returned an invalid response", status_code=502)
    return body


def _session_from(body: Dict[str, Any]) -> AuthSession:
    # Token responses nest the user; sign-up with email confirmation returns the bare user.
    user = body.get("user") if isinstance(body.get("user"), dict) else body
    try:
        return AuthSession(
            access_token=body.get("access_token"),
            refresh_token=body.get("refresh_token"),
            token_type=body.get("token_type") or "bearer",
            expires_in=body.get("expires_in"),
            user_id=user.get("id"),
            email=user.get("email"),
        )
    except ValidationError as exc:
        raise IdentityError("Identity service returned an invalid response", status_code=502) from exc


class IdentityClient:
    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout_seconds: int = 15,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = httpx.Timeout(timeout_seconds, connect=5.0)
        self.client = client

    def _headers(self, access_token: Optional[str] = None) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["apikey"] = self.api_key
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        return headers

    async def _post(
        self,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        access_token: Optional[str] = None,
        params: Optional[Dict[str, str]] = None,
    ) -> httpx.Response:
        url = f"{self.base_url}{path}"
        headers = self._headers(access_token)
        try:
            if self.client is None:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    resp = await client.post(url, json=json, headers=headers, params=params)
            else:
                resp = await self.client.post(url, json=json, headers=headers, params=params)
        except httpx.HTTPError as exc:
            logger.warning("Identity service request failed: path=%s, error=%s", path, exc)
            raise IdentityError("Identity service unavailable", status_code=503) from exc

        if resp.status_code >= 400:
            message = _error_message(resp)
            logger.info("Identity service rejected request: path=%s, status=%s, message=%s", path, resp.status_code, message)
            status_code = resp.status_code if resp.status_code < 500 else 502
            raise IdentityError(message, status_code=status_code)
        return resp

    async def sign_in(self, email: str, password: str) -> AuthSession:
        resp = await self._post(
            "/auth/v1/token",
            json={"email": email, "password": password},
            params={"grant_type": "password"},
        )
        return _session_from(_json_body(resp))

    async def sign_up(self, email: str, password: str, full_name: str = "") -> AuthSession:
        resp = await self._post(
            "/auth/v1/signup",
            json={"email": email, "password": password, "data": {"full_name": full_name}},

        )
        return _session_from(_json_body(resp))

    def oauth_authorize_url(self, provider: str, redirect_to: str) -> str:
        if provider not in SUPPORTED_OAUTH_PROVIDERS:
            raise IdentityError(f"Unsupported sign-in provider: {provider}", status_code=404)
        query = urlencode({"provider": provider, "redirect_to": redirect_to})
        return f"{self.base_url}/auth/v1/authorize?{query}"

    async def sign_out(self, access_token: str) -> None:
        await self._post("/auth/v1/logout", access_token=access_token)
