from __future__ import annotations
import logging
from typing import Any, Dict, Optional
import httpx
from pydantic import ValidationError
from .exceptions import (
    JiveHTTPError,
    JiveTokenExchangeError,
    JiveTransportError,
    decode_entity,
    parse_http_error,
)
from .models import JiveResponse, OAuthTokens
from .utils import join_url, mask_token
logger = logging.getLogger("community.client")
DEFAULT_TIMEOUT = 30.0
TOKEN_PATH = "/oauth2/token"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
class JiveHttpClient:
    def __init__(
        self,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.transport = transport
        self.timeout = timeout
    async def build_request(
        self,
        url: str,
        method: Optional[str] = "GET",
        body: Any = None,
        headers: Optional[Dict[str, str]] = None,
        request_options: Optional[Dict[str, Any]] = None,
    ) -> JiveResponse:
        method = (method or "GET").upper()
        headers = dict(headers or {})
        kwargs: Dict[str, Any] = dict(request_options or {})
        kwargs.setdefault("timeout", self.timeout)
        if body is not None:
            content_type = next((v for k, v in headers.items() if k.lower() == "content-type"), "")
            if isinstance(body, (str, bytes)):
                kwargs["content"] = body
            elif content_type.startswith(FORM_CONTENT_TYPE):
                kwargs["data"] = body
            else:
                kwargs["json"] = body
        logger.debug("%s %s", method, url)
        try:
            async with httpx.AsyncClient(transport=self.transport) as client:
                response = await client.request(method, url, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            logger.warning(f"{method} {url} transport failure: {e}")
            raise JiveTransportError(method, url, e) from e
        if response.status_code >= 400:
            raise parse_http_error(response)
        return JiveResponse(
            status_code=response.status_code,
            entity=decode_entity(response),
            headers=dict(response.headers),
            url=str(response.url),
        )
class OAuthTokenClient:
    def __init__(self, http: JiveHttpClient):
        self.http = http
    async def request_access_token(
        self,
        client_id: str,
        client_secret: str,
        code: str,
        jive_url: str,
        scope: Optional[str] = None,
        tenant_id: Optional[str] = None,
    ) -> OAuthTokens:
        form = {
            "code": code,
            "grant_type": "authorization_code",
            "client_id": client_id,
        }
        if scope:
            form["scope"] = scope
        logger.info("exchanging authorization code for tenant %s at %s", tenant_id, jive_url)
        return await self._token_request(client_id, client_secret, jive_url, form, "authorization code exchange")
    async def refresh_access_token(
        self,
        client_id: str,
        client_secret: str,
        refresh_token: str,
        jive_url: str,
    ) -> OAuthTokens:
        if not refresh_token:
            raise JiveTokenExchangeError("No refresh token available")
        form = {
            "refresh_token": refresh_token,
            "grant_type": "refresh_token",
            "client_id": client_id,
        }
        logger.info("refreshing access token refresh_token=%s at %s", mask_token(refresh_token), jive_url)
        return await self._token_request(client_id, client_secret, jive_url, form, "refresh token exchange")
    async def _token_request(
        self,
        client_id: str,
        client_secret: str,
        jive_url: str,
        form: Dict[str, str],
        what: str,
    ) -> OAuthTokens:
        if not jive_url:
            raise JiveTokenExchangeError(f"{what} needs a jiveUrl")
        try:
            response = await self.http.build_request(
                join_url(jive_url, TOKEN_PATH),
                "POST",
                form,
                {"Content-Type": FORM_CONTENT_TYPE},
                {"auth": (client_id or "", client_secret or "")},
            )
        except JiveHTTPError as e:
            logger.error(f"{what} rejected by {jive_url}: {e}")
            raise JiveTokenExchangeError.from_http_error(f"{what} failed", e) from e
        if not isinstance(response.entity, dict) or not response.entity.get("access_token"):
            raise JiveTokenExchangeError(f"{what} returned no access token", response.status_code, response.entity)
        try:
            return OAuthTokens.model_validate(response.entity)
        except ValidationError as e:
            logger.error(f"{what} at {jive_url} returned malformed tokens: {e}")
            raise JiveTokenExchangeError(f"{what} returned malformed tokens", response.status_code, response.entity) from e
