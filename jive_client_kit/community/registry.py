from __future__ import annotations

import copy
import logging
from typing import Any, Dict, List, Optional, Union

from .client import JiveHttpClient, OAuthTokenClient
from .config import CommunityConfig
from .events import CommunityEvents
from .exceptions import (
    JiveError,
    JiveNotFoundError,
    JiveSignatureError,
    JiveTokenExchangeError,
    JiveValidationError,
)
from .models import (
    COMMUNITY_COLLECTION,
    REGISTRATION_VERSION,
    Community,
    JiveResponse,
    LifecycleEvent,
    OAuthTokens,
)
from .oauth import OAuthRefreshHandler, OperationContext, TokenPersistence
from .persistence import Persistence
from .signature import SignatureValidator
from .utils import join_url, mask_token, parse_jive_community

logger = logging.getLogger("community")


def _as_community(community: Union[Community, Dict[str, Any]]) -> Community:
    if isinstance(community, Community):
        return community
    return Community.model_validate(community)


class CommunityRegistry:
    """
    Jive communities known to this add-on service.

    Handles registration and unregistration packets coming from Jive, keeps the
    community records (with their OAuth tokens) in persistence, and sends
    requests to a community on behalf of the add-on, refreshing the access
    token once when the community says it expired.

    Usage:
        registry = CommunityRegistry(persistence, http, oauth_handler, token_client, config)
        community = await registry.register(packet)
        resp = await registry.do_request(community, path="/api/core/v3/people/@me")
    """

    def __init__(
        self,
        persistence: Persistence,
        http: JiveHttpClient,
        oauth_handler: OAuthRefreshHandler,
        token_client: OAuthTokenClient,
        config: Optional[CommunityConfig] = None,
        events: Optional[CommunityEvents] = None,
        validator: Optional[SignatureValidator] = None,
    ):
        self.persistence = persistence
        self.http = http
        self.oauth_handler = oauth_handler
        self.token_client = token_client
        self.config = config or CommunityConfig()
        self.events = events or CommunityEvents()
        self.validator = validator or SignatureValidator(self.config, http)

    parse_jive_community = staticmethod(parse_jive_community)

    # Persistence

    async def save(self, community: Union[Community, Dict[str, Any]]) -> Community:
        community = _as_community(community)
        if not community.tenant_id:
            raise JiveValidationError("tenantId", "Invalid community object, must specify a tenantId property")
        if not community.jive_community:
            community.jive_community = parse_jive_community(community.jive_url)
        saved = await self.persistence.save(COMMUNITY_COLLECTION, community.tenant_id, community.to_record())
        return Community.model_validate(saved)

    async def find(self, filter: Optional[Dict[str, Any]] = None) -> List[Community]:
        found = await self.persistence.find(COMMUNITY_COLLECTION, filter or {})
        return [Community.model_validate(r) for r in found or []]

    async def _find_one(self, filter: Dict[str, Any]) -> Optional[Community]:
        found = await self.find(filter)
        return found[0] if found else None

    async def find_by_jive_url(self, jive_url: str) -> Optional[Community]:
        return await self._find_one({"jiveUrl": jive_url})

    async def find_by_community(self, jive_community: str) -> Optional[Community]:
        return await self._find_one({"jiveCommunity": jive_community})

    async def find_by_tenant_id(self, tenant_id: str) -> Optional[Community]:
        return await self._find_one({"tenantId": tenant_id})

    async def request_access_token(self, tenant_id: str, oauth_code: str) -> OAuthTokens:
        community = await self.find_by_tenant_id(tenant_id)
        if community is None:
            raise JiveNotFoundError("community by the TenantId", tenant_id)
        return await self.token_client.request_access_token(
            community.client_id or "",
            community.client_secret or "",
            oauth_code,
            community.jive_url or "",
            tenant_id=tenant_id,
        )

    # Registration

    async def register(self, registration: Dict[str, Any]) -> Community:
        try:
            await self.validator.validate(registration)
        except JiveSignatureError as e:
            logger.debug(f"Unsuccessful registration request: {e}")
            await self.events.emit(LifecycleEvent.REGISTERED_FAILED, e)
            raise

        logger.debug("Successful registration request, proceeding.")
        registration_to_save = copy.deepcopy(registration)
        tenant_id = registration.get("tenantId")
        jive_url = registration.get("jiveUrl")
        jive_signature = registration.get("jiveSignature")
        authorization_code = registration.get("code") or registration.get("authorizationCode")
        client_id = registration.get("clientId") or self.config.client_id
        client_secret = registration.get("clientSecret") or self.config.client_secret

        tokens = None
        if authorization_code:
            try:
                tokens = await self.token_client.request_access_token(
                    client_id or "",
                    client_secret or "",
                    authorization_code,
                    jive_url or "",
                    scope=registration.get("scope"),
                    tenant_id=tenant_id,
                )
            except JiveError as e:
                logger.info(f"[{tenant_id}] access token exchange failed: {e}")
                await self.events.emit(LifecycleEvent.REGISTERED_FAILED, registration_to_save)
                raise

        community = None
        try:
            if tenant_id:
                community = await self.find_by_tenant_id(tenant_id)
            community = community or Community()

            if tokens is not None:
                oauth = (community.oauth or OAuthTokens()).merged_with(tokens)
                oauth.code = authorization_code or oauth.code
                oauth.jive_signature = jive_signature or oauth.jive_signature
                community.oauth = oauth

            community.jive_url = jive_url or community.jive_url
            community.version = REGISTRATION_VERSION
            community.tenant_id = tenant_id or community.tenant_id
            community.client_id = client_id or community.client_id
            community.client_secret = client_secret or community.client_secret

            saved = await self.save(community)
        except Exception as e:
            logger.warning(f"[{tenant_id}] registration failed after validation: {e}")
            await self.events.emit(LifecycleEvent.REGISTERED_FAILED, community if community is not None else registration_to_save)
            raise
        logger.info(f"[{saved.tenant_id}] registered {saved.jive_url} version={saved.version} oauth={'yes' if saved.oauth else 'no'}")
        await self.events.emit(LifecycleEvent.REGISTERED_SUCCESS, saved)
        return saved

    async def unregister(self, packet: Dict[str, Any]) -> None:
        try:
            await self.validator.validate(packet)
        except JiveSignatureError as e:
            logger.debug(f"Unsuccessful unregistration request: {e}")
            await self.events.emit(LifecycleEvent.UNREGISTER_FAILED, e)
            raise
        try:
            community = await self.find_by_tenant_id(packet.get("tenantId"))
        except Exception as e:
            logger.warning(f"[{packet.get('tenantId')}] unregistration lookup failed: {e}")
            await self.events.emit(LifecycleEvent.UNREGISTER_FAILED, e)
            raise
        await self.remove(community, packet.get("tenantId"))

    async def remove(self, community: Optional[Community], tenant_id: Optional[str] = None) -> None:
        if community is None:
            error = JiveNotFoundError("jive instance", tenant_id)
            logger.debug("Unsuccessful unregistration request. Community not found %s", tenant_id)
            await self.events.emit(LifecycleEvent.UNREGISTER_FAILED, error)
            raise error
        try:
            removed = await self.persistence.remove(COMMUNITY_COLLECTION, community.tenant_id)
        except Exception as e:
            logger.warning(f"[{community.tenant_id}] removing community failed: {e}")
            await self.events.emit(LifecycleEvent.UNREGISTER_FAILED, e)
            raise
        if not removed:
            error = JiveNotFoundError("jive instance", community.tenant_id)
            logger.debug("Unsuccessful unregistration request. Community not found %s", community.tenant_id)
            await self.events.emit(LifecycleEvent.UNREGISTER_FAILED, error)
            raise error
        logger.info(f"[{community.tenant_id}] unregistered {community.jive_url}")
        await self.events.emit(LifecycleEvent.UNREGISTER_SUCCESS, community)

    # Requests to the community

    async def _find_live(self, community: Community) -> Optional[Community]:
        if community.tenant_id:
            return await self.find_by_tenant_id(community.tenant_id)
        if community.jive_community:
            return await self.find_by_community(community.jive_community)
        return None

    async def do_request(
        self,
        community: Union[Community, Dict[str, Any], None],
        *,
        path: Optional[str] = None,
        url: Optional[str] = None,
        method: str = "GET",
        post_body: Any = None,
        headers: Optional[Dict[str, str]] = None,
        oauth: Union[OAuthTokens, Dict[str, Any], None] = None,
        token_persistence: Optional[TokenPersistence] = None,
        request_options: Optional[Dict[str, Any]] = None,
    ) -> JiveResponse:
        if community is None:
            raise JiveValidationError("community", "Community is required.")
        if not isinstance(community, (Community, dict)):
            raise JiveValidationError("community", "Community must be an object.")
        community = _as_community(community)
        headers = dict(headers or {})

        if not url:
            if path is None:
                raise JiveValidationError("path", "either url or path is required")
            if not community.jive_url:
                raise JiveValidationError("jiveUrl", "community has no jiveUrl to resolve the path against")
            url = join_url(community.jive_url, path)

        explicit_oauth = oauth is not None
        if isinstance(oauth, dict):
            oauth = OAuthTokens.model_validate(oauth)
        tokens = oauth if explicit_oauth else community.oauth
        if tokens is None or not tokens.has_access_token:
            logger.info("No oauth credentials found.  Continuing without them.")
            return await self.http.build_request(url, method, post_body, headers, request_options)

        current_tokens = None
        if token_persistence is None and not explicit_oauth:
            token_persistence = self._default_token_persistence
            current_tokens = self._live_tokens_reader(community)
            live = await current_tokens()
            if live is not None and live.has_access_token:
                tokens = live

        async def operation(context: OperationContext, oauth_now: OAuthTokens) -> JiveResponse:
            live = await self._find_live(context.community)
            if live is None:
                raise JiveNotFoundError("community", context.principal)
            headers["Authorization"] = f"Bearer {oauth_now.access_token}"
            logger.debug(f"[{context.principal}] {method} {url} token={mask_token(oauth_now.access_token)}")
            return await self.http.build_request(url, method, post_body, headers, request_options)

        context = OperationContext(
            community=community,
            token_persistence=token_persistence,
            current_tokens=current_tokens,
        )
        return await self.oauth_handler.do_operation(operation, context, tokens)

    def _live_tokens_reader(self, community: Community):
        async def read() -> Optional[OAuthTokens]:
            live = await self._find_live(community)
            return live.oauth if live is not None else None
        return read

    async def _default_token_persistence(self, tokens: OAuthTokens, community: Community) -> None:
        live = await self._find_live(community) or community
        live.oauth = (live.oauth or OAuthTokens()).merged_with(tokens)
        await self.save(live)
        community.oauth = live.oauth
