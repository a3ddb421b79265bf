"""
Refresh-once-then-retry wrapper around operations that need an access token.

The handler starts in the *direct* state: it runs the operation with the tokens
it was given. When the operation fails with one of ``refresh_statuses`` it moves
to *refreshing*: under a per-principal lock it exchanges the refresh token,
hands the new tokens to the persistence callback and runs the operation one more
time. Whatever the second attempt raises goes to the caller.

Only one refresh exchange per principal is in flight. A coroutine that waited on
the lock re-reads the current tokens first and reuses them if somebody else
already refreshed.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, FrozenSet, Iterable, Optional, TypeVar

from .client import OAuthTokenClient
from .exceptions import JiveHTTPError, JiveTokenExchangeError
from .models import Community, OAuthTokens
from .utils import mask_token

logger = logging.getLogger("community.oauth")

T = TypeVar("T")

TokenPersistence = Callable[[OAuthTokens, Community], Awaitable[None]]
CurrentTokens = Callable[[], Awaitable[Optional[OAuthTokens]]]

DEFAULT_REFRESH_STATUSES = frozenset({JiveHTTPError.CODE_UNAUTHORIZED})


@dataclass
class OperationContext:
    community: Community
    token_persistence: Optional[TokenPersistence] = None
    current_tokens: Optional[CurrentTokens] = None

    @property
    def principal(self) -> str:
        return self.community.principal


Operation = Callable[[OperationContext, OAuthTokens], Awaitable[T]]


class OAuthRefreshHandler:
    def __init__(
        self,
        token_client: OAuthTokenClient,
        refresh_statuses: Iterable[int] = DEFAULT_REFRESH_STATUSES,
    ):
        self.token_client = token_client
        self.refresh_statuses: FrozenSet[int] = frozenset(refresh_statuses)
        # a principal's lock lives only while somebody holds or waits on it
        self._locks: Dict[str, asyncio.Lock] = {}
        self._lock_users: Dict[str, int] = {}
        self.refresh_count = 0

    def _lock_for(self, principal: str) -> asyncio.Lock:
        lock = self._locks.get(principal)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[principal] = lock
        self._lock_users[principal] = self._lock_users.get(principal, 0) + 1
        return lock

    def _release_lock(self, principal: str) -> None:
        users = self._lock_users[principal] - 1
        if users:
            self._lock_users[principal] = users
        else:
            del self._lock_users[principal]
            del self._locks[principal]

    def needs_refresh(self, e: JiveHTTPError) -> bool:
        return e.status_code in self.refresh_statuses

    async def do_operation(
        self,
        operation: Operation,
        context: OperationContext,
        oauth: OAuthTokens,
    ) -> T:
        try:
            return await operation(context, oauth)
        except JiveHTTPError as e:
            if not self.needs_refresh(e):
                raise
            logger.info(f"[{context.principal}] HTTP {e.status_code} with token {mask_token(oauth.access_token)}, refreshing")
        fresh = await self.refresh(context, oauth)
        return await operation(context, fresh)

    async def refresh(self, context: OperationContext, stale: OAuthTokens) -> OAuthTokens:
        principal = context.principal
        lock = self._lock_for(principal)
        try:
            async with lock:
                return await self._refresh_locked(context, stale)
        finally:
            self._release_lock(principal)

    async def _refresh_locked(self, context: OperationContext, stale: OAuthTokens) -> OAuthTokens:
        if context.current_tokens is not None:
            current = await context.current_tokens()
            if current and current.access_token and current.access_token != stale.access_token:
                logger.info(f"[{context.principal}] token already refreshed by another request, reusing {mask_token(current.access_token)}")
                return current
        community = context.community
        if not stale.refresh_token:
            raise JiveTokenExchangeError(f"No refresh token for {context.principal}")
        try:
            fresh = await self.token_client.refresh_access_token(
                community.client_id or "",
                community.client_secret or "",
                stale.refresh_token,
                community.jive_url or "",
            )
        except JiveTokenExchangeError:
            logger.error(f"[{context.principal}] error refreshing access token")
            raise
        self.refresh_count += 1
        if not fresh.refresh_token:
            fresh.refresh_token = stale.refresh_token
        if context.token_persistence is not None:
            try:
                await context.token_persistence(fresh, community)
            except Exception as e:
                logger.warning(f"[{context.principal}] could not persist refreshed tokens: {e}", exc_info=e)
        logger.info(f"[{context.principal}] access token refreshed, now {mask_token(fresh.access_token)}")
        return fresh
