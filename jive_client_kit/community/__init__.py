"""
Jive Community Integration

Everything an add-on service needs to talk to the Jive communities that install it:
- Registration and unregistration packets, validated against Jive's signature endpoint
- Community records (tenant, URL, client credentials, OAuth tokens) kept in persistence
- OAuth2 authorization code and refresh token exchanges
- Authenticated requests to a community with one transparent token refresh
- Lifecycle events for observers of (un)registration

Usage:
    from jive_client_kit.community import CommunityRegistry, LifecycleEvent

    registry.events.subscribe(LifecycleEvent.REGISTERED_SUCCESS, on_registered)
    community = await registry.register(packet)
    resp = await registry.do_request(community, path="/api/core/v3/people/@me")
"""

from __future__ import annotations

from .client import JiveHttpClient, OAuthTokenClient
from .config import CommunityConfig
from .events import CommunityEvents
from .exceptions import (
    JiveError,
    JiveHTTPError,
    JiveNotFoundError,
    JiveSignatureError,
    JiveTokenExchangeError,
    JiveTransportError,
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
from .oauth import OAuthRefreshHandler, OperationContext
from .persistence import MemoryPersistence, Persistence
from .registry import CommunityRegistry
from .signature import SignatureValidator
from .utils import build_validation_block, join_url, parse_jive_community

__all__ = [
    # Facade
    "CommunityRegistry",
    # Collaborators
    "JiveHttpClient",
    "OAuthTokenClient",
    "OAuthRefreshHandler",
    "OperationContext",
    "SignatureValidator",
    "CommunityEvents",
    "CommunityConfig",
    "Persistence",
    "MemoryPersistence",
    # Models
    "Community",
    "OAuthTokens",
    "JiveResponse",
    "LifecycleEvent",
    "COMMUNITY_COLLECTION",
    "REGISTRATION_VERSION",
    # Exceptions
    "JiveError",
    "JiveHTTPError",
    "JiveNotFoundError",
    "JiveSignatureError",
    "JiveTokenExchangeError",
    "JiveTransportError",
    "JiveValidationError",
    # Utils
    "build_validation_block",
    "join_url",
    "parse_jive_community",
]
