from __future__ import annotations

import json
import logging
from typing import Any, Dict

from .client import JiveHttpClient
from .config import CommunityConfig
from .exceptions import JiveHTTPError, JiveSignatureError, JiveTransportError
from .utils import build_validation_block

logger = logging.getLogger("community.signature")

MAC_HEADER = "X-Jive-MAC"


class SignatureValidator:
    """
    Checks that a registration or unregistration packet really comes from Jive.

    The packet (minus its signature, with the client secret hashed) is turned into
    a sorted ``key:value`` block and posted to ``jiveSignatureURL`` together with
    the original signature in the ``X-Jive-MAC`` header. Any 2xx answer means
    the packet is genuine.
    """

    def __init__(self, config: CommunityConfig, http: JiveHttpClient):
        self.config = config
        self.http = http

    async def validate(self, registration: Dict[str, Any]) -> bool:
        if self.config.development:
            logger.warning("Warning - development mode is on. Accepting extension registration request regardless of source!")
            return True
        if self.config.ignore_extension_registration_source:
            logger.warning("Warning - ignoreExtensionRegistrationSource is set to true. Accepting extension registration request regardless of source!")
            return True

        if not isinstance(registration, dict):
            raise JiveSignatureError("Registration packet must be an object")
        signature_url = registration.get("jiveSignatureURL")
        if not signature_url:
            raise JiveSignatureError("Registration packet has no jiveSignatureURL")
        signature = registration.get("jiveSignature")
        if not signature:
            raise JiveSignatureError("Registration packet has no jiveSignature")

        block = build_validation_block(registration)
        logger.debug("Received registration block: %s", json.dumps(sorted(k for k in registration if k != "clientSecret")))
        logger.debug("Shipping validation request to appsmarket - endpoint: %s", signature_url)
        try:
            await self.http.build_request(signature_url, "POST", block, {MAC_HEADER: signature})
        except (JiveHTTPError, JiveTransportError) as e:
            logger.info(f"signature validation rejected for tenant {registration.get('tenantId')}: {e.message}")
            raise JiveSignatureError(cause=e) from e
        return True
