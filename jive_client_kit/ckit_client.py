import os
import asyncio
import logging
from typing import Optional

import httpx

from jive_client_kit import ckit_logs
from jive_client_kit.community import (
    CommunityConfig,
    CommunityEvents,
    CommunityRegistry,
    JiveHttpClient,
    MemoryPersistence,
    OAuthRefreshHandler,
    OAuthTokenClient,
    Persistence,
)
from jive_client_kit.community import config as community_config
from jive_client_kit.community.client import DEFAULT_TIMEOUT


logger = logging.getLogger("jiveclient")


HELP = """
These environment variables affect execution:

export JIVE_MONGODB_URL=mongodb://localhost:27017         # keep communities in MongoDB, in memory if not set
export JIVE_MONGODB_DB=jive
export JIVE_CONFIG_FILE=./jiveclientconfiguration.json    # read config from file instead of JIVE_* variables
""" + community_config.HELP


JIVE_MONGODB_DB_DEFAULT = "jive"


class JiveClient:
    def __init__(self,
        service_name: str,
        *,
        config: Optional[CommunityConfig] = None,
        persistence: Optional[Persistence] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,   # httpx.MockTransport in tests
        mongo_url: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        skip_logger_init: bool = False,
    ):
        if not skip_logger_init:
            ckit_logs.setup_logger()
        self.service_name = service_name
        if config is None:
            config_file = os.getenv("JIVE_CONFIG_FILE")
            config = CommunityConfig.from_file(config_file) if config_file else CommunityConfig.from_env()
        self.config = config

        if persistence is None:
            mongo_url = mongo_url or os.getenv("JIVE_MONGODB_URL")
            if mongo_url:
                from jive_client_kit import ckit_mongo
                persistence = ckit_mongo.MongoPersistence.from_url(mongo_url, os.getenv("JIVE_MONGODB_DB", JIVE_MONGODB_DB_DEFAULT))
            else:
                persistence = MemoryPersistence()
        self.persistence = persistence

        self.http = JiveHttpClient(transport=transport, timeout=timeout)
        self.token_client = OAuthTokenClient(self.http)
        self.oauth_handler = OAuthRefreshHandler(self.token_client)
        self.events = CommunityEvents()
        self.registry = CommunityRegistry(
            persistence=self.persistence,
            http=self.http,
            oauth_handler=self.oauth_handler,
            token_client=self.token_client,
            config=self.config,
            events=self.events,
        )

        logger.info("JiveClient service_name=%s persistence=%s development=%s default_client_id=%s",
            self.service_name,
            type(self.persistence).__name__,
            self.config.development,
            self.config.client_id or "None",
        )
        if self.config.skip_signature_validation:
            logger.warning("registration signature validation is OFF for %s", self.service_name)


async def test() -> None:
    client = JiveClient("ckit_client_test")
    communities = await client.registry.find()
    print("Look, %d communities are registered!" % len(communities))
    for c in communities:
        print("  Community %r tenant=%s oauth=%s" % (c.jive_community, c.tenant_id, "yes" if c.oauth else "no"))


if __name__ == "__main__":
    print(HELP)
    asyncio.run(test())
