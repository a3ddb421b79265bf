from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

logger = logging.getLogger("community.config")


HELP = """
These environment variables affect community registration:

export JIVE_DEVELOPMENT=1                                 # accept registrations without signature checks
export JIVE_IGNORE_EXTENSION_REGISTRATION_SOURCE=1        # same, but without claiming to be a devbox
export JIVE_CLIENT_ID=...                                 # default OAuth client when the packet has none
export JIVE_CLIENT_SECRET=...
"""


_TRUTHY = {"1", "true", "yes", "on"}


def _as_bool(v: Any) -> bool:
    if isinstance(v, bool):
        return v
    if v is None:
        return False
    return str(v).strip().lower() in _TRUTHY


@dataclass
class CommunityConfig:
    development: bool = False
    ignore_extension_registration_source: bool = False
    client_id: Optional[str] = None
    client_secret: Optional[str] = None

    @property
    def skip_signature_validation(self) -> bool:
        return self.development or self.ignore_extension_registration_source

    @classmethod
    def from_env(cls) -> "CommunityConfig":
        return cls(
            development=_as_bool(os.getenv("JIVE_DEVELOPMENT")),
            ignore_extension_registration_source=_as_bool(os.getenv("JIVE_IGNORE_EXTENSION_REGISTRATION_SOURCE")),
            client_id=os.getenv("JIVE_CLIENT_ID") or None,
            client_secret=os.getenv("JIVE_CLIENT_SECRET") or None,
        )

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "CommunityConfig":
        # jiveclientconfiguration.json uses camelCase
        def pick(camel: str, snake: str) -> Any:
            return d[camel] if camel in d else d.get(snake)
        return cls(
            development=_as_bool(d.get("development")),
            ignore_extension_registration_source=_as_bool(pick("ignoreExtensionRegistrationSource", "ignore_extension_registration_source")),
            client_id=pick("clientId", "client_id") or None,
            client_secret=pick("clientSecret", "client_secret") or None,
        )

    @classmethod
    def from_file(cls, path: str) -> "CommunityConfig":
        with open(path, "r") as f:
            d = json.load(f)
        if not isinstance(d, dict):
            raise ValueError(f"{path}: expected a JSON object, got {type(d).__name__}")
        logger.info("community config loaded from %s", path)
        return cls.from_dict(d)
