from __future__ import annotations
import copy
import hashlib
import logging
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from jive_client_kit.community.exceptions import JiveValidationError

logger = logging.getLogger("community.utils")


def parse_jive_community(jive_url: Optional[str]) -> str:
    if not jive_url:
        raise JiveValidationError("jiveUrl", "is required to derive jiveCommunity")
    host = urlparse(str(jive_url).strip()).netloc
    if not host:
        raise JiveValidationError("jiveUrl", f"has no host: {jive_url!r}")
    parts = host.split("www.")
    return parts[1] if len(parts) > 1 else parts[0]


def join_url(base_url: str, path: str) -> str:
    if not path.startswith("/"):
        path = "/" + path
    if base_url.endswith("/"):
        base_url = base_url[:-1]
    return base_url + path


def sha256_hex(value: str) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def format_block_value(value: Any) -> str:
    # renders values the way Jive stringifies them when it computes the MAC
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return ",".join("" if v is None else format_block_value(v) for v in value)
    if isinstance(value, dict):
        return "[object Object]"
    return str(value)


def build_validation_block(registration: Dict[str, Any]) -> str:
    block = copy.deepcopy(dict(registration))
    block.pop("jiveSignature", None)
    # unregister packets carry no client secret
    if block.get("clientSecret"):
        block["clientSecret"] = sha256_hex(block["clientSecret"])
    return "".join(f"{k}:{format_block_value(block[k])}\n" for k in sorted(block))


def mask_token(token: Optional[str]) -> str:
    if not token:
        return "None"
    return "..." + token[-4:]
