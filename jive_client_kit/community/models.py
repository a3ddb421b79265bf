from __future__ import annotations
from enum import Enum
from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
COMMUNITY_COLLECTION = "community"
REGISTRATION_VERSION = "post-samurai"
class LifecycleEvent(str, Enum):
    REGISTERED_SUCCESS = "registeredJiveInstanceSuccess"
    REGISTERED_FAILED = "registeredJiveInstanceFailed"
    UNREGISTER_SUCCESS = "unregisterJiveInstanceSuccess"
    UNREGISTER_FAILED = "unregisterJiveInstanceFailed"
class OAuthTokens(BaseModel):
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
    scope: Optional[str] = None
    code: Optional[str] = None
    jive_signature: Optional[str] = Field(None, alias="jiveSignature")
    model_config = ConfigDict(extra="allow", populate_by_name=True)
    @field_validator("expires_in", mode="before")
    @classmethod
    def coerce_expires_in(cls, v):
        if v is None or v == "":
            return None
        return int(v)
    @property
    def has_access_token(self) -> bool:
        return bool(self.access_token)
    def merged_with(self, newer: "OAuthTokens") -> "OAuthTokens":
        mine = self.to_record()
        for k, v in newer.to_record().items():
            if v not in (None, ""):
                mine[k] = v
        return OAuthTokens.model_validate(mine)
    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
class Community(BaseModel):
    tenant_id: Optional[str] = Field(None, alias="tenantId")
    jive_url: Optional[str] = Field(None, alias="jiveUrl")
    jive_community: Optional[str] = Field(None, alias="jiveCommunity")
    client_id: Optional[str] = Field(None, alias="clientId")
    client_secret: Optional[str] = Field(None, alias="clientSecret")
    oauth: Optional[OAuthTokens] = None
    version: Optional[str] = None
    model_config = ConfigDict(extra="allow", populate_by_name=True)
    @property
    def principal(self) -> str:
        return self.tenant_id or self.jive_community or self.jive_url or ""
    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
class JiveResponse(BaseModel):
    status_code: int
    entity: Any = None
    headers: Dict[str, str] = Field(default_factory=dict)
    url: str = ""
    @property
    def ok(self) -> bool:
        return 200 <= self.status_code <= 299
