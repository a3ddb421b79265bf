from __future__ import annotations
import logging
from typing import Any, Optional
import httpx
logger = logging.getLogger("community.exceptions")
class JiveError(Exception):
    def __init__(self, message: str, details: Optional[str] = None):
        self.message = message
        self.details = details
        super().__init__(message)
    def __str__(self) -> str:
        if self.details:
            return f"{self.message}\n{self.details}"
        return self.message
class JiveValidationError(JiveError):
    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"Validation error for '{field}': {message}")
class JiveSignatureError(JiveError):
    def __init__(self, message: str = "Failed jive signature validation", cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message, str(cause) if cause else None)
class JiveNotFoundError(JiveError):
    def __init__(self, what: str, key: Any):
        self.what = what
        self.key = key
        super().__init__(f"No {what} found: {key!r}")
class JiveTransportError(JiveError):
    def __init__(self, method: str, url: str, cause: BaseException):
        self.method = method
        self.url = url
        self.cause = cause
        super().__init__(f"{method} {url} failed: {type(cause).__name__}", str(cause) or None)
class JiveHTTPError(JiveError):
    CODE_UNAUTHORIZED = 401
    CODE_FORBIDDEN = 403
    CODE_NOT_FOUND = 404
    def __init__(
        self,
        status_code: int,
        message: str,
        entity: Any = None,
        url: str = "",
        error_code: str = "",
    ):
        self.status_code = status_code
        self.entity = entity
        self.url = url
        self.error_code = error_code
        super().__init__(message, f"{url} -> HTTP {status_code}" if url else None)
    @property
    def is_auth_error(self) -> bool:
        return self.status_code == self.CODE_UNAUTHORIZED
class JiveTokenExchangeError(JiveError):
    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        entity: Any = None,
    ):
        self.status_code = status_code
        self.entity = entity
        details = None
        if status_code is not None:
            details = f"HTTP {status_code}: {entity}"
        super().__init__(message, details)
    @classmethod
    def from_http_error(cls, message: str, e: JiveHTTPError) -> "JiveTokenExchangeError":
        return cls(message, status_code=e.status_code, entity=e.entity)
def decode_entity(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text
def parse_http_error(response: httpx.Response) -> JiveHTTPError:
    try:
        url = str(response.request.url)
    except RuntimeError:
        url = ""
    try:
        entity = decode_entity(response)
    except Exception as e:
        logger.warning(f"Error decoding Jive error response: {e}")
        entity = None
    if isinstance(entity, dict) and "error" in entity:
        err = entity["error"]
        if isinstance(err, dict):
            return JiveHTTPError(
                status_code=response.status_code,
                message=err.get("message", f"HTTP {response.status_code}"),
                entity=entity,
                url=url,
                error_code=str(err.get("code", "")),
            )
        return JiveHTTPError(
            status_code=response.status_code,
            message=entity.get("error_description") or str(err),
            entity=entity,
            url=url,
            error_code=str(err),
        )
    return JiveHTTPError(
        status_code=response.status_code,
        message=f"HTTP {response.status_code}: {response.text[:500]}",
        entity=entity,
        url=url,
    )
