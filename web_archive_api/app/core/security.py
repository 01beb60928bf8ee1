"""
Security helpers for bearer token authentication.

This module implements a lightweight JSON Web Token (JWT) mechanism
using HMAC‑SHA256 signatures and base64url encoding.  Tokens embed
arbitrary claims and an expiration timestamp (``exp``) and are signed
with ``settings.secret_key``.  A single static token configured via
``BEARER_TOKEN`` is accepted as well, which is how the archive's
browser extension and web UI usually authenticate.
"""

import base64
import hmac
import hashlib
import json
import logging
import time
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import settings


logger = logging.getLogger(__name__)


def _b64_url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _b64_url_decode(data: str) -> bytes:
    return base64.urlsafe_b64decode(data + '=' * (-len(data) % 4))


def _encode_segment(obj: Dict[str, Any]) -> str:
    """Compact JSON, base64url encoded: one dot-separated token part."""
    return _b64_url_encode(json.dumps(obj, separators=(',', ':')).encode("utf-8"))


def _signature(header_b64: str, payload_b64: str) -> bytes:
    """HMAC‑SHA256 over ``header.payload`` keyed with ``SECRET_KEY``."""
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    return hmac.new(settings.secret_key.encode("utf-8"), signing_input, hashlib.sha256).digest()


def create_access_token(data: Dict[str, Any], expires_delta: Optional[int] = None) -> str:
    """Mint a token that the tag endpoints accept as a bearer credential.

    ``create_token.py`` is the usual caller.  The subject claim is only
    informational; any valid, unexpired token grants full access to the
    tag API.

    Parameters
    ----------
    data : dict
        Claims to embed in the token (e.g. ``{"sub": "archive-ui"}``).
    expires_delta : Optional[int]
        Lifetime in seconds.  Defaults to ``ACCESS_TOKEN_EXPIRE_MINUTES``.

    Returns
    -------
    str
        A token of the form ``header.payload.signature``.
    """
    claims = dict(data)
    claims["exp"] = int(time.time()) + (expires_delta or settings.access_token_expire_minutes * 60)
    header_b64 = _encode_segment({"alg": "HS256", "typ": "JWT"})
    payload_b64 = _encode_segment(claims)
    return f"{header_b64}.{payload_b64}.{_b64_url_encode(_signature(header_b64, payload_b64))}"


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Return the claims of a token minted by ``create_access_token``.

    ``None`` when the token is malformed, signed with another
    ``SECRET_KEY`` or past its ``exp``.
    """
    parts = token.split('.')
    if len(parts) != 3:
        return None
    header_b64, payload_b64, signature_b64 = parts
    try:
        if not hmac.compare_digest(_signature(header_b64, payload_b64), _b64_url_decode(signature_b64)):
            return None
        data = json.loads(_b64_url_decode(payload_b64).decode("utf-8"))
    except (ValueError, UnicodeDecodeError):
        # binascii.Error and json.JSONDecodeError are both ValueErrors
        return None
    if not isinstance(data, dict):
        return None
    if data.get("exp") is None or int(data["exp"]) < int(time.time()):
        return None
    return data


security = HTTPBearer(auto_error=False)


def get_current_user(credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)) -> Dict[str, Any]:
    """Dependency that retrieves the current authenticated user.

    Raises HTTP 401 if the request carries no bearer token or the token
    is neither the configured static token nor a valid access token.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    token = credentials.credentials

    if settings.bearer_token and hmac.compare_digest(token.encode("utf-8"), settings.bearer_token.encode("utf-8")):
        return {"sub": "admin", "static": True}

    payload = decode_access_token(token)
    if not payload:
        logger.info("Rejected invalid or expired access token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return payload
