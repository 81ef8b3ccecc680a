"""
Request pipeline stages.

Each dependency either hands the next stage enriched context (claims, a
collaborator) or short-circuits by raising, which the global error
responder turns into a response before any handler body runs.
"""
from typing import Any, Dict, Optional

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from .auth import CredentialVerifier
from .config import Settings
from .db import get_db
from .errors import InvalidToken
from .stores import RefreshTokenStore, UserStore
from .tokens import TokenIssuer

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"


def get_settings_dep(request: Request) -> Settings:
    return request.app.state.settings


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


def get_credential_verifier(request: Request) -> CredentialVerifier:
    return request.app.state.credential_verifier


def get_user_store(db: Session = Depends(get_db)) -> UserStore:
    return UserStore(db)


def get_refresh_token_store(db: Session = Depends(get_db)) -> RefreshTokenStore:
    return RefreshTokenStore(db)


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    token = parts[1].strip()
    if not token or token == "undefined":
        return None
    return token


def get_access_claims(
    request: Request,
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> Dict[str, Any]:
    """Verified access token claims, from the bearer header or the accessToken cookie."""
    token = _bearer_token(authorization) or request.cookies.get(ACCESS_COOKIE)
    if not token:
        raise InvalidToken("Access token is missing")
    return issuer.verify_access_token(token)


def parse_refresh_claims(
    request: Request,
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> Dict[str, Any]:
    """Refresh token claims with a valid signature. Not checked against the store."""
    token = request.cookies.get(REFRESH_COOKIE)
    if not token:
        raise InvalidToken("Refresh token is missing")
    claims = issuer.verify_refresh_token(token)
    try:
        int(claims["jti"])
        int(claims["sub"])
    except (TypeError, ValueError) as exc:
        raise InvalidToken() from exc
    return claims


def get_refresh_claims(
    claims: Dict[str, Any] = Depends(parse_refresh_claims),
    store: RefreshTokenStore = Depends(get_refresh_token_store),
) -> Dict[str, Any]:
    """Refresh token claims whose backing record still exists for the token's subject."""
    if store.find(int(claims["jti"]), int(claims["sub"])) is None:
        raise InvalidToken("Refresh token has been revoked")
    return claims
