"""
Auth Router - register, login, self, refresh and logout.

Tokens travel as HttpOnly, SameSite=Strict cookies. Token verification and
revocation checks happen in the dependencies of deps.py, so by the time a
handler body runs its token (if any) is already known to be good.
"""
from typing import Any, Dict
import logging

from fastapi import APIRouter, Body, Depends, Request, Response

from ..auth import CredentialVerifier
from ..config import Settings
from ..deps import (
    ACCESS_COOKIE,
    REFRESH_COOKIE,
    get_access_claims,
    get_credential_verifier,
    get_refresh_claims,
    get_refresh_token_store,
    get_settings_dep,
    get_token_issuer,
    get_user_store,
    parse_refresh_claims,
)
from ..errors import InvalidCredentials, InvalidToken, RequestValidationFailed, UserNotFound
from ..models import User
from ..schemas import IdResponse, UserOut
from ..stores import RefreshTokenStore, UserStore
from ..tokens import TokenIssuer, token_claims
from ..utils.event_logger import log_auth_event
from ..validation import LOGIN_RULES, REGISTER_RULES, validate

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)

SECONDS_IN_DAY = 60 * 60 * 24


def _set_token_cookies(response: Response, access_token: str, refresh_token: str, settings: Settings) -> None:
    response.set_cookie(
        ACCESS_COOKIE,
        access_token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_SECONDS,
        domain=settings.COOKIE_DOMAIN,
        samesite="strict",
        httponly=True,
    )
    response.set_cookie(
        REFRESH_COOKIE,
        refresh_token,
        max_age=settings.REFRESH_TOKEN_EXPIRE_DAYS * SECONDS_IN_DAY,
        domain=settings.COOKIE_DOMAIN,
        samesite="strict",
        httponly=True,
    )


def _issue_token_pair(
    user: User,
    response: Response,
    issuer: TokenIssuer,
    refresh_tokens: RefreshTokenStore,
    settings: Settings,
) -> None:
    claims = token_claims(user)
    access_token = issuer.issue_access_token(claims)

    record = issuer.persist_refresh_token(refresh_tokens, user)
    refresh_token = issuer.issue_refresh_token(claims, record.id)

    _set_token_cookies(response, access_token, refresh_token, settings)


def public_user(user: User) -> Dict[str, Any]:
    data = {column.name: getattr(user, column.name) for column in User.__table__.columns}
    data.pop("password", None)
    return data


@router.post("/register", response_model=IdResponse, status_code=201)
def register(
    request: Request,
    response: Response,
    payload: Any = Body(default=None),
    users: UserStore = Depends(get_user_store),
    refresh_tokens: RefreshTokenStore = Depends(get_refresh_token_store),
    verifier: CredentialVerifier = Depends(get_credential_verifier),
    issuer: TokenIssuer = Depends(get_token_issuer),
    settings: Settings = Depends(get_settings_dep),
):
    data, errors = validate(payload, REGISTER_RULES)
    if errors:
        raise RequestValidationFailed(errors)

    logger.debug(
        "New request to register a user: first_name=%s last_name=%s email=%s password=********",
        data["firstName"], data["lastName"], data["email"]
    )

    user = users.create(
        first_name=data["firstName"],
        last_name=data["lastName"],
        email=data["email"],
        password_hash=verifier.hash(data["password"]),
    )
    logger.info("User has been registered: id=%s", user.id)
    log_auth_event("register", user.id, request)

    _issue_token_pair(user, response, issuer, refresh_tokens, settings)
    return {"id": user.id}


@router.post("/login", response_model=IdResponse)
def login(
    request: Request,
    response: Response,
    payload: Any = Body(default=None),
    users: UserStore = Depends(get_user_store),
    refresh_tokens: RefreshTokenStore = Depends(get_refresh_token_store),
    verifier: CredentialVerifier = Depends(get_credential_verifier),
    issuer: TokenIssuer = Depends(get_token_issuer),
    settings: Settings = Depends(get_settings_dep),
):
    data, errors = validate(payload, LOGIN_RULES)
    if errors:
        raise RequestValidationFailed(errors)

    logger.debug("New request to login a user: email=%s password=********", data["email"])

    user = users.get_by_email(data["email"])
    if user is None:
        log_auth_event("login_failure", None, request)
        raise InvalidCredentials()

    if not verifier.compare(data["password"], user.password):
        log_auth_event("login_failure", user.id, request)
        raise InvalidCredentials()

    _issue_token_pair(user, response, issuer, refresh_tokens, settings)

    logger.info("User has been logged in: id=%s", user.id)
    log_auth_event("login_success", user.id, request)
    return {"id": user.id}


@router.get("/self", response_model=UserOut)
def get_self(
    claims: Dict[str, Any] = Depends(get_access_claims),
    users: UserStore = Depends(get_user_store),
):
    try:
        user_id = int(claims["sub"])
    except (TypeError, ValueError) as exc:
        raise InvalidToken() from exc

    user = users.get_by_id(user_id)
    if user is None:
        raise InvalidToken("User not found")
    return public_user(user)


@router.post("/refresh", response_model=IdResponse)
def refresh(
    request: Request,
    response: Response,
    claims: Dict[str, Any] = Depends(get_refresh_claims),
    users: UserStore = Depends(get_user_store),
    refresh_tokens: RefreshTokenStore = Depends(get_refresh_token_store),
    issuer: TokenIssuer = Depends(get_token_issuer),
    settings: Settings = Depends(get_settings_dep),
):
    user = users.get_by_id(int(claims["sub"]))
    if user is None:
        raise UserNotFound()

    if settings.ROTATE_REFRESH_TOKENS:
        refresh_tokens.delete(int(claims["jti"]))

    _issue_token_pair(user, response, issuer, refresh_tokens, settings)

    logger.info("Token pair refreshed: user_id=%s", user.id)
    log_auth_event("refresh", user.id, request)
    return {"id": user.id}


@router.post("/logout")
def logout(
    request: Request,
    response: Response,
    access_claims: Dict[str, Any] = Depends(get_access_claims),
    refresh_claims: Dict[str, Any] = Depends(parse_refresh_claims),
    refresh_tokens: RefreshTokenStore = Depends(get_refresh_token_store),
    settings: Settings = Depends(get_settings_dep),
):
    if str(access_claims["sub"]) != str(refresh_claims["sub"]):
        raise InvalidToken("Access and refresh tokens belong to different users")

    record_id = int(refresh_claims["jti"])
    if refresh_tokens.delete(record_id):
        logger.info("Refresh token has been revoked: id=%s", record_id)

    response.delete_cookie(ACCESS_COOKIE, domain=settings.COOKIE_DOMAIN, httponly=True, samesite="strict")
    response.delete_cookie(REFRESH_COOKIE, domain=settings.COOKIE_DOMAIN, httponly=True, samesite="strict")

    log_auth_event("logout", int(refresh_claims["sub"]), request)
    return {}
