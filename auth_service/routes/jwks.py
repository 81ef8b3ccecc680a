"""
JWKS Router - publishes the access token verification key for peer services.
"""
from fastapi import APIRouter, Depends

from ..deps import get_token_issuer
from ..schemas import JWKSet
from ..tokens import TokenIssuer

router = APIRouter(tags=["jwks"])


@router.get("/.well-known/jwks.json", response_model=JWKSet)
def get_jwks(issuer: TokenIssuer = Depends(get_token_issuer)):
    return {"keys": [issuer.public_jwk()]}
