"""
Access and refresh token issuance and verification.

Access tokens are RS256-signed so peer services can verify them with the
public key alone. Refresh tokens are HS256-signed with a secret only this
service holds, and carry the id of their backing record as `jti` so they can
be revoked before they expire.
"""
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict
import base64
import hashlib
import json
import logging

import jwt
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey, RSAPublicKey
from jwt.algorithms import RSAAlgorithm

from .config import Settings
from .errors import InvalidToken, SigningKeyError
from .models import RefreshToken, User, utcnow
from .stores import RefreshTokenStore

logger = logging.getLogger(__name__)

ACCESS_ALGORITHM = "RS256"
REFRESH_ALGORITHM = "HS256"


def key_id(public_key: RSAPublicKey) -> str:
    der = public_key.public_bytes(
        serialization.Encoding.DER,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    digest = hashlib.sha256(der).digest()
    return base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")[:16]


class TokenIssuer:
    def __init__(self, settings: Settings):
        self.issuer = settings.TOKEN_ISSUER
        self.private_key_path = Path(settings.PRIVATE_KEY_PATH)
        self.public_key_path = Path(settings.PUBLIC_KEY_PATH)
        self.refresh_secret = settings.REFRESH_TOKEN_SECRET
        self.access_ttl = timedelta(seconds=settings.ACCESS_TOKEN_EXPIRE_SECONDS)
        self.refresh_ttl = timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)

    # ---------------- Key material ----------------

    def _load_private_key(self) -> RSAPrivateKey:
        try:
            pem = self.private_key_path.read_bytes()
            key = serialization.load_pem_private_key(pem, password=None)
        except (OSError, ValueError, TypeError) as exc:
            raise SigningKeyError("Error while reading private key") from exc
        if not isinstance(key, RSAPrivateKey):
            raise SigningKeyError("Private key is not an RSA key")
        return key

    def _load_public_key(self) -> RSAPublicKey:
        try:
            pem = self.public_key_path.read_bytes()
            key = serialization.load_pem_public_key(pem)
        except (OSError, ValueError, TypeError) as exc:
            raise SigningKeyError("Error while reading public key") from exc
        if not isinstance(key, RSAPublicKey):
            raise SigningKeyError("Public key is not an RSA key")
        return key

    def public_jwk(self) -> Dict[str, Any]:
        public_key = self._load_public_key()
        jwk = json.loads(RSAAlgorithm.to_jwk(public_key))
        jwk.update({"use": "sig", "alg": ACCESS_ALGORITHM, "kid": key_id(public_key)})
        return jwk

    # ---------------- Issuance ----------------

    def issue_access_token(self, claims: Dict[str, Any]) -> str:
        private_key = self._load_private_key()
        payload = {
            **claims,
            "iss": self.issuer,
            "exp": datetime.now(timezone.utc) + self.access_ttl,
        }
        return jwt.encode(
            payload,
            private_key,
            algorithm=ACCESS_ALGORITHM,
            headers={"kid": key_id(private_key.public_key())},
        )

    def issue_refresh_token(self, claims: Dict[str, Any], record_id: int) -> str:
        payload = {
            **claims,
            "jti": str(record_id),
            "iss": self.issuer,
            "exp": datetime.now(timezone.utc) + self.refresh_ttl,
        }
        return jwt.encode(payload, self.refresh_secret, algorithm=REFRESH_ALGORITHM)

    def persist_refresh_token(self, store: RefreshTokenStore, user: User) -> RefreshToken:
        record = store.create(user, expires_at=utcnow() + self.refresh_ttl)
        logger.debug("Refresh token record %s persisted for user %s", record.id, user.id)
        return record

    # ---------------- Verification ----------------

    def verify_access_token(self, token: str) -> Dict[str, Any]:
        public_key = self._load_public_key()
        try:
            return jwt.decode(
                token,
                public_key,
                algorithms=[ACCESS_ALGORITHM],
                issuer=self.issuer,
                options={"require": ["exp", "iss", "sub"]},
            )
        except jwt.PyJWTError as exc:
            logger.info("Access token rejected: %s", exc)
            raise InvalidToken() from exc

    def verify_refresh_token(self, token: str) -> Dict[str, Any]:
        """Signature, issuer and expiry only. Revocation is checked against the store."""
        try:
            return jwt.decode(
                token,
                self.refresh_secret,
                algorithms=[REFRESH_ALGORITHM],
                issuer=self.issuer,
                options={"require": ["exp", "iss", "sub", "jti"]},
            )
        except jwt.PyJWTError as exc:
            logger.info("Refresh token rejected: %s", exc)
            raise InvalidToken() from exc


def token_claims(user: User) -> Dict[str, Any]:
    return {"sub": str(user.id), "role": user.role}
