"""
Auth Service - registration, login and cookie-borne access/refresh tokens
"""
from contextlib import asynccontextmanager
from typing import Optional
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .auth import CredentialVerifier
from .config import Settings, get_settings
from .db import Database
from .errors import register_error_handlers
from .routes import auth, jwks
from .tokens import TokenIssuer
from .utils.log_config import configure_logging

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)

    database = Database(settings.DATABASE_URL)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        """Open the database and create tables on startup, close it on shutdown"""
        database.open()
        database.create_all()
        logger.info("Auth service started")
        try:
            yield
        finally:
            database.close()
            logger.info("Auth service stopped")

    app = FastAPI(
        title="Auth Service",
        description="User registration, login and token issuance",
        version="1.0.0",
        lifespan=lifespan
    )

    app.state.settings = settings
    app.state.database = database
    app.state.token_issuer = TokenIssuer(settings)
    app.state.credential_verifier = CredentialVerifier(rounds=settings.PASSWORD_HASH_ROUNDS)

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    app.include_router(auth.router)
    app.include_router(jwks.router)

    @app.get("/")
    def root():
        return {"message": "Welcome to the auth service"}

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app
