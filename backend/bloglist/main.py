"""
Bloglist Backend - FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() validates settings, builds every collaborator once,
       stores them on `app.state`, and registers middleware, exception
       handlers and routers.
Who:   Called by uvicorn (`uvicorn bloglist.main:app`) and by the tests,
       which pass their own Settings.

Application Architecture:
    ┌─────────────────────────────────────────────────────────┐
    │                      FastAPI App                        │
    │                                                         │
    │  Middleware Chain:                                      │
    │  ┌──────────────┐ ┌──────────┐ ┌──────────┐            │
    │  │ Login Limit  │→│ Req ID   │→│ Logging  │→ GZip → CORS│
    │  └──────────────┘ └──────────┘ └──────────┘            │
    │                                                         │
    │  app.state:                                             │
    │    engine, session_factory, password_hasher,            │
    │    token_codec, account_store,                          │
    │    identity_resolver, account_service, session_service, │
    │    post_service                                         │
    │                                                         │
    │  Routes:                                                │
    │    /api/login  /api/users  /api/posts  /health          │
    └─────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, optionally create tables, log readiness
    Shutdown: dispose the application's database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from bloglist import __version__
from bloglist.auth.identity import IdentityResolver
from bloglist.auth.passwords import PasswordHasher
from bloglist.auth.tokens import TokenCodec
from bloglist.config import Settings, settings as default_settings
from bloglist.database import build_engine, build_session_factory, create_tables
from bloglist.exceptions import (
    ConfigurationError,
    ConflictError,
    DatabaseError,
    ForbiddenError,
    InvalidCredentialsError,
    InvalidTokenError,
    MalformedIdentifierError,
    NotFoundError,
    UnauthenticatedError,
    ValidationError,
)
from bloglist.middleware.logging import RequestLoggingMiddleware
from bloglist.middleware.rate_limit import LoginRateLimitMiddleware
from bloglist.middleware.request_id import RequestIDMiddleware, request_id_var
from bloglist.routes import health, posts, users
from bloglist.services.account_service import AccountService
from bloglist.services.account_store import AccountStore
from bloglist.services.post_service import PostService
from bloglist.services.session_service import SessionService

logger = logging.getLogger(__name__)

BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str) -> None:
    """
    Configure the root logger once for the whole process.

    Format: 2024-01-15T12:00:00 [INFO] bloglist.access: GET /api/posts 200 ...
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party libraries are chatty at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.ERROR)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    config: Settings = app.state.settings

    setup_logging(config.log_level)
    logger.info("=" * 60)
    logger.info("Bloglist Backend %s starting up...", __version__)

    if config.db_create_tables:
        logger.info("DB_CREATE_TABLES is set; creating missing tables")
        await create_tables(app.state.engine)

    if config.owner_only_updates:
        logger.info("Post updates are restricted to the owning account")

    logger.info("Server ready at http://%s:%d", config.backend_host, config.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("Bloglist Backend shutting down...")
    await app.state.engine.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(
    status_code: int,
    error: str,
    message: str,
    details: Optional[dict] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    content = {"error": error, "message": message, "request_id": request_id_var.get("")}
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map application exceptions to HTTP responses.

    Handler table:
        ValidationError, MalformedIdentifierError,
        RequestValidationError         → 400
        InvalidCredentialsError,
        InvalidTokenError,
        UnauthenticatedError           → 401 (+ WWW-Authenticate: Bearer)
        ForbiddenError                 → 403
        NotFoundError                  → 404
        ConflictError                  → 409
        DatabaseError, Exception       → 500 (generic message)

    Response bodies never carry secrets, token contents, or stack traces.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return _error_response(400, "validation_error", exc.message, details=exc.context)

    @app.exception_handler(MalformedIdentifierError)
    async def handle_malformed_id(request: Request, exc: MalformedIdentifierError):
        return _error_response(400, "malformatted_id", exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        """Body that is not JSON or has wrongly typed fields."""
        errors = jsonable_encoder(exc.errors())
        first = errors[0] if errors else {}
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = first.get("msg", "invalid request")
        if location:
            message = f"{location}: {message}"
        return _error_response(400, "validation_error", message, details={"errors": errors})

    @app.exception_handler(InvalidCredentialsError)
    async def handle_invalid_credentials(request: Request, exc: InvalidCredentialsError):
        return _error_response(401, "invalid_credentials", exc.message, headers=BEARER_CHALLENGE)

    @app.exception_handler(InvalidTokenError)
    async def handle_invalid_token(request: Request, exc: InvalidTokenError):
        # The reason goes to the log only
        logger.info("[%s] Rejected token: %s", request_id_var.get(""), exc.reason)
        return _error_response(401, "invalid_token", exc.message, headers=BEARER_CHALLENGE)

    @app.exception_handler(UnauthenticatedError)
    async def handle_unauthenticated(request: Request, exc: UnauthenticatedError):
        return _error_response(401, "unauthenticated", exc.message, headers=BEARER_CHALLENGE)

    @app.exception_handler(ForbiddenError)
    async def handle_forbidden(request: Request, exc: ForbiddenError):
        return _error_response(403, "forbidden", exc.message)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(404, "not_found", exc.message)

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        return _error_response(409, "conflict", exc.message, details={"field": exc.field})

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return _error_response(
            500, "server_error", "An internal error occurred. Please try again later."
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return _error_response(
            500,
            "internal_server_error",
            "An unexpected error occurred. Please try again or contact support.",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Raises:
        ConfigurationError: SECRET_KEY (or another required setting) is
            missing. The process must not start serving in that state.
    """
    config = settings or default_settings

    try:
        config.validate_required_for_production()
    except ValueError as e:
        raise ConfigurationError(message=str(e)) from e

    app = FastAPI(
        title="Bloglist API",
        description=(
            "Catalog of blog posts with account registration, token login, "
            "owner-only deletion and aggregate statistics."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Collaborators ─────────────────────────────────────────────────────
    password_hasher = PasswordHasher(rounds=config.bcrypt_rounds)
    token_codec = TokenCodec(
        secret=config.secret_key,
        algorithm=config.jwt_algorithm,
        ttl_seconds=config.token_ttl_seconds,
    )
    account_store = AccountStore()
    engine = build_engine(config)

    app.state.settings = config
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.password_hasher = password_hasher
    app.state.token_codec = token_codec
    app.state.account_store = account_store
    app.state.identity_resolver = IdentityResolver(token_codec, account_store)
    app.state.account_service = AccountService(
        account_store,
        password_hasher,
        min_username_length=config.min_username_length,
        min_password_length=config.min_password_length,
    )
    app.state.session_service = SessionService(account_store, password_hasher, token_codec)
    app.state.post_service = PostService(
        account_store, owner_only_updates=config.owner_only_updates
    )

    # ── Middleware ────────────────────────────────────────────────────────
    # Executes in reverse order of addition: the login limiter runs first
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Total-Count", "Retry-After"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        LoginRateLimitMiddleware,
        max_attempts=config.login_rate_limit_attempts,
        window_seconds=config.login_rate_limit_window,
    )

    register_exception_handlers(app)

    app.include_router(users.login_router)
    app.include_router(users.users_router)
    app.include_router(posts.router)
    app.include_router(health.router)

    return app


# uvicorn imports `bloglist.main:app`
app = create_app()
