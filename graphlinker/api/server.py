"""FastAPI app: shared-secret check, allow-list error mapping, email routes."""

import secrets
import uuid
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, Security
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.security import APIKeyHeader

from graphlinker import __version__
from graphlinker.access import AccessEvaluator, AuthorizationConfig, AzureADConfig, load_gateway_config
from graphlinker.api.routes import router as emails_router
from graphlinker.config import (
    API_KEY_HEADER_NAME,
    GATEWAY_API_KEY,
    MOCK_INBOX_PATH,
    MOCK_SENT_ITEMS_PATH,
)
from graphlinker.errors import (
    AttachmentDecodeError,
    ConfigurationError,
    RecipientNotAllowedError,
    SenderNotAllowedError,
)
from graphlinker.gateway import MailGateway
from graphlinker.mail_provider.protocol import MailProvider
from graphlinker.utils.logger import get_logger, request_context

logger = get_logger("graphlinker.api.server")

# Documentation paths reachable without the API key
DOCS_PATH_PREFIXES = ("/docs", "/redoc")
DOCS_PATHS = ("/openapi.json", "/favicon.ico")

UNAUTHORIZED_DETAIL = "Invalid or missing API key"

# Documents the header in the OpenAPI schema; enforcement is the middleware below
api_key_scheme = APIKeyHeader(name=API_KEY_HEADER_NAME, auto_error=False)


def is_docs_path(path: str) -> bool:
    return path in DOCS_PATHS or any(
        path == prefix or path.startswith(prefix + "/") for prefix in DOCS_PATH_PREFIXES
    )


def _api_key_matches(provided: str | None, expected: str) -> bool:
    if not provided:
        return False
    return secrets.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


def _create_provider(azure_ad: AzureADConfig, use_mock: bool) -> MailProvider:
    if use_mock:
        from graphlinker.mail_provider.graph_mock import GraphMockProvider

        logger.info("api.lifespan.mock_provider")
        return GraphMockProvider(inbox_path=MOCK_INBOX_PATH, sent_items_path=MOCK_SENT_ITEMS_PATH)

    from graphlinker.mail_provider.graph_real import GraphProvider

    logger.info("api.lifespan.creating_provider")
    return GraphProvider(
        tenant_id=azure_ad.tenant_id,
        client_id=azure_ad.client_id,
        client_secret=azure_ad.client_secret,
    )


@asynccontextmanager
async def _lifespan(app: FastAPI, azure_ad: AzureADConfig, use_mock: bool):
    """Create the provider in the server's event loop unless one was injected."""
    if getattr(app.state, "gateway", None) is None:
        provider = _create_provider(azure_ad, use_mock)
        app.state.gateway = MailGateway(app.state.evaluator, reader=provider, sender=provider)
    yield
    logger.info("api.lifespan.shutdown")


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(SenderNotAllowedError)
    async def _sender_not_allowed(request: Request, exc: SenderNotAllowedError) -> JSONResponse:
        return JSONResponse(status_code=401, content={"detail": str(exc)})

    @app.exception_handler(RecipientNotAllowedError)
    async def _recipient_not_allowed(request: Request, exc: RecipientNotAllowedError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(AttachmentDecodeError)
    async def _attachment_decode(request: Request, exc: AttachmentDecodeError) -> JSONResponse:
        logger.warning("api.attachment_decode_error", attachment=exc.name)
        return JSONResponse(status_code=400, content={"detail": str(exc)})


def create_app(
    provider: Optional[MailProvider] = None,
    azure_ad: AzureADConfig | None = None,
    api_key: str | None = None,
    use_mock: bool = False,
) -> FastAPI:
    """
    Create the FastAPI app. Configuration is loaded (and validated) here so that a bad
    config fails before the server starts; raises ConfigurationError.
    provider: the MailProvider to use; when None the lifespan creates the Graph
    provider (or the mock provider when use_mock is True).
    """
    if azure_ad is None:
        azure_ad = load_gateway_config()
    expected_key = api_key if api_key is not None else GATEWAY_API_KEY
    if not expected_key:
        raise ConfigurationError("GATEWAY_API_KEY is not set; refusing to start without a shared secret.")

    evaluator = AccessEvaluator(AuthorizationConfig.from_azure_ad(azure_ad))
    app = FastAPI(
        title="GraphLinker API",
        version=__version__,
        lifespan=lambda app: _lifespan(app, azure_ad=azure_ad, use_mock=use_mock),
    )
    app.state.evaluator = evaluator
    app.state.gateway = (
        MailGateway(evaluator, reader=provider, sender=provider) if provider is not None else None
    )

    @app.middleware("http")
    async def require_api_key(request: Request, call_next):
        """Reject requests without a matching X-API-KEY before any routing or allow-list check."""
        path = request.url.path
        with request_context(request_id=uuid.uuid4().hex[:12], method=request.method, path=path):
            if not is_docs_path(path):
                provided = request.headers.get(API_KEY_HEADER_NAME)
                if not _api_key_matches(provided, expected_key):
                    logger.warning("api.unauthorized", reason="missing" if not provided else "mismatch")
                    return JSONResponse(status_code=401, content={"detail": UNAUTHORIZED_DETAIL})
            return await call_next(request)

    # Added last so it wraps the API key check and answers CORS preflight requests
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_exception_handlers(app)
    app.include_router(emails_router, dependencies=[Security(api_key_scheme)])

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    logger.info("api.app_created", account_count=len(evaluator.config))
    return app
