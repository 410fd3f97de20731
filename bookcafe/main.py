from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from bookcafe import __version__
from bookcafe.core.config import BASE_DIR, Settings
from bookcafe.core.errors import (
    http_exception_handler,
    rate_limit_exceeded_handler,
    storage_error_handler,
    unexpected_error_handler,
    validation_exception_handler,
)
from bookcafe.core.exceptions import StorageError
from bookcafe.database.db import build_engine, build_session_factory, init_models
from bookcafe.routers.api import api_books
from bookcafe.routers.html import html_books

logger = logging.getLogger(__name__)

tags_metadata = [
    {"name": "default", "description": "Health check"},
    {"name": "Books (API)", "description": "JSON reading list"},
    {"name": "Books (HTML)", "description": "Server rendered reading list page"},
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle"""
    settings: Settings = app.state.settings
    # Startup
    logger.info(f"🚀 {settings.APP_NAME} starting up...")
    logger.info(f"📊 Environment: {settings.ENVIRONMENT}, debug: {settings.DEBUG}")
    await init_models(app.state.engine)

    yield

    # Shutdown
    logger.info(f"🛑 {settings.APP_NAME} shutting down...")
    await app.state.engine.dispose()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application around an explicit settings object"""
    settings = settings or Settings()

    logging.basicConfig(
        level=logging.DEBUG if settings.DEBUG else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    app = FastAPI(
        title=settings.APP_NAME,
        description="Personal reading list: add, toggle, rate and pick your next book",
        version=__version__,
        openapi_tags=tags_metadata,
        debug=settings.DEBUG,
        lifespan=lifespan,
    )

    engine = build_engine(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    app.mount("/static", StaticFiles(directory=BASE_DIR / "static"), name="static")

    app.state.limiter = Limiter(
        key_func=get_remote_address,
        default_limits=settings.RATE_LIMITS,
        enabled=settings.RATE_LIMIT_ENABLED,
    )
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(StorageError, storage_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)

    # Flash messages
    app.add_middleware(
        SessionMiddleware, secret_key=settings.SECRET_KEY, max_age=7 * 24 * 3600
    )
    app.add_middleware(SlowAPIMiddleware)

    # the production build is served from the same origin
    if not settings.is_production:
        logger.info(f"🔐 CORS origins: {settings.ALLOWED_ORIGINS}")
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.ALLOWED_ORIGINS,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.get("/health", tags=["default"])
    async def health_check():
        """API status"""
        return {"status": "healthy", "app": settings.APP_NAME, "version": __version__}

    app.include_router(api_books.router)
    app.include_router(html_books.router)
    return app


app = create_app()


def run():
    import uvicorn

    settings: Settings = app.state.settings
    uvicorn.run("bookcafe.main:app", host=settings.HOST, port=settings.PORT)


# uvicorn bookcafe.main:app --reload
