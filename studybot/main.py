"""
Study Bot - Main FastAPI Application
"""

import logging
from typing import Any, Optional
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from .config import settings
from .api import chat_router, sessions_router
from .core import ChatService
from .core.logging_config import setup_logging
from .llm import LLMProvider, create_llm_provider
from .middleware import RequestLoggingMiddleware
from .storage import SessionStore, create_session_store

# Logger will be initialized after setup_logging() is called
logger = logging.getLogger(__name__)


def _get_llm_provider(config: Any) -> Optional[LLMProvider]:
    """Get configured LLM provider or None."""
    return create_llm_provider(
        provider=config.llm_provider,
        api_key=config.gemini_api_key,
        model=config.llm_model,
        base_url=config.llm_base_url,
        default_temperature=config.llm_temperature,
        default_max_tokens=config.llm_max_tokens,
        timeout=config.llm_timeout,
        log_calls=config.log_llm_calls,
    )


def create_app(
    config: Any = settings,
    session_store: Optional[SessionStore] = None,
    llm_provider: Optional[LLMProvider] = None,
    configure_logging: bool = True,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: Settings object
        session_store: Store to use instead of selecting one at startup
        llm_provider: Provider to use instead of the configured one
        configure_logging: Install the logging handlers on startup

    Returns:
        FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifespan context manager for startup and shutdown events."""
        # Startup
        if configure_logging:
            setup_logging(config)

        store = session_store or await create_session_store(config)
        provider = llm_provider or _get_llm_provider(config)
        if provider is None:
            logger.warning("GEMINI_API_KEY is not set; chat requests will fail until it is configured")

        app.state.session_store = store
        app.state.chat_service = ChatService(
            store, provider, system_instruction=config.system_instruction
        )

        logger.info(f"Starting {config.app_name} v{config.app_version}")
        logger.info(f"Session store: {store.name}")
        logger.info(f"Log level: {config.log_level.upper()}")
        yield
        # Shutdown
        await store.close()
        logger.info(f"Shutting down {config.app_name}")

    app = FastAPI(
        title=config.app_name,
        version=config.app_version,
        description="AI-powered academic assistant chat backend",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if config.log_api_requests:
        app.add_middleware(RequestLoggingMiddleware)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Report malformed request bodies as 400 Bad Request."""
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": jsonable_encoder(exc.errors())},
        )

    app.include_router(chat_router, prefix=config.api_prefix)
    app.include_router(sessions_router, prefix=config.api_prefix)

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "app": config.app_name,
            "version": config.app_version,
            "status": "running",
            "message": "Study Bot API is running!"
        }

    @app.get("/health")
    async def health_check(request: Request):
        """Health check endpoint."""
        store = getattr(request.app.state, "session_store", None)
        return {
            "status": "healthy",
            "storage": store.name if store else None,
            "version": config.app_version
        }

    return app


app = create_app()


def run() -> None:
    """Run the API server with uvicorn."""
    import uvicorn
    uvicorn.run(
        "studybot.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.debug
    )


if __name__ == "__main__":
    run()
