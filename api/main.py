"""Main FastAPI application."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from api.middlewares.cors import add_cors_middleware
from api.middlewares.error_handler import add_error_handling_middleware
from api.routes.agent import router as agent_router
from api.schemas.agent import HealthResponse
from app.core.config.settings import settings

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info("Starting Adaptic Ticket Agent API")
    logger.info(
        f"Try: http://{settings.api_host}:{settings.api_port}/api/agent?input=hello&chat_history=[]"
    )
    yield
    logger.info("Shutting down Adaptic Ticket Agent API")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    app = FastAPI(
        title="Adaptic Ticket Agent API",
        description="Conversational agent that prepares NFT ticketing contracts",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Add middlewares
    add_cors_middleware(app)
    add_error_handling_middleware(app)

    # Add routes
    app.include_router(agent_router)

    # Health check endpoint
    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="healthy")

    return app


# Create the app instance
app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        log_level="info",
    )
