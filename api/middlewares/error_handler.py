"""Error handling middleware."""

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from api.schemas.agent import ErrorResponse
from app.modules.ai_module.domain.exceptions import ModelNotConfigured

logger = logging.getLogger(__name__)


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Middleware for handling and logging errors raised before a stream opens."""

    async def dispatch(self, request: Request, call_next) -> Response:
        try:
            response = await call_next(request)
            return response
        except HTTPException:
            raise
        except ModelNotConfigured as e:
            logger.error(f"Model not configured: {str(e)}")
            error_response = ErrorResponse(
                error="service_unavailable",
                message="The language model is not configured.",
            )
            return JSONResponse(status_code=503, content=error_response.model_dump(mode="json"))
        except Exception as e:
            logger.error(f"Unexpected error: {str(e)}", exc_info=True)

            error_response = ErrorResponse(
                error="internal_server_error",
                message="An unexpected error occurred. Please try again later.",
                details={"type": type(e).__name__} if logger.isEnabledFor(logging.DEBUG) else None,
            )

            return JSONResponse(
                status_code=500,
                content=error_response.model_dump(mode="json"),
            )


def add_error_handling_middleware(app: FastAPI) -> None:
    """Add error handling middleware to FastAPI app."""
    app.add_middleware(ErrorHandlingMiddleware)
