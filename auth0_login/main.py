"""
Main FastAPI application entry point
"""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Request, status
from sqlalchemy import text
from sqlalchemy.orm import Session

from auth0_login.api.v1.api import api_router
from auth0_login.api.v1.endpoints.auth0 import LOGIN_FAILED_MESSAGE
from auth0_login.core.config import settings
from auth0_login.core.exceptions import Auth0LoginError
from auth0_login.core.logging import setup_logging
from auth0_login.db.database import get_db, init_db
from auth0_login.utils.url import MESSAGE_ERROR, redirect_with_message

logger = logging.getLogger(__name__)

# Configure logging first
setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    debug=settings.DEBUG,
    lifespan=lifespan,
)

app.include_router(api_router, prefix=settings.API_V1_STR)


@app.exception_handler(Auth0LoginError)
async def auth0_login_error_handler(request: Request, exc: Auth0LoginError):
    """Abort the login: log, then send the user home with a generic error."""
    logger.error(
        f"Login aborted: {exc}",
        extra={"path": request.url.path, "error_class": type(exc).__name__},
    )
    return redirect_with_message("/", LOGIN_FAILED_MESSAGE, MESSAGE_ERROR)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    """Last resort for unexpected failures: log the trace and send the user home."""
    logger.error(
        f"Unhandled error: {exc}",
        exc_info=exc,
        extra={"path": request.url.path, "error_class": type(exc).__name__},
    )
    return redirect_with_message("/", LOGIN_FAILED_MESSAGE, MESSAGE_ERROR)


@app.get("/health")
def health_check(db: Session = Depends(get_db)):
    """Health check endpoint with database connectivity verification."""
    try:
        db.execute(text("SELECT 1")).scalar()
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={
                "status": "unhealthy",
                "environment": settings.ENVIRONMENT,
                "database": "error",
                "error": str(e),
            },
        )

    return {
        "status": "healthy",
        "environment": settings.ENVIRONMENT,
        "database": "connected",
    }


if __name__ == "__main__":
    import os

    import uvicorn

    host = os.getenv("UVICORN_HOST", "127.0.0.1")
    port = int(os.getenv("UVICORN_PORT", "8000"))
    uvicorn.run(app, host=host, port=port)
