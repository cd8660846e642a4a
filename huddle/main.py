"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from huddle.api import (
    admin,
    auth,
    channels,
    dms,
    messages,
    notifications,
    search,
    standups,
    users,
)
from huddle.config import get_settings
from huddle.services.standup import get_standup_scheduler

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    yield
    # Pending flushes are not carried across restarts; the lazy flush closes them
    pending = get_standup_scheduler().pending()
    if pending:
        logger.info(f"Shutting down with standup flushes pending for channels {pending}")


app = FastAPI(
    title="Huddle API",
    description="Team messaging with channels, direct messages, standups and search",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report malformed requests as input errors (400) rather than 422."""
    errors = [
        {"loc": list(error["loc"]), "msg": error["msg"], "type": error["type"]}
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": errors},
    )


# CORS middleware for development
if settings.is_development:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:3000",
            "http://localhost:5173",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

# Register routers
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(channels.router)
app.include_router(standups.router)
app.include_router(dms.router)
app.include_router(messages.router)
app.include_router(search.router)
app.include_router(notifications.router)
app.include_router(admin.router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "environment": settings.environment}
