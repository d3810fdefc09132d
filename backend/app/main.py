"""FastAPI application entry point"""
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from app.config import settings
from app.database import engine, get_db, init_db, close_db
from app.exceptions import AppException
from app.routers import (
    auth_router,
    owners_router,
    properties_router,
    locations_router,
)

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the broker tables on startup, release the engine on shutdown"""
    logger.info(
        f"Starting {settings.APP_NAME} v{settings.APP_VERSION} "
        f"({settings.ENVIRONMENT}, {engine.url.get_backend_name()} store)"
    )
    await init_db()

    yield

    await close_db()
    logger.info(f"{settings.APP_NAME} stopped")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Brokerage record-keeper: listings, ownership history and activity logs",
    docs_url="/api/docs" if settings.DEBUG else None,
    redoc_url="/api/redoc" if settings.DEBUG else None,
    openapi_url="/api/openapi.json" if settings.DEBUG else None,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def error_response(
    request: Request,
    status_code: int,
    code: str,
    message: str,
    details: Optional[Dict[str, Any]] = None
) -> JSONResponse:
    """Error body shared by every handler: error, message, details, path"""
    return JSONResponse(
        status_code=status_code,
        content={
            "error": code,
            "message": message,
            "details": details or {},
            "path": str(request.url.path)
        }
    )


@app.exception_handler(AppException)
async def app_exception_handler(request: Request, exc: AppException):
    """NotFound, validation, auth, conflict, store and upstream errors"""
    return error_response(request, exc.status_code, exc.code, exc.message, exc.details)


@app.exception_handler(SQLAlchemyError)
async def store_exception_handler(request: Request, exc: SQLAlchemyError):
    """Data store failures outside an explicit commit"""
    logger.error(f"Data store error on {request.url.path}: {exc}")
    return error_response(request, 500, "STORE_ERROR", "Data store error", {"reason": str(exc)})


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unexpected error on {request.method} {request.url.path}: {exc}")
    return error_response(request, 500, "INTERNAL_ERROR", "An unexpected error occurred")


# Owner routes first so /properties/owners/{id} is not read as a property id
app.include_router(auth_router, prefix=settings.API_PREFIX)
app.include_router(owners_router, prefix=settings.API_PREFIX)
app.include_router(properties_router, prefix=settings.API_PREFIX)
app.include_router(locations_router, prefix=settings.API_PREFIX)


@app.get("/health")
async def health_check():
    """Liveness: the process is up"""
    return {
        "status": "healthy",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT
    }


@app.get("/health/ready")
async def readiness_check(db: AsyncSession = Depends(get_db)):
    """Readiness: the request session can reach the property store"""
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Readiness check failed: {e}")
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "database": "disconnected", "error": str(e)}
        )
    return {"status": "ready", "database": "connected"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG
    )
