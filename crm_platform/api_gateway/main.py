"""
Main FastAPI Application

CRM platform API gateway with:
- Tenant account endpoints
- CORS configuration
- Health checks
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from motor.motor_asyncio import AsyncIOMotorClient
from structlog import get_logger

from ..config import get_config
from ..shared_services.logging_config import setup_logging
from ..tenant_management.api_router import router as tenant_router
from ..tenant_management.db_service import TenantDBService

config = get_config()
setup_logging()
logger = get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Opens the shared MongoDB client on startup and closes it on shutdown.
    """
    logger.info("starting_crm_platform", environment=config.environment.value)

    app.state.mongo_client = AsyncIOMotorClient(config.platform_mongo_db_url)
    app.state.platform_db = app.state.mongo_client[config.platform_mongo_db_name]

    tenant_service = TenantDBService(app.state.platform_db)
    await tenant_service.ensure_indexes()

    logger.info(
        "platform_initialized",
        database=config.platform_mongo_db_name,
        optimistic_locking=tenant_service.optimistic_locking,
    )

    yield

    logger.info("shutting_down_platform")
    app.state.mongo_client.close()
    logger.info("platform_shutdown_complete")


app = FastAPI(
    title="CRM Platform",
    description="Multi-tenant CRM account management API",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs" if not config.is_production else None,
    redoc_url="/redoc" if not config.is_production else None,
    openapi_url="/openapi.json" if not config.is_production else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.get_allowed_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", tags=["Platform"], summary="Health check")
async def health_check():
    """Basic health check endpoint."""
    return {
        "status": "healthy",
        "environment": config.environment.value,
        "version": "0.1.0",
    }


@app.get("/ping", tags=["Platform"], summary="Ping endpoint")
async def ping():
    """Simple ping endpoint."""
    return {"message": "pong"}


@app.get("/", tags=["Platform"], summary="Root endpoint")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "CRM Platform",
        "version": "0.1.0",
        "environment": config.environment.value,
        "docs_url": "/docs" if not config.is_production else None,
    }


@app.exception_handler(404)
async def not_found_handler(request: Request, exc):
    """Custom 404 handler that keeps the detail of explicit HTTPExceptions."""
    detail = exc.detail if isinstance(exc, HTTPException) else "Resource not found"
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": detail, "path": str(request.url.path)},
    )


@app.exception_handler(500)
async def server_error_handler(request: Request, exc):
    """Custom 500 handler for errors that escaped the routers."""
    logger.error("internal_server_error", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


app.include_router(tenant_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "crm_platform.api_gateway.main:app",
        host="0.0.0.0",
        port=8000,
        reload=config.is_local,
        log_level=config.log_level.lower(),
    )
