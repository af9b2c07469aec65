from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import Settings, settings as default_settings
from app.core.errors import register_exception_handlers
from app.core.logging import logger, setup_logging
from app.core.middleware import install_middleware
from app.routers import health, scans
from app.services.jobs import JobStore
from app.services.scan_service import ScanService


def _banner(settings: Settings) -> str:
    p = settings.API_PREFIX
    return "\n".join([
        f"{settings.APP_NAME} {settings.APP_VERSION} ({settings.APP_ENV})",
        f"  API running at: http://{settings.HOST}:{settings.PORT}{p}",
        f"  POST   {p}/scans              start a scan",
        f"  GET    {p}/scans              list all scans",
        f"  GET    {p}/scans/{{id}}         get scan status",
        f"  DELETE {p}/scans/{{id}}         delete a scan",
        f"  GET    {p}/scans/{{id}}/report  get scan report",
    ])


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("\n%s", _banner(settings))
        yield
        await app.state.scan_service.shutdown()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        docs_url="/docs",
        openapi_url="/openapi.json",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # ── single store per app, injected into the service
    app.state.settings = settings
    app.state.scan_service = ScanService(JobStore(), settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    install_middleware(app)
    register_exception_handlers(app)

    app.include_router(health, prefix=settings.API_PREFIX)
    app.include_router(scans, prefix=settings.API_PREFIX)

    @app.get("/")
    async def root():
        return {"name": settings.APP_NAME, "env": settings.APP_ENV, "message": "See /docs"}

    return app


setup_logging(default_settings.LOG_LEVEL)
app = create_app()
