import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from lifeadmin.config import get_settings
from lifeadmin.database import engine, Base
from lifeadmin.services.analytics_config import load_analytics_config_from_yaml

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Threshold overrides for the analytics engines
    if settings.analytics_config_path:
        load_analytics_config_from_yaml(settings.analytics_config_path)
        logger.info("Loaded analytics config", extra={"path": settings.analytics_config_path})

    # Create tables on startup
    async with engine.begin() as conn:
        # Import all models to register them with Base
        from lifeadmin import models  # noqa: F401
        await conn.run_sync(Base.metadata.create_all)
    yield
    # Cleanup on shutdown
    await engine.dispose()


app = FastAPI(
    title="Life Admin API",
    description="Personal health insights and relationship tracking",
    version="0.1.0",
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health-check")
async def health_check():
    return {"status": "healthy", "environment": settings.environment}


# API routers
from lifeadmin.api.v1.router import api_router

app.include_router(api_router, prefix="/api/v1")
