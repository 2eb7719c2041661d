from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from loguru import logger
from prometheus_client import CONTENT_TYPE_LATEST

from facilitator_analytics import get_metrics_registry
from facilitator_analytics.api.routers import facilitators, sellers
from facilitator_analytics.api.routes import router
from facilitator_analytics.facilitators import get_facilitators


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events"""
    registry = get_facilitators()
    logger.info(f"Facilitator Analytics API starting up with {len(registry)} facilitators...")
    yield
    logger.info("Facilitator Analytics API shutting down gracefully...")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Facilitator Analytics API",
        description="Transfer statistics for facilitated token payments: totals, time series and leaderboards",
        version="1.0.0",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router, prefix="/api/v1", tags=["statistics"])
    app.include_router(facilitators.router, prefix="/api/v1")
    app.include_router(sellers.router, prefix="/api/v1")

    @app.get("/health")
    def health_check():
        return {"status": "healthy"}

    @app.get("/metrics", response_class=PlainTextResponse)
    def metrics():
        return PlainTextResponse(get_metrics_registry().get_metrics_text(), media_type=CONTENT_TYPE_LATEST)

    return app


app = create_app()
