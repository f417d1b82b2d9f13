"""Diro API application."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncEngine

from diro.core.config import Settings
from diro.core.database import build_engine, build_session_factory
from diro.routes import reservations, webhooks
from diro.services.pricing import PricingPolicy, fixed_price
from diro.services.xendit import XenditClient


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    yield
    await app.state.payment_client.aclose()
    await app.state.engine.dispose()


def create_app(
    settings: Settings | None = None,
    payment_client: XenditClient | None = None,
    engine: AsyncEngine | None = None,
    pricing: PricingPolicy | None = None,
) -> FastAPI:
    """Build the application and the resources it owns.

    Anything not passed in is created from ``settings``. The engine and the
    payment client live on ``app.state`` and are released on shutdown.
    """
    settings = settings or Settings()

    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        docs_url=f"{settings.api_prefix}/docs",
        openapi_url=f"{settings.api_prefix}/openapi.json",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = engine or build_engine(settings)
    app.state.session_factory = build_session_factory(app.state.engine)
    app.state.payment_client = payment_client or XenditClient(
        settings.xendit_secret_key,
        base_url=settings.xendit_base_url,
        timeout=settings.xendit_timeout_seconds,
    )
    app.state.pricing = pricing or fixed_price(settings.reservation_price)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Mount routes
    app.include_router(reservations.router, prefix=settings.api_prefix)
    app.include_router(webhooks.router, prefix=settings.api_prefix)

    @app.get("/health")
    async def health():
        return {"status": "healthy", "app": settings.app_name}

    return app
