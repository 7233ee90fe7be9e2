import logging
from contextlib import asynccontextmanager
from zoneinfo import ZoneInfo

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pharmacy.api import api_router
from pharmacy.api.errors import register_error_handlers
from pharmacy.core.config import Settings, get_settings
from pharmacy.core.logging import setup_logging
from pharmacy.services.dashboard import DashboardService
from pharmacy.services.sales import SaleProcessor
from pharmacy.storage import Storage, build_storage
from pharmacy.storage.seed import seed_demo_data

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, storage: Storage | None = None) -> FastAPI:
    """Build the API around one explicitly constructed store.

    Tests pass a fresh `MemoryStorage`; production builds the backend named
    by `STORAGE_BACKEND`. Serve with `uvicorn --factory pharmacy.main:create_app`.
    """
    settings = settings or get_settings()
    storage = storage or build_storage(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await storage.init()
        logger.info(f"Storage ready: {storage.backend}")
        if settings.SEED_DEMO_DATA and await storage.is_empty():
            await seed_demo_data(storage)
        try:
            yield
        finally:
            await storage.close()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Pharmacy back office: inventory, point of sale, suppliers, customers and dashboards",
        version=settings.VERSION,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.storage = storage
    app.state.sale_processor = SaleProcessor(storage, tolerance=settings.TOTAL_TOLERANCE)
    app.state.dashboard = DashboardService(
        storage,
        tz=ZoneInfo(settings.TIMEZONE),
        stats_window_days=settings.STATS_WINDOW_DAYS,
        velocity_days=settings.SALES_VELOCITY_DAYS,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)
    app.include_router(api_router)

    @app.get("/health")
    async def health_check():
        return {"status": "ok", "version": settings.VERSION, "storage": storage.backend}

    return app


def run() -> None:
    import uvicorn

    setup_logging()
    uvicorn.run("pharmacy.main:create_app", factory=True, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    run()
