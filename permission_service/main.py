import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from permission_service.api.exception_handlers import register_exception_handlers
from permission_service.api.routes import health, permissions
from permission_service.core.config import settings
from permission_service.core.exceptions import StoreInitError
from permission_service.core.logging import configure_logging
from permission_service.db.mongo import create_client, open_store
from permission_service.services.health import HealthMonitor

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    client = create_client(settings)
    try:
        app.state.store = open_store(client, settings)
    except StoreInitError:
        client.close()
        raise
    app.state.health_monitor = HealthMonitor(app.state.store, interval=settings.HEALTH_CHECK_INTERVAL)
    app.state.health_monitor.start()
    logger.info("%s started", settings.PROJECT_NAME)
    try:
        yield
    finally:
        app.state.health_monitor.stop()
        client.close()


def create_app(use_lifespan: bool = True) -> FastAPI:
    app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan if use_lifespan else None)

    # include routers
    app.include_router(permissions.router)
    app.include_router(health.router)

    register_exception_handlers(app)
    return app


permission_service = create_app()


def run() -> None:
    uvicorn.run(permission_service, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
