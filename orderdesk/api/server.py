"""FastAPI app factory for the order desk."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from orderdesk.api.config_routes import router as config_router
from orderdesk.api.routes import router as desk_router
from orderdesk.orchestrator import OrderDesk
from orderdesk.utils.logger import get_logger

logger = get_logger("orderdesk.api.server")


@asynccontextmanager
async def _lifespan(app: FastAPI):
    """Build the desk from settings unless one was injected, and dispose what we built."""
    owned = getattr(app.state, "desk", None) is None
    if owned:
        logger.info("api.lifespan.creating_desk")
        app.state.desk = OrderDesk.from_settings()
    yield
    if owned:
        app.state.desk.close()
        app.state.desk = None


def create_app(desk: OrderDesk | None = None) -> FastAPI:
    """
    Create FastAPI app. When desk is passed (tests, embedding) it is used as-is and not closed;
    otherwise the lifespan builds one from environment settings.
    """
    app = FastAPI(title="Order Desk", version="0.1.0", lifespan=_lifespan)
    app.state.desk = desk

    app.include_router(desk_router)
    app.include_router(config_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app
