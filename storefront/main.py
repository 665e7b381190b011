# storefront/main.py
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

# import wszystkich modeli przed create_all
import storefront.data.models  # noqa: F401
from storefront.api import ROUTERS
from storefront.api.errors import register_error_handlers
from storefront.data.database import Base, engine
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def init_db():
    logger.info(f"Inicjalizacja bazy, tabele: {list(Base.metadata.tables.keys())}")
    try:
        Base.metadata.create_all(bind=engine)
    except Exception:
        logger.exception("Nie udalo sie utworzyc tabel")
        raise
    logger.info("Tabele gotowe")


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="Storefront",
        version="1.0.0",
        lifespan=lifespan,
    )

    register_error_handlers(app)
    for router in ROUTERS:
        app.include_router(router)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
