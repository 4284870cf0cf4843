import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware  # CORS
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine
from app.exceptions import InventoryError
from app.models.database import build_engine, create_db_and_tables
from app.routers import inventory, products, reports
from app.settings import Settings
from app.utils.logging_config import LOGGER_NAME, configure_logging

logger = logging.getLogger(f"{LOGGER_NAME}.app")


def create_app(
    settings: Optional[Settings] = None, engine: Optional[Engine] = None
) -> FastAPI:
    """Construye la aplicación. El engine se crea a partir de `settings` si no
    se inyecta uno (los tests inyectan uno en memoria)."""
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    # Crear la base de datos y las tablas al iniciar la aplicación
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owns_engine = app.state.engine is None
        if owns_engine:
            app.state.engine = build_engine(settings)
        create_db_and_tables(app.state.engine)
        yield
        if owns_engine:
            app.state.engine.dispose()
            app.state.engine = None

    app = FastAPI(title="Cosmetic ERP", lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = engine

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.debug("Incoming request: %s %s", request.method, request.url.path)
        return await call_next(request)

    @app.exception_handler(InventoryError)
    async def inventory_error_handler(request: Request, exc: InventoryError):
        if exc.status_code >= 500:
            logger.error("Inventory error on %s: %s", request.url.path, exc.detail)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

    # Incluir routers
    app.include_router(products.router)
    app.include_router(inventory.router)
    app.include_router(reports.router)

    @app.get("/")
    def read_root():
        return {"message": "API funcionando correctamente"}

    return app


app = create_app()
