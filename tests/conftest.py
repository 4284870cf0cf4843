"""
Fixtures compartidas: base SQLite en memoria por test, sesión, servicios del
inventario y cliente HTTP de FastAPI.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import event
from sqlmodel import Session

from app.main import create_app
from app.models.database import build_engine, create_db_and_tables
from app.services.adjustment_engine import AdjustmentEngine
from app.services.cost_engine import CostEngine
from app.services.lot_ledger import LotLedger
from app.services.movement_log import MovementLog
from app.services.purchases import PurchaseService
from app.services.reports import InventoryReports
from app.settings import Settings
from tests.factories import ALL_FACTORIES


@pytest.fixture
def settings():
    return Settings(database_url="sqlite://", log_level="DEBUG")


@pytest.fixture
def engine(settings):
    """SQLite en memoria con claves foráneas activas, como en PostgreSQL."""
    engine = build_engine(settings)

    @event.listens_for(engine, "connect")
    def enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    create_db_and_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        for factory_class in ALL_FACTORIES:
            factory_class._meta.sqlalchemy_session = session
        yield session


@pytest.fixture
def lots(session):
    return LotLedger(session)


@pytest.fixture
def costs(session):
    return CostEngine(session)


@pytest.fixture
def movements(session, lots, costs):
    return MovementLog(session, lots, costs)


@pytest.fixture
def adjustments(session, lots, movements):
    return AdjustmentEngine(session, lots, movements)


@pytest.fixture
def purchases(lots, movements, costs):
    return PurchaseService(lots, movements, costs)


@pytest.fixture
def reports(session):
    return InventoryReports(session)


@pytest.fixture
def client(settings, engine):
    """Cliente HTTP contra una app que usa el engine en memoria del test."""
    app = create_app(settings, engine=engine)
    with TestClient(app) as client:
        yield client
