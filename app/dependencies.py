from fastapi import Depends, Request
from sqlmodel import Session
from app.models.database import get_db
from app.services.adjustment_engine import AdjustmentEngine
from app.services.cost_engine import CostEngine
from app.services.lot_ledger import LotLedger
from app.services.movement_log import MovementLog
from app.services.purchases import PurchaseService
from app.services.reports import InventoryReports
from app.settings import Settings


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


# Todos los servicios de una petición comparten la misma sesión (FastAPI
# cachea `get_db` por petición), así participan en la misma unidad de trabajo.


def get_lot_ledger(
    db: Session = Depends(get_db), settings: Settings = Depends(get_settings)
) -> LotLedger:
    return LotLedger(db, allow_negative=settings.allow_negative_lots)


def get_cost_engine(db: Session = Depends(get_db)) -> CostEngine:
    return CostEngine(db)


def get_movement_log(
    db: Session = Depends(get_db),
    lots: LotLedger = Depends(get_lot_ledger),
    costs: CostEngine = Depends(get_cost_engine),
    settings: Settings = Depends(get_settings),
) -> MovementLog:
    return MovementLog(db, lots, costs, cost_policy=settings.movement_cost_policy)


def get_adjustment_engine(
    db: Session = Depends(get_db),
    lots: LotLedger = Depends(get_lot_ledger),
    movements: MovementLog = Depends(get_movement_log),
) -> AdjustmentEngine:
    return AdjustmentEngine(db, lots, movements)


def get_purchase_service(
    lots: LotLedger = Depends(get_lot_ledger),
    movements: MovementLog = Depends(get_movement_log),
    costs: CostEngine = Depends(get_cost_engine),
) -> PurchaseService:
    return PurchaseService(lots, movements, costs)


def get_reports(db: Session = Depends(get_db)) -> InventoryReports:
    return InventoryReports(db)
