import datetime
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel import Session
from sqlalchemy.exc import SQLAlchemyError
from app.dependencies import (
    get_adjustment_engine,
    get_lot_ledger,
    get_movement_log,
    get_purchase_service,
)
from app.models.database import get_db, unit_of_work
from app.schemas.adjustment import (
    AdjustmentCreate,
    AdjustmentHistoryEntry,
    AdjustmentResponse,
)
from app.schemas.lot import LotCreate, LotListResponse, LotResponse
from app.schemas.movement import MovementCreate, MovementResponse, StockLevelResponse
from app.schemas.purchase import PurchaseCreate, PurchaseResponse
from app.services.adjustment_engine import AdjustmentEngine
from app.services.lot_ledger import LotLedger
from app.services.movement_log import MovementLog
from app.services.purchases import PurchaseService
from app.utils.logging_config import LOGGER_NAME

logger = logging.getLogger(f"{LOGGER_NAME}.api")

router = APIRouter(prefix="/inventory", tags=["Inventario"])


### LOTES ###
@router.post("/lots", response_model=LotResponse, status_code=status.HTTP_201_CREATED)
def create_lot(
    lot_data: LotCreate,
    db: Session = Depends(get_db),
    lots: LotLedger = Depends(get_lot_ledger),
):
    """Crea un lote; su cantidad actual empieza igual a la inicial."""
    try:
        with unit_of_work(db):
            lot = lots.create_lot(
                lot_data.product_id,
                lot_data.code,
                lot_data.quantity_initial,
                manufacture_date=lot_data.manufacture_date,
                expiration_date=lot_data.expiration_date,
                status=lot_data.status,
            )
    except SQLAlchemyError:
        logger.exception("Error creating lot %s", lot_data.code)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al crear el lote",
        )

    return LotResponse.model_validate(lot)


@router.get("/lots", response_model=LotListResponse)
def get_lots(
    product_id: Optional[str] = Query(None),
    lots: LotLedger = Depends(get_lot_ledger),
):
    """Lista los lotes, más recientes primero."""
    try:
        data = lots.list_lots(product_id)
    except SQLAlchemyError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error de conexión con la base de datos",
        )

    return LotListResponse(
        data=[LotResponse.model_validate(lot) for lot in data], total=len(data)
    )


@router.get("/lots/{lot_id}", response_model=LotResponse)
def get_lot(lot_id: str, lots: LotLedger = Depends(get_lot_ledger)):
    try:
        lot = lots.find_lot(lot_id)
    except SQLAlchemyError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error de conexión con la base de datos",
        )

    return LotResponse.model_validate(lot)


### MOVIMIENTOS ###
@router.post(
    "/movements", response_model=MovementResponse, status_code=status.HTTP_201_CREATED
)
def create_movement(
    movement_data: MovementCreate,
    db: Session = Depends(get_db),
    movements: MovementLog = Depends(get_movement_log),
):
    """
    Registra un movimiento de stock.

    - Si indica un lote, su cantidad actual se actualiza en la misma transacción.
    - Las entradas (`in`, `production_in`) con costo actualizan el costo del producto.
    """
    try:
        with unit_of_work(db):
            movement = movements.record(
                movement_data.product_id,
                movement_data.type,
                movement_data.quantity,
                lot_id=movement_data.lot_id,
                cost=movement_data.cost,
                reference=movement_data.reference,
                production_order_id=movement_data.production_order_id,
            )
    except SQLAlchemyError:
        logger.exception("Error recording movement for %s", movement_data.product_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al registrar el movimiento de stock",
        )

    return MovementResponse.model_validate(movement)


@router.get("/stock/{product_id}", response_model=StockLevelResponse)
def get_stock_level(
    product_id: str, movements: MovementLog = Depends(get_movement_log)
):
    """Stock total de un producto (lotes con cantidad positiva)."""
    try:
        return movements.stock_level(product_id)
    except SQLAlchemyError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error de conexión con la base de datos",
        )


@router.delete("/production-orders/{production_order_id}/movements")
def delete_production_order_movements(
    production_order_id: str,
    db: Session = Depends(get_db),
    movements: MovementLog = Depends(get_movement_log),
):
    """Borra los movimientos asociados a una orden de producción."""
    try:
        with unit_of_work(db):
            deleted = movements.delete_for_production_order(production_order_id)
    except SQLAlchemyError:
        logger.exception("Error deleting movements of order %s", production_order_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al borrar los movimientos de la orden",
        )

    return {"deleted": deleted}


### AJUSTES ###
@router.post(
    "/adjustments",
    response_model=AdjustmentResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_stock_adjustment(
    adjustment_data: AdjustmentCreate,
    db: Session = Depends(get_db),
    adjustments: AdjustmentEngine = Depends(get_adjustment_engine),
):
    """Ajusta el stock de un producto con un delta con signo."""
    try:
        with unit_of_work(db):
            result = adjustments.adjust(
                adjustment_data.product_id,
                adjustment_data.quantity_adjustment,
                adjustment_data.reason,
                lot_id=adjustment_data.lot_id,
                reference=adjustment_data.reference,
            )
    except SQLAlchemyError:
        logger.exception("Error adjusting stock of %s", adjustment_data.product_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al registrar el ajuste de stock",
        )

    return result


@router.get("/adjustments", response_model=List[AdjustmentHistoryEntry])
def get_adjustment_history(
    start_date: Optional[datetime.datetime] = Query(None),
    end_date: Optional[datetime.datetime] = Query(None),
    product_id: Optional[str] = Query(None),
    adjustments: AdjustmentEngine = Depends(get_adjustment_engine),
):
    """Historial de ajustes con el stock previo y resultante de cada uno."""
    try:
        return adjustments.get_adjustment_history(
            start_date=start_date, end_date=end_date, product_id=product_id
        )
    except SQLAlchemyError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al obtener el historial de ajustes",
        )


### COMPRAS ###
@router.post(
    "/purchases", response_model=PurchaseResponse, status_code=status.HTTP_201_CREATED
)
def register_purchase(
    purchase_data: PurchaseCreate,
    db: Session = Depends(get_db),
    purchases: PurchaseService = Depends(get_purchase_service),
):
    """Registra una compra: lote, movimiento de entrada y costo medio ponderado."""
    try:
        with unit_of_work(db):
            result = purchases.register_purchase(
                purchase_data.product_id,
                purchase_data.quantity,
                purchase_data.unit_cost,
                lot_code=purchase_data.lot_code,
                supplier=purchase_data.supplier,
                invoice_number=purchase_data.invoice_number,
                manufacture_date=purchase_data.manufacture_date,
                expiration_date=purchase_data.expiration_date,
            )
    except SQLAlchemyError:
        logger.exception("Error registering purchase of %s", purchase_data.product_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al registrar la compra",
        )

    return result
