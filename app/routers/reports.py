import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from app.dependencies import get_movement_log, get_reports
from app.schemas.movement import MovementResponse, MovementType
from app.schemas.report import ExpiringLotResponse, StockCountRow, StockReportRow
from app.services.movement_log import MovementLog
from app.services.reports import InventoryReports

router = APIRouter(prefix="/inventory/reports", tags=["Informes de inventario"])


@router.get("/stock", response_model=List[StockReportRow])
def get_stock_report(reports: InventoryReports = Depends(get_reports)):
    """Stock valorizado por producto, con estado `low`/`ok`."""
    try:
        return reports.stock_report()
    except SQLAlchemyError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al obtener el informe de stock",
        )


@router.get("/movements", response_model=List[MovementResponse])
def get_movements_history(
    start_date: Optional[datetime.datetime] = Query(None),
    end_date: Optional[datetime.datetime] = Query(None),
    type: Optional[MovementType] = Query(None),
    product_id: Optional[str] = Query(None),
    movements: MovementLog = Depends(get_movement_log),
):
    """Historial de movimientos, más recientes primero."""
    try:
        history = movements.history(
            start_date=start_date,
            end_date=end_date,
            movement_type=type,
            product_id=product_id,
        )
    except SQLAlchemyError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al obtener el historial de movimientos",
        )

    return [MovementResponse.model_validate(movement) for movement in history]


@router.get("/low-stock", response_model=List[StockReportRow])
def get_low_stock_products(reports: InventoryReports = Depends(get_reports)):
    try:
        return reports.low_stock_products()
    except SQLAlchemyError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al obtener los productos con stock bajo",
        )


@router.get("/expiration", response_model=List[ExpiringLotResponse])
def get_lot_expiration_report(
    days: int = Query(30, ge=0, le=3650),
    reports: InventoryReports = Depends(get_reports),
):
    """Lotes con stock que caducan en los próximos `days` días."""
    try:
        return reports.lot_expiration_report(days)
    except SQLAlchemyError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al obtener el informe de caducidad",
        )


@router.get("/stock-count", response_model=List[StockCountRow])
def get_stock_count_report(reports: InventoryReports = Depends(get_reports)):
    try:
        return reports.stock_count_report()
    except SQLAlchemyError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al obtener el informe de inventario",
        )
