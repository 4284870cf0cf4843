"""
Ajustes de stock: concilia el stock de un producto aplicando un delta con
signo, y reconstruye el historial de ajustes a partir de los movimientos.
"""

import datetime
import logging
from typing import List, Optional
from sqlmodel import Session, select
from app.exceptions import ValidationFailure
from app.models.lot import Lot
from app.models.product import Product
from app.models.stock_movement import StockMovement
from app.schemas.adjustment import AdjustmentHistoryEntry, AdjustmentResponse
from app.schemas.movement import MovementResponse
from app.services.lot_ledger import LotLedger
from app.services.movement_log import MovementLog, signed_quantity
from app.utils.logging_config import LOGGER_NAME

logger = logging.getLogger(f"{LOGGER_NAME}.adjustments")


def build_reference(reason: str, reference: Optional[str] = None) -> str:
    """`"<motivo>"` o `"<motivo> - <referencia>"`."""
    if reference:
        return f"{reason} - {reference}"
    return reason


class AdjustmentEngine:
    def __init__(self, db: Session, lots: LotLedger, movements: MovementLog):
        self._db = db
        self._lots = lots
        self._movements = movements

    def adjust(
        self,
        product_id: str,
        quantity_adjustment: float,
        reason: str,
        lot_id: Optional[str] = None,
        reference: Optional[str] = None,
    ) -> AdjustmentResponse:
        """
        Aplica un ajuste de stock en una sola unidad de trabajo.

        - Con `lot_id`, el delta se aplica directamente a ese lote.
        - Sin `lot_id`, va al lote de ajuste del producto. Solo los ajustes
          positivos incrementan su `quantity_initial`.
        - El ajuste no pasa por el motor de costos.
        """
        if not reason or not reason.strip():
            raise ValidationFailure("El motivo del ajuste es obligatorio.")

        previous_stock = self._movements.total_stock(product_id)
        movement_type = "in" if quantity_adjustment > 0 else "out"

        if lot_id:
            lot = self._lots.find_lot(lot_id)
            if lot.product_id != product_id:
                raise ValidationFailure(
                    f"El lote {lot.code} no pertenece al producto {product_id}."
                )
            target_lot_id = lot_id
        else:
            target_lot_id = self._lots.find_or_create_adjustment_lot(product_id).id

        movement = self._movements.append(
            product_id,
            movement_type,
            abs(quantity_adjustment),
            lot_id=target_lot_id,
            cost=0.0,
            reference=build_reference(reason.strip(), reference),
            is_adjustment=True,
        )

        if lot_id:
            self._lots.apply_delta(lot_id, quantity_adjustment)
        else:
            adjustment_lot = self._lots.find_lot(target_lot_id)
            adjustment_lot.quantity_current += quantity_adjustment
            if quantity_adjustment > 0:
                adjustment_lot.quantity_initial += quantity_adjustment
            self._db.add(adjustment_lot)
            self._db.flush()

        logger.info(
            "Adjustment %s product=%s delta=%s stock %s -> %s",
            movement.id, product_id, quantity_adjustment,
            previous_stock, previous_stock + quantity_adjustment,
        )
        return AdjustmentResponse(
            movement=MovementResponse.model_validate(movement),
            previous_stock=previous_stock,
            adjustment=quantity_adjustment,
            new_stock=previous_stock + quantity_adjustment,
        )

    def _replay_stock_before(self, product_id: str, moment: datetime.datetime) -> float:
        previous = self._db.exec(
            select(StockMovement.type, StockMovement.quantity).where(
                StockMovement.product_id == product_id,
                StockMovement.created_at < moment,
            )
        ).all()
        return sum(signed_quantity(kind, quantity) for kind, quantity in previous)

    def get_adjustment_history(
        self,
        start_date: Optional[datetime.datetime] = None,
        end_date: Optional[datetime.datetime] = None,
        product_id: Optional[str] = None,
    ) -> List[AdjustmentHistoryEntry]:
        """Historial de ajustes, más recientes primero.

        El stock previo de cada ajuste se recalcula reproduciendo todos los
        movimientos anteriores del producto; no hay saldo acumulado persistido.
        """
        statement = (
            select(StockMovement, Product.name, Lot.code)
            .join(Product, Product.id == StockMovement.product_id)
            .join(Lot, Lot.id == StockMovement.lot_id, isouter=True)
            .where(StockMovement.is_adjustment == True)  # noqa: E712
        )

        if start_date:
            statement = statement.where(StockMovement.created_at >= start_date)

        if end_date:
            statement = statement.where(StockMovement.created_at <= end_date)

        if product_id:
            statement = statement.where(StockMovement.product_id == product_id)

        rows = self._db.exec(statement.order_by(StockMovement.created_at.desc())).all()

        history = []
        for movement, product_name, lot_code in rows:
            previous_stock = self._replay_stock_before(
                movement.product_id, movement.created_at
            )
            adjustment = (
                movement.quantity if movement.type == "in" else -movement.quantity
            )
            history.append(
                AdjustmentHistoryEntry(
                    id=movement.id,
                    date=movement.created_at,
                    product_id=movement.product_id,
                    product_name=product_name,
                    previous_stock=previous_stock,
                    adjustment=adjustment,
                    new_stock=previous_stock + adjustment,
                    reason=movement.reference or "N/A",
                    lot_code=lot_code,
                )
            )
        return history
