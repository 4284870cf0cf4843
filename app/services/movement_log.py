"""
Registro de movimientos de stock (solo inserción).

Es la fuente de verdad del historial de cantidades: cada movimiento que
referencia un lote actualiza ese lote dentro de la misma unidad de trabajo.
"""

import datetime
import logging
from typing import List, Optional
from sqlalchemy import delete
from sqlmodel import Session, func, select
from app.exceptions import (
    ProductNotFoundError,
    ProductionOrderNotFoundError,
    ValidationFailure,
)
from app.models.lot import Lot
from app.models.product import Product
from app.models.production_order import ProductionOrder
from app.models.stock_movement import StockMovement
from app.schemas.lot import LotResponse
from app.schemas.movement import StockLevelResponse
from app.services.cost_engine import CostEngine
from app.services.lot_ledger import LotLedger
from app.utils.logging_config import LOGGER_NAME

logger = logging.getLogger(f"{LOGGER_NAME}.movements")

INBOUND_TYPES = {"in", "production_in"}
OUTBOUND_TYPES = {"out", "loss", "production_out"}
MOVEMENT_TYPES = INBOUND_TYPES | OUTBOUND_TYPES


def signed_quantity(movement_type: str, quantity: float) -> float:
    """Cantidad con signo según el tipo: entradas suman, el resto resta."""
    if movement_type in INBOUND_TYPES:
        return quantity
    return -quantity


class MovementLog:
    def __init__(
        self,
        db: Session,
        lots: LotLedger,
        costs: CostEngine,
        cost_policy: str = "overwrite",
    ):
        self._db = db
        self._lots = lots
        self._costs = costs
        self._cost_policy = cost_policy

    def append(
        self,
        product_id: str,
        movement_type: str,
        quantity: float,
        lot_id: Optional[str] = None,
        cost: float = 0.0,
        reference: Optional[str] = None,
        production_order_id: Optional[str] = None,
        is_adjustment: bool = False,
    ) -> StockMovement:
        """Inserta la fila del movimiento sin tocar lotes ni costos."""
        if movement_type not in MOVEMENT_TYPES:
            raise ValidationFailure(f"Tipo de movimiento inválido: {movement_type}")
        if quantity < 0:
            raise ValidationFailure("La cantidad debe ser una magnitud no negativa.")
        if cost < 0:
            raise ValidationFailure("El costo no puede ser negativo.")
        if self._db.get(Product, product_id) is None:
            raise ProductNotFoundError()
        if production_order_id and self._db.get(ProductionOrder, production_order_id) is None:
            raise ProductionOrderNotFoundError()

        movement = StockMovement(
            product_id=product_id,
            lot_id=lot_id,
            type=movement_type,
            quantity=quantity,
            cost=cost,
            reference=reference,
            production_order_id=production_order_id,
            is_adjustment=is_adjustment,
        )
        self._db.add(movement)
        self._db.flush()
        logger.info(
            "StockMovement %s %s qty=%s product=%s lot=%s",
            movement_type, movement.id, quantity, product_id, lot_id,
        )
        return movement

    def record(
        self,
        product_id: str,
        movement_type: str,
        quantity: float,
        lot_id: Optional[str] = None,
        cost: float = 0.0,
        reference: Optional[str] = None,
        production_order_id: Optional[str] = None,
    ) -> StockMovement:
        """
        Registra un movimiento:
        1. si hay lote, comprueba que existe y es del producto;
        2. inserta la fila y aplica al lote la cantidad con signo;
        3. si es una entrada con costo > 0, actualiza el costo del producto.

        Todo ocurre en la unidad de trabajo del llamador: si algo falla no
        queda nada persistido.
        """
        if lot_id:
            lot = self._lots.find_lot(lot_id)
            if lot.product_id != product_id:
                raise ValidationFailure(
                    f"El lote {lot.code} no pertenece al producto {product_id}."
                )

        movement = self.append(
            product_id,
            movement_type,
            quantity,
            lot_id=lot_id,
            cost=cost,
            reference=reference,
            production_order_id=production_order_id,
        )

        updates_cost = movement_type in INBOUND_TYPES and cost > 0
        if updates_cost and self._cost_policy == "weighted_average":
            # Se promedia contra el stock anterior a la entrada
            self._costs.update_weighted_average_cost(product_id, cost, quantity)

        if lot_id:
            self._lots.apply_delta(lot_id, signed_quantity(movement_type, quantity))

        if updates_cost and self._cost_policy != "weighted_average":
            self._costs.overwrite_cost(product_id, cost)

        return movement

    def total_stock(self, product_id: str) -> float:
        """Suma de `quantity_current` de los lotes con cantidad positiva."""
        total = self._db.exec(
            select(func.sum(Lot.quantity_current)).where(
                Lot.product_id == product_id, Lot.quantity_current > 0
            )
        ).first()
        return float(total or 0)

    def stock_level(self, product_id: str) -> StockLevelResponse:
        if self._db.get(Product, product_id) is None:
            raise ProductNotFoundError()
        lots = self._lots.lots_for_product(product_id, positive_only=True)
        return StockLevelResponse(
            product_id=product_id,
            total_stock=sum(lot.quantity_current for lot in lots),
            lots=[LotResponse.model_validate(lot) for lot in lots],
        )

    def history(
        self,
        start_date: Optional[datetime.datetime] = None,
        end_date: Optional[datetime.datetime] = None,
        movement_type: Optional[str] = None,
        product_id: Optional[str] = None,
    ) -> List[StockMovement]:
        """Movimientos más recientes primero; los filtros se combinan con AND."""
        statement = select(StockMovement)

        if start_date:
            statement = statement.where(StockMovement.created_at >= start_date)

        if end_date:
            statement = statement.where(StockMovement.created_at <= end_date)

        if movement_type:
            statement = statement.where(StockMovement.type == movement_type)

        if product_id:
            statement = statement.where(StockMovement.product_id == product_id)

        return list(
            self._db.exec(statement.order_by(StockMovement.created_at.desc())).all()
        )

    def delete_for_production_order(self, production_order_id: str) -> int:
        """Borra los movimientos de una orden de producción.

        Es la única excepción al registro de solo inserción y la usa el
        borrado en cascada de órdenes. No revierte cantidades de lotes.
        """
        if self._db.get(ProductionOrder, production_order_id) is None:
            raise ProductionOrderNotFoundError()
        result = self._db.exec(
            delete(StockMovement).where(
                StockMovement.production_order_id == production_order_id
            )
        )
        self._db.flush()
        logger.warning(
            "Deleted %s movements of production order %s",
            result.rowcount, production_order_id,
        )
        return result.rowcount
