"""
Motor de costos: costo medio ponderado por producto.

Conviven dos caminos de actualización: `overwrite_cost`, usado por el registro
de movimientos, y `update_weighted_average_cost`, usado por las entradas de
compra. La política del registro de movimientos se configura en `Settings`.
"""

import logging
from datetime import datetime
from sqlmodel import Session, func, select
from app.exceptions import ProductNotFoundError, ValidationFailure
from app.models.lot import Lot
from app.models.product import Product
from app.schemas.product import CostBreakdown, CostUpdateResponse
from app.utils.logging_config import LOGGER_NAME

logger = logging.getLogger(f"{LOGGER_NAME}.costs")


class CostEngine:
    def __init__(self, db: Session):
        self._db = db

    def _get_product(self, product_id: str) -> Product:
        product = self._db.exec(
            select(Product).where(Product.id == product_id).with_for_update()
        ).first()
        if product is None:
            raise ProductNotFoundError()
        return product

    def active_stock(self, product_id: str) -> float:
        """Stock actual sumando los lotes activos (lectura fresca, sin caché)."""
        total = self._db.exec(
            select(func.sum(Lot.quantity_current)).where(
                Lot.product_id == product_id, Lot.status == "active"
            )
        ).first()
        return float(total or 0)

    def overwrite_cost(self, product_id: str, cost: float) -> Product:
        product = self._get_product(product_id)
        previous = product.current_cost
        product.current_cost = cost
        product.updated_at = datetime.now()
        self._db.add(product)
        self._db.flush()
        logger.info("Product %s cost overwritten %s -> %s", product_id, previous, cost)
        return product

    def update_weighted_average_cost(
        self, product_id: str, new_cost: float, incoming_quantity: float
    ) -> CostUpdateResponse:
        """
        (costo actual * stock actual + costo nuevo * cantidad nueva)
        / (stock actual + cantidad nueva)

        Si la cantidad total es cero el resultado es `new_cost`.
        """
        if new_cost < 0:
            raise ValidationFailure("El costo no puede ser negativo.")
        if incoming_quantity < 0:
            raise ValidationFailure("La cantidad de entrada no puede ser negativa.")

        product = self._get_product(product_id)
        current_stock = self.active_stock(product_id)
        previous_cost = product.current_cost or 0.0

        current_value = previous_cost * current_stock
        incoming_value = new_cost * incoming_quantity
        total_quantity = current_stock + incoming_quantity
        if total_quantity > 0:
            average_cost = (current_value + incoming_value) / total_quantity
        else:
            average_cost = new_cost

        product.current_cost = average_cost
        product.updated_at = datetime.now()
        self._db.add(product)
        self._db.flush()
        logger.info(
            "Product %s weighted cost %s -> %s (stock=%s incoming=%s@%s)",
            product_id, previous_cost, average_cost,
            current_stock, incoming_quantity, new_cost,
        )

        return CostUpdateResponse(
            product_id=product_id,
            previous_cost=previous_cost,
            average_cost=average_cost,
            breakdown=CostBreakdown(
                previous_stock=current_stock,
                incoming_quantity=incoming_quantity,
                total_quantity=total_quantity,
                previous_value=current_value,
                incoming_value=incoming_value,
                total_value=current_value + incoming_value,
            ),
        )
