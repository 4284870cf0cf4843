"""
Libro de lotes: estado de cantidades por lote.

`quantity_current` solo cambia a través de `apply_delta` (o del contabilizado
del lote de ajuste); ninguna operación hace `commit`, eso lo decide la unidad
de trabajo del llamador.
"""

import datetime
import logging
from typing import List, Optional
from sqlmodel import Session, select
from app.exceptions import (
    InsufficientStockError,
    LotNotFoundError,
    ProductNotFoundError,
    ValidationFailure,
)
from app.models.lot import ADJUSTMENT_LOT_PREFIX, Lot
from app.models.product import Product
from app.utils.logging_config import LOGGER_NAME

logger = logging.getLogger(f"{LOGGER_NAME}.lots")


class LotLedger:
    def __init__(self, db: Session, allow_negative: bool = True):
        self._db = db
        self._allow_negative = allow_negative

    def _require_product(self, product_id: str) -> Product:
        product = self._db.get(Product, product_id)
        if product is None:
            raise ProductNotFoundError()
        return product

    def create_lot(
        self,
        product_id: str,
        code: str,
        quantity_initial: float,
        manufacture_date: Optional[datetime.date] = None,
        expiration_date: Optional[datetime.date] = None,
        status: str = "active",
    ) -> Lot:
        """Crea un lote con `quantity_current = quantity_initial`.

        El código no se valida como único; es una convención del usuario.
        """
        if quantity_initial < 0:
            raise ValidationFailure("La cantidad inicial del lote no puede ser negativa.")
        if not code or not code.strip():
            raise ValidationFailure("El código del lote es obligatorio.")
        self._require_product(product_id)

        lot = Lot(
            code=code.strip(),
            product_id=product_id,
            quantity_initial=quantity_initial,
            quantity_current=quantity_initial,
            manufacture_date=manufacture_date,
            expiration_date=expiration_date,
            status=status,
        )
        self._db.add(lot)
        self._db.flush()
        logger.info(
            "Lot %s created code=%s product=%s qty=%s",
            lot.id, lot.code, product_id, quantity_initial,
        )
        return lot

    def find_lot(self, lot_id: str, for_update: bool = False) -> Lot:
        statement = select(Lot).where(Lot.id == lot_id)
        if for_update:
            # SELECT ... FOR UPDATE; SQLite lo ignora
            statement = statement.with_for_update()
        lot = self._db.exec(statement).first()
        if lot is None:
            raise LotNotFoundError()
        return lot

    def list_lots(self, product_id: Optional[str] = None) -> List[Lot]:
        """Lotes más recientes primero, opcionalmente de un producto."""
        statement = select(Lot)
        if product_id:
            statement = statement.where(Lot.product_id == product_id)
        return list(self._db.exec(statement.order_by(Lot.created_at.desc())).all())

    def lots_for_product(self, product_id: str, positive_only: bool = True) -> List[Lot]:
        statement = select(Lot).where(Lot.product_id == product_id)
        if positive_only:
            statement = statement.where(Lot.quantity_current > 0)
        return list(self._db.exec(statement.order_by(Lot.created_at)).all())

    def apply_delta(self, lot_id: str, signed_delta: float) -> Lot:
        """Suma `signed_delta` a la cantidad actual del lote.

        Con `allow_negative` (valor por defecto) no hay comprobación de suelo:
        el llamador elige deltas coherentes con el tipo de movimiento.
        """
        lot = self.find_lot(lot_id, for_update=True)
        new_quantity = lot.quantity_current + signed_delta
        if new_quantity < 0 and not self._allow_negative:
            raise InsufficientStockError(
                f"Stock insuficiente en el lote {lot.code}: "
                f"disponible={lot.quantity_current}, delta={signed_delta}."
            )
        lot.quantity_current = new_quantity
        self._db.add(lot)
        self._db.flush()
        logger.debug("Lot %s delta=%s -> %s", lot.id, signed_delta, new_quantity)
        return lot

    def find_or_create_adjustment_lot(self, product_id: str) -> Lot:
        """Devuelve el lote `ADJ-` del producto, creándolo vacío si no existe."""
        statement = (
            select(Lot)
            .where(
                Lot.product_id == product_id,
                Lot.code.startswith(ADJUSTMENT_LOT_PREFIX),
            )
            .order_by(Lot.created_at)
            .with_for_update()
        )
        lot = self._db.exec(statement).first()
        if lot is not None:
            return lot

        self._require_product(product_id)
        lot = Lot(
            code=f"{ADJUSTMENT_LOT_PREFIX}{product_id[:8]}",
            product_id=product_id,
            quantity_initial=0.0,
            quantity_current=0.0,
            status="active",
        )
        self._db.add(lot)
        self._db.flush()
        logger.info("Adjustment lot %s created for product %s", lot.code, product_id)
        return lot
