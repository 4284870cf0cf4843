import datetime
import logging
from typing import Optional
from app.schemas.lot import LotResponse
from app.schemas.movement import MovementResponse
from app.schemas.purchase import PurchaseResponse
from app.services.cost_engine import CostEngine
from app.services.lot_ledger import LotLedger
from app.services.movement_log import MovementLog
from app.utils.logging_config import LOGGER_NAME

logger = logging.getLogger(f"{LOGGER_NAME}.purchases")


def purchase_reference(
    invoice_number: Optional[str], supplier: Optional[str]
) -> Optional[str]:
    parts = []
    if invoice_number:
        parts.append(f"NF {invoice_number}")
    if supplier:
        parts.append(supplier)
    return " - ".join(parts) or None


class PurchaseService:
    """Entrada de mercadería comprada, en una sola unidad de trabajo."""

    def __init__(self, lots: LotLedger, movements: MovementLog, costs: CostEngine):
        self._lots = lots
        self._movements = movements
        self._costs = costs

    def register_purchase(
        self,
        product_id: str,
        quantity: float,
        unit_cost: float,
        lot_code: Optional[str] = None,
        supplier: Optional[str] = None,
        invoice_number: Optional[str] = None,
        manufacture_date: Optional[datetime.date] = None,
        expiration_date: Optional[datetime.date] = None,
    ) -> PurchaseResponse:
        """
        - El costo medio se calcula contra el stock anterior a la compra.
        - El lote nace vacío y recibe la cantidad comprada a través del
          movimiento `in`, como cualquier otra entrada.
        """
        cost = self._costs.update_weighted_average_cost(product_id, unit_cost, quantity)

        code = lot_code or f"LOT-{datetime.datetime.now():%Y%m%d%H%M%S%f}"
        lot = self._lots.create_lot(
            product_id,
            code,
            0.0,
            manufacture_date=manufacture_date,
            expiration_date=expiration_date,
        )
        # Sin pasar por `record`: el costo ya se promedió arriba
        movement = self._movements.append(
            product_id,
            "in",
            quantity,
            lot_id=lot.id,
            cost=unit_cost,
            reference=purchase_reference(invoice_number, supplier),
        )
        lot = self._lots.apply_delta(lot.id, quantity)
        logger.info(
            "Purchase product=%s lot=%s qty=%s unit_cost=%s",
            product_id, lot.code, quantity, unit_cost,
        )
        return PurchaseResponse(
            lot=LotResponse.model_validate(lot),
            movement=MovementResponse.model_validate(movement),
            cost=cost,
        )
