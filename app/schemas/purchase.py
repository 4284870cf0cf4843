from pydantic import BaseModel, Field
from typing import Optional
import datetime
from app.schemas.lot import LotResponse
from app.schemas.movement import MovementResponse
from app.schemas.product import CostUpdateResponse


class PurchaseCreate(BaseModel):
    """Entrada por compra: crea el lote, documenta la entrada y recalcula el costo."""

    product_id: str
    quantity: float = Field(..., gt=0)
    unit_cost: float = Field(..., ge=0)
    lot_code: Optional[str] = Field(None, max_length=50)
    supplier: Optional[str] = Field(None, max_length=120)
    invoice_number: Optional[str] = Field(None, max_length=60)
    manufacture_date: Optional[datetime.date] = None
    expiration_date: Optional[datetime.date] = None


class PurchaseResponse(BaseModel):
    lot: LotResponse
    movement: MovementResponse
    cost: CostUpdateResponse
