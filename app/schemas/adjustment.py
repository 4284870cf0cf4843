from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional
from app.schemas.movement import MovementResponse


class AdjustmentCreate(BaseModel):
    """
    Ajuste de stock con signo.
    - Positivo: entrada (`in`); negativo o cero: salida (`out`).
    - Sin `lot_id` el ajuste va al lote de ajuste del producto (`ADJ-...`).
    """

    product_id: str
    quantity_adjustment: float
    reason: str = Field(..., min_length=1, max_length=200)
    lot_id: Optional[str] = None
    reference: Optional[str] = Field(None, max_length=200)


class AdjustmentResponse(BaseModel):
    movement: MovementResponse
    previous_stock: float
    adjustment: float
    new_stock: float


class AdjustmentHistoryEntry(BaseModel):
    id: str
    date: datetime
    product_id: str
    product_name: str
    previous_stock: float
    adjustment: float
    new_stock: float
    reason: str
    lot_code: Optional[str] = None
