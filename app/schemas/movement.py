from pydantic import BaseModel, Field
from datetime import datetime
from typing import Literal, List, Optional
from app.schemas.lot import LotResponse

MovementType = Literal["in", "out", "loss", "production_in", "production_out"]


class MovementBase(BaseModel):
    """Esquema base con los campos comunes de un movimiento de stock."""

    product_id: str = Field(..., description="Producto que se mueve")
    lot_id: Optional[str] = Field(None, description="Lote afectado (opcional)")
    type: MovementType = Field(
        ..., description="in, out, loss, production_in o production_out"
    )
    quantity: float = Field(
        ..., ge=0, description="Magnitud del movimiento; el signo lo da el tipo"
    )
    cost: float = Field(default=0.0, ge=0, description="Costo unitario (entradas)")
    reference: Optional[str] = Field(
        None, max_length=255, description="Procedencia: factura, motivo, etc."
    )
    production_order_id: Optional[str] = Field(None)


class MovementCreate(MovementBase):
    pass


class MovementResponse(MovementBase):
    """Esquema para responder con los datos de un movimiento."""

    id: str
    is_adjustment: bool
    created_at: datetime

    class Config:
        from_attributes = True


class StockLevelResponse(BaseModel):
    """Stock total de un producto: suma de los lotes con cantidad positiva."""

    product_id: str
    total_stock: float
    lots: List[LotResponse] = Field(default=[])
