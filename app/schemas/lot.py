from pydantic import BaseModel, Field
from typing import List, Literal, Optional
import datetime

LotStatus = Literal["active", "expired", "blocked"]


class LotBase(BaseModel):
    """Esquema base con los campos comunes de un lote."""

    code: str = Field(..., min_length=1, max_length=50, description="Código del lote")
    product_id: str = Field(..., description="Producto al que pertenece el lote")
    manufacture_date: Optional[datetime.date] = Field(
        None, description="Fecha de fabricación (opcional)"
    )
    expiration_date: Optional[datetime.date] = Field(
        None, description="Fecha de caducidad (opcional)"
    )
    status: LotStatus = Field(default="active")


class LotCreate(LotBase):
    """`quantity_current` se inicializa con `quantity_initial`."""

    quantity_initial: float = Field(..., ge=0)


class LotResponse(LotBase):
    id: str
    quantity_initial: float
    quantity_current: float
    created_at: datetime.datetime

    class Config:
        from_attributes = True


class LotListResponse(BaseModel):
    data: List[LotResponse]
    total: int
