from pydantic import BaseModel, Field
from typing import List, Literal, Optional
from datetime import datetime

ProductType = Literal["raw_material", "finished", "packaging", "intermediate"]


class ProductBase(BaseModel):
    """
    Esquema base para productos.
    - `type`: materia prima, producto terminado, envase o intermedio.
    - `min_stock`: umbral de reposición usado por los informes de stock bajo.
    """

    name: str = Field(..., min_length=1, max_length=200)
    sku: Optional[str] = Field(None, max_length=50)
    type: ProductType = Field(default="raw_material")
    unit: str = Field(default="kg", min_length=1, max_length=20)
    density: float = Field(default=1.0, gt=0)
    min_stock: float = Field(default=0.0, ge=0)


class ProductCreate(ProductBase):
    """El costo inicial es opcional; después solo lo modifica el motor de costos."""

    current_cost: float = Field(default=0.0, ge=0)


class ProductResponse(ProductBase):
    id: str
    current_cost: float
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True  # Permite convertir SQLModel en JSON automáticamente


class CostUpdateRequest(BaseModel):
    """Entrada de compra para recalcular el costo medio ponderado."""

    new_cost: float = Field(..., ge=0, description="Costo unitario de la entrada")
    quantity: float = Field(..., ge=0, description="Cantidad que entra")


class CostBreakdown(BaseModel):
    """Desglose numérico del cálculo, para auditoría."""

    previous_stock: float
    incoming_quantity: float
    total_quantity: float
    previous_value: float
    incoming_value: float
    total_value: float


class CostUpdateResponse(BaseModel):
    product_id: str
    previous_cost: float
    average_cost: float
    breakdown: CostBreakdown


class ProductListResponse(BaseModel):
    data: List[ProductResponse]
    total: int
