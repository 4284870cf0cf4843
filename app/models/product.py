from typing import Optional
from datetime import datetime
from sqlmodel import SQLModel, Field
from app.models.ids import new_id


class Product(SQLModel, table=True):
    __tablename__ = "products"

    id: str = Field(default_factory=new_id, primary_key=True, nullable=False)
    name: str = Field(nullable=False, index=True)
    sku: Optional[str] = Field(default=None, index=True)
    type: str = Field(
        default="raw_material", nullable=False
    )  # Tipo como `str`, la restricción la ponemos en el esquema
    unit: str = Field(default="kg", nullable=False)
    density: float = Field(default=1.0, nullable=False)
    current_cost: float = Field(default=0.0, nullable=False)  # Costo medio ponderado
    min_stock: float = Field(default=0.0, nullable=False)
    created_at: datetime = Field(default_factory=lambda: datetime.now())
    updated_at: datetime = Field(default_factory=lambda: datetime.now())
