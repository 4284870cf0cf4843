from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime
from app.models.ids import new_id


class StockMovement(SQLModel, table=True):
    """Asiento inmutable del registro de movimientos (solo inserción).

    `quantity` es siempre la magnitud sin signo; la dirección la da `type`.
    """

    __tablename__ = "stock_movements"

    id: str = Field(default_factory=new_id, primary_key=True, nullable=False)
    product_id: str = Field(foreign_key="products.id", nullable=False, index=True)
    lot_id: Optional[str] = Field(default=None, foreign_key="lots.id", index=True)
    type: str = Field(
        nullable=False, index=True
    )  # in | out | loss | production_in | production_out
    quantity: float = Field(nullable=False)
    cost: float = Field(default=0.0, nullable=False)  # Costo unitario (solo entradas)
    reference: Optional[str] = Field(default=None)
    is_adjustment: bool = Field(default=False, nullable=False, index=True)
    production_order_id: Optional[str] = Field(
        default=None, foreign_key="production_orders.id", index=True
    )
    created_at: datetime = Field(default_factory=lambda: datetime.now(), index=True)
