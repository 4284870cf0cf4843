import datetime
from typing import Optional
from sqlmodel import SQLModel, Field
from app.models.ids import new_id

ADJUSTMENT_LOT_PREFIX = "ADJ-"


class Lot(SQLModel, table=True):
    """Lote físico de un producto.

    `quantity_current` es siempre `quantity_initial` más/menos los movimientos
    aplicados sobre el lote. Los lotes de ajuste (código `ADJ-...`) absorben
    los ajustes que no apuntan a un lote concreto.
    """

    __tablename__ = "lots"

    id: str = Field(default_factory=new_id, primary_key=True, nullable=False)
    code: str = Field(nullable=False, index=True, description="Código del lote")
    product_id: str = Field(foreign_key="products.id", nullable=False, index=True)
    quantity_initial: float = Field(default=0.0, nullable=False)
    quantity_current: float = Field(default=0.0, nullable=False)
    manufacture_date: Optional[datetime.date] = Field(default=None)
    expiration_date: Optional[datetime.date] = Field(
        default=None, description="Fecha de caducidad (si aplica)"
    )
    status: str = Field(default="active", nullable=False)  # active | expired | blocked
    created_at: datetime.datetime = Field(
        default_factory=lambda: datetime.datetime.now()
    )
