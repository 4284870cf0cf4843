from sqlmodel import SQLModel, Field
from datetime import datetime
from app.models.ids import new_id


class ProductionOrder(SQLModel, table=True):
    """Orden de producción. La gestiona el módulo de producción; aquí solo se
    declara como destino de la clave foránea de los movimientos."""

    __tablename__ = "production_orders"

    id: str = Field(default_factory=new_id, primary_key=True, nullable=False)
    code: str = Field(nullable=False, index=True)
    product_id: str = Field(foreign_key="products.id", nullable=False)
    quantity_planned: float = Field(default=0.0, nullable=False)
    status: str = Field(default="planned", nullable=False)
    created_at: datetime = Field(default_factory=lambda: datetime.now())
