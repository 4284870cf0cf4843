from typing import List, Literal, Optional
from pydantic import BaseModel, Field
import datetime

StockStatus = Literal["low", "ok"]


class StockReportRow(BaseModel):
    """Stock valorizado de un producto."""

    id: str
    sku: Optional[str] = None
    name: str
    type: str
    unit: str
    min_stock: float
    current_stock: float = Field(..., description="Suma de lotes con cantidad positiva")
    current_cost: float
    total_value: float
    status: StockStatus


class LotCountDetail(BaseModel):
    lot_code: str
    quantity: float
    expiration_date: Optional[datetime.date] = None
    status: str


class StockCountRow(StockReportRow):
    """Fila del informe de inventario físico, con el desglose por lote."""

    lots: List[LotCountDetail] = Field(default=[])


class ExpiringLotResponse(BaseModel):
    id: str
    code: str
    product_id: str
    product_name: str
    quantity_current: float
    expiration_date: datetime.date
    days_to_expire: int
    status: str
