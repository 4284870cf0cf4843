"""
Proyecciones de inventario de solo lectura.

Se recalculan en cada llamada a partir de productos y lotes; nada se guarda.
"""

import datetime
from collections import defaultdict
from typing import Dict, List, Optional
from dateutil.relativedelta import relativedelta
from sqlmodel import Session, func, select
from app.models.lot import Lot
from app.models.product import Product
from app.schemas.report import (
    ExpiringLotResponse,
    LotCountDetail,
    StockCountRow,
    StockReportRow,
)


def stock_status(total_stock: float, min_stock: Optional[float]) -> str:
    """`low` cuando el stock es menor o igual al mínimo (límite inclusivo)."""
    return "low" if total_stock <= (min_stock or 0) else "ok"


class InventoryReports:
    def __init__(self, db: Session):
        self._db = db

    def _positive_stock_by_product(self) -> Dict[str, float]:
        rows = self._db.exec(
            select(Lot.product_id, func.sum(Lot.quantity_current))
            .where(Lot.quantity_current > 0)
            .group_by(Lot.product_id)
        ).all()
        return {product_id: float(total or 0) for product_id, total in rows}

    def _report_row(self, product: Product, total_stock: float) -> dict:
        current_cost = product.current_cost or 0.0
        return dict(
            id=product.id,
            sku=product.sku,
            name=product.name,
            type=product.type,
            unit=product.unit,
            min_stock=product.min_stock,
            current_stock=total_stock,
            current_cost=current_cost,
            total_value=total_stock * current_cost,
            status=stock_status(total_stock, product.min_stock),
        )

    def stock_report(self) -> List[StockReportRow]:
        """Stock valorizado por producto."""
        totals = self._positive_stock_by_product()
        products = self._db.exec(select(Product).order_by(Product.name)).all()
        return [
            StockReportRow(**self._report_row(product, totals.get(product.id, 0.0)))
            for product in products
        ]

    def low_stock_products(self) -> List[StockReportRow]:
        return [row for row in self.stock_report() if row.status == "low"]

    def lot_expiration_report(
        self, days_threshold: int = 30, today: Optional[datetime.date] = None
    ) -> List[ExpiringLotResponse]:
        """Lotes con stock que caducan antes de `hoy + days_threshold`,
        primero los más próximos. Incluye los ya caducados."""
        today = today or datetime.date.today()
        threshold = today + relativedelta(days=days_threshold)

        rows = self._db.exec(
            select(Lot, Product.name)
            .join(Product, Product.id == Lot.product_id)
            .where(
                Lot.quantity_current > 0,
                Lot.expiration_date != None,  # noqa: E711
                Lot.expiration_date <= threshold,
            )
            .order_by(Lot.expiration_date)
        ).all()

        return [
            ExpiringLotResponse(
                id=lot.id,
                code=lot.code,
                product_id=lot.product_id,
                product_name=product_name,
                quantity_current=lot.quantity_current,
                expiration_date=lot.expiration_date,
                days_to_expire=(lot.expiration_date - today).days,
                status=lot.status,
            )
            for lot, product_name in rows
        ]

    def stock_count_report(self) -> List[StockCountRow]:
        """Informe para inventario físico: stock por producto con sus lotes."""
        lots_by_product = defaultdict(list)
        lots = self._db.exec(
            select(Lot)
            .where(Lot.quantity_current > 0)
            .order_by(Lot.expiration_date, Lot.code)
        ).all()
        for lot in lots:
            lots_by_product[lot.product_id].append(lot)

        report = []
        for product in self._db.exec(select(Product).order_by(Product.name)).all():
            product_lots = lots_by_product.get(product.id, [])
            total_stock = sum(lot.quantity_current for lot in product_lots)
            report.append(
                StockCountRow(
                    **self._report_row(product, total_stock),
                    lots=[
                        LotCountDetail(
                            lot_code=lot.code,
                            quantity=lot.quantity_current,
                            expiration_date=lot.expiration_date,
                            status=lot.status,
                        )
                        for lot in product_lots
                    ],
                )
            )
        return report
