"""
Tests de InventoryReports: stock valorizado, stock bajo, caducidad de lotes e
informe de inventario físico.
"""

import datetime

from app.services.reports import stock_status
from tests.factories import LotFactory, ProductFactory

TODAY = datetime.date(2024, 6, 1)


def test_stock_status_boundary_is_inclusive():
    assert stock_status(20, 20) == "low"
    assert stock_status(21, 20) == "ok"
    assert stock_status(0, 0) == "low"
    assert stock_status(5, None) == "ok"


class TestStockReport:

    def test_values_and_status(self, reports):
        product = ProductFactory(name="Aceite de argán", min_stock=20, current_cost=2.5)
        LotFactory(product_id=product.id, quantity_initial=12)
        LotFactory(product_id=product.id, quantity_initial=8)
        LotFactory(product_id=product.id, quantity_initial=0, quantity_current=-4)

        (row,) = reports.stock_report()

        assert row.id == product.id
        assert row.current_stock == 20
        assert row.total_value == 50
        assert row.status == "low"

    def test_ordered_by_name_and_products_without_lots(self, reports):
        ProductFactory(name="Glicerina", min_stock=1)
        stocked = ProductFactory(name="Agua destilada", min_stock=1)
        LotFactory(product_id=stocked.id, quantity_initial=50)

        rows = reports.stock_report()

        assert [row.name for row in rows] == ["Agua destilada", "Glicerina"]
        assert rows[0].status == "ok"
        assert rows[1].current_stock == 0
        assert rows[1].status == "low"

    def test_low_stock_filter(self, reports):
        low = ProductFactory(min_stock=20)
        ok = ProductFactory(min_stock=20)
        LotFactory(product_id=low.id, quantity_initial=20)
        LotFactory(product_id=ok.id, quantity_initial=21)

        assert [row.id for row in reports.low_stock_products()] == [low.id]


class TestLotExpirationReport:

    def test_window_and_order(self, reports):
        product = ProductFactory(name="Manteca de karité")
        later = LotFactory(
            product_id=product.id, expiration_date=TODAY + datetime.timedelta(days=25)
        )
        sooner = LotFactory(
            product_id=product.id, expiration_date=TODAY + datetime.timedelta(days=3)
        )
        expired = LotFactory(
            product_id=product.id, expiration_date=TODAY - datetime.timedelta(days=2)
        )
        LotFactory(
            product_id=product.id, expiration_date=TODAY + datetime.timedelta(days=31)
        )

        report = reports.lot_expiration_report(30, today=TODAY)

        assert [lot.id for lot in report] == [expired.id, sooner.id, later.id]
        assert [lot.days_to_expire for lot in report] == [-2, 3, 25]
        assert report[0].product_name == "Manteca de karité"

    def test_threshold_day_included(self, reports):
        lot = LotFactory(expiration_date=TODAY + datetime.timedelta(days=30))
        assert [row.id for row in reports.lot_expiration_report(30, today=TODAY)] == [
            lot.id
        ]

    def test_excludes_empty_lots_and_missing_dates(self, reports):
        expiring = TODAY + datetime.timedelta(days=5)
        LotFactory(quantity_initial=10, quantity_current=0, expiration_date=expiring)
        LotFactory(quantity_initial=10, quantity_current=-1, expiration_date=expiring)
        LotFactory(expiration_date=None)

        assert reports.lot_expiration_report(30, today=TODAY) == []


class TestStockCountReport:

    def test_lots_detail(self, reports):
        product = ProductFactory(name="Alcohol cetílico", current_cost=4)
        LotFactory(
            product_id=product.id,
            code="B-2",
            quantity_initial=5,
            expiration_date=datetime.date(2025, 1, 1),
        )
        LotFactory(
            product_id=product.id,
            code="B-1",
            quantity_initial=7,
            expiration_date=datetime.date(2024, 12, 1),
        )
        LotFactory(product_id=product.id, code="B-0", quantity_initial=0)

        (row,) = reports.stock_count_report()

        assert row.current_stock == 12
        assert row.total_value == 48
        assert [lot.lot_code for lot in row.lots] == ["B-1", "B-2"]
        assert row.lots[0].quantity == 7
