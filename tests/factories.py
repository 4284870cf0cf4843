"""
Factories de factory_boy para los modelos del inventario.

La sesión se asigna en `conftest.session`; los objetos se insertan con
`flush`, sin confirmar la transacción.
"""

import factory

from app.models.lot import Lot
from app.models.product import Product
from app.models.production_order import ProductionOrder


class BaseFactory(factory.alchemy.SQLAlchemyModelFactory):
    class Meta:
        abstract = True
        sqlalchemy_session_persistence = "flush"


class ProductFactory(BaseFactory):
    class Meta:
        model = Product

    name = factory.Sequence(lambda n: f"Producto-{n:03d}")
    sku = factory.Sequence(lambda n: f"SKU{n:04d}")
    type = "raw_material"
    unit = "kg"
    density = 1.0
    current_cost = 0.0
    min_stock = 0.0


class LotFactory(BaseFactory):
    class Meta:
        model = Lot

    code = factory.Sequence(lambda n: f"LOT-{n:04d}")
    product_id = factory.LazyFunction(lambda: ProductFactory().id)
    quantity_initial = 100.0
    quantity_current = factory.SelfAttribute("quantity_initial")
    status = "active"


class ProductionOrderFactory(BaseFactory):
    class Meta:
        model = ProductionOrder

    code = factory.Sequence(lambda n: f"OP-{n:04d}")
    product_id = factory.LazyFunction(lambda: ProductFactory(type="finished").id)
    quantity_planned = 50.0
    status = "in_progress"


ALL_FACTORIES = [ProductFactory, LotFactory, ProductionOrderFactory]
