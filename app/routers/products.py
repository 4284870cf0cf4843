import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel import Session, func, select
from sqlalchemy.exc import SQLAlchemyError
from app.dependencies import get_cost_engine
from app.exceptions import ProductNotFoundError
from app.models.database import get_db, unit_of_work
from app.models.product import Product
from app.schemas.product import (
    CostUpdateRequest,
    CostUpdateResponse,
    ProductCreate,
    ProductListResponse,
    ProductResponse,
)
from app.services.cost_engine import CostEngine
from app.utils.logging_config import LOGGER_NAME

logger = logging.getLogger(f"{LOGGER_NAME}.api")

router = APIRouter(prefix="/products", tags=["Productos"])


@router.get("/", response_model=ProductListResponse)
def get_products(
    db: Session = Depends(get_db),
    search: Optional[str] = Query(None),
    type: Optional[str] = Query(None),
):
    """Lista los productos ordenados por nombre."""
    try:
        statement = select(Product)

        if search:
            # Filtra por nombre o sku (mayúsculas o minúsculas)
            search_like = f"%{search.lower()}%"
            statement = statement.where(
                func.lower(Product.name).like(search_like)
                | func.lower(Product.sku).like(search_like)
            )

        if type:
            statement = statement.where(Product.type == type)

        products = db.exec(statement.order_by(Product.name)).all()
    except SQLAlchemyError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error de conexión con la base de datos",
        )

    return ProductListResponse(
        data=[ProductResponse.model_validate(product) for product in products],
        total=len(products),
    )


@router.get("/{id}", response_model=ProductResponse)
def get_product(id: str, db: Session = Depends(get_db)):
    """Obtiene un producto específico por su ID."""
    try:
        product = db.get(Product, id)
    except SQLAlchemyError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error de conexión con la base de datos",
        )

    if not product:
        raise ProductNotFoundError()

    return product


@router.post("/", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_product(product_data: ProductCreate, db: Session = Depends(get_db)):
    """Crea un nuevo producto."""
    new_product = Product(**product_data.model_dump())

    try:
        with unit_of_work(db):
            db.add(new_product)
    except SQLAlchemyError:
        logger.exception("Error creating product %s", product_data.name)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error interno al crear el producto.",
        )

    db.refresh(new_product)
    return new_product


@router.patch("/{id}/update-cost", response_model=CostUpdateResponse)
def update_product_cost(
    id: str,
    cost_data: CostUpdateRequest,
    db: Session = Depends(get_db),
    costs: CostEngine = Depends(get_cost_engine),
):
    """Recalcula el costo medio ponderado con una nueva entrada:

    (costo actual * stock actual + costo nuevo * cantidad) / (stock actual + cantidad)
    """
    try:
        with unit_of_work(db):
            result = costs.update_weighted_average_cost(
                id, cost_data.new_cost, cost_data.quantity
            )
    except SQLAlchemyError:
        logger.exception("Error updating cost of product %s", id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al actualizar el costo del producto",
        )

    return result
