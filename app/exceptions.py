"""
Excepciones de dominio del núcleo de inventario.

Los servicios las lanzan y nunca las silencian; cualquier excepción aborta la
unidad de trabajo en curso. `app.main` las traduce a respuestas HTTP.
"""

from typing import Optional
from fastapi import status


class InventoryError(Exception):
    """Error base del inventario."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Error en la operación de inventario."

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class NotFoundError(InventoryError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Recurso no encontrado."


class ProductNotFoundError(NotFoundError):
    default_detail = "Producto no encontrado"


class LotNotFoundError(NotFoundError):
    default_detail = "Lote no encontrado"


class ProductionOrderNotFoundError(NotFoundError):
    default_detail = "Orden de producción no encontrada"


class ValidationFailure(InventoryError):
    """Datos de entrada inválidos detectados en la capa de servicio."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Datos inválidos."


class InsufficientStockError(InventoryError):
    """El movimiento dejaría un lote con cantidad negativa."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = "Stock insuficiente para esta operación."
