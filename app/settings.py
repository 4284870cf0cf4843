import os
from typing import List, Literal
from pydantic import BaseModel, Field
from app.utils.getenv import get_bool_env, get_list_env, get_required_env

CostPolicy = Literal["overwrite", "weighted_average"]

DEFAULT_CORS_ORIGINS = ["http://localhost:5173", "http://localhost:3000"]


class Settings(BaseModel):
    """Configuración de la aplicación.

    - `allow_negative_lots`: si es `False`, un movimiento que deje un lote por
      debajo de cero se rechaza con `InsufficientStockError`.
    - `movement_cost_policy`: cómo actualizan el costo las entradas registradas
      como movimiento (`overwrite` sobrescribe, `weighted_average` promedia).
    """

    database_url: str
    sql_echo: bool = False
    cors_origins: List[str] = Field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    allow_negative_lots: bool = True
    movement_cost_policy: CostPolicy = "overwrite"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            database_url=get_required_env("DATABASE_URL"),
            sql_echo=get_bool_env("SQL_ECHO", False),
            cors_origins=get_list_env("CORS_ORIGINS", DEFAULT_CORS_ORIGINS),
            allow_negative_lots=get_bool_env("ALLOW_NEGATIVE_LOTS", True),
            movement_cost_policy=os.getenv("MOVEMENT_COST_POLICY", "overwrite"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )
