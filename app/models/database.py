from contextlib import contextmanager
from typing import Iterator
from fastapi import Request
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine, Session
from app.settings import Settings

# Registrar las tablas en el metadata antes de `create_all`
from app.models import lot, product, production_order, stock_movement  # noqa: F401


def build_engine(settings: Settings) -> Engine:
    """Crea el engine a partir de la configuración. El ciclo de vida lo
    controla `app.main` (arranque/parada), no el módulo."""
    url = settings.database_url
    kwargs = {}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    return create_engine(url, echo=settings.sql_echo, **kwargs)


def create_db_and_tables(engine: Engine) -> None:
    SQLModel.metadata.create_all(engine)


def get_db(request: Request) -> Iterator[Session]:
    """Obtiene una sesión de la base de datos."""
    with Session(request.app.state.engine) as session:
        yield session


@contextmanager
def unit_of_work(session: Session) -> Iterator[Session]:
    """Transacción explícita de una operación.

    Los servicios reciben la misma sesión y nunca hacen `commit`; aquí se
    confirma una sola vez al salir, o se deshace todo si algo falla.
    """
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
