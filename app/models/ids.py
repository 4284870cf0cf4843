import uuid


def new_id() -> str:
    """Identificador textual (uuid4) compartido por todas las tablas."""
    return str(uuid.uuid4())
