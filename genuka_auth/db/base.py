# genuka_auth/db/base.py
from genuka_auth.db.base_class import Base

# Carrega os models para registrar as tabelas no metadata (alembic / create_all)
import genuka_auth.models.company  # noqa: F401

__all__ = ["Base"]
