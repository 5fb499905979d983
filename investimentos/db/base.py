"""
Database model registry.

Importing this module registers every table model with SQLModel's metadata,
which ``create_all()`` needs (used by ``main.lifespan`` and ``seed``).
"""

from sqlmodel import SQLModel

from investimentos.models.investor import Investor  # noqa: F401
from investimentos.models.investment import Investment  # noqa: F401

metadata = SQLModel.metadata
