"""SQLModel table models — import here so metadata is populated."""

from investimentos.models.investor import Investor  # noqa: F401
from investimentos.models.investment import Investment  # noqa: F401
