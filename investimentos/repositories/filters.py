"""
Query composer for the multi-criteria searches.

``FilterBuilder`` collects optional clauses and folds them into a single
AND-combined predicate. A clause is only added when its input is present:

- text inputs are absent when ``None`` or ``""``;
- numeric/date inputs are absent only when ``None`` (``0`` is a real bound).

With no clauses the predicate is ``TRUE``, so every row matches.

Usage::

    predicate = (
        FilterBuilder()
        .contains_text(Investor.nome, nome)
        .equals_text(Investor.perfil_risco, perfil)
        .at_least(Investor.saldo_total, saldo_minimo)
        .build()
    )
    stmt = select(Investor).where(predicate).order_by(Investor.nome)
"""

from datetime import date
from typing import Any, List, Optional, Tuple

from sqlalchemy import and_, func, true
from sqlalchemy.sql.elements import ColumnElement


def icontains(column: Any, text: str) -> ColumnElement:
    """Case-insensitive substring match; LIKE wildcards in ``text`` are literal."""
    return func.lower(column).contains(text.lower(), autoescape=True)


def iequals(column: Any, text: str) -> ColumnElement:
    """Case-insensitive equality."""
    return func.lower(column) == text.lower()


def subtract_years(day: date, years: int) -> date:
    """
    Same calendar day ``years`` earlier; Feb 29 falls back to Feb 28.

    Results before year 1 clamp to ``date.min``.
    """
    if years >= day.year:
        return date.min
    try:
        return day.replace(year=day.year - years)
    except ValueError:
        return day.replace(year=day.year - years, day=28)


def birth_date_window(idade_minima: int, idade_maxima: int, today: date) -> Tuple[date, date]:
    """
    Translate an inclusive age range into an inclusive birth-date range.

    The oldest age gives the earliest birth date::

        >>> birth_date_window(30, 40, date(2024, 1, 1))
        (datetime.date(1984, 1, 1), datetime.date(1994, 1, 1))
    """
    return subtract_years(today, idade_maxima), subtract_years(today, idade_minima)


class FilterBuilder:
    """Accumulates optional WHERE clauses, in the order they are added."""

    def __init__(self) -> None:
        self._clauses: List[ColumnElement] = []

    def __len__(self) -> int:
        return len(self._clauses)

    def contains_text(self, column: Any, value: Optional[str]) -> "FilterBuilder":
        if value:
            self._clauses.append(icontains(column, value))
        return self

    def equals_text(self, column: Any, value: Optional[str]) -> "FilterBuilder":
        if value:
            self._clauses.append(iequals(column, value))
        return self

    def at_least(self, column: Any, value: Any) -> "FilterBuilder":
        if value is not None:
            self._clauses.append(column >= value)
        return self

    def at_most(self, column: Any, value: Any) -> "FilterBuilder":
        if value is not None:
            self._clauses.append(column <= value)
        return self

    def between(self, column: Any, lower: Any, upper: Any) -> "FilterBuilder":
        """Inclusive on both ends; each bound is optional on its own."""
        return self.at_least(column, lower).at_most(column, upper)

    def build(self) -> ColumnElement:
        return and_(true(), *self._clauses)
