"""Grant portfolio: tranches of options and the holding period.

A portfolio is an immutable, ordered collection of tranches. Editing
operations return a new portfolio rather than changing the old one.
"""

import logging
from datetime import date
from typing import Any, Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .coerce import parse_date, to_non_negative

logger = logging.getLogger(__name__)


class Tranche(BaseModel):
    """One grant lot: a share count at a single exercise price."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    id: int = Field(..., ge=0, description="Unique within a portfolio")
    share_count: float = Field(default=0.0, description="Number of options")
    exercise_price: float = Field(default=0.0, description="Exercise (strike) price per share")

    @field_validator("share_count", "exercise_price", mode="before")
    @classmethod
    def coerce_amount(cls, value: Any) -> float:
        return to_non_negative(value)


class GrantPortfolio(BaseModel):
    """Ordered tranches making up an employee's grants."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    tranches: tuple[Tranche, ...] = Field(..., min_length=1)

    @model_validator(mode="after")
    def check_unique_ids(self) -> "GrantPortfolio":
        ids = [t.id for t in self.tranches]
        if len(ids) != len(set(ids)):
            raise ValueError(f"Duplicate tranche ids: {ids}")
        return self

    @classmethod
    def from_lots(cls, lots: Iterable[tuple[Any, Any]]) -> "GrantPortfolio":
        """Build a portfolio from (share_count, exercise_price) pairs.

        Ids are assigned 1..n in order. An empty iterable yields a single
        empty tranche.
        """
        tranches = [
            Tranche(id=index, share_count=shares, exercise_price=price)
            for index, (shares, price) in enumerate(lots, start=1)
        ]
        if not tranches:
            tranches = [Tranche(id=1)]
        return cls(tranches=tuple(tranches))

    @property
    def total_shares(self) -> float:
        return sum(t.share_count for t in self.tranches)

    @property
    def exercise_cost(self) -> float:
        """Sum of exercise price times shares across tranches."""
        return sum(t.exercise_price * t.share_count for t in self.tranches)

    @property
    def weighted_avg_exercise_price(self) -> float:
        """Share-weighted average exercise price (0 when there are no shares)."""
        total = self.total_shares
        if total <= 0:
            return 0.0
        return self.exercise_cost / total

    def perquisite(self, fmv_at_exercise: float) -> float:
        """Taxable spread at exercise, summed per tranche (never negative)."""
        return sum(
            max(0.0, fmv_at_exercise - t.exercise_price) * t.share_count
            for t in self.tranches
        )

    def add_tranche(self, share_count: float = 0.0, exercise_price: float = 0.0) -> "GrantPortfolio":
        """Return a new portfolio with one more tranche appended."""
        new_id = max([t.id for t in self.tranches] + [0]) + 1
        tranche = Tranche(id=new_id, share_count=share_count, exercise_price=exercise_price)
        return GrantPortfolio(tranches=self.tranches + (tranche,))

    def remove_tranche(self, tranche_id: int) -> "GrantPortfolio":
        """Return a new portfolio without the given tranche.

        The last remaining tranche can't be removed; the portfolio is
        returned unchanged in that case (and for unknown ids).
        """
        if len(self.tranches) <= 1:
            logger.debug("Refusing to remove the only tranche")
            return self
        remaining = tuple(t for t in self.tranches if t.id != tranche_id)
        if len(remaining) == len(self.tranches):
            return self
        return GrantPortfolio(tranches=remaining)

    def update_tranche(self, tranche_id: int, **changes: Any) -> "GrantPortfolio":
        """Return a new portfolio with one tranche's fields replaced."""
        updated = tuple(
            Tranche.model_validate({**t.model_dump(), **changes}) if t.id == tranche_id else t
            for t in self.tranches
        )
        return GrantPortfolio(tranches=updated)


def holding_months(exercise_date: Any, sale_date: Any) -> int:
    """Whole calendar months between exercise and sale.

    Only year and month count (days are ignored). Missing or unparseable
    dates give 0, as does a sale before exercise.
    """
    start: Optional[date] = parse_date(exercise_date)
    end: Optional[date] = parse_date(sale_date)
    if start is None or end is None:
        return 0
    months = (end.year - start.year) * 12 + (end.month - start.month)
    return max(0, months)
