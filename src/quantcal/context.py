from dataclasses import dataclass
from datetime import date, datetime
from typing import Union

import pandas as pd

from .utils.math_helpers import yearfrac, DAY_COUNT_BASES

DateLike = Union[str, date, datetime, pd.Timestamp]


@dataclass(frozen=True)
class EvaluationContext:
    """
    Evaluation date and day-count convention for pricing and calibration.

    Passed explicitly to the objects that need "today" instead of reading
    process-wide settings, so two calibrations with different dates can
    coexist.
    """

    evaluation_date: pd.Timestamp
    day_count: str = "act/365"

    def __post_init__(self):
        object.__setattr__(self, "evaluation_date", pd.Timestamp(self.evaluation_date).normalize())
        if self.day_count not in DAY_COUNT_BASES:
            raise ValueError(f"Unsupported day count basis: {self.day_count}")

    def year_fraction(self, d: DateLike) -> float:
        """Time in years from the evaluation date to ``d``."""
        return yearfrac(self.evaluation_date, pd.Timestamp(d), self.day_count)

    def with_date(self, evaluation_date: DateLike) -> "EvaluationContext":
        return EvaluationContext(pd.Timestamp(evaluation_date), self.day_count)
