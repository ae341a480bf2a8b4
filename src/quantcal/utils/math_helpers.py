import numpy as np
import pandas as pd
from typing import Union
import logging

logger = logging.getLogger(__name__)

DAY_COUNT_BASES = ("act/365", "act/360", "30/360")


def yearfrac(d1: Union[pd.Timestamp, str], d2: Union[pd.Timestamp, str], basis: str = "act/365") -> float:
    """
    Calculate year fraction between two dates.

    Args:
        d1: Start date
        d2: End date
        basis: Day count convention ("act/365", "act/360", "30/360")

    Returns:
        Year fraction as float
    """
    d1 = pd.Timestamp(d1)
    d2 = pd.Timestamp(d2)

    if basis == "act/365":
        return (d2 - d1).days / 365.0
    elif basis == "act/360":
        return (d2 - d1).days / 360.0
    elif basis == "30/360":
        # US 30/360 without the end-of-February adjustment
        day1 = min(d1.day, 30)
        day2 = 30 if (d2.day == 31 and day1 == 30) else d2.day
        years = d2.year - d1.year
        months = d2.month - d1.month
        return (years * 360 + months * 30 + (day2 - day1)) / 360.0
    else:
        raise ValueError(f"Unsupported day count basis: {basis}")


def discount_factor(r: float, T: float) -> float:
    """
    Continuously compounded discount factor.

    Args:
        r: Zero rate
        T: Time in years

    Returns:
        Discount factor
    """
    return float(np.exp(-r * T))


def zero_rate(discount: float, T: float) -> float:
    """Continuously compounded zero rate implied by a discount factor."""
    if T <= 0:
        raise ValueError(f"Time must be positive, got {T}")
    return float(-np.log(discount) / T)
