from typing import Optional, Union
import logging

from ..context import EvaluationContext, DateLike
from ..utils.math_helpers import discount_factor

logger = logging.getLogger(__name__)


class CalibrationHelper:
    """
    Market instrument used to calibrate a model.

    ``calibration_error`` is recomputed against the model's current
    parameters on every call; nothing is cached, so the value always
    reflects the latest ``set_params``.
    """

    def __init__(self, market_value: float):
        if market_value == 0.0:
            raise ValueError("Market value must be non-zero for a relative calibration error")
        self._market_value = float(market_value)

    def market_value(self) -> float:
        return self._market_value

    def model_value(self) -> float:
        raise NotImplementedError

    def calibration_error(self) -> float:
        """Relative pricing error ``|market - model| / market``."""
        return abs(self.market_value() - self.model_value()) / self.market_value()


class DiscountBondHelper(CalibrationHelper):
    """
    Zero-coupon bond quoted by its price.

    Args:
        model: Any model exposing ``discount(t)``
        maturity: Time to maturity in years, or a maturity date
        market_price: Observed price per unit notional
        context: Evaluation context, required when ``maturity`` is a date
    """

    def __init__(
        self,
        model,
        maturity: Union[float, DateLike],
        market_price: float,
        context: Optional[EvaluationContext] = None
    ):
        super().__init__(market_price)
        self.model = model
        self.maturity = self._to_time(maturity, context)

    @classmethod
    def from_zero_rate(
        cls,
        model,
        maturity: Union[float, DateLike],
        rate: float,
        context: Optional[EvaluationContext] = None
    ) -> "DiscountBondHelper":
        """Build the helper from a continuously compounded zero rate."""
        t = cls._to_time(maturity, context)
        return cls(model, t, discount_factor(rate, t))

    def model_value(self) -> float:
        return float(self.model.discount(self.maturity))

    @staticmethod
    def _to_time(maturity: Union[float, DateLike], context: Optional[EvaluationContext]) -> float:
        if isinstance(maturity, (int, float)):
            t = float(maturity)
        else:
            if context is None:
                raise ValueError("An evaluation context is required for date maturities")
            t = context.year_fraction(maturity)
        if t <= 0.0:
            raise ValueError(f"Maturity must be after the evaluation date, got t={t}")
        return t

    def __repr__(self) -> str:
        return f"DiscountBondHelper(maturity={self.maturity:.4f}, market={self.market_value():.6f})"
