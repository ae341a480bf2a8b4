import numpy as np
import logging

from ..optimization.constraint import PositiveConstraint, NoConstraint
from ..utils.math_helpers import zero_rate
from .model import Model
from .parameter import ConstantParameter

logger = logging.getLogger(__name__)

# Below this mean-reversion speed the a -> 0 limits are used
SMALL_MEAN_REVERSION = 1e-8


class Vasicek(Model):
    """
    Vasicek short-rate model.

    dr = a (b - r) dt + sigma dW

    Parameter groups, in calibration order: ``a`` (positive), ``b``,
    ``sigma`` (positive), ``r0``.
    """

    def __init__(self, r0: float = 0.05, a: float = 0.1, b: float = 0.05, sigma: float = 0.01):
        super().__init__(4)
        self.arguments[0] = ConstantParameter(a, PositiveConstraint())
        self.arguments[1] = ConstantParameter(b, NoConstraint())
        self.arguments[2] = ConstantParameter(sigma, PositiveConstraint())
        self.arguments[3] = ConstantParameter(r0, NoConstraint())

    @property
    def a(self) -> float:
        return self.arguments[0](0.0)

    @property
    def b(self) -> float:
        return self.arguments[1](0.0)

    @property
    def sigma(self) -> float:
        return self.arguments[2](0.0)

    @property
    def r0(self) -> float:
        return self.arguments[3](0.0)

    def _B(self, t: float, T: float) -> float:
        tau = T - t
        if self.a < SMALL_MEAN_REVERSION:
            return tau
        return (1.0 - np.exp(-self.a * tau)) / self.a

    def _A(self, t: float, T: float) -> float:
        a, b, sigma = self.a, self.b, self.sigma
        tau = T - t
        B = self._B(t, T)
        if a < SMALL_MEAN_REVERSION:
            return float(np.exp(sigma * sigma * tau ** 3 / 6.0))
        sigma2 = sigma * sigma
        return float(np.exp((b - 0.5 * sigma2 / (a * a)) * (B - tau) - 0.25 * sigma2 * B * B / a))

    def discount_bond(self, now: float, maturity: float, rate: float) -> float:
        """Price at ``now`` of a unit zero-coupon bond maturing at ``maturity``, given short rate ``rate``."""
        return self._A(now, maturity) * float(np.exp(-self._B(now, maturity) * rate))

    def discount(self, t: float) -> float:
        return self.discount_bond(0.0, t, self.r0)

    def zero_rate(self, t: float) -> float:
        """Continuously compounded zero rate implied by the model."""
        return zero_rate(self.discount(t), t)
