import numpy as np
import logging

from .solver1d import Solver1D, ObjectiveFunction

logger = logging.getLogger(__name__)


class FalsePosition(Solver1D):
    """
    False position (regula falsi) solver.

    Each step interpolates linearly between the two bracket endpoints and
    replaces the endpoint whose function value has the same sign as the
    new estimate, so the root stays bracketed throughout.

    Notes:
        The interpolation divides by the raw ``fl - fh``. For a valid
        bracket the ratio ``fl / (fl - fh)`` stays in [0, 1]; what is not
        guarded is a NaN returned by ``f`` or an infinite function value.
        Either turns every later estimate into NaN without an exception
        (the arithmetic runs on ``numpy.float64``), and the loop ends with
        :class:`MaxEvaluationsExceededError` once the budget is spent.

    Algorithm after Press et al., "Numerical Recipes in C", 2nd ed., ch. 9.
    """

    def _solve(self, f: ObjectiveFunction, x_accuracy: float) -> float:
        # Orient the bracket so that fl < 0 < fh
        if self.fx_min < 0.0:
            xl, fl = np.float64(self.x_min), np.float64(self.fx_min)
            xh, fh = np.float64(self.x_max), np.float64(self.fx_max)
        else:
            xl, fl = np.float64(self.x_max), np.float64(self.fx_max)
            xh, fh = np.float64(self.x_min), np.float64(self.fx_min)

        dx = xh - xl
        while self.evaluation_number <= self.max_evaluations:
            root = xl + dx * fl / (fl - fh)
            self.root = float(root)
            froot = f(self.root)
            self.evaluation_number += 1

            if froot < 0.0:
                delta = xl - root
                xl, fl = root, np.float64(froot)
            else:
                delta = xh - root
                xh, fh = root, np.float64(froot)
            dx = xh - xl

            if abs(delta) < x_accuracy or froot == 0.0:
                logger.debug(
                    f"FalsePosition converged to {self.root} in {self.evaluation_number} evaluations")
                return self.root

        raise self._max_evaluations_exceeded()
