import logging

from .solver1d import Solver1D, ObjectiveFunction
from .brent import Brent

logger = logging.getLogger(__name__)


class Newton(Solver1D):
    """
    Newton-Raphson solver.

    The objective must expose a ``derivative(x)`` method. When a Newton step
    leaves the bracket, or the derivative vanishes, the remaining evaluation
    budget is handed to :class:`Brent` on the current bracket.
    """

    def _solve(self, f: ObjectiveFunction, x_accuracy: float) -> float:
        derivative = getattr(f, "derivative", None)
        if derivative is None:
            raise ValueError("Newton requires an objective with a derivative(x) method")

        froot = f(self.root)
        dfroot = derivative(self.root)
        self.evaluation_number += 1

        while self.evaluation_number <= self.max_evaluations:
            if dfroot == 0.0:
                logger.debug(f"Newton hit a zero derivative at {self.root}, switching to Brent")
                return self._fall_back_to_brent(f, x_accuracy, self.root)

            dx = froot / dfroot
            self.root -= dx

            if (self.x_min - self.root) * (self.root - self.x_max) < 0.0:
                logger.debug(f"Newton step left the bracket at {self.root}, switching to Brent")
                return self._fall_back_to_brent(f, x_accuracy, self.root + dx)

            if abs(dx) < x_accuracy:
                return self.root

            froot = f(self.root)
            dfroot = derivative(self.root)
            self.evaluation_number += 1

        raise self._max_evaluations_exceeded()

    def _fall_back_to_brent(self, f: ObjectiveFunction, x_accuracy: float, guess: float) -> float:
        if not self.x_min < guess < self.x_max:
            guess = 0.5 * (self.x_min + self.x_max)
        fallback = Brent(max(self.max_evaluations - self.evaluation_number, 1))
        root = fallback.solve_bracketed(f, x_accuracy, guess, self.x_min, self.x_max)
        self.evaluation_number += fallback.evaluation_number
        self.root = root
        return root
