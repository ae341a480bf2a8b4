import math
import numpy as np

from .solver1d import Solver1D, ObjectiveFunction

# Internal stopping tolerance is the requested accuracy divided by this
ACCURACY_TIGHTENING = 100.0


def _sign(a: float, b: float) -> float:
    return abs(a) if b >= 0.0 else -abs(a)


class Ridder(Solver1D):
    """Ridder's method: exponential-fit false position with quadratic convergence."""

    def _solve(self, f: ObjectiveFunction, x_accuracy: float) -> float:
        x_accuracy /= ACCURACY_TIGHTENING
        self.root = -float(np.finfo(float).max)

        while self.evaluation_number <= self.max_evaluations:
            x_mid = 0.5 * (self.x_min + self.x_max)
            fx_mid = f(x_mid)
            self.evaluation_number += 1

            s = math.sqrt(fx_mid * fx_mid - self.fx_min * self.fx_max)
            if s == 0.0:
                return self.root

            direction = 1.0 if self.fx_min >= self.fx_max else -1.0
            next_root = x_mid + (x_mid - self.x_min) * (direction * fx_mid / s)
            if abs(next_root - self.root) <= x_accuracy:
                return self.root

            self.root = next_root
            froot = f(self.root)
            self.evaluation_number += 1
            if froot == 0.0:
                return self.root

            # Keep the root bracketed
            if _sign(fx_mid, froot) != fx_mid:
                self.x_min, self.fx_min = x_mid, fx_mid
                self.x_max, self.fx_max = self.root, froot
            elif _sign(self.fx_min, froot) != self.fx_min:
                self.x_max, self.fx_max = self.root, froot
            elif _sign(self.fx_max, froot) != self.fx_max:
                self.x_min, self.fx_min = self.root, froot
            else:
                raise RuntimeError("Ridder: lost the bracket on a sign-consistent evaluation")

            if abs(self.x_max - self.x_min) <= x_accuracy:
                return self.root

        raise self._max_evaluations_exceeded()
