from .solver1d import Solver1D, ObjectiveFunction


class Bisection(Solver1D):
    """Bisection solver: halves the bracket until it is narrower than the accuracy."""

    def _solve(self, f: ObjectiveFunction, x_accuracy: float) -> float:
        # Orient the search so that f > 0 lies at root + dx
        if self.fx_min < 0.0:
            dx = self.x_max - self.x_min
            self.root = self.x_min
        else:
            dx = self.x_min - self.x_max
            self.root = self.x_max

        while self.evaluation_number <= self.max_evaluations:
            dx /= 2.0
            x_mid = self.root + dx
            f_mid = f(x_mid)
            self.evaluation_number += 1

            if f_mid <= 0.0:
                self.root = x_mid
            if abs(dx) < x_accuracy or f_mid == 0.0:
                return self.root

        raise self._max_evaluations_exceeded()
