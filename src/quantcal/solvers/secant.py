from .solver1d import Solver1D, ObjectiveFunction


class Secant(Solver1D):
    """
    Secant solver.

    Unlike false position it always keeps the two most recent iterates, so
    the root is not guaranteed to stay bracketed.
    """

    def _solve(self, f: ObjectiveFunction, x_accuracy: float) -> float:
        # The endpoint with the smaller |f| is the most recent guess
        if abs(self.fx_min) < abs(self.fx_max):
            self.root, froot = self.x_min, self.fx_min
            xl, fl = self.x_max, self.fx_max
        else:
            self.root, froot = self.x_max, self.fx_max
            xl, fl = self.x_min, self.fx_min

        while self.evaluation_number <= self.max_evaluations:
            dx = (xl - self.root) * froot / (froot - fl)
            xl, fl = self.root, froot
            self.root += dx
            froot = f(self.root)
            self.evaluation_number += 1

            if abs(dx) < x_accuracy or froot == 0.0:
                return self.root

        raise self._max_evaluations_exceeded()
