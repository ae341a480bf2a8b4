from .solver1d import Solver1D, ObjectiveFunction, MACHINE_EPSILON


def _sign(a: float, b: float) -> float:
    return abs(a) if b >= 0.0 else -abs(a)


class Brent(Solver1D):
    """
    Brent's method.

    Combines bisection, secant and inverse quadratic interpolation, falling
    back to bisection whenever an interpolated step would leave the bracket
    or shrink it too slowly.
    """

    def _solve(self, f: ObjectiveFunction, x_accuracy: float) -> float:
        d = e = 0.0
        self.root = self.x_max
        froot = self.fx_max

        while self.evaluation_number <= self.max_evaluations:
            if (froot > 0.0 and self.fx_max > 0.0) or (froot < 0.0 and self.fx_max < 0.0):
                # Rename x_min, root, x_max and adjust the bracket
                self.x_max, self.fx_max = self.x_min, self.fx_min
                e = d = self.root - self.x_min

            if abs(self.fx_max) < abs(froot):
                self.x_min, self.root, self.x_max = self.root, self.x_max, self.root
                self.fx_min, froot, self.fx_max = froot, self.fx_max, froot

            x_acc1 = 2.0 * MACHINE_EPSILON * abs(self.root) + 0.5 * x_accuracy
            x_mid = (self.x_max - self.root) / 2.0
            if abs(x_mid) <= x_acc1 or froot == 0.0:
                return self.root

            if abs(e) >= x_acc1 and abs(self.fx_min) > abs(froot):
                # Inverse quadratic interpolation
                s = froot / self.fx_min
                if self.x_min == self.x_max:
                    p = 2.0 * x_mid * s
                    q = 1.0 - s
                else:
                    q = self.fx_min / self.fx_max
                    r = froot / self.fx_max
                    p = s * (2.0 * x_mid * q * (q - r) - (self.root - self.x_min) * (r - 1.0))
                    q = (q - 1.0) * (r - 1.0) * (s - 1.0)
                if p > 0.0:
                    q = -q
                p = abs(p)
                min1 = 3.0 * x_mid * q - abs(x_acc1 * q)
                min2 = abs(e * q)
                if 2.0 * p < min(min1, min2):
                    e = d
                    d = p / q
                else:
                    d = x_mid
                    e = d
            else:
                d = x_mid
                e = d

            self.x_min, self.fx_min = self.root, froot
            if abs(d) > x_acc1:
                self.root += d
            else:
                self.root += _sign(x_acc1, x_mid)
            froot = f(self.root)
            self.evaluation_number += 1

        raise self._max_evaluations_exceeded()
