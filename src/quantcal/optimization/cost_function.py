import numpy as np
from typing import Callable, Optional, Tuple

DEFAULT_FINITE_DIFFERENCE_EPSILON = 1e-6

Admissible = Callable[[np.ndarray], bool]


class CostFunction:
    """
    Objective minimized by an optimization method.

    Subclasses implement :meth:`value`. Least-squares methods use
    :meth:`values` (the residual vector); gradient-based methods use the
    finite differences in :meth:`gradient` and :meth:`jacobian`, whose step
    is :meth:`finite_difference_epsilon`.

    Given an ``admissible`` predicate, the differences never evaluate a
    rejected point: a coordinate falls back to a one-sided step toward the
    admissible side, and gets a zero derivative when neither side is
    admissible.
    """

    def value(self, x: np.ndarray) -> float:
        raise NotImplementedError

    def values(self, x: np.ndarray) -> np.ndarray:
        return np.array([self.value(x)])

    def finite_difference_epsilon(self) -> float:
        return DEFAULT_FINITE_DIFFERENCE_EPSILON

    def gradient(self, x: np.ndarray, admissible: Optional[Admissible] = None) -> np.ndarray:
        x = np.asarray(x, dtype=float)
        grad = np.zeros_like(x)
        for i in range(len(x)):
            stencil = self._stencil(x, i, admissible)
            if stencil is None:
                continue
            up, down, h = stencil
            grad[i] = (self.value(up) - self.value(down)) / h
        return grad

    def jacobian(
        self,
        x: np.ndarray,
        admissible: Optional[Admissible] = None,
        n_residuals: Optional[int] = None
    ) -> np.ndarray:
        """
        Jacobian of :meth:`values`, shape ``(n_residuals, n_params)``.

        ``n_residuals`` sizes the all-zero Jacobian returned when no
        coordinate has an admissible step.
        """
        x = np.asarray(x, dtype=float)
        columns = []
        for i in range(len(x)):
            stencil = self._stencil(x, i, admissible)
            if stencil is None:
                columns.append(None)
                continue
            up, down, h = stencil
            columns.append((np.asarray(self.values(up)) - np.asarray(self.values(down))) / h)

        n_residuals = next((len(c) for c in columns if c is not None), n_residuals)
        if n_residuals is None:
            raise ValueError("n_residuals is required when no coordinate has an admissible step")
        return np.column_stack([
            c if c is not None else np.zeros(n_residuals) for c in columns
        ])

    def _stencil(
        self,
        x: np.ndarray,
        i: int,
        admissible: Optional[Admissible]
    ) -> Optional[Tuple[np.ndarray, np.ndarray, float]]:
        """Points and spacing for the difference along coordinate ``i``."""
        eps = self.finite_difference_epsilon()
        up = x.copy()
        up[i] += eps
        down = x.copy()
        down[i] -= eps

        if admissible is None:
            return up, down, 2.0 * eps

        up_ok = admissible(up)
        down_ok = admissible(down)
        if up_ok and down_ok:
            return up, down, 2.0 * eps
        if not admissible(x):
            return None
        if up_ok:
            return up, x, eps
        if down_ok:
            return x, down, eps
        return None
