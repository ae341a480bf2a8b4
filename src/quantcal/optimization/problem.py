import numpy as np
from typing import Optional, TYPE_CHECKING
import logging

from .constraint import Constraint
from .cost_function import CostFunction, Admissible
from .end_criteria import EndCriteriaType

if TYPE_CHECKING:
    from .method import OptimizationMethod

logger = logging.getLogger(__name__)

DEFAULT_CONSTRAINT_PENALTY = 1e10


class Problem:
    """
    A constrained optimization problem: cost function, constraint and the
    method that minimizes it.

    Points rejected by the constraint are charged ``constraint_penalty``
    instead of being evaluated, so the cost function only ever sees
    admissible parameter vectors, including the points of its
    finite-difference derivatives. The problem also keeps the evaluation
    counters and the best point reported by the method.
    """

    def __init__(
        self,
        cost_function: CostFunction,
        constraint: Constraint,
        method: "OptimizationMethod",
        constraint_penalty: float = DEFAULT_CONSTRAINT_PENALTY
    ):
        self.cost_function = cost_function
        self.constraint = constraint
        self.method = method
        self.constraint_penalty = float(constraint_penalty)

        self._function_evaluations = 0
        self._gradient_evaluations = 0
        self._rejected_points = 0
        self._current_value: Optional[np.ndarray] = None
        self._function_value = np.nan
        self.end_criteria_type = EndCriteriaType.NONE

    def value(self, x: np.ndarray) -> float:
        if not self.constraint.test(x):
            self._rejected_points += 1
            return self.constraint_penalty
        self._function_evaluations += 1
        return float(self.cost_function.value(x))

    def values(self, x: np.ndarray, n_residuals: int) -> np.ndarray:
        if not self.constraint.test(x):
            self._rejected_points += 1
            return np.full(n_residuals, np.sqrt(self.constraint_penalty / n_residuals))
        self._function_evaluations += 1
        return np.asarray(self.cost_function.values(x), dtype=float)

    def gradient(self, x: np.ndarray) -> np.ndarray:
        self._gradient_evaluations += 1
        return self.cost_function.gradient(x, self._admissible())

    def jacobian(self, x: np.ndarray, n_residuals: Optional[int] = None) -> np.ndarray:
        self._gradient_evaluations += 1
        return self.cost_function.jacobian(x, self._admissible(), n_residuals)

    def _admissible(self) -> Optional[Admissible]:
        return None if self.constraint.is_null() else self.constraint.test

    def minimize(self) -> np.ndarray:
        """
        Run the method on this problem.

        Returns:
            The best parameter vector found
        """
        self.end_criteria_type = self.method.minimize(self)
        logger.debug(
            f"Minimization ended with {self.end_criteria_type.value} after "
            f"{self._function_evaluations} evaluations ({self._rejected_points} rejected points)"
        )
        return self.minimum_value()

    def set_current_value(self, x: np.ndarray) -> None:
        self._current_value = np.array(x, dtype=float)

    def set_function_value(self, value: float) -> None:
        self._function_value = float(value)

    def minimum_value(self) -> np.ndarray:
        if self._current_value is None:
            raise RuntimeError("Problem has not been minimized yet")
        return self._current_value.copy()

    def function_value(self) -> float:
        return self._function_value

    def function_evaluations(self) -> int:
        return self._function_evaluations

    def gradient_evaluations(self) -> int:
        return self._gradient_evaluations

    def rejected_points(self) -> int:
        return self._rejected_points
