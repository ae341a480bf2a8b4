from enum import Enum
from typing import Tuple
import logging

logger = logging.getLogger(__name__)


class EndCriteriaType(Enum):
    """Why an optimization stopped."""
    NONE = "None"
    MAX_ITERATIONS = "MaxIterations"
    STATIONARY_POINT = "StationaryPoint"
    STATIONARY_FUNCTION_VALUE = "StationaryFunctionValue"
    STATIONARY_FUNCTION_ACCURACY = "StationaryFunctionAccuracy"
    ZERO_GRADIENT_NORM = "ZeroGradientNorm"
    UNKNOWN = "Unknown"


CONVERGED_TYPES = (
    EndCriteriaType.STATIONARY_POINT,
    EndCriteriaType.STATIONARY_FUNCTION_VALUE,
    EndCriteriaType.STATIONARY_FUNCTION_ACCURACY,
    EndCriteriaType.ZERO_GRADIENT_NORM,
)


class EndCriteria:
    """
    Termination policy shared by the optimization methods.

    Args:
        max_iterations: Hard iteration ceiling
        max_stationary_state_iterations: Iterations without improvement
            before the function value is considered stationary
        root_epsilon: Tolerance on the parameter vector
        function_epsilon: Tolerance on the objective
        gradient_norm_epsilon: Tolerance on the gradient norm

    In positive-optimization mode the objective is known to be
    non-negative, so reaching a value below ``function_epsilon`` counts
    as convergence.
    """

    def __init__(
        self,
        max_iterations: int = 1000,
        max_stationary_state_iterations: int = 100,
        root_epsilon: float = 1e-8,
        function_epsilon: float = 1e-8,
        gradient_norm_epsilon: float = 1e-8
    ):
        if max_iterations <= 0:
            raise ValueError(f"max_iterations ({max_iterations}) must be positive")
        if max_stationary_state_iterations <= 1:
            raise ValueError(
                f"max_stationary_state_iterations ({max_stationary_state_iterations}) must be greater than one")
        if max_stationary_state_iterations > max_iterations:
            raise ValueError(
                f"max_stationary_state_iterations ({max_stationary_state_iterations}) "
                f"must not exceed max_iterations ({max_iterations})")

        self.max_iterations = int(max_iterations)
        self.max_stationary_state_iterations = int(max_stationary_state_iterations)
        self.root_epsilon = float(root_epsilon)
        self.function_epsilon = float(function_epsilon)
        self.gradient_norm_epsilon = float(gradient_norm_epsilon)
        self.positive_optimization = False

    def set_positive_optimization(self) -> None:
        self.positive_optimization = True

    def check_max_iterations(self, iteration: int) -> bool:
        return iteration >= self.max_iterations

    def check_stationary_function_value(
        self,
        f_old: float,
        f_new: float,
        stationary_iterations: int
    ) -> Tuple[bool, int]:
        """
        Track consecutive iterations whose objective barely moves.

        Returns:
            Tuple of (stationary, updated stationary-iteration count)
        """
        if abs(f_new - f_old) >= self.function_epsilon:
            return False, 0
        stationary_iterations += 1
        return stationary_iterations > self.max_stationary_state_iterations, stationary_iterations

    def check_stationary_function_accuracy(self, f: float) -> bool:
        return self.positive_optimization and f < self.function_epsilon

    def check_zero_gradient_norm(self, gradient_norm: float) -> bool:
        return gradient_norm < self.gradient_norm_epsilon

    @staticmethod
    def succeeded(end_type: EndCriteriaType) -> bool:
        return end_type in CONVERGED_TYPES

    def __repr__(self) -> str:
        return (f"EndCriteria(max_iterations={self.max_iterations}, "
                f"max_stationary_state_iterations={self.max_stationary_state_iterations}, "
                f"root_epsilon={self.root_epsilon}, function_epsilon={self.function_epsilon}, "
                f"gradient_norm_epsilon={self.gradient_norm_epsilon})")
