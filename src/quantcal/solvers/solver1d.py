import numpy as np
from typing import Callable, Optional
import logging

from ..errors import BracketError, MaxEvaluationsExceededError

logger = logging.getLogger(__name__)

ObjectiveFunction = Callable[[float], float]

DEFAULT_MAX_EVALUATIONS = 100
BRACKET_GROWTH_FACTOR = 1.6
MACHINE_EPSILON = float(np.finfo(float).eps)


class Solver1D:
    """
    Base class for one-dimensional root finders.

    A solver first establishes a bracket ``[x_min, x_max]`` whose endpoint
    function values have opposite signs, either by searching outward from a
    guess (:meth:`solve`) or from an interval supplied by the caller
    (:meth:`solve_bracketed`). Subclasses then narrow the bracket in
    :meth:`_solve`, which sees the following state:

    - ``x_min``, ``x_max``: bracket endpoints
    - ``fx_min``, ``fx_max``: function values at the endpoints
    - ``root``: the initial guess (strategies may ignore it)
    - ``evaluation_number``: evaluations spent so far, counted against
      ``max_evaluations``

    Every strategy raises :class:`MaxEvaluationsExceededError` once the
    budget is exhausted; nothing is retried.
    """

    def __init__(self, max_evaluations: int = DEFAULT_MAX_EVALUATIONS):
        self.max_evaluations = DEFAULT_MAX_EVALUATIONS
        self.set_max_evaluations(max_evaluations)

        self.lower_bound: Optional[float] = None
        self.upper_bound: Optional[float] = None

        self.root = 0.0
        self.x_min = 0.0
        self.x_max = 0.0
        self.fx_min = 0.0
        self.fx_max = 0.0
        self.evaluation_number = 0

    @property
    def name(self) -> str:
        return self.__class__.__name__

    def set_max_evaluations(self, evaluations: int) -> None:
        """Set the maximum number of function evaluations for the bracketing routine."""
        if evaluations <= 0:
            raise ValueError(f"Max evaluations ({evaluations}) must be positive")
        self.max_evaluations = int(evaluations)

    def set_lower_bound(self, lower_bound: float) -> None:
        """Keep the bracket search from going below ``lower_bound``."""
        self.lower_bound = float(lower_bound)

    def set_upper_bound(self, upper_bound: float) -> None:
        """Keep the bracket search from going above ``upper_bound``."""
        self.upper_bound = float(upper_bound)

    def solve(
        self,
        f: ObjectiveFunction,
        accuracy: float,
        guess: float,
        step: float
    ) -> float:
        """
        Find a root of ``f`` starting from ``guess``.

        The bracket is grown geometrically from ``[guess - step, guess]`` or
        ``[guess, guess + step]`` until the endpoint values change sign.

        Args:
            f: Objective function
            accuracy: Required absolute accuracy on the abscissa
            guess: Starting point
            step: Initial bracket width

        Returns:
            The root estimate

        Raises:
            BracketError: If no sign change is found within the evaluation budget
            MaxEvaluationsExceededError: If the strategy fails to converge
        """
        accuracy = self._check_accuracy(accuracy)

        flipflop = -1
        self.root = float(guess)
        self.fx_max = f(self.root)

        if self.fx_max == 0.0:
            return self.root
        elif self.fx_max > 0.0:
            self.x_min = self._enforce_bounds(self.root - step)
            self.fx_min = f(self.x_min)
            self.x_max = self.root
        else:
            self.x_min = self.root
            self.fx_min = self.fx_max
            self.x_max = self._enforce_bounds(self.root + step)
            self.fx_max = f(self.x_max)

        self.evaluation_number = 2
        while self.evaluation_number <= self.max_evaluations:
            if self.fx_min * self.fx_max <= 0.0:
                if self.fx_min == 0.0:
                    return self.x_min
                if self.fx_max == 0.0:
                    return self.x_max
                self.root = (self.x_max + self.x_min) / 2.0
                logger.debug(
                    f"{self.name}: bracketed root in [{self.x_min}, {self.x_max}] "
                    f"after {self.evaluation_number} evaluations"
                )
                return self._solve(f, accuracy)

            if abs(self.fx_min) < abs(self.fx_max):
                self.x_min = self._enforce_bounds(
                    self.x_min + BRACKET_GROWTH_FACTOR * (self.x_min - self.x_max))
                self.fx_min = f(self.x_min)
            elif abs(self.fx_min) > abs(self.fx_max):
                self.x_max = self._enforce_bounds(
                    self.x_max + BRACKET_GROWTH_FACTOR * (self.x_max - self.x_min))
                self.fx_max = f(self.x_max)
            elif flipflop == -1:
                self.x_min = self._enforce_bounds(
                    self.x_min + BRACKET_GROWTH_FACTOR * (self.x_min - self.x_max))
                self.fx_min = f(self.x_min)
                self.evaluation_number += 1
                flipflop = 1
            else:
                self.x_max = self._enforce_bounds(
                    self.x_max + BRACKET_GROWTH_FACTOR * (self.x_max - self.x_min))
                self.fx_max = f(self.x_max)
                flipflop = -1
            self.evaluation_number += 1

        raise BracketError(
            f"{self.name}: unable to bracket root in {self.max_evaluations} function evaluations "
            f"(last bracket attempt: f[{self.x_min}, {self.x_max}] -> [{self.fx_min}, {self.fx_max}])"
        )

    def solve_bracketed(
        self,
        f: ObjectiveFunction,
        accuracy: float,
        guess: float,
        x_min: float,
        x_max: float
    ) -> float:
        """
        Find a root of ``f`` inside the caller-supplied bracket.

        Args:
            f: Objective function
            accuracy: Required absolute accuracy on the abscissa
            guess: Starting point, strictly inside ``(x_min, x_max)``
            x_min: Lower end of the bracket
            x_max: Upper end of the bracket

        Returns:
            The root estimate

        Raises:
            BracketError: If the interval is invalid or does not bracket a root
            MaxEvaluationsExceededError: If the strategy fails to converge
        """
        accuracy = self._check_accuracy(accuracy)

        self.x_min = float(x_min)
        self.x_max = float(x_max)

        if not self.x_min < self.x_max:
            raise BracketError(f"invalid range: x_min ({self.x_min}) >= x_max ({self.x_max})")
        if self.lower_bound is not None and self.x_min < self.lower_bound:
            raise BracketError(
                f"x_min ({self.x_min}) < enforced lower bound ({self.lower_bound})")
        if self.upper_bound is not None and self.x_max > self.upper_bound:
            raise BracketError(
                f"x_max ({self.x_max}) > enforced upper bound ({self.upper_bound})")

        self.fx_min = f(self.x_min)
        if self.fx_min == 0.0:
            return self.x_min

        self.fx_max = f(self.x_max)
        if self.fx_max == 0.0:
            return self.x_max

        self.evaluation_number = 2

        if not self.fx_min * self.fx_max < 0.0:
            raise BracketError(
                f"root not bracketed: f[{self.x_min}, {self.x_max}] -> "
                f"[{self.fx_min}, {self.fx_max}]"
            )
        if not self.x_min < guess < self.x_max:
            raise BracketError(
                f"guess ({guess}) outside bracket [{self.x_min}, {self.x_max}]")

        self.root = float(guess)
        return self._solve(f, accuracy)

    def _solve(self, f: ObjectiveFunction, x_accuracy: float) -> float:
        raise NotImplementedError

    def _max_evaluations_exceeded(self) -> MaxEvaluationsExceededError:
        logger.debug(f"{self.name}: giving up at root estimate {self.root}")
        return MaxEvaluationsExceededError(self.name, self.max_evaluations)

    def _enforce_bounds(self, x: float) -> float:
        if self.lower_bound is not None and x < self.lower_bound:
            return self.lower_bound
        if self.upper_bound is not None and x > self.upper_bound:
            return self.upper_bound
        return x

    @staticmethod
    def _check_accuracy(accuracy: float) -> float:
        if not accuracy > 0.0:
            raise ValueError(f"accuracy ({accuracy}) must be positive")
        return max(float(accuracy), MACHINE_EPSILON)
