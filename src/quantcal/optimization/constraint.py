import numpy as np
from typing import Callable, Sequence, Tuple, Union
import logging

from ..errors import ConstraintError

logger = logging.getLogger(__name__)

ArrayLike = Union[Sequence[float], np.ndarray]

MAX_UPDATE_HALVINGS = 200


class Constraint:
    """
    Admissible region for a parameter vector.

    A constraint is a point-wise predicate (:meth:`test`) plus a projection
    (:meth:`update`) that shortens a step until the trial point is
    admissible. Constraints compose with ``&`` into a
    :class:`CompositeConstraint`; intersection is the only combinator.
    """

    def test(self, params: ArrayLike) -> bool:
        raise NotImplementedError

    def is_null(self) -> bool:
        """True when the constraint accepts every point."""
        return False

    def update(self, params: ArrayLike, direction: ArrayLike, beta: float) -> Tuple[np.ndarray, float]:
        """
        Move ``params`` along ``direction`` by at most ``beta``.

        The step is halved until the trial point passes :meth:`test`.

        Args:
            params: Current (admissible) point
            direction: Search direction
            beta: Initial step length

        Returns:
            Tuple of (accepted point, step length actually taken)

        Raises:
            ConstraintError: If no admissible point is found
        """
        params = np.asarray(params, dtype=float)
        direction = np.asarray(direction, dtype=float)

        step = float(beta)
        trial = params + step * direction
        halvings = 0
        while not self.test(trial):
            if halvings > MAX_UPDATE_HALVINGS:
                raise ConstraintError("can't update parameter vector")
            step *= 0.5
            halvings += 1
            trial = params + step * direction

        return trial, step

    def __and__(self, other: "Constraint") -> "Constraint":
        return CompositeConstraint(self, other)


class NoConstraint(Constraint):
    """Accepts everything."""

    def test(self, params: ArrayLike) -> bool:
        return True

    def is_null(self) -> bool:
        return True

    def __repr__(self) -> str:
        return "NoConstraint()"


class PositiveConstraint(Constraint):
    """Every component must be strictly positive."""

    def test(self, params: ArrayLike) -> bool:
        return bool(np.all(np.asarray(params, dtype=float) > 0.0))

    def __repr__(self) -> str:
        return "PositiveConstraint()"


class BoundaryConstraint(Constraint):
    """Every component must lie in the closed interval ``[low, high]``."""

    def __init__(self, low: float, high: float):
        if low > high:
            raise ValueError(f"Lower bound {low} exceeds upper bound {high}")
        self.low = float(low)
        self.high = float(high)

    def test(self, params: ArrayLike) -> bool:
        params = np.asarray(params, dtype=float)
        return bool(np.all((params >= self.low) & (params <= self.high)))

    def __repr__(self) -> str:
        return f"BoundaryConstraint({self.low}, {self.high})"


class PredicateConstraint(Constraint):
    """Wraps an arbitrary predicate over the full parameter vector."""

    def __init__(self, predicate: Callable[[np.ndarray], bool]):
        self.predicate = predicate

    def test(self, params: ArrayLike) -> bool:
        return bool(self.predicate(np.asarray(params, dtype=float)))


class CompositeConstraint(Constraint):
    """Intersection of two constraints: a point passes iff both accept it."""

    def __init__(self, c1: Constraint, c2: Constraint):
        self.c1 = c1
        self.c2 = c2

    def test(self, params: ArrayLike) -> bool:
        return self.c1.test(params) and self.c2.test(params)

    def is_null(self) -> bool:
        return self.c1.is_null() and self.c2.is_null()

    def __repr__(self) -> str:
        return f"CompositeConstraint({self.c1!r}, {self.c2!r})"
