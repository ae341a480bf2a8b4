"""Exception hierarchy for quantcal.

Every library error derives from :class:`QuantCalError` and from the builtin
exception a caller would naturally catch, so ``except ValueError`` keeps
working for shape and bracket problems.
"""

from typing import Optional


class QuantCalError(Exception):
    """Base exception for all library errors."""


class ParameterShapeError(QuantCalError, ValueError):
    """A parameter vector does not match the model's total arity."""

    def __init__(self, message: str, expected: Optional[int] = None, received: Optional[int] = None):
        super().__init__(message)
        self.expected = expected
        self.received = received


class MaxEvaluationsExceededError(QuantCalError, RuntimeError):
    """An iterative solver used up its function evaluation budget."""

    def __init__(self, solver: str, max_evaluations: int):
        super().__init__(
            f"{solver}: maximum number of function evaluations ({max_evaluations}) exceeded"
        )
        self.solver = solver
        self.max_evaluations = max_evaluations


class BracketError(QuantCalError, ValueError):
    """The supplied interval does not bracket a root."""


class ConstraintError(QuantCalError, ValueError):
    """A parameter value violates its constraint."""
