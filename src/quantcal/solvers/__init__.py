"""
One-dimensional root finders.

All solvers share the :class:`Solver1D` contract: bracket a root, narrow
the bracket with a strategy-specific rule, and fail with
``MaxEvaluationsExceededError`` once the evaluation budget is spent.
"""

from .solver1d import Solver1D, ObjectiveFunction, DEFAULT_MAX_EVALUATIONS
from .false_position import FalsePosition
from .bisection import Bisection
from .secant import Secant
from .ridder import Ridder
from .brent import Brent
from .newton import Newton

__all__ = [
    'Solver1D',
    'ObjectiveFunction',
    'DEFAULT_MAX_EVALUATIONS',
    'FalsePosition',
    'Bisection',
    'Secant',
    'Ridder',
    'Brent',
    'Newton'
]
