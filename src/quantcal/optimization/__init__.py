"""
Multidimensional optimization: constraints, cost functions, end criteria
and the minimizers that drive model calibration.
"""

from .constraint import (
    Constraint,
    NoConstraint,
    PositiveConstraint,
    BoundaryConstraint,
    PredicateConstraint,
    CompositeConstraint
)

from .cost_function import CostFunction, DEFAULT_FINITE_DIFFERENCE_EPSILON

from .end_criteria import EndCriteria, EndCriteriaType

from .problem import Problem, DEFAULT_CONSTRAINT_PENALTY

from .method import (
    OptimizationMethod,
    Simplex,
    BFGS,
    LevenbergMarquardt
)

__all__ = [
    # Constraints
    'Constraint',
    'NoConstraint',
    'PositiveConstraint',
    'BoundaryConstraint',
    'PredicateConstraint',
    'CompositeConstraint',

    # Problem definition
    'CostFunction',
    'DEFAULT_FINITE_DIFFERENCE_EPSILON',
    'EndCriteria',
    'EndCriteriaType',
    'Problem',
    'DEFAULT_CONSTRAINT_PENALTY',

    # Methods
    'OptimizationMethod',
    'Simplex',
    'BFGS',
    'LevenbergMarquardt'
]
