"""
quantcal
========

Numerical core for interest-rate model calibration:

- One-dimensional root finders sharing a bracketing/convergence contract
  (false position, bisection, secant, Ridder, Brent, Newton)
- Constraints, cost functions, end criteria and multidimensional
  minimizers (Nelder-Mead simplex, BFGS, Levenberg-Marquardt)
- Parameter groups and the calibrated :class:`Model` base class
- Calibration helpers and the Vasicek short-rate model
"""

__version__ = "0.3.0"

from .errors import (
    QuantCalError,
    ParameterShapeError,
    MaxEvaluationsExceededError,
    BracketError,
    ConstraintError
)
from .context import EvaluationContext
from .solvers import FalsePosition, Bisection, Secant, Ridder, Brent, Newton
from .optimization import (
    NoConstraint,
    PositiveConstraint,
    BoundaryConstraint,
    CompositeConstraint,
    EndCriteria,
    EndCriteriaType,
    Simplex,
    BFGS,
    LevenbergMarquardt
)
from .models import Model, CalibrationHelper, DiscountBondHelper, Vasicek
from .config import SolverConfig, CalibrationConfig, load_settings
from .utils.logging_utils import setup_logging

__all__ = [
    'QuantCalError',
    'ParameterShapeError',
    'MaxEvaluationsExceededError',
    'BracketError',
    'ConstraintError',
    'EvaluationContext',
    'FalsePosition',
    'Bisection',
    'Secant',
    'Ridder',
    'Brent',
    'Newton',
    'NoConstraint',
    'PositiveConstraint',
    'BoundaryConstraint',
    'CompositeConstraint',
    'EndCriteria',
    'EndCriteriaType',
    'Simplex',
    'BFGS',
    'LevenbergMarquardt',
    'Model',
    'CalibrationHelper',
    'DiscountBondHelper',
    'Vasicek',
    'SolverConfig',
    'CalibrationConfig',
    'load_settings',
    'setup_logging'
]
