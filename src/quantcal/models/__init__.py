"""
Calibrated models.

- Parameter groups with per-group constraints
- The abstract :class:`Model` with flattening and calibration
- Calibration helpers wrapping market instruments
- The Vasicek short-rate model
"""

from .parameter import (
    Parameter,
    ConstantParameter,
    NullParameter,
    PiecewiseConstantParameter
)

from .calibration_helper import CalibrationHelper, DiscountBondHelper

from .model import Model, CalibrationFunction, PrivateConstraint

from .vasicek import Vasicek

__all__ = [
    'Parameter',
    'ConstantParameter',
    'NullParameter',
    'PiecewiseConstantParameter',
    'CalibrationHelper',
    'DiscountBondHelper',
    'Model',
    'CalibrationFunction',
    'PrivateConstraint',
    'Vasicek'
]
