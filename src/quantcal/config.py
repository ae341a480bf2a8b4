from dataclasses import dataclass, asdict, fields
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Tuple, Union
import logging

from .optimization import (
    Constraint,
    EndCriteria,
    EndCriteriaType,
    OptimizationMethod,
    Simplex,
    BFGS,
    LevenbergMarquardt,
    DEFAULT_CONSTRAINT_PENALTY,
    DEFAULT_FINITE_DIFFERENCE_EPSILON
)
from .solvers import (
    Solver1D,
    FalsePosition,
    Bisection,
    Secant,
    Ridder,
    Brent,
    Newton,
    DEFAULT_MAX_EVALUATIONS
)
from .utils.config import load_config, merge_configs

logger = logging.getLogger(__name__)


class SolverType(Enum):
    """One-dimensional root finders."""
    FALSE_POSITION = "false_position"
    BISECTION = "bisection"
    SECANT = "secant"
    RIDDER = "ridder"
    BRENT = "brent"
    NEWTON = "newton"


class OptimizerType(Enum):
    """Multidimensional minimizers used for calibration."""
    SIMPLEX = "simplex"
    BFGS = "bfgs"
    LEVENBERG_MARQUARDT = "levenberg_marquardt"


_SOLVERS = {
    SolverType.FALSE_POSITION: FalsePosition,
    SolverType.BISECTION: Bisection,
    SolverType.SECANT: Secant,
    SolverType.RIDDER: Ridder,
    SolverType.BRENT: Brent,
    SolverType.NEWTON: Newton,
}

_OPTIMIZERS = {
    OptimizerType.SIMPLEX: Simplex,
    OptimizerType.BFGS: BFGS,
    OptimizerType.LEVENBERG_MARQUARDT: LevenbergMarquardt,
}


@dataclass
class SolverConfig:
    """Configuration for one-dimensional root finding."""

    solver: SolverType = SolverType.FALSE_POSITION
    accuracy: float = 1e-8
    max_evaluations: int = DEFAULT_MAX_EVALUATIONS
    lower_bound: Optional[float] = None
    upper_bound: Optional[float] = None

    def __post_init__(self):
        self.solver = SolverType(self.solver)

    def build_solver(self) -> Solver1D:
        solver = _SOLVERS[self.solver](self.max_evaluations)
        if self.lower_bound is not None:
            solver.set_lower_bound(self.lower_bound)
        if self.upper_bound is not None:
            solver.set_upper_bound(self.upper_bound)
        return solver

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> 'SolverConfig':
        return cls(**_known_fields(cls, values))


@dataclass
class CalibrationConfig:
    """Configuration for model calibration."""

    # Optimization settings
    method: OptimizerType = OptimizerType.SIMPLEX
    max_iterations: int = 1000
    max_stationary_state_iterations: int = 100
    root_epsilon: float = 1e-8
    function_epsilon: float = 1e-8
    gradient_norm_epsilon: float = 1e-8

    # Objective settings
    finite_difference_epsilon: float = DEFAULT_FINITE_DIFFERENCE_EPSILON
    constraint_penalty: float = DEFAULT_CONSTRAINT_PENALTY

    def __post_init__(self):
        self.method = OptimizerType(self.method)

    def build_end_criteria(self) -> EndCriteria:
        return EndCriteria(
            max_iterations=self.max_iterations,
            max_stationary_state_iterations=self.max_stationary_state_iterations,
            root_epsilon=self.root_epsilon,
            function_epsilon=self.function_epsilon,
            gradient_norm_epsilon=self.gradient_norm_epsilon
        )

    def build_method(self) -> OptimizationMethod:
        return _OPTIMIZERS[self.method](self.build_end_criteria())

    def calibrate(
        self,
        model,
        instruments: Sequence,
        additional_constraint: Optional[Constraint] = None
    ) -> EndCriteriaType:
        """Calibrate ``model`` with a fresh method built from this configuration."""
        return model.calibrate(
            instruments,
            self.build_method(),
            additional_constraint,
            finite_difference_epsilon=self.finite_difference_epsilon,
            constraint_penalty=self.constraint_penalty
        )

    def to_dict(self) -> Dict[str, Any]:
        values = asdict(self)
        values['method'] = self.method.value
        return values

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> 'CalibrationConfig':
        return cls(**_known_fields(cls, values))


def _known_fields(cls, values: Dict[str, Any]) -> Dict[str, Any]:
    names = {f.name for f in fields(cls)}
    unknown = set(values) - names
    if unknown:
        raise ValueError(f"Unknown {cls.__name__} keys: {sorted(unknown)}")
    return dict(values)


def load_settings(
    path: Union[str, Path],
    overrides: Optional[Dict[str, Any]] = None
) -> Tuple[SolverConfig, CalibrationConfig]:
    """
    Read solver and calibration settings from a YAML file.

    The file may contain ``solver`` and ``calibration`` sections; missing
    keys keep their dataclass defaults.

    Args:
        path: YAML file
        overrides: Nested dictionary merged over the file contents

    Returns:
        Tuple of (SolverConfig, CalibrationConfig)
    """
    config = load_config(path)
    if overrides:
        config = merge_configs(config, overrides)

    solver_config = SolverConfig.from_dict(config.get('solver') or {})
    calibration_config = CalibrationConfig.from_dict(config.get('calibration') or {})
    logger.debug(f"Settings from {path}: {solver_config}, {calibration_config}")

    return solver_config, calibration_config
