import numpy as np
from typing import Callable, List, Optional, Sequence, Union
import logging

from ..errors import ParameterShapeError, ConstraintError
from ..optimization.constraint import Constraint, CompositeConstraint
from ..optimization.cost_function import CostFunction, DEFAULT_FINITE_DIFFERENCE_EPSILON
from ..optimization.end_criteria import EndCriteria, EndCriteriaType
from ..optimization.method import OptimizationMethod
from ..optimization.problem import Problem, DEFAULT_CONSTRAINT_PENALTY
from ..utils.timers import Timer
from .calibration_helper import CalibrationHelper
from .parameter import Parameter, NullParameter

logger = logging.getLogger(__name__)


class PrivateConstraint(Constraint):
    """
    Constraint derived from a model's parameter groups.

    Slices the flattened vector group by group and tests each slice
    against that group's own constraint. Holds the model's argument list
    by reference, so groups installed after construction are honored.
    """

    def __init__(self, arguments: List[Parameter]):
        self.arguments = arguments

    def test(self, params) -> bool:
        params = np.asarray(params, dtype=float)
        k = 0
        for argument in self.arguments:
            size = argument.size()
            if not argument.test_params(params[k:k + size]):
                return False
            k += size
        return True


class CalibrationFunction(CostFunction):
    """
    Calibration objective over a model's flattened parameters.

    Evaluating the function pushes the trial vector into the model with
    ``set_params`` and then queries every instrument, so evaluations of the
    same model must not run concurrently. The value is the square root of
    the summed squared calibration errors; it is not divided
    by the number of instruments.
    """

    def __init__(
        self,
        model: "Model",
        instruments: Sequence[CalibrationHelper],
        finite_difference_epsilon: float = DEFAULT_FINITE_DIFFERENCE_EPSILON
    ):
        self.model = model
        self.instruments = instruments
        self._finite_difference_epsilon = float(finite_difference_epsilon)

    def value(self, params: np.ndarray) -> float:
        self.model.set_params(params)

        value = 0.0
        for instrument in self.instruments:
            diff = instrument.calibration_error()
            value += diff * diff

        return float(np.sqrt(value))

    def values(self, params: np.ndarray) -> np.ndarray:
        self.model.set_params(params)
        return np.array([instrument.calibration_error() for instrument in self.instruments])

    def finite_difference_epsilon(self) -> float:
        return self._finite_difference_epsilon


class Model:
    """
    Abstract calibrated model.

    A model owns a fixed number of parameter groups (``arguments``) and the
    constraint derived from them. Subclasses install their groups in
    ``__init__`` by assigning into ``self.arguments`` and may override
    :meth:`generate_arguments` to rebuild anything derived from the
    parameters; it runs after every successful parameter change.

    Example
    -------
    .. code-block:: python

        class Flat(Model):
            def __init__(self, rate):
                super().__init__(1)
                self.arguments[0] = ConstantParameter(rate, PositiveConstraint())

        model = Flat(0.03)
        model.calibrate(helpers, Simplex())
    """

    def __init__(self, n_arguments: int):
        self.arguments: List[Parameter] = [NullParameter() for _ in range(n_arguments)]
        self.constraint = PrivateConstraint(self.arguments)
        self._observers: List[Callable[[], None]] = []

    def total_arity(self) -> int:
        return sum(argument.size() for argument in self.arguments)

    def params(self) -> np.ndarray:
        """All scalars of all groups, in group order then index order."""
        if not self.arguments:
            return np.array([])
        return np.concatenate([argument.params() for argument in self.arguments])

    def set_params(self, params: Union[Sequence[float], np.ndarray]) -> None:
        """
        Assign a flattened parameter vector to the groups.

        The length is checked before anything is assigned, so a rejected
        vector leaves the model untouched.

        Args:
            params: Vector of length :meth:`total_arity`

        Raises:
            ParameterShapeError: If the vector is too small or too big
        """
        params = np.asarray(params, dtype=float).ravel()
        expected = self.total_arity()

        if len(params) < expected:
            raise ParameterShapeError("Parameter array too small", expected, len(params))
        if len(params) > expected:
            raise ParameterShapeError("Parameter array too big!", expected, len(params))

        k = 0
        for argument in self.arguments:
            for j in range(argument.size()):
                argument.set_param(j, params[k])
                k += 1

        self.update()

    def set_param(self, group: int, index: int, value: float) -> None:
        """Change a single scalar and notify dependents."""
        self.arguments[group].set_param(index, value)
        self.update()

    def update(self) -> None:
        self.generate_arguments()
        for observer in list(self._observers):
            observer()

    def generate_arguments(self) -> None:
        """Recompute quantities derived from the parameters."""

    def register_observer(self, callback: Callable[[], None]) -> None:
        self._observers.append(callback)

    def unregister_observer(self, callback: Callable[[], None]) -> None:
        self._observers.remove(callback)

    def calibrate(
        self,
        instruments: Sequence[CalibrationHelper],
        method: OptimizationMethod,
        additional_constraint: Optional[Constraint] = None,
        finite_difference_epsilon: float = DEFAULT_FINITE_DIFFERENCE_EPSILON,
        constraint_penalty: float = DEFAULT_CONSTRAINT_PENALTY
    ) -> EndCriteriaType:
        """
        Fit the model parameters to a set of instruments.

        Starts ``method`` from the current parameters, minimizes the
        :class:`CalibrationFunction` under the model constraint (intersected
        with ``additional_constraint`` if given) and commits the best point
        the method reports back into the model.

        Args:
            instruments: Calibration helpers priced against this model
            method: Optimization method; its end criteria are switched to
                positive optimization
            additional_constraint: Extra admissibility condition
            finite_difference_epsilon: Step for numerical derivatives
            constraint_penalty: Objective charged for inadmissible points

        Returns:
            The reason the optimization stopped

        Raises:
            ConstraintError: If the current parameters violate the model
                constraint or ``additional_constraint``
        """
        if additional_constraint is None or additional_constraint.is_null():
            constraint = self.constraint
        else:
            constraint = CompositeConstraint(self.constraint, additional_constraint)

        start = self.params()
        if not constraint.test(start):
            raise ConstraintError(
                f"{self.__class__.__name__}: starting parameters {start.tolist()} violate the calibration constraint")

        f = CalibrationFunction(self, instruments, finite_difference_epsilon)

        method.set_initial_value(start)
        method.end_criteria().set_positive_optimization()
        problem = Problem(f, constraint, method, constraint_penalty)

        name = self.__class__.__name__
        logger.info(f"Calibrating {name} to {len(instruments)} instruments")
        with Timer(f"{name} calibration", logging.DEBUG):
            result = problem.minimize()

        self.set_params(result)

        end_type = problem.end_criteria_type
        logger.info(
            f"{name} calibration ended with {end_type.value}: "
            f"objective = {problem.function_value():.6e}, "
            f"{problem.function_evaluations()} evaluations"
        )
        if not EndCriteria.succeeded(end_type):
            logger.warning(f"{name} calibration did not converge ({end_type.value})")

        return end_type

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(params={self.params().tolist()})"
