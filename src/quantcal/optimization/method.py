import numpy as np
from typing import Any, Callable, Dict, Optional, Sequence, Tuple, Union
from scipy.optimize import minimize, least_squares

from .end_criteria import EndCriteria, EndCriteriaType
from .problem import Problem
from ..utils.logging_utils import LoggerMixin


class OptimizationMethod(LoggerMixin):
    """
    Base class for multidimensional minimizers.

    A method holds its own termination policy (:class:`EndCriteria`) and
    starting point. :meth:`minimize` runs on a :class:`Problem`, records the
    best point and function value on it, and returns the reason it stopped.
    Running out of iterations is reported through the returned
    :class:`EndCriteriaType`, never raised.
    """

    def __init__(self, end_criteria: Optional[EndCriteria] = None):
        self._end_criteria = end_criteria or EndCriteria()
        self._initial_value: Optional[np.ndarray] = None

    def set_initial_value(self, x: Union[Sequence[float], np.ndarray]) -> None:
        self._initial_value = np.array(x, dtype=float)

    def initial_value(self) -> np.ndarray:
        if self._initial_value is None:
            raise RuntimeError(f"{self.__class__.__name__}: initial value not set")
        return self._initial_value.copy()

    def end_criteria(self) -> EndCriteria:
        return self._end_criteria

    def minimize(self, problem: Problem) -> EndCriteriaType:
        raise NotImplementedError

    def _monitor(self) -> Tuple[Callable[[Any], None], Dict[str, Any]]:
        """Build a scipy callback that applies the function-value end criteria."""
        ec = self._end_criteria
        state: Dict[str, Any] = {
            'iterations': 0,
            'stationary_iterations': 0,
            'f_old': None,
            'end_type': None
        }

        def callback(intermediate_result):
            state['iterations'] += 1
            f_new = float(intermediate_result.fun)

            if ec.check_stationary_function_accuracy(f_new):
                state['end_type'] = EndCriteriaType.STATIONARY_FUNCTION_ACCURACY
                raise StopIteration

            if state['f_old'] is not None:
                stationary, state['stationary_iterations'] = ec.check_stationary_function_value(
                    state['f_old'], f_new, state['stationary_iterations'])
                if stationary:
                    state['end_type'] = EndCriteriaType.STATIONARY_FUNCTION_VALUE
                    raise StopIteration

            state['f_old'] = f_new

        return callback, state

    def _finish(
        self,
        problem: Problem,
        result: Any,
        end_type: EndCriteriaType
    ) -> EndCriteriaType:
        problem.set_current_value(result.x)
        problem.set_function_value(result.fun)

        if EndCriteria.succeeded(end_type):
            self.logger.debug(f"Converged ({end_type.value}), f = {result.fun:.6e}")
        else:
            self.logger.debug(
                f"Stopped without convergence ({end_type.value}): {getattr(result, 'message', '')}")
        return end_type


class Simplex(OptimizationMethod):
    """
    Nelder-Mead downhill simplex.

    Gradient-free; pairs well with the constraint penalty applied by
    :class:`Problem`.
    """

    def minimize(self, problem: Problem) -> EndCriteriaType:
        ec = self._end_criteria
        callback, state = self._monitor()

        result = minimize(
            problem.value,
            x0=self.initial_value(),
            method="Nelder-Mead",
            callback=callback,
            options={
                'maxiter': ec.max_iterations,
                'xatol': ec.root_epsilon,
                'fatol': ec.function_epsilon
            }
        )

        if state['end_type'] is not None:
            end_type = state['end_type']
        elif result.nit >= ec.max_iterations:
            end_type = EndCriteriaType.MAX_ITERATIONS
        elif result.success:
            end_type = EndCriteriaType.STATIONARY_POINT
        else:
            end_type = EndCriteriaType.UNKNOWN

        return self._finish(problem, result, end_type)


class BFGS(OptimizationMethod):
    """Quasi-Newton minimizer using the cost function's finite-difference gradient."""

    def minimize(self, problem: Problem) -> EndCriteriaType:
        ec = self._end_criteria
        callback, state = self._monitor()

        result = minimize(
            problem.value,
            x0=self.initial_value(),
            method="BFGS",
            jac=problem.gradient,
            callback=callback,
            options={
                'maxiter': ec.max_iterations,
                'gtol': ec.gradient_norm_epsilon
            }
        )

        if state['end_type'] is not None:
            end_type = state['end_type']
        elif result.nit >= ec.max_iterations:
            end_type = EndCriteriaType.MAX_ITERATIONS
        elif result.success:
            end_type = EndCriteriaType.ZERO_GRADIENT_NORM
        else:
            end_type = EndCriteriaType.UNKNOWN

        return self._finish(problem, result, end_type)


class LevenbergMarquardt(OptimizationMethod):
    """
    Levenberg-Marquardt on the residual vector of the cost function.

    Falls back to scipy's trust-region reflective solver when there are
    fewer residuals than parameters, which MINPACK's LM cannot handle.
    The iteration ceiling is applied as a limit on function evaluations.
    """

    _STATUS_MAP = {
        0: EndCriteriaType.MAX_ITERATIONS,
        1: EndCriteriaType.ZERO_GRADIENT_NORM,
        2: EndCriteriaType.STATIONARY_FUNCTION_VALUE,
        3: EndCriteriaType.STATIONARY_POINT,
        4: EndCriteriaType.STATIONARY_POINT,
    }

    def minimize(self, problem: Problem) -> EndCriteriaType:
        ec = self._end_criteria
        x0 = self.initial_value()
        n_residuals = len(np.atleast_1d(problem.cost_function.values(x0)))
        algorithm = "lm" if n_residuals >= len(x0) else "trf"

        result = least_squares(
            lambda x: problem.values(x, n_residuals),
            x0,
            jac=lambda x: problem.jacobian(x, n_residuals),
            method=algorithm,
            xtol=ec.root_epsilon,
            ftol=ec.function_epsilon,
            gtol=ec.gradient_norm_epsilon,
            max_nfev=ec.max_iterations
        )
        # least_squares reports half the sum of squares
        result.fun = float(np.sqrt(2.0 * result.cost))

        end_type = self._STATUS_MAP.get(result.status, EndCriteriaType.UNKNOWN)
        if ec.check_stationary_function_accuracy(result.fun):
            end_type = EndCriteriaType.STATIONARY_FUNCTION_ACCURACY

        return self._finish(problem, result, end_type)
