import numpy as np
from typing import Optional, Sequence

from ..errors import ConstraintError
from ..optimization.constraint import Constraint, NoConstraint


class Parameter:
    """
    A group of model parameters.

    Holds a fixed number of scalars together with the constraint they must
    satisfy, and maps them to a value at time ``t`` through :meth:`_value`.
    The arity is fixed at construction; scalars change only through
    :meth:`set_param`.
    """

    def __init__(
        self,
        size: int,
        constraint: Optional[Constraint] = None,
        values: Optional[Sequence[float]] = None
    ):
        if values is None:
            self._params = np.zeros(size)
        else:
            self._params = np.array(values, dtype=float)
            if len(self._params) != size:
                raise ValueError(f"Expected {size} values, got {len(self._params)}")
        self.constraint = constraint if constraint is not None else NoConstraint()

    def params(self) -> np.ndarray:
        return self._params.copy()

    def set_param(self, i: int, x: float) -> None:
        self._params[i] = x

    def test_params(self, params: Sequence[float]) -> bool:
        return self.constraint.test(params)

    def size(self) -> int:
        return len(self._params)

    def __len__(self) -> int:
        return self.size()

    def __call__(self, t: float) -> float:
        return self._value(self._params, t)

    def _value(self, params: np.ndarray, t: float) -> float:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._params.tolist()})"


class ConstantParameter(Parameter):
    """Single scalar, constant in time."""

    def __init__(self, value: Optional[float] = None, constraint: Optional[Constraint] = None):
        super().__init__(1, constraint)
        if value is not None:
            if not self.test_params([value]):
                raise ConstraintError(f"{value}: invalid value for {self.constraint!r}")
            self._params[0] = value

    def _value(self, params: np.ndarray, t: float) -> float:
        return float(params[0])


class NullParameter(Parameter):
    """Parameter with no free scalars; always evaluates to zero."""

    def __init__(self):
        super().__init__(0, NoConstraint())

    def _value(self, params: np.ndarray, t: float) -> float:
        return 0.0


class PiecewiseConstantParameter(Parameter):
    """
    Step function in time.

    With ``n`` break times there are ``n + 1`` scalars: scalar ``i`` applies
    for ``t < times[i]`` and the last one applies after the final break.
    """

    def __init__(self, times: Sequence[float], constraint: Optional[Constraint] = None):
        times = [float(t) for t in times]
        if any(t2 <= t1 for t1, t2 in zip(times, times[1:])):
            raise ValueError("Break times must be strictly increasing")
        super().__init__(len(times) + 1, constraint)
        self.times = times

    def _value(self, params: np.ndarray, t: float) -> float:
        for i, time in enumerate(self.times):
            if t < time:
                return float(params[i])
        return float(params[-1])
