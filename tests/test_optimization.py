import pytest
import numpy as np
import sys
import os

# Add the src directory to the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from quantcal.optimization import (
    CostFunction,
    EndCriteria,
    EndCriteriaType,
    NoConstraint,
    PositiveConstraint,
    PredicateConstraint,
    Problem,
    Simplex,
    BFGS,
    LevenbergMarquardt,
    DEFAULT_CONSTRAINT_PENALTY
)


class Quadratic(CostFunction):
    """f(x, y) = (x - 1)^2 + 10 (y - 2)^2"""

    def value(self, x):
        return (x[0] - 1.0) ** 2 + 10.0 * (x[1] - 2.0) ** 2

    def values(self, x):
        return np.array([x[0] - 1.0, np.sqrt(10.0) * (x[1] - 2.0)])


class Recorder(CostFunction):
    def __init__(self):
        self.seen = []

    def value(self, x):
        self.seen.append(np.array(x))
        return float(np.sum(np.square(x)))


class TestEndCriteria:
    """Termination policy."""

    def test_defaults(self):
        """Test default end criteria."""
        ec = EndCriteria()

        assert ec.max_iterations == 1000
        assert ec.max_stationary_state_iterations == 100
        assert not ec.positive_optimization

    def test_invalid_settings(self):
        """Test end criteria validation."""
        with pytest.raises(ValueError):
            EndCriteria(max_iterations=0)
        with pytest.raises(ValueError):
            EndCriteria(max_iterations=10, max_stationary_state_iterations=1)
        with pytest.raises(ValueError):
            EndCriteria(max_iterations=10, max_stationary_state_iterations=20)

    def test_function_accuracy_needs_positive_optimization(self):
        """Test the function accuracy criterion."""
        ec = EndCriteria()

        assert not ec.check_stationary_function_accuracy(0.0)
        ec.set_positive_optimization()
        assert ec.check_stationary_function_accuracy(1e-12)
        assert not ec.check_stationary_function_accuracy(1e-3)

    def test_stationary_function_value_counts_consecutive_iterations(self):
        """Test counting of stationary iterations."""
        ec = EndCriteria(max_iterations=10, max_stationary_state_iterations=2)

        stationary, count = ec.check_stationary_function_value(1.0, 1.0, 0)
        assert (stationary, count) == (False, 1)
        stationary, count = ec.check_stationary_function_value(1.0, 1.0, count)
        assert (stationary, count) == (False, 2)
        stationary, count = ec.check_stationary_function_value(1.0, 1.0, count)
        assert stationary

        stationary, count = ec.check_stationary_function_value(1.0, 0.5, count)
        assert (stationary, count) == (False, 0)

    def test_succeeded(self):
        """Test which end types count as converged."""
        assert EndCriteria.succeeded(EndCriteriaType.STATIONARY_POINT)
        assert not EndCriteria.succeeded(EndCriteriaType.MAX_ITERATIONS)
        assert not EndCriteria.succeeded(EndCriteriaType.NONE)


class TestCostFunction:
    """Finite-difference derivatives."""

    def test_gradient(self):
        """Test the finite-difference gradient."""
        grad = Quadratic().gradient(np.array([0.0, 0.0]))

        np.testing.assert_allclose(grad, [-2.0, -40.0], rtol=1e-6)

    def test_jacobian_shape(self):
        """Test the finite-difference Jacobian."""
        jac = Quadratic().jacobian(np.array([0.0, 0.0]))

        assert jac.shape == (2, 2)
        np.testing.assert_allclose(jac, [[1.0, 0.0], [0.0, np.sqrt(10.0)]], atol=1e-8)

    def test_default_values_wrap_value(self):
        """Test the default residual vector."""
        np.testing.assert_allclose(CostFunction.values(Quadratic(), [1.0, 3.0]), [10.0])


class TestProblem:
    """Constraint handling and bookkeeping."""

    def test_inadmissible_points_are_penalized_not_evaluated(self):
        """Test the constraint penalty and counters."""
        cost = Recorder()
        problem = Problem(cost, PositiveConstraint(), Simplex())

        assert problem.value(np.array([-1.0, 1.0])) == DEFAULT_CONSTRAINT_PENALTY
        assert cost.seen == []
        assert problem.rejected_points() == 1

        assert problem.value(np.array([1.0, 1.0])) == 2.0
        assert problem.function_evaluations() == 1

    def test_gradient_never_evaluates_rejected_points(self):
        """Test that the gradient steps one-sided away from the constraint boundary."""
        cost = Recorder()
        problem = Problem(cost, PositiveConstraint(), BFGS())

        grad = problem.gradient(np.array([1e-7]))

        assert cost.seen
        assert all(PositiveConstraint().test(x) for x in cost.seen)
        # forward difference of x**2 at 1e-7 with step 1e-6
        assert grad[0] == pytest.approx(1.2e-6, rel=1e-6)

    def test_jacobian_never_evaluates_rejected_points(self):
        """Test that the Jacobian honors the constraint coordinate by coordinate."""
        cost = Recorder()
        problem = Problem(cost, PositiveConstraint(), LevenbergMarquardt())

        jac = problem.jacobian(np.array([1e-7, 1.0]))

        assert jac.shape == (1, 2)
        assert all(PositiveConstraint().test(x) for x in cost.seen)
        assert jac[0, 1] == pytest.approx(2.0, rel=1e-6)

    def test_no_admissible_step_gives_zero_derivative(self):
        """Test that a coordinate pinned by the constraint gets a zero derivative."""
        cost = Recorder()
        pinned = PredicateConstraint(lambda x: abs(x[0]) < 1e-9)
        problem = Problem(cost, pinned, LevenbergMarquardt())

        np.testing.assert_array_equal(problem.gradient(np.array([0.0])), [0.0])
        np.testing.assert_array_equal(problem.jacobian(np.array([0.0]), n_residuals=1), [[0.0]])
        assert cost.seen == []

        with pytest.raises(ValueError, match="n_residuals"):
            problem.jacobian(np.array([0.0]))

    def test_unconstrained_gradient_is_central(self):
        """Test that without a constraint both neighbours are used."""
        cost = Recorder()
        problem = Problem(cost, NoConstraint(), BFGS())

        grad = problem.gradient(np.array([1e-7]))

        assert any(x[0] < 0.0 for x in cost.seen)
        assert grad[0] == pytest.approx(2e-7, rel=1e-6)

    def test_minimum_value_before_minimize(self):
        """Test asking for the minimum before minimizing."""
        problem = Problem(Recorder(), NoConstraint(), Simplex())

        with pytest.raises(RuntimeError):
            problem.minimum_value()

    def test_method_requires_initial_value(self):
        """Test minimizing without an initial value."""
        problem = Problem(Recorder(), NoConstraint(), Simplex())

        with pytest.raises(RuntimeError, match="initial value"):
            problem.minimize()


class TestMethods:
    """Minimizers on a smooth quadratic bowl."""

    @pytest.mark.parametrize("method_cls", [Simplex, BFGS, LevenbergMarquardt])
    def test_finds_minimum(self, method_cls):
        """Test each method on a quadratic bowl."""
        method = method_cls()
        method.set_initial_value([5.0, -3.0])
        problem = Problem(Quadratic(), NoConstraint(), method)

        result = problem.minimize()

        np.testing.assert_allclose(result, [1.0, 2.0], atol=1e-3)
        assert problem.function_value() < 1e-5
        assert problem.end_criteria_type != EndCriteriaType.NONE

    def test_positive_optimization_stops_early(self):
        """Test stopping on function accuracy."""
        method = Simplex()
        method.set_initial_value([5.0, -3.0])
        method.end_criteria().set_positive_optimization()
        problem = Problem(Quadratic(), NoConstraint(), method)

        problem.minimize()

        assert problem.end_criteria_type == EndCriteriaType.STATIONARY_FUNCTION_ACCURACY
        assert problem.function_value() < 1e-8

    def test_result_is_a_copy(self):
        """Test that the returned minimum is a copy."""
        method = Simplex()
        method.set_initial_value([5.0, -3.0])
        problem = Problem(Quadratic(), NoConstraint(), method)

        result = problem.minimize()
        result[0] = 100.0

        assert problem.minimum_value()[0] != 100.0

    def test_levenberg_marquardt_with_fewer_residuals_than_parameters(self):
        """Test the underdetermined least-squares case."""
        class OneResidual(CostFunction):
            def value(self, x):
                return abs(x[0] + x[1] - 1.0)

            def values(self, x):
                return np.array([x[0] + x[1] - 1.0])

        method = LevenbergMarquardt()
        method.set_initial_value([3.0, 3.0])
        problem = Problem(OneResidual(), NoConstraint(), method)

        result = problem.minimize()

        assert result.sum() == pytest.approx(1.0, abs=1e-6)


if __name__ == "__main__":
    pytest.main([__file__])
