import pytest
import numpy as np
import sys
import os

# Add the src directory to the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from quantcal.errors import ParameterShapeError, ConstraintError
from quantcal.models import (
    Model,
    CalibrationFunction,
    CalibrationHelper,
    ConstantParameter,
    NullParameter,
    PiecewiseConstantParameter
)
from quantcal.optimization import (
    NoConstraint,
    PositiveConstraint,
    BoundaryConstraint,
    EndCriteria,
    EndCriteriaType,
    Simplex,
    BFGS,
    LevenbergMarquardt
)


class TwoScalarModel(Model):
    """Two unconstrained scalars; counts recomputations."""

    def __init__(self, x=1.0, y=1.0):
        super().__init__(2)
        self.arguments[0] = ConstantParameter(x, NoConstraint())
        self.arguments[1] = ConstantParameter(y, NoConstraint())
        self.update_count = 0

    def generate_arguments(self):
        self.update_count += 1


class MixedModel(Model):
    """Groups of different arity, including an empty one."""

    def __init__(self):
        super().__init__(3)
        self.arguments[0] = PiecewiseConstantParameter([1.0, 2.0], PositiveConstraint())
        self.arguments[1] = NullParameter()
        self.arguments[2] = ConstantParameter(0.5, BoundaryConstraint(0.0, 1.0))


class TargetHelper(CalibrationHelper):
    """Calibration error is the distance of one model scalar from a target."""

    def __init__(self, model, index, target):
        super().__init__(target)
        self.model = model
        self.index = index
        self.target = target

    def model_value(self):
        return self.model.params()[self.index]

    def calibration_error(self):
        return self.model.params()[self.index] - self.target


def make_helpers(model):
    return [TargetHelper(model, 0, 0.3), TargetHelper(model, 1, -1.2)]


class TestParameterFlattening:
    """params() / set_params() contract."""

    def test_params_in_group_order(self):
        """Test that params follow group order."""
        model = TwoScalarModel(0.25, -0.75)

        np.testing.assert_array_equal(model.params(), [0.25, -0.75])

    def test_length_equals_total_arity(self):
        """Test that the vector length matches the total arity."""
        model = MixedModel()

        assert model.total_arity() == 4
        assert len(model.params()) == 4

    def test_round_trip_is_identity(self):
        """Test that set_params(params()) changes nothing."""
        model = MixedModel()
        model.set_params([0.1, 0.2, 0.3, 0.4])
        before = model.params()

        model.set_params(model.params())

        assert np.array_equal(model.params(), before)

    def test_set_params_assigns_every_group(self):
        """Test that every group receives its slice."""
        model = MixedModel()
        model.set_params([0.1, 0.2, 0.3, 0.9])

        piecewise = model.arguments[0]
        assert piecewise(0.5) == 0.1
        assert piecewise(1.5) == 0.2
        assert piecewise(5.0) == 0.3
        assert model.arguments[1](1.0) == 0.0
        assert model.arguments[2](0.0) == 0.9

    def test_too_small_raises(self):
        """Test a parameter vector that is too short."""
        model = TwoScalarModel()

        with pytest.raises(ParameterShapeError, match="too small") as excinfo:
            model.set_params([1.0])

        assert excinfo.value.expected == 2
        assert excinfo.value.received == 1

    def test_too_big_raises(self):
        """Test a parameter vector that is too long."""
        model = TwoScalarModel()

        with pytest.raises(ParameterShapeError, match="too big"):
            model.set_params([1.0, 2.0, 3.0])

    def test_shape_error_is_a_value_error(self):
        """Test that shape errors can be caught as ValueError."""
        with pytest.raises(ValueError):
            TwoScalarModel().set_params([])

    def test_rejected_vector_leaves_model_untouched(self):
        """Test that a wrong-length vector changes nothing."""
        model = TwoScalarModel(0.25, -0.75)

        with pytest.raises(ParameterShapeError):
            model.set_params([9.0, 9.0, 9.0])

        np.testing.assert_array_equal(model.params(), [0.25, -0.75])
        assert model.update_count == 0

    def test_update_runs_after_set_params(self):
        """Test that set_params triggers a recomputation."""
        model = TwoScalarModel()
        model.set_params([2.0, 3.0])

        assert model.update_count == 1

    def test_set_param_single_scalar(self):
        """Test changing a single scalar."""
        model = TwoScalarModel(0.0, 0.0)
        model.set_param(1, 0, 4.0)

        np.testing.assert_array_equal(model.params(), [0.0, 4.0])
        assert model.update_count == 1

    def test_observers_notified(self):
        """Test observer registration and removal."""
        model = TwoScalarModel()
        calls = []
        observer = lambda: calls.append(model.params().tolist())
        model.register_observer(observer)

        model.set_params([5.0, 6.0])
        model.unregister_observer(observer)
        model.set_params([7.0, 8.0])

        assert calls == [[5.0, 6.0]]

    def test_model_without_groups(self):
        """Test a model with no parameter groups."""
        model = Model(0)

        assert model.params().size == 0
        model.set_params([])
        with pytest.raises(ParameterShapeError):
            model.set_params([1.0])


class TestParameters:
    """Parameter groups."""

    def test_constant_parameter_checks_constraint(self):
        """Test that a constant parameter validates its value."""
        with pytest.raises(ConstraintError):
            ConstantParameter(-1.0, PositiveConstraint())

    def test_null_parameter_has_no_scalars(self):
        """Test the null parameter."""
        p = NullParameter()

        assert p.size() == 0
        assert p(3.0) == 0.0

    def test_piecewise_times_must_increase(self):
        """Test validation of piecewise break times."""
        with pytest.raises(ValueError):
            PiecewiseConstantParameter([2.0, 1.0])


class TestModelConstraint:
    """Constraint derived from the parameter groups."""

    def test_each_group_tested_on_its_slice(self):
        """Test that each group checks only its own slice."""
        model = MixedModel()

        assert model.constraint.test([0.1, 0.2, 0.3, 0.5])
        assert not model.constraint.test([0.1, -0.2, 0.3, 0.5])
        assert not model.constraint.test([0.1, 0.2, 0.3, 1.5])

    def test_unconstrained_model_is_not_null(self):
        """Test that the model constraint is never null."""
        # The derived constraint is always a real constraint object
        assert not TwoScalarModel().constraint.is_null()


class TestCalibrationFunction:
    """Cost function adapter over a model and its instruments."""

    def test_value_is_root_of_summed_squares(self):
        """Test the calibration objective value."""
        model = TwoScalarModel()
        f = CalibrationFunction(model, make_helpers(model))

        # errors 3 and 4: not averaged over the two instruments
        assert f.value(np.array([3.3, 2.8])) == pytest.approx(5.0)

    def test_values_are_per_instrument_errors(self):
        """Test the residual vector."""
        model = TwoScalarModel()
        f = CalibrationFunction(model, make_helpers(model))

        np.testing.assert_allclose(f.values(np.array([3.3, 2.8])), [3.0, 4.0])

    def test_evaluation_mutates_model(self):
        """Test that the model keeps the last evaluated vector."""
        model = TwoScalarModel()
        f = CalibrationFunction(model, make_helpers(model))

        f.value(np.array([1.0, 2.0]))
        f.value(np.array([3.0, 4.0]))

        np.testing.assert_array_equal(model.params(), [3.0, 4.0])

    def test_default_finite_difference_epsilon(self):
        """Test the finite-difference step setting."""
        model = TwoScalarModel()

        assert CalibrationFunction(model, []).finite_difference_epsilon() == 1e-6
        assert CalibrationFunction(model, [], 1e-4).finite_difference_epsilon() == 1e-4

    def test_empty_instrument_list_sums_to_zero(self):
        """Test the objective with no instruments."""
        model = TwoScalarModel()

        assert CalibrationFunction(model, []).value(np.array([1.0, 2.0])) == 0.0


class TestCalibration:
    """End-to-end calibration of the two-scalar model."""

    def test_simplex_converges_to_targets(self):
        """Test simplex calibration to known targets."""
        model = TwoScalarModel(1.0, 1.0)
        helpers = make_helpers(model)

        end_type = model.calibrate(helpers, Simplex())

        assert EndCriteria.succeeded(end_type)
        x, y = model.params()
        assert abs(x - 0.3) < 1e-6
        assert abs(y + 1.2) < 1e-6
        assert CalibrationFunction(model, helpers).value(model.params()) < 1e-6

    def test_levenberg_marquardt_converges_to_targets(self):
        """Test Levenberg-Marquardt calibration to known targets."""
        model = TwoScalarModel(1.0, 1.0)
        helpers = make_helpers(model)

        end_type = model.calibrate(helpers, LevenbergMarquardt())

        assert EndCriteria.succeeded(end_type)
        np.testing.assert_allclose(model.params(), [0.3, -1.2], atol=1e-6)

    def test_calibration_switches_on_positive_optimization(self):
        """Test that calibration enables positive optimization."""
        model = TwoScalarModel(1.0, 1.0)
        method = Simplex()

        model.calibrate(make_helpers(model), method)

        assert method.end_criteria().positive_optimization

    def test_final_state_is_committed_through_set_params(self):
        """Test that the calibrated state survives a round trip."""
        model = TwoScalarModel(1.0, 1.0)
        model.calibrate(make_helpers(model), Simplex())
        committed = model.params()

        model.update_count = 0
        model.set_params(committed)

        np.testing.assert_array_equal(model.params(), committed)

    def test_additional_constraint_is_respected(self):
        """Test calibration under an extra boundary constraint."""
        model = TwoScalarModel(0.1, 0.1)
        bounds = BoundaryConstraint(-0.5, 0.5)

        model.calibrate(make_helpers(model), Simplex(), additional_constraint=bounds)

        x, y = model.params()
        assert bounds.test(model.params())
        assert abs(x - 0.3) < 5e-2
        assert abs(y + 0.5) < 1e-2

    def test_infeasible_start_is_rejected(self):
        """Test that calibration refuses to start outside the admissible region."""
        model = TwoScalarModel(1.0, 1.0)
        bounds = BoundaryConstraint(-0.5, 0.5)

        with pytest.raises(ConstraintError, match="starting parameters"):
            model.calibrate(make_helpers(model), Simplex(), additional_constraint=bounds)

        np.testing.assert_array_equal(model.params(), [1.0, 1.0])
        assert model.update_count == 0

    def test_infeasible_model_parameters_are_rejected(self):
        """Test that a start violating a group constraint is rejected too."""
        model = MixedModel()
        model.set_params([0.1, 0.2, 0.3, 0.5])
        model.set_param(0, 1, -0.2)

        with pytest.raises(ConstraintError):
            model.calibrate([], Simplex())

    def test_model_only_sees_admissible_vectors_with_bfgs(self):
        """Test that BFGS and its numerical gradient never push a rejected vector into the model."""
        model = TwoScalarModel(0.1, 0.1)
        bounds = BoundaryConstraint(-0.5, 0.5)
        seen = []
        model.register_observer(lambda: seen.append(model.params()))

        model.calibrate(make_helpers(model), BFGS(), additional_constraint=bounds)

        assert seen
        assert all(bounds.test(p) for p in seen)

    def test_exhausted_budget_is_reported_not_raised(self):
        """Test that running out of iterations is reported."""
        model = TwoScalarModel(1.0, 1.0)
        method = Simplex(EndCriteria(max_iterations=3, max_stationary_state_iterations=2))

        end_type = model.calibrate(make_helpers(model), method)

        assert end_type == EndCriteriaType.MAX_ITERATIONS
        assert len(model.params()) == 2

    def test_empty_instrument_list(self):
        """Test calibration with no instruments."""
        model = TwoScalarModel(1.0, 1.0)

        end_type = model.calibrate([], Simplex())

        assert end_type == EndCriteriaType.STATIONARY_FUNCTION_ACCURACY


if __name__ == "__main__":
    pytest.main([__file__])
