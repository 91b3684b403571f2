import os

import h5py
import numpy as np
import pytest

from axipot.potentials import Potential
from axipot.potentials.logarithmic import LogarithmicPotential
from tests.potentials._utils import central_difference, sample_points

RTOL = 1e-6
ATOL = 1e-7


class _TestPotential:
    # @@ TEST PARAMETERS @@ #
    # These are the parameters that are used to instantiate the
    # potential under test.
    MODEL_CLASS = LogarithmicPotential
    PARAMETERS = ([], {})
    EXPECTED_CLASS = LogarithmicPotential
    ATOL = ATOL

    # @@ FIXTURES @@ #
    @pytest.fixture
    def model(self):
        return self.MODEL_CLASS(*self.PARAMETERS[0], **self.PARAMETERS[1])

    @pytest.fixture
    def points(self):
        return sample_points()

    def test_construction_branch(self, model):
        assert type(model) is self.EXPECTED_CLASS

    def test_cross_mode_potential(self, model, points):
        """The potential value agrees between every evaluation mode."""
        R, z = points
        phi = model.potential(R, z)
        np.testing.assert_allclose(model.potential_and_gradient(R, z).phi, phi, rtol=1e-14)
        np.testing.assert_allclose(model.potential_and_hessian(R, z).phi, phi, rtol=1e-14)
        np.testing.assert_allclose(model(R, z), phi, rtol=1e-14)

    def test_cross_mode_gradient(self, model, points):
        R, z = points
        gradient = model.potential_and_gradient(R, z)
        hessian = model.potential_and_hessian(R, z)
        np.testing.assert_allclose(hessian.dPdR, gradient.dPdR, rtol=1e-12)
        np.testing.assert_allclose(hessian.dPdz, gradient.dPdz, rtol=1e-12, atol=1e-15)

    def test_first_derivatives_match_differences(self, model, points):
        """Central differences of the potential approximate the analytic gradient."""
        R, z = points
        gradient = model.potential_and_gradient(R, z)

        np.testing.assert_allclose(
            central_difference(model.potential, R, z, 0), gradient.dPdR, rtol=RTOL, atol=self.ATOL
        )
        np.testing.assert_allclose(
            central_difference(model.potential, R, z, 1), gradient.dPdz, rtol=RTOL, atol=self.ATOL
        )

    def test_second_derivatives_match_differences(self, model, points):
        """Central differences of the gradient approximate the analytic Hessian."""
        R, z = points
        hessian = model.potential_and_hessian(R, z)

        def dPdR(_R, _z):
            return model.potential_and_gradient(_R, _z).dPdR

        def dPdz(_R, _z):
            return model.potential_and_gradient(_R, _z).dPdz

        np.testing.assert_allclose(
            central_difference(dPdR, R, z, 0), hessian.d2PdRR, rtol=RTOL, atol=self.ATOL
        )
        np.testing.assert_allclose(
            central_difference(dPdz, R, z, 1), hessian.d2Pdzz, rtol=RTOL, atol=self.ATOL
        )
        np.testing.assert_allclose(
            central_difference(dPdR, R, z, 1), hessian.d2PdRz, rtol=RTOL, atol=self.ATOL
        )
        np.testing.assert_allclose(
            central_difference(dPdz, R, z, 0), hessian.d2PdRz, rtol=RTOL, atol=self.ATOL
        )

    @pytest.mark.parametrize(
        "expression, field",
        [
            ("dPdR", "dPdR"),
            ("dPdz", "dPdz"),
            ("d2PdRR", "d2PdRR"),
            ("d2Pdzz", "d2Pdzz"),
            ("d2PdRz", "d2PdRz"),
        ],
    )
    def test_closed_forms_match_symbolic(self, model, points, expression, field):
        """The closed-form derivatives equal the exact SymPy derivatives."""
        R, z = points
        expected = model.get_numeric_expression(expression)(R, z)
        actual = getattr(model.potential_and_hessian(R, z), field)
        np.testing.assert_allclose(actual, expected, rtol=1e-10, atol=self.ATOL * 1e-3)

    def test_symbolic_potential(self, model, points):
        R, z = points
        numeric = model.lambdify_expression(model.symbolic_expression)
        np.testing.assert_allclose(numeric(R, z), model.potential(R, z), rtol=1e-12)

    def test_equatorial_matches_hessian(self, model):
        R = np.linspace(0.1, 2.0, 20)
        equatorial = model.equatorial_derivatives(R)
        hessian = model.potential_and_hessian(R, 0.0)

        np.testing.assert_allclose(equatorial.phi, hessian.phi, rtol=1e-12)
        np.testing.assert_allclose(equatorial.dPdR, hessian.dPdR, rtol=1e-12)
        np.testing.assert_allclose(equatorial.d2PdRR, hessian.d2PdRR, rtol=1e-12)

    def test_array_matches_scalar(self, model, points):
        R, z = points
        hessian = model.potential_and_hessian(R, z)
        for i in range(0, len(R), 5):
            scalar = model.potential_and_hessian(float(R[i]), float(z[i]))
            for got, want in zip(scalar, hessian):
                assert got == pytest.approx(want[i], rel=1e-12, abs=self.ATOL * 1e-6)

    def test_scalar_input_gives_scalar_output(self, model):
        result = model.potential_and_gradient(1.0, 0.5)
        assert all(np.ndim(value) == 0 for value in result)

    def test_frequencies_are_finite(self, model):
        R = np.linspace(0.2, 2.0, 30)
        kappa, nu, omega = model.epicyclic_frequencies(R)

        for value in (kappa, nu, omega):
            assert value.shape == R.shape
            assert np.all(np.isfinite(value))
            assert np.all(value >= 0)

    def test_frequencies_from_hessian(self, model):
        R = 1.3
        hessian = model.potential_and_hessian(R, 0.0)
        kappa, nu, omega = model.epicyclic_frequencies(R)

        assert omega**2 == pytest.approx(hessian.dPdR / R, rel=1e-12)
        assert nu**2 == pytest.approx(hessian.d2Pdzz, rel=1e-12)
        assert kappa**2 == pytest.approx(hessian.d2PdRR + 3 * hessian.dPdR / R, rel=1e-12)

    def test_equality_and_hash(self, model):
        other = self.MODEL_CLASS(*self.PARAMETERS[0], **self.PARAMETERS[1])
        assert model == other
        assert hash(model) == hash(other)
        assert model != object()

    def test_parameters_are_copies(self, model):
        params = model.parameters
        params["q"] = -12.0
        assert model.parameters["q"] != -12.0

    def test_description(self, model):
        text = model.describe()
        assert text.startswith("logarithmic Potential Phi = ")
        assert text.endswith("]")
        assert str(model) == text

    def test_hdf5_round_trip(self, model, temp_dir):
        path = os.path.join(temp_dir, f"{self.__class__.__name__}.hdf5")

        with h5py.File(path, "w") as fio:
            model.to_hdf5(fio, "potential")

        with h5py.File(path, "r") as fio:
            loaded = Potential.from_hdf5(fio, "potential")

        assert type(loaded) is type(model)
        assert loaded == model
