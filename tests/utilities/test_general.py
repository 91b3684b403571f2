import pytest

from axipot.potentials import LogarithmicPotential, PerturbedLogarithmicPotential, Potential
from axipot.utilities.general import find_in_subclasses


def test_finds_descendant():
    assert find_in_subclasses(Potential, "PerturbedLogarithmicPotential") is PerturbedLogarithmicPotential


def test_finds_base_itself():
    assert find_in_subclasses(LogarithmicPotential, "LogarithmicPotential") is LogarithmicPotential


def test_missing_class():
    with pytest.raises(ValueError):
        find_in_subclasses(Potential, "NFWPotential")
