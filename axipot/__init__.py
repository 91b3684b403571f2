"""
AxiPot: analytic axisymmetric potentials for stellar dynamics.
"""
from axipot.potentials import (
    Frequencies,
    LogarithmicPotential,
    PerturbedLogarithmicPotential,
    SingularityError,
)

__version__ = "0.0.1"
