"""
Analytic axisymmetric potentials for orbit integration.

Each potential is an immutable value constructed once and evaluated many times with cylindrical
coordinates :math:`(R, z)`. Every potential offers the same evaluation modes:

- :py:meth:`~axipot.potentials.base.Potential.potential`: :math:`\\Phi` only.
- :py:meth:`~axipot.potentials.base.Potential.potential_and_gradient`: :math:`\\Phi` and its gradient.
- :py:meth:`~axipot.potentials.base.Potential.equatorial_derivatives`: :math:`\\Phi`,
  :math:`\\partial_R\\Phi` and :math:`\\partial_R^2\\Phi` in the plane.
- :py:meth:`~axipot.potentials.base.Potential.potential_and_hessian`: :math:`\\Phi`, gradient and Hessian.
- :py:meth:`~axipot.potentials.base.Potential.epicyclic_frequencies`: :math:`(\\kappa, \\nu, \\Omega)`.
"""
from .base import (
    EquatorialDerivatives,
    Frequencies,
    Potential,
    PotentialGradient,
    PotentialHessian,
)
from .exceptions import FrequencyDomainError, PotentialError, SingularityError
from .logarithmic import LogarithmicPotential, PerturbedLogarithmicPotential

__all__ = [
    "Potential",
    "LogarithmicPotential",
    "PerturbedLogarithmicPotential",
    "PotentialGradient",
    "EquatorialDerivatives",
    "PotentialHessian",
    "Frequencies",
    "PotentialError",
    "SingularityError",
    "FrequencyDomainError",
]
