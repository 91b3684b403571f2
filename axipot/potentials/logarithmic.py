r"""
Flattened logarithmic potentials.

The logarithmic potential

.. math::

    \Phi(R, z) = \frac{v_0^2}{2} \ln\left[R^2 + \frac{z^2}{q^2} + r_c^2\right]

produces a flat rotation curve of amplitude :math:`v_0` outside the core radius :math:`r_c`. The
flattening :math:`q` compresses the equipotentials along :math:`z`. Optionally a perturbation
radius :math:`R_e` adds the axisymmetric term

.. math::

    -\frac{1}{R_e^3}\sqrt{R^2 + z^2}\,(R^2 - z^2)

inside the logarithm, which asymmetrizes the potential between the plane and the axis.

The choice between the two forms is made once, at construction:
``LogarithmicPotential(..., Re=0)`` returns a :py:class:`LogarithmicPotential` and any other
``Re`` returns a :py:class:`PerturbedLogarithmicPotential`.

Throughout this module ``m`` denotes the argument of the logarithm, and ``dmqdRbyR`` and
``dmqdzbyz`` are :math:`R^{-1}\partial m/\partial R` and :math:`z^{-1}\partial m/\partial z`.
"""
from typing import Dict, List, NamedTuple

import numpy as np
import sympy as sp

from axipot.potentials._typing import CoordinateLike, ResultLike
from axipot.potentials.base import (
    EquatorialDerivatives,
    Potential,
    PotentialGradient,
    PotentialHessian,
)
from axipot.potentials.exceptions import SingularityError
from axipot.utilities.config import axipot_params
from axipot.utilities.logging import devlog


def _reciprocal(r: np.ndarray) -> np.ndarray:
    # 1/r, set to zero on the axis origin where every term it multiplies vanishes faster.
    return np.where(r > 0, 1.0 / np.where(r > 0, r, 1.0), 0.0)


class _PerturbedTerms(NamedTuple):
    Rq: ResultLike
    zq: ResultLike
    rinv: ResultLike
    mq: ResultLike
    dmqdRbyR: ResultLike
    dmqdzbyz: ResultLike


class LogarithmicPotential(Potential):
    r"""
    Flattened, cored logarithmic potential.

    .. math::

        \Phi(R, z) = \frac{v_0^2}{2} \ln\left[R^2 + \frac{z^2}{q^2} + r_c^2\right] + C

    where :math:`C` is ``plusconst``.

    .. dropdown:: Parameters

        .. list-table:: Parameters for :py:class:`LogarithmicPotential`
           :widths: 25 25 50
           :header-rows: 1

           * - **Name**
             - **Symbol**
             - **Description**
           * - ``v0``
             - :math:`v_0`
             - Asymptotic circular velocity. Expected to be positive.
           * - ``q``
             - :math:`q`
             - Flattening, :math:`0 < q \le 1`.
           * - ``rc``
             - :math:`r_c`
             - Core radius, :math:`r_c \ge 0`.
           * - ``Re``
             - :math:`R_e`
             - Perturbation radius. ``0`` disables the perturbation.
           * - ``plusconst``
             - :math:`C`
             - Additive constant. Only applied by :py:meth:`potential` of the unperturbed form.

    Notes
    -----
    The parameter preconditions are not enforced. Values outside them produce a warning from the
    class logger (see :py:meth:`validate_parameters`) and then undefined results.

    When :math:`r_c = 0` the potential diverges at :math:`R = z = 0`. Every evaluation mode raises
    :py:class:`~axipot.potentials.exceptions.SingularityError` there.

    Examples
    --------
    >>> pot = LogarithmicPotential(v0=1.0, q=0.7, rc=0.1)
    >>> phi, dPdR, dPdz = pot.potential_and_gradient(1.0, 0.0)
    >>> round(float(dPdR), 6)
    0.990099
    """

    _is_parent_potential = False

    DEFAULT_PARAMETERS: Dict[str, float] = {
        "v0": 1.0,
        "q": 1.0,
        "rc": 0.0,
        "Re": 0.0,
        "plusconst": 0.0,
    }

    def __new__(cls, v0=1.0, q=1.0, rc=0.0, Re=0.0, *, plusconst=0.0):
        if cls is LogarithmicPotential and Re != 0:
            cls = PerturbedLogarithmicPotential
        return super().__new__(cls)

    def __init__(
        self,
        v0: float = 1.0,
        q: float = 1.0,
        rc: float = 0.0,
        Re: float = 0.0,
        *,
        plusconst: float = 0.0,
    ):
        super().__init__(v0=v0, q=q, rc=rc, Re=Re, plusconst=plusconst)

        for issue in self.validate_parameters(v0, q, rc, Re):
            self.logger.warning("%s: %s", self.__class__.__name__, issue)

        # Derived constants. Never recomputed per query.
        self._v0sq = self._parameters["v0"] ** 2
        self._v0sqhalf = 0.5 * self._v0sq
        self._q2i = 1.0 / self._parameters["q"] ** 2
        self._rc2 = self._parameters["rc"] ** 2
        self._Rei = 1.0 / self._parameters["Re"] if self._parameters["Re"] else 0.0
        self._Rei3 = self._Rei**3
        self._plusconst = self._parameters["plusconst"]

        devlog.debug("Constructed %r.", self)

    @staticmethod
    def _potential(R, z, v0=1.0, q=1.0, rc=0.0, Re=0.0, plusconst=0.0):
        return v0**2 / 2 * sp.log(R**2 + z**2 / q**2 + rc**2) + plusconst

    @classmethod
    def validate_parameters(
        cls, v0: float = 1.0, q: float = 1.0, rc: float = 0.0, Re: float = 0.0
    ) -> List[str]:
        """
        Report which parameter preconditions are violated.

        Parameters
        ----------
        v0, q, rc, Re : float
            Candidate parameters for a :py:class:`LogarithmicPotential`.

        Returns
        -------
        list of str
            One message per violated precondition. Empty if every precondition holds.
        """
        issues = []
        if not v0 > 0:
            issues.append(f"v0={v0} should be positive.")
        if not 0 < q <= 1:
            issues.append(f"q={q} should lie in (0, 1].")
        if not rc >= 0:
            issues.append(f"rc={rc} should be non-negative.")
        if not np.isfinite(Re):
            issues.append(f"Re={Re} should be finite.")
        return issues

    # @@ PROPERTIES @@ #
    @property
    def v0(self) -> float:
        """The scale velocity :math:`v_0`."""
        return self._parameters["v0"]

    @property
    def q(self) -> float:
        """The flattening :math:`q`."""
        return self._parameters["q"]

    @property
    def rc(self) -> float:
        """The core radius :math:`r_c`."""
        return self._parameters["rc"]

    @property
    def Re(self) -> float:
        """The perturbation radius :math:`R_e`. Zero when the perturbation is disabled."""
        return self._parameters["Re"]

    @property
    def plusconst(self) -> float:
        """The additive constant of the unperturbed potential."""
        return self._plusconst

    @property
    def v0sq(self) -> float:
        return self._v0sq

    @property
    def v0sqhalf(self) -> float:
        return self._v0sqhalf

    @property
    def q2i(self) -> float:
        return self._q2i

    @property
    def rc2(self) -> float:
        return self._rc2

    @property
    def Rei(self) -> float:
        return self._Rei

    @property
    def Rei3(self) -> float:
        return self._Rei3

    @property
    def is_perturbed(self) -> bool:
        """``True`` if the perturbation term is enabled."""
        return self._Rei != 0

    # @@ DOMAIN CHECKS @@ #
    def _check_singularity(self, R: np.ndarray, z: np.ndarray = None):
        if self._rc2 != 0:
            return

        at_origin = (R == 0) if z is None else (R == 0) & (z == 0)
        if np.any(at_origin):
            raise SingularityError(
                f"{self.__class__.__name__}: (R,z)=0 at zero core radius "
                f"(R={R}, z={0.0 if z is None else z})."
            )

    @staticmethod
    def _coerce(*coordinates: CoordinateLike) -> List[np.ndarray]:
        return [np.asarray(c, dtype=float) for c in coordinates]

    def _base_terms(self, R: np.ndarray, z: np.ndarray):
        # Returns R^2, z^2 and the unperturbed logarithm argument.
        Rq, zq = R * R, z * z
        return Rq, zq, Rq + zq * self._q2i + self._rc2

    # @@ EVALUATION MODES @@ #
    def potential(self, R: CoordinateLike, z: CoordinateLike) -> ResultLike:
        """
        Evaluate :math:`\\Phi(R, z)`, including ``plusconst``.

        Raises
        ------
        SingularityError
            If ``rc = 0`` and any point is :math:`R = z = 0`.
        """
        R, z = self._coerce(R, z)
        self._check_singularity(R, z)
        _, _, mq = self._base_terms(R, z)
        return self._v0sqhalf * np.log(mq) + self._plusconst

    def potential_and_gradient(
        self, R: CoordinateLike, z: CoordinateLike
    ) -> PotentialGradient:
        """
        Evaluate :math:`\\Phi`, :math:`\\partial_R \\Phi` and :math:`\\partial_z \\Phi`.

        The returned potential does not include ``plusconst``.
        """
        R, z = self._coerce(R, z)
        self._check_singularity(R, z)
        _, _, mq = self._base_terms(R, z)

        dPdR = self._v0sq / mq
        dPdz = dPdR * z * self._q2i
        dPdR = dPdR * R
        return PotentialGradient(self._v0sqhalf * np.log(mq), dPdR, dPdz)

    def equatorial_derivatives(self, R: CoordinateLike) -> EquatorialDerivatives:
        """
        Evaluate :math:`\\Phi`, :math:`\\partial_R \\Phi` and :math:`\\partial^2_R \\Phi` at :math:`z = 0`.

        Raises
        ------
        SingularityError
            If ``rc = 0`` and any ``R`` is zero.
        """
        (R,) = self._coerce(R)
        self._check_singularity(R)
        Rq = R * R
        mq = Rq + self._rc2

        dPdR = self._v0sq / mq
        d2PdRR = dPdR * (1.0 - 2 * Rq / mq)
        dPdR = dPdR * R
        return EquatorialDerivatives(self._v0sqhalf * np.log(mq), dPdR, d2PdRR)

    def potential_and_hessian(
        self, R: CoordinateLike, z: CoordinateLike
    ) -> PotentialHessian:
        """
        Evaluate :math:`\\Phi`, its gradient and the three distinct second derivatives.

        The returned potential does not include ``plusconst``.
        """
        R, z = self._coerce(R, z)
        self._check_singularity(R, z)
        Rq, zq, mq = self._base_terms(R, z)

        dPdR = self._v0sq / mq
        dPdz = dPdR * self._q2i
        d2PdRR = dPdR * (1.0 - 2 * Rq / mq)
        d2Pdzz = dPdz * (1.0 - 2 * zq * self._q2i / mq)
        d2PdRz = -2 * dPdz * R * z / mq
        return PotentialHessian(
            self._v0sqhalf * np.log(mq),
            dPdR * R,
            dPdz * z,
            d2PdRR,
            d2Pdzz,
            d2PdRz,
        )

    # @@ DESCRIPTION @@ #
    def describe(self) -> str:
        """
        Render the formula of this potential with its parameter values.

        >>> LogarithmicPotential(v0=2, q=0.5, rc=0.1).describe()
        'logarithmic Potential Phi = 2^2/2 ln[R^2 + (z/0.5)^2 + 0.1^2 ]'
        """
        fmt = axipot_params["potentials.description.float_format"]

        text = "logarithmic Potential Phi = "
        text += f"{format(self.v0, fmt)}^2" if self.v0 != 1 else "1"
        text += "/2 "
        if self.q == 1:
            text += "ln[R^2 + z^2"
        else:
            text += f"ln[R^2 + (z/{format(self.q, fmt)})^2"
        if self.is_perturbed:
            text += f" - {format(self._Rei3, fmt)}sqrt[R^2+z^2](R^2-z^2) "
        if self.rc != 0:
            text += f" + {format(self.rc, fmt)}^2 "
        return text + "]"


class PerturbedLogarithmicPotential(LogarithmicPotential):
    r"""
    Logarithmic potential with the axisymmetric perturbation term enabled.

    .. math::

        \Phi(R, z) = \frac{v_0^2}{2} \ln\left[R^2 + \frac{z^2}{q^2} + r_c^2
            - \frac{\sqrt{R^2 + z^2}\,(R^2 - z^2)}{R_e^3}\right]

    Instances are normally obtained from ``LogarithmicPotential(..., Re=Re)`` with ``Re != 0``.
    ``plusconst`` is stored but never added to the potential of this form.

    .. note::

        :py:meth:`equatorial_derivatives` uses :math:`R^3` for :math:`r\,R^2`, so it agrees with
        the two-dimensional modes for :math:`R \ge 0` only.
    """

    _is_parent_potential = False

    def __init__(
        self,
        v0: float = 1.0,
        q: float = 1.0,
        rc: float = 0.0,
        Re: float = 0.0,
        *,
        plusconst: float = 0.0,
    ):
        if Re == 0:
            raise ValueError(
                f"{self.__class__.__name__} requires a non-zero perturbation radius Re."
            )
        super().__init__(v0=v0, q=q, rc=rc, Re=Re, plusconst=plusconst)

    @staticmethod
    def _potential(R, z, v0=1.0, q=1.0, rc=0.0, Re=1.0, plusconst=0.0):
        r = sp.sqrt(R**2 + z**2)
        return v0**2 / 2 * sp.log(
            R**2 + z**2 / q**2 + rc**2 - r * (R**2 - z**2) / Re**3
        )

    def _perturbed_terms(self, R: np.ndarray, z: np.ndarray) -> _PerturbedTerms:
        Rq, zq, mq = self._base_terms(R, z)
        r = np.sqrt(Rq + zq)
        rinv = _reciprocal(r)

        mq = mq - self._Rei3 * r * (Rq - zq)
        dmqdRbyR = 2.0 - self._Rei3 * (3 * Rq + zq) * rinv
        dmqdzbyz = 2 * self._q2i + self._Rei3 * (3 * zq + Rq) * rinv
        return _PerturbedTerms(Rq, zq, rinv, mq, dmqdRbyR, dmqdzbyz)

    def potential(self, R: CoordinateLike, z: CoordinateLike) -> ResultLike:
        R, z = self._coerce(R, z)
        self._check_singularity(R, z)
        terms = self._perturbed_terms(R, z)
        return self._v0sqhalf * np.log(terms.mq)

    def potential_and_gradient(
        self, R: CoordinateLike, z: CoordinateLike
    ) -> PotentialGradient:
        R, z = self._coerce(R, z)
        self._check_singularity(R, z)
        terms = self._perturbed_terms(R, z)

        h = self._v0sqhalf / terms.mq
        return PotentialGradient(
            self._v0sqhalf * np.log(terms.mq),
            h * R * terms.dmqdRbyR,
            h * z * terms.dmqdzbyz,
        )

    def equatorial_derivatives(self, R: CoordinateLike) -> EquatorialDerivatives:
        (R,) = self._coerce(R)
        self._check_singularity(R)
        Rq = R * R
        mq = Rq + self._rc2 - self._Rei3 * Rq * R
        dmqdRbyR = 2.0 - 3 * self._Rei3 * R

        h = self._v0sqhalf / mq
        d2PdRR = h * (dmqdRbyR - 3 * self._Rei3 * R - dmqdRbyR * dmqdRbyR * Rq / mq)
        return EquatorialDerivatives(
            self._v0sqhalf * np.log(mq), h * R * dmqdRbyR, d2PdRR
        )

    def potential_and_hessian(
        self, R: CoordinateLike, z: CoordinateLike
    ) -> PotentialHessian:
        R, z = self._coerce(R, z)
        self._check_singularity(R, z)
        Rq, zq, rinv, mq, dmqdRbyR, dmqdzbyz = self._perturbed_terms(R, z)
        r3inv = rinv * rinv * rinv

        h = self._v0sqhalf / mq
        d2PdRR = h * (
            dmqdRbyR
            - self._Rei3 * Rq * (3 * Rq + 5 * zq) * r3inv
            - dmqdRbyR * dmqdRbyR * Rq / mq
        )
        d2Pdzz = h * (
            dmqdzbyz
            + self._Rei3 * zq * (3 * zq + 5 * Rq) * r3inv
            - dmqdzbyz * dmqdzbyz * zq / mq
        )
        d2PdRz = h * R * z * (self._Rei3 * (Rq - zq) * r3inv - dmqdRbyR * dmqdzbyz / mq)
        return PotentialHessian(
            self._v0sqhalf * np.log(mq),
            h * R * dmqdRbyR,
            h * z * dmqdzbyz,
            d2PdRR,
            d2Pdzz,
            d2PdRz,
        )
