"""
Potential base classes.

Potentials in AxiPot are immutable values: they are built once from a handful of parameters and
then queried many times with cylindrical coordinates :math:`(R, z)`. Each concrete class provides
closed-form evaluation of the potential and its first and second derivatives, and, alongside
those, a symbolic (SymPy) form of the same potential. The symbolic form is never used for
evaluation; it exists so that the closed forms can be inspected and checked against exact
derivatives.
"""
from abc import ABC, ABCMeta, abstractmethod
from typing import Any, Callable, Dict, List, NamedTuple, Union

import h5py
import numpy as np
import sympy as sp

from axipot.potentials._typing import CoordinateLike, ResultLike
from axipot.potentials.exceptions import FrequencyDomainError
from axipot.utilities.config import axipot_params
from axipot.utilities.general import find_in_subclasses
from axipot.utilities.logging import LogDescriptor, devlog, mylog


# @@ RESULT CONTAINERS @@ #
# These are returned by the evaluation modes of every potential. They are
# plain tuples so that callers can unpack them directly.
class PotentialGradient(NamedTuple):
    """The potential and its first derivatives at :math:`(R, z)`."""

    phi: ResultLike
    dPdR: ResultLike
    dPdz: ResultLike


class EquatorialDerivatives(NamedTuple):
    """The potential and its first and second radial derivatives in the plane :math:`z = 0`."""

    phi: ResultLike
    dPdR: ResultLike
    d2PdRR: ResultLike


class PotentialHessian(NamedTuple):
    """The potential, its gradient and its Hessian at :math:`(R, z)`."""

    phi: ResultLike
    dPdR: ResultLike
    dPdz: ResultLike
    d2PdRR: ResultLike
    d2Pdzz: ResultLike
    d2PdRz: ResultLike


class Frequencies(NamedTuple):
    r"""The epicyclic frequencies :math:`(\kappa, \nu, \Omega)` of a near-circular orbit."""

    kappa: ResultLike
    nu: ResultLike
    omega: ResultLike


def class_expression(name: str = None, on_demand: bool = True):
    """
    Decorator to register a symbolic expression at the class level.

    The decorated function must have the signature

    .. code-block:: python

        @class_expression(name='my_expression')
        def method(axes: List[sp.Symbol], parameters: Dict[str, sp.Symbol], expression: sp.Basic) -> sp.Basic:
            ...

    where ``axes`` are the symbolic coordinates, ``parameters`` maps parameter names to symbols
    and ``expression`` is the symbolic potential of the class. The decorated function is turned
    into a ``staticmethod``.

    Parameters
    ----------
    name : str, optional
        The name under which the expression is registered. Defaults to the function name.
    on_demand : bool, optional
        If ``True`` (default), the expression is only derived the first time it is requested.
        Otherwise it is derived when the class is created.
    """

    def decorator(func):
        func.class_expression = True
        func.expression_name = name or func.__name__
        func.on_demand = on_demand
        return staticmethod(func)

    return decorator


class PotentialMeta(ABCMeta):
    """
    Metaclass for all potentials in AxiPot. It checks that concrete classes declare what they need
    and builds the class-level symbolic objects.
    """

    def __new__(mcs, name, bases, cls_dict):
        # Parent classes are never instantiated and do not carry a symbolic form.
        is_parent = cls_dict.get("_is_parent_potential", False)

        cls = super().__new__(mcs, name, bases, cls_dict)

        cls._expression_dictionary = {}
        if not is_parent:
            mcs._validate_class(cls)
            mcs._generate_symbolics(cls)
            mcs._register_class_expressions(cls)

        return cls

    @staticmethod
    def _validate_class(cls):
        _required_components = ["AXES", "DEFAULT_PARAMETERS", "_potential"]

        for component in _required_components:
            if getattr(cls, component, None) is None:
                raise SyntaxError(
                    "Class '{}' has no attribute '{}'".format(cls.__name__, component)
                )

        cls.DEFAULT_PARAMETERS = {
            pn: float(pv) for pn, pv in cls.DEFAULT_PARAMETERS.items()
        }

    @staticmethod
    def _generate_symbolics(cls):
        cls.SYMBAXES = [sp.Symbol(ax) for ax in cls.AXES]
        cls.SYMBPARAMS = {param: sp.Symbol(param) for param in cls.DEFAULT_PARAMETERS}

        try:
            cls.potential_expression = cls._potential(*cls.SYMBAXES, **cls.SYMBPARAMS)
        except Exception as e:
            raise ValueError(
                f"Failed to generate symbolic function for '{cls.__name__}' due to: {e}"
            ) from e

    @staticmethod
    def _register_class_expressions(cls):
        seen = set()
        for base in cls.__mro__:
            if base is object:
                continue
            for attr_name, method in base.__dict__.items():
                func = method.__func__ if isinstance(method, staticmethod) else method
                if attr_name in seen or not getattr(func, "class_expression", False):
                    continue
                seen.add(attr_name)

                expression_name = func.expression_name
                devlog.debug(
                    "Registering class expression %s to class %s. (ON_DEMAND=%s)",
                    expression_name,
                    cls.__name__,
                    func.on_demand,
                )

                if func.on_demand:
                    cls._expression_dictionary[expression_name] = func
                    continue

                try:
                    cls._expression_dictionary[expression_name] = func(
                        cls.SYMBAXES, cls.SYMBPARAMS, cls.potential_expression
                    )
                except Exception as e:
                    raise ValueError(
                        f"Failed to register class-level expression '{expression_name}' for "
                        f"class '{cls.__name__}' due to: {e}"
                    ) from e


class Potential(ABC, metaclass=PotentialMeta):
    """
    Core base class for axisymmetric potentials :math:`\\Phi(R, z)`.

    Subclasses supply the closed-form evaluation modes and a symbolic ``_potential``. The
    epicyclic frequencies, the symbolic machinery, equality and HDF5 persistence are shared.
    """

    _is_parent_potential: bool = True

    AXES: List[str] = ["R", "z"]
    """list of str: The cylindrical coordinates on which the potential depends."""
    DEFAULT_PARAMETERS: Dict[str, float] = None
    """dict of str, float: The parameters of the potential and their default values."""

    # Set by the metaclass.
    _expression_dictionary: Dict[str, Any] = None
    potential_expression: sp.Basic = None
    SYMBAXES: List[sp.Symbol] = None
    SYMBPARAMS: Dict[str, sp.Symbol] = None

    logger = LogDescriptor()

    def _setup_parameters(self, parameter_values: Dict[str, float]) -> Dict[str, float]:
        _params = self.DEFAULT_PARAMETERS.copy()

        for param, value in parameter_values.items():
            if param not in _params:
                raise KeyError(f"Invalid parameter '{param}' provided.")
            _params[param] = float(value)

        return _params

    def __init__(self, **kwargs):
        self._parameters: Dict[str, float] = self._setup_parameters(kwargs)

        # Lazily filled repositories for substituted and lambdified expressions.
        self._inst_expression_dictionary: Dict[str, sp.Basic] = {}
        self._inst_numeric_dictionary: Dict[str, Callable] = {}

    # @@ PROPERTIES @@ #
    @property
    def parameters(self) -> Dict[str, float]:
        """
        A copy of the parameters of this potential.
        """
        return self._parameters.copy()

    @property
    def symbolic_expression(self) -> sp.Basic:
        """
        The symbolic potential with the parameter values of this instance substituted in.
        """
        if "potential" not in self._inst_expression_dictionary:
            self._inst_expression_dictionary["potential"] = self.substitute_expression(
                self.__class__.potential_expression
            )
        return self._inst_expression_dictionary["potential"]

    # @@ EVALUATION MODES @@ #
    @abstractmethod
    def potential(self, R: CoordinateLike, z: CoordinateLike) -> ResultLike:
        """Evaluate :math:`\\Phi(R, z)`."""
        pass

    @abstractmethod
    def potential_and_gradient(
        self, R: CoordinateLike, z: CoordinateLike
    ) -> PotentialGradient:
        """Evaluate :math:`\\Phi` and its first derivatives at :math:`(R, z)`."""
        pass

    @abstractmethod
    def equatorial_derivatives(self, R: CoordinateLike) -> EquatorialDerivatives:
        """Evaluate :math:`\\Phi` and its first two radial derivatives at :math:`z = 0`."""
        pass

    @abstractmethod
    def potential_and_hessian(
        self, R: CoordinateLike, z: CoordinateLike
    ) -> PotentialHessian:
        """Evaluate :math:`\\Phi`, its gradient and its Hessian at :math:`(R, z)`."""
        pass

    @abstractmethod
    def describe(self) -> str:
        """Return a human readable formula for this potential."""
        pass

    def __call__(self, R: CoordinateLike, z: CoordinateLike) -> ResultLike:
        return self.potential(R, z)

    def epicyclic_frequencies(self, R: CoordinateLike) -> Frequencies:
        r"""
        Compute the epicyclic frequencies of a circular orbit of radius ``R`` in the plane :math:`z = 0`.

        .. math::

            \Omega^2 = \frac{1}{R}\frac{\partial \Phi}{\partial R},\quad
            \nu^2 = \frac{\partial^2 \Phi}{\partial z^2},\quad
            \kappa^2 = \frac{\partial^2 \Phi}{\partial R^2} + 3\Omega^2.

        Parameters
        ----------
        R : float or array-like
            The cylindrical radius of the orbit.

        Returns
        -------
        Frequencies
            The tuple :math:`(\kappa, \nu, \Omega)`.

        Raises
        ------
        SingularityError
            If the Hessian cannot be evaluated at ``R``.
        FrequencyDomainError
            If any of the squared frequencies is negative or undefined. The values are never clamped.
        """
        R = np.asarray(R, dtype=float)
        hessian = self.potential_and_hessian(R, 0.0)

        with np.errstate(divide="ignore", invalid="ignore"):
            omega_sq = hessian.dPdR / R
        nu_sq = hessian.d2Pdzz
        kappa_sq = hessian.d2PdRR + 3 * omega_sq

        for label, value in (("kappa", kappa_sq), ("nu", nu_sq), ("omega", omega_sq)):
            if not np.all(value >= 0):
                raise FrequencyDomainError(
                    f"Squared frequency {label}^2 of {self!r} is negative or undefined at R={R}: {value}."
                )

        return Frequencies(np.sqrt(kappa_sq), np.sqrt(nu_sq), np.sqrt(omega_sq))

    # @@ SYMBOLIC EXPRESSIONS @@ #
    @classmethod
    def get_class_expression(cls, expression_name: str) -> sp.Basic:
        """
        Retrieve a symbolic expression of this class with all the parameters kept as symbols.

        Raises
        ------
        KeyError
            If the requested expression name does not exist.
        """
        if expression_name not in cls._expression_dictionary:
            raise KeyError(f"Class-level expression '{expression_name}' not found.")

        _class_expr = cls._expression_dictionary[expression_name]

        # On-demand expressions are stored as their generating function until first use.
        if callable(_class_expr) and not isinstance(_class_expr, sp.Basic):
            devlog.debug("Evaluating class expression %s...", expression_name)
            try:
                _class_expr = _class_expr(
                    cls.SYMBAXES, cls.SYMBPARAMS, cls.potential_expression
                )
            except Exception as e:
                raise RuntimeError(
                    f"Failed to register expression '{expression_name}' at class level. ERROR: {e}"
                ) from e
            cls._expression_dictionary[expression_name] = _class_expr

        return _class_expr

    @classmethod
    def list_class_expressions(cls) -> List[str]:
        """List the names of the available class-level expressions."""
        return list(cls._expression_dictionary.keys())

    def get_expression(self, expression_name: str) -> sp.Basic:
        """
        Retrieve a symbolic expression with the parameters of this instance substituted in.
        """
        if expression_name not in self._inst_expression_dictionary:
            self._inst_expression_dictionary[expression_name] = self.substitute_expression(
                self.get_class_expression(expression_name)
            )
        return self._inst_expression_dictionary[expression_name]

    def get_numeric_expression(self, expression_name: str) -> Callable:
        """
        Retrieve (and cache) a NumPy callable ``f(R, z)`` for a symbolic expression.
        """
        if expression_name not in self._inst_numeric_dictionary:
            self._inst_numeric_dictionary[expression_name] = self.lambdify_expression(
                self.get_expression(expression_name)
            )
        return self._inst_numeric_dictionary[expression_name]

    def substitute_expression(self, expression: Union[str, sp.Basic]) -> sp.Basic:
        """Substitute the parameter values of this instance into a symbolic expression."""
        _params = {self.SYMBPARAMS[k]: v for k, v in self._parameters.items()}
        return sp.sympify(expression).subs(_params)

    def lambdify_expression(self, expression: Union[str, sp.Basic]) -> Callable:
        """Convert a symbolic expression into a callable of the coordinates."""
        return sp.lambdify(self.__class__.SYMBAXES, sp.sympify(expression), "numpy")

    @class_expression(name="dPdR")
    def _dPdR(axes, parameters, expression):
        return sp.diff(expression, axes[0])

    @class_expression(name="dPdz")
    def _dPdz(axes, parameters, expression):
        return sp.diff(expression, axes[1])

    @class_expression(name="d2PdRR")
    def _d2PdRR(axes, parameters, expression):
        return sp.diff(expression, axes[0], 2)

    @class_expression(name="d2Pdzz")
    def _d2Pdzz(axes, parameters, expression):
        return sp.diff(expression, axes[1], 2)

    @class_expression(name="d2PdRz")
    def _d2PdRz(axes, parameters, expression):
        return sp.diff(expression, axes[0], axes[1])

    @staticmethod
    @abstractmethod
    def _potential(*args, **kwargs):
        pass

    # @@ DUNDER METHODS @@ #
    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Potential):
            return NotImplemented
        return (
            self.__class__ is other.__class__ and self._parameters == other._parameters
        )

    def __hash__(self) -> int:
        return hash((self.__class__.__name__, tuple(sorted(self._parameters.items()))))

    def __repr__(self) -> str:
        param_str = ", ".join(f"{k}={v}" for k, v in self._parameters.items())
        return f"<{self.__class__.__name__}({param_str})>"

    def __str__(self) -> str:
        return self.describe()

    # @@ IO PROCEDURES @@ #
    def to_hdf5(
        self,
        h5_obj: Union[h5py.File, h5py.Group],
        group_name: str,
        overwrite: bool = None,
    ):
        """
        Save this potential to an HDF5 file opened with ``h5py``.

        The class name and every parameter are written as attributes of ``group_name``.

        Parameters
        ----------
        h5_obj : h5py.File or h5py.Group
            HDF5 object where the potential will be saved.
        group_name : str
            Name of the group in the HDF5 file.
        overwrite : bool, optional
            If True, overwrite an existing group with the same name. Defaults to
            ``potentials.hdf5.overwrite`` in the configuration.

        Raises
        ------
        ValueError
            If the group already exists and ``overwrite`` is False.
        """
        if overwrite is None:
            overwrite = axipot_params["potentials.hdf5.overwrite"]

        if group_name in h5_obj:
            if not overwrite:
                raise ValueError(
                    f"Group '{group_name}' already exists. Use `overwrite=True` to replace it."
                )
            del h5_obj[group_name]

        group = h5_obj.create_group(group_name)
        group.attrs["class_name"] = self.__class__.__name__

        for key, value in self._parameters.items():
            group.attrs[key] = value

        mylog.debug("Wrote %r to HDF5 group '%s'.", self, group_name)

    @classmethod
    def from_hdf5(
        cls, h5_obj: Union[h5py.File, h5py.Group], group_name: str
    ) -> "Potential":
        """
        Load a potential written by :py:meth:`to_hdf5`.

        Raises
        ------
        ValueError
            If the group does not exist or names a class which is not a subclass of ``cls``.
        """
        if group_name not in h5_obj:
            raise ValueError(f"Group '{group_name}' does not exist in the HDF5 file.")
        group = h5_obj[group_name]

        class_name = group.attrs.get("class_name", None)
        _subcls = find_in_subclasses(cls, class_name)

        parameters = {
            key: float(group.attrs[key])
            for key in group.attrs
            if key != "class_name"
        }
        return _subcls(**parameters)
