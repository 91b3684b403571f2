"""Error classes for the :py:mod:`~axipot.potentials` module."""


class PotentialError(Exception):
    r"""Base exception class for potential-related errors."""

    pass


class SingularityError(PotentialError, ValueError):
    r"""Exception raised when a potential is evaluated at a point where its logarithm diverges."""

    pass


class FrequencyDomainError(PotentialError, ValueError):
    r"""Exception raised when a squared epicyclic frequency is negative or undefined."""

    pass
