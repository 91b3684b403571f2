"""
AxiPot utilities module.

The :py:mod:`axipot.utilities` module provides the configuration, logging, and class-lookup helpers
shared by the rest of the package.
"""
from .config import axipot_params
from .logging import devlog, mylog

__all__ = [
    "axipot_params",
    "devlog",
    "mylog",
]
