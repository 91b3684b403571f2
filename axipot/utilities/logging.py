"""
Logging utilities for AxiPot.

Loggers:
--------

- :py:attr:`mylog`: The main logger for the application.
- :py:attr:`devlog`: The development logger for debugging and development purposes.

The base levels of each of these loggers may be set in the configuration.
"""
import logging
import sys
from typing import Type

from axipot.utilities._typing import Instance
from axipot.utilities.config import axipot_params

# @@ SETTING UP LOGGERS @@ #
# We load streams, formatters, and handlers from the configuration
# and load them dynamically.
streams = dict(
    mylog=getattr(sys, axipot_params["logging.mylog.stream"]),
    devlog=getattr(sys, axipot_params["logging.devlog.stream"]),
)
_loggers = dict(mylog=logging.Logger("AxiPot"), devlog=logging.Logger("AXIPOT-DEV"))

_handlers = {}

for k, v in _loggers.items():
    _handlers[k] = logging.StreamHandler(streams[k])
    _handlers[k].setFormatter(logging.Formatter(axipot_params[f"logging.{k}.format"]))

    v.addHandler(_handlers[k])
    v.setLevel(axipot_params[f"logging.{k}.level"])
    v.propagate = False

    if k != "mylog":
        v.disabled = not axipot_params[f"logging.{k}.enabled"]

mylog: logging.Logger = _loggers["mylog"]
""":py:class:`logging.Logger`: The main logger for ``AxiPot``.

- ``DEBUG``: Verbose mode for users doing their own debugging.
- ``INFO``: Standard output for the user to see.
- ``WARNING``: Relevant warnings for the user, e.g. parameters outside the physical domain.
- ``ERROR`` / ``CRITICAL``: Relevant errors for the user to be concerned with.
"""
devlog: logging.Logger = _loggers["devlog"]
""":py:class:`logging.Logger`: The development logger for ``AxiPot``. Off by default."""


class LogDescriptor:
    """
    A descriptor for dynamically creating and managing loggers for a class.

    :py:class:`~axipot.potentials.base.Potential` uses this to expose ``cls.logger``, a logger
    named after the concrete potential class.
    """

    def __get__(self, instance: Instance, owner: Type[Instance]) -> logging.Logger:
        logger = logging.getLogger(owner.__name__)

        if not logger.handlers:
            handler = logging.StreamHandler(
                getattr(sys, axipot_params["logging.mylog.stream"])
            )
            handler.setFormatter(
                logging.Formatter(axipot_params["logging.code.format"])
            )
            logger.addHandler(handler)
            logger.setLevel(axipot_params["logging.code.level"])
            logger.propagate = False
            logger.disabled = not axipot_params["logging.code.enabled"]

        return logger
