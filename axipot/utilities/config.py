"""
Configuration management for AxiPot.

The configuration lives in ``axipot/utilities/bin/config.yaml`` and is exposed through the
:py:attr:`axipot_params` singleton. Entries are addressed with dotted keys which walk down the
nested YAML mapping:

>>> from axipot.utilities.config import axipot_params
>>> axipot_params["logging.mylog.level"]
'INFO'
"""
import os
from pathlib import Path
from typing import Any, Union

from ruamel.yaml import YAML

_yaml = YAML(typ="safe")

#: Location of the default configuration file shipped with the package.
_CONFIG_DIRECTORY = os.path.join(Path(__file__).parents[0], "bin")
_CONFIG_PATH = os.path.join(_CONFIG_DIRECTORY, "config.yaml")


class YAMLConfig:
    """
    Read-only view of a YAML configuration file with dotted-key access.

    Parameters
    ----------
    path: str or Path
        The path to the YAML file to load.
    """

    def __init__(self, path: Union[str, Path]):
        self.path: Path = Path(path)

        with open(self.path, "r") as fio:
            self._data: dict = _yaml.load(fio) or {}

    def __getitem__(self, key: str) -> Any:
        _value = self._data

        for _k in key.split("."):
            if not isinstance(_value, dict) or _k not in _value:
                raise KeyError(
                    f"Configuration key '{key}' not found in {self.path}."
                )
            _value = _value[_k]

        return _value

    def __contains__(self, key: str) -> bool:
        try:
            self[key]
        except KeyError:
            return False
        return True

    def get(self, key: str, default: Any = None) -> Any:
        """
        Fetch ``key`` from the configuration, returning ``default`` if it is not present.
        """
        try:
            return self[key]
        except KeyError:
            return default

    def __repr__(self) -> str:
        return f"<YAMLConfig '{self.path}'>"


axipot_params: YAMLConfig = YAMLConfig(_CONFIG_PATH)
""":py:class:`YAMLConfig`: The configuration object for ``AxiPot``."""
