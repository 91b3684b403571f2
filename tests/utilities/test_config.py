import pytest

from axipot.utilities.config import YAMLConfig, axipot_params


def test_dotted_lookup():
    assert axipot_params["logging.mylog.level"] == "INFO"
    assert axipot_params["potentials.description.float_format"] == "g"
    assert axipot_params["potentials.hdf5.overwrite"] is False


def test_section_lookup():
    assert set(axipot_params["logging"]) == {"mylog", "devlog", "code"}


def test_missing_key():
    with pytest.raises(KeyError, match="logging.mylog.colour"):
        axipot_params["logging.mylog.colour"]


def test_membership_and_get():
    assert "logging.devlog.enabled" in axipot_params
    assert "potentials.nothing" not in axipot_params
    assert axipot_params.get("potentials.nothing", 3) == 3


def test_load_custom_file(temp_dir):
    import os

    path = os.path.join(temp_dir, "config.yaml")
    with open(path, "w") as fio:
        fio.write("potentials:\n  description:\n    float_format: '.3e'\n")

    config = YAMLConfig(path)
    assert config["potentials.description.float_format"] == ".3e"
    assert "logging.mylog.level" not in config
