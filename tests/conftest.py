"""
Configuration for AxiPot unit testing structure.
"""
import os

import pytest
from _pytest.config.argparsing import Parser


# @@ PYTEST OPTIONS CONFIG @@ #
def pytest_addoption(parser: Parser) -> None:
    """
    Add custom command-line options to pytest for controlling test behavior.

    Args:
        parser (Parser): The pytest parser object.

    Returns:
        None
    """
    parser.addoption("--tmp", help="The temporary directory to use.", default=None)


# @@ SESSION FIXTURES @@ #
@pytest.fixture()
def temp_dir(request) -> str:
    """Pull the temporary directory.

    If this is specified by the user, then it may be a non-temp directory which is not
    wiped after runtime. If not specified, then a temp directory is generated and wiped
    after runtime.
    """
    td = request.config.getoption("--tmp")

    if td is None:
        from tempfile import TemporaryDirectory

        td = TemporaryDirectory()

        yield td.name

        td.cleanup()
    else:
        td = os.path.abspath(td)
        if not os.path.exists(td):
            os.makedirs(td)
        yield td
