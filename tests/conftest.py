import logging

import pytest


@pytest.fixture(autouse=True)
def reset_root_logging():
    """Drop root handlers installed by CLI invocations.

    The CLI calls ``logging.basicConfig(force=True)`` with the stderr stream
    that CliRunner swaps in. Once the runner closes that stream, later tests
    that log would write to a closed file, so the handlers are removed after
    every test.
    """
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
