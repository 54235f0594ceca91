import pytest

from ifactor.debug import debug, DebugLevel


@pytest.fixture(autouse=True)
def quiet_debug():
    """Keep engine logging out of test output."""
    debug.configure(level=DebugLevel.ERROR, components=[])
    yield
    debug.configure(level=DebugLevel.ERROR, components=[])
