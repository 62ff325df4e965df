import pytest

from netlists import hierarchy_netlist


@pytest.fixture
def hierarchy():
    return hierarchy_netlist()
