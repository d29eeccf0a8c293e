from __future__ import annotations

import pytest

from loadplanner.sizing.models import DistributionPolicy, ElectricalConstants
from loadplanner.topology.selection import TopologySelection, default_selection


# sqrt(3) * 415 V * 600 A / 1000
SUBFEED_MAX_KW = 431.2806
# sqrt(3) * 480 V * 996 A * 0.8 / 1000
PDU_MAX_KW = 662.4471


@pytest.fixture
def constants() -> ElectricalConstants:
    return ElectricalConstants()


@pytest.fixture
def policy() -> DistributionPolicy:
    return DistributionPolicy()


@pytest.fixture
def five_lineups() -> TopologySelection:
    return default_selection()


@pytest.fixture
def empty_selection() -> TopologySelection:
    return TopologySelection()
