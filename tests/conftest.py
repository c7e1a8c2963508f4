import pytest

from drainage_control_core.core.clock import SimulationClock
from drainage_control_core.core.index import ObjectKind
from drainage_control_core.core.moment import TimelineInfo
from drainage_control_core.models.controls.engine import ControlEngine
from drainage_control_core.network.loader import load_network


@pytest.fixture
def timeline_info():
    # 2024-06-03 is a Monday
    return TimelineInfo.from_datetime("2024-06-03 00:00")


@pytest.fixture
def network_data():
    return {
        "nodes": {
            "id": ["N1", "N2", "WW"],
            "invert_elevation": [10.0, 8.0, 0.0],
            "depth": [2.0, 1.0, 3.0],
            "volume": [100.0, 50.0, 300.0],
            "lateral_inflow": [0.5, 0.0, 1.5],
        },
        "links": {
            "id": ["P1", "P2", "W1", "O1", "C1", "OUT1"],
            "type": ["pump", "pump", "weir", "orifice", "conduit", "outlet"],
            "setting": [0.0, 1.0, 1.0, 0.5, 1.0, 1.0],
            "flow": [0.0, 2.0, 1.0, 0.5, -3.0, 0.2],
            "depth": [0.0, 0.0, 0.4, 0.3, 1.2, 0.1],
        },
        "curves": {
            "CURVE1": [[0.0, 0.0], [4.0, 1.0]],
            "PUMPCURVE": [[0.0, 0.0], [10.0, 5.0]],
        },
        "timeseries": {
            "TS1": [[0, 0.2], [3600, 0.8]],
        },
    }


@pytest.fixture
def network(network_data, timeline_info):
    return load_network(network_data, timeline_info)


@pytest.fixture
def clock(timeline_info):
    return SimulationClock(timeline_info)


@pytest.fixture
def engine(network, clock):
    return ControlEngine(network.state, network.tables, network.index, clock)


@pytest.fixture
def build(engine):
    def _build(text):
        errors = engine.build_rules(text)
        assert errors == []
        return engine.rules

    return _build


@pytest.fixture
def link(network):
    def _link(ident):
        return network.index.find_index(ObjectKind.LINK, ident)

    return _link
