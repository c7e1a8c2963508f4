"""Build a :class:`Network` from a JSON dataset of the form::

    {
        "nodes": {"id": ["N1", "N2"], "invert_elevation": [10.0, 8.5], "depth": [0.0, 0.0]},
        "links": {"id": ["P1", "W1"], "type": ["pump", "weir"], "setting": [0.0, 1.0]},
        "curves": {"C1": [[0.0, 0.0], [5.0, 1.0]]},
        "timeseries": {"TS1": [["2020-01-01 00:00", 0.2], ["2020-01-01 06:00", 0.8]]}
    }
"""

import dataclasses
import typing as t
from pathlib import Path

import orjson

from drainage_control_core.core.index import ProjectIndex
from drainage_control_core.core.moment import TimelineInfo

from .state import NetworkState
from .tables import Curve, TableCollection, TimeSeries


@dataclasses.dataclass
class Network:
    state: NetworkState
    tables: TableCollection
    index: ProjectIndex


def load_network(data: dict, timeline_info: t.Optional[TimelineInfo] = None) -> Network:
    state = NetworkState.from_dict(data)
    curves = [
        Curve(name, [x for x, _ in points], [y for _, y in points])
        for name, points in data.get("curves", {}).items()
    ]
    time_series = [
        TimeSeries.from_entries(name, entries, timeline_info)
        for name, entries in data.get("timeseries", {}).items()
    ]
    index = ProjectIndex(
        node=state.nodes.ids,
        link=state.links.ids,
        curve=[c.name for c in curves],
        timeseries=[ts.name for ts in time_series],
    )
    return Network(state=state, tables=TableCollection(curves, time_series), index=index)


def read_network_file(
    path: t.Union[str, Path], timeline_info: t.Optional[TimelineInfo] = None
) -> Network:
    return load_network(orjson.loads(Path(path).read_bytes()), timeline_info)
