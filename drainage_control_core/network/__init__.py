from .loader import Network, load_network, read_network_file
from .state import NetworkState
from .tables import Curve, TableCollection, TimeSeries

__all__ = [
    "Network",
    "load_network",
    "read_network_file",
    "NetworkState",
    "Curve",
    "TableCollection",
    "TimeSeries",
]
