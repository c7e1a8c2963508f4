"""In-memory owner of the node and link state that control rules read and write.

The routing solver that advances this state is not part of this package. It is expected to
update the node and link arrays every routing step and to call
:meth:`NetworkState.apply_target_settings` to take over the settings issued by the control
rules.
"""

import dataclasses
import typing as t

import numpy as np

from drainage_control_core.core.attributes import Attribute, LinkType, ObjectType


def _float_array(values, size, default=0.0) -> np.ndarray:
    if values is None:
        return np.full(size, default, dtype=np.float64)
    arr = np.asarray(values, dtype=np.float64)
    if arr.shape != (size,):
        raise ValueError(f"expected {size} values, got {arr.shape}")
    return arr.copy()


@dataclasses.dataclass
class NodeEntities:
    ids: t.List[str]
    invert_elevation: np.ndarray
    depth: np.ndarray
    volume: np.ndarray
    lateral_inflow: np.ndarray

    @classmethod
    def from_dict(cls, data: dict) -> "NodeEntities":
        ids = [str(i) for i in data.get("id", [])]
        size = len(ids)
        return cls(
            ids=ids,
            invert_elevation=_float_array(data.get("invert_elevation"), size),
            depth=_float_array(data.get("depth"), size),
            volume=_float_array(data.get("volume"), size),
            lateral_inflow=_float_array(data.get("lateral_inflow"), size),
        )

    def __len__(self):
        return len(self.ids)


@dataclasses.dataclass
class LinkEntities:
    ids: t.List[str]
    link_type: np.ndarray
    depth: np.ndarray
    flow: np.ndarray
    direction: np.ndarray
    setting: np.ndarray
    target_setting: np.ndarray
    time_last_set: np.ndarray

    @classmethod
    def from_dict(cls, data: dict) -> "LinkEntities":
        ids = [str(i) for i in data.get("id", [])]
        size = len(ids)
        types = data.get("type", ["conduit"] * size)
        if len(types) != size:
            raise ValueError(f"expected {size} link types, got {len(types)}")
        setting = _float_array(data.get("setting"), size, default=1.0)
        return cls(
            ids=ids,
            link_type=np.array(
                [LinkType.from_name(tp) if isinstance(tp, str) else LinkType(tp) for tp in types],
                dtype=np.int8,
            ),
            depth=_float_array(data.get("depth"), size),
            flow=_float_array(data.get("flow"), size),
            direction=_float_array(data.get("direction"), size, default=1.0),
            setting=setting,
            target_setting=setting.copy(),
            time_last_set=_float_array(data.get("time_last_set"), size),
        )

    def __len__(self):
        return len(self.ids)


class NetworkState:
    """Node and link values of the drainage network, addressed by position"""

    def __init__(self, nodes: NodeEntities, links: LinkEntities):
        self.nodes = nodes
        self.links = links

    @classmethod
    def from_dict(cls, data: dict) -> "NetworkState":
        return cls(
            nodes=NodeEntities.from_dict(data.get("nodes", {})),
            links=LinkEntities.from_dict(data.get("links", {})),
        )

    def get_attribute(self, object_type: ObjectType, index: int, attribute: Attribute) -> float:
        if object_type is ObjectType.NODE:
            return self._get_node_attribute(index, attribute)
        if object_type.is_link:
            return self._get_link_attribute(index, attribute)
        raise ValueError(f"{object_type.name} values are not owned by the network state")

    def _get_node_attribute(self, index: int, attribute: Attribute) -> float:
        nodes = self.nodes
        if attribute is Attribute.DEPTH:
            return float(nodes.depth[index])
        if attribute is Attribute.HEAD:
            return float(nodes.depth[index] + nodes.invert_elevation[index])
        if attribute is Attribute.VOLUME:
            return float(nodes.volume[index])
        if attribute is Attribute.INFLOW:
            return float(nodes.lateral_inflow[index])
        raise ValueError(f"nodes have no attribute {attribute.name}")

    def _get_link_attribute(self, index: int, attribute: Attribute) -> float:
        links = self.links
        if attribute is Attribute.DEPTH:
            return float(links.depth[index])
        if attribute is Attribute.FLOW:
            return float(links.direction[index] * links.flow[index])
        if attribute is Attribute.STATUS:
            return 1.0 if links.setting[index] > 0 else 0.0
        if attribute is Attribute.SETTING:
            return float(links.setting[index])
        raise ValueError(f"links have no attribute {attribute.name}")

    def set_link_attribute(self, index: int, attribute: Attribute, value: float):
        if attribute not in (Attribute.STATUS, Attribute.SETTING):
            raise ValueError(f"cannot control link attribute {attribute.name}")
        self.links.target_setting[index] = value

    def get_target_setting(self, index: int) -> float:
        return float(self.links.target_setting[index])

    def get_link_type(self, index: int) -> LinkType:
        return LinkType(int(self.links.link_type[index]))

    def get_time_last_set(self, index: int) -> float:
        """Elapsed simulation seconds at which the link last opened or closed"""
        return float(self.links.time_last_set[index])

    def apply_target_settings(self, elapsed_seconds: float) -> int:
        """Make the target settings the actual settings. Links that switch between open and
        closed get ``elapsed_seconds`` as their new time last set. Returns the number of links
        whose setting changed
        """
        links = self.links
        changed = links.setting != links.target_setting
        switched = (links.setting > 0) != (links.target_setting > 0)
        links.time_last_set[switched] = elapsed_seconds
        links.setting[:] = links.target_setting
        return int(np.count_nonzero(changed))
