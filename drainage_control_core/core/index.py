import enum
import typing as t

import numpy as np

NOT_FOUND = -1


class ObjectKind(enum.Enum):
    NODE = "node"
    LINK = "link"
    CURVE = "curve"
    TIMESERIES = "timeseries"


class IdIndex:
    """Maps object ids (names) to their position. Ids are matched exactly and must be unique.
    Unknown ids resolve to -1
    """

    ids: np.ndarray

    def __init__(self, ids: t.Optional[t.Iterable[str]] = None):
        self.ids = np.array([], dtype=object)
        self._positions: t.Dict[str, int] = {}
        if ids is not None:
            self.add_ids(ids)

    def add_ids(self, ids: t.Iterable[str]) -> None:
        ids = [str(i) for i in ids]
        candidates = np.concatenate((self.ids, np.array(ids, dtype=object)))
        uniqs, counts = np.unique(candidates.astype(str), return_counts=True)
        if np.any(counts != 1):
            raise ValueError(
                "Duplicate entries detected: " + ", ".join(str(i) for i in uniqs[counts != 1])
            )
        offset = len(self.ids)
        self._positions.update({ident: offset + pos for pos, ident in enumerate(ids)})
        self.ids = candidates

    def __getitem__(self, item: str) -> int:
        return self._positions.get(item, NOT_FOUND)


class ProjectIndex:
    """Id lookup over all object kinds that control rules can refer to"""

    def __init__(self, **ids: t.Iterable[str]):
        self.indexes = {kind: IdIndex(ids.get(kind.value)) for kind in ObjectKind}

    def find_index(self, kind: ObjectKind, ident: str) -> int:
        return self.indexes[kind][ident]
