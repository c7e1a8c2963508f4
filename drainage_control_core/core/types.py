from __future__ import annotations

import abc
import logging
import typing as t

from ..settings import Settings
from .moment import Moment

if t.TYPE_CHECKING:
    from ..network.loader import Network


class Model(abc.ABC):
    """Base class of models that take part in a simulation. Subclasses register themselves
    under the ``name`` given in the class definition::

        class MyModel(Model, name="my_model"):
            ...
    """

    __model_name__: t.ClassVar[t.Optional[str]] = None
    _registry: t.ClassVar[t.Dict[str, t.Type[Model]]] = {}

    def __init__(self, model_config: dict):
        self.config = model_config

    def __init_subclass__(cls, **kwargs):
        cls.__model_name__ = kwargs.get("name", cls.__model_name__)
        if "name" in kwargs:
            Model._registry[cls.__model_name__] = cls

    @classmethod
    def get_model_type(cls, name: str) -> t.Type[Model]:
        try:
            return cls._registry[name]
        except KeyError:
            raise ValueError(f"Unknown model type '{name}'") from None

    @abc.abstractmethod
    def setup(self, network: Network, settings: Settings, logger: logging.Logger, **_):
        raise NotImplementedError

    @abc.abstractmethod
    def update(self, moment: Moment) -> t.Tuple[t.Any, t.Optional[Moment]]:
        """Calculate the model for ``moment``

        :returns: The result of the update and the moment at which the model wants to be
            updated next
        """
        raise NotImplementedError

    def shutdown(self):
        pass
