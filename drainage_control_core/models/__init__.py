from .controls.model import Model as ControlsModel

__all__ = ["ControlsModel"]
