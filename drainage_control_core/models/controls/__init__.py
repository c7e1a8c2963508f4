"""Controls Model for rule based control of drainage network links.

Control rules set the status or setting of pumps, orifices, weirs, outlets and conduits
based on conditions involving:
- Node and link values (depth, head, flow, ...)
- Simulation time, clock time and calendar fields
- Logical combinations (AND/OR) of conditions
"""

from .engine import ControlEngine, ControlReport
from .model import Model

__all__ = ["ControlEngine", "ControlReport", "Model"]
