"""Example of a pump station under rule based control.

A wet well fills with a constant inflow and is emptied by a pump. The pump is switched on
above a high water level and off below a low water level. An overflow weir is throttled at
night. The routing solver is replaced by a simple mass balance of the wet well.
"""

from drainage_control_core.core.moment import Moment, TimelineInfo
from drainage_control_core.models.controls.model import Model
from drainage_control_core.network.loader import load_network
from drainage_control_core.settings import Settings
from drainage_control_core.utils.logging import get_logger

RULES = """
[CONTROLS]
; switch the pump on a high water level
RULE PUMP_ON
IF NODE WW DEPTH > 2.5
THEN PUMP P1 STATUS = ON
PRIORITY 2

RULE PUMP_OFF
IF NODE WW DEPTH < 0.5
THEN PUMP P1 STATUS = OFF
PRIORITY 2

RULE NIGHT_WEIR
IF SIMULATION CLOCKTIME >= 22:00
OR SIMULATION CLOCKTIME < 06:00
THEN WEIR W1 SETTING = 0.2
ELSE WEIR W1 SETTING = 1
"""

INFLOW = 0.02  # m3/s
PUMP_CAPACITY = 0.05  # m3/s
WET_WELL_AREA = 10.0  # m2


def get_network(timeline_info):
    return load_network(
        {
            "nodes": {"id": ["WW", "OUT"], "invert_elevation": [0.0, -2.0], "depth": [1.0, 0.0]},
            "links": {"id": ["P1", "W1"], "type": ["pump", "weir"], "setting": [0.0, 1.0]},
        },
        timeline_info,
    )


def fill_wet_well(network, seconds):
    state = network.state
    outflow = PUMP_CAPACITY if state.links.setting[0] > 0 else 0.0
    depth = state.nodes.depth[0] + (INFLOW - outflow) * seconds / WET_WELL_AREA
    state.nodes.depth[0] = max(depth, 0.0)


def main(steps=48):
    settings = Settings(
        reference=TimelineInfo.from_datetime("2024-06-03 00:00").reference, control_step=300
    )
    network = get_network(settings.timeline_info)

    model = Model({"rules": RULES})
    model.setup(network=network, settings=settings, logger=get_logger(settings))

    history = []
    moment = Moment(settings.start_time, settings.timeline_info)
    for _ in range(steps):
        _, next_moment = model.update(moment)
        network.state.apply_target_settings(model.clock.elapsed_seconds)
        history.append(
            (
                moment.as_datetime,
                float(network.state.nodes.depth[0]),
                float(network.state.links.setting[0]),
                float(network.state.links.setting[1]),
            )
        )
        fill_wet_well(network, next_moment.seconds - moment.seconds)
        moment = next_moment
    model.shutdown()
    return history


if __name__ == "__main__":
    for when, depth, pump, weir in main():
        print(f"{when:%H:%M} wet well {depth:5.2f} m, pump {pump:.0f}, weir {weir:.1f}")
