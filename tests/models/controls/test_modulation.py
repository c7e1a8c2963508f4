import pytest

from drainage_control_core.core.attributes import Attribute, ObjectType
from drainage_control_core.models.controls.actions import (
    Action,
    CurveSetting,
    FixedSetting,
    PidSetting,
    TimeSeriesSetting,
)
from drainage_control_core.models.controls.modulation import ModulationEngine
from drainage_control_core.models.controls.variables import Variable, VariableResolver

N1_DEPTH = Variable(ObjectType.NODE, 0, Attribute.DEPTH)
WW_DEPTH = Variable(ObjectType.NODE, 2, Attribute.DEPTH)


@pytest.fixture
def resolver(network, clock):
    return VariableResolver(network.state, clock)


@pytest.fixture
def modulation(resolver, network):
    return ModulationEngine(resolver, network.tables)


@pytest.fixture
def make_action(link):
    def _make_action(ident, mode, attribute=Attribute.SETTING):
        return Action(link=link(ident), link_id=ident, attribute=attribute, mode=mode)

    return _make_action


def test_fixed_setting(modulation, make_action):
    assert modulation.compute(make_action("W1", FixedSetting(0.3)), 1) == 0.3


class TestCurveSetting:
    def test_interpolates(self, modulation, make_action):
        action = make_action("O1", CurveSetting(curve=0, controller=N1_DEPTH))
        assert modulation.compute(action, 1) == pytest.approx(0.5)

    def test_clamps_at_table_end(self, network, modulation, make_action):
        network.state.nodes.depth[0] = 10.0
        action = make_action("O1", CurveSetting(curve=0, controller=N1_DEPTH))
        assert modulation.compute(action, 1) == 1.0

    def test_undefined_controller_keeps_setting(self, modulation, make_action, link):
        controller = Variable(ObjectType.LINK, link("W1"), Attribute.STATUS)
        action = make_action("O1", CurveSetting(curve=0, controller=controller))
        assert modulation.compute(action, 1) == 0.5

    def test_pump_curve(self, modulation, make_action):
        action = make_action("P1", CurveSetting(curve=1, controller=WW_DEPTH))
        assert modulation.compute(action, 1) == pytest.approx(1.5)


class TestTimeSeriesSetting:
    @pytest.mark.parametrize(
        "seconds, expected",
        [
            (0, 0.2),
            (1800, 0.5),
            (3600, 0.8),
            (7200, 0.8),
        ],
    )
    def test_lookup_at_current_time(
        self, clock, resolver, modulation, make_action, seconds, expected
    ):
        clock.advance(seconds)
        resolver.start_step()
        action = make_action("W1", TimeSeriesSetting(0))
        assert modulation.compute(action, 1) == pytest.approx(expected)


class TestPidSetting:
    def test_first_and_second_step(self, resolver, modulation, make_action):
        pid = PidSetting(WW_DEPTH, 4.0, kp=0.5, ki=0.1, kd=0.2)
        action = make_action("P1", pid)

        first = modulation.compute(action, 1.0)
        assert first == pytest.approx(0.8)
        assert (pid.e1, pid.e2) == (1.0, 0.0)

        resolver.apply(action.link, Attribute.SETTING, first)
        second = modulation.compute(action, 1.0)
        assert second == pytest.approx(0.7)
        assert (pid.e1, pid.e2) == (1.0, 1.0)

    def test_step_in_minutes(self, modulation, make_action):
        pid = PidSetting(WW_DEPTH, 4.0, kp=0.0, ki=0.1, kd=0.2)
        assert modulation.compute(make_action("P1", pid), 5.0) == pytest.approx(
            0.1 * 1.0 * 5.0 + 0.2 * 1.0 / 5.0
        )

    def test_zero_step_only_proportional(self, modulation, make_action):
        pid = PidSetting(WW_DEPTH, 4.0, kp=0.5, ki=0.1, kd=0.2)
        assert modulation.compute(make_action("P1", pid), 0.0) == pytest.approx(0.5)

    def test_variable_setpoint(self, modulation, make_action):
        pid = PidSetting(WW_DEPTH, N1_DEPTH, kp=0.1, ki=0.0, kd=0.0)
        assert modulation.compute(make_action("O1", pid), 1.0) == pytest.approx(0.4)

    def test_clipped_to_one_for_non_pumps(self, modulation, make_action):
        pid = PidSetting(WW_DEPTH, 10.0, kp=1.0, ki=0.0, kd=0.0)
        assert modulation.compute(make_action("O1", pid), 1.0) == 1.0

    def test_not_clipped_to_one_for_pumps(self, modulation, make_action):
        pid = PidSetting(WW_DEPTH, 10.0, kp=1.0, ki=0.0, kd=0.0)
        assert modulation.compute(make_action("P1", pid), 1.0) == pytest.approx(7.0)

    def test_clipped_to_zero(self, modulation, make_action):
        pid = PidSetting(WW_DEPTH, 0.0, kp=1.0, ki=0.0, kd=0.0)
        assert modulation.compute(make_action("O1", pid), 1.0) == 0.0

    def test_undefined_controller_keeps_state(self, modulation, make_action, link):
        controller = Variable(ObjectType.LINK, link("W1"), Attribute.STATUS)
        pid = PidSetting(controller, 1.0, kp=1.0, ki=1.0, kd=1.0, e1=0.3, e2=0.2)
        assert modulation.compute(make_action("O1", pid), 1.0) == 0.5
        assert (pid.e1, pid.e2) == (0.3, 0.2)

    def test_reset(self):
        pid = PidSetting(WW_DEPTH, 1.0, kp=1.0, ki=1.0, kd=1.0, e1=0.3, e2=0.2)
        pid.reset()
        assert (pid.e1, pid.e2) == (0.0, 0.0)
