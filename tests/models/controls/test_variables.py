import pytest

from drainage_control_core.core.attributes import Attribute, LinkType, ObjectType
from drainage_control_core.models.controls.variables import Variable, VariableResolver


@pytest.fixture
def resolver(network, clock):
    return VariableResolver(network.state, clock)


def node_var(index, attribute):
    return Variable(ObjectType.NODE, index, attribute)


def link_var(index, attribute, object_type=ObjectType.LINK):
    return Variable(object_type, index, attribute)


def sim_var(attribute):
    return Variable(ObjectType.SIMULATION, -1, attribute)


class TestNodeVariables:
    @pytest.mark.parametrize(
        "attribute, expected",
        [
            (Attribute.DEPTH, 2.0),
            (Attribute.HEAD, 12.0),
            (Attribute.VOLUME, 100.0),
            (Attribute.INFLOW, 0.5),
        ],
    )
    def test_resolve(self, resolver, attribute, expected):
        assert resolver.resolve(node_var(0, attribute)) == expected


class TestLinkVariables:
    def test_flow(self, resolver, link):
        assert resolver.resolve(link_var(link("C1"), Attribute.FLOW)) == -3.0

    def test_depth(self, resolver, link):
        assert resolver.resolve(link_var(link("C1"), Attribute.DEPTH, ObjectType.CONDUIT)) == 1.2

    @pytest.mark.parametrize("ident, expected", [("P1", 0.0), ("P2", 1.0), ("C1", 1.0)])
    def test_status(self, resolver, link, ident, expected):
        assert resolver.resolve(link_var(link(ident), Attribute.STATUS)) == expected

    def test_status_undefined_for_weir(self, resolver, link):
        assert resolver.resolve(link_var(link("W1"), Attribute.STATUS)) is None

    @pytest.mark.parametrize("ident, expected", [("O1", 0.5), ("W1", 1.0), ("OUT1", 1.0)])
    def test_setting(self, resolver, link, ident, expected):
        assert resolver.resolve(link_var(link(ident), Attribute.SETTING)) == expected

    def test_setting_undefined_for_pump(self, resolver, link):
        assert resolver.resolve(link_var(link("P1"), Attribute.SETTING)) is None

    def test_time_open(self, resolver, clock, link):
        clock.advance(1800)
        resolver.start_step()
        assert resolver.resolve(link_var(link("C1"), Attribute.TIMEOPEN)) == 0.5
        assert resolver.resolve(link_var(link("C1"), Attribute.TIMECLOSED)) is None

    def test_time_closed(self, resolver, clock, link):
        clock.advance(7200)
        resolver.start_step()
        assert resolver.resolve(link_var(link("P1"), Attribute.TIMECLOSED)) == 2.0
        assert resolver.resolve(link_var(link("P1"), Attribute.TIMEOPEN)) is None

    def test_time_open_since_last_switch(self, network, resolver, clock, link):
        p1 = link("P1")
        clock.advance(3600)
        resolver.apply(p1, Attribute.STATUS, 1.0)
        network.state.apply_target_settings(clock.elapsed_seconds)
        clock.advance(5400)
        resolver.start_step()
        assert resolver.resolve(link_var(p1, Attribute.TIMEOPEN)) == 1.5


class TestSimulationVariables:
    @pytest.mark.parametrize(
        "attribute, expected",
        [
            (Attribute.TIME, 33.5),
            (Attribute.CLOCKTIME, 9.5),
            (Attribute.DAY, 3),
            (Attribute.MONTH, 6),
            (Attribute.DAYOFYEAR, 156),
            (Attribute.DATE, 739041),
        ],
    )
    def test_resolve(self, resolver, clock, attribute, expected):
        clock.advance(33.5 * 3600)
        resolver.start_step()
        assert resolver.resolve(sim_var(attribute)) == expected

    def test_unknown_simulation_attribute_is_zero(self, resolver):
        assert resolver.resolve(sim_var(Attribute.DEPTH)) == 0.0

    def test_reading_is_kept_until_next_step(self, resolver, clock):
        resolver.start_step()
        clock.advance(3600)
        assert resolver.resolve(sim_var(Attribute.TIME)) == 0.0
        resolver.start_step()
        assert resolver.resolve(sim_var(Attribute.TIME)) == 1.0


class TestResolver:
    def test_unresolved_variable_raises(self, resolver):
        with pytest.raises(ValueError):
            resolver.resolve(node_var(-1, Attribute.DEPTH))

    def test_apply_sets_target_setting(self, resolver, link):
        p1 = link("P1")
        resolver.apply(p1, Attribute.STATUS, 1.0)
        assert resolver.target_setting(p1) == 1.0
        assert resolver.resolve(link_var(p1, Attribute.STATUS)) == 0.0

    def test_link_type(self, resolver, link):
        assert resolver.link_type(link("W1")) is LinkType.WEIR
