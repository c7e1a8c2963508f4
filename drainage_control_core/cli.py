import typing as t
from pathlib import Path

import click
import orjson

from drainage_control_core.core.clock import SimulationClock
from drainage_control_core.core.moment import Moment, TimelineInfo
from drainage_control_core.exceptions import RuleSyntaxError
from drainage_control_core.models.controls.engine import ControlEngine
from drainage_control_core.models.controls.model import Model
from drainage_control_core.network.loader import Network, load_network, read_network_file
from drainage_control_core.settings import Settings
from drainage_control_core.utils.logging import get_logger


def _settings(scenario: t.Optional[str], start: t.Optional[str]) -> Settings:
    settings = Settings()
    if scenario is not None:
        settings.apply_scenario_config(orjson.loads(Path(scenario).read_bytes()))
    if start is not None:
        settings.reference = TimelineInfo.from_datetime(start).reference
    return settings


def _load(network_file: t.Optional[str], settings: Settings) -> Network:
    if network_file is None:
        return load_network({}, settings.timeline_info)
    return read_network_file(network_file, settings.timeline_info)


@click.group()
def main():
    """Build and run drainage network control rules"""


@main.command()
@click.argument("controls", type=click.Path(exists=True, dir_okay=False))
@click.option("--network", "network_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--scenario", type=click.Path(exists=True, dir_okay=False))
def check(controls, network_file, scenario):
    """Report the syntax errors in a file of control rules"""
    settings = _settings(scenario, None)
    network = _load(network_file, settings)
    engine = ControlEngine(
        network.state,
        network.tables,
        network.index,
        SimulationClock(settings.timeline_info),
        logger=get_logger(settings.model_copy(update={"log_level": "ERROR"})),
    )
    errors = engine.build_rules(Path(controls).read_text())
    for error in errors:
        click.echo(str(error))
    click.echo(f"{len(engine.rules)} rules, {len(errors)} errors")
    if errors:
        raise SystemExit(1)


@main.command()
@click.argument("controls", type=click.Path(exists=True, dir_okay=False))
@click.option("--network", "network_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--scenario", type=click.Path(exists=True, dir_okay=False))
@click.option("--steps", type=int, default=1, show_default=True)
@click.option("--control-step", type=float, help="seconds between control steps")
@click.option("--start", help="simulation start, eg. '2024-06-01 08:00'")
@click.option("--strict", is_flag=True, default=False)
def run(controls, network_file, scenario, steps, control_step, start, strict):
    """Evaluate control rules for a number of control steps against a static network"""
    settings = _settings(scenario, start)
    if control_step is not None:
        settings.control_step = control_step
    network = _load(network_file, settings)
    logger = get_logger(settings)

    model = Model({"rules_file": str(Path(controls).resolve()), "strict": strict})
    try:
        model.setup(network=network, settings=settings, logger=logger)
    except RuleSyntaxError as e:
        click.echo(str(e))
        raise SystemExit(1)

    moment = Moment(settings.start_time, settings.timeline_info)
    for _ in range(steps):
        committed, next_moment = model.update(moment)
        network.state.apply_target_settings(model.clock.elapsed_seconds)
        for action in committed:
            click.echo(
                f"{moment.as_datetime:%Y-%m-%d %H:%M:%S} {action.link_id} "
                f"{action.attribute.name} = {action.value:g} ({action.rule_id})"
            )
        moment = next_moment
    model.shutdown()


if __name__ == "__main__":
    main()
