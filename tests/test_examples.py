import pathlib


def run_file(path):
    content = pathlib.Path(path).read_text()
    namespace = {"__name__": "example"}
    exec(content, namespace)
    return namespace


EXAMPLES_DIR = pathlib.Path(__file__).parents[1].joinpath("examples")


def test_pump_station_controls():
    path = EXAMPLES_DIR / "pump_station_controls.py"
    history = run_file(path)["main"]()
    assert len(history) == 48
    assert {pump for _, _, pump, _ in history} == {0.0, 1.0}
    assert max(depth for _, depth, _, _ in history) < 3.5
    assert {weir for _, _, _, weir in history} == {0.2}
