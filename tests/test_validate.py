import json

import jsonschema
import pytest

from drainage_control_core.validate import ensure_valid_config

SCHEMA = {
    "type": "object",
    "properties": {"value": {"type": "number"}},
    "required": ["value"],
    "additionalProperties": False,
}


def test_valid_config():
    assert ensure_valid_config({"value": 1}, "1", {"1": {"schema": SCHEMA}}) == {"value": 1}


def test_allows_name_and_type():
    config = {"name": "a", "type": "b", "value": 1}
    assert ensure_valid_config(config, "1", {"1": {"schema": SCHEMA}}) == config


def test_invalid_config():
    with pytest.raises(jsonschema.ValidationError):
        ensure_valid_config({"value": "x"}, "1", {"1": {"schema": SCHEMA}})


def test_schema_from_file(tmp_path):
    path = tmp_path / "schema.json"
    path.write_text(json.dumps(SCHEMA))
    assert ensure_valid_config({"value": 2}, "1", {"1": {"schema": path}}) == {"value": 2}


def test_config_must_be_json():
    with pytest.raises(TypeError):
        ensure_valid_config({"value": object()}, "1", {"1": {"schema": SCHEMA}})
