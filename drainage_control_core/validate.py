import json
import typing as t
from pathlib import Path

from jsonschema import exceptions, validators


class ConfigVersion(t.TypedDict):
    schema: t.Union[dict, str, Path]


def ensure_valid_config(
    config: dict,
    target_version: str,
    versions: t.Dict[str, ConfigVersion],
    add_name_and_type=True,
):
    """Validate a model config against the schema of ``target_version``

    :returns: The config, as plain JSON data
    :raises jsonschema.ValidationError: The most relevant error when the config is invalid
    """
    try:
        config = json.loads(json.dumps(config))
    except (TypeError, ValueError):
        raise TypeError(f"config {config} is not a valid JSON-encodable object")

    version = versions[target_version]
    schema = ensure_schema(version["schema"], add_name_and_type)
    errors = get_validation_errors(config, schema)

    if errors:
        raise exceptions.best_match(errors)
    return config


def ensure_schema(schema_identifier: t.Union[dict, str, Path], add_name_and_type=True):
    if isinstance(schema_identifier, dict):
        schema = json.loads(json.dumps(schema_identifier))
    else:
        schema = json.loads(Path(schema_identifier).read_text())
    if add_name_and_type:
        schema["properties"]["name"] = {"type": "string"}
        schema["properties"]["type"] = {"type": "string"}
    return schema


def get_validation_errors(config, schema) -> t.List[exceptions.ValidationError]:
    cls = validators.validator_for(schema, default=validators.Draft7Validator)
    cls.check_schema(schema)
    return list(cls(schema).iter_errors(config))
