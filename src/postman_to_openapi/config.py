"""Load conversion options from a YAML or JSON file."""

from pathlib import Path

import yaml

from postman_to_openapi.errors import MalformedInputError
from postman_to_openapi.openapi.models import ConversionOptions


def load_options(file_path: Path) -> ConversionOptions:
    """Read options from `file_path` (YAML, so JSON works too).

    An empty file gives the default options.
    """
    text = file_path.read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise MalformedInputError(f"{file_path} is not valid YAML/JSON: {e}") from e
    if not isinstance(data, dict):
        raise MalformedInputError(f"{file_path} must contain a mapping of options")
    return ConversionOptions.model_validate(data)
