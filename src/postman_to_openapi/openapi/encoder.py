"""Encode a Document as YAML or JSON text."""

import json
from pathlib import Path

import yaml

from .models import Document


class OpenApiDumper(yaml.SafeDumper):
    """Block-style YAML without anchors; multi-line strings as literals."""

    def ignore_aliases(self, data):
        return True

    def represent_str(self, data):
        style = "|" if "\n" in data else None
        return self.represent_scalar("tag:yaml.org,2002:str", data, style=style)


OpenApiDumper.add_representer(str, OpenApiDumper.represent_str)


def to_yaml(document: Document) -> str:
    return yaml.dump(
        document.to_dict(),
        Dumper=OpenApiDumper,
        allow_unicode=True,
        default_flow_style=False,
        sort_keys=False,
    )


def to_json(document: Document) -> str:
    return json.dumps(document.to_dict(), indent=2, ensure_ascii=False) + "\n"


def dump_document(document: Document, fmt: str = "yaml") -> str:
    if fmt == "json":
        return to_json(document)
    if fmt == "yaml":
        return to_yaml(document)
    raise ValueError(f"Unknown output format: {fmt!r}")


def format_for_path(path: Path) -> str:
    """`json` for a .json file, `yaml` otherwise."""
    return "json" if path.suffix.lower() == ".json" else "yaml"


def write_document(document: Document, path: Path, fmt: str | None = None) -> str:
    """Write the encoded document to `path` and return the text written."""
    text = dump_document(document, fmt or format_for_path(path))
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return text
