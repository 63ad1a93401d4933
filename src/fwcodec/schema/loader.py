"""Read schema description documents (YAML or JSON) into source schemas."""
from __future__ import annotations

import json
from pathlib import Path
from typing import IO, List, Union

import yaml

from ..errors import SchemaDefinitionError
from .record import SourceSchema
from .tree_importer import import_tree


def load_string(text: str) -> List[SourceSchema]:
    """Parse YAML text (JSON is a subset) and build its sources."""
    try:
        tree = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise SchemaDefinitionError(f"Schema description is not valid YAML: {exc}") from exc
    return import_tree(tree)


def load_stream(stream: IO[str]) -> List[SourceSchema]:
    return load_string(stream.read())


def load_file(path: Union[str, Path]) -> List[SourceSchema]:
    """Load a ``.yaml``/``.yml``/``.json`` schema description file.

    :raises FileNotFoundError: If ``path`` does not exist.
    """
    p = Path(path)
    text = p.read_text(encoding="utf-8")
    if p.suffix.lower() == ".json":
        return import_tree(json.loads(text))
    return load_string(text)
