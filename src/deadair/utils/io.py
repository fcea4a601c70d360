"""File I/O utilities — atomic writes, JSON and YAML handling."""

from __future__ import annotations

import json
import tempfile
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML

_yaml = YAML(typ="safe")
_yaml.default_flow_style = False


def write_atomic(path: Path | str, data: Any) -> None:
    """Write data to a file atomically (write to temp, then rename)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with tempfile.NamedTemporaryFile(
        mode="w",
        dir=path.parent,
        suffix=path.suffix,
        delete=False,
    ) as tmp:
        if isinstance(data, str):
            tmp.write(data)
        else:
            json.dump(data, tmp, indent=2, default=str)
        tmp_path = Path(tmp.name)

    tmp_path.replace(path)


def read_json(path: Path | str) -> dict:
    """Read a JSON file and return as dict."""
    with open(path) as f:
        return json.load(f)


def write_json(path: Path | str, data: Any) -> None:
    """Write data to a JSON file atomically."""
    write_atomic(path, data)


def read_yaml(path: Path | str) -> dict:
    """Read a YAML file and return as dict."""
    with open(path) as f:
        return dict(_yaml.load(f) or {})
