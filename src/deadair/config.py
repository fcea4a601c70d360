"""Loading ``deadair.yaml`` settings files."""

from __future__ import annotations

from pathlib import Path

from deadair.errors import PreconditionError
from deadair.models.config import Settings
from deadair.utils.io import read_yaml

DEFAULT_CONFIG_NAME = "deadair.yaml"


def load_config(path: Path | str | None = None, *, search_dir: Path | None = None) -> Settings:
    """Load settings from ``path``, or from ``deadair.yaml`` in ``search_dir``.

    An explicit path that does not exist is an error; a missing default file
    just yields the defaults.
    """
    if path is not None:
        path = Path(path)
        if not path.exists():
            raise PreconditionError(f"Config file not found: {path}")
    else:
        candidate = (search_dir or Path.cwd()) / DEFAULT_CONFIG_NAME
        if not candidate.exists():
            return Settings()
        path = candidate

    return Settings(**read_yaml(path))


def apply_overrides(settings: Settings, section: str, **overrides) -> Settings:
    """Return a copy of ``settings`` with non-None CLI values applied to ``section``."""
    values = {k: v for k, v in overrides.items() if v is not None}
    if not values:
        return settings
    current = getattr(settings, section)
    updated = current.model_validate({**current.model_dump(), **values})
    return settings.model_copy(update={section: updated})
