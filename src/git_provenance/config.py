"""Configuration for commit history extraction."""

import json
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError

from git_provenance.errors import ConfigError

CONFIG_FILE_NAME = ".git-provenance.json"
ENV_PREFIX = "GIT_PROVENANCE_"


class ProvenanceConfig(BaseModel):
    """Settings controlling how commit history is walked and diffed."""

    detect_renames: bool = True
    track_deletions: bool = True
    max_workers: int = Field(default=1, ge=1)
    rev: Optional[str] = None  # Walk all refs when unset
    max_count: Optional[int] = Field(default=None, ge=1)

    model_config = {"extra": "forbid"}

    @classmethod
    def load(
        cls,
        path: Optional[Path] = None,
        repo_root: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "ProvenanceConfig":
        """Load settings from a JSON file, then apply environment overrides.

        Without an explicit ``path`` the optional ``.git-provenance.json`` in
        ``repo_root`` is read if it exists.
        """
        values: Dict[str, Any] = {}

        if path is None and repo_root is not None:
            candidate = Path(repo_root) / CONFIG_FILE_NAME
            path = candidate if candidate.exists() else None

        if path is not None:
            try:
                values.update(json.loads(Path(path).read_text(encoding="utf-8")))
            except (OSError, json.JSONDecodeError) as e:
                raise ConfigError(f"Failed to read config file {path}: {e}") from e

        values.update(_from_environment(os.environ if environ is None else environ))

        try:
            return cls.model_validate(values)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e


def _from_environment(environ: Mapping[str, str]) -> Dict[str, str]:
    fields = ProvenanceConfig.model_fields
    overrides = {}
    for key, value in environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        name = key[len(ENV_PREFIX):].lower()
        if name in fields:
            overrides[name] = value
    return overrides
