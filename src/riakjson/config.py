# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/riakjson-python/LICENSE
# ==============================================================================

"""Connection settings loaded from YAML.

Config files are templates: ``$VAR`` and ``${VAR}`` references are expanded
from the environment before the YAML is parsed, so secrets can stay out of the
file.  A file either holds the settings at top level::

    host: riak.internal
    port: 8098
    username: ${RIAK_USER}
    password: ${RIAK_PASSWORD}

or groups them per environment, in which case pass ``section=``::

    development:
      host: 127.0.0.1
    test:
      host: 127.0.0.1
      port: 10018
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError
import yaml

from .errors import ConfigError


DEFAULT_HOST: Final[str] = "127.0.0.1"
DEFAULT_PORT: Final[int] = 8098


class ClientConfig(BaseModel):
    """Parameters for constructing a :class:`~riakjson.client.connection.Connection`."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    host: str = DEFAULT_HOST
    port: int = Field(default=DEFAULT_PORT, gt=0, lt=65536)
    username: str | None = None
    password: str | None = None
    timeout: float = Field(default=30.0, gt=0)

    @property
    def credentials(self) -> tuple[str, str] | None:
        if self.username is None:
            return None
        return (self.username, self.password or "")


def render_template(text: str) -> str:
    """Expand environment references; unknown variables are left as written."""
    return os.path.expandvars(text)


def load_config_file(path: str | os.PathLike[str], *, section: str | None = None) -> ClientConfig:
    """Read, render and validate a YAML config file.

    Raises:
        ConfigError: The file is missing, is not valid YAML, lacks *section*,
            or holds values that do not validate.
    """
    config_path = Path(path).expanduser()
    try:
        raw = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {config_path}: {exc}") from exc

    try:
        data: Any = yaml.safe_load(render_template(raw)) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc

    if section is not None:
        if not isinstance(data, dict) or section not in data:
            raise ConfigError(f"Section '{section}' not found in {config_path}")
        data = data[section] or {}

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a mapping in {config_path}, got {type(data).__name__}")

    try:
        return ClientConfig.model_validate(data)
    except PydanticValidationError as exc:
        raise ConfigError(f"Invalid settings in {config_path}: {exc}") from exc


__all__ = ["ClientConfig", "DEFAULT_HOST", "DEFAULT_PORT", "load_config_file", "render_template"]
