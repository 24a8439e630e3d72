"""Where apicaller keeps its files, and how the effective config is resolved.

Two directories are used, both created on first access:

* the **config dir** holds ``config.json``, a serialised
  :class:`~apicaller.models.GlobalConfig`;
* the **cache dir** holds the ``disk`` backend's response partitions.

On Linux and the BSDs they follow the XDG Base Directory layout
(``$XDG_CONFIG_HOME/apicaller``, ``$XDG_CACHE_HOME/apicaller``). Elsewhere
both live under ``~/.apicaller/``.

:func:`resolve_config` layers CLI flags and environment variables on top
of the stored file.
"""

from __future__ import annotations

import os
import platform
import tempfile
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from apicaller.exceptions import ConfigError
from apicaller.models import GlobalConfig

_APP_NAME = "apicaller"
_CONFIG_FILENAME = "config.json"

ENV_BASE_URL = "APICALLER_BASE_URL"
ENV_CACHE_BACKEND = "APICALLER_CACHE_BACKEND"

# XDG variable, default under $HOME, subdirectory of ~/.apicaller on other platforms
_DIRS = {
    "config": ("XDG_CONFIG_HOME", ".config", None),
    "cache": ("XDG_CACHE_HOME", ".cache", "cache"),
}


def _is_xdg_platform() -> bool:
    system = platform.system()
    return system == "Linux" or system.endswith("BSD")


def _app_dir(kind: str) -> Path:
    env_var, home_default, fallback_subdir = _DIRS[kind]
    if _is_xdg_platform():
        root = Path(os.environ.get(env_var) or Path.home() / home_default)
        path = root / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
        if fallback_subdir:
            path = path / fallback_subdir
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_config_dir() -> Path:
    """Return the directory holding ``config.json``."""
    return _app_dir("config")


def get_cache_dir() -> Path:
    """Return the root directory of the ``disk`` cache backend."""
    return _app_dir("cache")


def _atomic_write(path: Path, data: str) -> None:
    """Replace *path* with *data* so readers never see a partial file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def load_global_config() -> GlobalConfig:
    """Load ``config.json``, or return defaults when it does not exist.

    Raises:
        ConfigError: The file is not valid JSON or does not validate.
    """
    path = get_config_dir() / _CONFIG_FILENAME
    if not path.is_file():
        return GlobalConfig()
    try:
        return GlobalConfig.model_validate_json(path.read_bytes())
    except ValidationError as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    _atomic_write(get_config_dir() / _CONFIG_FILENAME, config.model_dump_json(indent=2) + "\n")


def resolve_config(
    cli_base_url: Optional[str] = None,
    cli_format: Optional[str] = None,
) -> GlobalConfig:
    """Return the effective configuration.

    Precedence, highest first: CLI flags, then ``APICALLER_BASE_URL`` /
    ``APICALLER_CACHE_BACKEND``, then ``config.json``, then defaults.

    Raises:
        ConfigError: The stored config or an environment override is
            invalid.
    """
    config = load_global_config()

    base_url = cli_base_url if cli_base_url is not None else os.environ.get(ENV_BASE_URL)
    if base_url:
        config.base_url = base_url

    backend = os.environ.get(ENV_CACHE_BACKEND)
    if backend:
        if backend not in ("memory", "disk"):
            raise ConfigError(f"{ENV_CACHE_BACKEND} must be 'memory' or 'disk', got '{backend}'")
        config.cache.backend = backend  # type: ignore[assignment]

    if cli_format is not None:
        config.output.format = cli_format  # type: ignore[assignment]

    return config
