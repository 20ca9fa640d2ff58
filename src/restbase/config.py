"""Where restbase keeps its files, and which profile a command runs against.

Three kinds of state live on disk:

* ``config.json`` -- the user's :class:`~restbase.models.GlobalConfig`.
* ``profiles/<name>.json`` -- one :class:`~restbase.models.ServiceProfile`
  per API.
* the response caches, one directory per profile and base URL, under the
  cache root (see :func:`get_profile_cache_dir`).

Linux and the BSDs follow the XDG base directories
(``$XDG_CONFIG_HOME/restbase`` and friends); everything else uses
``~/.restbase``. JSON files are replaced atomically.

:func:`resolve_config` picks the active profile. The first of these that
names one wins: ``--profile``, ``RESTBASE_PROFILE``, ``./restbase.json``,
the global ``default_profile``, then the only saved profile when exactly
one exists. ``--base-url`` / ``RESTBASE_BASE_URL`` then override its URL.
"""

from __future__ import annotations

import contextlib
import hashlib
import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional, TypeVar

from pydantic import BaseModel

from restbase.exceptions import ConfigError
from restbase.models import GlobalConfig, ServiceProfile

_APP_NAME = "restbase"
_PROJECT_FILE = "restbase.json"

# kind -> (XDG variable, default under $HOME, subdirectory of ~/.restbase)
_LOCATIONS = {
    "config": ("XDG_CONFIG_HOME", (".config",), ""),
    "cache": ("XDG_CACHE_HOME", (".cache",), "cache"),
    "data": ("XDG_DATA_HOME", (".local", "share"), "logs"),
}

M = TypeVar("M", bound=BaseModel)


# --- Directories ---


def _is_xdg_platform() -> bool:
    system = platform.system()
    return system == "Linux" or system.endswith("BSD")


def _app_dir(kind: str) -> Path:
    env_var, home_default, fallback = _LOCATIONS[kind]
    if _is_xdg_platform():
        root = os.environ.get(env_var) or Path.home().joinpath(*home_default)
        path = Path(root) / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}" / fallback
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_config_dir() -> Path:
    """Directory holding ``config.json`` and ``profiles/``."""
    return _app_dir("config")


def get_cache_dir() -> Path:
    """Root of the response caches. Safe to delete; only the offline fallback is lost."""
    return _app_dir("cache")


def get_data_dir() -> Path:
    """Directory for crash logs."""
    return _app_dir("data")


def get_profiles_dir() -> Path:
    path = get_config_dir() / "profiles"
    path.mkdir(exist_ok=True)
    return path


def get_profile_cache_dir(profile: ServiceProfile) -> Path:
    """Return the cache root for *profile* at its current base URL.

    Cache keys are relative to the base URL, so the directory name carries
    a digest of it: ``<cache_dir>/<name>-<12 hex chars>/``. A profile run
    with ``--base-url`` never reads entries fetched from its saved URL.
    """
    digest = hashlib.sha256(profile.base_url.encode("utf-8")).hexdigest()[:12]
    path = get_cache_dir() / f"{profile.name}-{digest}"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- JSON files ---


def _atomic_write(path: Path, data: str) -> None:
    """Replace *path* with *data* through a temp file in the same directory."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(tmp_name)
        raise


def _write_model(path: Path, model: BaseModel) -> None:
    _atomic_write(path, json.dumps(model.model_dump(mode="json"), indent=2) + "\n")


def _read_json(path: Path, what: str) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except ValueError as exc:
        raise ConfigError(f"Invalid {what} at {path}: {exc}") from exc


def _read_model(path: Path, model: type[M], what: str) -> M:
    data = _read_json(path, what)
    try:
        return model.model_validate(data)
    except ValueError as exc:
        raise ConfigError(f"Invalid {what} at {path}: {exc}") from exc


# --- Global config ---


def _global_config_path() -> Path:
    return get_config_dir() / "config.json"


def load_global_config() -> GlobalConfig:
    """Return the saved :class:`GlobalConfig`, or defaults when none is saved.

    Raises:
        ConfigError: If the file is not valid JSON or fails validation.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    return _read_model(path, GlobalConfig, "global config")


def save_global_config(config: GlobalConfig) -> None:
    _write_model(_global_config_path(), config)


# --- Profiles ---


def _profile_path(name: str) -> Path:
    return get_profiles_dir() / f"{name}.json"


def list_profiles() -> list[str]:
    """Names of all saved profiles, sorted."""
    return sorted(p.stem for p in get_profiles_dir().glob("*.json") if p.is_file())


def profile_exists(name: str) -> bool:
    return _profile_path(name).is_file()


def load_profile(name: str) -> ServiceProfile:
    """Load profile *name*.

    Raises:
        ConfigError: If it does not exist or is invalid.
    """
    path = _profile_path(name)
    if not path.is_file():
        raise ConfigError(f"Profile '{name}' not found at {path}")
    return _read_model(path, ServiceProfile, f"profile '{name}'")


def save_profile(profile: ServiceProfile) -> None:
    _write_model(_profile_path(profile.name), profile)


def delete_profile(name: str) -> None:
    """Delete profile *name*. Its caches are left in place.

    Raises:
        ConfigError: If it does not exist.
    """
    path = _profile_path(name)
    if not path.is_file():
        raise ConfigError(f"Profile '{name}' not found at {path}")
    path.unlink()


# --- Resolution ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Return the contents of ``./restbase.json``, or ``None`` when absent.

    Raises:
        ConfigError: If the file is not valid JSON.
    """
    path = Path.cwd() / _PROJECT_FILE
    if not path.is_file():
        return None
    return _read_json(path, "project config")


def resolve_config(
    cli_profile: Optional[str] = None,
    cli_base_url: Optional[str] = None,
) -> tuple[GlobalConfig, Optional[ServiceProfile]]:
    """Return the global config and the active profile (or ``None``).

    With no profile selected but a base URL given, an unsaved profile named
    ``default`` is built around that URL.

    Raises:
        ConfigError: If the selected profile is missing or the base URL
            override is not an absolute http(s) URL.
    """
    global_cfg = load_global_config()
    project = load_project_config() or {}

    name = next(
        (
            candidate
            for candidate in (
                cli_profile,
                os.environ.get("RESTBASE_PROFILE"),
                project.get("default_profile"),
                global_cfg.default_profile,
            )
            if candidate
        ),
        None,
    )
    if name is None and global_cfg.auto_select_single_profile:
        saved = list_profiles()
        if len(saved) == 1:
            name = saved[0]

    profile = load_profile(name) if name is not None else None

    base_url = cli_base_url or os.environ.get("RESTBASE_BASE_URL")
    if base_url:
        data = profile.model_dump() if profile is not None else {"name": "default"}
        data["base_url"] = base_url
        try:
            profile = ServiceProfile.model_validate(data)
        except ValueError as exc:
            raise ConfigError(f"Invalid base URL: {exc}") from exc

    return global_cfg, profile
