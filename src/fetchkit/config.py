"""Profile storage, XDG paths and precedence resolution for the CLI.

The core builder (:func:`~fetchkit.api.make_api`) takes everything as
arguments and never reads configuration. This module serves the CLI and
:func:`~fetchkit.session.api_from_profile`:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.fetchkit/`` on macOS and Windows.
* **Profiles** -- one JSON file per API, deserialised into a
  :class:`~fetchkit.models.Profile`.
* **Precedence resolution** -- :func:`resolve_profile` merges CLI flags,
  environment variables and saved profiles.
* **Credential resolution** -- :func:`resolve_credential` reads secrets from
  env vars, files, literals or an interactive prompt.

All file writes go through a temp file that is renamed into place.
"""

from __future__ import annotations

import getpass
import json
import os
import platform
import sys
import tempfile
from pathlib import Path
from typing import Optional

from fetchkit.exceptions import ConfigError
from fetchkit.models import Profile

_APP_NAME = "fetchkit"

ENV_PROFILE = "FETCHKIT_PROFILE"
ENV_BASE_URL = "FETCHKIT_BASE_URL"
ENV_SCHEMA = "FETCHKIT_SCHEMA"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    return Path.home().joinpath(*default_segments)


def _app_dir(env_var: str, default_segments: tuple[str, ...], fallback: str) -> Path:
    if _is_xdg_platform():
        path = _xdg_base(env_var, default_segments) / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}" / fallback
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_config_dir() -> Path:
    """Return ``$XDG_CONFIG_HOME/fetchkit/`` (created if missing)."""
    return _app_dir("XDG_CONFIG_HOME", (".config",), "")


def get_cache_dir() -> Path:
    """Return ``$XDG_CACHE_HOME/fetchkit/`` (created if missing). Safe to delete."""
    return _app_dir("XDG_CACHE_HOME", (".cache",), "cache")


def get_data_dir() -> Path:
    """Return ``$XDG_DATA_HOME/fetchkit/`` (created if missing). Holds crash logs."""
    return _app_dir("XDG_DATA_HOME", (".local", "share"), "logs")


def get_profiles_dir() -> Path:
    """Return ``<config_dir>/profiles/`` (created if missing)."""
    path = get_config_dir() / "profiles"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write *data* to *path* through a temp file in the same directory."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


# --- Profiles ---


def _profile_path(name: str) -> Path:
    return get_profiles_dir() / f"{name}.json"


def list_profiles() -> list[str]:
    """Return saved profile names, sorted."""
    return sorted(p.stem for p in get_profiles_dir().glob("*.json") if p.is_file())


def load_profile(name: str) -> Profile:
    """Load and validate a saved profile.

    Raises:
        ConfigError: If the profile is missing, not JSON, or fails validation.
    """
    path = _profile_path(name)
    if not path.is_file():
        raise ConfigError(f"Profile '{name}' not found at {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return Profile.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid profile '{name}' at {path}: {exc}") from exc


def save_profile(profile: Profile) -> Path:
    """Persist *profile* and return the file it was written to."""
    path = _profile_path(profile.name)
    _atomic_write(path, json.dumps(profile.model_dump(mode="json"), indent=2) + "\n")
    return path


def delete_profile(name: str) -> None:
    """Delete a saved profile.

    Raises:
        ConfigError: If the profile does not exist.
    """
    path = _profile_path(name)
    if not path.is_file():
        raise ConfigError(f"Profile '{name}' not found at {path}")
    path.unlink()


# --- Precedence resolution ---


def resolve_profile(
    cli_profile: Optional[str] = None,
    cli_base_url: Optional[str] = None,
    cli_schema: Optional[str] = None,
    require_base_url: bool = True,
) -> Profile:
    """Work out the effective profile for one CLI invocation.

    Precedence (high to low):
        1. CLI flags (``--profile``, ``--base-url``, ``--schema``)
        2. Environment variables (``FETCHKIT_PROFILE``, ``FETCHKIT_BASE_URL``,
           ``FETCHKIT_SCHEMA``)
        3. The only saved profile, when exactly one exists

    A schema (and base URL) given without any profile produce an ad-hoc
    profile named ``cli``.

    Args:
        require_base_url: Set to ``False`` for commands that only read the
            schema; the ad-hoc profile then gets an empty base URL.

    Raises:
        ConfigError: If no schema or no base URL can be determined.
    """
    name = cli_profile or os.environ.get(ENV_PROFILE) or None
    if name is None and not cli_schema:
        saved = list_profiles()
        if len(saved) == 1:
            name = saved[0]

    base_url = cli_base_url or os.environ.get(ENV_BASE_URL) or None
    schema = cli_schema or os.environ.get(ENV_SCHEMA) or None

    if name is not None:
        profile = load_profile(name)
        updates = {}
        if base_url:
            updates["base_url"] = base_url
        if schema:
            updates["schema_source"] = schema
        return profile.model_copy(update=updates) if updates else profile

    if not schema:
        raise ConfigError("No schema given. Pass --schema or save a profile with 'fetchkit profile add'")
    if not base_url and require_base_url:
        raise ConfigError("No base URL given. Pass --base-url or set FETCHKIT_BASE_URL")
    return Profile(name="cli", schema_source=schema, base_url=base_url or "")


# --- Credential source resolution ---


def resolve_credential(source: str) -> str:
    """Resolve a credential from its source descriptor.

    Supported formats:
        - ``"env:VAR_NAME"`` -- reads ``os.environ["VAR_NAME"]``
        - ``"file:/path/to/file"`` -- file content, stripped of whitespace
        - ``"value:LITERAL"`` -- the literal text after the prefix
        - ``"prompt"`` -- asks interactively (requires a TTY)

    Raises:
        ConfigError: If the source cannot be resolved.
    """
    if source.startswith("env:"):
        var_name = source[4:]
        value = os.environ.get(var_name)
        if value is None:
            raise ConfigError(f"Environment variable '{var_name}' is not set (source: {source})")
        return value

    if source.startswith("file:"):
        path = Path(source[5:]).expanduser()
        if not path.is_file():
            raise ConfigError(f"Credential file not found: {path} (source: {source})")
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigError(f"Cannot read credential file {path}: {exc}") from exc

    if source.startswith("value:"):
        return source[6:]

    if source == "prompt":
        if not sys.stdin.isatty():
            raise ConfigError("Cannot prompt for credentials: stdin is not a TTY (source: prompt)")
        return getpass.getpass("Enter credential: ")

    raise ConfigError(f"Unknown credential source format: {source}")
