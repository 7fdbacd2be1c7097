"""
Settings loading for deployctl.

Settings are assembled from four layers, last wins:

1. **Built-in defaults**
   - no server URL, TLS verification on, token at the login flow's default
     location, no timeout

2. **Settings file** (YAML)
   - an explicit path (must exist), or else the first existing of
     ``./.deployctl.yaml`` and ``~/.config/deployctl/config.yaml``
   - keys: ``server``, ``skip_verify``, ``token_file``, ``timeout``
   - a relative ``token_file`` is resolved against the settings file's directory

3. **Environment**
   - ``DEPLOYCTL_SERVER``, ``DEPLOYCTL_SKIP_VERIFY``, ``DEPLOYCTL_TOKEN_FILE``,
     ``DEPLOYCTL_TIMEOUT``
   - a ``.env`` file in the working directory is loaded first (python-dotenv),
     without overriding variables that are already set

4. **Overrides** (command-line flags); ``None`` means "not given"

Error Handling
--------------
- ConfigError: explicit settings file missing, YAML parse errors, a
  top-level value that is not a mapping, unknown keys, bad booleans or
  timeouts
- All errors are chained with "from err" for better debugging

Examples
--------
    >>> from deployctl.config import load_settings
    >>> settings = load_settings(overrides={"server": "https://deploy.example.com"})
    >>> settings.server
    'https://deploy.example.com'
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
import yaml

from deployctl.auth import default_token_path
from deployctl.exceptions import ConfigError

ENV_PREFIX = "DEPLOYCTL_"

# Searched in order when no settings file is given explicitly.
SETTINGS_SEARCH_PATHS = (
    Path(".deployctl.yaml"),
    Path("~/.config/deployctl/config.yaml"),
)

_KNOWN_KEYS = ("server", "skip_verify", "token_file", "timeout")

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


@dataclass(frozen=True)
class Settings:
    """
    Effective settings for a deployctl invocation.

    ``source`` records which settings file contributed, if any.
    """

    server: str | None
    skip_verify: bool
    token_path: Path
    timeout: float | None = None
    source: Path | None = None


def default_settings() -> Settings:
    return Settings(
        server=None,
        skip_verify=False,
        token_path=default_token_path(),
        timeout=None,
    )


# -------------------------------
# Value parsing
# -------------------------------


def _parse_bool(value: Any, key: str) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ConfigError(f"{key}: expected a boolean, got {value!r}")


def _parse_timeout(value: Any, key: str) -> float | None:
    if value is None or value == "":
        return None
    try:
        timeout = float(value)
    except (TypeError, ValueError) as err:
        raise ConfigError(
            f"{key}: expected a number of seconds, got {value!r}"
        ) from err
    if timeout <= 0:
        raise ConfigError(f"{key}: timeout must be positive, got {value!r}")
    return timeout


def _apply(
    settings: Settings,
    values: Mapping[str, Any],
    origin: str,
    base_dir: Path | None = None,
) -> Settings:
    """
    Overlay raw key/value pairs onto ``settings``. Keys use the settings
    file vocabulary; ``None`` values are skipped.
    """
    changes: dict[str, Any] = {}
    for key, value in values.items():
        if value is None:
            continue
        label = f"{origin}: {key}"
        if key == "server":
            changes["server"] = str(value)
        elif key == "skip_verify":
            changes["skip_verify"] = _parse_bool(value, label)
        elif key == "token_file":
            token_path = Path(str(value)).expanduser()
            if base_dir is not None and not token_path.is_absolute():
                token_path = base_dir / token_path
            changes["token_path"] = token_path
        elif key == "timeout":
            changes["timeout"] = _parse_timeout(value, label)
        else:
            raise ConfigError(f"{origin}: unknown setting {key!r}")
    return replace(settings, **changes)


# -------------------------------
# Layers
# -------------------------------


def _load_yaml_file(p: Path) -> dict[str, Any]:
    """
    Load a settings file. An empty file counts as no settings.

    Raises:
      ConfigError - when the file is unreadable, not valid YAML, or not a mapping
    """
    try:
        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as err:
        raise ConfigError(f"cannot read settings file: {p}: {err}") from err
    except yaml.YAMLError as err:
        raise ConfigError(f"Error parsing YAML: {p}: {err}") from err
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"top-level YAML must be a mapping (dict): {p}")
    return data


def _find_settings_file(config_path: Path | None) -> Path | None:
    if config_path is not None:
        config_path = Path(config_path).expanduser()
        if not config_path.exists():
            raise ConfigError(f"settings file not found: {config_path}")
        return config_path
    for candidate in SETTINGS_SEARCH_PATHS:
        candidate = candidate.expanduser()
        if candidate.exists():
            return candidate
    return None


def _env_values(env: Mapping[str, str]) -> dict[str, Any]:
    # Empty variables count as unset.
    return {key: env.get(ENV_PREFIX + key.upper()) or None for key in _KNOWN_KEYS}


def load_settings(
    config_path: Path | None = None,
    *,
    env: Mapping[str, str] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> Settings:
    """Load effective settings from defaults, file, environment and overrides.

    Args:
        config_path: Explicit settings file. When None, the search paths
            are tried and a missing file is not an error.
        env: Environment mapping to read DEPLOYCTL_* variables from. When
            None, a ``.env`` file is loaded and os.environ is used.
        overrides: Highest-priority values, keyed like the settings file
            (``server``, ``skip_verify``, ``token_file``, ``timeout``).

    Returns:
        Frozen Settings. ``server`` may still be None; callers that need a
        server must check.

    Raises:
        ConfigError: On a missing explicit file, unparsable YAML or
            invalid values.
    """
    from deployctl.logging import get_global_logger

    logger = get_global_logger()
    settings = default_settings()

    settings_file = _find_settings_file(config_path)
    if settings_file is not None:
        logger.verbose("CONFIG", f"Loading settings file: {settings_file}")
        data = _load_yaml_file(settings_file)
        settings = _apply(
            settings,
            data,
            str(settings_file),
            base_dir=settings_file.resolve().parent,
        )
        settings = replace(settings, source=settings_file)

    if env is None:
        load_dotenv(Path.cwd() / ".env", override=False)
        env = os.environ
    settings = _apply(settings, _env_values(env), "environment")

    if overrides:
        settings = _apply(settings, overrides, "command line")

    logger.debug(
        "CONFIG",
        f"server={settings.server} skip_verify={settings.skip_verify} "
        f"token_path={settings.token_path} timeout={settings.timeout}",
    )
    return settings
