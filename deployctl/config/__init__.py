"""Settings loading for deployctl.

Settings come from built-in defaults, a YAML settings file, DEPLOYCTL_*
environment variables (optionally from a .env file) and command-line
overrides, in that order of increasing priority.

Public API:

- load_settings: Load the effective settings
- Settings: Frozen settings dataclass

Example:
    Basic usage:

        from deployctl.config import load_settings

        settings = load_settings()
        print(settings.server, settings.token_path)

"""

from .loader import Settings, load_settings

__all__ = ["Settings", "load_settings"]
