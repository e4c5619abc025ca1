"""Configuration loader for esa-mirror.

Precedence, highest first: ESA_* environment variables, then
``<home>/.esa/config.yaml``, then DEFAULTS. Settings are resolved once per
invocation and passed explicitly to the gateway and engine.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

import yaml

from esamirror.core.errors import ConfigError

log = logging.getLogger(__name__)

KEYRING_SERVICE = "esa-mirror"

DEFAULTS: dict = {
    "esa": {
        "team": None,
        "user": None,
        # Literal token, or "keyring" to look it up under (esa-mirror, <team>)
        "api_key": "keyring",
        "endpoint": "https://api.esa.io",
        "timeout": 30.0,
        "per_page": 100,
    },
}

_ENV_OVERRIDES = {
    "ESA_API_KEY": "api_key",
    "ESA_TEAM": "team",
    "ESA_USER": "user",
}


@dataclass(frozen=True)
class EsaSettings:
    """Resolved credentials and connection settings for the esa.io API."""

    team: str
    user: str
    api_key: str
    endpoint: str = "https://api.esa.io"
    timeout: float = 30.0
    per_page: int = 100

    def __repr__(self) -> str:
        return (
            f"EsaSettings(team={self.team!r}, user={self.user!r}, "
            f"api_key='***', endpoint={self.endpoint!r})"
        )


def resolve_home() -> Path:
    """Resolve the mirror root: ESA_HOME env var > current directory."""
    env_home = os.environ.get("ESA_HOME")
    if env_home:
        return Path(env_home).expanduser().resolve()
    return Path.cwd()


def config_path(home: Path | None = None) -> Path:
    """Return the path to config.yaml."""
    if home is None:
        home = resolve_home()
    return home / ".esa" / "config.yaml"


def load_config(path: Path | None = None) -> dict:
    """Load config.yaml and merge with defaults.

    Args:
        path: Explicit path to config.yaml. If None, uses default location.

    Returns:
        Merged configuration dict.
    """
    if path is None:
        path = config_path()

    user_config: dict = {}
    if path.exists():
        try:
            raw = path.read_text(encoding="utf-8")
            user_config = yaml.safe_load(raw) or {}
        except (OSError, yaml.YAMLError):
            log.warning("Failed to read config at %s, using defaults", path, exc_info=True)

    return _deep_merge(DEFAULTS, user_config)


def load_settings(home: Path, environ: dict | None = None) -> EsaSettings:
    """Build EsaSettings from config.yaml and the environment.

    Raises:
        ConfigError: team, user or API key could not be resolved.
    """
    environ = os.environ if environ is None else environ
    esa_cfg = dict(load_config(config_path(home)).get("esa", {}))

    for var, key in _ENV_OVERRIDES.items():
        if environ.get(var):
            esa_cfg[key] = environ[var]

    for key, var in (("team", "ESA_TEAM"), ("user", "ESA_USER")):
        if not esa_cfg.get(key):
            raise ConfigError(f"esa.{key} is not configured. Set {var} or esa.{key} in config.yaml")

    api_key = esa_cfg.get("api_key")
    if api_key == "keyring":
        api_key = _get_api_key(esa_cfg["team"])
    if not api_key:
        raise ConfigError(
            "No API key configured for esa.io.\n"
            "Set ESA_API_KEY, or store it: python -c "
            f"\"import keyring; keyring.set_password('{KEYRING_SERVICE}', "
            f"'{esa_cfg['team']}', 'YOUR_TOKEN')\""
        )

    return EsaSettings(
        team=str(esa_cfg["team"]),
        user=str(esa_cfg["user"]),
        api_key=str(api_key),
        endpoint=str(esa_cfg.get("endpoint") or DEFAULTS["esa"]["endpoint"]).rstrip("/"),
        timeout=float(esa_cfg.get("timeout", DEFAULTS["esa"]["timeout"])),
        per_page=int(esa_cfg.get("per_page", DEFAULTS["esa"]["per_page"])),
    )


def _get_api_key(team: str) -> str | None:
    """Retrieve the team's API token from the system keyring."""
    try:
        import keyring

        return keyring.get_password(KEYRING_SERVICE, team)
    except Exception:
        log.debug("Keyring lookup failed for team %s", team, exc_info=True)
        return None


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base, returning a new dict."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result
