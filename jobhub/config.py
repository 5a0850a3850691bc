"""Load dashboard settings from config/settings.yaml and the environment."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from jobhub.log import get_logger

log = get_logger(__name__)

load_dotenv()

ROOT_DIR: Path = Path(__file__).resolve().parent.parent
CONFIG_DIR: Path = ROOT_DIR / "config"
SETTINGS_PATH: Path = CONFIG_DIR / "settings.yaml"
DATA_DIR: Path = ROOT_DIR / "data"

DEFAULT_API_URL = "https://jsonfakery.com/jobs"

# YAML key -> environment variable overriding it
_ENV_KEYS: dict[str, str] = {
    "api_url": "JOBHUB_API_URL",
    "api_key": "JOBHUB_API_KEY",
    "fetch_timeout": "JOBHUB_FETCH_TIMEOUT",
    "fetch_attempts": "JOBHUB_FETCH_ATTEMPTS",
    "data_dir": "JOBHUB_DATA_DIR",
    "use_mock": "JOBHUB_USE_MOCK",
}


@dataclass(frozen=True)
class Settings:
    api_url: str = DEFAULT_API_URL
    api_key: str = ""
    fetch_timeout: float = 15.0
    fetch_attempts: int = 1
    data_dir: Path = DATA_DIR
    use_mock: bool = False


def get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def _read_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        log.warning("Ignoring %s: expected a mapping, got %s", path.name, type(data).__name__)
        return {}
    return data


def load_settings(path: Path | None = None) -> Settings:
    """Defaults, overridden by the YAML file, overridden by the environment."""
    raw = _read_yaml(path or SETTINGS_PATH)
    for key, env_key in _ENV_KEYS.items():
        value = get_env(env_key)
        if value:
            raw[key] = value

    defaults = Settings()
    try:
        timeout = float(raw.get("fetch_timeout", defaults.fetch_timeout))
    except (TypeError, ValueError):
        log.warning("Invalid fetch_timeout %r, using %.0fs", raw.get("fetch_timeout"), defaults.fetch_timeout)
        timeout = defaults.fetch_timeout
    try:
        attempts = int(raw.get("fetch_attempts", defaults.fetch_attempts))
    except (TypeError, ValueError):
        log.warning("Invalid fetch_attempts %r, using %d", raw.get("fetch_attempts"), defaults.fetch_attempts)
        attempts = defaults.fetch_attempts

    data_dir = Path(raw.get("data_dir") or defaults.data_dir).expanduser()
    if not data_dir.is_absolute():
        data_dir = ROOT_DIR / data_dir

    return Settings(
        api_url=str(raw.get("api_url") or defaults.api_url).strip(),
        api_key=str(raw.get("api_key") or "").strip(),
        fetch_timeout=timeout,
        fetch_attempts=max(1, attempts),
        data_dir=data_dir,
        use_mock=_as_bool(raw.get("use_mock", False)),
    )


def ensure_dirs(settings: Settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
