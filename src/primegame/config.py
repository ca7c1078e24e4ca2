"""
Configuration and environment loading for the prime points game.

- Loads settings.yml (YAML) from repo root if present; falls back to environment variables.
- Exposes SETTINGS with the keys used by the runner, CLIs and web server.
"""
from dataclasses import dataclass
import logging
import os
from typing import Any, Callable

import yaml
from dotenv import load_dotenv

load_dotenv()

log = logging.getLogger("config")


def _repo_root() -> str:
    # this file: src/primegame/config.py → repo root is two levels up
    return os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))


def _load_yaml(path: str) -> dict:
    if not os.path.isfile(path):
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError):
        log.exception("Failed reading %s; using environment/defaults", path)
        return {}
    if not isinstance(data, dict):
        log.warning("Ignoring %s: expected a mapping at top level", path)
        return {}
    return data


_cfg = _load_yaml(os.path.join(_repo_root(), "settings.yml"))


def _get(name: str, default: Any, cast: Callable[[Any], Any] | None = None) -> Any:
    if name in _cfg:
        val = _cfg[name]
        return cast(val) if cast else val
    env = os.environ.get(name)
    if env is not None:
        return cast(env) if cast else env
    return default


@dataclass(frozen=True)
class Settings:
    # Presentation
    opponent_delay_s: float
    locale: str

    # Logging / output
    log_level: str
    history_dir: str

    # Web server
    server_port: int


SETTINGS = Settings(
    opponent_delay_s=float(_get("PRIMEGAME_OPPONENT_DELAY_S", 1.0, cast=float)),
    locale=str(_get("PRIMEGAME_LOCALE", "en")),
    log_level=str(_get("PRIMEGAME_LOG_LEVEL", "INFO")).upper(),
    history_dir=str(_get("PRIMEGAME_HISTORY_DIR", "") or ""),
    server_port=int(_get("PRIMEGAME_SERVER_PORT", 8000, cast=int)),
)
