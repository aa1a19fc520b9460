"""Configuration for the Todoboard service.

Reads from config/todoboard.ini if present, environment variables override.
Credentials never checked into version control.
"""

from __future__ import annotations

import configparser
import os
from dataclasses import dataclass
from pathlib import Path

_CONFIG_FILE = Path(__file__).resolve().parent.parent.parent / "config" / "todoboard.ini"


@dataclass(frozen=True)
class TodoboardConfig:
    """Service configuration. Immutable once loaded."""

    api_key: str = ""
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"
    strict_decode: bool = True
    urlsafe_tokens: bool = True
    id_param: str = "encryptedProjectId"


def _env_bool(raw: str, name: str) -> bool:
    """Read a boolean env var with the same words ConfigParser.getboolean accepts."""
    try:
        return configparser.ConfigParser.BOOLEAN_STATES[raw.strip().lower()]
    except KeyError:
        raise ValueError(f"{name}: expected a boolean, got {raw!r}") from None


def load_config(config_path: Path | None = None) -> TodoboardConfig:
    """Load config from INI file, then override with environment variables."""
    path = config_path or _CONFIG_FILE
    kwargs: dict = {}

    if path.exists():
        parser = configparser.ConfigParser()
        parser.read(path)
        if parser.has_section("gateway"):
            for ini_key, config_key in [
                ("api_key", "api_key"),
                ("host", "host"),
                ("log_level", "log_level"),
            ]:
                val = parser.get("gateway", ini_key, fallback=None)
                if val is not None:
                    kwargs[config_key] = val
            port_str = parser.get("gateway", "port", fallback=None)
            if port_str is not None:
                kwargs["port"] = int(port_str)
        if parser.has_section("obfuscator"):
            for ini_key, config_key in [
                ("strict", "strict_decode"),
                ("urlsafe", "urlsafe_tokens"),
            ]:
                val = parser.getboolean("obfuscator", ini_key, fallback=None)
                if val is not None:
                    kwargs[config_key] = val
            param = parser.get("obfuscator", "param", fallback=None)
            if param is not None:
                kwargs["id_param"] = param

    env_map = {
        "TODOBOARD_API_KEY": "api_key",
        "TODOBOARD_HOST": "host",
        "TODOBOARD_PORT": "port",
        "TODOBOARD_LOG_LEVEL": "log_level",
        "TODOBOARD_STRICT_DECODE": "strict_decode",
        "TODOBOARD_URLSAFE_TOKENS": "urlsafe_tokens",
        "TODOBOARD_ID_PARAM": "id_param",
    }
    for env_key, config_key in env_map.items():
        val = os.getenv(env_key)
        if val is not None:
            if config_key == "port":
                kwargs[config_key] = int(val)
            elif config_key in ("strict_decode", "urlsafe_tokens"):
                kwargs[config_key] = _env_bool(val, env_key)
            else:
                kwargs[config_key] = val

    kwargs = {k: v for k, v in kwargs.items() if v is not None}
    return TodoboardConfig(**kwargs)
