import json
import os
from dataclasses import dataclass, replace
from typing import Optional

DEFAULT_PORT = 3001
DEFAULT_LEDGER_FILE = "/var/www/ledger/data/demo.ledger"
DEFAULT_LEDGER_CMD = "ledger"

_ENV_KEYS = {
    "port": "PORT",
    "ledger_file": "LEDGER_FILE",
    "ledger_cmd": "LEDGER_CMD",
    "update_reports_script": "UPDATE_REPORTS_SCRIPT",
    "log_level": "LEDGER_API_LOG_LEVEL",
}


@dataclass(frozen=True)
class Settings:
    port: int = DEFAULT_PORT
    ledger_file: str = DEFAULT_LEDGER_FILE
    ledger_cmd: str = DEFAULT_LEDGER_CMD
    update_reports_script: Optional[str] = None
    log_level: str = "INFO"


def clean_env(value):
    if not value:
        return None
    cleaned = str(value).strip().strip("'\"")
    return cleaned or None


def _parse_port(value, source):
    try:
        port = int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid port {value!r} in {source}") from exc
    if not 0 < port < 65536:
        raise ValueError(f"Port {port} out of range in {source}")
    return port


def _load_config_file(path):
    try:
        with open(path, encoding="utf-8") as fh:
            data = json.load(fh)
    except OSError as exc:
        raise ValueError(f"Could not open config file: {path}") from exc
    except json.JSONDecodeError as exc:
        raise ValueError(f"Error parsing config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must hold a JSON object")
    return data


def load_settings(config_file=None):
    """Build settings from defaults, an optional JSON file, then the environment.

    Environment variables win over the config file. The config file path comes
    from ``config_file`` or ``LEDGER_API_CONFIG``.
    """
    settings = Settings()

    config_file = config_file or clean_env(os.getenv("LEDGER_API_CONFIG"))
    if config_file:
        data = _load_config_file(config_file)
        overrides = {}
        for key in ("ledger_file", "ledger_cmd", "update_reports_script", "log_level"):
            value = clean_env(data.get(key))
            if value:
                overrides[key] = value
        if "port" in data:
            overrides["port"] = _parse_port(data["port"], config_file)
        settings = replace(settings, **overrides)

    overrides = {}
    for key, env_name in _ENV_KEYS.items():
        value = clean_env(os.getenv(env_name))
        if not value:
            continue
        overrides[key] = _parse_port(value, env_name) if key == "port" else value
    if overrides:
        settings = replace(settings, **overrides)

    return settings
