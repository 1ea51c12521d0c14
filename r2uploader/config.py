"""Configuration loading from environment variables and .env files."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, Optional

from .errors import ConfigError
from .models import StoreConfig


ENV_PREFIX = "CFR2_"

# StoreConfig field -> environment variable suffix
_REQUIRED_VARS = {
    "bucket": "BUCKET",
    "account_id": "ACCOUNT_ID",
    "access_key_id": "ACCESSKEY",
    "secret_access_key": "SECRETKEY",
}


def _strip_optional_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
        return value[1:-1]
    return value


def load_env_file(path: Path, override: bool = False) -> None:
    """
    Load KEY=VALUE pairs from a .env file into os.environ.

    Existing variables are kept unless override is set.
    """
    if not path.exists():
        raise ConfigError(f"env file not found: {path}")
    if not path.is_file():
        raise ConfigError(f"env path is not a file: {path}")

    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"could not read env file {path}: {exc}") from exc

    for raw_line in content.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export ") :].strip()
        if "=" not in line:
            continue

        key, value = line.split("=", 1)
        key = key.strip()
        if not key:
            continue

        value = _strip_optional_quotes(value.strip())
        if override or key not in os.environ:
            os.environ[key] = value


def resolve_default_env_file() -> Optional[Path]:
    default_env = Path(".env")
    return default_env if default_env.exists() and default_env.is_file() else None


def load_store_config(
    environ: Optional[Mapping[str, str]] = None,
    prefix: str = ENV_PREFIX,
) -> StoreConfig:
    """
    Build StoreConfig from prefixed environment variables.

    Raises:
        ConfigError: naming every variable that is missing or blank
    """
    env = os.environ if environ is None else environ
    values = {}
    missing = []
    for field_name, suffix in _REQUIRED_VARS.items():
        name = f"{prefix}{suffix}"
        value = (env.get(name) or "").strip()
        if not value:
            missing.append(name)
        values[field_name] = value

    if missing:
        raise ConfigError(f"missing required configuration: {', '.join(missing)}")

    return StoreConfig(**values)
