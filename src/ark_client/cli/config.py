"""Configuration helpers for the ark CLI."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ark_client.restore import DEFAULT_NAMESPACE

DEFAULT_CONFIG_PATH = Path.home() / ".ark" / "config.toml"
DEFAULT_SERVER = "http://localhost:8001"
DEFAULT_TIMEOUT = 30.0
SERVER_ENV_VAR = "ARK_SERVER"
TOKEN_ENV_VAR = "ARK_TOKEN"
NAMESPACE_ENV_VAR = "ARK_NAMESPACE"
_LOG_LEVELS = {"debug", "info", "warning", "error"}


@dataclass(frozen=True)
class CLIConfig:
    server: str = DEFAULT_SERVER
    token: str | None = None
    namespace: str = DEFAULT_NAMESPACE
    timeout: float = DEFAULT_TIMEOUT
    verify_tls: bool = True
    log_level: str | None = None


class ConfigError(ValueError):
    """Raised when CLI config is invalid."""


def _load_toml(path: Path) -> dict[str, Any]:
    raw = path.read_text(encoding="utf-8")

    try:  # Python 3.11+
        import tomllib  # type: ignore[attr-defined]
        try:
            return tomllib.loads(raw)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"invalid TOML in {path}: {exc}") from exc
    except ModuleNotFoundError:
        try:
            import tomli
        except ModuleNotFoundError as exc:
            raise ConfigError("toml parser unavailable; install tomli for Python < 3.11") from exc
        try:
            return tomli.loads(raw)
        except tomli.TOMLDecodeError as exc:
            raise ConfigError(f"invalid TOML in {path}: {exc}") from exc


def _to_bool(value: Any, field_name: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "1", "yes", "on"}:
            return True
        if lowered in {"false", "0", "no", "off"}:
            return False
    raise ConfigError(f"{field_name} must be a boolean")


def _to_timeout(value: Any) -> float:
    if isinstance(value, bool):
        raise ConfigError("timeout must be a number of seconds")
    try:
        timeout = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError("timeout must be a number of seconds") from exc
    if timeout <= 0:
        raise ConfigError("timeout must be greater than zero")
    return timeout


def _env_or(name: str, configured: str) -> str:
    env_value = os.getenv(name)
    return env_value.strip() if env_value else configured


def load_cli_config(path: str | Path | None = None) -> CLIConfig:
    config_path = Path(path) if path else DEFAULT_CONFIG_PATH
    if config_path.exists():
        parsed = _load_toml(config_path)
    else:
        parsed = {}

    section = parsed.get("cli")
    if isinstance(section, dict):
        source = section
    elif section is None:
        source = parsed
    else:
        raise ConfigError("[cli] must be a table")

    server = _env_or(SERVER_ENV_VAR, str(source.get("server", DEFAULT_SERVER)).strip())
    if not server:
        raise ConfigError("server must not be empty")

    namespace = _env_or(NAMESPACE_ENV_VAR, str(source.get("namespace", DEFAULT_NAMESPACE)).strip())
    if not namespace:
        raise ConfigError("namespace must not be empty")

    token_raw = source.get("token")
    token = str(token_raw).strip() or None if token_raw is not None else None
    token = _env_or(TOKEN_ENV_VAR, token or "") or None

    log_level_raw = source.get("log_level")
    if log_level_raw is None:
        log_level = None
    else:
        log_level = str(log_level_raw).strip().lower()
        if log_level not in _LOG_LEVELS:
            raise ConfigError("log_level must be one of: debug, info, warning, error")

    return CLIConfig(
        server=server,
        token=token,
        namespace=namespace,
        timeout=_to_timeout(source.get("timeout", DEFAULT_TIMEOUT)),
        verify_tls=_to_bool(source.get("verify_tls", True), "verify_tls"),
        log_level=log_level,
    )
