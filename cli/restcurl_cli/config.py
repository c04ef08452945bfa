from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from typing import Any

import tomli_w
from platformdirs import user_config_dir

from . import console

APP_NAME = "restcurl"
CONFIG_FILENAME = "config.toml"
DEFAULT_TIMEOUT_S = 15.0

_WARNED_SERVER_SCHEME = False


@dataclass
class AuthConfig:
    login: str = ""
    password: str = ""


@dataclass
class AppConfig:
    server: str = ""
    port: str = ""
    auth: AuthConfig = field(default_factory=AuthConfig)
    timeout_s: float | None = DEFAULT_TIMEOUT_S
    profiles: dict[str, dict[str, Any]] = field(default_factory=dict)


def config_path() -> str:
    return f"{user_config_dir(APP_NAME)}/{CONFIG_FILENAME}"


def default_config() -> AppConfig:
    return AppConfig(server="", port="", auth=AuthConfig(), timeout_s=DEFAULT_TIMEOUT_S, profiles={})


def normalize_server(raw: str | None, *, warn: bool = False) -> str:
    value = (raw or "").strip()
    if not value:
        return ""
    value = value.rstrip("/")
    lowered = value.lower()
    if lowered.startswith("http://") or lowered.startswith("https://"):
        return value

    host = value.split("/", 1)[0]
    host = host.split(":", 1)[0].lower()
    if host in {"localhost", "127.0.0.1", "0.0.0.0"}:
        scheme = "http://"
    else:
        scheme = "https://"

    normalized = f"{scheme}{value}"
    if warn:
        _warn_missing_scheme(normalized)
    return normalized


def _warn_missing_scheme(normalized: str) -> None:
    global _WARNED_SERVER_SCHEME
    if _WARNED_SERVER_SCHEME:
        return
    console.warn(f"server missing scheme, assuming {normalized}")
    _WARNED_SERVER_SCHEME = True


def _parse_timeout(value: Any, default: float | None) -> float | None:
    if value is None:
        return default
    try:
        timeout = float(value)
    except (TypeError, ValueError):
        return default
    # 0 in the file means "no timeout"
    return timeout if timeout > 0 else None


def to_toml(cfg: AppConfig) -> dict[str, Any]:
    return _prune_none(
        {
            "server": cfg.server,
            "port": cfg.port,
            "timeout_s": cfg.timeout_s if cfg.timeout_s is not None else 0,
            "auth": {
                "login": cfg.auth.login,
                "password": cfg.auth.password,
            },
            "profiles": cfg.profiles or None,
        }
    )


def _prune_none(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _prune_none(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [_prune_none(item) for item in value if item is not None]
    return value


def from_toml(data: dict[str, Any]) -> AppConfig:
    auth_raw = data.get("auth") or {}
    login = ""
    password = ""
    if isinstance(auth_raw, dict):
        login = str(auth_raw.get("login") or "")
        password = str(auth_raw.get("password") or "")

    profiles_raw = data.get("profiles") or {}
    profiles: dict[str, dict[str, Any]] = {}
    if isinstance(profiles_raw, dict):
        for name, prof in profiles_raw.items():
            if isinstance(prof, dict):
                profiles[str(name)] = dict(prof)

    return AppConfig(
        server=normalize_server(str(data.get("server") or ""), warn=True),
        port=str(data.get("port") or "").strip(),
        auth=AuthConfig(login=login, password=password),
        timeout_s=_parse_timeout(data.get("timeout_s"), DEFAULT_TIMEOUT_S),
        profiles=profiles,
    )


def load_config() -> AppConfig:
    path = config_path()
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
        return from_toml(data)
    except FileNotFoundError:
        return default_config()


def apply_profile(cfg: AppConfig, profile: str | None) -> AppConfig:
    if not profile:
        return cfg
    prof = cfg.profiles.get(profile)
    if not isinstance(prof, dict):
        raise KeyError(profile)

    auth_raw = prof.get("auth") if isinstance(prof.get("auth"), dict) else {}
    login = str(prof.get("login") or auth_raw.get("login") or cfg.auth.login)
    password = str(prof.get("password") or auth_raw.get("password") or cfg.auth.password)
    return AppConfig(
        server=normalize_server(str(prof.get("server") or cfg.server), warn=True),
        port=str(prof.get("port") or cfg.port).strip(),
        auth=AuthConfig(login=login, password=password),
        timeout_s=_parse_timeout(prof.get("timeout_s"), cfg.timeout_s),
        profiles=cfg.profiles,
    )


def save_config(cfg: AppConfig) -> str:
    path = config_path()
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "wb") as f:
        f.write(tomli_w.dumps(to_toml(cfg)).encode("utf-8"))
    os.chmod(path, 0o600)
    return path
