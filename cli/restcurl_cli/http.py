from __future__ import annotations

from restcurl_client import RestClient
from restcurl_client.config_types import ClientConfig

from .config import AppConfig, apply_profile, normalize_server


def make_client(
    cfg: AppConfig,
    *,
    profile: str | None,
    server_override: str | None,
    port_override: str | None,
    timeout_override: float | None = None,
) -> RestClient:
    effective_cfg = apply_profile(cfg, profile)
    server = normalize_server(server_override or effective_cfg.server, warn=True)
    port = (port_override or effective_cfg.port or "").strip()
    timeout_s = timeout_override if timeout_override is not None else effective_cfg.timeout_s

    return RestClient(
        config=ClientConfig(
            server=server or None,
            port=port or None,
            timeout_s=timeout_s,
        )
    )
