from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class ClientConfig:
    server: str | None = None
    port: str | None = None
    timeout_s: float | None = 15.0
    user_agent: str = "restcurl-client/0.1.0"
    empty_body_as_true: bool = True

    def __post_init__(self) -> None:
        if self.port is not None and not isinstance(self.port, str):
            object.__setattr__(self, "port", str(self.port))

    @property
    def base_url(self) -> str:
        if not self.server or self.port is None:
            return ""
        return f"{self.server}:{self.port}"
