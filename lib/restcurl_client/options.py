from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Any, Mapping

from .config_types import ClientConfig
from .errors import OptionsError

TRANSPORT_OPTION_ALIASES = ("curl_options", "curlOptions")


@dataclass(frozen=True)
class Auth:
    login: str = ""
    password: str = ""

    @property
    def enabled(self) -> bool:
        return bool(self.login) and bool(self.password)


@dataclass
class RequestOptions:
    transport_options: dict[str, Any] = field(default_factory=dict)
    associative: bool = False
    auth: Auth | None = None
    postfields: Any = None
    safe: bool = False
    json: bool = False
    raise_for_status: bool = False


_FIELD_NAMES = {f.name for f in fields(RequestOptions)}


def _coerce_auth(value: Any) -> Auth:
    if value is None:
        return Auth()
    if isinstance(value, Auth):
        return value
    if isinstance(value, Mapping):
        unknown = set(value) - {"login", "password"}
        if unknown:
            raise OptionsError(f"Unknown auth keys: {', '.join(sorted(map(str, unknown)))}")
        return Auth(login=str(value.get("login") or ""), password=str(value.get("password") or ""))
    if isinstance(value, (tuple, list)) and len(value) == 2:
        login, password = value
        return Auth(login=str(login or ""), password=str(password or ""))
    raise OptionsError(f"auth must be a mapping with login/password, got {type(value).__name__}")


def _option_values(data: Mapping[str, Any]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for key, value in data.items():
        if key in TRANSPORT_OPTION_ALIASES:
            key = "transport_options"
        if key not in _FIELD_NAMES:
            raise OptionsError(f"Unknown request option: {key!r}")
        if key in values:
            raise OptionsError(f"Request option given twice: {key!r}")
        values[key] = value
    return values


def _from_mapping(data: Mapping[str, Any]) -> RequestOptions:
    return RequestOptions(**_option_values(data))


def normalize_options(options: RequestOptions | Mapping[str, Any] | None) -> RequestOptions:
    """Return a copy of ``options`` with every absent or empty field defaulted.

    Accepts a ``RequestOptions``, a plain mapping or ``None``. The caller's
    object is left untouched.
    """
    if options is None:
        opts = RequestOptions()
    elif isinstance(options, RequestOptions):
        opts = options
    elif isinstance(options, Mapping):
        opts = _from_mapping(options)
    else:
        raise OptionsError(f"options must be a mapping or RequestOptions, got {type(options).__name__}")

    transport_options = opts.transport_options or {}
    if not isinstance(transport_options, Mapping):
        raise OptionsError("transport_options must be a mapping")

    return replace(
        opts,
        transport_options=dict(transport_options),
        associative=bool(opts.associative),
        auth=_coerce_auth(opts.auth),
        postfields=opts.postfields if opts.postfields else {},
        safe=bool(opts.safe),
        json=bool(opts.json),
        raise_for_status=bool(opts.raise_for_status),
    )


def merge_options(
        options: RequestOptions | Mapping[str, Any] | None,
        overrides: Mapping[str, Any],
) -> RequestOptions:
    opts = normalize_options(options)
    if not overrides:
        return opts
    return normalize_options(replace(opts, **_option_values(overrides)))


def resolve_url(cfg: ClientConfig, url: str) -> str:
    base = cfg.base_url
    if base:
        return f"{base}{url}"
    return url
