from __future__ import annotations

import json
import logging
from types import SimpleNamespace
from typing import Any, Mapping

import httpx

from .config_types import ClientConfig
from .errors import ApiError, AuthError, DecodeError, OptionsError
from .options import RequestOptions, merge_options
from .request_spec import RequestSpec, build_request_spec
from .transport import Transport

logger = logging.getLogger(__name__)

Options = RequestOptions | Mapping[str, Any] | None


def decode_json(body: str, *, associative: bool) -> Any:
    """Parse ``body``; objects become dicts when ``associative`` else namespaces."""
    hook = None if associative else (lambda d: SimpleNamespace(**d))
    return json.loads(body, object_hook=hook)


class RestClient:
    def __init__(
            self,
            server: str | None = None,
            port: str | int | None = None,
            *,
            config: ClientConfig | None = None,
            transport: httpx.BaseTransport | None = None,
    ):
        if config is None:
            config = ClientConfig(server=server, port=port)
        elif server is not None or port is not None:
            raise OptionsError("pass either server/port or config, not both")
        self.config = config
        self._t = Transport(config, transport=transport)

    def build(self, method: str, url: str, options: Options = None, **overrides: Any) -> RequestSpec:
        """Return the request ``method`` would send, without sending it."""
        opts = merge_options(options, overrides)
        return build_request_spec(method, url, opts, self.config)

    def request(self, method: str, url: str, options: Options = None, **overrides: Any) -> Any:
        opts = merge_options(options, overrides)
        spec = build_request_spec(method, url, opts, self.config)
        r = self._t.send(spec)
        return self._result(spec, opts, r)

    def _result(self, spec: RequestSpec, opts: RequestOptions, r: httpx.Response) -> Any:
        if opts.raise_for_status and r.status_code >= 400:
            _raise_api_error(spec, r)

        body = r.text
        if not body:
            if self.config.empty_body_as_true:
                logger.info("%s %s: empty body with status %s, reporting success", spec.verb, spec.url, r.status_code)
                return True
            if opts.json:
                raise DecodeError(spec.verb, spec.url, body)
            return body

        if not opts.json:
            return body
        try:
            return decode_json(body, associative=opts.associative)
        except ValueError as e:
            raise DecodeError(spec.verb, spec.url, body) from e

    # --- verbs ---
    def GET(self, url: str, options: Options = None, **overrides: Any) -> Any:
        return self.request("GET", url, options, **overrides)

    def POST(self, url: str, options: Options = None, **overrides: Any) -> Any:
        return self.request("POST", url, options, **overrides)

    def PUT(self, url: str, options: Options = None, **overrides: Any) -> Any:
        return self.request("PUT", url, options, **overrides)

    def DELETE(self, url: str, options: Options = None, **overrides: Any) -> Any:
        return self.request("DELETE", url, options, **overrides)

    get = GET
    post = POST
    put = PUT
    delete = DELETE


def _raise_api_error(spec: RequestSpec, r: httpx.Response) -> None:
    msg = f"{spec.verb} {spec.url} failed with {r.status_code}"
    details = None
    try:
        data = r.json()
    except ValueError:
        data = None

    if isinstance(data, dict) and "detail" in data:
        details = json.dumps(data, ensure_ascii=False)
        msg = str(data.get("detail") or msg)
    elif r.text:
        details = r.text[:1000]

    if r.status_code in (401, 403):
        raise AuthError(r.status_code, msg, details)
    raise ApiError(r.status_code, msg, details)
