from __future__ import annotations

import logging

import httpx

from .config_types import ClientConfig
from .errors import RequestFailed
from .request_spec import RequestSpec

logger = logging.getLogger(__name__)


class Transport:
    """Sends a ``RequestSpec`` through a short-lived ``httpx.Client``.

    A client is opened for every call and closed before ``send`` returns, on
    success and on error alike.
    """

    def __init__(self, cfg: ClientConfig, *, transport: httpx.BaseTransport | None = None):
        self._cfg = cfg
        self._transport = transport

    def _open(self, spec: RequestSpec) -> httpx.Client:
        return httpx.Client(
            headers={"User-Agent": self._cfg.user_agent},
            timeout=self._cfg.timeout_s,
            verify=spec.verify,
            transport=self._transport,
        )

    def send(self, spec: RequestSpec) -> httpx.Response:
        logger.debug("%s %s (%s)", spec.method, spec.url, spec.verb)
        with self._open(spec) as client:
            try:
                request = client.build_request(
                    spec.method,
                    spec.url,
                    content=spec.content,
                    headers=spec.headers,
                    params=spec.params,
                    cookies=spec.cookies,
                    timeout=spec.timeout,
                    extensions=spec.extensions,
                )
                r = client.send(request, auth=spec.auth, follow_redirects=spec.follow_redirects)
            except (httpx.RequestError, httpx.InvalidURL) as e:
                diagnostic = str(e) or type(e).__name__
                logger.warning("%s %s failed: %s", spec.verb, spec.url, diagnostic)
                raise RequestFailed(spec.verb, spec.url, diagnostic) from e

        logger.debug("%s %s -> %s", spec.method, spec.url, r.status_code)
        return r
