from __future__ import annotations

import json
from typing import Any

import typer

from restcurl_client import Auth, DecodeError, RequestOptions, RestClientError
from restcurl_client.client import decode_json

from .. import console
from ..config import apply_profile, load_config
from ..http import make_client

SERVER_OPT = typer.Option(None, "--server", help="Server address (overrides config).")
PORT_OPT = typer.Option(None, "--port", help="Server port (overrides config).")
PROFILE_OPT = typer.Option(None, "--profile", help="Config profile to use.")
LOGIN_OPT = typer.Option(None, "--login", help="Basic auth login.")
PASSWORD_OPT = typer.Option(None, "--password", help="Basic auth password.")
JSON_OPT = typer.Option(False, "--json/--raw", help="Decode the response as JSON.")
HEADER_OPT = typer.Option(None, "--header", "-H", help="Extra header 'Name: value' (repeatable).")
TIMEOUT_OPT = typer.Option(None, "--timeout", help="Timeout in seconds (0 disables).")
INSECURE_OPT = typer.Option(False, "--insecure", help="Skip TLS certificate verification.")
FAIL_OPT = typer.Option(False, "--fail", help="Exit with an error on HTTP status >= 400.")
DRY_RUN_OPT = typer.Option(False, "--dry-run", help="Print the request instead of sending it.")
DATA_OPT = typer.Option(None, "--data", "-d", help="JSON request body.")


def _parse_headers(values: list[str] | None) -> dict[str, str]:
    headers: dict[str, str] = {}
    for raw in values or []:
        name, sep, value = raw.partition(":")
        if not sep or not name.strip():
            console.err(f"Invalid header (expected 'Name: value'): {raw}")
            raise typer.Exit(code=2)
        headers[name.strip()] = value.strip()
    return headers


def _parse_data(data: str | None) -> Any:
    if data is None:
        return None
    try:
        return json.loads(data)
    except ValueError as e:
        console.err(f"--data is not valid JSON: {e}")
        raise typer.Exit(code=2)


def _emit_result(verb: str, url: str, body: Any, *, json_output: bool) -> None:
    # body is the raw text, or True for an empty response
    if body is True:
        console.ok("(empty response)")
    elif json_output:
        try:
            data = decode_json(body, associative=True)
        except ValueError as e:
            raise DecodeError(verb, url, body) from e
        console.print_json(data=data)
    else:
        console.print_raw(body)


def run_request(
        verb: str,
        url: str,
        *,
        data: str | None = None,
        safe: bool = False,
        json_output: bool = False,
        headers: list[str] | None = None,
        login: str | None = None,
        password: str | None = None,
        server: str | None = None,
        port: str | None = None,
        profile: str | None = None,
        timeout: float | None = None,
        insecure: bool = False,
        fail: bool = False,
        dry_run: bool = False,
) -> None:
    cfg = load_config()
    try:
        effective = apply_profile(cfg, profile)
    except KeyError:
        console.err(f"Unknown profile: {profile}")
        raise typer.Exit(code=2)

    if timeout is not None and timeout <= 0:
        timeout = None
        disable_timeout = True
    else:
        disable_timeout = False

    client = make_client(
        cfg,
        profile=profile,
        server_override=server,
        port_override=port,
        timeout_override=timeout,
    )

    transport_options: dict[str, Any] = {}
    if headers:
        transport_options["headers"] = _parse_headers(headers)
    if insecure:
        transport_options["verify"] = False
    if disable_timeout:
        transport_options["timeout"] = None

    opts = RequestOptions(
        transport_options=transport_options,
        associative=True,
        auth=Auth(
            login=login if login is not None else effective.auth.login,
            password=password if password is not None else effective.auth.password,
        ),
        postfields=_parse_data(data),
        safe=safe,
        json=False,
        raise_for_status=fail,
    )

    if dry_run:
        console.print_json(client.build(verb, url, opts).as_dict())
        return

    try:
        body = client.request(verb, url, opts)
        _emit_result(verb, url, body, json_output=json_output)
    except RestClientError as e:
        console.err(str(e))
        raise typer.Exit(code=1)


def get_cmd(
        url: str = typer.Argument(..., help="URL, or path when a server is configured."),
        json_output: bool = JSON_OPT,
        headers: list[str] | None = HEADER_OPT,
        login: str | None = LOGIN_OPT,
        password: str | None = PASSWORD_OPT,
        server: str | None = SERVER_OPT,
        port: str | None = PORT_OPT,
        profile: str | None = PROFILE_OPT,
        timeout: float | None = TIMEOUT_OPT,
        insecure: bool = INSECURE_OPT,
        fail: bool = FAIL_OPT,
        dry_run: bool = DRY_RUN_OPT,
) -> None:
    """Send a GET request."""
    run_request(
        "GET", url, json_output=json_output, headers=headers, login=login, password=password,
        server=server, port=port, profile=profile, timeout=timeout, insecure=insecure, fail=fail, dry_run=dry_run,
    )


def post_cmd(
        url: str = typer.Argument(..., help="URL, or path when a server is configured."),
        data: str | None = DATA_OPT,
        json_output: bool = JSON_OPT,
        headers: list[str] | None = HEADER_OPT,
        login: str | None = LOGIN_OPT,
        password: str | None = PASSWORD_OPT,
        server: str | None = SERVER_OPT,
        port: str | None = PORT_OPT,
        profile: str | None = PROFILE_OPT,
        timeout: float | None = TIMEOUT_OPT,
        insecure: bool = INSECURE_OPT,
        fail: bool = FAIL_OPT,
        dry_run: bool = DRY_RUN_OPT,
) -> None:
    """Send a POST request with a JSON body."""
    run_request(
        "POST", url, data=data, json_output=json_output, headers=headers, login=login, password=password,
        server=server, port=port, profile=profile, timeout=timeout, insecure=insecure, fail=fail, dry_run=dry_run,
    )


def put_cmd(
        url: str = typer.Argument(..., help="URL, or path when a server is configured."),
        data: str | None = DATA_OPT,
        json_output: bool = JSON_OPT,
        headers: list[str] | None = HEADER_OPT,
        login: str | None = LOGIN_OPT,
        password: str | None = PASSWORD_OPT,
        server: str | None = SERVER_OPT,
        port: str | None = PORT_OPT,
        profile: str | None = PROFILE_OPT,
        timeout: float | None = TIMEOUT_OPT,
        insecure: bool = INSECURE_OPT,
        fail: bool = FAIL_OPT,
        dry_run: bool = DRY_RUN_OPT,
) -> None:
    """Send a PUT request with a JSON body."""
    run_request(
        "PUT", url, data=data, json_output=json_output, headers=headers, login=login, password=password,
        server=server, port=port, profile=profile, timeout=timeout, insecure=insecure, fail=fail, dry_run=dry_run,
    )


def delete_cmd(
        url: str = typer.Argument(..., help="URL, or path when a server is configured."),
        safe: bool = typer.Option(False, "--safe", help="Send GET <url>/destroy instead of DELETE."),
        json_output: bool = JSON_OPT,
        headers: list[str] | None = HEADER_OPT,
        login: str | None = LOGIN_OPT,
        password: str | None = PASSWORD_OPT,
        server: str | None = SERVER_OPT,
        port: str | None = PORT_OPT,
        profile: str | None = PROFILE_OPT,
        timeout: float | None = TIMEOUT_OPT,
        insecure: bool = INSECURE_OPT,
        fail: bool = FAIL_OPT,
        dry_run: bool = DRY_RUN_OPT,
) -> None:
    """Send a DELETE request (or a safe-mode GET)."""
    run_request(
        "DELETE", url, safe=safe, json_output=json_output, headers=headers, login=login, password=password,
        server=server, port=port, profile=profile, timeout=timeout, insecure=insecure, fail=fail, dry_run=dry_run,
    )
