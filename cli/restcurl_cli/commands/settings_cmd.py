from __future__ import annotations

import os

import typer

from .. import console
from ..config import config_path, default_config, load_config, normalize_server, save_config

app = typer.Typer(help="Manage local settings (~/.config/restcurl/config.toml).")


@app.command("init")
def init_settings(
        force: bool = typer.Option(False, "--force", help="Overwrite existing config."),
        server: str = typer.Option(
            ...,
            "--server",
            prompt="Server",
            help="Server address like http://127.0.0.1",
        ),
        port: str = typer.Option(..., "--port", prompt="Port", help="Server port, e.g. 8080."),
):
    path = config_path()
    if os.path.exists(path) and not force:
        console.info(f"Config already exists: {path}")
        console.info("Use --force to overwrite.")
        return

    cfg = default_config()
    cfg.server = normalize_server(server, warn=True)
    cfg.port = port.strip()
    if not cfg.server or not cfg.port:
        console.err("Server and port cannot be empty.")
        raise typer.Exit(code=2)
    saved = save_config(cfg)
    console.ok(f"Config written: {saved}")


@app.command("show")
def show_settings():
    cfg = load_config()
    password_state = "(set)" if cfg.auth.password else "(empty)"
    timeout = cfg.timeout_s if cfg.timeout_s is not None else "none"
    profiles = ",".join(sorted(cfg.profiles)) or "-"
    console.console.print(
        f"server={cfg.server or '-'} port={cfg.port or '-'} login={cfg.auth.login or '-'} "
        f"password={password_state} timeout_s={timeout} profiles={profiles}",
        highlight=False,
    )


@app.command("set")
def set_setting(
        server: str | None = typer.Option(None, "--server", help="Set server address."),
        port: str | None = typer.Option(None, "--port", help="Set server port."),
        login: str | None = typer.Option(None, "--login", help="Set basic auth login."),
        password: str | None = typer.Option(None, "--password", help="Set basic auth password."),
        timeout: float | None = typer.Option(None, "--timeout", help="Request timeout in seconds (0 disables)."),
):
    cfg = load_config()
    if server is not None:
        cfg.server = normalize_server(server, warn=True)
    if port is not None:
        cfg.port = port.strip()
    if login is not None:
        cfg.auth.login = login
    if password is not None:
        cfg.auth.password = password
    if timeout is not None:
        cfg.timeout_s = timeout if timeout > 0 else None
    saved = save_config(cfg)
    console.ok(f"Settings updated: {saved}")
