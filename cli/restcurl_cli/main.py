from __future__ import annotations

import typer

from .commands import request_cmd, settings_cmd
from .logging_ import setup_logging


def _build_app() -> typer.Typer:
    app = typer.Typer(
        name="restcurl",
        help="restcurl: GET/POST/PUT/DELETE against a REST server",
        no_args_is_help=True,
    )

    app.add_typer(settings_cmd.app, name="settings")
    app.command("get")(request_cmd.get_cmd)
    app.command("post")(request_cmd.post_cmd)
    app.command("put")(request_cmd.put_cmd)
    app.command("delete")(request_cmd.delete_cmd)

    @app.callback()
    def _main(
            verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose logs."),
    ):
        setup_logging(verbose)

    return app


app = _build_app()


if __name__ == "__main__":
    app()
