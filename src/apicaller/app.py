"""Typer application and CLI entry point for apicaller.

Commands::

    apicaller endpoints                         # list registered endpoints
    apicaller url one users 42 -Q expand=true   # render a request URL
    apicaller parse https://exampleURL.com/api/one/users/42
    apicaller get one users 42 --repeat 2       # dispatch (second call hits the cache)
    apicaller config show|set|reset

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. :class:`~apicaller.exceptions.ApicallerError` raised by a
command becomes an error message on stderr and the error's exit code.
"""

from __future__ import annotations

import asyncio
import signal
import sys
from typing import Any, Optional

import typer

from apicaller import __version__
from apicaller.exceptions import ApicallerError, InvalidUsageError
from apicaller.exit_codes import EXIT_GENERIC_FAILURE
from apicaller.models import GlobalConfig
from apicaller.output import error, format_response, info, print_data, print_table
from apicaller.request import APIRequest

app = typer.Typer(
    name="apicaller",
    help="Build, parse, and dispatch cached requests against a fixed set of API endpoints.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

from apicaller.commands.config import config_app  # noqa: E402

app.add_typer(config_app, name="config", help="Configuration management.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"apicaller {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    base_url: Optional[str] = typer.Option(
        None, "--base-url", "-b", help="Base URL override (highest precedence)."
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show cache hits, misses and stores."
    ),
) -> None:
    """Install the global output manager and stash shared options in ``ctx.obj``."""
    fmt: Optional[str] = None
    if json_output:
        fmt = "json"
    elif plain_output:
        fmt = "plain"

    ctx.ensure_object(dict)
    ctx.obj.update(
        base_url=base_url, format=fmt, no_color=no_color, quiet=quiet, verbose=verbose
    )
    _install_output(ctx.obj, fmt or "auto")


# ------------------------------------------------------------------ #
# Helpers
# ------------------------------------------------------------------ #


def _fail(exc: ApicallerError) -> typer.Exit:
    error(str(exc))
    return typer.Exit(code=exc.exit_code)


def _install_output(options: dict[str, Any], fmt: str) -> None:
    from apicaller.output import OutputFormat, OutputManager, set_output

    set_output(
        OutputManager(
            format=OutputFormat(fmt),
            no_color=options.get("no_color", False),
            quiet=options.get("quiet", False),
            verbose=options.get("verbose", False),
        )
    )


def _resolve(ctx: typer.Context) -> GlobalConfig:
    """Resolve the effective config; a stored ``output.format`` applies when no flag was given."""
    from apicaller.config import resolve_config

    options = ctx.find_root().obj or {}
    config = resolve_config(
        cli_base_url=options.get("base_url"), cli_format=options.get("format")
    )
    if options.get("format") is None and config.output.format != "auto":
        _install_output(options, config.output.format)
    return config


def _parse_query_options(values: Optional[list[str]]) -> list[tuple[str, Optional[str]]]:
    """Turn ``name=value`` options into pairs. A bare ``name`` has no value and is dropped on render."""
    pairs: list[tuple[str, Optional[str]]] = []
    for raw in values or []:
        name, has_value, value = raw.partition("=")
        pairs.append((name, value if has_value else None))
    return pairs


_SEGMENTS_ARG = typer.Argument(None, help="Path components appended after the endpoint.")
_QUERY_OPT = typer.Option(
    None, "--query", "-Q", help="Query parameter as name=value (repeatable)."
)


# ------------------------------------------------------------------ #
# Commands
# ------------------------------------------------------------------ #


@app.command("endpoints")
def endpoints_command(ctx: typer.Context) -> None:
    """List the registered endpoints and their base URLs."""
    from apicaller.models import Endpoint

    try:
        config = _resolve(ctx)
    except ApicallerError as exc:
        raise _fail(exc) from None

    rows = [[e.value, f"{config.base_url.rstrip('/')}/{e.value}"] for e in Endpoint]
    print_table(["endpoint", "url"], rows, title="Endpoints")


@app.command("url")
def url_command(
    ctx: typer.Context,
    endpoint: str = typer.Argument(help="Endpoint name."),
    segments: Optional[list[str]] = _SEGMENTS_ARG,
    query: Optional[list[str]] = _QUERY_OPT,
) -> None:
    """Render the URL a request would be sent to."""
    from apicaller.exceptions import RequestCreationError
    from apicaller.request import build

    try:
        config = _resolve(ctx)
        request = build(endpoint, segments or [], _parse_query_options(query), config.base_url)
        if request.url is None:
            raise RequestCreationError(f"Cannot create a request from '{request.url_string}'")
    except ApicallerError as exc:
        raise _fail(exc) from None

    print_data(request.url)


@app.command("parse")
def parse_command(
    ctx: typer.Context,
    url: str = typer.Argument(help="URL to reverse-parse."),
) -> None:
    """Reverse-parse a URL into endpoint, path components and query parameters."""
    from apicaller.request import parse

    try:
        config = _resolve(ctx)
    except ApicallerError as exc:
        raise _fail(exc) from None

    request = parse(url, config.base_url)
    if request is None:
        raise _fail(
            InvalidUsageError(f"Not a recognised URL under {config.base_url}: {url}")
        )

    format_response(
        {
            "endpoint": request.endpoint.value,
            "path_components": list(request.path_components),
            "query_parameters": {item.name: item.value for item in request.query_parameters},
        }
    )


@app.command("get")
def get_command(
    ctx: typer.Context,
    endpoint: str = typer.Argument(help="Endpoint name."),
    segments: Optional[list[str]] = _SEGMENTS_ARG,
    query: Optional[list[str]] = _QUERY_OPT,
    repeat: int = typer.Option(
        1, "--repeat", "-r", min=1, help="Dispatch the same request N times."
    ),
) -> None:
    """Dispatch a GET request and print the decoded JSON body.

    Repeated dispatches in one invocation are answered from the cache. With
    ``cache.backend = disk`` the cache also survives between invocations.
    """
    from apicaller.request import build

    try:
        config = _resolve(ctx)
        request = build(endpoint, segments or [], _parse_query_options(query), config.base_url)
        value = asyncio.run(_dispatch(config, request, repeat))
    except ApicallerError as exc:
        raise _fail(exc) from None

    format_response(value)


async def _dispatch(config: GlobalConfig, request: APIRequest, repeat: int) -> Any:
    from apicaller.cache import ResponseCache
    from apicaller.client import Dispatcher
    from apicaller.config import get_cache_dir

    cache_dir = get_cache_dir() if config.cache.backend == "disk" else None
    cache = ResponseCache(config.cache, cache_dir)
    try:
        async with Dispatcher(config.request, cache) as dispatcher:
            value = None
            for attempt in range(repeat):
                value = await dispatcher.fetch(request)
                if repeat > 1:
                    info(f"[{attempt + 1}/{repeat}] {request}")
            return value
    finally:
        cache.close()


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """CLI entry point invoked by the ``apicaller`` console script.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except ApicallerError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
    except Exception as exc:
        error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)

