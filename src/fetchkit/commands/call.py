"""``fetchkit call`` -- perform one call through a generated client.

Builds the Endpoints Map for the active profile, invokes
``api[ENDPOINT][METHOD]`` and renders the reply on stdout. Ctrl-C while the
call is in flight aborts it through the fetcher's ``abort()``.
"""

from __future__ import annotations

import asyncio
import json
import signal
from typing import Any, Optional

import typer

from fetchkit.exceptions import FetchkitError, RequestError
from fetchkit.exit_codes import EXIT_CANCELLED, EXIT_INVALID_USAGE
from fetchkit.models import Profile
from fetchkit.output import debug, error, format_response, info


def _parse_body(body: Optional[str]) -> Any:  # noqa: ANN401
    """Parse *body* as JSON if possible, returning the raw string on failure."""
    if body is None:
        return None
    try:
        return json.loads(body)
    except (json.JSONDecodeError, TypeError):
        return body


def _parse_pairs(items: list[str], separator: str, label: str) -> dict[str, str]:
    """Turn ``["a=1", "b=2"]`` into ``{"a": "1", "b": "2"}``."""
    pairs: dict[str, str] = {}
    for item in items:
        key, sep, value = item.partition(separator)
        if not sep or not key.strip():
            error(f"Invalid {label} '{item}', expected KEY{separator}VALUE")
            raise typer.Exit(code=EXIT_INVALID_USAGE)
        pairs[key.strip()] = value.strip() if separator == ":" else value
    return pairs


async def _perform(
    profile: Profile,
    endpoint: str,
    method: str,
    kwargs: dict[str, Any],
    dry_run: bool,
) -> tuple[Any, bool]:
    """Run the call; returns ``(reply, aborted_by_user)``."""
    from fetchkit.session import api_from_profile

    async with api_from_profile(profile, dry_run=dry_run) as client:
        methods = client.endpoints.get(endpoint)
        if methods is None:
            error(f"Unknown endpoint '{endpoint}'. Run 'fetchkit inspect' to list endpoints.")
            raise typer.Exit(code=EXIT_INVALID_USAGE)
        fetch = methods.get(method)
        if fetch is None:
            error(f"Endpoint '{endpoint}' has no method '{method}' (has: {', '.join(methods)})")
            raise typer.Exit(code=EXIT_INVALID_USAGE)

        interrupted = False

        def _on_interrupt() -> None:
            nonlocal interrupted
            interrupted = True
            fetch.abort()

        loop = asyncio.get_running_loop()
        try:
            loop.add_signal_handler(signal.SIGINT, _on_interrupt)
            installed = True
        except (NotImplementedError, RuntimeError, ValueError):
            # No signal support here (Windows, or not on the main thread).
            installed = False

        try:
            reply = await fetch(**kwargs)
        finally:
            if installed:
                loop.remove_signal_handler(signal.SIGINT)
        return reply, interrupted


def call_command(
    ctx: typer.Context,
    endpoint: str = typer.Argument(help="Endpoint as declared in the schema, e.g. /users/:id."),
    method: str = typer.Argument(help="Method as declared in the schema, e.g. get."),
    body: Optional[str] = typer.Option(None, "--body", "-b", help="Request body (JSON or raw text)."),
    query: list[str] = typer.Option([], "--query", "-Q", help="Query parameter KEY=VALUE (repeatable)."),
    param: list[str] = typer.Option([], "--param", "-P", help="Path parameter KEY=VALUE (repeatable)."),
    header: list[str] = typer.Option([], "--header", "-H", help="Header 'Name: value' (repeatable)."),
    dry_run: bool = typer.Option(False, "--dry-run", "-n", help="Print the request instead of sending it."),
) -> None:
    """Call ENDPOINT with METHOD and print the reply.

    Example::

        fetchkit -s api.yaml -u https://api.example.com call /users/:id get -P id=42
    """
    from fetchkit.config import resolve_profile

    obj = ctx.obj or {}
    kwargs: dict[str, Any] = {
        "body": _parse_body(body),
        "query": _parse_pairs(query, "=", "query parameter") or None,
        "params": _parse_pairs(param, "=", "path parameter") or None,
        "headers": _parse_pairs(header, ":", "header") or None,
    }

    try:
        profile = resolve_profile(obj.get("profile"), obj.get("base_url"), obj.get("schema"))
        debug(f"Using profile '{profile.name}' ({profile.base_url})")
        reply, interrupted = asyncio.run(_perform(profile, endpoint, method, kwargs, dry_run))
    except RequestError as exc:
        detail = exc.error if isinstance(exc.error, str) else json.dumps(exc.error, default=str)
        status = f" (HTTP {exc.status_code})" if exc.status_code else ""
        error(f"Request failed{status}: {detail}")
        raise typer.Exit(code=exc.exit_code) from None
    except FetchkitError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    if interrupted:
        info("Cancelled.")
        raise typer.Exit(code=EXIT_CANCELLED)
    format_response(reply)
