"""``fetchkit inspect`` -- list the endpoints and methods of a schema."""

from __future__ import annotations

import typer

from fetchkit.exceptions import FetchkitError
from fetchkit.output import error, info, print_table


def inspect_command(ctx: typer.Context) -> None:
    """Show every endpoint in the active schema with its methods and path parameters.

    Example::

        fetchkit --schema api.yaml inspect
        fetchkit --json inspect
    """
    from fetchkit.config import resolve_profile
    from fetchkit.loader import load_schema
    from fetchkit.templating import placeholders

    obj = ctx.obj or {}
    try:
        profile = resolve_profile(
            obj.get("profile"), obj.get("base_url"), obj.get("schema"), require_base_url=False
        )
        schema = load_schema(profile.schema_source)
    except FetchkitError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    rows = [
        [endpoint, ", ".join(m.upper() for m in methods), ", ".join(placeholders(endpoint))]
        for endpoint, methods in schema.endpoints.items()
    ]
    if profile.base_url:
        info(f"Base URL: {profile.base_url}")
    print_table(["Endpoint", "Methods", "Path params"], rows, title=profile.schema_source)
