"""``fetchkit profile`` -- create, list, show and remove saved profiles.

A profile bundles a schema source, a base URL and the settings
:func:`~fetchkit.session.api_from_profile` turns into effects (auth, cache,
retries, named effects). Profiles live as JSON files in the config directory.
"""

from __future__ import annotations

from typing import Optional

import typer
from pydantic import ValidationError

from fetchkit.exceptions import FetchkitError
from fetchkit.exit_codes import EXIT_INVALID_USAGE
from fetchkit.output import error, format_response, info, print_table, success

profile_app = typer.Typer(no_args_is_help=True)


@profile_app.command("add")
def profile_add(
    name: str = typer.Argument(help="Profile name."),
    schema: str = typer.Option(..., "--schema", "-s", help="Schema file, URL, or '-'."),
    base_url: str = typer.Option(..., "--base-url", "-u", help="Base URL of the API."),
    auth_type: Optional[str] = typer.Option(None, "--auth", help="Auth type: bearer or api_key."),
    auth_source: str = typer.Option(
        "prompt", "--auth-source", help="Credential source: env:VAR, file:PATH, value:TEXT, prompt."
    ),
    auth_header: Optional[str] = typer.Option(None, "--auth-header", help="Header name for api_key auth."),
    auth_param: Optional[str] = typer.Option(None, "--auth-param", help="Query parameter for api_key auth."),
    timeout: float = typer.Option(30, "--timeout", help="Request timeout in seconds."),
    verify_ssl: bool = typer.Option(True, "--verify-ssl/--no-verify-ssl", help="Verify SSL certificates."),
    retries: int = typer.Option(0, "--retries", help="Retry attempts for network and 5xx failures."),
    cache: bool = typer.Option(False, "--cache/--no-cache", help="Cache GET replies on disk."),
    cache_ttl: int = typer.Option(300, "--cache-ttl", help="Cache TTL in seconds."),
    effect: list[str] = typer.Option([], "--effect", "-e", help="Registered effect name (repeatable)."),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing profile."),
) -> None:
    """Save a new profile.

    Example::

        fetchkit profile add petstore -s petstore.yaml -u https://petstore.example.com \\
            --auth bearer --auth-source env:PETSTORE_TOKEN --retries 2
    """
    from fetchkit.config import list_profiles, save_profile
    from fetchkit.models import AuthConfig, CacheConfig, Profile, RequestConfig

    if name in list_profiles() and not force:
        error(f"Profile '{name}' already exists. Use --force to overwrite.")
        raise typer.Exit(code=EXIT_INVALID_USAGE)

    try:
        auth = None
        if auth_type is not None:
            auth = AuthConfig(
                type=auth_type,
                source=auth_source,
                header=auth_header,
                param_name=auth_param,
                location="query" if auth_param and not auth_header else "header",
            )
        profile = Profile(
            name=name,
            schema_source=schema,
            base_url=base_url,
            auth=auth,
            request=RequestConfig(timeout=timeout, verify_ssl=verify_ssl, max_retries=retries),
            cache=CacheConfig(enabled=cache, ttl_seconds=cache_ttl),
            effects=effect,
        )
    except ValidationError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=EXIT_INVALID_USAGE) from None

    path = save_profile(profile)
    success(f"Saved profile '{name}' to {path}")


@profile_app.command("list")
def profile_list() -> None:
    """List saved profiles."""
    from fetchkit.config import list_profiles, load_profile

    rows: list[list[str]] = []
    for name in list_profiles():
        try:
            profile = load_profile(name)
        except FetchkitError as exc:
            error(str(exc))
            continue
        rows.append([profile.name, profile.base_url, profile.schema_source])

    if not rows:
        info("No profiles saved. Run: fetchkit profile add NAME --schema ... --base-url ...")
        return
    print_table(["Name", "Base URL", "Schema"], rows, title="Profiles")


@profile_app.command("show")
def profile_show(name: str = typer.Argument(help="Profile name.")) -> None:
    """Print a saved profile."""
    from fetchkit.config import load_profile

    try:
        profile = load_profile(name)
    except FetchkitError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    format_response(profile.model_dump(mode="json"))


@profile_app.command("remove")
def profile_remove(name: str = typer.Argument(help="Profile name.")) -> None:
    """Delete a saved profile."""
    from fetchkit.config import delete_profile

    try:
        delete_profile(name)
    except FetchkitError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    success(f"Removed profile '{name}'")
