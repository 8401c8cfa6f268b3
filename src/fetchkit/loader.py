"""Load endpoint schemas from a URL, a local file, or stdin.

A schema document is JSON or YAML and is either the endpoint mapping itself
or an object holding it under an ``endpoints`` key::

    endpoints:
      /users: [get, post]
      /users/:id: [get, delete]

:func:`load_schema` parses the document and validates it into an
:class:`~fetchkit.models.ApiSchema`, ready for
:func:`~fetchkit.api.make_api`.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import httpx
import yaml

from fetchkit.exceptions import SchemaError
from fetchkit.models import ApiSchema


def load_schema(source: str) -> ApiSchema:
    """Load and validate a schema from a URL, file path, or ``-`` for stdin.

    Raises:
        SchemaError: If the source cannot be read, parsed, or validated.
    """
    if source == "-":
        document = _load_from_stdin()
    elif source.startswith(("http://", "https://")):
        document = _load_from_url(source)
    else:
        document = _load_from_file(source)
    return parse_schema_document(document)


def parse_schema_document(document: Any) -> ApiSchema:
    """Validate a parsed document, unwrapping a top-level ``endpoints`` key."""
    if isinstance(document, dict) and isinstance(document.get("endpoints"), dict):
        document = document["endpoints"]
    return ApiSchema.parse(document)


def _load_from_stdin() -> Any:
    content = sys.stdin.read()
    if not content.strip():
        raise SchemaError("No input received from stdin")
    return _parse_content(content, hint="")


def _load_from_url(url: str) -> Any:
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SchemaError(f"HTTP {exc.response.status_code} fetching schema from {url}") from exc
    except httpx.RequestError as exc:
        raise SchemaError(f"Failed to fetch schema from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    hint = ""
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"
    return _parse_content(response.text, hint=hint)


def _load_from_file(path: str) -> Any:
    file_path = Path(path)
    if not file_path.is_file():
        raise SchemaError(f"Schema file not found: {path}")
    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SchemaError(f"Failed to read schema file {path}: {exc}") from exc
    if not content.strip():
        raise SchemaError(f"Schema file is empty: {path}")

    suffix = file_path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"
    return _parse_content(content, hint=hint)


def _parse_content(content: str, hint: str) -> Any:
    """Parse *content* as JSON or YAML, trying the hinted format first."""
    if hint == "yaml":
        return _parse_yaml(content)
    try:
        return json.loads(content)
    except json.JSONDecodeError as exc:
        if hint == "json":
            raise SchemaError(f"Invalid JSON schema: {exc}") from exc
    return _parse_yaml(content)


def _parse_yaml(content: str) -> Any:
    try:
        return yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise SchemaError(f"Invalid YAML schema: {exc}") from exc
