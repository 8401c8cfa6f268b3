"""Tests for schema and configuration models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from fetchkit.exceptions import SchemaError
from fetchkit.models import ApiSchema, AuthConfig, CacheConfig, Profile, RequestConfig


class TestApiSchema:
    def test_list_methods(self) -> None:
        schema = ApiSchema.parse({"/users": ["get", "post"]})
        assert schema.endpoints == {"/users": ("get", "post")}

    def test_mapping_methods_keep_keys(self) -> None:
        schema = ApiSchema.parse({"/users": {"get": {"Reply": "User[]"}, "post": {"Body": "User"}}})
        assert schema.endpoints["/users"] == ("get", "post")

    def test_set_methods_sorted(self) -> None:
        schema = ApiSchema.parse({"/users": {"post", "get", "delete"}})
        assert schema.endpoints["/users"] == ("delete", "get", "post")

    def test_pairs_in_declaration_order(self) -> None:
        schema = ApiSchema.parse({"/a": ["get"], "/b": ["put", "patch"]})
        assert schema.pairs() == [("/a", "get"), ("/b", "put"), ("/b", "patch")]

    def test_parse_returns_existing_instance(self) -> None:
        schema = ApiSchema.parse({"/a": ["get"]})
        assert ApiSchema.parse(schema) is schema

    def test_duplicate_method_rejected(self) -> None:
        with pytest.raises(SchemaError, match="more than once") as exc_info:
            ApiSchema.parse({"/users": ["get", "get"]})
        assert exc_info.value.exit_code == 7

    def test_empty_method_list_rejected(self) -> None:
        with pytest.raises(SchemaError, match="declares no methods"):
            ApiSchema.parse({"/users": []})

    def test_empty_method_name_rejected(self) -> None:
        with pytest.raises(SchemaError, match="empty method name"):
            ApiSchema.parse({"/users": [""]})

    def test_non_string_method_rejected(self) -> None:
        with pytest.raises(SchemaError):
            ApiSchema.parse({"/users": [42]})

    def test_string_methods_rejected(self) -> None:
        with pytest.raises(SchemaError, match="must be a list"):
            ApiSchema.parse({"/users": "get"})

    def test_non_mapping_schema_rejected(self) -> None:
        with pytest.raises(SchemaError, match="mapping of endpoints"):
            ApiSchema.parse(["/users"])

    def test_empty_endpoint_name_rejected(self) -> None:
        with pytest.raises(SchemaError, match="non-empty"):
            ApiSchema.parse({"": ["get"]})

    def test_empty_schema_is_valid(self) -> None:
        assert ApiSchema.parse({}).endpoints == {}

    def test_frozen(self) -> None:
        schema = ApiSchema.parse({"/a": ["get"]})
        with pytest.raises(ValidationError):
            schema.endpoints = {}


class TestAuthConfig:
    def test_defaults(self) -> None:
        auth = AuthConfig(type="bearer")
        assert auth.source == "prompt"
        assert auth.location == "header"

    def test_unknown_type_rejected(self) -> None:
        with pytest.raises(ValidationError, match="unsupported auth type"):
            AuthConfig(type="oauth2")

    def test_unknown_location_rejected(self) -> None:
        with pytest.raises(ValidationError, match="unsupported auth location"):
            AuthConfig(type="api_key", location="cookie")


class TestProfile:
    def test_defaults(self) -> None:
        profile = Profile(name="p", schema_source="api.yaml", base_url="https://x.example.com")
        assert profile.auth is None
        assert profile.request == RequestConfig()
        assert profile.cache == CacheConfig()
        assert profile.effects == []

    def test_negative_retries_rejected(self) -> None:
        with pytest.raises(ValidationError):
            RequestConfig(max_retries=-1)

    def test_round_trips_through_json(self) -> None:
        profile = Profile(
            name="p",
            schema_source="api.yaml",
            base_url="https://x.example.com",
            auth=AuthConfig(type="api_key", header="X-Key", source="env:KEY"),
            effects=["log"],
        )
        assert Profile.model_validate_json(profile.model_dump_json()) == profile
