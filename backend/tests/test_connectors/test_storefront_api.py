"""
Unit tests for the storefront REST client

Requests go through httpx.MockTransport; the session lives in a temporary
token file.

Author: Mapu Team
Date: 2025-11-25
"""
import asyncio
import json

import httpx
import pytest

from marketplace.connectors.storefront_api import (
    ApiClient, ApiResult, TokenStore, build_query, build_form,
    REQUEST_ERROR, CONNECTION_ERROR,
)


@pytest.fixture
def token_store(tmp_path):
    return TokenStore(tmp_path / "session.json")


def make_client(token_store, handler):
    return ApiClient("https://api.example.com/api/", token_store, transport=httpx.MockTransport(handler))


class TestTokenStore:
    def test_missing_file_has_no_session(self, token_store):
        assert token_store.get_token() is None
        assert token_store.get_user() is None

    @pytest.mark.parametrize("content", ["[]", '"x"', "1", "{not json"])
    def test_unreadable_file_has_no_session(self, token_store, content):
        token_store.path.write_text(content, encoding="utf-8")

        assert token_store.get_token() is None
        assert token_store.get_user() is None

    def test_set_token_replaces_non_object_file(self, token_store):
        token_store.path.write_text("[]", encoding="utf-8")

        token_store.set_token("abc")

        assert token_store.get_token() == "abc"

    def test_remove_drops_token_and_user(self, token_store):
        # Arrange
        token_store.set_token("abc")
        token_store.set_user({"id": "u1"})

        # Act
        token_store.remove()

        # Assert
        assert token_store.get_token() is None
        assert token_store.get_user() is None


class TestQueryHelpers:
    def test_build_query_skips_none_values(self):
        assert build_query({"page": 2, "type": None, "openNow": True}) == "?page=2&openNow=true"

    def test_build_query_empty(self):
        assert build_query(None) == ""
        assert build_query({"a": None}) == ""

    def test_build_form_serializes_nested_objects_as_json(self):
        fields = build_form({"name": "Almacén", "schedule": {"monday": {"open": "09:00", "close": "18:00"}}})

        assert fields["name"] == "Almacén"
        assert json.loads(fields["schedule"]) == {"monday": {"open": "09:00", "close": "18:00"}}


class TestApiClient:
    def test_bearer_header_attached_when_token_stored(self, token_store):
        # Arrange
        seen = {}

        def handler(request):
            seen["auth"] = request.headers.get("Authorization")
            seen["url"] = str(request.url)
            return httpx.Response(200, json={"id": "u1"})

        token_store.set_token("jwt-123")
        client = make_client(token_store, handler)

        # Act
        result = asyncio.run(client.get("/auth/me"))

        # Assert
        assert result.ok
        assert result.data == {"id": "u1"}
        assert seen["auth"] == "Bearer jwt-123"
        assert seen["url"] == "https://api.example.com/api/auth/me"

    def test_no_header_without_session(self, token_store):
        seen = {}

        def handler(request):
            seen["auth"] = request.headers.get("Authorization")
            return httpx.Response(200, json=[])

        asyncio.run(make_client(token_store, handler).get("/shops"))

        assert seen["auth"] is None

    def test_error_message_from_api(self, token_store):
        def handler(request):
            return httpx.Response(400, json={"message": ["email must be an email", "password too short"]})

        result = asyncio.run(make_client(token_store, handler).post("/auth/register", {"email": "x"}))

        assert not result.ok
        assert result.error == "email must be an email, password too short"

    def test_error_without_message_uses_generic_text(self, token_store):
        def handler(request):
            return httpx.Response(500, json={"statusCode": 500})

        result = asyncio.run(make_client(token_store, handler).get("/shops"))

        assert result.error == REQUEST_ERROR

    def test_network_failure_is_connection_error(self, token_store):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        result = asyncio.run(make_client(token_store, handler).get("/shops"))

        assert result.data is None
        assert result.error == CONNECTION_ERROR

    def test_upload_form_data_sends_multipart(self, token_store):
        # Arrange
        seen = {}

        def handler(request):
            seen["content_type"] = request.headers.get("Content-Type")
            seen["body"] = request.read()
            return httpx.Response(201, json={"id": "shop-1"})

        client = make_client(token_store, handler)

        # Act
        result = asyncio.run(client.upload_form_data(
            "/shops",
            {"name": "Almacén Don Pepe"},
            [("logo", ("logo.png", b"PNGDATA", "image/png"))],
        ))

        # Assert
        assert result.data == {"id": "shop-1"}
        assert seen["content_type"].startswith("multipart/form-data; boundary=")
        assert b'name="name"' in seen["body"]
        assert b'filename="logo.png"' in seen["body"]


class TestApiResult:
    def test_map_converts_data(self):
        assert ApiResult(data=2).map(lambda value: value * 10).data == 20

    def test_map_keeps_error(self):
        result = ApiResult(error="boom").map(lambda value: value * 10)

        assert result.data is None
        assert result.error == "boom"
