"""Tests for params_transform, before_success and before_error."""

from __future__ import annotations

import httpx
import pytest

from restpoint import MissingIdentifierError, RequestError

HOST = "http://api.example.com/v1"


def decorate(data):
    return {**data, "decorated": True}


class TestParamsTransform:
    """The transform output, not the caller's params, shapes the request."""

    async def test_get_collection(self, make_client, api):
        users = make_client(params_transform=decorate).generate("users")
        api.reply(200, {"users": []})

        await users.get_collection({"firstName": "Bob", "lastName": "Lang"})

        assert str(api.last.url) == f"{HOST}/users?firstName=Bob&lastName=Lang&decorated=true"

    async def test_create(self, make_client, api):
        users = make_client(params_transform=decorate).generate("users")
        api.reply(201, {"id": 1})

        await users.create({"email": "example@gmail.com"})

        assert api.last_json() == {"email": "example@gmail.com", "decorated": True}

    async def test_update(self, make_client, api):
        users = make_client(params_transform=decorate).generate("users")
        api.reply(200, {"id": 1})

        await users.update({"id": 1, "email": "example@gmail.com"})

        assert str(api.last.url) == f"{HOST}/users/1"
        assert api.last_json() == {"email": "example@gmail.com", "decorated": True}

    async def test_applied_once_with_ids(self, make_client, api):
        seen = []

        def record(params):
            seen.append(dict(params))
            return params

        client = make_client(params_transform=record)
        users = client.generate("users", nest_under=client.generate("rooms"))
        api.reply(200, {})

        await users.update({"roomId": 1, "id": 2, "name": "x"})

        assert seen == [{"roomId": 1, "id": 2, "name": "x"}]

    async def test_transform_can_rewrite_ids(self, make_client, api):
        users = make_client(params_transform=lambda p: {**p, "id": p["id"] * 10}).generate("users")
        api.reply(200, {})

        await users.get({"id": 4})

        assert str(api.last.url) == f"{HOST}/users/40"

    async def test_no_implicit_merge(self, make_client, api):
        users = make_client(params_transform=lambda p: {"only": "this"}).generate("users")
        api.reply(201, {})

        await users.create({"email": "e@x.com"})

        assert api.last_json() == {"only": "this"}

    def test_transform_dropping_id(self, make_client, api):
        users = make_client(params_transform=lambda p: {}).generate("users")

        with pytest.raises(MissingIdentifierError):
            users.get({"id": 1})
        assert api.requests == []

    def test_transform_must_return_mapping(self, make_client):
        users = make_client(params_transform=lambda p: None).generate("users")

        with pytest.raises(TypeError, match="params_transform"):
            users.get_collection({})

    def test_caller_params_not_mutated(self, make_client, api):
        def pop_everything(params):
            params.clear()
            return params

        users = make_client(params_transform=pop_everything).generate("users")
        params = {"page": 1}

        coro = users.get_collection(params)
        coro.close()

        assert params == {"page": 1}


class TestBeforeSuccess:
    """The hook output is what the awaited call returns."""

    async def test_decorates_response(self, make_client, api):
        users = make_client(before_success=decorate).generate("users")
        api.reply(200, {"users": [{"id": 1}]})

        result = await users.get_collection({})

        assert result == {"users": [{"id": 1}], "decorated": True}

    async def test_without_hook_body_is_unchanged(self, client, api):
        users = client.generate("users")
        api.reply(201, {"id": 1})

        assert await users.create({"email": "e@x.com"}) == {"id": 1}

    async def test_not_called_on_error(self, make_client, api):
        calls = []
        users = make_client(before_success=calls.append).generate("users")
        api.reply(404, {"error": "missing"})

        with pytest.raises(RequestError):
            await users.get(id=1)
        assert calls == []


class TestBeforeError:
    """Failures reject with the hook output, or the raw payload without one."""

    async def test_raw_payload_without_hook(self, client, api):
        users = client.generate("users")
        api.reply(422, {"errors": {"email": ["is taken"]}})

        with pytest.raises(RequestError) as excinfo:
            await users.create({"email": "e@x.com"})

        error = excinfo.value
        assert error.payload == {"errors": {"email": ["is taken"]}}
        assert error.status_code == 422
        assert error.method == "POST"
        assert error.url == f"{HOST}/users"

    async def test_hook_shapes_payload(self, make_client, api):
        users = make_client(before_error=decorate).generate("users")
        api.reply(401, {"error": "Not Authorized"})

        with pytest.raises(RequestError) as excinfo:
            await users.get_collection({})

        assert excinfo.value.payload == {"error": "Not Authorized", "decorated": True}
        assert excinfo.value.status_code == 401

    async def test_hook_called_once(self, make_client, api):
        calls = []

        def record(payload):
            calls.append(payload)
            return payload

        users = make_client(before_error=record).generate("users")
        api.reply(500, {"error": "down"})

        with pytest.raises(RequestError):
            await users.destroy(id=1)
        assert calls == [{"error": "down"}]
        assert len(api.requests) == 1

    async def test_network_failure(self, make_client, api):
        users = make_client(before_error=decorate).generate("users")
        api.fail(httpx.ConnectError, "Not Authorized")

        with pytest.raises(RequestError) as excinfo:
            await users.get_collection({})

        assert excinfo.value.payload == {"error": "Not Authorized", "decorated": True}
        assert excinfo.value.status_code is None

    async def test_text_error_body(self, client, api):
        users = client.generate("users")
        api.reply(503, text="Service Unavailable")

        with pytest.raises(RequestError) as excinfo:
            await users.get_collection({})

        assert excinfo.value.payload == "Service Unavailable"

    async def test_hook_exception_propagates(self, make_client, api):
        class Unauthorized(Exception):
            pass

        def raise_unauthorized(payload):
            raise Unauthorized(payload["error"])

        users = make_client(before_error=raise_unauthorized).generate("users")
        api.reply(401, {"error": "expired"})

        with pytest.raises(Unauthorized, match="expired"):
            await users.get_collection({})
