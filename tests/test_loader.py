"""Tests for loading resources from a JSON manifest."""

import json

import pytest

from restpoint.errors import ConfigurationError
from restpoint.loader import build_descriptors, load_manifest, load_resources

MANIFEST = {
    "resources": [
        {"name": "rooms", "id_attribute": "slug"},
        {
            "name": "users",
            "nest_under": "rooms",
            "custom_actions": [{"method": "post", "name": "login", "on": "collection"}],
        },
        {"name": "users", "key": "all_users"},
    ],
}


@pytest.fixture
def manifest_path(tmp_path):
    path = tmp_path / "resources.json"
    path.write_text(json.dumps(MANIFEST))
    return path


class TestBuildDescriptors:
    """Test descriptor construction from manifest entries."""

    def test_keys(self):
        descriptors = build_descriptors(MANIFEST)
        assert list(descriptors) == ["rooms", "users", "all_users"]

    def test_nesting_resolved_by_key(self):
        descriptors = build_descriptors(MANIFEST)

        assert descriptors["users"].nest_under is descriptors["rooms"]
        assert descriptors["users"].parent_key == "roomId"
        assert descriptors["all_users"].nest_under is None

    def test_options(self):
        descriptors = build_descriptors(MANIFEST)

        assert descriptors["rooms"].id_attribute == "slug"
        assert [a.name for a in descriptors["users"].custom_actions] == ["login"]

    def test_forward_reference(self):
        manifest = {"resources": [{"name": "users", "nest_under": "rooms"}, {"name": "rooms"}]}
        with pytest.raises(ConfigurationError, match="declared earlier"):
            build_descriptors(manifest)

    def test_duplicate_key(self):
        manifest = {"resources": [{"name": "users"}, {"name": "users"}]}
        with pytest.raises(ConfigurationError, match="duplicate"):
            build_descriptors(manifest)

    def test_missing_name(self):
        with pytest.raises(ConfigurationError, match=r"resources\[0\]"):
            build_descriptors({"resources": [{"key": "users"}]})

    def test_unknown_key(self):
        with pytest.raises(ConfigurationError, match="nestUnder"):
            build_descriptors({"resources": [{"name": "users", "nestUnder": "rooms"}]})

    def test_invalid_custom_action(self):
        manifest = {"resources": [{"name": "users", "custom_actions": [{"name": "login"}]}]}
        with pytest.raises(ConfigurationError):
            build_descriptors(manifest)


class TestLoadManifest:
    """Test reading manifests from disk."""

    def test_load(self, manifest_path):
        assert load_manifest(manifest_path) == MANIFEST

    def test_not_an_object(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[]")
        with pytest.raises(ConfigurationError):
            load_manifest(path)

    async def test_load_resources(self, manifest_path, client, api):
        resources = load_resources(client, manifest_path)
        api.reply(200, {"token": "t"})

        result = await resources["users"].login({"roomId": "lobby", "email": "e@x.com"})

        assert result == {"token": "t"}
        assert str(api.last.url) == "http://api.example.com/v1/rooms/lobby/users/login"
