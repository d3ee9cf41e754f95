"""Tests for the browser-based web UI.

The web UI exposes the catalog and shell through a Flask JSON API.
Tests use ``pytest.importorskip`` so they are skipped gracefully when
Flask is not installed.
"""

from __future__ import annotations

from typing import Any

import pytest

flask = pytest.importorskip("flask")

from py_perms.config import SimulatorConfig  # noqa: E402
from py_perms.web.app import create_app, permissions_from_payload  # noqa: E402

HTTP_OK = 200
HTTP_CREATED = 201
HTTP_BAD_REQUEST = 400
HTTP_NOT_FOUND = 404


def _create_client(config: SimulatorConfig | None = None) -> Any:
    """Create a test client from a fresh app."""
    app = create_app(config or SimulatorConfig())
    app.config["TESTING"] = True
    return app.test_client()


class TestAppCreation:
    """Verify app factory and landing page."""

    def test_create_app_returns_flask(self) -> None:
        """create_app should return a Flask application."""
        assert isinstance(create_app(SimulatorConfig()), flask.Flask)

    def test_index_lists_entries(self) -> None:
        """The index page renders the sample entries."""
        response = _create_client().get("/")
        assert response.status_code == HTTP_OK
        assert b"script.sh" in response.data
        assert b"rwxr-xr--" in response.data


class TestEntries:
    """Verify listing and creation."""

    def test_list(self) -> None:
        """All sample entries are returned with every representation."""
        data = _create_client().get("/api/entries").get_json()
        script = next(e for e in data["entries"] if e["name"] == "script.sh")
        assert script["permissions"]["numeric"] == "754"
        assert script["permissions"]["symbolic"] == "rwxr-xr--"
        assert script["permissions"]["group"] == {"read": True, "write": False, "execute": True}

    def test_get_missing(self) -> None:
        """A missing id is a 404."""
        response = _create_client().get("/api/entries/999")
        assert response.status_code == HTTP_NOT_FOUND
        assert "999" in response.get_json()["error"]

    def test_create_uses_umask(self) -> None:
        """New entries follow the session umask."""
        client = _create_client(SimulatorConfig(umask="077"))
        response = client.post("/api/entries", json={"name": "proj", "kind": "directory"})
        assert response.status_code == HTTP_CREATED
        body = response.get_json()
        assert body["permissions"]["numeric"] == "700"
        assert body["owner"] == "user"
        assert body["size"] is None

    def test_create_bad_kind(self) -> None:
        """An unknown kind is a 400."""
        response = _create_client().post("/api/entries", json={"name": "x", "kind": "socket"})
        assert response.status_code == HTTP_BAD_REQUEST

    def test_create_blank_name(self) -> None:
        """A blank name is a 400."""
        response = _create_client().post("/api/entries", json={"name": " "})
        assert response.status_code == HTTP_BAD_REQUEST


class TestPermissions:
    """Verify chmod and chown over HTTP."""

    def test_set_numeric(self) -> None:
        """Numeric permissions are accepted."""
        response = _create_client().put("/api/entries/1/permissions", json={"numeric": "600"})
        assert response.status_code == HTTP_OK
        assert response.get_json()["permissions"]["symbolic"] == "rw-------"

    def test_set_symbolic(self) -> None:
        """Symbolic permissions are accepted."""
        response = _create_client().put(
            "/api/entries/1/permissions", json={"symbolic": "rwxr-x---"}
        )
        assert response.get_json()["permissions"]["numeric"] == "750"

    def test_set_flags(self) -> None:
        """Per-class flags are accepted."""
        flags = {
            "owner": {"read": True, "write": True, "execute": False},
            "group": {"read": True},
            "other": {},
        }
        response = _create_client().put("/api/entries/1/permissions", json=flags)
        assert response.get_json()["permissions"]["numeric"] == "640"

    def test_invalid_numeric(self) -> None:
        """Malformed numeric text is a 400."""
        response = _create_client().put("/api/entries/1/permissions", json={"numeric": "9"})
        assert response.status_code == HTTP_BAD_REQUEST

    def test_missing_entry(self) -> None:
        """chmod on a missing id is a 404."""
        response = _create_client().put("/api/entries/99/permissions", json={"numeric": "600"})
        assert response.status_code == HTTP_NOT_FOUND

    def test_set_ownership(self) -> None:
        """chown replaces owner and group."""
        response = _create_client().put(
            "/api/entries/2/ownership", json={"owner": "root", "group": "wheel"}
        )
        body = response.get_json()
        assert (body["owner"], body["group"]) == ("root", "wheel")

    def test_ownership_with_colon_rejected(self) -> None:
        """Names that would break the chown command are a 400."""
        client = _create_client()
        response = client.put(
            "/api/entries/2/ownership", json={"owner": "root", "group": "a:b"}
        )
        assert response.status_code == HTTP_BAD_REQUEST
        assert client.get("/api/entries/2").get_json()["group"] == "developers"

    def test_ownership_presets(self) -> None:
        """The suggested owners and groups are listed."""
        data = _create_client().get("/api/ownership/presets").get_json()
        assert "www-data" in data["owners"]
        assert data["groups"][0] == "staff"

    def test_payload_requires_a_shape(self) -> None:
        """A payload with no recognised keys is rejected."""
        with pytest.raises(ValueError, match="Expected"):
            permissions_from_payload({"mode": "644"})


class TestSelection:
    """Verify selection endpoints."""

    def test_nothing_selected(self) -> None:
        """Initially nothing is selected."""
        assert _create_client().get("/api/selected").get_json() == {"selected": None}

    def test_selection_follows_chmod(self) -> None:
        """The selected entry reflects later permission changes."""
        client = _create_client()
        client.post("/api/select", json={"id": "2"})
        client.put("/api/entries/2/permissions", json={"numeric": "700"})
        selected = client.get("/api/selected").get_json()["selected"]
        assert selected["permissions"]["numeric"] == "700"

    def test_select_missing(self) -> None:
        """Selecting a missing id is a 404."""
        response = _create_client().post("/api/select", json={"id": "42"})
        assert response.status_code == HTTP_NOT_FOUND


class TestUmask:
    """Verify umask endpoints."""

    def test_get(self) -> None:
        """The umask and its defaults are reported."""
        data = _create_client().get("/api/umask").get_json()
        assert data["umask"] == "022"
        assert data["file"]["numeric"] == "644"
        assert data["directory"]["numeric"] == "755"
        assert {"value": "077", "description": "Private (700/600)"} in data["presets"]

    def test_set(self) -> None:
        """A valid umask is committed."""
        client = _create_client()
        data = client.put("/api/umask", json={"umask": "002"}).get_json()
        assert data["file"]["numeric"] == "664"

    def test_invalid_not_committed(self) -> None:
        """An invalid umask is refused and the old one stays."""
        client = _create_client()
        response = client.put("/api/umask", json={"umask": "9z"})
        assert response.status_code == HTTP_BAD_REQUEST
        assert client.get("/api/umask").get_json()["umask"] == "022"

    def test_missing_key_not_committed(self) -> None:
        """A body without 'umask' is a 400 rather than a silent clear."""
        client = _create_client()
        response = client.put("/api/umask", json={"value": "002"})
        assert response.status_code == HTTP_BAD_REQUEST
        assert "umask" in response.get_json()["error"]
        assert client.get("/api/umask").get_json()["umask"] == "022"

    def test_empty_string_clears(self) -> None:
        """An explicit empty umask means 000."""
        data = _create_client().put("/api/umask", json={"umask": ""}).get_json()
        assert data["file"]["numeric"] == "666"


class TestCommands:
    """Verify generated commands."""

    def test_for_id(self) -> None:
        """Commands are generated for ?id=."""
        data = _create_client().get("/api/commands?id=2").get_json()
        commands = [c["command"] for c in data["commands"]]
        assert commands == [
            "chmod 754 script.sh",
            "chmod u=rwx,g=rx,o=r script.sh",
            "chown bob:developers script.sh",
            "umask 022",
            "ls -l script.sh",
        ]

    def test_without_selection(self) -> None:
        """No id and no selection is a 400."""
        response = _create_client().get("/api/commands")
        assert response.status_code == HTTP_BAD_REQUEST

    def test_for_selection(self) -> None:
        """Without an id the selection is used."""
        client = _create_client()
        client.post("/api/select", json={"id": "5"})
        data = client.get("/api/commands").get_json()
        assert data["entry"]["name"] == "logs"


class TestExecute:
    """Verify the shell endpoint."""

    def test_execute(self) -> None:
        """Shell commands run against the session catalog."""
        client = _create_client()
        data = client.post("/api/execute", json={"command": "chmod 711 script.sh"}).get_json()
        assert data["output"].startswith("-rwx--x--x")
        assert data["exited"] is False
        entry = client.get("/api/entries/2").get_json()
        assert entry["permissions"]["numeric"] == "711"

    def test_missing_command(self) -> None:
        """A body without 'command' is a 400."""
        response = _create_client().post("/api/execute", json={})
        assert response.status_code == HTTP_BAD_REQUEST

    def test_exit(self) -> None:
        """exit is reported rather than echoed."""
        data = _create_client().post("/api/execute", json={"command": "exit"}).get_json()
        assert data["exited"] is True
