"""Flask application factory for the py-perms web UI.

The ``create_app`` function builds a catalog session, creates a shell
over it, and returns a Flask app whose endpoints expose the engine as
JSON:

- ``GET /`` — render the HTML page.
- ``GET /api/entries`` / ``POST /api/entries`` — list or create entries.
- ``GET /api/entries/<id>`` — one entry.
- ``PUT /api/entries/<id>/permissions`` — chmod (numeric, symbolic or flags).
- ``PUT /api/entries/<id>/ownership`` — chown.
- ``GET /api/ownership/presets`` — suggested owners and groups.
- ``POST /api/select`` / ``GET /api/selected`` — the current selection.
- ``GET /api/umask`` / ``PUT /api/umask`` — read or change the umask.
- ``GET /api/commands`` — generated commands for an entry.
- ``POST /api/execute`` — run a shell command line.
"""

from __future__ import annotations

from typing import Any

from flask import Flask, Response, jsonify, render_template, request

from py_perms.catalog import (
    COMMON_GROUPS,
    COMMON_OWNERS,
    Catalog,
    Entry,
    EntryKind,
    NotFoundError,
    build_catalog,
)
from py_perms.clipboard import Clipboard
from py_perms.commands import long_listing, preview_commands
from py_perms.config import SimulatorConfig
from py_perms.permissions import (
    ClassName,
    InvalidFormatError,
    PermissionClass,
    PermissionSet,
    from_numeric,
    from_symbolic,
    to_numeric,
    to_symbolic,
)
from py_perms.shell import Shell
from py_perms.umask import COMMON_UMASKS, preview

_HTTP_CREATED = 201
_HTTP_BAD_REQUEST = 400
_HTTP_NOT_FOUND = 404


def entry_to_dict(entry: Entry) -> dict[str, Any]:
    """Serialise an entry for JSON responses."""
    return {
        "id": entry.entry_id,
        "name": entry.name,
        "kind": entry.kind.value,
        "owner": entry.owner,
        "group": entry.group,
        "size": entry.size,
        "modified": entry.modified_at.isoformat() if entry.modified_at else None,
        "permissions": permissions_to_dict(entry.permissions),
        "listing": long_listing(entry),
    }


def permissions_to_dict(permissions: PermissionSet) -> dict[str, Any]:
    """Serialise a permission set with all three representations."""
    result: dict[str, Any] = {
        "symbolic": to_symbolic(permissions),
        "numeric": to_numeric(permissions),
    }
    for name, flags in permissions.classes():
        result[name.value] = {"read": flags.read, "write": flags.write, "execute": flags.execute}
    return result


def permissions_from_payload(data: dict[str, Any]) -> PermissionSet:
    """Build a permission set from ``numeric``, ``symbolic`` or per-class flags.

    Raises:
        InvalidFormatError: If none of the accepted shapes is present or
            the given value does not parse.

    """
    if "numeric" in data:
        return from_numeric(str(data["numeric"]))
    if "symbolic" in data:
        return from_symbolic(str(data["symbolic"]))
    if all(name.value in data for name in ClassName):
        classes: dict[str, PermissionClass] = {}
        for name in ClassName:
            flags = data[name.value]
            if not isinstance(flags, dict):
                msg = f"'{name.value}' must be an object of read/write/execute flags"
                raise InvalidFormatError(msg)
            classes[name.value] = PermissionClass(
                read=bool(flags.get("read")),
                write=bool(flags.get("write")),
                execute=bool(flags.get("execute")),
            )
        return PermissionSet(**classes)
    msg = "Expected 'numeric', 'symbolic', or 'owner'/'group'/'other' flags"
    raise InvalidFormatError(msg)


def _umask_state(catalog: Catalog) -> dict[str, Any]:
    defaults = preview(catalog.umask)
    return {
        "umask": catalog.umask,
        "file": permissions_to_dict(defaults.file),
        "directory": permissions_to_dict(defaults.directory),
        "presets": [{"value": p.value, "description": p.description} for p in COMMON_UMASKS],
    }


def _json_body() -> dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        msg = "Expected a JSON object body"
        raise InvalidFormatError(msg)
    return data


def create_app(config: SimulatorConfig | None = None) -> Flask:
    """Create and configure the Flask application.

    Args:
        config: Session settings (read from the environment if omitted).

    Returns:
        A configured Flask application ready to serve.

    """
    config = config or SimulatorConfig.from_env()
    catalog = build_catalog(config)
    shell = Shell(catalog=catalog, clipboard=Clipboard(reset_after=config.copy_reset_seconds))

    app = Flask(__name__)
    app.config["CATALOG"] = catalog

    @app.errorhandler(NotFoundError)
    def not_found(error: NotFoundError) -> tuple[Response, int]:  # pyright: ignore[reportUnusedFunction]
        return jsonify({"error": str(error)}), _HTTP_NOT_FOUND

    @app.errorhandler(ValueError)
    def bad_request(error: ValueError) -> tuple[Response, int]:  # pyright: ignore[reportUnusedFunction]
        return jsonify({"error": str(error)}), _HTTP_BAD_REQUEST

    @app.route("/")
    def index() -> str:  # pyright: ignore[reportUnusedFunction]
        """Render the HTML page."""
        return render_template("index.html", entries=catalog.entries, umask=catalog.umask)

    @app.route("/api/entries")
    def list_entries() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return every entry in creation order."""
        return jsonify({"entries": [entry_to_dict(e) for e in catalog.entries]})

    @app.route("/api/entries", methods=["POST"])
    def create_entry() -> tuple[Response, int]:  # pyright: ignore[reportUnusedFunction]
        """Create an entry from ``{"name": ..., "kind": "file"|"directory"}``."""
        data = _json_body()
        try:
            kind = EntryKind(data.get("kind", EntryKind.FILE.value))
        except ValueError as e:
            msg = f"Unknown kind: {data.get('kind')!r}"
            raise InvalidFormatError(msg) from e
        entry = catalog.create_entry(str(data.get("name", "")), kind)
        return jsonify(entry_to_dict(entry)), _HTTP_CREATED

    @app.route("/api/entries/<entry_id>")
    def get_entry(entry_id: str) -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return one entry."""
        return jsonify(entry_to_dict(catalog.get(entry_id)))

    @app.route("/api/entries/<entry_id>/permissions", methods=["PUT"])
    def set_permissions(entry_id: str) -> Response:  # pyright: ignore[reportUnusedFunction]
        """Replace an entry's permissions."""
        permissions = permissions_from_payload(_json_body())
        return jsonify(entry_to_dict(catalog.set_permissions(entry_id, permissions)))

    @app.route("/api/ownership/presets")
    def ownership_presets() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return the suggested owners and groups for chown."""
        return jsonify({"owners": list(COMMON_OWNERS), "groups": list(COMMON_GROUPS)})

    @app.route("/api/entries/<entry_id>/ownership", methods=["PUT"])
    def set_ownership(entry_id: str) -> Response:  # pyright: ignore[reportUnusedFunction]
        """Replace an entry's owner and group."""
        data = _json_body()
        entry = catalog.set_ownership(
            entry_id, str(data.get("owner", "")), str(data.get("group", ""))
        )
        return jsonify(entry_to_dict(entry))

    @app.route("/api/select", methods=["POST"])
    def select() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Select an entry from ``{"id": ...}``."""
        data = _json_body()
        return jsonify(entry_to_dict(catalog.select(str(data.get("id", "")))))

    @app.route("/api/selected")
    def selected() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return the selected entry, or ``null``."""
        entry = catalog.selected
        return jsonify({"selected": entry_to_dict(entry) if entry else None})

    @app.route("/api/umask")
    def get_umask() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return the umask and the defaults it produces."""
        return jsonify(_umask_state(catalog))

    @app.route("/api/umask", methods=["PUT"])
    def set_umask() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Replace the umask from ``{"umask": "027"}``; bad text is refused."""
        data = _json_body()
        if "umask" not in data:
            msg = "Missing 'umask' field (send \"\" to clear the umask)"
            raise InvalidFormatError(msg)
        catalog.set_umask(str(data["umask"]))
        return jsonify(_umask_state(catalog))

    @app.route("/api/commands")
    def commands() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Return generated commands for ``?id=`` or the selected entry."""
        entry_id = request.args.get("id")
        entry = catalog.get(entry_id) if entry_id else catalog.selected
        if entry is None:
            return jsonify({"error": "No entry selected"}), _HTTP_BAD_REQUEST
        previews = preview_commands(entry, catalog.umask)
        return jsonify(
            {
                "entry": entry_to_dict(entry),
                "commands": [
                    {"title": p.title, "command": p.command, "description": p.description}
                    for p in previews
                ],
            }
        )

    @app.route("/api/execute", methods=["POST"])
    def execute() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Execute a shell command from ``{"command": "..."}``."""
        data = request.get_json(silent=True)
        if not isinstance(data, dict) or "command" not in data:
            return jsonify({"error": "Missing 'command' field"}), _HTTP_BAD_REQUEST
        result = shell.execute(str(data["command"]))
        if result == Shell.EXIT_SENTINEL:
            return jsonify({"output": "", "exited": True})
        return jsonify({"output": result, "exited": False})

    return app


def main() -> None:
    """Run the web UI development server.

    This is the ``py-perms-web`` console entry point.
    """
    app = create_app()
    app.run(debug=True, port=8080)
