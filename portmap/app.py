"""
HTTP surface for the port-forward manager.

    GET    /mappings          list mappings
    POST   /mappings          add a mapping (id assigned server-side)
    PUT    /mappings/<id>     merge fields into a mapping
    DELETE /mappings/<id>     remove a mapping
    GET    /                  HTML page listing the mappings
"""

import logging
from typing import Any, Dict, Optional

from flask import Flask, jsonify, render_template_string, request

from .config import Settings, load_settings
from .store import JsonBlobStore, MappingRepository, mapping_url

logger = logging.getLogger(__name__)

FIELDS = ("port", "subdomain", "cloudIdeUrl")

PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <title>Port Forward Manager</title>
</head>
<body>
  <h1>Port Forward Manager</h1>
  {% if error %}<p class="error">{{ error }}</p>{% endif %}
  <table>
    <thead>
      <tr><th>Port</th><th>Subdomain</th><th>Cloud IDE URL</th><th>Link</th></tr>
    </thead>
    <tbody>
    {% for m in mappings %}
      <tr>
        <td>{{ m.port }}</td>
        <td>{{ m.subdomain }}</td>
        <td>{{ m.cloudIdeUrl }}</td>
        <td><a href="{{ m.url }}" target="_blank">Open</a></td>
      </tr>
    {% else %}
      <tr><td colspan="4">No mappings yet.</td></tr>
    {% endfor %}
    </tbody>
  </table>
</body>
</html>
"""


class ValidationError(ValueError):
    """Request body failed field validation."""


def validate_mapping(data: Any, partial: bool = False) -> Dict[str, Any]:
    """
    Check a mapping body and return only the known fields.

    With partial=True (updates) missing fields are allowed; present
    fields are still checked.
    """
    if not isinstance(data, dict):
        raise ValidationError("Body must be a JSON object")

    clean = {}
    for field in FIELDS:
        if field not in data:
            if not partial:
                raise ValidationError(f"Missing field: {field}")
            continue
        value = data[field]
        if field == "port":
            if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= 65535:
                raise ValidationError("port must be an integer between 1 and 65535")
        elif not isinstance(value, str) or not value.strip():
            raise ValidationError(f"{field} must be a non-empty string")
        clean[field] = value
    return clean


def _with_url(mapping: Dict[str, Any]) -> Dict[str, Any]:
    try:
        return {**mapping, "url": mapping_url(mapping)}
    except KeyError:
        return dict(mapping)


def create_app(settings: Optional[Settings] = None) -> Flask:
    settings = settings or load_settings()
    app = Flask(__name__)
    store = JsonBlobStore(settings.data_path)
    store.ensure()
    repo = MappingRepository(store)
    app.config["REPOSITORY"] = repo

    @app.route("/mappings", methods=["GET"])
    def list_mappings():
        try:
            return jsonify([_with_url(m) for m in repo.list()])
        except Exception as error:
            logger.error("Error fetching mappings: %s", error)
            return jsonify({"error": "Failed to load mappings"}), 500

    @app.route("/mappings", methods=["POST"])
    def add_mapping():
        try:
            data = validate_mapping(request.get_json(silent=True))
            mapping = repo.add(data)
            return jsonify(_with_url(mapping)), 201
        except ValidationError as error:
            return jsonify({"error": str(error)}), 400
        except Exception as error:
            logger.error("Error adding mapping: %s", error)
            return jsonify({"error": "Failed to add mapping"}), 500

    @app.route("/mappings/<int:mapping_id>", methods=["PUT"])
    def update_mapping(mapping_id):
        try:
            data = validate_mapping(request.get_json(silent=True), partial=True)
            mapping = repo.update(mapping_id, data)
            if mapping is None:
                return jsonify({"error": f"Mapping {mapping_id} not found"}), 404
            return jsonify(_with_url(mapping))
        except ValidationError as error:
            return jsonify({"error": str(error)}), 400
        except Exception as error:
            logger.error("Error updating mapping %d: %s", mapping_id, error)
            return jsonify({"error": "Failed to update mapping"}), 500

    @app.route("/mappings/<int:mapping_id>", methods=["DELETE"])
    def delete_mapping(mapping_id):
        try:
            repo.delete(mapping_id)
            return jsonify({"deleted": mapping_id})
        except Exception as error:
            logger.error("Error deleting mapping %d: %s", mapping_id, error)
            return jsonify({"error": "Failed to delete mapping"}), 500

    @app.route("/", methods=["GET"])
    def index():
        try:
            mappings = [_with_url(m) for m in repo.list()]
            return render_template_string(PAGE, mappings=mappings, error=None)
        except Exception as error:
            logger.error("Error rendering index: %s", error)
            return render_template_string(
                PAGE, mappings=[], error="Failed to load mappings. Please try again later."
            ), 500

    return app


def main() -> None:
    settings = load_settings()
    logging.basicConfig(level=settings.log_level)
    app = create_app(settings)
    logger.info("Serving port-forward manager on %s:%d", settings.host, settings.port)
    app.run(host=settings.host, port=settings.port)
