from flask import Blueprint, Response, g, request, jsonify
from edumanage.auth.decorators import admin_required
from edumanage.errors import EduManageError
from edumanage.services.configuration_service import ConfigurationService
from edumanage.app_logger import get_logger

configuration_bp = Blueprint('configurations', __name__)
logger = get_logger("routes.configurations")


def _error(e):
    return jsonify(e.to_dict()), e.status_code


def _server_error(action):
    logger.exception("Error while %s", action)
    return jsonify({"message": f"Server error while {action}"}), 500


def _int_arg(name, default):
    raw = request.args.get(name)
    if raw in (None, ''):
        return default
    return int(raw)


# LIST (admin)
@configuration_bp.route('/', methods=['GET'])
@admin_required
def list_configurations():
    try:
        is_public = request.args.get('isPublic')
        return jsonify(ConfigurationService.list_configurations(
            category=request.args.get('category') or None,
            is_public=None if is_public is None else is_public == 'true',
            search=request.args.get('search') or None,
            page=_int_arg('page', 1),
            limit=_int_arg('limit', 20),
        ))
    except ValueError:
        return jsonify({"message": "page and limit must be integers"}), 400
    except EduManageError as e:
        return _error(e)
    except Exception:
        return _server_error("fetching configurations")


# CATEGORIES
@configuration_bp.route('/categories', methods=['GET'])
@admin_required
def categories():
    try:
        return jsonify(ConfigurationService.get_categories())
    except Exception:
        return _server_error("fetching categories")


# PUBLIC (no auth)
@configuration_bp.route('/public', methods=['GET'])
def public():
    try:
        return jsonify(ConfigurationService.get_public(request.args.get('category') or None))
    except Exception:
        return _server_error("fetching public configurations")


# EXPORT
@configuration_bp.route('/export', methods=['GET'])
@admin_required
def export():
    category = request.args.get('category') or None
    fmt = request.args.get('format', 'json')
    try:
        if fmt == 'csv':
            return Response(
                ConfigurationService.export_csv(category),
                mimetype='text/csv',
                headers={"Content-Disposition": "attachment; filename=configurations.csv"},
            )
        if fmt == 'rows':
            return jsonify(ConfigurationService.export_rows(category))
        return jsonify(ConfigurationService.export(category))
    except Exception:
        return _server_error("exporting configurations")


# BULK UPDATE
@configuration_bp.route('/bulk-update', methods=['POST'])
@admin_required
def bulk_update():
    data = request.get_json(silent=True) or {}
    try:
        return jsonify(ConfigurationService.bulk_update(data.get('configurations'), g.current_user['_id']))
    except EduManageError as e:
        return _error(e)
    except Exception:
        return _server_error("bulk updating configurations")


# RESET TO DEFAULT
@configuration_bp.route('/reset/<key>', methods=['POST'])
@admin_required
def reset(key):
    try:
        configuration = ConfigurationService.reset(key, g.current_user['_id'])
        return jsonify({"message": "Configuration reset to default value successfully",
                        "configuration": configuration})
    except EduManageError as e:
        return _error(e)
    except Exception:
        return _server_error("resetting configuration")


# CREATE
@configuration_bp.route('/', methods=['POST'])
@admin_required
def create():
    try:
        configuration = ConfigurationService.create(request.get_json(silent=True), g.current_user['_id'])
        return jsonify({"message": "Configuration created successfully",
                        "configuration": configuration}), 201
    except EduManageError as e:
        return _error(e)
    except Exception:
        return _server_error("creating configuration")


# GET BY KEY
@configuration_bp.route('/<key>', methods=['GET'])
@admin_required
def get_by_key(key):
    try:
        return jsonify(ConfigurationService.get_by_key(key))
    except EduManageError as e:
        return _error(e)
    except Exception:
        return _server_error("fetching configuration")


# HISTORY
@configuration_bp.route('/<key>/history', methods=['GET'])
@admin_required
def history(key):
    try:
        return jsonify(ConfigurationService.get_history(key))
    except EduManageError as e:
        return _error(e)
    except Exception:
        return _server_error("fetching configuration history")


# UPDATE
@configuration_bp.route('/<key>', methods=['PUT'])
@admin_required
def update(key):
    try:
        configuration = ConfigurationService.update(key, request.get_json(silent=True), g.current_user['_id'])
        return jsonify({"message": "Configuration updated successfully",
                        "configuration": configuration})
    except EduManageError as e:
        return _error(e)
    except Exception:
        return _server_error("updating configuration")


# DELETE
@configuration_bp.route('/<key>', methods=['DELETE'])
@admin_required
def delete(key):
    try:
        ConfigurationService.delete(key, g.current_user['_id'])
        return jsonify({"message": "Configuration deleted successfully"})
    except EduManageError as e:
        return _error(e)
    except Exception:
        return _server_error("deleting configuration")
