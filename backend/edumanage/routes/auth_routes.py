from flask import Blueprint, g, request, jsonify
from edumanage.auth.decorators import auth_required
from edumanage.errors import EduManageError
from edumanage.services.auth_service import AuthService, serialize_user
from edumanage.app_logger import get_logger

auth_bp = Blueprint('auth', __name__)
logger = get_logger("routes.auth")


# REGISTER
@auth_bp.route('/register', methods=['POST'])
def register():
    try:
        result = AuthService.register(request.get_json(silent=True))
        return jsonify({"message": "User registered successfully", **result}), 201
    except EduManageError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        logger.exception("Register error")
        return jsonify({"message": "Server error during registration"}), 500


# LOGIN
@auth_bp.route('/login', methods=['POST'])
def login():
    try:
        result = AuthService.login(request.get_json(silent=True))
        return jsonify({"message": "Login successful", **result})
    except EduManageError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        logger.exception("Login error")
        return jsonify({"message": "Server error during login"}), 500


# CURRENT USER
@auth_bp.route('/me', methods=['GET'])
@auth_required
def me():
    return jsonify({"user": serialize_user(g.current_user)})
