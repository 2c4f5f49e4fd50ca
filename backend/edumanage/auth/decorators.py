from functools import wraps
from flask import g, jsonify, request
from edumanage.errors import EduManageError
from edumanage.services.auth_service import AuthService


def _bearer_token():
    header = request.headers.get('Authorization', '')
    if header.startswith('Bearer '):
        return header[len('Bearer '):].strip()
    return None


def authorize(*roles):
    """
    Requires a valid bearer token; with roles, the user must hold one of them.
    The user document is left in g.current_user.
    """
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            token = _bearer_token()
            if not token:
                return jsonify({"message": "No token, authorization denied"}), 401
            try:
                user = AuthService.user_from_token(token)
            except EduManageError as e:
                return jsonify(e.to_dict()), e.status_code
            if roles and user.get('role') not in roles:
                return jsonify({"message": f"Access denied. Required role: {' or '.join(roles)}"}), 403
            g.current_user = user
            return view(*args, **kwargs)
        return wrapper
    return decorator


auth_required = authorize()
admin_required = authorize('admin')
