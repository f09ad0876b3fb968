from functools import wraps
from flask_jwt_extended import verify_jwt_in_request, get_current_user
from flask import jsonify

def admin_required(message="Invalid credentials"):
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            user = get_current_user()
            if user is None or not user.admin:
                return jsonify({"success": False, "message": message}), 401
            return fn(*args, **kwargs)
        return wrapper
    return decorator
