from flask import current_app, jsonify

from library_api.repositories.user_repo import UserRepo


def _unauthorized(message):
    return jsonify({"success": False, "message": message}), 401


def register_jwt_callbacks(jwt):
    """Resolve the token subject to a User and render token failures as 401."""

    @jwt.user_lookup_loader
    def load_user(_jwt_header, jwt_data):
        try:
            user_id = int(jwt_data["sub"])
        except (KeyError, TypeError, ValueError):
            return None
        return UserRepo.get_by_id(user_id)

    @jwt.user_lookup_error_loader
    def user_not_found(_jwt_header, jwt_data):
        current_app.logger.info(f"[auth] Token subject {jwt_data.get('sub')!r} no longer exists")
        return _unauthorized("Not authorized, user not found")

    @jwt.unauthorized_loader
    def missing_token(reason):
        return _unauthorized("Not authorized, no token provided")

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return _unauthorized("Not authorized, token is invalid")

    @jwt.expired_token_loader
    def expired_token(_jwt_header, _jwt_data):
        return _unauthorized("Not authorized, token has expired")
