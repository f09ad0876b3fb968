from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required, get_current_user

from library_api.services.auth_service import AuthService
from library_api.services.circulation_service import CirculationService
from library_api.utils.validators import json_object

user_bp = Blueprint("users", __name__)

@user_bp.post("/register")
def register():
    data = json_object(request.get_json(silent=True))

    # admin is never taken from the request body, see `flask create-admin`
    user = AuthService.register(
        name=data.get("name"),
        email=data.get("email"),
        password=data.get("password"),
    )
    return jsonify({
        "success": True,
        "data": user.to_dict(),
        "token": AuthService.issue_token(user),
    }), 201


@user_bp.post("/login")
def login():
    data = json_object(request.get_json(silent=True))
    token, user = AuthService.login(data.get("email"), data.get("password"))
    return jsonify({"success": True, "data": user.to_dict(), "token": token})


@user_bp.get("/profile")
@jwt_required()
def profile():
    return jsonify({"success": True, "data": get_current_user().to_dict()})


@user_bp.put("/profile/update")
@jwt_required()
def update_profile():
    data = json_object(request.get_json(silent=True))
    token, user = AuthService.update_profile(get_current_user(), data)
    return jsonify({"success": True, "data": user.to_dict(), "token": token})


@user_bp.get("/history")
@jwt_required()
def history():
    borrowings = CirculationService.history(get_current_user())
    return jsonify({"success": True, "data": [b.to_dict() for b in borrowings]})
