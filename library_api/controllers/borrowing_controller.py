from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required, get_current_user

from library_api.controllers.report_controller import popular_books
from library_api.services.circulation_service import CirculationService
from library_api.utils.validators import parse_id

borrowing_bp = Blueprint("borrowing", __name__)


@borrowing_bp.post("/borrow/<book_id>")
@jwt_required()
def borrow_book(book_id):
    b = CirculationService.borrow_book(get_current_user(), parse_id(book_id, "book not found"))
    return jsonify({"success": True, "data": b.to_dict()}), 201


@borrowing_bp.post("/return/<borrowing_id>")
@jwt_required()
def return_book(borrowing_id):
    b = CirculationService.return_book(get_current_user(), parse_id(borrowing_id, "borrowing not found"))
    return jsonify({"success": True, "data": b.to_dict()})


@borrowing_bp.get("/borrowed")
@jwt_required()
def my_active_loans():
    return jsonify({"success": True, "data": CirculationService.active_loans(get_current_user())})


# older clients use /popular/<n>; same view as /reports/popular/<n>
borrowing_bp.add_url_rule("/popular/<n>", view_func=popular_books, methods=["GET"])
