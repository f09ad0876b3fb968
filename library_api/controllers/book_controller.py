# library_api/controllers/book_controller.py

from flask import Blueprint, request, jsonify

from library_api.services.book_service import BookService
from library_api.utils.decorators import admin_required
from library_api.utils.validators import json_object, parse_id

book_bp = Blueprint("books", __name__)


def _book_id(raw) -> int:
    return parse_id(raw, "No book found")


@book_bp.get("")
def list_books():
    books = BookService.list_books()
    return jsonify({"success": True, "data": [b.to_dict() for b in books]})


@book_bp.get("/search")
def search_books():
    books = BookService.search_books(request.args)
    return jsonify({"success": True, "data": [b.to_dict() for b in books]})


@book_bp.get("/<book_id>")
@book_bp.get("/get/<book_id>")
def get_book(book_id):
    b = BookService.get_book(_book_id(book_id))
    return jsonify({"success": True, "data": b.to_dict()})


@book_bp.post("")
@admin_required("Invalid adding credentials")
def create_book():
    data = json_object(request.get_json(silent=True))
    b = BookService.create_book(data)
    return jsonify({"success": True, "data": b.to_dict()}), 201


@book_bp.put("/<book_id>")
@admin_required()
def update_book(book_id):
    data = json_object(request.get_json(silent=True))
    b = BookService.update_book(_book_id(book_id), data)
    return jsonify({"success": True, "data": b.to_dict()})


@book_bp.delete("/<book_id>")
@admin_required()
def delete_book(book_id):
    BookService.delete_book(_book_id(book_id))
    return "", 204
