from flask import Blueprint, jsonify

from library_api.services.report_service import ReportService
from library_api.utils.decorators import admin_required

report_bp = Blueprint("reports", __name__)

@report_bp.get("/borrowed")
@admin_required("unauthorized access")
def currently_borrowed():
    return jsonify({"success": True, "data": ReportService.currently_borrowed()})


@report_bp.get("/popular/<n>")
@admin_required("unauthorized access")
def popular_books(n):
    return jsonify({"success": True, "data": ReportService.popular_books(n)})
