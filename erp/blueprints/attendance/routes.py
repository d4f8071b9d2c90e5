"""
erp/blueprints/attendance/routes.py

Daily attendance for the logged-in user.

- POST /api/attendance {status}: mark today (once per day)
- GET  /api/attendance[?date=YYYY-MM-DD]: that day's mark, or null
"""

from __future__ import annotations

from datetime import date

from flask import Blueprint, jsonify

from ...forms import AttendanceForm, validated
from ...security import gated
from ...store import entity_store
from ...utils import parse_query_date

attendance_bp = Blueprint("attendance", __name__, url_prefix="/api/attendance")


@attendance_bp.route("", methods=["POST"])
@gated
def mark_attendance(principal):
    form = validated(AttendanceForm)
    record = entity_store().mark_attendance(
        user_id=principal.id,
        day=date.today(),
        status=form.status.data,
    )
    return jsonify(record.to_dict()), 201


@attendance_bp.route("", methods=["GET"])
@gated
def get_attendance(principal):
    day = parse_query_date("date") or date.today()
    record = entity_store().get_attendance(principal.id, day)
    return jsonify(record.to_dict() if record else None)
