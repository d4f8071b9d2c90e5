"""
erp/blueprints/reports/routes.py

Narrative project reports. createdAt and createdBy are server-set.
"""

from __future__ import annotations

from flask import Blueprint, jsonify

from ...errors import NotFound
from ...forms import ReportForm, validated
from ...security import gated
from ...store import entity_store
from ...utils import as_json_list

reports_bp = Blueprint("reports", __name__, url_prefix="/api")


@reports_bp.route("/projects/<id:project_id>/reports", methods=["GET"])
@gated
def list_reports(principal, project_id: int):
    return jsonify(as_json_list(entity_store().list_reports(project_id)))


@reports_bp.route("/projects/<id:project_id>/reports", methods=["POST"])
@gated
def create_report(principal, project_id: int):
    form = validated(ReportForm)

    report = entity_store().create_report(
        project_id=project_id,
        created_by=principal.id,
        title=form.title.data.strip(),
        content=form.content.data,
        type=form.type.data,
        attachments=form.attachments.data,
    )
    return jsonify(report.to_dict()), 201


@reports_bp.route("/reports/<id:report_id>", methods=["GET"])
@gated
def get_report(principal, report_id: int):
    report = entity_store().get_report(report_id)
    if report is None:
        raise NotFound("Report not found")
    return jsonify(report.to_dict())
