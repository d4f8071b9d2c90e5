"""
erp/blueprints/milestones/routes.py

Milestone routes.

completionDate is only kept for completed milestones:
- status "completed" without a date stores today
- any other status clears it (sending one is a 400)
"""

from __future__ import annotations

from flask import Blueprint, jsonify

from ...forms import MilestoneForm, MilestoneStatusForm, validated
from ...security import gated
from ...store import entity_store
from ...utils import as_json_list

milestones_bp = Blueprint("milestones", __name__, url_prefix="/api")


@milestones_bp.route("/projects/<id:project_id>/milestones", methods=["GET"])
@gated
def list_milestones(principal, project_id: int):
    return jsonify(as_json_list(entity_store().list_milestones(project_id)))


@milestones_bp.route("/projects/<id:project_id>/milestones", methods=["POST"])
@gated
def create_milestone(principal, project_id: int):
    form = validated(MilestoneForm)

    milestone = entity_store().create_milestone(
        project_id=project_id,
        title=form.title.data.strip(),
        description=form.description.data.strip(),
        due_date=form.dueDate.data,
        status=form.status.data,
        completion_date=form.completionDate.data,
    )
    return jsonify(milestone.to_dict()), 201


@milestones_bp.route("/milestones/<id:milestone_id>/status", methods=["PATCH"])
@gated
def update_milestone_status(principal, milestone_id: int):
    form = validated(MilestoneStatusForm)
    milestone = entity_store().update_milestone_status(
        milestone_id,
        form.status.data,
        form.completionDate.data,
    )
    return jsonify(milestone.to_dict())
