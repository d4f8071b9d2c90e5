"""
erp/blueprints/budget/routes.py

Budget item routes and the per-project budget summary.

Query parameters (list and summary):
- startDate / endDate: ISO dates, inclusive. Either may be given alone.

The summary is {"allocated": "<income total>", "spent": "<expense total>"}
with amounts as two-decimal strings.
"""

from __future__ import annotations

from flask import Blueprint, jsonify

from ...forms import BudgetItemForm, validated
from ...security import gated
from ...store import entity_store
from ...utils import as_json_list, date_window

budget_bp = Blueprint("budget", __name__, url_prefix="/api/projects/<id:project_id>/budget")


@budget_bp.route("", methods=["GET"])
@gated
def list_budget_items(principal, project_id: int):
    start, end = date_window()
    return jsonify(as_json_list(entity_store().list_budget_items(project_id, start, end)))


@budget_bp.route("", methods=["POST"])
@gated
def create_budget_item(principal, project_id: int):
    """Add an income/expense line; createdBy is the acting principal."""
    form = validated(BudgetItemForm)

    item = entity_store().create_budget_item(
        project_id=project_id,
        created_by=principal.id,
        description=form.description.data.strip(),
        amount=form.amount.data,
        type=form.type.data,
        category=form.category.data,
        date=form.date.data,
    )
    return jsonify(item.to_dict()), 201


@budget_bp.route("/summary", methods=["GET"])
@gated
def budget_summary(principal, project_id: int):
    start, end = date_window()
    return jsonify(entity_store().budget_summary(project_id, start, end).to_dict())
