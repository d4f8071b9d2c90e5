"""
erp/blueprints/projects/routes.py

Project and task routes.

Includes:
- Project list / detail / create
- Task list / create per project
- Task status update (any authenticated user; no transition rules)

IMPORTANT:
- Access control comes from erp.security.POLICY via @gated.
- Bodies are validated with WTForms before anything touches the store.
"""

from __future__ import annotations

from flask import Blueprint, jsonify

from ...errors import NotFound
from ...forms import ProjectForm, TaskForm, TaskStatusForm, validated
from ...security import gated
from ...store import entity_store
from ...utils import as_json_list

projects_bp = Blueprint("projects", __name__, url_prefix="/api")


# ---------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------
@projects_bp.route("/projects", methods=["GET"])
@gated
def list_projects(principal):
    return jsonify(as_json_list(entity_store().list_projects()))


@projects_bp.route("/projects", methods=["POST"])
@gated
def create_project(principal):
    form = validated(ProjectForm)

    project = entity_store().create_project(
        name=form.name.data.strip(),
        description=form.description.data.strip(),
        budget=form.budget.data,
        status=form.status.data,
        manager_id=form.managerId.data,
    )
    return jsonify(project.to_dict()), 201


@projects_bp.route("/projects/<id:project_id>", methods=["GET"])
@gated
def get_project(principal, project_id: int):
    project = entity_store().get_project(project_id)
    if project is None:
        raise NotFound("Project not found")
    return jsonify(project.to_dict())


# ---------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------
@projects_bp.route("/projects/<id:project_id>/tasks", methods=["GET"])
@gated
def list_tasks(principal, project_id: int):
    return jsonify(as_json_list(entity_store().list_tasks(project_id)))


@projects_bp.route("/projects/<id:project_id>/tasks", methods=["POST"])
@gated
def create_task(principal, project_id: int):
    """Create a task; projectId always comes from the path, never the body."""
    form = validated(TaskForm)

    task = entity_store().create_task(
        project_id=project_id,
        title=form.title.data.strip(),
        description=form.description.data.strip(),
        assignee_id=form.assigneeId.data,
        status=form.status.data,
        due_date=form.dueDate.data,
        priority=form.priority.data,
    )
    return jsonify(task.to_dict()), 201


@projects_bp.route("/tasks/<id:task_id>/status", methods=["PATCH"])
@gated
def update_task_status(principal, task_id: int):
    form = validated(TaskStatusForm)
    task = entity_store().update_task_status(task_id, form.status.data)
    return jsonify(task.to_dict())
