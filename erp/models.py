"""
Project ERP – Domain Models

Users, projects and everything hanging off a project:
- Task (assignable work item)
- BudgetItem (income/expense line, drives the budget summary)
- Milestone
- Report (narrative report with attachment list)
plus per-user daily Attendance.

IMPORTANT:
- Money columns are Numeric(10, 2) and always handled as Decimal.
- Allowed values for role/status/type columns are enforced with CHECK constraints
  and validated again server-side before insert.
- to_dict() is the public JSON shape (camelCase keys). User.to_dict() never
  includes the password hash.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum

from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash

from .extensions import db


# ---------------------------------------------------------------------
# Vocabularies
# ---------------------------------------------------------------------
class Role(str, Enum):
    """User roles used for authorization."""

    ADMIN = "admin"
    PROJECT_OFFICER = "project_officer"
    EMPLOYEE = "employee"


ROLES = tuple(r.value for r in Role)
PROJECT_STATUSES = ("planned", "active", "completed", "on_hold")
TASK_STATUSES = ("todo", "in_progress", "completed")
TASK_PRIORITIES = ("low", "medium", "high")
ATTENDANCE_STATUSES = ("present", "absent", "late")
BUDGET_ITEM_TYPES = ("income", "expense")
BUDGET_CATEGORIES = ("salary", "equipment", "travel", "supplies", "other")
MILESTONE_STATUSES = ("pending", "completed", "delayed")
REPORT_TYPES = ("progress", "financial", "milestone", "other")

# Largest value an INTEGER primary key can hold (SQLite and PostgreSQL bigint).
SQL_INT_MAX = 2**63 - 1


def _utcnow() -> datetime:
    """Naive UTC timestamp; DateTime columns are stored without a zone."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _in_check(column: str, values: tuple, name: str) -> db.CheckConstraint:
    allowed = ", ".join(f"'{v}'" for v in values)
    return db.CheckConstraint(f"{column} IN ({allowed})", name=name)


# ---------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------
def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _json_value(value):
    if isinstance(value, Decimal):
        return f"{value:.2f}"
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


class SerializerMixin:
    """
    JSON snapshot based on table columns.

    Captures scalar column values only (no relationships).
    Columns listed in __json_exclude__ never leave the model.
    """

    __json_exclude__: frozenset = frozenset()

    def to_dict(self) -> dict:
        data = {}
        for column in self.__table__.columns:
            if column.key in self.__json_exclude__:
                continue
            data[_camel(column.key)] = _json_value(getattr(self, column.key))
        return data


# ---------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------
class User(UserMixin, SerializerMixin, db.Model):
    """System login user."""

    __tablename__ = "users"
    __json_exclude__ = frozenset({"password_hash"})

    id = db.Column(db.Integer, primary_key=True)

    username = db.Column(db.String(80), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)

    role = db.Column(db.String(20), nullable=False, default=Role.EMPLOYEE.value, index=True)
    name = db.Column(db.String(120), nullable=False)

    __table_args__ = (_in_check("role", ROLES, "ck_users_role"),)

    def set_password(self, password: str):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    def __repr__(self):
        return f"<User {self.username} ({self.role})>"


# ---------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------
class Project(SerializerMixin, db.Model):
    __tablename__ = "projects"

    id = db.Column(db.Integer, primary_key=True)

    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    budget = db.Column(db.Numeric(10, 2), nullable=False, default=Decimal("0.00"))
    status = db.Column(db.String(20), nullable=False, default="planned", index=True)

    manager_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    manager = db.relationship("User", foreign_keys=[manager_id])

    tasks = db.relationship("Task", back_populates="project", lazy=True)
    budget_items = db.relationship("BudgetItem", back_populates="project", lazy=True)
    milestones = db.relationship("Milestone", back_populates="project", lazy=True)
    reports = db.relationship("Report", back_populates="project", lazy=True)

    __table_args__ = (
        db.CheckConstraint("budget >= 0", name="ck_projects_budget_non_negative"),
        _in_check("status", PROJECT_STATUSES, "ck_projects_status"),
    )

    def __repr__(self):
        return f"<Project {self.name}>"


class Task(SerializerMixin, db.Model):
    __tablename__ = "tasks"

    id = db.Column(db.Integer, primary_key=True)

    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)

    project_id = db.Column(
        db.Integer,
        db.ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    assignee_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    status = db.Column(db.String(20), nullable=False, default="todo", index=True)
    due_date = db.Column(db.Date, nullable=True)
    priority = db.Column(db.String(10), nullable=False, default="medium")

    project = db.relationship("Project", back_populates="tasks")
    assignee = db.relationship("User", foreign_keys=[assignee_id], backref=db.backref("assigned_tasks", lazy=True))

    __table_args__ = (
        _in_check("status", TASK_STATUSES, "ck_tasks_status"),
        _in_check("priority", TASK_PRIORITIES, "ck_tasks_priority"),
    )


# ---------------------------------------------------------------------
# Attendance
# ---------------------------------------------------------------------
class Attendance(SerializerMixin, db.Model):
    """One mark per user per calendar day."""

    __tablename__ = "attendance"

    id = db.Column(db.Integer, primary_key=True)

    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    date = db.Column(db.Date, nullable=False, index=True)
    status = db.Column(db.String(10), nullable=False)

    user = db.relationship("User", backref=db.backref("attendance_records", lazy=True))

    __table_args__ = (
        db.UniqueConstraint("user_id", "date", name="uq_attendance_user_date"),
        _in_check("status", ATTENDANCE_STATUSES, "ck_attendance_status"),
    )


# ---------------------------------------------------------------------
# Budget, milestones, reports
# ---------------------------------------------------------------------
class BudgetItem(SerializerMixin, db.Model):
    __tablename__ = "budget_items"

    id = db.Column(db.Integer, primary_key=True)

    project_id = db.Column(
        db.Integer,
        db.ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    description = db.Column(db.Text, nullable=False)
    amount = db.Column(db.Numeric(10, 2), nullable=False)
    type = db.Column(db.String(10), nullable=False, index=True)
    category = db.Column(db.String(20), nullable=False)
    date = db.Column(db.Date, nullable=False, index=True)

    created_by = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    project = db.relationship("Project", back_populates="budget_items")
    author = db.relationship("User", foreign_keys=[created_by])

    __table_args__ = (
        db.CheckConstraint("amount >= 0", name="ck_budget_items_amount_non_negative"),
        _in_check("type", BUDGET_ITEM_TYPES, "ck_budget_items_type"),
        _in_check("category", BUDGET_CATEGORIES, "ck_budget_items_category"),
    )


class Milestone(SerializerMixin, db.Model):
    __tablename__ = "milestones"

    id = db.Column(db.Integer, primary_key=True)

    project_id = db.Column(
        db.Integer,
        db.ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    due_date = db.Column(db.Date, nullable=False)
    status = db.Column(db.String(20), nullable=False, default="pending", index=True)
    # Only set while status == "completed"
    completion_date = db.Column(db.Date, nullable=True)

    project = db.relationship("Project", back_populates="milestones")

    __table_args__ = (_in_check("status", MILESTONE_STATUSES, "ck_milestones_status"),)


class Report(SerializerMixin, db.Model):
    __tablename__ = "reports"

    id = db.Column(db.Integer, primary_key=True)

    project_id = db.Column(
        db.Integer,
        db.ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    title = db.Column(db.String(255), nullable=False)
    content = db.Column(db.Text, nullable=False)
    type = db.Column(db.String(20), nullable=False)

    created_at = db.Column(db.DateTime, default=_utcnow, nullable=False, index=True)
    created_by = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    attachments = db.Column(db.JSON, nullable=False, default=list)

    project = db.relationship("Project", back_populates="reports")
    author = db.relationship("User", foreign_keys=[created_by])

    __table_args__ = (_in_check("type", REPORT_TYPES, "ck_reports_type"),)
